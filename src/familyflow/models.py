"""
Data models for family tree layout.

This module contains the dataclasses and enums that describe the graph handed
to the layout engine by the editor: people (nodes), relationships (edges), the
flow direction and the per-node outcome of a layout run.

Classes:
    Direction: Flow direction, top-to-bottom (TB) or left-to-right (LR).
    EdgeKind: Hierarchy (parent -> child) or pairing (spouse/partner) edge.
    HandleSide: Side of a node box where connections attach.
    Placement: Which pipeline path placed a node.
    Position: Top-left corner of a node box.
    Node: A person in the tree with an opaque payload.
    Edge: A relationship between two people.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class Direction(Enum):
    """Flow direction of the tree."""

    VERTICAL = "TB"
    HORIZONTAL = "LR"

    @classmethod
    def parse(cls, value: Union["Direction", str]) -> "Direction":
        """
        Resolve a direction from an enum member or a string.

        Accepts "TB"/"LR" as well as "vertical"/"horizontal", in any case.

        Raises:
            ValueError: If the value names no known direction.
        """
        if isinstance(value, cls):
            return value

        text = str(value).strip().upper()
        if text in ("TB", "VERTICAL"):
            return cls.VERTICAL
        if text in ("LR", "HORIZONTAL"):
            return cls.HORIZONTAL

        raise ValueError(
            "direction must be 'TB' (top-to-bottom) or 'LR' (left-to-right), "
            f"got {value!r}"
        )

    @property
    def is_horizontal(self) -> bool:
        return self is Direction.HORIZONTAL


class EdgeKind(Enum):
    """Relationship kind carried by an edge."""

    HIERARCHY = "hierarchy"  # parent -> child
    PAIRING = "pairing"  # spouse/partner, source is the anchor


class HandleSide(Enum):
    """Side of a node where edges attach."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


class Placement(Enum):
    """The three mutually exclusive ways a node can be placed."""

    HIERARCHY = "hierarchy"
    SATELLITE = "satellite"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class Position:
    """Top-left corner of a node box."""

    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)


ORIGIN = Position(0.0, 0.0)


@dataclass
class Node:
    """
    A person in the family tree.

    Only ``position`` and the two handle sides are ever written by the layout
    engine. Everything else belongs to the editor and is carried through
    untouched.

    Attributes:
        id: Identifier, unique within a tree.
        data: Opaque payload (name, details, spouseLink, image reference...).
        position: Top-left corner of the node box.
        type: Node renderer type used by the editor.
        source_position: Side where outgoing edges attach.
        target_position: Side where incoming edges attach.
        extra: Any other document fields, preserved as-is.
    """

    id: str
    data: Dict[str, Any] = field(default_factory=dict)
    position: Position = ORIGIN
    type: str = "familyNode"
    source_position: Optional[HandleSide] = None
    target_position: Optional[HandleSide] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return str(self.data.get("name", ""))


@dataclass
class Edge:
    """
    A relationship between two people.

    For hierarchy edges the source is the parent. For pairing edges the source
    is the anchor partner and the target is positioned next to it.

    Attributes:
        id: Edge identifier.
        source: Source node id.
        target: Target node id.
        kind: Hierarchy or pairing.
        metadata: Presentation data (type, animated, style, label...).
    """

    id: str
    source: str
    target: str
    kind: EdgeKind = EdgeKind.HIERARCHY
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Accept "hierarchy"/"pairing" as well as members
        self.kind = EdgeKind(self.kind)

    @property
    def is_pairing(self) -> bool:
        return self.kind is EdgeKind.PAIRING
