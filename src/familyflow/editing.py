"""
In-memory family tree editing.

Mirrors the structural actions of the editor: adding a parent, child or
spouse to a person, connecting and removing people, and re-running the
layout after every structural change.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from .config import LayoutConfig
from .document import SPOUSE_STROKE, FamilyDocument
from .engine import FamilyTreeLayout, TreeLayoutResult
from .models import Direction, Edge, EdgeKind, Node

logger = logging.getLogger(__name__)

FIRST_GENERATED_ID = 10
EDIT_HINT = "Double-click to edit"

HIERARCHY_EDGE_STYLE: Dict[str, Any] = {
    "type": "smoothstep",
    "animated": True,
    "style": {"strokeWidth": 2},
}

PAIRING_EDGE_STYLE: Dict[str, Any] = {
    "type": "straight",
    "animated": False,
    "style": {
        "strokeWidth": 3,
        "stroke": SPOUSE_STROKE,
        "strokeDasharray": "5,5",
    },
    "label": "♥",
}


class EditError(Exception):
    """Raised when an edit refers to missing people or breaks a rule."""

    pass


def edge_metadata(kind: EdgeKind) -> Dict[str, Any]:
    """Default presentation metadata for a new edge."""
    if kind is EdgeKind.PAIRING:
        return copy.deepcopy(PAIRING_EDGE_STYLE)
    return copy.deepcopy(HIERARCHY_EDGE_STYLE)


class FamilyTree:
    """
    A family tree being edited.

    Every structural change (adding or removing people or relationships,
    changing direction) re-runs the layout, so ``nodes`` always holds
    positioned nodes.

    Example:
        >>> tree = FamilyTree()
        >>> root = tree.add_person("Ada")
        >>> child = tree.add_child(root.id)
        >>> spouse = tree.add_spouse(root.id)
    """

    def __init__(
        self,
        nodes: Sequence[Node] = (),
        edges: Sequence[Edge] = (),
        direction: Union[Direction, str] = Direction.VERTICAL,
        config: Optional[LayoutConfig] = None,
        name: Optional[str] = None,
        family_id: Optional[str] = None,
    ):
        self.engine = FamilyTreeLayout(direction=direction, config=config)
        self.direction = self.engine.direction
        self.name = name
        self.family_id = family_id
        self.nodes: List[Node] = list(nodes)
        self.edges: List[Edge] = list(edges)
        self.next_id = FIRST_GENERATED_ID
        self.last_result: Optional[TreeLayoutResult] = None
        self.relayout()

    @classmethod
    def from_document(
        cls,
        document: FamilyDocument,
        direction: Union[Direction, str] = Direction.VERTICAL,
        config: Optional[LayoutConfig] = None,
    ) -> "FamilyTree":
        return cls(
            document.nodes,
            document.edges,
            direction=direction,
            config=config,
            name=document.name,
            family_id=document.id,
        )

    def to_document(self) -> FamilyDocument:
        return FamilyDocument(
            nodes=list(self.nodes),
            edges=list(self.edges),
            id=self.family_id,
            name=self.name,
        )

    # Lookups

    def get_node(self, node_id: str) -> Node:
        """
        Return the node with the given id.

        Raises:
            EditError: If no such node exists.
        """
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise EditError(f"Unknown person {node_id!r}")

    def has_node(self, node_id: str) -> bool:
        return any(node.id == node_id for node in self.nodes)

    def spouses_of(self, node_id: str) -> List[str]:
        """Ids of everyone linked to node_id by a pairing edge."""
        result = []
        for edge in self.edges:
            if not edge.is_pairing:
                continue
            if edge.source == node_id:
                result.append(edge.target)
            elif edge.target == node_id:
                result.append(edge.source)
        return result

    def parents_of(self, node_id: str) -> List[str]:
        return [
            e.source
            for e in self.edges
            if e.kind is EdgeKind.HIERARCHY and e.target == node_id
        ]

    def children_of(self, node_id: str) -> List[str]:
        return [
            e.target
            for e in self.edges
            if e.kind is EdgeKind.HIERARCHY and e.source == node_id
        ]

    # Structural edits

    def add_person(
        self, name: str = "New Person", details: str = EDIT_HINT, **data: Any
    ) -> Node:
        """Add an unconnected person."""
        node = self._new_person("person", name, details, **data)
        self.nodes.append(node)
        self.relayout()
        return self.get_node(node.id)

    def add_parent(self, node_id: str, name: str = "New Parent") -> Node:
        """Add a new parent of node_id."""
        self.get_node(node_id)
        parent = self._new_person("parent", name)
        self._append(parent, parent.id, node_id, EdgeKind.HIERARCHY)
        return self.get_node(parent.id)

    def add_child(self, node_id: str, name: str = "New Child") -> Node:
        """Add a new child of node_id."""
        self.get_node(node_id)
        child = self._new_person("child", name)
        self._append(child, node_id, child.id, EdgeKind.HIERARCHY)
        return self.get_node(child.id)

    def add_spouse(self, node_id: str, name: str = "Spouse") -> Node:
        """
        Add a new spouse of node_id.

        The existing person is the anchor of the pairing, so the spouse is
        placed next to them.
        """
        self.get_node(node_id)
        spouse = self._new_person("spouse", name)
        self._append(spouse, node_id, spouse.id, EdgeKind.PAIRING)
        return self.get_node(spouse.id)

    def connect(
        self,
        source: str,
        target: str,
        kind: Union[EdgeKind, str] = EdgeKind.HIERARCHY,
    ) -> Edge:
        """
        Connect two existing people.

        Raises:
            EditError: If either person is unknown, the kind is not an edge
                kind or the edge already exists.
        """
        self.get_node(source)
        self.get_node(target)
        try:
            kind = EdgeKind(kind)
        except ValueError as e:
            raise EditError(f"Unknown edge kind {kind!r}") from e

        edge_id = f"e-{source}-{target}"
        if any(edge.id == edge_id for edge in self.edges):
            raise EditError(f"Edge {edge_id!r} already exists")

        edge = Edge(
            id=edge_id,
            source=source,
            target=target,
            kind=kind,
            metadata=edge_metadata(kind),
        )
        self.edges.append(edge)
        self.relayout()
        return edge

    def link_spouse(self, source: str, target: str) -> Edge:
        """
        Link two existing people as spouses.

        Raises:
            EditError: If they are the same person or either already has a
                spouse.
        """
        if source == target:
            raise EditError("A person cannot be their own spouse")

        for person in (source, target):
            self.get_node(person)
            if self.spouses_of(person):
                label = self.get_node(person).name or person
                raise EditError(f"{label!r} already has a spouse")

        return self.connect(source, target, EdgeKind.PAIRING)

    def update_node(self, node_id: str, **data: Any) -> Node:
        """Merge payload fields into a person. Does not re-run the layout."""
        for i, node in enumerate(self.nodes):
            if node.id == node_id:
                updated = copy.copy(node)
                updated.data = {**node.data, **data}
                self.nodes[i] = updated
                return updated
        raise EditError(f"Unknown person {node_id!r}")

    def remove_node(self, node_id: str) -> None:
        """Remove a person and every relationship they are part of."""
        self.get_node(node_id)
        self.nodes = [n for n in self.nodes if n.id != node_id]
        removed = [e.id for e in self.edges if node_id in (e.source, e.target)]
        self.edges = [e for e in self.edges if node_id not in (e.source, e.target)]
        logger.debug("Removed %r and %d edge(s)", node_id, len(removed))
        self.relayout()

    def remove_edge(self, edge_id: str) -> None:
        """
        Remove a single relationship.

        Raises:
            EditError: If no edge has that id.
        """
        remaining = [e for e in self.edges if e.id != edge_id]
        if len(remaining) == len(self.edges):
            raise EditError(f"Unknown edge {edge_id!r}")
        self.edges = remaining
        self.relayout()

    def relayout(
        self, direction: Union[Direction, str, None] = None
    ) -> TreeLayoutResult:
        """
        Re-run the layout, optionally switching direction.

        Returns:
            The full layout result, also kept as ``last_result``.
        """
        if direction is not None:
            self.direction = Direction.parse(direction)

        result = self.engine.compute(self.nodes, self.edges, self.direction)
        self.nodes = result.nodes
        self.last_result = result
        return result

    # Internals

    def _append(self, node: Node, source: str, target: str, kind: EdgeKind) -> None:
        # Start the new person on top of the relative it was added to
        relative = self.get_node(target if node.id == source else source)
        node.position = relative.position
        self.nodes.append(node)
        self.edges.append(
            Edge(
                id=f"e-{source}-{target}",
                source=source,
                target=target,
                kind=kind,
                metadata=edge_metadata(kind),
            )
        )
        self.relayout()

    def _new_person(
        self, prefix: str, name: str, details: str = EDIT_HINT, **data: Any
    ) -> Node:
        return Node(
            id=self._generate_id(prefix),
            data={"name": name, "details": details, **data},
        )

    def _generate_id(self, prefix: str) -> str:
        while True:
            candidate = f"{prefix}-{self.next_id}"
            self.next_id += 1
            if not self.has_node(candidate):
                return candidate
