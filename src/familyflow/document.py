"""
Family document codec.

Reads and writes the node/edge documents the editor stores per family, either
as a bare canvas ``{"nodes": [...], "edges": [...]}`` or as a stored family
record ``{"id": ..., "name": ..., "data": {"nodes": [...], "edges": [...]}}``.

Spouse edges are recognised by an explicit ``kind``, by the editor's spouse
stroke colour or by a ``relationshipType`` of ``"spouse"``.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .models import Edge, EdgeKind, HandleSide, Node, Position

logger = logging.getLogger(__name__)

SPOUSE_STROKE = "#e91e63"

_NODE_KEYS = ("id", "type", "data", "position", "sourcePosition", "targetPosition")
_EDGE_KEYS = ("id", "source", "target", "kind")


class DocumentError(Exception):
    """Raised when a family document cannot be read."""

    pass


@dataclass
class FamilyDocument:
    """A family tree as stored by the editor."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    id: Optional[str] = None
    name: Optional[str] = None


def classify_edge(raw: Mapping[str, Any]) -> EdgeKind:
    """
    Work out the kind of a raw edge.

    Checks, in order: an explicit "kind" (top level or under "data"), the
    spouse stroke colour, and a "relationshipType" of "spouse".

    Raises:
        DocumentError: If an explicit kind is not a known edge kind.
    """
    data = raw.get("data") if isinstance(raw.get("data"), Mapping) else {}
    explicit = raw.get("kind", data.get("kind"))
    if explicit is not None:
        try:
            return EdgeKind(str(explicit).lower())
        except ValueError as e:
            raise DocumentError(
                f"Unknown edge kind {explicit!r} on edge {raw.get('id')!r}"
            ) from e

    style = raw.get("style")
    if isinstance(style, Mapping):
        if str(style.get("stroke", "")).lower() == SPOUSE_STROKE:
            return EdgeKind.PAIRING

    if str(raw.get("relationshipType", "")).lower() == "spouse":
        return EdgeKind.PAIRING

    return EdgeKind.HIERARCHY


def _handle(value: Any) -> Optional[HandleSide]:
    if value is None:
        return None
    try:
        return HandleSide(value)
    except ValueError:
        logger.debug("Ignoring unknown handle side %r", value)
        return None


def _parse_position(raw: Any, node_id: str) -> Position:
    if raw is None:
        return Position()
    if not isinstance(raw, Mapping):
        raise DocumentError(f"Node {node_id!r}: position must be an object")
    try:
        return Position(float(raw.get("x", 0)), float(raw.get("y", 0)))
    except (TypeError, ValueError) as e:
        raise DocumentError(
            f"Node {node_id!r}: position coordinates must be numbers"
        ) from e


def parse_node(raw: Any) -> Node:
    """Build a Node from its document form."""
    if not isinstance(raw, Mapping) or "id" not in raw:
        raise DocumentError(f"Node must be an object with an id, got {raw!r}")

    node_id = str(raw["id"])
    data = raw.get("data")
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise DocumentError(f"Node {node_id!r}: data must be an object")

    return Node(
        id=node_id,
        data=dict(data),
        position=_parse_position(raw.get("position"), node_id),
        type=raw.get("type", "familyNode"),
        source_position=_handle(raw.get("sourcePosition")),
        target_position=_handle(raw.get("targetPosition")),
        extra={k: v for k, v in raw.items() if k not in _NODE_KEYS},
    )


def parse_edge(raw: Any) -> Edge:
    """Build an Edge from its document form."""
    if not isinstance(raw, Mapping):
        raise DocumentError(f"Edge must be an object, got {raw!r}")

    for key in ("source", "target"):
        if raw.get(key) is None:
            raise DocumentError(f"Edge {raw.get('id')!r} has no {key}")

    source = str(raw["source"])
    target = str(raw["target"])
    edge_id = str(raw.get("id") or f"e-{source}-{target}")

    return Edge(
        id=edge_id,
        source=source,
        target=target,
        kind=classify_edge(raw),
        metadata={k: v for k, v in raw.items() if k not in _EDGE_KEYS},
    )


def parse_document(source: Union[str, bytes, Mapping[str, Any]]) -> FamilyDocument:
    """
    Parse a family document.

    Args:
        source: JSON text or an already decoded mapping.

    Returns:
        FamilyDocument

    Raises:
        DocumentError: If the input is not valid JSON or lacks the node/edge
            structure.
    """
    if isinstance(source, (str, bytes)):
        try:
            payload = json.loads(source)
        except json.JSONDecodeError as e:
            raise DocumentError(f"Invalid JSON: {e}") from e
    else:
        payload = source

    if not isinstance(payload, Mapping):
        raise DocumentError("Family document must be a JSON object")

    canvas = payload.get("data") if "data" in payload else payload
    if not isinstance(canvas, Mapping):
        raise DocumentError("Family document 'data' must be an object")

    raw_nodes = canvas.get("nodes", [])
    raw_edges = canvas.get("edges", [])
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise DocumentError("'nodes' and 'edges' must be lists")

    document = FamilyDocument(
        nodes=[parse_node(raw) for raw in raw_nodes],
        edges=[parse_edge(raw) for raw in raw_edges],
    )

    if "data" in payload:
        if payload.get("id") is not None:
            document.id = str(payload["id"])
        document.name = payload.get("name")

    return document


def node_to_dict(node: Node) -> Dict[str, Any]:
    """Document form of a node."""
    result: Dict[str, Any] = {
        "id": node.id,
        "type": node.type,
        "data": dict(node.data),
        "position": {"x": node.position.x, "y": node.position.y},
    }
    if node.source_position is not None:
        result["sourcePosition"] = node.source_position.value
    if node.target_position is not None:
        result["targetPosition"] = node.target_position.value
    result.update(node.extra)
    return result


def edge_to_dict(edge: Edge) -> Dict[str, Any]:
    """Document form of an edge."""
    result: Dict[str, Any] = {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "kind": edge.kind.value,
    }
    result.update(edge.metadata)
    return result


def document_to_dict(document: FamilyDocument) -> Dict[str, Any]:
    """
    Document form of a family.

    Produces a stored family record when the document has an id or a name,
    and a bare canvas otherwise.
    """
    canvas = {
        "nodes": [node_to_dict(n) for n in document.nodes],
        "edges": [edge_to_dict(e) for e in document.edges],
    }
    if document.id is None and document.name is None:
        return canvas
    return {"id": document.id, "name": document.name, "data": canvas}


def dumps_document(document: FamilyDocument, indent: Optional[int] = 2) -> str:
    return json.dumps(document_to_dict(document), indent=indent, ensure_ascii=False)


def load_document(filename: Union[str, Path]) -> FamilyDocument:
    """Read a family document from a JSON file."""
    return parse_document(Path(filename).read_text(encoding="utf-8"))


def save_document(document: FamilyDocument, filename: Union[str, Path]) -> None:
    """Write a family document to a JSON file."""
    Path(filename).write_text(dumps_document(document), encoding="utf-8")
