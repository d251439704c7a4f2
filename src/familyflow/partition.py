"""
Graph partitioning for family tree layout.

Splits the edge set into hierarchy edges (parent -> child), which are ranked
by the layered layout, and pairing edges (spouse/partner), whose target is
placed next to its source instead of being ranked.

The recorded source of a pairing edge is always the anchor and the recorded
target always the satellite. Malformed input is filtered, never rejected.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .models import Edge, EdgeKind, Node

logger = logging.getLogger(__name__)


@dataclass
class Partition:
    """
    Result of splitting a family graph for layout.

    Attributes:
        hierarchy_nodes: Ids of nodes placed by the hierarchy engine, in
            input order.
        hierarchy_edges: (parent, child) pairs among hierarchy nodes, in
            input order.
        anchor_of: Satellite id -> anchor id, in the order the pairings were
            accepted.
        dropped_edges: Ids of edges left out of the hierarchy subgraph.
    """

    hierarchy_nodes: List[str] = field(default_factory=list)
    hierarchy_edges: List[Tuple[str, str]] = field(default_factory=list)
    anchor_of: Dict[str, str] = field(default_factory=dict)
    dropped_edges: List[str] = field(default_factory=list)

    def is_satellite(self, node_id: str) -> bool:
        return node_id in self.anchor_of

    def satellites_of(self, anchor_id: str) -> List[str]:
        return [sat for sat, anchor in self.anchor_of.items() if anchor == anchor_id]


def _anchor_root(anchor_of: Dict[str, str], node_id: str) -> str:
    """Follow the anchor chain from node_id, returning the top anchor."""
    seen = set()
    current = node_id
    while current in anchor_of and current not in seen:
        seen.add(current)
        current = anchor_of[current]
    return current


def partition_graph(nodes: Sequence[Node], edges: Sequence[Edge]) -> Partition:
    """
    Partition nodes and edges into the hierarchy subgraph and satellites.

    Args:
        nodes: All nodes of the tree.
        edges: All edges of the tree, hierarchy and pairing.

    Returns:
        Partition describing what the hierarchy engine should rank and which
        nodes are placed relative to an anchor.
    """
    node_ids: List[str] = []
    known = set()
    for node in nodes:
        if node.id not in known:
            known.add(node.id)
            node_ids.append(node.id)

    result = Partition()

    for edge in edges:
        if edge.kind is not EdgeKind.PAIRING:
            continue

        if edge.target not in known:
            logger.debug(
                "Ignoring pairing edge %s: unknown target %r", edge.id, edge.target
            )
            continue

        if edge.source == edge.target:
            logger.debug("Ignoring self pairing edge %s", edge.id)
            continue

        if edge.target in result.anchor_of:
            # First match wins for a node paired more than once
            logger.debug(
                "Node %r already paired with %r, ignoring edge %s",
                edge.target,
                result.anchor_of[edge.target],
                edge.id,
            )
            continue

        if _anchor_root(result.anchor_of, edge.source) == edge.target:
            logger.debug(
                "Ignoring pairing edge %s: %r would anchor its own anchor",
                edge.id,
                edge.target,
            )
            continue

        if edge.source not in known:
            logger.debug(
                "Pairing edge %s has unknown anchor %r, %r will use fallback",
                edge.id,
                edge.source,
                edge.target,
            )

        result.anchor_of[edge.target] = edge.source

    result.hierarchy_nodes = [n for n in node_ids if n not in result.anchor_of]
    members = set(result.hierarchy_nodes)

    for edge in edges:
        if edge.kind is EdgeKind.PAIRING:
            continue
        if edge.source in members and edge.target in members:
            result.hierarchy_edges.append((edge.source, edge.target))
        else:
            result.dropped_edges.append(edge.id)

    if result.dropped_edges:
        logger.debug(
            "Dropped %d hierarchy edge(s) with a satellite or unknown endpoint",
            len(result.dropped_edges),
        )

    return result
