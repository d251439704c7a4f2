"""
Layered (Sugiyama-style) layout of the hierarchy subgraph using networkx.

Uses networkx for:
- Graph representation
- Topological sorting for rank assignment

Pipeline:
1. Cycle removal: DFS back edges are ignored for ranking
2. Rank assignment: longest path from the sources
3. Ordering within ranks: barycenter sweeps, alternating down and up

Every call builds and discards its own graph, so one engine instance can be
shared freely between callers.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set, Tuple

import networkx as nx

from .config import LayoutConfig

logger = logging.getLogger(__name__)


@dataclass
class NodeLayout:
    """Represents a node's layout information."""

    id: str
    rank: int = 0
    order: int = 0  # Position within rank
    x: float = 0.0  # Top-left corner, filled in by positioning
    y: float = 0.0


@dataclass
class LayoutResult:
    """Result of the layered layout."""

    nodes: Dict[str, NodeLayout] = field(default_factory=dict)
    layers: List[List[str]] = field(default_factory=list)
    edges: List[Tuple[str, str]] = field(default_factory=list)
    back_edges: Set[Tuple[str, str]] = field(default_factory=set)
    has_cycles: bool = False

    def rank_of(self, node_id: str) -> int:
        return self.nodes[node_id].rank


def build_graph(
    node_ids: Iterable[str], edges: Iterable[Tuple[str, str]]
) -> nx.DiGraph:
    """Build a directed graph keeping the insertion order of nodes and edges."""
    graph = nx.DiGraph()
    graph.add_nodes_from(node_ids)
    graph.add_edges_from(edges)
    return graph


def find_back_edges(graph: nx.DiGraph) -> Set[Tuple[str, str]]:
    """
    Identify edges that close a cycle.

    Runs a DFS from every source (in insertion order), then from any node
    still unvisited. An edge to a node currently on the DFS stack is a back
    edge. Iterative, so deep generations cannot exhaust the recursion limit.
    """
    back_edges: Set[Tuple[str, str]] = set()
    visited: Set[str] = set()
    on_stack: Set[str] = set()

    ordered = list(graph.nodes())
    roots = [n for n in ordered if graph.in_degree(n) == 0] + ordered

    for root in roots:
        if root in visited:
            continue

        visited.add(root)
        on_stack.add(root)
        stack = [(root, iter(list(graph.successors(root))))]

        while stack:
            node, successors = stack[-1]
            for successor in successors:
                if successor not in visited:
                    visited.add(successor)
                    on_stack.add(successor)
                    stack.append((successor, iter(list(graph.successors(successor)))))
                    break
                if successor in on_stack:
                    back_edges.add((node, successor))
            else:
                stack.pop()
                on_stack.discard(node)

    return back_edges


def count_crossings(layers: List[List[str]], graph: nx.DiGraph) -> int:
    """Count edge crossings between adjacent layers."""
    crossings = 0
    for upper, lower in zip(layers, layers[1:]):
        upper_pos = {n: i for i, n in enumerate(upper)}
        lower_pos = {n: i for i, n in enumerate(lower)}
        segments = [
            (upper_pos[u], lower_pos[v])
            for u in upper
            for v in graph.successors(u)
            if v in lower_pos
        ]
        for i, (a1, b1) in enumerate(segments):
            for a2, b2 in segments[i + 1 :]:
                if (a1 - a2) * (b1 - b2) < 0:
                    crossings += 1
    return crossings


class HierarchyLayout:
    """
    Rank and order the hierarchy subgraph.

    For DAGs the ranks follow the longest path from a source. For cyclic
    graphs back edges are found first and left out of ranking.
    """

    def __init__(self, sweeps: int = LayoutConfig.sweeps):
        self.sweeps = sweeps

    def layout(
        self,
        node_ids: Sequence[str],
        edges: Sequence[Tuple[str, str]],
    ) -> LayoutResult:
        """
        Compute ranks and orders.

        Args:
            node_ids: All nodes to place, in input order. Isolated nodes are
                placed in rank 0.
            edges: List of (parent, child) tuples between those nodes

        Returns:
            LayoutResult with rank and order for every node
        """
        graph = build_graph(node_ids, edges)
        index = {node: i for i, node in enumerate(graph.nodes())}

        back_edges = find_back_edges(graph)
        if back_edges:
            logger.debug("Ignoring %d back edge(s) for ranking", len(back_edges))

        working_graph = graph.copy()
        working_graph.remove_edges_from(back_edges)

        layers = self._assign_ranks(working_graph, index)
        layers = self._order_layers(layers, working_graph)

        result = LayoutResult()
        result.has_cycles = bool(back_edges)
        result.back_edges = back_edges
        result.layers = layers
        result.edges = list(edges)

        for rank, layer in enumerate(layers):
            for order, node_id in enumerate(layer):
                result.nodes[node_id] = NodeLayout(id=node_id, rank=rank, order=order)

        return result

    def _assign_ranks(
        self, graph: nx.DiGraph, index: Dict[str, int]
    ) -> List[List[str]]:
        """
        Assign nodes to ranks using the longest path method.
        """
        node_rank: Dict[str, int] = {}

        try:
            topo_order = list(
                nx.lexicographical_topological_sort(graph, key=index.__getitem__)
            )
        except nx.NetworkXUnfeasible:
            # Still has cycles somehow, fall back to input order
            topo_order = list(graph.nodes())

        for node in topo_order:
            predecessors = list(graph.predecessors(node))
            if not predecessors:
                node_rank[node] = 0
            else:
                node_rank[node] = max(node_rank.get(p, 0) for p in predecessors) + 1

        if not node_rank:
            return []

        layers: List[List[str]] = [[] for _ in range(max(node_rank.values()) + 1)]
        for node in sorted(node_rank, key=index.__getitem__):
            layers[node_rank[node]].append(node)

        return layers

    def _order_layers(
        self, layers: List[List[str]], graph: nx.DiGraph
    ) -> List[List[str]]:
        """
        Order nodes within each rank to reduce edge crossings.
        Uses the barycenter heuristic for a bounded number of sweeps.
        """
        if len(layers) <= 1:
            return layers

        for _ in range(self.sweeps):
            # Down sweep
            for i in range(1, len(layers)):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i - 1], graph, use_predecessors=True
                )

            # Up sweep
            for i in range(len(layers) - 2, -1, -1):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i + 1], graph, use_predecessors=False
                )

        return layers

    def _order_layer_by_barycenter(
        self,
        layer: List[str],
        ref_layer: List[str],
        graph: nx.DiGraph,
        use_predecessors: bool,
    ) -> List[str]:
        """
        Order nodes by barycenter (average position of connected nodes).
        Ties keep the current order, so the result is deterministic.
        """
        ref_positions = {node: i for i, node in enumerate(ref_layer)}
        current = {node: i for i, node in enumerate(layer)}

        def barycenter(node: str) -> float:
            if use_predecessors:
                neighbors = graph.predecessors(node)
            else:
                neighbors = graph.successors(node)

            positions = [ref_positions[n] for n in neighbors if n in ref_positions]

            if not positions:
                # Keep original order for nodes with no connections to ref layer
                return float(current[node])

            return sum(positions) / len(positions)

        return sorted(layer, key=lambda node: (barycenter(node), current[node]))
