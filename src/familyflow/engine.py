"""
Family tree layout engine.

Combines partitioning, layered layout, coordinate assignment and satellite
placement into a single pure function from (nodes, edges, direction) to
positioned nodes.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .config import LayoutConfig
from .layout import HierarchyLayout, LayoutResult, build_graph, count_crossings
from .models import ORIGIN, Direction, Edge, Node, Placement, Position
from .partition import Partition, partition_graph
from .positioning import PositionCalculator, handle_sides
from .satellites import chain_depths, place_satellites
from .tracer import LayoutTrace, NodePlacement

logger = logging.getLogger(__name__)


@dataclass
class TreeLayoutResult:
    """
    Everything computed by one layout run.

    Attributes:
        nodes: Copies of the input nodes with position and handle sides set.
        edges: The input edges, unchanged.
        positions: Node id -> top-left position.
        placements: Node id -> placement path.
        direction: Direction used.
        partition: Output of the partitioning stage.
        hierarchy: Ranks and orders of hierarchy nodes.
        trace: Pipeline trace, only when debug was requested.
    """

    nodes: List[Node]
    edges: List[Edge]
    positions: Dict[str, Position] = field(default_factory=dict)
    placements: Dict[str, Placement] = field(default_factory=dict)
    direction: Direction = Direction.VERTICAL
    partition: Partition = field(default_factory=Partition)
    hierarchy: LayoutResult = field(default_factory=LayoutResult)
    trace: Optional[LayoutTrace] = None

    def rank_of(self, node_id: str) -> Optional[int]:
        """Rank of a hierarchy node, None for satellites and fallbacks."""
        node_layout = self.hierarchy.nodes.get(node_id)
        return node_layout.rank if node_layout is not None else None


class FamilyTreeLayout:
    """
    Lay out family trees.

    Example:
        >>> engine = FamilyTreeLayout(direction="TB")
        >>> nodes, edges = engine.layout(nodes, edges)

    The engine holds configuration only. Every call builds its own working
    structures, so one instance can serve any number of callers.
    """

    def __init__(
        self,
        direction: Union[Direction, str] = Direction.VERTICAL,
        config: Optional[LayoutConfig] = None,
        **overrides,
    ):
        """
        Initialize the layout engine.

        Args:
            direction: Default flow direction, "TB" or "LR".
            config: Explicit settings. When omitted the defaults for the
                direction of each call are used.
            **overrides: Individual LayoutConfig settings to replace,
                e.g. ``node_spacing=200``.

        Raises:
            ValueError: If the direction or a setting is invalid.
        """
        self.direction = Direction.parse(direction)
        self.config = config
        self.overrides = overrides

        if config is not None:
            config.validate()
        # Fail early on bad overrides
        self.config_for(self.direction)

    def config_for(self, direction: Direction) -> LayoutConfig:
        """Settings used for a given direction."""
        config = self.config or LayoutConfig.for_direction(direction)
        if self.overrides:
            config = config.with_overrides(**self.overrides)
        return config

    def layout(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        direction: Union[Direction, str, None] = None,
    ) -> Tuple[List[Node], List[Edge]]:
        """
        Position every node.

        Args:
            nodes: People in the tree.
            edges: Hierarchy and pairing edges.
            direction: Overrides the engine's default direction.

        Returns:
            (nodes, edges) where nodes are new copies with updated position
            and handle sides, and edges are passed through unchanged.
        """
        result = self.compute(nodes, edges, direction)
        return result.nodes, result.edges

    def compute(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        direction: Union[Direction, str, None] = None,
        debug: bool = False,
    ) -> TreeLayoutResult:
        """
        Run the full pipeline and return every intermediate result.

        Args:
            nodes: People in the tree.
            edges: Hierarchy and pairing edges.
            direction: Overrides the engine's default direction.
            debug: Attach a LayoutTrace to the result.

        Returns:
            TreeLayoutResult
        """
        flow = self.direction if direction is None else Direction.parse(direction)
        config = self.config_for(flow)
        trace = LayoutTrace(direction=flow.value) if debug else None

        partition = partition_graph(nodes, edges)
        if trace:
            trace.add_stage(
                "partition",
                {
                    "hierarchy_nodes": partition.hierarchy_nodes,
                    "hierarchy_edges": partition.hierarchy_edges,
                    "anchor_of": partition.anchor_of,
                    "dropped_edges": partition.dropped_edges,
                },
            )

        engine = HierarchyLayout(sweeps=config.sweeps)
        hierarchy = engine.layout(partition.hierarchy_nodes, partition.hierarchy_edges)
        if trace:
            trace.add_stage(
                "cycle_removal",
                {
                    "has_cycles": hierarchy.has_cycles,
                    "back_edges": sorted(hierarchy.back_edges),
                },
            )
            trace.add_stage(
                "ranking",
                {node_id: nl.rank for node_id, nl in hierarchy.nodes.items()},
            )
            ranked_edges = [e for e in hierarchy.edges if e not in hierarchy.back_edges]
            ranked_graph = build_graph(partition.hierarchy_nodes, ranked_edges)
            trace.add_stage(
                "ordering",
                {
                    "layers": hierarchy.layers,
                    "crossings": count_crossings(hierarchy.layers, ranked_graph),
                },
            )

        calculator = PositionCalculator(config, flow)
        positions = calculator.calculate_positions(
            hierarchy, chain_depths(partition.anchor_of)
        )
        placements = {node_id: Placement.HIERARCHY for node_id in positions}
        if trace:
            trace.add_stage("coordinates", dict(positions))

        satellite_positions, satellite_placements = place_satellites(
            positions, partition.anchor_of, config, flow
        )
        positions.update(satellite_positions)
        placements.update(satellite_placements)
        if trace:
            trace.add_stage("satellites", dict(satellite_positions))

        source_side, target_side = handle_sides(flow)
        laid_out: List[Node] = []

        for node in nodes:
            position = positions.get(node.id)
            if position is None:
                logger.debug("Node %r could not be placed, using fallback", node.id)
                position = ORIGIN
                positions[node.id] = position
                placements[node.id] = Placement.FALLBACK

            laid_out.append(
                replace(
                    node,
                    position=position,
                    source_position=source_side,
                    target_position=target_side,
                )
            )

            if trace and trace.get_placement(node.id) is None:
                record = self._placement_record(
                    node.id, position, placements, partition, hierarchy
                )
                trace.add_placement(record)

        logger.debug(
            "Laid out %d node(s) %s: %d ranked in %d rank(s), %d paired",
            len(laid_out),
            flow.value,
            len(hierarchy.nodes),
            len(hierarchy.layers),
            len(satellite_positions),
        )

        return TreeLayoutResult(
            nodes=laid_out,
            edges=list(edges),
            positions=positions,
            placements=placements,
            direction=flow,
            partition=partition,
            hierarchy=hierarchy,
            trace=trace,
        )

    @staticmethod
    def _placement_record(
        node_id: str,
        position: Position,
        placements: Dict[str, Placement],
        partition: Partition,
        hierarchy: LayoutResult,
    ) -> NodePlacement:
        placement = placements[node_id]
        if placement is Placement.HIERARCHY:
            node_layout = hierarchy.nodes[node_id]
            return NodePlacement(
                node_id,
                placement,
                position,
                node_layout.rank,
                node_layout.order,
                "ranked",
            )
        if placement is Placement.SATELLITE:
            anchor = partition.anchor_of[node_id]
            return NodePlacement(
                node_id, placement, position, reason=f"partner of {anchor!r}"
            )
        anchor = partition.anchor_of.get(node_id)
        reason = f"anchor {anchor!r} not placed" if anchor is not None else "not placed"
        return NodePlacement(node_id, placement, position, reason=reason)


def layout_family_tree(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    direction: Union[Direction, str] = Direction.VERTICAL,
    config: Optional[LayoutConfig] = None,
) -> Tuple[List[Node], List[Edge]]:
    """
    Convenience function to lay out a family tree.

    Args:
        nodes: People in the tree.
        edges: Hierarchy and pairing edges.
        direction: "TB" (top-to-bottom) or "LR" (left-to-right).
        config: Optional layout settings.

    Returns:
        (nodes, edges) with updated node positions.
    """
    return FamilyTreeLayout(direction=direction, config=config).layout(nodes, edges)
