"""
Coordinate assignment for family tree layout.

Turns the rank/order grid computed by the layered layout into node
coordinates for both vertical (TB) and horizontal (LR) flow, and computes
bounding boxes of placed nodes.

For TB the rank drives y and the order drives x; for LR the axes swap. All
coordinates are computed on node centres, then shifted by half the node size
so callers receive the top-left corner of each box.

A node carrying a chain of satellites reserves as many order slots as the
chain needs, which keeps the next node of its rank clear of the chain.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .config import LayoutConfig
from .layout import LayoutResult
from .models import Direction, HandleSide, Node, Position
from .satellites import satellite_offset


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box."""

    x: float
    y: float
    width: float
    height: float


class PositionCalculator:
    """
    Calculates node coordinates from ranks and orders.

    Attributes:
        config: Node size, spacing and margin settings.
        direction: Flow direction.
    """

    def __init__(self, config: LayoutConfig, direction: Direction):
        self.config = config
        self.direction = direction

    @property
    def rank_pitch(self) -> float:
        """Distance between consecutive ranks along the rank axis."""
        if self.direction.is_horizontal:
            return self.config.node_width + self.config.rank_spacing
        return self.config.node_height + self.config.rank_spacing

    @property
    def order_pitch(self) -> float:
        """Distance between neighbours within a rank."""
        if self.direction.is_horizontal:
            return self.config.node_height + self.config.node_spacing
        return self.config.node_width + self.config.node_spacing

    def slots_for(self, chain_depth: int) -> int:
        """
        Order slots taken by a node carrying a chain of satellites.

        The node and its satellites must fit inside the slots so the next
        node in the rank never overlaps them.
        """
        if chain_depth <= 0:
            return 1
        dx, dy = satellite_offset(self.config, self.direction)
        if self.direction.is_horizontal:
            extent = chain_depth * dy + self.config.node_height
        else:
            extent = chain_depth * dx + self.config.node_width
        return max(1, math.ceil(extent / self.order_pitch))

    def calculate_positions(
        self,
        layout_result: LayoutResult,
        chain_depths: Optional[Mapping[str, int]] = None,
    ) -> Dict[str, Position]:
        """
        Calculate the top-left position of every ranked node.

        Also stores the coordinates on the NodeLayout entries of the result.

        Args:
            layout_result: The layout result from the hierarchy engine.
            chain_depths: Node id -> number of satellites chained after it.
                Such nodes reserve extra order slots.

        Returns:
            Dictionary mapping node ids to positions.
        """
        config = self.config
        chain_depths = chain_depths or {}
        half_w = config.node_width / 2
        half_h = config.node_height / 2

        layer_slots = [
            [self.slots_for(chain_depths.get(node_id, 0)) for node_id in layer]
            for layer in layout_result.layers
        ]
        widest = max((sum(slots) for slots in layer_slots), default=0)

        positions: Dict[str, Position] = {}

        for rank, layer in enumerate(layout_result.layers):
            shift = 0.0
            if config.align == "center":
                shift = (widest - sum(layer_slots[rank])) * self.order_pitch / 2

            slot = 0
            for node_id, width in zip(layer, layer_slots[rank]):
                along_rank = rank * self.rank_pitch
                along_order = slot * self.order_pitch + shift
                slot += width

                if self.direction.is_horizontal:
                    center_x = config.margin_x + half_w + along_rank
                    center_y = config.margin_y + half_h + along_order
                else:
                    center_x = config.margin_x + half_w + along_order
                    center_y = config.margin_y + half_h + along_rank

                position = Position(center_x - half_w, center_y - half_h)
                positions[node_id] = position

                node_layout = layout_result.nodes.get(node_id)
                if node_layout is not None:
                    node_layout.x = position.x
                    node_layout.y = position.y

        return positions


def handle_sides(direction: Direction) -> Tuple[HandleSide, HandleSide]:
    """Return the (source, target) connection sides for a direction."""
    if direction.is_horizontal:
        return HandleSide.RIGHT, HandleSide.LEFT
    return HandleSide.BOTTOM, HandleSide.TOP


def compute_bounds(
    nodes: Iterable[Node],
    node_width: float = LayoutConfig.node_width,
    node_height: float = LayoutConfig.node_height,
) -> Bounds:
    """
    Bounding box of a set of placed nodes.

    Every node is assumed to have the standard node size.
    """
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")

    for node in nodes:
        min_x = min(min_x, node.position.x)
        min_y = min(min_y, node.position.y)
        max_x = max(max_x, node.position.x + node_width)
        max_y = max(max_y, node.position.y + node_height)

    if min_x == float("inf"):
        return Bounds(0, 0, 0, 0)

    return Bounds(min_x, min_y, max_x - min_x, max_y - min_y)
