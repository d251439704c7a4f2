"""Placement of paired (spouse/partner) nodes next to their anchor."""

import logging
from typing import Dict, Tuple

from .config import LayoutConfig
from .models import ORIGIN, Direction, Placement, Position

logger = logging.getLogger(__name__)


def satellite_offset(config: LayoutConfig, direction: Direction) -> Tuple[float, float]:
    """
    Displacement from an anchor's top-left corner to its satellite's.

    TB puts the partner to the right on the same row, LR puts it below in
    the same column.
    """
    if direction.is_horizontal:
        return 0.0, config.node_height + config.pairing_gap_y
    return config.node_width + config.pairing_gap_x, 0.0


def chain_depths(anchor_of: Dict[str, str]) -> Dict[str, int]:
    """
    Length of the longest satellite chain hanging off each top anchor.

    With pairings A-B and B-C, A carries a chain of two satellites.
    """
    depths: Dict[str, int] = {}
    for satellite in anchor_of:
        steps = 0
        current = satellite
        seen = set()
        while current in anchor_of and current not in seen:
            seen.add(current)
            current = anchor_of[current]
            steps += 1
        depths[current] = max(depths.get(current, 0), steps)
    return depths


def place_satellites(
    positions: Dict[str, Position],
    anchor_of: Dict[str, str],
    config: LayoutConfig,
    direction: Direction,
) -> Tuple[Dict[str, Position], Dict[str, Placement]]:
    """
    Position every satellite relative to its anchor.

    A satellite whose anchor is itself a satellite is placed once the anchor
    has a position. A satellite whose anchor never gets one falls back to the
    origin.

    Args:
        positions: Positions of hierarchy nodes. Not modified.
        anchor_of: Satellite id -> anchor id.
        config: Layout settings.
        direction: Flow direction.

    Returns:
        (positions, placements) for the satellites only.
    """
    dx, dy = satellite_offset(config, direction)
    placed: Dict[str, Position] = {}
    placements: Dict[str, Placement] = {}
    pending = list(anchor_of)

    while pending:
        remaining = []
        for satellite in pending:
            anchor = anchor_of[satellite]
            anchor_position = placed.get(anchor, positions.get(anchor))
            if anchor_position is None:
                remaining.append(satellite)
                continue
            placed[satellite] = anchor_position.offset(dx, dy)
            placements[satellite] = Placement.SATELLITE

        if len(remaining) == len(pending):
            break
        pending = remaining

    for satellite in pending:
        logger.debug(
            "Anchor %r of %r has no position, using fallback",
            anchor_of[satellite],
            satellite,
        )
        placed[satellite] = ORIGIN
        placements[satellite] = Placement.FALLBACK

    return placed, placements
