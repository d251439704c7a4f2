"""
Layout configuration.

Spacing constants mirror the editor's defaults. Horizontal layouts use wider
spacing to make room for the node footprint along the rank axis.
"""

from dataclasses import dataclass, replace
from typing import Union

from .models import Direction

ALIGN_MODES = ("UL", "center")


@dataclass(frozen=True)
class LayoutConfig:
    """
    Numeric settings for one layout run.

    Attributes:
        node_width: Width of every node box.
        node_height: Height of every node box.
        node_spacing: Gap between neighbouring nodes within a rank.
        rank_spacing: Gap between consecutive ranks (generations).
        margin_x: Offset added to every x coordinate.
        margin_y: Offset added to every y coordinate.
        pairing_gap_x: Gap between an anchor and its satellite (vertical flow).
        pairing_gap_y: Gap between an anchor and its satellite (horizontal flow).
        sweeps: Number of down/up barycenter sweeps for crossing reduction.
        align: "UL" packs every rank from the margin, "center" centres each
            rank on the widest one.
    """

    node_width: float = 140
    node_height: float = 80
    node_spacing: float = 180
    rank_spacing: float = 210
    margin_x: float = 150
    margin_y: float = 150
    pairing_gap_x: float = 30
    pairing_gap_y: float = 40
    sweeps: int = 4
    align: str = "UL"

    @classmethod
    def for_direction(cls, direction: Union[Direction, str]) -> "LayoutConfig":
        """Return the default configuration for a flow direction."""
        if Direction.parse(direction).is_horizontal:
            return cls(node_spacing=250, rank_spacing=300)
        return cls()

    def with_overrides(self, **changes) -> "LayoutConfig":
        """Return a copy with some settings replaced, validated."""
        config = replace(self, **changes)
        config.validate()
        return config

    def validate(self) -> None:
        """
        Check the settings.

        Raises:
            ValueError: If a size is not positive, a spacing or margin is
                negative, the sweep count is negative or align is unknown.
        """
        if self.node_width <= 0 or self.node_height <= 0:
            raise ValueError("node_width and node_height must be positive")

        for name in (
            "node_spacing",
            "rank_spacing",
            "margin_x",
            "margin_y",
            "pairing_gap_x",
            "pairing_gap_y",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

        if self.sweeps < 0:
            raise ValueError("sweeps must not be negative")

        if self.align not in ALIGN_MODES:
            raise ValueError(f"align must be one of {ALIGN_MODES}, got {self.align!r}")
