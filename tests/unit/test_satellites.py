"""Unit tests for satellite placement."""

from familyflow.config import LayoutConfig
from familyflow.models import Direction, Placement, Position
from familyflow.satellites import chain_depths, place_satellites, satellite_offset


class TestSatelliteOffset:
    """Tests for satellite_offset."""

    def test_vertical_places_partner_to_the_right(self):
        assert satellite_offset(LayoutConfig(), Direction.VERTICAL) == (170, 0)

    def test_horizontal_places_partner_below(self):
        assert satellite_offset(LayoutConfig(), Direction.HORIZONTAL) == (0, 120)

    def test_uses_configured_gaps(self):
        config = LayoutConfig(pairing_gap_x=10, pairing_gap_y=5)
        assert satellite_offset(config, Direction.VERTICAL) == (150, 0)
        assert satellite_offset(config, Direction.HORIZONTAL) == (0, 85)


class TestPlaceSatellites:
    """Tests for place_satellites."""

    def test_single_satellite(self):
        positions, placements = place_satellites(
            {"A": Position(150, 150)}, {"B": "A"}, LayoutConfig(), Direction.VERTICAL
        )

        assert positions == {"B": Position(320, 150)}
        assert placements == {"B": Placement.SATELLITE}

    def test_does_not_modify_input(self):
        hierarchy = {"A": Position(150, 150)}
        place_satellites(hierarchy, {"B": "A"}, LayoutConfig(), Direction.VERTICAL)
        assert hierarchy == {"A": Position(150, 150)}

    def test_chained_satellites(self):
        # C is anchored on B, which is listed after it
        positions, placements = place_satellites(
            {"A": Position(0, 0)},
            {"C": "B", "B": "A"},
            LayoutConfig(),
            Direction.HORIZONTAL,
        )

        assert positions["B"] == Position(0, 120)
        assert positions["C"] == Position(0, 240)
        assert set(placements.values()) == {Placement.SATELLITE}

    def test_missing_anchor_falls_back_to_origin(self):
        positions, placements = place_satellites(
            {}, {"B": "ghost"}, LayoutConfig(), Direction.VERTICAL
        )

        assert positions == {"B": Position(0, 0)}
        assert placements == {"B": Placement.FALLBACK}

    def test_no_satellites(self):
        assert place_satellites(
            {"A": Position(1, 1)}, {}, LayoutConfig(), Direction.VERTICAL
        ) == ({}, {})


class TestChainDepths:
    """Tests for chain_depths."""

    def test_empty(self):
        assert chain_depths({}) == {}

    def test_single_partner(self):
        assert chain_depths({"B": "A"}) == {"A": 1}

    def test_chain_counts_from_top_anchor(self):
        assert chain_depths({"B": "A", "C": "B"}) == {"A": 2}

    def test_two_partners_of_one_anchor(self):
        assert chain_depths({"B": "A", "C": "A"}) == {"A": 1}

    def test_unknown_anchor_still_counted(self):
        assert chain_depths({"B": "ghost"}) == {"ghost": 1}
