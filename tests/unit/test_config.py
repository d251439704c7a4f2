"""Unit tests for layout configuration."""

import pytest

from familyflow.config import LayoutConfig
from familyflow.models import Direction


class TestLayoutConfig:
    """Tests for LayoutConfig defaults and validation."""

    def test_vertical_defaults(self):
        config = LayoutConfig.for_direction("TB")
        assert config.node_width == 140
        assert config.node_height == 80
        assert config.node_spacing == 180
        assert config.rank_spacing == 210
        assert config.margin_x == 150
        assert config.margin_y == 150
        assert config.pairing_gap_x == 30
        assert config.sweeps == 4
        assert config.align == "UL"

    def test_horizontal_defaults_are_wider(self):
        config = LayoutConfig.for_direction(Direction.HORIZONTAL)
        assert config.node_spacing == 250
        assert config.rank_spacing == 300
        assert config.pairing_gap_y == 40

    def test_with_overrides(self):
        config = LayoutConfig().with_overrides(node_spacing=50, align="center")
        assert config.node_spacing == 50
        assert config.align == "center"
        assert config.rank_spacing == 210

    def test_default_config_is_valid(self):
        LayoutConfig().validate()

    @pytest.mark.parametrize(
        "changes",
        [
            {"node_width": 0},
            {"node_height": -1},
            {"node_spacing": -5},
            {"margin_y": -1},
            {"pairing_gap_x": -1},
            {"sweeps": -1},
            {"align": "middle"},
        ],
    )
    def test_invalid_settings(self, changes):
        with pytest.raises(ValueError):
            LayoutConfig().with_overrides(**changes)

    def test_invalid_direction(self):
        with pytest.raises(ValueError):
            LayoutConfig.for_direction("diagonal")
