"""
Unit tests for coordinate validators.
"""

import pytest

from activity_pulse.shared.geo import is_unset_coordinate_pair, parse_coordinate


class TestParseCoordinate:
    """Test cases for parse_coordinate."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("51.0", 51.0),
            ("-0.1275", -0.1275),
            (0.24, 0.24),
            (52, 52.0),
        ],
    )
    def test_numeric_values(self, value, expected):
        assert parse_coordinate(value) == expected

    @pytest.mark.parametrize("value", [None, "", "north", True, {}, "nan", "inf"])
    def test_unusable_values(self, value):
        assert parse_coordinate(value) is None


class TestIsUnsetCoordinatePair:
    """Test cases for the all-zero sentinel."""

    def test_both_zero_is_unset(self):
        assert is_unset_coordinate_pair(0.0, 0.0)

    def test_negative_zero_is_unset(self):
        assert is_unset_coordinate_pair(-0.0, 0.0)

    def test_single_zero_is_set(self):
        """Test that a point on the equator or meridian is kept."""
        assert not is_unset_coordinate_pair(0.0, 51.5)
        assert not is_unset_coordinate_pair(51.5, 0.0)
