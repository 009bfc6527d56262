"""
Activity Pulse - Geographic Utilities

Coordinate parsing and validity rules for feed geo objects.
"""

from activity_pulse.shared.geo.validators import is_unset_coordinate_pair, parse_coordinate

__all__ = ["parse_coordinate", "is_unset_coordinate_pair"]
