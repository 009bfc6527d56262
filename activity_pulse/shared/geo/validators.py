"""
Activity Pulse - Coordinate Validators

Coordinate parsing rules for geo objects found in feed items. Feeds publish
latitude/longitude as numbers or numeric strings, and use an all-zero pair
to mean "location not set".
"""

from __future__ import annotations

import math
from typing import Any


def parse_coordinate(value: Any) -> float | None:
    """
    Parse a latitude or longitude value to float.

    Returns None for null, boolean, non-numeric or non-finite values.
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        number = float(value)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(number):
        return None
    return number


def is_unset_coordinate_pair(latitude: float, longitude: float) -> bool:
    """
    Check for the all-zero pair feeds use as an "unset" sentinel.

    This is a data-quality rule of the source feeds, not a geographic one:
    a real point at (0, 0) is reported as unset too.
    """
    return latitude == 0.0 and longitude == 0.0
