"""
Activity Pulse - Timestamp Parsers

Normalizes the timestamp encodings found in OpenActive feeds to integer
epoch seconds:
- Epoch seconds as an integer or numeric string ("1496565686")
- Epoch milliseconds as an integer or numeric string (1512457484704)
- ISO-8601 date-times, optionally with fractional seconds and a "Z" or
  offset suffix ("2017-09-22T12:35:02.511Z")

Second and millisecond precision are told apart by digit count: anything
longer than ten digits is milliseconds.

Usage:
    from activity_pulse.shared.temporal import parse_modified

    parse_modified("2017-09-22T12:35:02.511Z")  # 1506083702
"""

from __future__ import annotations

import math
import numbers
import re
from datetime import UTC, datetime
from typing import Any

EPOCH_SECONDS_MAX_DIGITS = 10

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def _from_epoch_digits(number: int) -> int:
    if len(str(abs(number))) > EPOCH_SECONDS_MAX_DIGITS:
        # truncate toward zero
        return number // 1000 if number >= 0 else -(-number // 1000)
    return number


def parse_iso_timestamp(value: Any) -> int:
    """
    Parse an ISO-8601 date-time string to epoch seconds.

    Naive values are read as UTC. Fractional seconds are truncated.

    Args:
        value: ISO-8601 string

    Returns:
        Epoch seconds

    Raises:
        MalformedTimestampError: If the value is not an ISO-8601 string
    """
    if not isinstance(value, str) or not value.strip():
        raise MalformedTimestampError(value)

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedTimestampError(value) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)

    return int(parsed.timestamp())


def parse_modified(value: Any) -> int:
    """
    Parse a modified timestamp in any accepted encoding to epoch seconds.

    Detection order: integer seconds (<= 10 digits), integer milliseconds
    (> 10 digits), then ISO-8601.

    Raises:
        MalformedTimestampError: If the value matches none of the encodings
    """
    if isinstance(value, bool):
        raise MalformedTimestampError(value)

    if isinstance(value, numbers.Integral):
        return _from_epoch_digits(int(value))

    if isinstance(value, numbers.Real):
        if not math.isfinite(value):
            raise MalformedTimestampError(value)
        return _from_epoch_digits(int(value))

    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_PATTERN.match(text):
            return _from_epoch_digits(int(text))
        return parse_iso_timestamp(text)

    raise MalformedTimestampError(value)


# =============================================================================
# Exception Classes
# =============================================================================


class MalformedTimestampError(ValueError):
    """Raised when a timestamp matches none of the accepted encodings."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Malformed timestamp: {value!r}")
