"""
Activity Pulse - Temporal Utilities

Timestamp parsing and normalization for feed items:
- Epoch seconds / milliseconds detection
- ISO-8601 parsing to epoch seconds
"""

from activity_pulse.shared.temporal.parsers import (
    MalformedTimestampError,
    parse_iso_timestamp,
    parse_modified,
)

__all__ = ["parse_modified", "parse_iso_timestamp", "MalformedTimestampError"]
