"""
Activity Pulse - Item Field Extraction

Pulls flat values out of OpenActive item records. Publishers encode the same
field in several equivalent JSON shapes, so each extractor accepts all of
them:

- activity: a label string, a concept object with "prefLabel", or a list of
  either
- location: a "geo" object directly on the place, or on the place it is
  "containedInPlace"
- dates: directly on the event, on its first "subEvent", or on its
  "eventSchedule"

Missing fields are normal and come back as [] or None, never as exceptions.
Extraction never modifies the item.

Usage:
    from activity_pulse.feeds.extract import extract_activities

    extract_activities({"data": {"activity": {"prefLabel": "Yoga"}}})  # ["Yoga"]
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, NamedTuple

from activity_pulse.shared.geo import is_unset_coordinate_pair, parse_coordinate

TIMESTAMP_CONTAINERS = ("subEvent", "eventSchedule")


class Coordinates(NamedTuple):
    """A (longitude, latitude) pair."""

    longitude: float
    latitude: float


def _item_data(item: Any) -> Mapping[str, Any]:
    """Return the item's "data" mapping, or an empty one."""
    if not isinstance(item, Mapping):
        return {}
    data = item.get("data")
    return data if isinstance(data, Mapping) else {}


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


# =============================================================================
# Activities
# =============================================================================


def _activity_label(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        label = value.get("prefLabel")
        return label if isinstance(label, str) else None
    return None


def extract_activities(item: Mapping[str, Any]) -> list[str]:
    """
    Extract activity labels from data.activity.

    Args:
        item: Feed item record

    Returns:
        Labels in feed order; empty when the item has no activity
    """
    activity = _item_data(item).get("activity")
    if activity is None:
        return []

    values = activity if _is_sequence(activity) else [activity]
    labels = [_activity_label(value) for value in values]
    return [label for label in labels if label is not None]


# =============================================================================
# Coordinates
# =============================================================================


def _geo_object(location: Any) -> Mapping[str, Any] | None:
    if not isinstance(location, Mapping):
        return None

    geo = location.get("geo")
    if isinstance(geo, Mapping):
        return geo

    container = location.get("containedInPlace")
    if isinstance(container, Mapping):
        geo = container.get("geo")
        if isinstance(geo, Mapping):
            return geo

    return None


def extract_coordinates(item: Mapping[str, Any]) -> Coordinates | None:
    """
    Extract the item's location as (longitude, latitude).

    Looks at data.location.geo, then data.location.containedInPlace.geo.

    Returns:
        Coordinates, or None when there is no geo object, a value is null or
        not numeric, or both values are zero (the feeds' "unset" marker)
    """
    geo = _geo_object(_item_data(item).get("location"))
    if geo is None:
        return None

    latitude = parse_coordinate(geo.get("latitude"))
    longitude = parse_coordinate(geo.get("longitude"))
    if latitude is None or longitude is None:
        return None

    if is_unset_coordinate_pair(latitude, longitude):
        return None

    return Coordinates(longitude=longitude, latitude=latitude)


# =============================================================================
# Timestamps
# =============================================================================


def _first_mapping(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, Mapping):
        return value
    if _is_sequence(value) and value and isinstance(value[0], Mapping):
        return value[0]
    return None


def extract_timestamp(item: Mapping[str, Any], field_name: str) -> str | None:
    """
    Extract a raw date value such as "startDate" or "endDate".

    Precedence is fixed and the first match wins: data.<field_name>, then the
    first data.subEvent, then data.eventSchedule. Only string values match;
    anything else at a path is passed over.

    Args:
        item: Feed item record
        field_name: Date field to look up

    Returns:
        The raw value as published, or None when no path has it
    """
    data = _item_data(item)

    value = data.get(field_name)
    if isinstance(value, str):
        return value

    for container_key in TIMESTAMP_CONTAINERS:
        container = _first_mapping(data.get(container_key))
        if container is None:
            continue
        value = container.get(field_name)
        if isinstance(value, str):
            return value

    return None
