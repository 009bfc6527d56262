"""
Activity Pulse - Feed Freshness

Decides whether a fetched feed page is still worth polling.

A page fetched with an afterTimestamp cursor is fresh by construction: the
publisher already filtered it by modification time. Any other page
(afterChangeNumber cursor or no cursor) is fresh when at least one of its
items ended within the recency window, or has started and not ended yet.

The current time is passed in explicitly so the decision is a pure function
of its arguments.

Usage:
    from activity_pulse.feeds.freshness import is_page_recent

    if not is_page_recent(page, now=datetime.now(UTC)):
        logger.info("Feed is stale")
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from activity_pulse.feeds.extract import extract_timestamp
from activity_pulse.feeds.page import (
    AFTER_CHANGE_NUMBER_PARAM,
    AFTER_TIMESTAMP_PARAM,
    FeedPage,
    PaginationMode,
)
from activity_pulse.shared.temporal import MalformedTimestampError, parse_iso_timestamp

logger = logging.getLogger(__name__)

RECENCY_WINDOW = timedelta(days=365)


def pagination_mode(page: FeedPage) -> PaginationMode:
    """
    Get the cursor mode implied by the page's source URL.

    afterTimestamp wins when both cursor parameters are present.
    """
    query = page.query
    if AFTER_TIMESTAMP_PARAM in query:
        return PaginationMode.TIMESTAMP_CURSOR
    if AFTER_CHANGE_NUMBER_PARAM in query:
        return PaginationMode.CHANGE_NUMBER_CURSOR
    return PaginationMode.NONE


def uses_modified_timestamps(page: FeedPage) -> bool:
    """Check whether the page was fetched with an afterTimestamp cursor."""
    return pagination_mode(page) == PaginationMode.TIMESTAMP_CURSOR


def _epoch_seconds(now: datetime | int | float | None) -> float:
    if now is None:
        return datetime.now(UTC).timestamp()
    if isinstance(now, datetime):
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return now.timestamp()
    return float(now)


def is_page_recent(
    page: FeedPage,
    now: datetime | int | float | None = None,
    window: timedelta | None = None,
) -> bool:
    """
    Check whether a page's content falls within the recency window.

    Args:
        page: Fetched feed page
        now: Evaluation instant as a datetime or epoch seconds
             (current UTC time if None)
        window: Recency window (RECENCY_WINDOW if None)

    Returns:
        True if the page uses a timestamp cursor, or if any item's end date is
        no older than the window, or any item is ongoing (start date without
        end date). False otherwise, including for an empty page.
    """
    if uses_modified_timestamps(page):
        return True

    now_seconds = _epoch_seconds(now)
    window_seconds = (window if window is not None else RECENCY_WINDOW).total_seconds()

    for index, item in enumerate(page.items):
        end_date = extract_timestamp(item, "endDate")

        if end_date is None:
            if extract_timestamp(item, "startDate") is not None:
                logger.debug(f"Item {index} has no end date, treating as ongoing")
                return True
            continue

        try:
            effective = parse_iso_timestamp(end_date)
        except MalformedTimestampError as e:
            logger.warning(
                f"Skipping item {index} with malformed end date: {e}",
                extra={"source_url": page.source_url, "item_index": index},
            )
            continue

        if now_seconds - effective <= window_seconds:
            return True

    return False
