"""
Activity Pulse - Feeds

Feed page model, item field extraction, freshness decisions and the HTTP
client that fetches pages.

Usage:
    from activity_pulse.feeds import FeedClient, is_page_recent

    page = FeedClient().fetch(url)
    if is_page_recent(page):
        ...
"""

from activity_pulse.feeds.client import FeedClient, FeedFetchError, fetch_page
from activity_pulse.feeds.extract import (
    Coordinates,
    extract_activities,
    extract_coordinates,
    extract_timestamp,
)
from activity_pulse.feeds.freshness import (
    RECENCY_WINDOW,
    is_page_recent,
    pagination_mode,
    uses_modified_timestamps,
)
from activity_pulse.feeds.page import FeedPage, PaginationMode, query_parameters

__all__ = [
    "FeedPage",
    "PaginationMode",
    "query_parameters",
    "Coordinates",
    "extract_activities",
    "extract_coordinates",
    "extract_timestamp",
    "RECENCY_WINDOW",
    "is_page_recent",
    "pagination_mode",
    "uses_modified_timestamps",
    "FeedClient",
    "FeedFetchError",
    "fetch_page",
]
