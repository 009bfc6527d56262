"""
Activity Pulse - OpenActive Feed Ingester

Walks an OpenActive RPDE feed page by page, following each page's "next"
link, and collects the raw items.

The walk stops when a page is empty, when a page is no longer recent (see
activity_pulse.feeds.freshness), when the feed links a page to itself, or
after feeds.max_pages pages. The URL to resume from is kept in last_url.

Configuration:
    Ingestion settings loaded from configs/datasets/openactive.yaml,
    paging settings from the environment config (feeds.*)

Usage:
    from activity_pulse.datasets.openactive.ingest import OpenActiveFeedIngester

    ingester = OpenActiveFeedIngester("https://example.com/feeds/sessions")
    result = ingester.run(execution_date="2024-01-15")
    df = ingester.get_data()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from urllib.parse import urlencode, urlsplit

import pandas as pd

from activity_pulse.datasets.base import BaseIngester
from activity_pulse.feeds import (
    FeedClient,
    FeedPage,
    is_page_recent,
    pagination_mode,
    query_parameters,
)
from activity_pulse.feeds.page import AFTER_CHANGE_NUMBER_PARAM, AFTER_TIMESTAMP_PARAM
from activity_pulse.shared.config import Settings, get_dataset_config
from activity_pulse.shared.temporal import MalformedTimestampError, parse_modified

logger = logging.getLogger(__name__)

# =============================================================================
# Ingestion Configuration (loaded from openactive.yaml)
# =============================================================================
DATASET_CONFIG = get_dataset_config("openactive")

INGESTION_CONFIG = DATASET_CONFIG.get("ingestion", {})
WATERMARK_FIELD = INGESTION_CONFIG.get("watermark_field", "modified")
PRIMARY_KEY = INGESTION_CONFIG.get("primary_key", "id")

ITEM_COLUMNS = ["id", "state", "kind", "modified", "data"]


class StopReason(StrEnum):
    """Why a feed walk ended."""

    EMPTY_PAGE = "empty_page"
    STALE_PAGE = "stale_page"
    END_OF_FEED = "end_of_feed"
    MAX_PAGES = "max_pages"


class OpenActiveFeedIngester(BaseIngester):
    """
    Ingester for a single OpenActive RPDE feed.

    Produces one row per feed item with the RPDE envelope fields and the raw
    "data" object. Flattening happens in OpenActivePreprocessor.
    """

    def __init__(
        self,
        data_url: str,
        config: Settings | None = None,
        client: FeedClient | None = None,
    ):
        """
        Initialize the ingester.

        Args:
            data_url: First page URL of the feed
            config: Configuration object (uses default if not provided)
            client: Feed client (built from config if not provided)
        """
        super().__init__(config)
        self.data_url = data_url
        self.client = client or FeedClient(self.config)
        self.last_url = data_url
        self.pages_fetched = 0
        self.stop_reason: StopReason | None = None
        self.pagination_mode = pagination_mode(FeedPage(source_url=data_url))

    def get_dataset_name(self) -> str:
        """Return dataset name."""
        return "openactive"

    def get_watermark_field(self) -> str:
        """Return the field used for incremental ingestion."""
        return WATERMARK_FIELD

    def get_primary_key(self) -> str:
        """Return the primary key field."""
        return PRIMARY_KEY

    def get_run_metadata(self) -> dict[str, Any]:
        """Report where the walk ended so the next run can resume there."""
        return {
            "data_url": self.data_url,
            "last_url": self.last_url,
            "pages_fetched": self.pages_fetched,
            "stop_reason": str(self.stop_reason) if self.stop_reason else None,
            "pagination_mode": str(self.pagination_mode),
        }

    def _start_url(self, since: datetime | None) -> str:
        """
        Get the first URL to fetch.

        A watermark is applied as an afterTimestamp cursor, unless the feed
        URL already carries a cursor of its own.
        """
        if since is None:
            return self.data_url

        query = query_parameters(self.data_url)
        if AFTER_TIMESTAMP_PARAM in query or AFTER_CHANGE_NUMBER_PARAM in query:
            return self.data_url

        if since.tzinfo is None:
            since = since.replace(tzinfo=UTC)

        separator = "&" if urlsplit(self.data_url).query else "?"
        cursor = urlencode({AFTER_TIMESTAMP_PARAM: int(since.timestamp())})
        return f"{self.data_url}{separator}{cursor}"

    def _item_row(self, item: Any) -> dict[str, Any] | None:
        if not isinstance(item, Mapping):
            return None
        return {
            "id": item.get("id"),
            "state": item.get("state"),
            "kind": item.get("kind"),
            "modified": item.get("modified"),
            "data": item.get("data"),
        }

    def fetch_data(
        self,
        since: datetime | None = None,
        now: datetime | None = None,
    ) -> pd.DataFrame:
        """
        Fetch feed items, following "next" links.

        Args:
            since: Watermark to start from (ignored if the feed URL already
                   has a cursor)
            now: Evaluation instant for page freshness (current time if None)

        Returns:
            DataFrame with one row per item
        """
        feeds_config = self.config.feeds
        url = self._start_url(since)

        self.pages_fetched = 0
        self.stop_reason = None
        rows: list[dict[str, Any]] = []

        logger.info(f"Fetching OpenActive feed from {url}", extra={"url": url})

        while True:
            try:
                page = self.client.fetch(url)
            except Exception as e:
                logger.error(f"Feed request failed: {e}")
                raise

            self.pages_fetched += 1
            self.pagination_mode = pagination_mode(page)
            self.last_url = page.next_url or url

            if not page.items:
                logger.info("Empty page, feed is caught up.")
                self.last_url = url
                self.stop_reason = StopReason.EMPTY_PAGE
                break

            page_rows = [row for row in map(self._item_row, page.items) if row is not None]
            skipped = len(page.items) - len(page_rows)
            if skipped:
                logger.warning(f"Skipped {skipped} items that are not objects", extra={"url": url})
            rows.extend(page_rows)

            logger.info(f"Got {len(page_rows)} items. Total so far: {len(rows)}")

            if not is_page_recent(page, now=now, window=feeds_config.recency_window):
                logger.info(f"Page {url} has no recent items, stopping.")
                self.stop_reason = StopReason.STALE_PAGE
                break

            if page.next_url is None or page.next_url == url:
                logger.info("Last page reached.")
                self.stop_reason = StopReason.END_OF_FEED
                break

            if self.pages_fetched >= feeds_config.max_pages:
                logger.info(f"Reached page limit of {feeds_config.max_pages}.")
                self.stop_reason = StopReason.MAX_PAGES
                break

            url = page.next_url
            if feeds_config.request_delay_seconds > 0:
                time.sleep(feeds_config.request_delay_seconds)

        logger.info(
            f"Fetched {len(rows)} total feed items",
            extra={"rows": len(rows), **self.get_run_metadata()},
        )

        if not rows:
            return pd.DataFrame(columns=ITEM_COLUMNS)
        return pd.DataFrame(rows, columns=ITEM_COLUMNS)

    def compute_watermark_end(self, df: pd.DataFrame) -> datetime | None:
        """Newest "modified" value, which feeds publish as epoch or ISO values."""
        if WATERMARK_FIELD not in df.columns:
            return None

        newest: int | None = None
        for value in df[WATERMARK_FIELD]:
            try:
                modified = parse_modified(value)
            except MalformedTimestampError:
                continue
            if newest is None or modified > newest:
                newest = modified

        return datetime.fromtimestamp(newest, UTC) if newest is not None else None


# =============================================================================
# Convenience Functions
# =============================================================================


def ingest_openactive_feed(
    data_url: str,
    execution_date: str,
    watermark_start: datetime | None = None,
    config: Settings | None = None,
) -> dict[str, Any]:
    """
    Convenience function for ingesting one OpenActive feed.

    Returns the ingestion result as a dictionary.
    """
    ingester = OpenActiveFeedIngester(data_url, config)
    result = ingester.run(execution_date, watermark_start)
    return result.to_dict()
