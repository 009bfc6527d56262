"""
Activity Pulse - Feed Page Model

One fetched page of an RPDE (Realtime Paged Data Exchange) feed: the URL it
was fetched from, including its cursor query parameters, and the items it
contained.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any
from urllib.parse import parse_qs, urljoin, urlsplit

AFTER_TIMESTAMP_PARAM = "afterTimestamp"
AFTER_CHANGE_NUMBER_PARAM = "afterChangeNumber"


class PaginationMode(StrEnum):
    """Cursor strategy implied by a page's source URL."""

    NONE = "none"
    TIMESTAMP_CURSOR = "timestamp_cursor"
    CHANGE_NUMBER_CURSOR = "change_number_cursor"


@dataclass(frozen=True)
class FeedPage:
    """A fetched feed page. Items are owned by the caller and never modified."""

    source_url: str
    items: tuple[dict[str, Any], ...] = ()
    next_url: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @classmethod
    def from_json(cls, source_url: str, body: Any) -> FeedPage:
        """
        Build a page from a parsed RPDE response body.

        Args:
            source_url: URL the body was fetched from
            body: Parsed JSON body; its top-level "items" array becomes the
                  page items and "next" the next page URL

        Returns:
            FeedPage (empty when the body has no items array)
        """
        if not isinstance(body, Mapping):
            return cls(source_url=source_url)

        items = body.get("items")
        if not isinstance(items, list):
            items = []

        next_url = body.get("next")
        if isinstance(next_url, str) and next_url:
            # some publishers emit a relative "next" link
            next_url = urljoin(source_url, next_url)
        else:
            next_url = None

        return cls(source_url=source_url, items=tuple(items), next_url=next_url)

    @property
    def query(self) -> dict[str, list[str]]:
        """Query parameters of the source URL."""
        return query_parameters(self.source_url)


def query_parameters(url: str) -> dict[str, list[str]]:
    """Parse a URL's query string, keeping parameters with blank values."""
    return parse_qs(urlsplit(url).query, keep_blank_values=True)
