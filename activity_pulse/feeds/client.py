"""
Activity Pulse - Feed Client

HTTP transport for RPDE feed pages. Fetches a page URL, decodes the JSON body
and returns a FeedPage.

Configuration:
    feeds.timeout_seconds, feeds.user_agent and feeds.retries from the
    environment config

Usage:
    from activity_pulse.feeds.client import FeedClient

    client = FeedClient()
    page = client.fetch("https://example.com/feeds/sessions?afterChangeNumber=1000")
"""

from __future__ import annotations

import logging

import requests
from requests.adapters import HTTPAdapter

from activity_pulse.feeds.page import FeedPage
from activity_pulse.shared.config import Settings, get_config

logger = logging.getLogger(__name__)


class FeedClient:
    """Fetches feed pages over HTTP using a pooled requests session."""

    def __init__(self, config: Settings | None = None, session: requests.Session | None = None):
        """
        Initialize the client.

        Args:
            config: Configuration object (uses default if not provided)
            session: Session to use (a retrying session is built if not provided)
        """
        self.config = config or get_config()
        self.timeout = self.config.feeds.timeout_seconds
        self.session = session or self._new_session()

    def _new_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "User-Agent": self.config.feeds.user_agent,
                "Accept": "application/json",
            }
        )
        # max_retries counts retries after the first request
        retries = max(self.config.feeds.retries.max_attempts - 1, 0)
        adapter = HTTPAdapter(max_retries=retries)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def fetch(self, url: str) -> FeedPage:
        """
        Fetch one feed page.

        Args:
            url: Page URL, possibly carrying afterTimestamp or
                 afterChangeNumber cursor parameters

        Returns:
            FeedPage built from the body's "items" and "next"

        Raises:
            FeedFetchError: On network errors, non-200 responses, or bodies
                            that are not JSON
        """
        logger.debug(f"Fetching feed page {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FeedFetchError(url, f"request failed: {e}") from e

        if response.status_code != 200:
            raise FeedFetchError(
                url,
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise FeedFetchError(url, "response body is not JSON", status_code=200) from e

        page = FeedPage.from_json(url, body)
        logger.info(
            f"Fetched {len(page.items)} items from {url}",
            extra={"url": url, "items": len(page.items), "next_url": page.next_url},
        )
        return page

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()


# =============================================================================
# Exception Classes
# =============================================================================


class FeedFetchError(RuntimeError):
    """Raised when a feed page cannot be fetched or decoded."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {message}")


# =============================================================================
# Convenience Functions
# =============================================================================


def fetch_page(url: str, config: Settings | None = None) -> FeedPage:
    """Convenience function to fetch a single feed page."""
    client = FeedClient(config)
    try:
        return client.fetch(url)
    finally:
        client.close()
