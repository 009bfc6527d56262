"""
Unit tests for the feed page model.
"""

import dataclasses

import pytest

from activity_pulse.feeds.page import FeedPage, query_parameters


class TestFeedPage:
    """Test cases for FeedPage."""

    def test_from_json(self, feed_body):
        page = FeedPage.from_json("http://www.example.com?afterChangeNumber=1000", feed_body)

        assert page.source_url == "http://www.example.com?afterChangeNumber=1000"
        assert len(page.items) == 3
        assert page.items[0]["id"] == "1001"
        assert page.next_url == "http://www.example.com?afterChangeNumber=1003"

    def test_items_are_a_tuple(self):
        page = FeedPage("http://www.example.com", items=[{"id": "1"}])
        assert page.items == ({"id": "1"},)

    def test_is_immutable(self):
        page = FeedPage("http://www.example.com")
        with pytest.raises(dataclasses.FrozenInstanceError):
            page.source_url = "http://other.example.com"

    def test_body_without_items(self):
        page = FeedPage.from_json("http://www.example.com", {"next": "http://www.example.com"})
        assert page.items == ()

    def test_body_not_an_object(self):
        page = FeedPage.from_json("http://www.example.com", ["not", "rpde"])
        assert page.items == ()
        assert page.next_url is None

    def test_relative_next_link(self):
        body = {"items": [], "next": "/feeds/sessions?afterChangeNumber=5"}
        page = FeedPage.from_json("https://example.com/feeds/sessions?afterChangeNumber=1", body)
        assert page.next_url == "https://example.com/feeds/sessions?afterChangeNumber=5"

    def test_query(self):
        page = FeedPage("http://www.example.com?afterChangeNumber=1000&limit=")
        assert page.query == {"afterChangeNumber": ["1000"], "limit": [""]}


class TestQueryParameters:
    """Test cases for query_parameters."""

    def test_no_query(self):
        assert query_parameters("http://www.example.com") == {}

    def test_blank_values_kept(self):
        assert query_parameters("http://www.example.com?afterTimestamp") == {"afterTimestamp": [""]}
