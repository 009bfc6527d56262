"""
Tests for the feed harvest script
"""

import json
import logging
from typing import get_args
from unittest.mock import MagicMock, patch

import pytest

from activity_pulse.feeds import FeedPage
from activity_pulse.shared.config import LoggingConfig
from scripts.harvest_feed import LOG_FORMATS, harvest_feed

URL = "http://www.example.com?afterTimestamp=1506335000"


class TestHarvestFeed:
    """Test suite for harvesting one feed end to end"""

    @pytest.fixture
    def client(self, feed_body):
        client = MagicMock()
        client.fetch.side_effect = [FeedPage.from_json(URL, {**feed_body, "next": URL})]
        return client

    def test_harvest_writes_flattened_items(self, client, tmp_path):
        """Test that live items are flattened and saved without raw data"""
        output = tmp_path / "items.jsonl"

        with patch("activity_pulse.datasets.openactive.ingest.FeedClient", return_value=client):
            ingestion, preprocessing = harvest_feed(URL, "2017-09-25", str(output))

        assert ingestion.rows_fetched == 3
        assert ingestion.metadata["stop_reason"] == "end_of_feed"
        assert preprocessing.rows_output == 2

        rows = [json.loads(line) for line in output.read_text().splitlines()]
        assert [row["id"] for row in rows] == ["1001", "1002"]
        assert "data" not in rows[0]
        assert rows[1]["activities"] == ["Yoga"]

    def test_harvest_raises_on_failed_ingestion(self, tmp_path):
        """Test that a failed fetch stops the harvest"""
        client = MagicMock()
        client.fetch.side_effect = RuntimeError("boom")

        with patch("activity_pulse.datasets.openactive.ingest.FeedClient", return_value=client):
            with pytest.raises(RuntimeError, match="Ingestion failed"):
                harvest_feed(URL, "2017-09-25")


class TestLogFormats:
    """Test suite for the configured log line formats"""

    def test_every_configured_format_has_a_template(self):
        """Test that each allowed logging.format value maps to a template"""
        allowed = get_args(LoggingConfig.model_fields["format"].annotation)
        assert set(allowed) == set(LOG_FORMATS)

    def test_json_format_renders_json(self):
        """Test that the json template renders one JSON object per record"""
        formatter = logging.Formatter(LOG_FORMATS["json"])
        record = logging.LogRecord(
            "activity_pulse.feeds.client", logging.INFO, __file__, 1, "Fetched 3 items", None, None
        )

        line = json.loads(formatter.format(record))

        assert line["level"] == "INFO"
        assert line["logger"] == "activity_pulse.feeds.client"
        assert line["message"] == "Fetched 3 items"
