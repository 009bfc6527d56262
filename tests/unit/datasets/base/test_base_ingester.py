"""Unit tests for the base ingester."""

from __future__ import annotations

from datetime import datetime

import pandas as pd
import pytest

from activity_pulse.datasets.base import BaseIngester


class SessionsIngester(BaseIngester):
    """Ingester over a fixed frame, relying on the default watermark logic."""

    def __init__(self, df: pd.DataFrame, config=None):
        super().__init__(config)
        self.df = df

    def fetch_data(self, since: datetime | None = None) -> pd.DataFrame:
        return self.df

    def get_watermark_field(self) -> str:
        return "modified"

    def get_primary_key(self) -> str:
        return "id"

    def get_dataset_name(self) -> str:
        return "sessions"


class FailingIngester(SessionsIngester):
    def fetch_data(self, since: datetime | None = None) -> pd.DataFrame:
        raise ConnectionError("feed unreachable")


class TestComputeWatermarkEnd:
    """Test cases for the default compute_watermark_end."""

    def test_newest_iso_value(self, test_config):
        df = pd.DataFrame(
            {
                "id": ["1", "2", "3"],
                "modified": [
                    "2017-09-20T18:00:00Z",
                    "2017-09-22T12:35:02Z",
                    "2017-09-21T08:00:00Z",
                ],
            }
        )
        ingester = SessionsIngester(df, test_config)

        assert ingester.compute_watermark_end(df) == pd.Timestamp("2017-09-22T12:35:02Z")

    def test_datetime_column(self, test_config):
        df = pd.DataFrame(
            {"modified": pd.to_datetime(["2017-09-20", "2017-09-25"], utc=True)}
        )
        ingester = SessionsIngester(df, test_config)

        assert ingester.compute_watermark_end(df) == pd.Timestamp("2017-09-25", tz="UTC")

    def test_missing_column(self, test_config):
        df = pd.DataFrame({"id": ["1"]})
        assert SessionsIngester(df, test_config).compute_watermark_end(df) is None

    def test_empty_frame(self, test_config):
        df = pd.DataFrame(columns=["id", "modified"])
        assert SessionsIngester(df, test_config).compute_watermark_end(df) is None

    def test_unparseable_values(self, test_config):
        df = pd.DataFrame({"modified": ["soon", "later"]})
        assert SessionsIngester(df, test_config).compute_watermark_end(df) is None


class TestRun:
    """Test cases for BaseIngester.run."""

    def test_run_reports_watermark(self, test_config):
        df = pd.DataFrame(
            {
                "id": ["1", "2"],
                "modified": ["2017-09-20T18:00:00Z", "2017-09-22T12:35:02Z"],
            }
        )
        ingester = SessionsIngester(df, test_config)

        result = ingester.run(execution_date="2017-09-25")

        assert result.success
        assert result.rows_fetched == 2
        assert result.watermark_end == pd.Timestamp("2017-09-22T12:35:02Z")
        assert result.metadata["columns"] == ["id", "modified"]
        assert result.to_dict()["watermark_end"].startswith("2017-09-22T12:35:02")

    def test_run_failure(self, test_config):
        ingester = FailingIngester(pd.DataFrame(), test_config)

        result = ingester.run(execution_date="2017-09-25")

        assert not result.success
        assert result.error_message == "feed unreachable"
        assert ingester.get_data() is None

    def test_cannot_instantiate_without_hooks(self, test_config):
        with pytest.raises(TypeError):
            BaseIngester(test_config)
