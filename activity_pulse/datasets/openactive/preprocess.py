"""
Activity Pulse - OpenActive Item Preprocessor

Flattens raw RPDE feed items into one row of scalar values per item.

Transformations:
- Drop "deleted" items and items without a data object
- Deduplicate on id, keeping the last occurrence (latest in feed order)
- activities: list of activity labels
- longitude / latitude: floats, NaN when the item has no usable location
- start_date / end_date: raw date values as published
- modified_epoch: "modified" normalized to epoch seconds

Usage:
    from activity_pulse.datasets.openactive.preprocess import OpenActivePreprocessor

    preprocessor = OpenActivePreprocessor()
    result = preprocessor.run(raw_df, execution_date="2024-01-15")
    df = preprocessor.get_data()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pandas as pd

from activity_pulse.datasets.base import BasePreprocessor
from activity_pulse.feeds import extract_activities, extract_coordinates, extract_timestamp
from activity_pulse.shared.config import Settings
from activity_pulse.shared.temporal import MalformedTimestampError, parse_modified

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    "id",
    "activities",
    "longitude",
    "latitude",
    "start_date",
    "end_date",
    "modified_epoch",
]


def _modified_epoch(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return parse_modified(value)
    except MalformedTimestampError:
        return None


class OpenActivePreprocessor(BasePreprocessor):
    """Preprocessor for OpenActive feed items."""

    def __init__(self, config: Settings | None = None):
        super().__init__(config)

    def get_dataset_name(self) -> str:
        return "openactive"

    def get_required_columns(self) -> list[str]:
        return REQUIRED_COLUMNS

    def get_dtype_mappings(self) -> dict[str, str]:
        return {
            "longitude": "float",
            "latitude": "float",
            "modified_epoch": "int",
        }

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Flatten item data into scalar columns."""
        df = self._drop_unusable_items(df)
        if "id" in df.columns:
            df = self.drop_duplicates(df, subset=["id"], keep="last")

        df = df.copy()
        items = [{"data": data} for data in df["data"]] if "data" in df.columns else []

        df["activities"] = pd.Series(
            [extract_activities(item) for item in items], index=df.index, dtype=object
        )
        self.log_transformation("extract_activities")

        coordinates = [extract_coordinates(item) for item in items]
        df["longitude"] = [c.longitude if c is not None else None for c in coordinates]
        df["latitude"] = [c.latitude if c is not None else None for c in coordinates]
        missing_location = sum(c is None for c in coordinates)
        if missing_location:
            logger.debug(f"{missing_location} items have no usable location")
        self.log_transformation("extract_coordinates")

        df["start_date"] = [extract_timestamp(item, "startDate") for item in items]
        df["end_date"] = [extract_timestamp(item, "endDate") for item in items]
        self.log_transformation("extract_timestamps")

        modified = df["modified"] if "modified" in df.columns else pd.Series(None, index=df.index)
        df["modified_epoch"] = [_modified_epoch(value) for value in modified]
        malformed = int(df["modified_epoch"].isna().sum() - modified.isna().sum())
        if malformed > 0:
            logger.warning(f"{malformed} items have a malformed modified timestamp")
        self.log_transformation("normalize_modified")

        return df.reset_index(drop=True)

    def _drop_unusable_items(self, df: pd.DataFrame) -> pd.DataFrame:
        """Drop deleted items and items without a data object."""
        if "state" in df.columns:
            deleted = df["state"] == "deleted"
            if deleted.any():
                self.log_dropped_rows("deleted", int(deleted.sum()))
                df = df[~deleted]

        if "data" not in df.columns:
            self.log_dropped_rows("missing_data", len(df))
            return df.iloc[0:0].assign(data=None)

        has_data = df["data"].map(lambda data: isinstance(data, Mapping)).astype(bool)
        if not has_data.all():
            self.log_dropped_rows("missing_data", int((~has_data).sum()))
            df = df[has_data]

        return df
