"""
Activity Pulse - Base Ingester

Abstract base class for feed ingesters. Provides a consistent interface for
fetching data from a source with:
- Watermark reporting for incremental ingestion
- Error handling
- Structured result reporting

Usage:
    class SessionsIngester(BaseIngester):
        def fetch_data(self, since: datetime | None = None) -> pd.DataFrame:
            ...
        def get_watermark_field(self) -> str:
            return "modified"
        def get_primary_key(self) -> str:
            return "id"
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pandas as pd

from activity_pulse.shared.config import Settings, get_config

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    """Result of a data ingestion operation."""

    dataset: str
    execution_date: str
    rows_fetched: int
    watermark_start: datetime | None
    watermark_end: datetime | None
    duration_seconds: float = 0.0
    success: bool = True
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for logging."""
        return {
            "dataset": self.dataset,
            "execution_date": self.execution_date,
            "rows_fetched": self.rows_fetched,
            "watermark_start": self.watermark_start.isoformat() if self.watermark_start else None,
            "watermark_end": self.watermark_end.isoformat() if self.watermark_end else None,
            "duration_seconds": self.duration_seconds,
            "success": self.success,
            "error_message": self.error_message,
            "metadata": self.metadata,
        }


class BaseIngester(ABC):
    """
    Abstract base class for dataset ingestion.

    Subclasses must implement:
    - fetch_data(): Fetch data from the source
    - get_watermark_field(): Return the field used for incremental ingestion
    - get_primary_key(): Return the primary key field
    - get_dataset_name(): Return the dataset name
    """

    def __init__(self, config: Settings | None = None):
        """
        Initialize the ingester.

        Args:
            config: Configuration object (uses default if not provided)
        """
        self.config = config or get_config()

    @abstractmethod
    def fetch_data(self, since: datetime | None = None) -> pd.DataFrame:
        """
        Fetch data from the source.

        Args:
            since: If provided, only fetch data modified since this datetime.
                   If None, fetch all available data.

        Returns:
            DataFrame containing the fetched data
        """

    @abstractmethod
    def get_watermark_field(self) -> str:
        """Get the column that holds the record modification time."""

    @abstractmethod
    def get_primary_key(self) -> str:
        """Get the column that uniquely identifies each record."""

    @abstractmethod
    def get_dataset_name(self) -> str:
        """Get the dataset name."""

    def get_run_metadata(self) -> dict[str, Any]:
        """
        Get source-specific metadata to attach to the ingestion result.

        Override to report cursors, page counts and the like.
        """
        return {}

    def compute_watermark_end(self, df: pd.DataFrame) -> datetime | None:
        """
        Compute the newest watermark value in the fetched data.

        The default reads the watermark column as datetimes. Override when the
        source encodes it differently.
        """
        watermark_field = self.get_watermark_field()
        if watermark_field not in df.columns or len(df) == 0:
            return None

        if pd.api.types.is_datetime64_any_dtype(df[watermark_field]):
            return df[watermark_field].max()

        with suppress(Exception):
            return pd.to_datetime(df[watermark_field]).max()
        return None

    def run(
        self,
        execution_date: str,
        watermark_start: datetime | None = None,
    ) -> IngestionResult:
        """
        Run the ingestion process.

        Args:
            execution_date: Execution date in YYYY-MM-DD format
            watermark_start: Starting watermark for incremental ingestion

        Returns:
            IngestionResult with details about the ingestion
        """
        start_time = time.time()
        dataset_name = self.get_dataset_name()

        logger.info(
            f"Starting ingestion for {dataset_name}",
            extra={
                "dataset": dataset_name,
                "execution_date": execution_date,
                "watermark_start": watermark_start.isoformat() if watermark_start else None,
            },
        )

        try:
            df = self.fetch_data(since=watermark_start)
            watermark_end = self.compute_watermark_end(df)

            result = IngestionResult(
                dataset=dataset_name,
                execution_date=execution_date,
                rows_fetched=len(df),
                watermark_start=watermark_start,
                watermark_end=watermark_end,
                duration_seconds=time.time() - start_time,
                success=True,
                metadata={
                    "primary_key": self.get_primary_key(),
                    "watermark_field": self.get_watermark_field(),
                    "columns": list(df.columns),
                    **self.get_run_metadata(),
                },
            )

            logger.info(
                f"Ingestion complete for {dataset_name}: {len(df)} rows",
                extra=result.to_dict(),
            )

            # Store the dataframe for downstream access
            self._data = df

            return result

        except Exception as e:
            logger.error(
                f"Ingestion failed for {dataset_name}: {e}",
                extra={"dataset": dataset_name, "error": str(e)},
                exc_info=True,
            )

            return IngestionResult(
                dataset=dataset_name,
                execution_date=execution_date,
                rows_fetched=0,
                watermark_start=watermark_start,
                watermark_end=None,
                duration_seconds=time.time() - start_time,
                success=False,
                error_message=str(e),
                metadata=self.get_run_metadata(),
            )

    def get_data(self) -> pd.DataFrame | None:
        """Get the most recently fetched data."""
        return getattr(self, "_data", None)
