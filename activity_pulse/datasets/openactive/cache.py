"""
Activity Pulse - Datasets Cache

Local JSON store for the catalogue of known OpenActive datasets. Each record
names a dataset and the URL of its feed.

Finding datasets is left to the injected loader; the cache only validates and
persists what the loader returns.

Usage:
    from activity_pulse.datasets.openactive.cache import DatasetsCache

    cache = DatasetsCache(loader=load_catalogue)
    cache.update()  # "OK"
    for dataset in cache.all():
        print(dataset["title"], dataset["data_url"])
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from activity_pulse.shared.config import Settings, get_config

logger = logging.getLogger(__name__)

CatalogueLoader = Callable[[], Iterable[dict[str, Any]]]


class DatasetRecord(BaseModel):
    """One catalogue entry. Keys beyond the required three are kept as-is."""

    model_config = ConfigDict(extra="allow")

    id: str | int
    title: str
    data_url: str


class DatasetsCache:
    """
    Persists the dataset catalogue as a JSON file.

    The file holds the records plus when they were written:
    - datasets: list of record objects, in loader order
    - updated_at: ISO timestamp of the last update()
    """

    STATUS_OK = "OK"

    def __init__(
        self,
        loader: CatalogueLoader,
        config: Settings | None = None,
        path: str | Path | None = None,
    ):
        """
        Initialize the cache.

        Args:
            loader: Callable returning the current catalogue records
            config: Configuration object (uses default if not provided)
            path: Cache file path (uses cache.path from config if not provided)
        """
        self.config = config or get_config()
        self.loader = loader
        self.path = Path(path) if path is not None else Path(self.config.cache.path)

    def update(self) -> str:
        """
        Load the catalogue and persist it.

        Returns:
            "OK" once the records are written

        Raises:
            CatalogueError: If a record lacks id, title or data_url
        """
        records = []
        for index, raw in enumerate(self.loader()):
            try:
                records.append(DatasetRecord.model_validate(raw))
            except ValidationError as e:
                raise CatalogueError(index, e) from e

        payload = {
            "datasets": [record.model_dump() for record in records],
            "updated_at": datetime.now(UTC).isoformat(),
        }

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2))
        tmp_path.replace(self.path)

        logger.info(
            f"Cached {len(records)} datasets",
            extra={"path": str(self.path), "datasets": len(records)},
        )
        return self.STATUS_OK

    def all(self) -> list[dict[str, Any]]:
        """Get the cached records, or [] if update() has never run."""
        if not self.path.exists():
            logger.info(f"No datasets cache at {self.path}")
            return []

        content = json.loads(self.path.read_text())
        return list(content.get("datasets", []))

    def updated_at(self) -> datetime | None:
        """Get when the cache was last written."""
        if not self.path.exists():
            return None
        value = json.loads(self.path.read_text()).get("updated_at")
        return datetime.fromisoformat(value) if value else None


# =============================================================================
# Exception Classes
# =============================================================================


class CatalogueError(ValueError):
    """Raised when a catalogue record is missing required fields."""

    def __init__(self, index: int, error: ValidationError):
        self.index = index
        self.error = error
        fields = ", ".join(str(e["loc"][0]) for e in error.errors() if e["loc"])
        super().__init__(f"Invalid catalogue record at position {index}: {fields}")
