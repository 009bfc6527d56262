from activity_pulse.datasets.openactive.cache import CatalogueError, DatasetRecord, DatasetsCache
from activity_pulse.datasets.openactive.ingest import (
    OpenActiveFeedIngester,
    StopReason,
    ingest_openactive_feed,
)
from activity_pulse.datasets.openactive.preprocess import OpenActivePreprocessor

__all__ = [
    "OpenActiveFeedIngester",
    "StopReason",
    "ingest_openactive_feed",
    "OpenActivePreprocessor",
    "DatasetsCache",
    "DatasetRecord",
    "CatalogueError",
]
