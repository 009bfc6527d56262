"""
Activity Pulse - Base Classes for Datasets

Abstract base classes that dataset implementations inherit from:
- Data ingestion (BaseIngester)
- Data preprocessing (BasePreprocessor)
"""

from activity_pulse.datasets.base.ingester import BaseIngester, IngestionResult
from activity_pulse.datasets.base.preprocessor import BasePreprocessor, PreprocessingResult

__all__ = [
    "BaseIngester",
    "IngestionResult",
    "BasePreprocessor",
    "PreprocessingResult",
]
