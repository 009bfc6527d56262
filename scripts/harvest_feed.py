"""
OpenActive Feed Harvest Script
Walks one RPDE feed, flattens its items and prints a summary
"""

import argparse
import json
import logging

from activity_pulse.datasets.openactive import OpenActiveFeedIngester, OpenActivePreprocessor
from activity_pulse.shared.config import get_config

config = get_config()

LOG_FORMATS = {
    "text": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "json": json.dumps(
        {
            "timestamp": "%(asctime)s",
            "level": "%(levelname)s",
            "logger": "%(name)s",
            "message": "%(message)s",
        }
    ),
}

logging.basicConfig(
    level=config.logging.level,
    format=LOG_FORMATS[config.logging.format],
)
logger = logging.getLogger(__name__)


def harvest_feed(data_url: str, execution_date: str, output_path: str | None = None):
    """
    Harvest one feed and optionally save the flattened items.

    Args:
        data_url: First page URL of the feed
        execution_date: Run date in YYYY-MM-DD format
        output_path: Where to save the flattened items as JSON lines

    Returns:
        Tuple of (ingestion result, preprocessing result)
    """
    ingester = OpenActiveFeedIngester(data_url, config)
    ingestion = ingester.run(execution_date)
    if not ingestion.success:
        raise RuntimeError(f"Ingestion failed: {ingestion.error_message}")

    preprocessor = OpenActivePreprocessor(config)
    preprocessing = preprocessor.run(ingester.get_data(), execution_date)
    if not preprocessing.success:
        raise RuntimeError(f"Preprocessing failed: {preprocessing.error_message}")

    if output_path:
        df = preprocessor.get_data().drop(columns=["data"])
        df.to_json(output_path, orient="records", lines=True)
        logger.info(f"Flattened items saved to {output_path}")

    return ingestion, preprocessing


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Harvest an OpenActive RPDE feed")
    parser.add_argument("data_url")
    parser.add_argument("--date", required=True, help="Execution date (YYYY-MM-DD)")
    parser.add_argument("--output", default=None)
    args = parser.parse_args()

    ingestion, preprocessing = harvest_feed(args.data_url, args.date, args.output)

    print("\n=== Harvest Results ===")
    print(f"Items fetched: {ingestion.rows_fetched}")
    print(f"Pages fetched: {ingestion.metadata['pages_fetched']}")
    print(f"Stopped because: {ingestion.metadata['stop_reason']}")
    print(f"Resume from: {ingestion.metadata['last_url']}")
    print(f"Items kept: {preprocessing.rows_output}")
    print(f"Drop reasons: {preprocessing.drop_reasons}")
