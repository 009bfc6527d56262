"""
Activity Pulse - Pytest Configuration and Fixtures

Shared fixtures for all tests:
- Configuration fixtures
- Feed page fixtures
"""

import copy
import json
import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

# Set test environment
os.environ["AP_ENVIRONMENT"] = "dev"

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def configs_dir(project_root: Path) -> Path:
    """Get the configs directory."""
    return project_root / "configs"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def test_config() -> Any:
    """Get test configuration."""
    from activity_pulse.shared.config import get_config, reload_config

    # Ensure fresh config for tests
    reload_config("dev")
    return get_config("dev")


# =============================================================================
# Feed Fixtures
# =============================================================================


@pytest.fixture
def load_fixture() -> Callable[[str], dict[str, Any]]:
    """Load a JSON fixture by file name. Each call returns a fresh copy."""
    cache: dict[str, dict[str, Any]] = {}

    def _load(name: str) -> dict[str, Any]:
        if name not in cache:
            cache[name] = json.loads((FIXTURES_DIR / name).read_text())
        return copy.deepcopy(cache[name])

    return _load


@pytest.fixture
def feed_body(load_fixture: Callable[[str], dict[str, Any]]) -> dict[str, Any]:
    """Parsed RPDE body with two live items and one deleted item."""
    return load_fixture("multiple-items.json")


@pytest.fixture
def make_page(feed_body: dict[str, Any]) -> Callable[..., Any]:
    """Build a FeedPage for a URL, from the fixture body unless one is given."""
    from activity_pulse.feeds import FeedPage

    def _make(url: str, body: dict[str, Any] | None = None) -> Any:
        return FeedPage.from_json(url, feed_body if body is None else body)

    return _make


# =============================================================================
# Cleanup Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def cleanup_env() -> Generator[None, None, None]:
    """Clean up environment variables after each test."""
    original_env = os.environ.copy()
    yield
    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
