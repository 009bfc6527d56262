"""
Activity Pulse - Configuration Loader

Pydantic-based configuration management with:
- Environment-based configuration (dev/prod)
- YAML file loading with inheritance
- Environment variables for values the YAML files leave unset
- Type validation via Pydantic

Usage:
    from activity_pulse.shared.config import get_config

    config = get_config()  # Uses AP_ENVIRONMENT env var
    config = get_config("dev")  # Explicit environment

    # Access config values
    timeout = config.feeds.timeout_seconds
    window = config.feeds.recency_window
"""

from __future__ import annotations

import os
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# Configuration Models
# =============================================================================


class ProjectConfig(BaseModel):
    """Project metadata configuration."""

    name: str = "activity-pulse"
    version: str = "0.1.0"
    description: str = "OpenActive feed normalization and freshness checks"


class RetriesConfig(BaseModel):
    """Retry configuration for feed requests."""

    # Total requests per page, the first one included
    max_attempts: int = 3


class FeedsConfig(BaseModel):
    """Feed fetching and freshness configuration."""

    timeout_seconds: int = 30
    user_agent: str = "activity-pulse/0.1"
    recency_window_days: int = 365
    max_pages: int = 100
    request_delay_seconds: float = 0.5
    retries: RetriesConfig = Field(default_factory=RetriesConfig)

    @property
    def recency_window(self) -> timedelta:
        """Recency window as a timedelta."""
        return timedelta(days=self.recency_window_days)


class CacheConfig(BaseModel):
    """Dataset catalogue cache configuration."""

    path: str = "data/datasets_cache.json"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["json", "text"] = "text"


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """
    Main configuration class for Activity Pulse.

    Loads configuration from:
    1. YAML files in configs/environments/
    2. Environment variables

    Values from the YAML files take precedence; environment variables
    fill in anything the files leave unset.
    """

    model_config = SettingsConfigDict(
        env_prefix="AP_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Environment
    environment: Literal["dev", "prod"] = "dev"

    # Configuration sections
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    feeds: FeedsConfig = Field(default_factory=FeedsConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"dev", "prod"}
        if v not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v


# =============================================================================
# Configuration Loading Functions
# =============================================================================


def _get_config_dir() -> Path:
    """Get the configuration directory path."""
    # Try relative path from the repository root
    config_dir = Path(__file__).parent.parent.parent / "configs"
    if config_dir.exists():
        return config_dir

    # Try from current working directory
    config_dir = Path.cwd() / "configs"
    if config_dir.exists():
        return config_dir

    raise FileNotFoundError(
        "Could not find configs directory. Ensure you're running from the project root."
    )


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents."""
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_config_for_environment(environment: str) -> dict[str, Any]:
    """Load and merge configuration for a specific environment."""
    env_dir = _get_config_dir() / "environments"

    base_config = _load_yaml_file(env_dir / "base.yaml")
    env_config = _load_yaml_file(env_dir / f"{environment}.yaml")

    # Remove inheritance marker if present
    env_config.pop("_inherit", None)

    merged = _deep_merge(base_config, env_config)
    merged["environment"] = environment

    return merged


@lru_cache(maxsize=4)
def get_config(environment: str | None = None) -> Settings:
    """
    Get configuration for the specified environment.

    Args:
        environment: Environment name (dev, prod).
                    If None, uses AP_ENVIRONMENT env var, defaulting to "dev".

    Returns:
        Settings: Validated configuration object.
    """
    if environment is None:
        environment = os.getenv("AP_ENVIRONMENT", "dev")

    yaml_config = _load_config_for_environment(environment)

    # Create Settings object (also loads env vars)
    return Settings(**yaml_config)


def reload_config(environment: str | None = None) -> Settings:
    """
    Reload configuration, clearing the cache.

    Useful for testing or when config files have changed.
    """
    get_config.cache_clear()
    return get_config(environment)


def get_dataset_config(dataset: str) -> dict[str, Any]:
    """
    Load the per-dataset YAML file from configs/datasets/.

    Returns an empty dict when the file (or the configs directory) is missing,
    so module-level defaults apply.
    """
    try:
        config_dir = _get_config_dir()
    except FileNotFoundError:
        return {}
    return _load_yaml_file(config_dir / "datasets" / f"{dataset}.yaml")
