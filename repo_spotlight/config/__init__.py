"""Configuration for spotlight ranking runs."""

from repo_spotlight.config.constants import (
    DEFAULT_DELAY_MS,
    DEFAULT_LIMIT,
    DEFAULT_MIN_VIEWS,
    MAX_DELAY_MS,
    MAX_LIMIT,
    MIN_DELAY_MS,
    MIN_LIMIT,
)
from repo_spotlight.config.spotlight import SpotlightConfig


__all__ = [
    "DEFAULT_DELAY_MS",
    "DEFAULT_LIMIT",
    "DEFAULT_MIN_VIEWS",
    "MAX_DELAY_MS",
    "MAX_LIMIT",
    "MIN_DELAY_MS",
    "MIN_LIMIT",
    "SpotlightConfig",
]
