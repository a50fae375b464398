"""Rank a user's or organization's repositories by traffic."""

from repo_spotlight.config import SpotlightConfig
from repo_spotlight.engine import RankedEntry, RepositoryRanker, rank
from repo_spotlight.errors import SpotlightError, SpotlightErrorKind
from repo_spotlight.provider import (
    RepositoryProvider,
    RepositorySummary,
    TrafficSample,
)
from repo_spotlight.sink import LoggingSink, StructlogSink


__version__ = "0.1.0"


__all__ = [
    "LoggingSink",
    "RankedEntry",
    "RepositoryProvider",
    "RepositoryRanker",
    "RepositorySummary",
    "SpotlightConfig",
    "SpotlightError",
    "SpotlightErrorKind",
    "StructlogSink",
    "TrafficSample",
    "__version__",
    "rank",
]
