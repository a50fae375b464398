"""Observability module for structured logging."""

from repo_spotlight.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    level_for,
)


__all__ = [
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
    "level_for",
]
