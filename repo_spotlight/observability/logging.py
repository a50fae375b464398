"""Structured logging configuration for spotlight runs."""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    level: int = logging.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> None:
    """Configure structlog for the CLI and the pipeline step.

    JSON lines suit pipeline logs; the console renderer is for local runs.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: current stderr, keeping stdout for
            results).
        json_format: Whether to use JSON format (default: True).
    """
    output = output if output is not None else sys.stderr
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_format
        else structlog.dev.ConsoleRenderer(colors=_is_tty(output))
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=level)


def _is_tty(output: TextIO) -> bool:
    isatty = getattr(output, "isatty", None)
    return bool(isatty and isatty())


def level_for(verbose: bool) -> int:
    """Map the verbose flag to a logging level."""
    return logging.DEBUG if verbose else logging.INFO


def bind_run_context(run_id: str, subject: str | None = None) -> None:
    """Bind run context to all subsequent log messages.

    Args:
        run_id: Unique run identifier.
        subject: Subject being ranked, if known.
    """
    if subject:
        structlog.contextvars.bind_contextvars(run_id=run_id, subject=subject)
    else:
        structlog.contextvars.bind_contextvars(run_id=run_id)


def clear_run_context() -> None:
    """Clear run context from log messages."""
    structlog.contextvars.unbind_contextvars("run_id", "subject")
