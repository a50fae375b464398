"""Logging sink used by the ranking engine for operator-facing messages."""

from typing import Protocol, runtime_checkable

import structlog


logger = structlog.get_logger()


@runtime_checkable
class LoggingSink(Protocol):
    """Protocol for informational and warning output.

    Injected into the engine so runs can be observed in tests without
    patching module-level loggers.
    """

    def info(self, message: str) -> None:
        """Emit an informational message."""
        ...

    def warning(self, message: str) -> None:
        """Emit a warning message."""
        ...


class StructlogSink:
    """LoggingSink backed by a bound structlog logger."""

    def __init__(self, log: structlog.typing.FilteringBoundLogger | None = None) -> None:
        """Initialize the sink.

        Args:
            log: Bound logger to forward to; defaults to the spotlight logger.
        """
        self._log = log if log is not None else logger.bind(component="spotlight")

    def info(self, message: str) -> None:
        """Emit an informational message."""
        self._log.info(message)

    def warning(self, message: str) -> None:
        """Emit a warning message."""
        self._log.warning(message)
