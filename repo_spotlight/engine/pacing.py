"""Pacing and backoff for sequential traffic fetches.

The pacing state is one counter (consecutive errors) plus the index of the
repository about to be fetched. Callers ask for the pre-fetch delay, then
report the outcome of the fetch.
"""

import math
import random

from repo_spotlight.engine.constants import (
    BACKOFF_BASE,
    MAX_CONSECUTIVE_ERRORS,
    PERIODIC_PAUSE_FACTOR,
    PERIODIC_PAUSE_INTERVAL,
    PERIODIC_PAUSE_JITTER_MS,
)
from repo_spotlight.engine.models import PacingDecision


class CircuitBreakerOpenError(Exception):
    """Raised when consecutive fetch failures reach the abort threshold."""

    def __init__(self, consecutive_errors: int) -> None:
        """Initialize the error.

        Args:
            consecutive_errors: Failure count that tripped the breaker.
        """
        self.consecutive_errors = consecutive_errors
        super().__init__(f"Too many consecutive errors ({consecutive_errors})")


def is_periodic_pause_index(index: int) -> bool:
    """Check whether a listing index triggers the periodic pause.

    Args:
        index: 0-based index in the original, unfiltered listing.

    Returns:
        True for every PERIODIC_PAUSE_INTERVAL-th index after the first.
    """
    return index > 0 and index % PERIODIC_PAUSE_INTERVAL == 0


class PacingStateMachine:
    """Tracks consecutive failures and computes delays for one run.

    Delays:
        - base delay before every fetch;
        - periodic pause in [factor * delay, factor * delay + jitter)
          replacing the base delay every PERIODIC_PAUSE_INTERVAL repositories;
        - backoff of delay * BACKOFF_BASE ** consecutive_errors after a failure.
    """

    def __init__(
        self,
        delay_ms: int,
        rng: random.Random | None = None,
        max_consecutive_errors: int = MAX_CONSECUTIVE_ERRORS,
    ) -> None:
        """Initialize pacing state.

        Args:
            delay_ms: Configured base delay in milliseconds.
            rng: Random source for periodic-pause jitter.
            max_consecutive_errors: Failures in a row that abort the run.
        """
        self._delay_ms = delay_ms
        self._rng = rng or random.Random()  # noqa: S311
        self._max_consecutive_errors = max_consecutive_errors
        self._consecutive_errors = 0

    @property
    def consecutive_errors(self) -> int:
        """Get the current consecutive failure count."""
        return self._consecutive_errors

    def pre_fetch_delay(self, index: int) -> PacingDecision:
        """Compute the wait before fetching the repository at ``index``.

        Args:
            index: 0-based index in the original, unfiltered listing.

        Returns:
            PacingDecision with the delay and whether it is a periodic pause.
        """
        if is_periodic_pause_index(index):
            jitter = self._rng.random() * PERIODIC_PAUSE_JITTER_MS
            delay_ms = math.floor(jitter + self._delay_ms * PERIODIC_PAUSE_FACTOR)
            return PacingDecision(delay_ms=delay_ms, periodic=True)
        return PacingDecision(delay_ms=self._delay_ms)

    def record_success(self) -> None:
        """Reset the failure streak after a successful fetch."""
        self._consecutive_errors = 0

    def record_failure(self) -> int:
        """Register a failed fetch.

        Returns:
            Backoff delay in milliseconds to sleep before continuing.

        Raises:
            CircuitBreakerOpenError: When the failure streak reaches the limit.
        """
        self._consecutive_errors += 1
        if self._consecutive_errors >= self._max_consecutive_errors:
            raise CircuitBreakerOpenError(self._consecutive_errors)
        return int(self._delay_ms * BACKOFF_BASE**self._consecutive_errors)
