"""Constants for the ranking engine."""

from typing import Final


# Abort the run once this many traffic fetches fail in a row
MAX_CONSECUTIVE_ERRORS: Final[int] = 3

# Every Nth repository (original listing index, 0-based) gets a periodic pause
PERIODIC_PAUSE_INTERVAL: Final[int] = 25

# Periodic pause lasts PERIODIC_PAUSE_FACTOR * delay plus up to this jitter
PERIODIC_PAUSE_JITTER_MS: Final[int] = 50
PERIODIC_PAUSE_FACTOR: Final[float] = 0.5

# Backoff after a failed fetch: delay * BACKOFF_BASE ** consecutive_errors
BACKOFF_BASE: Final[int] = 2

COMPONENT_ENGINE: Final[str] = "engine"
