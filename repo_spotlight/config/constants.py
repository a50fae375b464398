"""Defaults and bounds for the spotlight configuration."""

from typing import Final


# Pacing delay between traffic calls, in milliseconds
DEFAULT_DELAY_MS: Final[int] = 300
MIN_DELAY_MS: Final[int] = 100
MAX_DELAY_MS: Final[int] = 5000

# Maximum number of ranked entries returned
DEFAULT_LIMIT: Final[int] = 6
MIN_LIMIT: Final[int] = 1
MAX_LIMIT: Final[int] = 100

# Inclusion floor on total view count (no upper bound)
DEFAULT_MIN_VIEWS: Final[int] = 0
MIN_MIN_VIEWS: Final[int] = 0

DEFAULT_INCLUDE_FORKS: Final[bool] = False
DEFAULT_INCLUDE_ARCHIVED: Final[bool] = False

# Inclusive (min, max) bounds per numeric field; None means unbounded
NUMERIC_BOUNDS: Final[dict[str, tuple[int, int | None]]] = {
    "delay": (MIN_DELAY_MS, MAX_DELAY_MS),
    "limit": (MIN_LIMIT, MAX_LIMIT),
    "min_views": (MIN_MIN_VIEWS, None),
}

# Accepted spellings of configuration keys, mapped to canonical field names
KEY_ALIASES: Final[dict[str, str]] = {
    "delay": "delay",
    "limit": "limit",
    "min_views": "min_views",
    "minViews": "min_views",
    "include_forks": "include_forks",
    "includeForks": "include_forks",
    "include_archived": "include_archived",
    "includeArchived": "include_archived",
}
