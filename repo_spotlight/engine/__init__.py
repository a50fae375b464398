"""Repository ranking engine.

Fetches a subject's repositories, filters them, queries traffic one
repository at a time with pacing and backoff, and returns the top entries
by view count.
"""

from repo_spotlight.engine.metrics import RunMetrics
from repo_spotlight.engine.models import PacingDecision, RankedEntry
from repo_spotlight.engine.pacing import (
    CircuitBreakerOpenError,
    PacingStateMachine,
    is_periodic_pause_index,
)
from repo_spotlight.engine.ranker import RepositoryRanker, rank
from repo_spotlight.engine.state_machine import (
    RunState,
    RunStateMachine,
    RunStateTransitionError,
)


__all__ = [
    "CircuitBreakerOpenError",
    "PacingDecision",
    "PacingStateMachine",
    "RankedEntry",
    "RepositoryRanker",
    "RunMetrics",
    "RunState",
    "RunStateMachine",
    "RunStateTransitionError",
    "is_periodic_pause_index",
    "rank",
]
