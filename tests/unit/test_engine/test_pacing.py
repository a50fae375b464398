"""Unit tests for pacing and backoff."""

import random

import pytest

from repo_spotlight.engine.pacing import (
    CircuitBreakerOpenError,
    PacingStateMachine,
    is_periodic_pause_index,
)


class TestPeriodicPauseIndex:
    """Tests for periodic pause index detection."""

    @pytest.mark.parametrize("index", [25, 50, 75, 250])
    def test_multiples_of_25_pause(self, index: int) -> None:
        """Every 25th index after the first pauses."""
        assert is_periodic_pause_index(index) is True

    @pytest.mark.parametrize("index", [0, 1, 24, 26, 49])
    def test_other_indices_do_not_pause(self, index: int) -> None:
        """Index 0 and non-multiples never pause."""
        assert is_periodic_pause_index(index) is False


class TestPreFetchDelay:
    """Tests for pre-fetch delay decisions."""

    def test_base_delay(self) -> None:
        """Ordinary indices use the configured delay."""
        pacing = PacingStateMachine(300)

        decision = pacing.pre_fetch_delay(3)

        assert decision.delay_ms == 300
        assert decision.periodic is False

    def test_periodic_pause_range(self) -> None:
        """Periodic pauses fall in [delay/2, delay/2 + 50)."""
        pacing = PacingStateMachine(1000, rng=random.Random(42))

        for index in (25, 50, 75, 100, 125):
            decision = pacing.pre_fetch_delay(index)
            assert decision.periodic is True
            assert 500 <= decision.delay_ms < 550

    def test_periodic_pause_is_floored(self) -> None:
        """The pause is the floor of jitter plus half the delay."""

        class FixedRandom(random.Random):
            def random(self) -> float:
                return 0.999

        pacing = PacingStateMachine(101, rng=FixedRandom())

        # 0.999 * 50 + 50.5 = 100.45
        assert pacing.pre_fetch_delay(25).delay_ms == 100


class TestFailureTracking:
    """Tests for consecutive-failure tracking and backoff."""

    def test_backoff_doubles(self) -> None:
        """Backoff is delay * 2**n for the n-th consecutive failure."""
        pacing = PacingStateMachine(300)

        assert pacing.record_failure() == 600
        assert pacing.record_failure() == 1200
        assert pacing.consecutive_errors == 2

    def test_success_resets_streak(self) -> None:
        """A success resets the failure count."""
        pacing = PacingStateMachine(300)
        pacing.record_failure()
        pacing.record_failure()

        pacing.record_success()

        assert pacing.consecutive_errors == 0
        assert pacing.record_failure() == 600

    def test_breaker_opens_on_third_failure(self) -> None:
        """The third consecutive failure raises."""
        pacing = PacingStateMachine(300)
        pacing.record_failure()
        pacing.record_failure()

        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            pacing.record_failure()

        assert exc_info.value.consecutive_errors == 3
        assert str(exc_info.value) == "Too many consecutive errors (3)"

    def test_custom_threshold(self) -> None:
        """The threshold can be lowered."""
        pacing = PacingStateMachine(100, max_consecutive_errors=1)

        with pytest.raises(CircuitBreakerOpenError):
            pacing.record_failure()
