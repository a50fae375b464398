"""Unit tests for engine models and metrics."""

import pytest
from pydantic import ValidationError

from repo_spotlight.engine import RankedEntry, RunMetrics


class TestRankedEntry:
    """Tests for RankedEntry."""

    def test_summary_line(self) -> None:
        """Summary lines are numbered and show both counts."""
        entry = RankedEntry(name="me/repo3", views=20, uniques=7)

        assert entry.to_summary_line(1) == "1. me/repo3 - 20 views (7 unique)"

    def test_serializes_to_name_views_uniques(self) -> None:
        """model_dump() gives the documented output shape."""
        entry = RankedEntry(name="me/a", views=3)

        assert entry.model_dump() == {"name": "me/a", "views": 3, "uniques": 0}

    def test_negative_views_rejected(self) -> None:
        """View counts are non-negative."""
        with pytest.raises(ValidationError):
            RankedEntry(name="me/a", views=-1)


class TestRunMetrics:
    """Tests for RunMetrics."""

    def test_counters(self) -> None:
        """Recorded events are reflected in to_dict()."""
        metrics = RunMetrics()
        metrics.record_listed(4)
        metrics.record_skipped()
        metrics.record_traffic_call()
        metrics.record_traffic_call()
        metrics.record_traffic_failure()
        metrics.record_backoff(600)
        metrics.record_backoff(1200)
        metrics.record_entries_out(1)

        result = metrics.to_dict()

        assert result["repos_listed"] == 4
        assert result["repos_skipped"] == 1
        assert result["traffic_calls"] == 2
        assert result["traffic_failures"] == 1
        assert result["backoff_ms_total"] == 1800
        assert result["entries_out"] == 1
        assert result["periodic_pauses"] == 0
