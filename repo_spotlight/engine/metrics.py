"""Metrics collection for a ranking run."""

from dataclasses import asdict, dataclass


@dataclass
class RunMetrics:
    """Counters for one ranking run.

    Created fresh for each run; the engine holds no process-wide metrics.

    Attributes:
        repos_listed: Repositories returned by the provider.
        repos_skipped: Repositories excluded by the fork/archived filters.
        traffic_calls: Traffic requests issued.
        traffic_failures: Traffic requests that raised.
        below_min_views: Successful fetches dropped by the view floor.
        periodic_pauses: Periodic pauses taken.
        backoff_ms_total: Milliseconds slept in failure backoff.
        entries_out: Entries in the returned ranking.
    """

    repos_listed: int = 0
    repos_skipped: int = 0
    traffic_calls: int = 0
    traffic_failures: int = 0
    below_min_views: int = 0
    periodic_pauses: int = 0
    backoff_ms_total: int = 0
    entries_out: int = 0

    def record_listed(self, count: int) -> None:
        """Record the size of the repository listing.

        Args:
            count: Number of repositories listed.
        """
        self.repos_listed = count

    def record_skipped(self) -> None:
        """Record a repository excluded by filters."""
        self.repos_skipped += 1

    def record_traffic_call(self) -> None:
        """Record an issued traffic request."""
        self.traffic_calls += 1

    def record_traffic_failure(self) -> None:
        """Record a failed traffic request."""
        self.traffic_failures += 1

    def record_below_min_views(self) -> None:
        """Record a repository dropped by the view floor."""
        self.below_min_views += 1

    def record_periodic_pause(self) -> None:
        """Record a periodic pause."""
        self.periodic_pauses += 1

    def record_backoff(self, delay_ms: int) -> None:
        """Record a backoff sleep.

        Args:
            delay_ms: Backoff duration in milliseconds.
        """
        self.backoff_ms_total += delay_ms

    def record_entries_out(self, count: int) -> None:
        """Record the number of returned entries.

        Args:
            count: Length of the ranking.
        """
        self.entries_out = count

    def to_dict(self) -> dict[str, int]:
        """Export metrics as dictionary.

        Returns:
            Dictionary representation of all counters.
        """
        return asdict(self)
