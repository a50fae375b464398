"""Repository ranking engine.

Lists a subject's repositories, filters forks and archived repositories,
fetches per-repository traffic one call at a time with pacing and backoff,
then returns the top entries by view count.
"""

import random
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import structlog

from repo_spotlight.config import SpotlightConfig
from repo_spotlight.engine.constants import COMPONENT_ENGINE
from repo_spotlight.engine.metrics import RunMetrics
from repo_spotlight.engine.models import RankedEntry
from repo_spotlight.engine.pacing import CircuitBreakerOpenError, PacingStateMachine
from repo_spotlight.engine.state_machine import RunState, RunStateMachine
from repo_spotlight.errors import SpotlightError, status_code_of
from repo_spotlight.provider import RepositoryProvider, RepositorySummary
from repo_spotlight.sink import LoggingSink, StructlogSink


logger = structlog.get_logger()

ConfigInput = SpotlightConfig | Mapping[str, Any] | None
SleepFn = Callable[[float], None]


class RepositoryRanker:
    """Ranks a subject's repositories by traffic.

    Implements a state machine flow:
        PENDING -> VALIDATED -> ENUMERATED -> FETCHING -> RANKED

    Any fatal error moves the run to FAILED and propagates as a
    SpotlightError; no partial ranking is returned.
    """

    def __init__(
        self,
        provider: RepositoryProvider,
        sink: LoggingSink | None = None,
        sleep: SleepFn = time.sleep,
        rng: random.Random | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the ranker.

        Args:
            provider: Source of repository listings and traffic samples.
            sink: Destination for operator-facing messages.
            sleep: Blocking sleep taking seconds; injectable for tests.
            rng: Random source for periodic-pause jitter.
            run_id: Run identifier for logging.
        """
        self._provider = provider
        self._sink = sink or StructlogSink()
        self._sleep = sleep
        self._rng = rng
        self._run_id = run_id
        self._metrics = RunMetrics()
        self._state = RunState.RUN_PENDING
        self._log = logger.bind(component=COMPONENT_ENGINE, run_id=run_id)

    @property
    def metrics(self) -> RunMetrics:
        """Get metrics of the most recent run."""
        return self._metrics

    @property
    def state(self) -> RunState:
        """Get the final state of the most recent run."""
        return self._state

    def rank(self, subject: str, config: ConfigInput = None) -> list[RankedEntry]:
        """Rank the subject's repositories by view count.

        Args:
            subject: User or organization login.
            config: SpotlightConfig, raw mapping of values, or None for defaults.

        Returns:
            Entries sorted by views descending, at most ``config.limit`` long.
            Empty when no repository met the criteria.

        Raises:
            SpotlightError: VALIDATION for bad input, PROVIDER for enumeration
                failure or too many consecutive traffic failures.
        """
        self._metrics = RunMetrics()
        state_machine = RunStateMachine(subject=str(subject), run_id=self._run_id)

        try:
            spotlight_config = self._validate(subject, config)
            state_machine.to_validated()
            self._announce(subject, spotlight_config)

            repos = self._enumerate(subject)
            state_machine.to_enumerated()

            state_machine.to_fetching()
            collected = self._collect(repos, spotlight_config)

            top = self._aggregate(collected, spotlight_config)
            state_machine.to_ranked()
        except SpotlightError as e:
            state_machine.to_failed()
            self._log.warning("run_failed", **e.to_dict())
            raise
        except Exception as e:
            state_machine.to_failed()
            self._log.error("run_failed", error_type=type(e).__name__, error=str(e))
            raise
        finally:
            self._state = state_machine.state

        self._log.debug("run_complete", **self._metrics.to_dict())
        return top

    def _validate(self, subject: str, config: ConfigInput) -> SpotlightConfig:
        """Validate the subject and configuration.

        Args:
            subject: User or organization login.
            config: Raw or validated configuration.

        Returns:
            Validated configuration.
        """
        if not isinstance(subject, str) or not subject.strip():
            raise SpotlightError.validation("Username is required")

        # model_copy(update=...) and model_construct() bypass validation
        if isinstance(config, SpotlightConfig):
            return SpotlightConfig.from_values(config.model_dump())
        if config is None:
            return SpotlightConfig()
        if isinstance(config, Mapping):
            return SpotlightConfig.from_values(config)

        msg = f"Invalid configuration: {config!r}"
        raise SpotlightError.validation(msg)

    def _announce(self, subject: str, config: SpotlightConfig) -> None:
        """Emit the run parameters."""
        self._sink.info(f"Fetching repositories for {subject}...")
        self._sink.info(f"Delay between traffic API calls: {config.delay}ms")
        self._sink.info(f"Limit: {config.limit}")
        self._sink.info(f"Minimum views: {config.min_views}")
        self._sink.info(f"Include forks: {str(config.include_forks).lower()}")
        self._sink.info(f"Include archived: {str(config.include_archived).lower()}")

    def _enumerate(self, subject: str) -> list[RepositorySummary]:
        """Fetch the flattened repository listing.

        Args:
            subject: User or organization login.

        Returns:
            Repositories in listing order.

        Raises:
            SpotlightError: PROVIDER error wrapping the underlying failure.
        """
        try:
            repos = list(self._provider.list_repositories(subject))
        except SpotlightError:
            raise
        except Exception as e:
            msg = f"Failed to fetch repositories: {_describe(e)}"
            raise SpotlightError.provider(msg, status_code_of(e)) from e

        self._metrics.record_listed(len(repos))
        return repos

    def _collect(
        self,
        repos: Sequence[RepositorySummary],
        config: SpotlightConfig,
    ) -> list[RankedEntry]:
        """Fetch traffic for every repository that passes the filters.

        Args:
            repos: Repositories in listing order.
            config: Validated configuration.

        Returns:
            Entries meeting the view floor, in listing order.
        """
        pacing = PacingStateMachine(config.delay, rng=self._rng)
        collected: list[RankedEntry] = []
        total = len(repos)

        for index, repo in enumerate(repos):
            if not _passes_filters(repo, config):
                self._metrics.record_skipped()
                continue

            decision = pacing.pre_fetch_delay(index)
            if decision.periodic:
                self._metrics.record_periodic_pause()
                self._sink.info(
                    f"Auto delay ({decision.delay_ms}ms) [repo {index}/{total}]"
                )
            self._sleep_ms(decision.delay_ms)

            self._metrics.record_traffic_call()
            try:
                traffic = self._provider.get_traffic(repo.owner, repo.name)
            except Exception as e:  # noqa: BLE001
                self._metrics.record_traffic_failure()
                try:
                    backoff_ms = pacing.record_failure()
                except CircuitBreakerOpenError as breaker:
                    raise SpotlightError.provider(
                        str(breaker), status_code_of(e)
                    ) from e

                self._sink.warning(f"Skipped {repo.full_name}: {_describe(e)}")
                self._metrics.record_backoff(backoff_ms)
                self._sleep_ms(backoff_ms)
                continue

            pacing.record_success()
            if traffic.count >= config.min_views:
                collected.append(
                    RankedEntry(
                        name=repo.full_name,
                        views=traffic.count,
                        uniques=traffic.uniques,
                    )
                )
            else:
                self._metrics.record_below_min_views()

        return collected

    def _aggregate(
        self,
        collected: list[RankedEntry],
        config: SpotlightConfig,
    ) -> list[RankedEntry]:
        """Sort by views, truncate to the limit and emit the summary.

        Args:
            collected: Entries meeting the view floor.
            config: Validated configuration.

        Returns:
            Top entries; empty if nothing was collected.
        """
        if not collected:
            self._sink.warning("No repositories met the view criteria.")
            self._metrics.record_entries_out(0)
            return []

        # sorted() is stable, so equal view counts keep listing order
        ranked = sorted(collected, key=lambda entry: entry.views, reverse=True)
        top = ranked[: config.limit]
        self._metrics.record_entries_out(len(top))

        lines = "\n".join(
            entry.to_summary_line(rank) for rank, entry in enumerate(top, start=1)
        )
        self._sink.info(f"Top {len(top)} repositories by views:\n{lines}")
        return top

    def _sleep_ms(self, delay_ms: int) -> None:
        """Sleep for a number of milliseconds."""
        self._sleep(delay_ms / 1000.0)


def rank(
    provider: RepositoryProvider,
    subject: str,
    config: ConfigInput = None,
    *,
    sink: LoggingSink | None = None,
    sleep: SleepFn = time.sleep,
    rng: random.Random | None = None,
) -> list[RankedEntry]:
    """Rank a subject's repositories by traffic.

    Convenience wrapper around RepositoryRanker for a single run.

    Args:
        provider: Source of repository listings and traffic samples.
        subject: User or organization login.
        config: SpotlightConfig, raw mapping of values, or None for defaults.
        sink: Destination for operator-facing messages.
        sleep: Blocking sleep taking seconds.
        rng: Random source for periodic-pause jitter.

    Returns:
        Entries sorted by views descending.
    """
    ranker = RepositoryRanker(provider, sink=sink, sleep=sleep, rng=rng)
    return ranker.rank(subject, config)


def _passes_filters(repo: RepositorySummary, config: SpotlightConfig) -> bool:
    """Check the fork/archived inclusion filters."""
    if repo.archived and not config.include_archived:
        return False
    return not (repo.fork and not config.include_forks)


def _describe(error: BaseException) -> str:
    """Render an exception for operator messages."""
    return str(error) or type(error).__name__
