"""Command-line entry point for ranking repositories by traffic."""

import json
import sys
import time
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

import click
import structlog

from repo_spotlight import __version__
from repo_spotlight.actions import ActionsSink, set_failed, write_results
from repo_spotlight.config import (
    DEFAULT_DELAY_MS,
    DEFAULT_LIMIT,
    DEFAULT_MIN_VIEWS,
    SpotlightConfig,
)
from repo_spotlight.engine import RankedEntry, RepositoryRanker
from repo_spotlight.errors import SpotlightError
from repo_spotlight.github import GitHubRepositoryProvider
from repo_spotlight.observability import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    level_for,
)
from repo_spotlight.settings import AUTHENTICATED_USER_LABEL, AppSettings, get_settings
from repo_spotlight.sink import LoggingSink, StructlogSink


logger = structlog.get_logger()

COMPONENT_CLI = "cli"
TOKEN_REQUIRED_MESSAGE = "GitHub token is required. Set GH_SPOTLIGHT_TOKEN or use --token"


def _fail(message: str, settings: AppSettings) -> NoReturn:
    """Report a fatal error and exit with status 1.

    Args:
        message: Error message for the operator.
        settings: Resolved settings (decides whether to annotate the step).
    """
    click.echo(f"Error: {message}", err=True)
    if settings.is_github_actions:
        set_failed(message)
    sys.exit(1)


def _echo_results(entries: Sequence[RankedEntry], json_output: bool) -> None:
    """Print the ranking to stdout."""
    if json_output:
        click.echo(json.dumps([entry.model_dump() for entry in entries], indent=2))
        return

    for rank, entry in enumerate(entries, start=1):
        click.echo(entry.to_summary_line(rank))


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.option(
    "--user",
    "user",
    type=str,
    default=None,
    help="User or organization whose repositories are ranked "
    "(default: $GITHUB_USER, then $GITHUB_ACTOR).",
)
@click.option(
    "--token",
    "token",
    type=str,
    default=None,
    help="GitHub token (GH_SPOTLIGHT_TOKEN and GITHUB_TOKEN take precedence).",
)
@click.option(
    "--limit",
    "limit",
    type=str,
    default=None,
    help=f"Max repositories to show (default: {DEFAULT_LIMIT}).",
)
@click.option(
    "--delay",
    "delay",
    type=str,
    default=None,
    help=f"Delay between traffic API calls in ms (default: {DEFAULT_DELAY_MS}).",
)
@click.option(
    "--min-views",
    "min_views",
    type=str,
    default=None,
    help=f"Skip repos with fewer views (default: {DEFAULT_MIN_VIEWS}).",
)
@click.option(
    "--include-forks/--exclude-forks",
    "include_forks",
    default=None,
    help="Include forked repositories (default: exclude).",
)
@click.option(
    "--include-archived/--exclude-archived",
    "include_archived",
    default=None,
    help="Include archived repositories (default: exclude).",
)
@click.option(
    "--authenticated",
    is_flag=True,
    help="Rank the token owner's repositories, including private ones.",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Print the ranking as JSON.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON format for logs (default: false).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def main(  # noqa: PLR0913
    user: str | None,
    token: str | None,
    limit: str | None,
    delay: str | None,
    min_views: str | None,
    include_forks: bool | None,
    include_archived: bool | None,
    authenticated: bool,
    json_output: bool,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Rank repositories by traffic (views) and show the top N.

    Options can also come from SPOTLIGHT_<KEY> overrides or GitHub Actions
    inputs (INPUT_<KEY>), which take precedence over flags.
    """
    start_time = time.perf_counter()
    run_id = str(uuid.uuid4())

    configure_logging(level=level_for(verbose), json_format=json_logs)
    settings = get_settings()

    resolved_token = settings.resolve_token(token)
    if not resolved_token:
        _fail(TOKEN_REQUIRED_MESSAGE, settings)

    subject = settings.resolve_subject(user)
    if subject is None and authenticated:
        subject = AUTHENTICATED_USER_LABEL
    bind_run_context(run_id, subject)

    raw_values = settings.resolve_config_values(
        {
            "delay": delay,
            "limit": limit,
            "min_views": min_views,
            "include_forks": include_forks,
            "include_archived": include_archived,
        }
    )

    try:
        _run(
            settings,
            token=resolved_token,
            subject=subject or "",
            raw_values=raw_values,
            authenticated=authenticated,
            json_output=json_output,
            run_id=run_id,
            start_time=start_time,
        )
    finally:
        clear_run_context()


def _run(  # noqa: PLR0913
    settings: AppSettings,
    *,
    token: str,
    subject: str,
    raw_values: dict[str, object],
    authenticated: bool,
    json_output: bool,
    run_id: str,
    start_time: float,
) -> None:
    """Validate options, rank the subject's repositories and publish results."""
    log = logger.bind(component=COMPONENT_CLI, run_id=run_id)
    sink: LoggingSink = ActionsSink() if settings.is_github_actions else StructlogSink()

    try:
        config = SpotlightConfig.from_values(raw_values)
        log.info("spotlight_run_started", authenticated=authenticated, **config.model_dump())

        with GitHubRepositoryProvider(
            token, authenticated_listing=authenticated
        ) as provider:
            ranker = RepositoryRanker(provider, sink=sink, run_id=run_id)
            entries = ranker.rank(subject, config)
    except SpotlightError as e:
        log.warning("spotlight_run_failed", **e.to_dict())
        _fail(e.message, settings)

    if json_output or not settings.is_github_actions:
        _echo_results(entries, json_output)

    if settings.is_github_actions and settings.github_output:
        write_results(Path(settings.github_output), entries)

    elapsed = time.perf_counter() - start_time
    log.info("spotlight_run_complete", entries=len(entries), **ranker.metrics.to_dict())
    sink.info(f"Completed in {elapsed:.2f}s")
