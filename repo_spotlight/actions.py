"""GitHub Actions input/output binding.

Writes step outputs to the ``$GITHUB_OUTPUT`` file and emits workflow
commands (``::warning::``, ``::error::``) so messages show up as
annotations on the run.
"""

import json
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

import click
import structlog

from repo_spotlight.engine.models import RankedEntry


logger = structlog.get_logger()

OUTPUT_REPOS = "repos"
OUTPUT_COUNT = "count"


def escape_data(message: str) -> str:
    """Escape a message for use in a workflow command.

    Args:
        message: Raw message.

    Returns:
        Message with %, CR and LF percent-encoded.
    """
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def workflow_command(command: str, message: str) -> str:
    """Format a workflow command line.

    Args:
        command: Command name (e.g. 'error', 'warning').
        message: Message body.

    Returns:
        Command line such as ``::error::message``.
    """
    return f"::{command}::{escape_data(message)}"


class ActionsSink:
    """LoggingSink that writes GitHub Actions log lines.

    Info messages are printed as-is; warnings become ``::warning::``
    annotations.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the sink.

        Args:
            stream: Destination stream; defaults to stdout.
        """
        self._stream = stream

    def info(self, message: str) -> None:
        """Emit an informational message."""
        click.echo(message, file=self._stream)

    def warning(self, message: str) -> None:
        """Emit a warning annotation."""
        click.echo(workflow_command("warning", message), file=self._stream)


def set_failed(message: str, stream: TextIO | None = None) -> None:
    """Emit an error annotation for a failed step.

    Args:
        message: Failure message.
        stream: Destination stream; defaults to stdout.
    """
    click.echo(workflow_command("error", message), file=stream)


def set_output(output_path: Path, name: str, value: str) -> None:
    """Append a step output to the ``$GITHUB_OUTPUT`` file.

    Multi-line values use the heredoc form with a random delimiter.

    Args:
        output_path: Path of the output file.
        name: Output name.
        value: Output value.
    """
    if "\n" in value or "\r" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        record = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    else:
        record = f"{name}={value}\n"

    with output_path.open("a", encoding="utf-8") as f:
        f.write(record)


def write_results(output_path: Path, entries: Sequence[RankedEntry]) -> None:
    """Publish the ranking as step outputs.

    Args:
        output_path: Path of the ``$GITHUB_OUTPUT`` file.
        entries: Ranked entries.
    """
    payload = json.dumps([entry.model_dump() for entry in entries])
    set_output(output_path, OUTPUT_REPOS, payload)
    set_output(output_path, OUTPUT_COUNT, str(len(entries)))
    logger.debug(
        "actions_outputs_written",
        component="actions",
        output_path=str(output_path),
        count=len(entries),
    )
