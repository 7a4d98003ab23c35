"""Command-line entry points used from GitHub Actions steps."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import click

from .changes import check_file_changed
from .config import get_settings
from .errors import NotifierError
from .logging_config import configure_logging
from .notify import PullRequestNotifier


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _write_outputs(**outputs: bool) -> None:
    lines = [f"{name}={_flag(value)}" for name, value in outputs.items()]
    for line in lines:
        click.echo(line)

    output_file = os.environ.get("GITHUB_OUTPUT")
    if output_file:
        with open(output_file, "a", encoding="utf-8") as fp:
            fp.writelines(f"{line}\n" for line in lines)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Slack notifications for GitHub pull requests."""

    configure_logging(logging.DEBUG if verbose else logging.INFO)


@cli.command()
@click.option("--event-name", envvar="GITHUB_EVENT_NAME", required=True, help="GitHub event name.")
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the event payload JSON.",
)
@click.option("--channel", default=None, help="Slack channel id; defaults to SLACK_CHANNEL.")
def notify(event_name: str, event_path: Path, channel: str | None) -> None:
    """Post a Slack notification for the current pull-request event."""

    try:
        settings = get_settings()
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc

    target = channel or settings.channel
    if not target:
        raise click.ClickException("No Slack channel configured: pass --channel or set SLACK_CHANNEL.")

    payload = json.loads(event_path.read_text(encoding="utf-8"))
    PullRequestNotifier(settings).notify(event_name, payload, channel=target)


@cli.command("check-file-changed")
@click.argument("path")
@click.option("--base", "base_ref", required=True, help="Base ref of the pull request, e.g. origin/main.")
@click.option("--head", "head_ref", default="HEAD", show_default=True, help="Head ref of the pull request.")
@click.option("--fail-if-unchanged", is_flag=True, help="Exit with an error when PATH is not in the diff.")
def check_file_changed_command(path: str, base_ref: str, head_ref: str, fail_if_unchanged: bool) -> None:
    """Report whether PATH was created or updated in the pull request's diff."""

    try:
        change = check_file_changed(path, base_ref, head_ref)
    except NotifierError as exc:
        raise click.ClickException(str(exc)) from exc

    _write_outputs(just_been_created=change.just_been_created, has_been_updated=change.has_been_updated)

    if fail_if_unchanged and not change.has_been_updated:
        raise click.ClickException(f"{path} has not been updated in this pull request.")
