"""check command — lint the PR title and reconcile the bot's review."""

from __future__ import annotations

import os

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prlint_core.gh.client import GitHubClient
from prlint_core.gh.event import load_event_context
from prlint_core.models import Outcome, PullRequestRef, RunReport
from prlint_core.runner import run_check

console = Console()

_OUTCOME_STYLE = {
    Outcome.SUCCESS: "green",
    Outcome.FALLBACK: "yellow",
    Outcome.ABANDONED: "red",
    Outcome.SKIPPED: "dim",
}


def escape_command_data(message: str) -> str:
    """Escape a message for use in an Actions workflow command (``::error::``)."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def print_report(report: RunReport) -> None:
    verdict = "[green]matches[/green]" if report.matched else "[red]does not match[/red]"
    console.print(f"PR #{report.ref.number} title {verdict}: {escape(repr(report.title))}")
    if not report.steps:
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Step")
    table.add_column("Outcome", width=10)
    table.add_column("Detail")
    for step in report.steps:
        style = _OUTCOME_STYLE.get(step.outcome, "white")
        table.add_row(step.action, f"[{style}]{step.outcome.value}[/{style}]", escape(step.detail))
    console.print(table)


@click.command("check")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to the workflow's repository.")
@click.option(
    "--pr",
    "pr_number",
    type=int,
    default=None,
    help="Pull request number. Defaults to the PR in the workflow's event payload.",
)
@click.option("--title", default=None, help="Title to check instead of the PR's current title.")
@click.option(
    "--event-path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to the event payload JSON. Defaults to $GITHUB_EVENT_PATH.",
)
@click.option("--title-regex", default=None, help="Title pattern. Overrides the config file and action input.")
@click.pass_context
def check_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    title: str | None,
    event_path: str | None,
    title_regex: str | None,
):
    """Check a pull request title against the configured pattern.

    On a mismatch the bot's review is created or updated, and the step fails
    if on-failed-regex-fail-action is set. On a match the review is dismissed
    and old bot feedback is minimized.

    \b
    Inputs are read from INPUT_* environment variables (as set by GitHub
    Actions) and from the config file.
    """
    from prlint_core.config import ConfigError, build_policy, load_config
    from prlint_cli.auth import resolve_github_token

    config_path = ctx.obj.get("config_path", ".prlint.yml") if ctx.obj else ".prlint.yml"
    try:
        config = load_config(config_path, cli_overrides={"title-regex": title_regex})
        policy = build_policy(config)
    except ConfigError as e:
        raise click.UsageError(str(e))

    event = load_event_context(event_path)
    repo = repo or event.repository
    if not repo:
        raise click.UsageError("No repository given. Pass --repo or run inside a GitHub Actions workflow.")
    if pr_number is None and event.number is None:
        raise click.UsageError("No pull request found in the event payload. Pass --pr.")
    try:
        ref = PullRequestRef.parse(repo, pr_number if pr_number is not None else event.number)
    except ValueError as e:
        raise click.UsageError(str(e))

    token = resolve_github_token(config.get("repo-token"))
    if not token:
        raise click.UsageError("No GitHub token found. Set the repo-token input or GITHUB_TOKEN, or run `gh auth login`.")

    client = GitHubClient.from_token(token, base_url=os.environ.get("GITHUB_API_URL"))

    if title is None:
        # An explicit --pr means there's no payload title to trust.
        title = client.get_title(ref) if pr_number is not None else (event.title or "")

    report = run_check(client, ref, title, policy)
    print_report(report)

    if report.failed:
        message = report.failure_message or f"PR title does not match {policy.pattern.pattern}"
        click.echo(f"::error::{escape_command_data(message)}")
        ctx.exit(1)
