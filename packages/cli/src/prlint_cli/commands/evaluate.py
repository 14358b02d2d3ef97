"""evaluate command — test a title locally without touching GitHub."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape

console = Console()


@click.command("evaluate")
@click.argument("title")
@click.option("--title-regex", default=None, help="Title pattern. Overrides the config file and action input.")
@click.pass_context
def evaluate_cmd(ctx, title: str, title_regex: str | None):
    """Check TITLE against the configured pattern. Exits 1 on a mismatch."""
    from prlint_core.config import ConfigError, build_policy, load_config
    from prlint_core.evaluator import evaluate

    config_path = ctx.obj.get("config_path", ".prlint.yml") if ctx.obj else ".prlint.yml"
    try:
        policy = build_policy(load_config(config_path, cli_overrides={"title-regex": title_regex}))
    except ConfigError as e:
        raise click.UsageError(str(e))

    if evaluate(policy.pattern, title):
        console.print(f"[green]Title matches[/green] {escape(policy.pattern.pattern)}")
        return

    console.print(f"[red]Title does not match[/red] {escape(policy.pattern.pattern)}")
    console.print(escape(policy.rendered_comment))
    ctx.exit(1)
