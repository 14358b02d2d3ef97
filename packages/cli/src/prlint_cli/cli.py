"""CLI entry point for prlint.

Commands:
  check     — check a pull request title and reconcile the bot's review
  evaluate  — test a title against the pattern locally, no GitHub calls
"""

from __future__ import annotations

import importlib.metadata
import logging
import os

import click

from prlint_cli.commands.check import check_cmd
from prlint_cli.commands.evaluate import evaluate_cmd

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """DEBUG when asked for, or when the workflow is re-run with debug logging."""
    debug = verbose or os.environ.get("RUNNER_DEBUG") == "1"
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)
    # PyGithub logs every request at DEBUG.
    logging.getLogger("github").setLevel(logging.INFO if debug else logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("prlint"),
    prog_name="prlint",
)
@click.option(
    "--config",
    "config_path",
    default=".prlint.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRLINT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable DEBUG-level logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Pull request title linter for GitHub Actions."""
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(check_cmd)
main.add_command(evaluate_cmd)
