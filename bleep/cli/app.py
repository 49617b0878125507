"""Main Typer application — imports and registers all CLI commands.

Entry point: ``bleep`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from bleep.cli.commands._common import setup_logging
from bleep.cli.commands.build import build_cmd
from bleep.cli.commands.deps import deps_cmd, modules_cmd
from bleep.config import config

app = typer.Typer(
    name="bleep",
    help="bleep: incremental build orchestrator for multi-module front-end trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(config.log_level, "--log-level", help="Logging level."),
) -> None:
    setup_logging(log_level)


# Register subcommands
app.command(name="build", help="Build modules and watch for changes.")(build_cmd)
app.command(name="deps", help="Show the build order for modules.")(deps_cmd)
app.command(name="modules", help="List registered modules.")(modules_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
