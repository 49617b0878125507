"""``bleep build [MODULES...]`` — build and watch a set of modules.

Resolves the closure of the requested modules (every module when none
are given), runs their pre-build steps, and keeps the style, type-check
and bundle watchers running until interrupted.
"""

from __future__ import annotations

import time

import typer
from rich.markup import escape

from bleep.cli.commands._common import console, resolve_provider
from bleep.config import config
from bleep.core.errors import BuildError
from bleep.core.orchestrator import BuildOrchestrator


def build_cmd(
    modules: list[str] | None = typer.Argument(
        None,
        help="Modules to build. Builds every module when omitted.",
    ),
    sass: bool | None = typer.Option(
        None,
        "--sass/--no-sass",
        help="Compile stylesheets.",
    ),
    tsc: bool | None = typer.Option(
        None,
        "--tsc/--no-tsc",
        help="Run the type checker.",
    ),
    esbuild: bool | None = typer.Option(
        None,
        "--esbuild/--no-esbuild",
        help="Bundle after each type-check cycle.",
    ),
    provider: str = typer.Option(
        config.registry_provider,
        "--provider",
        "-p",
        help="Registry provider as 'package.module:attribute'.",
    ),
    poll: float = typer.Option(
        0.5,
        "--poll",
        help="Seconds between watcher liveness checks.",
    ),
) -> None:
    """Build the requested modules and watch for changes (Ctrl+C to exit)."""
    overrides = {
        key: value
        for key, value in {"sass": sass, "tsc": tsc, "esbuild": esbuild}.items()
        if value is not None
    }
    build_config = config.model_copy(update=overrides)
    orchestrator = BuildOrchestrator(build_config, resolve_provider(provider))

    try:
        session = orchestrator.build(modules or [])
    except BuildError as exc:
        console.print(f"[bold red]Build failed:[/bold red] {escape(str(exc))}")
        orchestrator.stop()
        raise typer.Exit(code=1) from exc

    if session is None:
        raise typer.Exit(code=1)

    try:
        while any(handle.running for handle in session.handles.values()):
            time.sleep(poll)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopping watchers...[/dim]")
    finally:
        orchestrator.stop()
