"""Helpers shared by CLI commands."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from bleep.core.errors import RegistryLoadError
from bleep.watchers.base import RegistryProvider
from bleep.watchers.registry import load_registry_provider

console = Console()


def setup_logging(level: str) -> None:
    """Route the ``bleep`` loggers through Rich."""
    root = logging.getLogger("bleep")
    root.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(
            RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
        )


def resolve_provider(reference: str) -> RegistryProvider:
    """Load the registry provider or exit with a readable error."""
    if not reference:
        console.print(
            "[bold red]No registry provider configured.[/bold red] "
            "Pass --provider or set BLEEP_REGISTRY_PROVIDER."
        )
        raise typer.Exit(code=1)
    try:
        return load_registry_provider(reference)
    except RegistryLoadError as exc:
        console.print(f"[bold red]Registry provider error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
