"""``bleep deps`` and ``bleep modules`` — inspect the module registry."""

from __future__ import annotations

import typer
from rich.markup import escape
from rich.table import Table

from bleep.cli.commands._common import console, resolve_provider
from bleep.config import config
from bleep.core.errors import BuildError
from bleep.core.module_graph import ModuleGraph


def deps_cmd(
    modules: list[str] = typer.Argument(
        ...,
        help="Modules whose build closure to print.",
    ),
    provider: str = typer.Option(
        config.registry_provider,
        "--provider",
        "-p",
        help="Registry provider as 'package.module:attribute'.",
    ),
) -> None:
    """Print the dependency-ordered closure of MODULES."""
    graph = ModuleGraph(resolve_provider(provider).load())

    unknown = graph.unknown(modules)
    if unknown:
        console.print(f"[bold red]Unknown module:[/bold red] {unknown[0]}")
        raise typer.Exit(code=1)

    try:
        closure = graph.resolve_many(modules)
    except BuildError as exc:
        console.print(f"[bold red]Cannot resolve:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    table = Table(title="Build order")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Module", style="cyan")
    table.add_column("Root")
    table.add_column("Steps", justify="right")
    table.add_column("Copies", justify="right")
    for index, mod in enumerate(closure, start=1):
        table.add_row(str(index), mod.name, str(mod.root), str(len(mod.build)), str(len(mod.copy_me)))
    console.print(table)


def modules_cmd(
    provider: str = typer.Option(
        config.registry_provider,
        "--provider",
        "-p",
        help="Registry provider as 'package.module:attribute'.",
    ),
) -> None:
    """List every registered module and its direct dependencies."""
    registry = resolve_provider(provider).load()
    if not len(registry):
        console.print("[dim]No modules registered.[/dim]")
        return

    table = Table(title="Modules")
    table.add_column("Module", style="cyan")
    table.add_column("Depends on", style="green")
    for name in registry.names:
        table.add_row(name, ", ".join(registry.direct_deps(name)) or "-")
    console.print(table)
