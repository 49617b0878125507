"""bleep CLI — Typer-based command-line interface.

Provides the ``bleep`` command with subcommands for starting a watch
build, printing a module closure, and listing the registry.

All output uses Rich for formatted terminal display.
"""
