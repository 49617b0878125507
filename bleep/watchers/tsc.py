"""Type checker — project configuration and watch mode.

The generated configuration is a solution-style ``tsconfig.json``: no
files of its own, one project reference per working-set module that
ships a ``tsconfig.json``.  ``tsc -b -w`` then checks exactly those
modules.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from bleep.config import BleepConfig
from bleep.core.event_bus import BuildEventBus
from bleep.models.events import BuildEventKind
from bleep.models.modules import ModuleDescriptor
from bleep.watchers.base import OutputRule, ProcessWatchHandle, WatchHandle

logger = logging.getLogger(__name__)

_RULES = [
    OutputRule(pattern=r"Starting (incremental )?compilation", kind=BuildEventKind.CYCLE_STARTED),
    OutputRule(pattern=r"Found 0 errors\.", kind=BuildEventKind.TYPECHECK_COMPILED),
    OutputRule(pattern=r"Found [1-9]\d* errors?\.", kind=BuildEventKind.TYPECHECK_FAILED),
]


class TscConfigWriter:
    """Writes the type checker's project configuration for a module set."""

    def __init__(self, config: BleepConfig) -> None:
        self.config = config

    def generate(self, modules: Sequence[ModuleDescriptor]) -> Path:
        path = self.config.tsc_config_file
        path.parent.mkdir(parents=True, exist_ok=True)

        references = []
        for mod in modules:
            project = mod.root / "tsconfig.json"
            if project.is_file():
                references.append({"path": os.path.relpath(project, path.parent)})

        path.write_text(
            json.dumps({"files": [], "references": references}, indent=2) + "\n",
            encoding="utf-8",
        )
        logger.info("[tsc] wrote %s (%d references)", path, len(references))
        return path


class TscWatcher:
    """Runs ``tsc -b -w`` over the generated configuration."""

    name = "tsc"

    def __init__(self, config: BleepConfig) -> None:
        self.config = config

    def command(self) -> list[str]:
        return [
            self.config.tsc_bin,
            "-b",
            str(self.config.tsc_config_file),
            "-w",
            "--preserveWatchOutput",
        ]

    def start(self, bus: BuildEventBus) -> WatchHandle:
        return ProcessWatchHandle(
            self.name,
            self.command(),
            bus=bus,
            rules=_RULES,
            cwd=self.config.ui_path,
            stop_timeout=self.config.watcher_stop_timeout,
        )
