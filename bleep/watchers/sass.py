"""Style watcher — runs the sass compiler in watch mode."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bleep.config import BleepConfig
from bleep.core.event_bus import BuildEventBus
from bleep.models.events import BuildEventKind
from bleep.models.modules import ModuleDescriptor
from bleep.watchers.base import IdleWatchHandle, OutputRule, ProcessWatchHandle, WatchHandle

logger = logging.getLogger(__name__)

_RULES = [
    OutputRule(pattern=r"Compiled .+ to ", kind=BuildEventKind.STYLE_COMPILED),
]


class SassWatcher:
    """Compiles each module's ``css/`` directory into the styles output tree."""

    name = "sass"

    def __init__(self, config: BleepConfig) -> None:
        self.config = config

    def command(self, modules: Sequence[ModuleDescriptor]) -> list[str]:
        pairs = [
            f"{mod.root / 'css'}:{self.config.css_path / mod.name}"
            for mod in modules
            if (mod.root / "css").is_dir()
        ]
        if not pairs:
            return []
        return [self.config.sass_bin, "--watch", "--no-source-map", *pairs]

    def start(self, modules: Sequence[ModuleDescriptor], bus: BuildEventBus) -> WatchHandle:
        args = self.command(modules)
        if not args:
            logger.info("[%s] no stylesheets to watch", self.name)
            return IdleWatchHandle(self.name)
        return ProcessWatchHandle(
            self.name,
            args,
            bus=bus,
            rules=_RULES,
            cwd=self.config.ui_path,
            stop_timeout=self.config.watcher_stop_timeout,
        )
