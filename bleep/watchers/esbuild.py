"""Bundler — esbuild in watch mode over the working set's entry points."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bleep.config import BleepConfig
from bleep.core.event_bus import BuildEventBus
from bleep.models.events import BuildEvent, BuildEventKind
from bleep.models.modules import ModuleDescriptor
from bleep.watchers.base import IdleWatchHandle, OutputRule, ProcessWatchHandle, WatchHandle

logger = logging.getLogger(__name__)


class EsbuildWatcher:
    """Starts the bundler once and keeps it running across type-check cycles.

    esbuild rebuilds on its own when sources change, so a refresh for
    the same entry points leaves the running process alone.  A changed
    entry point set restarts it.
    """

    name = "esbuild"

    def __init__(self, config: BleepConfig) -> None:
        self.config = config
        self._handle: WatchHandle | None = None
        self._entries: list[str] = []

    def entries(self, modules: Sequence[ModuleDescriptor]) -> list[str]:
        return [str(mod.root / entry) for mod in modules for entry in mod.bundle]

    def command(self, entries: Sequence[str]) -> list[str]:
        return [
            self.config.esbuild_bin,
            *entries,
            "--bundle",
            "--format=esm",
            f"--outdir={self.config.js_path}",
            "--log-level=info",
            "--watch",
        ]

    def start_or_refresh(
        self, modules: Sequence[ModuleDescriptor], bus: BuildEventBus
    ) -> WatchHandle:
        entries = self.entries(modules)
        if self._handle is not None and self._handle.running and entries == self._entries:
            logger.debug("[%s] already watching %d entries", self.name, len(entries))
            return self._handle

        if self._handle is not None:
            self._handle.stop()

        bundled = sum(1 for mod in modules if mod.bundle)
        self._entries = entries
        if not entries:
            logger.info("[%s] no entry points to bundle", self.name)
            self._handle = IdleWatchHandle(self.name)
            bus.publish(BuildEvent(kind=BuildEventKind.BUNDLE_COMPLETED, source=self.name))
            return self._handle

        rules = [
            OutputRule(pattern=r"\[watch\] build started", kind=BuildEventKind.CYCLE_STARTED),
            OutputRule(
                pattern=r"\[watch\] build finished",
                kind=BuildEventKind.BUNDLE_COMPLETED,
                module_count=bundled,
            ),
        ]
        self._handle = ProcessWatchHandle(
            self.name,
            self.command(entries),
            bus=bus,
            rules=rules,
            cwd=self.config.ui_path,
            stop_timeout=self.config.watcher_stop_timeout,
        )
        return self._handle
