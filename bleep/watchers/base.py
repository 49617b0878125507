"""Watcher interfaces and the subprocess-backed watch handle.

The style, type-check and bundle tools are external long-running
processes.  The orchestrator only starts them, listens to the events
they publish, and stops them; how each tool rebuilds incrementally is
its own business.
"""

from __future__ import annotations

import logging
import re
import subprocess
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from bleep.core.errors import WatcherStartError
from bleep.core.event_bus import BuildEventBus
from bleep.models.events import BuildEvent, BuildEventKind
from bleep.models.modules import ModuleDescriptor, ModuleRegistry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------

@runtime_checkable
class WatchHandle(Protocol):
    """Stop handle for a running watcher."""

    @property
    def running(self) -> bool: ...

    def stop(self) -> None: ...


class RegistryProvider(Protocol):
    """Produces the module registry (manifest parsing lives elsewhere)."""

    def load(self) -> ModuleRegistry: ...


class StyleWatcher(Protocol):
    def start(self, modules: Sequence[ModuleDescriptor], bus: BuildEventBus) -> WatchHandle: ...


class ConfigGenerator(Protocol):
    def generate(self, modules: Sequence[ModuleDescriptor]) -> Path: ...


class TypeCheckWatcher(Protocol):
    def start(self, bus: BuildEventBus) -> WatchHandle: ...


class BundleWatcher(Protocol):
    def start_or_refresh(
        self, modules: Sequence[ModuleDescriptor], bus: BuildEventBus
    ) -> WatchHandle: ...


# ---------------------------------------------------------------------------
# Handles
# ---------------------------------------------------------------------------

class IdleWatchHandle:
    """Handle for a watcher that had nothing to watch."""

    def __init__(self, name: str) -> None:
        self.name = name

    @property
    def running(self) -> bool:
        return False

    def stop(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"<IdleWatchHandle {self.name!r}>"


class OutputRule(BaseModel):
    """Maps a tool output line matching ``pattern`` to a build event."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    kind: BuildEventKind
    module_count: int = 0

    def matches(self, line: str) -> bool:
        return re.search(self.pattern, line) is not None


class ProcessWatchHandle:
    """A tool running in watch mode as a child process.

    Output is read on a daemon thread: every line is logged under the
    tool's name and the first matching :class:`OutputRule` publishes
    its event on *bus*.  ``WATCHER_EXITED`` is published once the
    process ends.

    Parameters
    ----------
    name:
        Tool name used as log tag and event source.
    args:
        Command-line tokens.
    bus:
        Session event bus receiving the tool's events.
    rules:
        Output rules, first match wins.
    cwd:
        Working directory of the child process.
    stop_timeout:
        Seconds to wait after terminate() before killing.
    """

    def __init__(
        self,
        name: str,
        args: Sequence[str],
        *,
        bus: BuildEventBus,
        rules: Sequence[OutputRule] = (),
        cwd: Path | None = None,
        stop_timeout: float = 5.0,
    ) -> None:
        self.name = name
        self.args = list(args)
        self._bus = bus
        self._rules = list(rules)
        self._stop_timeout = stop_timeout
        self._stopping = False

        logger.info("[%s] watch - %s", name, " ".join(self.args), extra={"ctx": name})
        try:
            self._proc = subprocess.Popen(
                self.args,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as exc:
            raise WatcherStartError(f"[{name}] cannot start '{self.args[0]}': {exc}") from exc

        self._reader = threading.Thread(
            target=self._pump, name=f"bleep-{name}", daemon=True
        )
        self._reader.start()

    @property
    def running(self) -> bool:
        return self._proc.poll() is None

    @property
    def pid(self) -> int:
        return self._proc.pid

    def stop(self) -> None:
        """Terminate the process, killing it if it ignores the request."""
        self._stopping = True
        if not self.running:
            return
        self._proc.terminate()
        try:
            self._proc.wait(timeout=self._stop_timeout)
        except subprocess.TimeoutExpired:
            logger.warning("[%s] did not exit after terminate, killing", self.name)
            self._proc.kill()
            self._proc.wait()
        logger.debug("[%s] stopped", self.name)

    def join(self, timeout: float | None = None) -> None:
        """Wait for the output reader to drain."""
        self._reader.join(timeout)

    def _pump(self) -> None:
        stream = self._proc.stdout
        if stream is not None:
            for raw in stream:
                line = raw.rstrip()
                if line:
                    self._handle_line(line)
        code = self._proc.wait()
        if not self._stopping:
            logger.warning("[%s] exited with code %d", self.name, code, extra={"ctx": self.name})
        self._bus.publish(
            BuildEvent(kind=BuildEventKind.WATCHER_EXITED, source=self.name, detail=str(code))
        )

    def _handle_line(self, line: str) -> None:
        logger.info("[%s] %s", self.name, line, extra={"ctx": self.name})
        for rule in self._rules:
            if rule.matches(line):
                self._bus.publish(
                    BuildEvent(
                        kind=rule.kind,
                        source=self.name,
                        module_count=rule.module_count,
                        detail=line,
                    )
                )
                break

    def __repr__(self) -> str:
        state = "running" if self.running else "stopped"
        return f"<ProcessWatchHandle {self.name!r} {state}>"
