"""Build session — the state owned by one ``build()`` invocation."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from bleep.core.event_bus import BuildEventBus
from bleep.core.module_graph import ModuleGraph
from bleep.core.timer import BuildTimer
from bleep.models.modules import ModuleDescriptor, ModuleRegistry
from bleep.watchers.base import WatchHandle

logger = logging.getLogger(__name__)


class BuildSession:
    """Registry, graph, working set, timer, event bus and watcher handles.

    A new session replaces the previous one wholesale; the previous
    session is stopped first so its watchers and bus go quiet.
    """

    def __init__(
        self,
        registry: ModuleRegistry,
        requested: list[str],
        timer: BuildTimer | None = None,
    ) -> None:
        ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        self.session_id = f"bleep-{ts}-{uuid.uuid4().hex[:4]}"
        self.registry = registry
        self.graph = ModuleGraph(registry)
        self.requested = list(requested)
        self.timer = timer or BuildTimer()
        self.bus = BuildEventBus()
        self.working_set: list[ModuleDescriptor] = []
        # working set members, dependencies first
        self.build_order: list[ModuleDescriptor] = []
        self.bundle_starts = 0
        self._handles: dict[str, WatchHandle] = {}
        self._stopped = False

    @property
    def module_names(self) -> list[str]:
        return [mod.name for mod in self.working_set]

    @property
    def stopped(self) -> bool:
        return self._stopped

    # ------------------------------------------------------------------
    # Watcher handles
    # ------------------------------------------------------------------

    def attach(self, name: str, handle: WatchHandle) -> None:
        """Record the handle for watcher *name*, replacing any earlier one."""
        previous = self._handles.get(name)
        if previous is not None and previous is not handle:
            previous.stop()
        self._handles[name] = handle

    def handle(self, name: str) -> WatchHandle | None:
        return self._handles.get(name)

    @property
    def handles(self) -> dict[str, WatchHandle]:
        return dict(self._handles)

    def stop(self) -> None:
        """Close the bus and stop every watcher.  Safe to call twice."""
        if self._stopped:
            return
        self._stopped = True
        self.bus.close()
        for name, handle in self._handles.items():
            logger.debug("Stopping %s watcher for session %s", name, self.session_id)
            handle.stop()

    def __repr__(self) -> str:
        return (
            f"<BuildSession {self.session_id} modules={len(self.working_set)} "
            f"watchers={sorted(self._handles)}>"
        )
