"""Build orchestrator — the central coordinator for a build session.

The BuildOrchestrator loads the module registry, validates the requested
names, resolves the working set, prepares the output tree, runs each
module's pre-build steps, and then starts the style, type-check and
bundle watchers.  The bundler is chained to the type checker through the
session's event bus: every finished type-check cycle (re)triggers it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from bleep.config import BleepConfig
from bleep.core.errors import BuildError
from bleep.core.executor import PreBuildExecutor
from bleep.core.session import BuildSession
from bleep.core.timer import BuildTimer
from bleep.models.events import BuildEvent, BuildEventKind
from bleep.watchers.base import (
    BundleWatcher,
    ConfigGenerator,
    RegistryProvider,
    StyleWatcher,
    TypeCheckWatcher,
)
from bleep.watchers.esbuild import EsbuildWatcher
from bleep.watchers.sass import SassWatcher
from bleep.watchers.tsc import TscConfigWriter, TscWatcher

logger = logging.getLogger(__name__)


class BuildOrchestrator:
    """Owns the current build session and drives the external watchers.

    Parameters
    ----------
    config:
        Build configuration (paths and tool toggles).
    registry_provider:
        Supplies the module registry at the start of every build.
    style_watcher, config_generator, typecheck_watcher, bundle_watcher:
        Tool collaborators.  The process-backed defaults are used when
        not provided.
    executor:
        Pre-build step executor.  Defaults to :class:`PreBuildExecutor`.
    clock:
        Time source for session timers.
    """

    def __init__(
        self,
        config: BleepConfig,
        registry_provider: RegistryProvider,
        *,
        style_watcher: StyleWatcher | None = None,
        config_generator: ConfigGenerator | None = None,
        typecheck_watcher: TypeCheckWatcher | None = None,
        bundle_watcher: BundleWatcher | None = None,
        executor: PreBuildExecutor | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.registry_provider = registry_provider
        self.style_watcher = style_watcher or SassWatcher(config)
        self.config_generator = config_generator or TscConfigWriter(config)
        self.typecheck_watcher = typecheck_watcher or TscWatcher(config)
        self.bundle_watcher = bundle_watcher or EsbuildWatcher(config)
        self.executor = executor or PreBuildExecutor(config)
        self._clock = clock
        self._session: BuildSession | None = None

    @property
    def session(self) -> BuildSession | None:
        return self._session

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def build(self, module_names: Sequence[str] = ()) -> BuildSession | None:
        """Start a build session for *module_names* (all modules when empty).

        Returns the running session, or ``None`` when a requested module
        is unknown; in that case nothing is created or started.

        Raises
        ------
        CyclicDependencyError
            If the working set's dependency map contains a cycle.
        UnknownModuleError
            If a module depends on a name missing from the registry.
        BuildStepError, AssetCopyError
            If a module's pre-build step or asset copy fails.
        WatcherStartError
            If a tool executable cannot be launched.
        """
        names = list(module_names)

        # 1. Replace the previous session
        self.stop()
        logger.info("Parsing modules in '%s'", self.config.ui_path)
        registry = self.registry_provider.load()
        session = BuildSession(registry, names, timer=BuildTimer(self._clock))
        self._session = session

        # 2. Validate requested names
        unknown = session.graph.unknown(names)
        if unknown:
            logger.error("unknown module '%s'", unknown[0])
            return None

        session.timer.reset()

        # 3. Resolve the working set
        try:
            session.working_set = session.graph.working_set(names)
            session.build_order = session.graph.resolve_many(names or registry.names)
        except BuildError as exc:
            logger.error("%s", exc)
            raise

        # 4. Output directories
        self.config.js_path.mkdir(parents=True, exist_ok=True)
        self.config.css_path.mkdir(parents=True, exist_ok=True)

        # 5. Pre-build steps, dependencies first
        self.executor.run_all(session.build_order)

        self._wire(session)

        # 6. Style watcher runs on its own
        if self.config.sass:
            session.attach("sass", self.style_watcher.start(session.working_set, session.bus))

        # 7-8. Type-check config must exist before the type checker starts
        if self.config.tsc:
            self.config_generator.generate(session.working_set)
            session.attach("tsc", self.typecheck_watcher.start(session.bus))
        elif self.config.esbuild:
            self._start_bundle(session)
        else:
            session.timer.report_done(0)

        logger.info(
            "Session %s watching %d module%s",
            session.session_id,
            len(session.working_set),
            "" if len(session.working_set) == 1 else "s",
        )
        return session

    def stop(self) -> None:
        """Stop the current session's watchers, if any."""
        if self._session is not None:
            self._session.stop()

    # ------------------------------------------------------------------
    # Timer control surface
    # ------------------------------------------------------------------

    def reset_timer(self, clear: bool = False) -> None:
        if self._session is not None:
            self._session.timer.reset(clear)

    def report_done(self, n: int) -> str | None:
        if self._session is None:
            return None
        return self._session.timer.report_done(n)

    # ------------------------------------------------------------------
    # Tool chaining
    # ------------------------------------------------------------------

    def _wire(self, session: BuildSession) -> None:
        bus = session.bus
        bus.subscribe(BuildEventKind.CYCLE_STARTED, lambda event: session.timer.reset())
        bus.subscribe(
            BuildEventKind.TYPECHECK_COMPILED,
            lambda event: self._on_typecheck_compiled(session, event),
        )
        bus.subscribe(
            BuildEventKind.TYPECHECK_FAILED,
            lambda event: logger.warning("[%s] %s", event.source, event.detail),
        )
        bus.subscribe(
            BuildEventKind.BUNDLE_COMPLETED,
            lambda event: session.timer.report_done(event.module_count),
        )
        bus.subscribe(BuildEventKind.WATCHER_EXITED, self._on_watcher_exited)

    def _on_typecheck_compiled(self, session: BuildSession, event: BuildEvent) -> None:
        if self.config.esbuild:
            self._start_bundle(session)
        else:
            session.timer.report_done(0)

    def _start_bundle(self, session: BuildSession) -> None:
        session.bundle_starts += 1
        handle = self.bundle_watcher.start_or_refresh(session.working_set, session.bus)
        session.attach("esbuild", handle)

    @staticmethod
    def _on_watcher_exited(event: BuildEvent) -> None:
        logger.debug("[%s] watcher exited (%s)", event.source, event.detail)
