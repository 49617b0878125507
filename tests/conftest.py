"""Shared test fixtures for bleep."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from bleep.config import BleepConfig
from bleep.core.event_bus import BuildEventBus
from bleep.core.orchestrator import BuildOrchestrator
from bleep.models.modules import ModuleDescriptor
from bleep.watchers.registry import StaticRegistryProvider


# ---------------------------------------------------------------------------
# Test doubles for the external tools
# ---------------------------------------------------------------------------


class FakeHandle:
    """Watch handle that only records whether it was stopped."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.stopped = False

    @property
    def running(self) -> bool:
        return not self.stopped

    def stop(self) -> None:
        self.stopped = True


class ToolRecorder:
    """Records every call made to the fake tools, in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.handles: list[FakeHandle] = []
        self.buses: list[BuildEventBus] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _handle(self, name: str) -> FakeHandle:
        handle = FakeHandle(name)
        self.handles.append(handle)
        return handle


class FakeStyleWatcher:
    def __init__(self, recorder: ToolRecorder) -> None:
        self.recorder = recorder

    def start(self, modules: Sequence[ModuleDescriptor], bus: BuildEventBus) -> FakeHandle:
        self.recorder.calls.append(("sass", [m.name for m in modules]))
        return self.recorder._handle("sass")


class FakeConfigGenerator:
    def __init__(self, recorder: ToolRecorder, path: Path) -> None:
        self.recorder = recorder
        self.path = path

    def generate(self, modules: Sequence[ModuleDescriptor]) -> Path:
        self.recorder.calls.append(("tsconfig", [m.name for m in modules]))
        return self.path


class FakeTypeCheckWatcher:
    def __init__(self, recorder: ToolRecorder) -> None:
        self.recorder = recorder

    def start(self, bus: BuildEventBus) -> FakeHandle:
        self.recorder.calls.append(("tsc", None))
        self.recorder.buses.append(bus)
        return self.recorder._handle("tsc")


class FakeBundleWatcher:
    """Keeps one handle per session, like a bundler in watch mode."""

    def __init__(self, recorder: ToolRecorder) -> None:
        self.recorder = recorder
        self._handle: FakeHandle | None = None

    def start_or_refresh(
        self, modules: Sequence[ModuleDescriptor], bus: BuildEventBus
    ) -> FakeHandle:
        self.recorder.calls.append(("esbuild", [m.name for m in modules]))
        if self._handle is None or not self._handle.running:
            self._handle = self.recorder._handle("esbuild")
        return self._handle


class FakeExecutor:
    def __init__(self, recorder: ToolRecorder) -> None:
        self.recorder = recorder

    def run_all(self, modules: Sequence[ModuleDescriptor]) -> None:
        for mod in modules:
            self.recorder.calls.append(("prebuild", mod.name))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_module(tmp_path: Path) -> Callable[..., ModuleDescriptor]:
    """Factory fixture: build a ModuleDescriptor rooted under tmp_path."""

    def _factory(name: str, **overrides: Any) -> ModuleDescriptor:
        defaults: dict[str, Any] = {"name": name, "root": tmp_path / "ui" / name}
        defaults.update(overrides)
        return ModuleDescriptor(**defaults)

    return _factory


@pytest.fixture
def diamond_provider(make_module: Callable[..., ModuleDescriptor]) -> StaticRegistryProvider:
    """site -> (common, chart); chart -> common; common -> (); lobby -> common."""
    modules = [make_module(n) for n in ("site", "chart", "common", "lobby")]
    deps = {
        "site": ["common", "chart"],
        "chart": ["common"],
        "common": [],
        "lobby": ["common"],
    }
    return StaticRegistryProvider(modules, deps)


@pytest.fixture
def build_config(tmp_path: Path) -> BleepConfig:
    """Config whose output tree lives under tmp_path."""
    return BleepConfig(
        _env_file=None,
        root_dir=tmp_path,
        sass=True,
        tsc=True,
        esbuild=True,
    )


@pytest.fixture
def recorder() -> ToolRecorder:
    return ToolRecorder()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_orchestrator(
    build_config: BleepConfig,
    diamond_provider: StaticRegistryProvider,
    recorder: ToolRecorder,
    clock: FakeClock,
    tmp_path: Path,
) -> Callable[..., BuildOrchestrator]:
    """Factory fixture: an orchestrator wired to recording fake tools."""

    def _factory(**config_overrides: Any) -> BuildOrchestrator:
        cfg = build_config.model_copy(update=config_overrides)
        return BuildOrchestrator(
            cfg,
            diamond_provider,
            style_watcher=FakeStyleWatcher(recorder),
            config_generator=FakeConfigGenerator(recorder, tmp_path / "tsconfig.json"),
            typecheck_watcher=FakeTypeCheckWatcher(recorder),
            bundle_watcher=FakeBundleWatcher(recorder),
            executor=FakeExecutor(recorder),
            clock=clock,
        )

    return _factory


@pytest.fixture
def fakes() -> SimpleNamespace:
    """The fake tool classes, for tests wiring their own orchestrator."""
    return SimpleNamespace(
        style=FakeStyleWatcher,
        config=FakeConfigGenerator,
        typecheck=FakeTypeCheckWatcher,
        bundle=FakeBundleWatcher,
        executor=FakeExecutor,
    )
