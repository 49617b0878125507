"""Module descriptor and registry models — frozen once parsed."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class CopySpec(BaseModel):
    """An asset copy declared by a module.

    ``src`` is one path or a list of paths relative to the shared
    node-modules root; ``dest`` is relative to the output root.
    """

    model_config = ConfigDict(frozen=True)

    src: str | list[str]
    dest: str

    @property
    def sources(self) -> list[str]:
        return [self.src] if isinstance(self.src, str) else list(self.src)


class ModuleDescriptor(BaseModel):
    """A named, independently buildable unit of the source tree.

    Direct dependencies are not stored here; they live in the
    registry's dependency map.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    root: Path
    build: list[list[str]] = []  # command-token sequences, run in order
    copy_me: list[CopySpec] = []
    bundle: list[str] = []  # bundler entry points relative to root


class ModuleRegistry(BaseModel):
    """Snapshot of every known module and its direct dependency names.

    Produced by an external manifest parser and owned by one build
    session.
    """

    model_config = ConfigDict(frozen=True)

    modules: dict[str, ModuleDescriptor] = Field(default_factory=dict)
    deps: dict[str, list[str]] = Field(default_factory=dict)

    def has(self, name: str) -> bool:
        return name in self.modules

    def get(self, name: str) -> ModuleDescriptor:
        return self.modules[name]

    def direct_deps(self, name: str) -> list[str]:
        """Return the declared direct dependencies of *name* (may be empty)."""
        return list(self.deps.get(name, []))

    @property
    def names(self) -> list[str]:
        """All module names in registry iteration order."""
        return list(self.modules)

    def __len__(self) -> int:
        return len(self.modules)
