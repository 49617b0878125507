"""Module dependency graph — transitive closure with cycle detection.

Resolution is a depth-first post-order walk: for one requested module,
each direct dependency's closure is emitted (in declared order) before
the module itself.  Closures for several requested modules are
concatenated in request order and deduplicated keeping the first
occurrence.  This is not a global topological sort:
later requests never reorder earlier ones.
"""

from __future__ import annotations

from collections.abc import Iterable

from bleep.core.errors import CyclicDependencyError, UnknownModuleError
from bleep.models.modules import ModuleDescriptor, ModuleRegistry


class ModuleGraph:
    """Read-only view over a registry's dependency map.

    Pure: no method mutates the registry or keeps state between calls.
    """

    def __init__(self, registry: ModuleRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ModuleRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def unknown(self, names: Iterable[str]) -> list[str]:
        """Return requested names missing from the registry, in request order."""
        return [name for name in names if not self._registry.has(name)]

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_one(self, name: str) -> list[ModuleDescriptor]:
        """Return *name*'s closure, dependencies strictly before dependents."""
        if not self._registry.has(name):
            raise UnknownModuleError(name)
        order: list[str] = []
        self._collect(name, [], set(), order)
        return self._descriptors(order)

    def resolve_many(self, names: Iterable[str]) -> list[ModuleDescriptor]:
        """Concatenate per-name closures in request order, first occurrence wins."""
        combined: list[ModuleDescriptor] = []
        for name in names:
            combined.extend(self.resolve_one(name))
        return _unique(combined)

    def working_set(self, names: Iterable[str]) -> list[ModuleDescriptor]:
        """Modules taking part in a build.

        An empty request means every registered module, in registry
        order; otherwise the closure of the requested names.
        """
        names = list(names)
        if not names:
            return list(self._registry.modules.values())
        return self.resolve_many(names)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _collect(
        self,
        name: str,
        path: list[str],
        visiting: set[str],
        order: list[str],
    ) -> None:
        if name in order:
            return
        if name in visiting:
            start = path.index(name)
            raise CyclicDependencyError(path[start:] + [name])

        visiting.add(name)
        path.append(name)
        for dep in self._registry.direct_deps(name):
            if not self._registry.has(dep):
                raise UnknownModuleError(dep, required_by=name)
            self._collect(dep, path, visiting, order)
        path.pop()
        visiting.discard(name)

        order.append(name)

    def _descriptors(self, names: list[str]) -> list[ModuleDescriptor]:
        return [self._registry.get(name) for name in names]


def _unique(mods: list[ModuleDescriptor]) -> list[ModuleDescriptor]:
    seen: set[str] = set()
    result: list[ModuleDescriptor] = []
    for mod in mods:
        if mod.name not in seen:
            seen.add(mod.name)
            result.append(mod)
    return result
