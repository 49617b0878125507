"""Registry providers.

Parsing module manifests is an external concern; the orchestrator takes
any object with a ``load() -> ModuleRegistry`` method.  The CLI locates
one through a ``"package.module:attribute"`` reference.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from bleep.core.errors import RegistryLoadError
from bleep.models.modules import ModuleDescriptor, ModuleRegistry

logger = logging.getLogger(__name__)


class StaticRegistryProvider:
    """In-memory provider returning a fixed module set.

    Examples
    --------
    >>> provider = StaticRegistryProvider(
    ...     [ModuleDescriptor(name="site", root="ui/site")],
    ...     {"site": ["common"]},
    ... )
    """

    def __init__(
        self,
        modules: list[ModuleDescriptor] | None = None,
        deps: dict[str, list[str]] | None = None,
    ) -> None:
        self._modules = list(modules or [])
        self._deps = {name: list(d) for name, d in (deps or {}).items()}
        self.loads = 0

    def load(self) -> ModuleRegistry:
        self.loads += 1
        return ModuleRegistry(
            modules={mod.name: mod for mod in self._modules},
            deps=self._deps,
        )


def load_registry_provider(reference: str) -> Any:
    """Import a provider from ``"package.module:attribute"``.

    The attribute may be a provider instance, or a class or factory
    callable taking no arguments that returns one.
    """
    module_path, sep, attr = reference.partition(":")
    if not sep or not module_path or not attr:
        raise RegistryLoadError(
            f"Registry provider must look like 'package.module:attribute', got {reference!r}"
        )

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise RegistryLoadError(f"Cannot import '{module_path}': {exc}") from exc

    try:
        target = getattr(module, attr)
    except AttributeError as exc:
        raise RegistryLoadError(f"'{module_path}' has no attribute '{attr}'") from exc

    provider = target if hasattr(target, "load") and not isinstance(target, type) else target()
    if not callable(getattr(provider, "load", None)):
        raise RegistryLoadError(f"{reference!r} does not provide a load() method")

    logger.debug("Loaded registry provider %r from %s", provider, reference)
    return provider
