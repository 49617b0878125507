"""External tool watchers and registry providers."""

from bleep.watchers.base import (
    BundleWatcher,
    ConfigGenerator,
    IdleWatchHandle,
    OutputRule,
    ProcessWatchHandle,
    RegistryProvider,
    StyleWatcher,
    TypeCheckWatcher,
    WatchHandle,
)
from bleep.watchers.esbuild import EsbuildWatcher
from bleep.watchers.registry import StaticRegistryProvider, load_registry_provider
from bleep.watchers.sass import SassWatcher
from bleep.watchers.tsc import TscConfigWriter, TscWatcher

__all__ = [
    "BundleWatcher",
    "ConfigGenerator",
    "EsbuildWatcher",
    "IdleWatchHandle",
    "OutputRule",
    "ProcessWatchHandle",
    "RegistryProvider",
    "SassWatcher",
    "StaticRegistryProvider",
    "StyleWatcher",
    "TscConfigWriter",
    "TscWatcher",
    "TypeCheckWatcher",
    "WatchHandle",
    "load_registry_provider",
]
