"""bleep: incremental build orchestrator for multi-module front-end trees.

Resolves the dependency closure of the requested modules, runs their
pre-build steps and asset copies, and drives the style, type-check and
bundle watchers, chaining the bundler to each finished type-check cycle.
"""

__version__ = "0.1.0"

from bleep.core.orchestrator import BuildOrchestrator
from bleep.core.session import BuildSession

__all__ = ["BuildOrchestrator", "BuildSession", "__version__"]
