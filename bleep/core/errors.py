"""Exception hierarchy for build orchestration."""

from __future__ import annotations


class BuildError(RuntimeError):
    """Base class for every failure raised by a build invocation."""


class UnknownModuleError(BuildError):
    """Raised when a module name is not present in the registry."""

    def __init__(self, name: str, required_by: str | None = None) -> None:
        self.name = name
        self.required_by = required_by
        if required_by:
            message = f"Module '{required_by}' depends on unknown module '{name}'"
        else:
            message = f"Unknown module '{name}'"
        super().__init__(message)


class CyclicDependencyError(BuildError, ValueError):
    """Raised when the dependency map contains a cycle."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__("Dependency cycle: " + " -> ".join(cycle))


class BuildStepError(BuildError):
    """Raised when a module's pre-build command fails."""

    def __init__(self, module: str, args: list[str], returncode: int | None, output: str = "") -> None:
        self.module = module
        self.command = list(args)
        self.returncode = returncode
        self.output = output
        status = "could not be started" if returncode is None else f"exited with code {returncode}"
        super().__init__(f"[{module}] '{' '.join(args)}' {status}")


class AssetCopyError(BuildError):
    """Raised when a module's declared asset copy fails."""


class WatcherStartError(BuildError):
    """Raised when an external watcher process cannot be launched."""


class RegistryLoadError(BuildError):
    """Raised when the module registry provider cannot be located or loaded."""
