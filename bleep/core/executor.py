"""Module pre-build executor — shell steps and asset copies.

Runs once per resolved module, in closure order, before any watcher
starts.  Each build step blocks until it exits because step N may
produce files consumed by step N+1.  Any failure is fatal for the whole
build invocation; nothing is retried and partial output is left in
place.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

from bleep.config import BleepConfig
from bleep.core.errors import AssetCopyError, BuildStepError
from bleep.models.modules import CopySpec, ModuleDescriptor

logger = logging.getLogger(__name__)


class PreBuildExecutor:
    """Executes a module's declared build steps and copy specifications.

    Parameters
    ----------
    config:
        Supplies the shared node-modules root (copy sources) and the
        output root (copy destinations).
    """

    def __init__(self, config: BleepConfig) -> None:
        self.config = config

    def run_all(self, modules: Iterable[ModuleDescriptor]) -> None:
        """Run :meth:`run_pre_build` for each module in the given order."""
        for mod in modules:
            self.run_pre_build(mod)

    def run_pre_build(self, mod: ModuleDescriptor) -> None:
        """Run every build step, then every copy, for *mod*."""
        for args in mod.build:
            self._exec(mod, args)
        for spec in mod.copy_me:
            self._copy(mod, spec)

    # ------------------------------------------------------------------
    # Build steps
    # ------------------------------------------------------------------

    def _exec(self, mod: ModuleDescriptor, args: list[str]) -> None:
        if not args:
            logger.error("[%s] empty build step", mod.name, extra={"ctx": mod.name})
            raise BuildStepError(mod.name, args, None, "empty command")
        logger.info("[%s] exec - %s", mod.name, " ".join(args), extra={"ctx": mod.name})
        try:
            proc = subprocess.run(
                args,
                cwd=mod.root,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            logger.error("[%s] cannot run '%s': %s", mod.name, args[0], exc, extra={"ctx": mod.name})
            raise BuildStepError(mod.name, args, None, str(exc)) from exc

        for line in proc.stdout.splitlines():
            if line.strip():
                logger.info("[%s] %s", mod.name, line, extra={"ctx": mod.name})

        if proc.returncode != 0:
            logger.error(
                "[%s] '%s' exited with code %d",
                mod.name,
                " ".join(args),
                proc.returncode,
                extra={"ctx": mod.name},
            )
            raise BuildStepError(mod.name, args, proc.returncode, proc.stdout)

    # ------------------------------------------------------------------
    # Asset copies
    # ------------------------------------------------------------------

    def _copy(self, mod: ModuleDescriptor, spec: CopySpec) -> None:
        dest = self.config.root_dir / spec.dest
        sources: list[Path] = []
        for src in spec.sources:
            sources.append(self.config.node_path / src)
            logger.info("[%s] copy '%s'", mod.name, src, extra={"ctx": mod.name})

        try:
            dest.mkdir(parents=True, exist_ok=True)
            for source in sources:
                if source.is_dir():
                    shutil.copytree(source, dest / source.name, dirs_exist_ok=True)
                elif source.exists():
                    shutil.copy2(source, dest / source.name)
                else:
                    raise FileNotFoundError(f"No such file or directory: '{source}'")
        except OSError as exc:
            logger.error("[%s] copy to '%s' failed: %s", mod.name, dest, exc, extra={"ctx": mod.name})
            raise AssetCopyError(f"[{mod.name}] copy to '{dest}' failed: {exc}") from exc
