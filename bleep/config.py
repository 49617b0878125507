"""Build configuration — env-driven via pydantic-settings.

Reads from a .env file and BLEEP_* environment variables. Relative
paths are resolved against ``root_dir``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class BleepConfig(BaseSettings):
    """Build orchestrator configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BLEEP_ROOT_DIR=/src/site
        export BLEEP_ESBUILD=false
        export BLEEP_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BLEEP_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"
    debug: bool = False

    # Source and output trees
    root_dir: Path = Path(".")
    ui_dir: Path = Path("ui")
    js_dir: Path = Path("public/compiled")
    css_dir: Path = Path("public/css")
    node_dir: Path = Path("ui/node_modules")
    tsc_config_path: Path = Path("ui/.build/tsconfig.json")

    # Tool toggles
    sass: bool = True
    tsc: bool = True
    esbuild: bool = True

    # Tool executables
    sass_bin: str = "sass"
    tsc_bin: str = "tsc"
    esbuild_bin: str = "esbuild"

    # "package.module:attribute" producing a RegistryProvider
    registry_provider: str = ""

    watcher_stop_timeout: float = 5.0

    def resolve(self, path: Path) -> Path:
        """Return *path* anchored at ``root_dir`` unless already absolute."""
        return path if path.is_absolute() else self.root_dir / path

    @property
    def ui_path(self) -> Path:
        return self.resolve(self.ui_dir)

    @property
    def js_path(self) -> Path:
        return self.resolve(self.js_dir)

    @property
    def css_path(self) -> Path:
        return self.resolve(self.css_dir)

    @property
    def node_path(self) -> Path:
        return self.resolve(self.node_dir)

    @property
    def tsc_config_file(self) -> Path:
        return self.resolve(self.tsc_config_path)


# Module-level singleton — import as `from bleep.config import config`
config = BleepConfig()
