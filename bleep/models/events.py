"""Events exchanged between watchers and the build session."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class BuildEventKind(str, Enum):
    """What a watcher is reporting."""

    CYCLE_STARTED = "cycle_started"  # a tool noticed changes and began rebuilding
    STYLE_COMPILED = "style_compiled"
    TYPECHECK_COMPILED = "typecheck_compiled"
    TYPECHECK_FAILED = "typecheck_failed"
    BUNDLE_COMPLETED = "bundle_completed"
    WATCHER_EXITED = "watcher_exited"


class BuildEvent(BaseModel):
    """A single notification published on a session's event bus."""

    model_config = ConfigDict(frozen=True)

    kind: BuildEventKind
    source: str  # tool name, e.g. "tsc"
    module_count: int = 0
    detail: str = ""
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
