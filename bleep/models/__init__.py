"""bleep data models — all Pydantic v2, all frozen (immutable)."""

from bleep.models.events import BuildEvent, BuildEventKind
from bleep.models.modules import CopySpec, ModuleDescriptor, ModuleRegistry

__all__ = [
    # modules
    "CopySpec",
    "ModuleDescriptor",
    "ModuleRegistry",
    # events
    "BuildEvent",
    "BuildEventKind",
]
