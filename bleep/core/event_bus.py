"""Build event bus — explicit notification channel between watchers.

Watchers publish :class:`BuildEvent`s; the orchestrator subscribes the
timer and the bundler trigger.  A type-check watcher may publish
``TYPECHECK_COMPILED`` any number of times over its lifetime and every
publication is delivered.

Watchers publish from their output-reader threads, so dispatch is
serialized with a re-entrant lock: handlers never run concurrently
and may themselves publish.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from bleep.models.events import BuildEvent, BuildEventKind

logger = logging.getLogger(__name__)

EventHandler = Callable[[BuildEvent], None]


class BuildEventBus:
    """Routes build events to handlers registered per event kind."""

    def __init__(self) -> None:
        self._handlers: dict[BuildEventKind, list[EventHandler]] = {
            kind: [] for kind in BuildEventKind
        }
        self._history: list[BuildEvent] = []
        self._lock = threading.RLock()
        self._closed = False

    def subscribe(self, kind: BuildEventKind, handler: EventHandler) -> None:
        """Register *handler* for events of *kind*, called in registration order."""
        with self._lock:
            self._handlers[kind].append(handler)

    def publish(self, event: BuildEvent) -> int:
        """Deliver *event* to every handler of its kind.

        Returns the number of handlers that ran without raising.  A
        failing handler is logged and does not stop delivery to the
        remaining handlers.  Events published after :meth:`close` are
        dropped.
        """
        with self._lock:
            if self._closed:
                logger.debug("Bus closed — dropping %s from %s", event.kind.value, event.source)
                return 0
            self._history.append(event)
            delivered = 0
            for handler in list(self._handlers[event.kind]):
                try:
                    handler(event)
                    delivered += 1
                except Exception:  # noqa: BLE001
                    logger.exception(
                        "Handler for %s from %s failed", event.kind.value, event.source
                    )
            return delivered

    def close(self) -> None:
        """Stop delivering events; late publications from stopped watchers are dropped."""
        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def history(self) -> list[BuildEvent]:
        """Return a copy of every delivered event, oldest first."""
        with self._lock:
            return list(self._history)

    def count(self, kind: BuildEventKind) -> int:
        with self._lock:
            return sum(1 for e in self._history if e.kind == kind)
