# src/taskflow/core/events.py

"""
Session events.

The HTTP adapter does not navigate anywhere by itself. When the server answers
401 it clears the session and publishes SessionExpired here; whoever owns
navigation (the console shell) subscribes and moves to the login screen.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SessionExpired:
    method: str
    path: str
    status: int = 401


SessionListener = Callable[[SessionExpired], None]


class SessionEvents:
    """Tiny synchronous pub/sub for session lifecycle notifications."""

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def emit(self, event: SessionExpired) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # One broken subscriber must not stop the others from reacting.
                logger.exception("Session listener failed for %s", event)
