# src/taskflow/core/navigation.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..session.gate import LOGIN_ROUTE, AuthGate, GateDecision
from .events import SessionEvents, SessionExpired

logger = logging.getLogger(__name__)

PUBLIC_ROUTES = frozenset({"/login", "/signup"})
PROTECTED_ROUTES = frozenset({"/dashboard", "/tasks", "/profile"})
DEFAULT_ROUTE = "/dashboard"

RouteListener = Callable[[str, str | None], None]
# (new_route, previous_route)


def resolve_route(path: str) -> str:
    """Normalize a path; the root and unknown paths land on the dashboard."""
    p = "/" + (path or "").strip().strip("/").lower()
    if p in PUBLIC_ROUTES or p in PROTECTED_ROUTES:
        return p
    return DEFAULT_ROUTE


class Navigator:
    """
    Route table + current route.

    Every navigation to a protected route goes through the auth gate.
    A SessionExpired event sends the user back to the login screen.
    """

    def __init__(self, gate: AuthGate, events: SessionEvents | None = None) -> None:
        self._gate = gate
        self._listeners: list[RouteListener] = []
        self.current: str | None = None
        if events is not None:
            events.subscribe(self._on_session_expired)

    def on_change(self, listener: RouteListener) -> None:
        self._listeners.append(listener)

    def _enter(self, route: str) -> str:
        previous = self.current
        self.current = route
        if route != previous:
            logger.debug("Route %s -> %s", previous, route)
            for listener in list(self._listeners):
                listener(route, previous)
        return route

    def navigate(self, path: str) -> str | None:
        """
        Go to `path`. Returns the route actually entered, or None while the
        session is still being resolved.
        """
        route = resolve_route(path)
        if route in PUBLIC_ROUTES:
            return self._enter(route)

        result = self._gate.check()
        if result.decision is GateDecision.WAIT:
            return None
        if result.decision is GateDecision.REDIRECT:
            return self._enter(result.redirect_to or LOGIN_ROUTE)
        return self._enter(route)

    def _on_session_expired(self, event: SessionExpired) -> None:
        logger.info("Session expired during %s %s; redirecting to login.", event.method, event.path)
        self._enter(LOGIN_ROUTE)
