# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires storage -> session -> HTTP adapter -> repository -> gate -> navigator,
- resolves the startup session from storage exactly once.
"""

from __future__ import annotations

import logging

import httpx

from ..config import get_settings
from ..core.events import SessionEvents
from ..core.navigation import Navigator
from ..core.ports import KeyValueStorage, Notifier
from ..core.state import AppState
from ..http.auth_api import HttpAuthAPI
from ..http.client import ApiClient
from ..session.gate import AuthGate
from ..session.storage import FileStorage
from ..session.store import SessionStore
from ..tasks.task_api import TaskRepository

logger = logging.getLogger(__name__)

TASKS_ROUTE = "/tasks"
DASHBOARD_ROUTE = "/dashboard"
# Routes that show the task list; the controller lives while the user stays on them.
TASK_LIST_ROUTES = frozenset({DASHBOARD_ROUTE, TASKS_ROUTE})


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    notifier: Notifier,
    settings=None,
    storage: KeyValueStorage | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings, storage and transport injectable makes the app easy to
    test and avoids hidden global reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = FileStorage(settings.storage_path)

    events = SessionEvents()
    session = SessionStore(storage)
    api = ApiClient(settings, session, events, transport=transport)
    session.bind_auth_api(HttpAuthAPI(api))

    gate = AuthGate(session)
    navigator = Navigator(gate, events)

    state = AppState(
        settings=settings,
        storage=storage,
        events=events,
        session=session,
        api=api,
        tasks=TaskRepository(api),
        gate=gate,
        navigator=navigator,
        notifier=notifier,
    )

    def _on_route_change(route: str, previous: str | None) -> None:
        # Leaving the task list unmounts it; late responses must not touch it.
        if previous in TASK_LIST_ROUTES and route not in TASK_LIST_ROUTES and state.controller is not None:
            state.controller.unmount()
            state.controller = None

    navigator.on_change(_on_route_change)

    session.restore()
    logger.info("State ready api=%s session=%s", settings.api_url, session.status.value)
    return state


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    if state.controller is not None:
        state.controller.unmount()
        state.controller = None
    try:
        await state.api.aclose()
    except Exception:
        logger.debug("HTTP client close failed.", exc_info=True)
