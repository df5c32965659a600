# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..http.client import ApiClient
from ..session.gate import AuthGate
from ..session.store import SessionStore
from ..tasks.controller import TaskListController
from ..tasks.task_api import TaskRepository
from .events import SessionEvents
from .navigation import Navigator
from .ports import KeyValueStorage, Notifier


@dataclass
class AppState:
    """Everything the shell needs, wired once in cli/bootstrap.py and passed explicitly."""

    settings: Any
    storage: KeyValueStorage
    events: SessionEvents
    session: SessionStore
    api: ApiClient
    tasks: TaskRepository
    gate: AuthGate
    navigator: Navigator
    notifier: Notifier

    # Present only while the /tasks view is mounted.
    controller: TaskListController | None = None
