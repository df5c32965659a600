# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage, transport and notification surfaces swappable and makes testing easier.
"""

from typing import Any, Protocol

TaskId = str | int
# Opaque server-assigned identifier; only ever compared for equality.


class KeyValueStorage(Protocol):
    """Durable string-keyed storage (the browser's localStorage, in spirit)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class Notifier(Protocol):
    """
    Transient user-facing notifications.

    The shell decides how they look; the core only says what happened.
    """

    def success(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class TaskRepo(Protocol):
    async def list(self, search: str | None = None) -> list[Any]: ...
    async def create(self, draft: Any) -> Any: ...
    async def update(self, task_id: TaskId, patch: dict[str, Any]) -> Any: ...
    async def delete(self, task_id: TaskId) -> None: ...
