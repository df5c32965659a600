# src/taskflow/tasks/task_api.py

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from ..core.ports import TaskId
from ..http.client import ApiClient
from .task_models import Task, TaskDraft, decode_task_list

logger = logging.getLogger(__name__)

TASKS_PATH = "/tasks"


def _task_path(task_id: TaskId) -> str:
    return f"{TASKS_PATH}/{quote(str(task_id), safe='')}"


class TaskRepository:
    """
    CRUD client for the task resource. One method, one HTTP call.

    Errors are not handled here: ApiError/NetworkError/DecodeError reach the
    caller, and a 401 has already forced a logout inside the adapter.
    """

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list(self, search: str | None = None) -> list[Task]:
        params = {"search": search} if search else None
        raw = await self._client.get(TASKS_PATH, params=params)
        tasks = decode_task_list(raw)
        logger.debug("Listed %d tasks (search=%r)", len(tasks), search)
        return tasks

    async def create(self, draft: TaskDraft) -> Task:
        raw = await self._client.post(TASKS_PATH, json=draft.to_payload())
        task = Task.from_payload(raw)
        logger.info("Created task id=%s", task.id)
        return task

    async def update(self, task_id: TaskId, patch: dict[str, Any]) -> Task:
        raw = await self._client.put(_task_path(task_id), json=patch)
        task = Task.from_payload(raw)
        logger.info("Updated task id=%s", task_id)
        return task

    async def delete(self, task_id: TaskId) -> None:
        await self._client.delete(_task_path(task_id))
        logger.info("Deleted task id=%s", task_id)
