# src/taskflow/tasks/controller.py

"""
Task list controller.

Owns the view state of the task list:
- the cached task collection (server order),
- the free-text search string,
- the create/edit modal (draft + field errors),
- the id of an in-flight delete.

Mutations are confirm-then-update: the cache only changes after the server
accepted the request. Failures become notifications and leave the cache as it was.

After unmount() the controller ignores late responses, so a request that
finishes after the user navigated away cannot write into a dead view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..core.errors import TaskflowError, error_message
from ..core.ports import Notifier, TaskId, TaskRepo
from ..core.validation import validate_task
from .task_models import Task, TaskDraft

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ModalState:
    open: bool = False
    editing: Task | None = None
    draft: TaskDraft = field(default_factory=TaskDraft)
    errors: dict[str, str] = field(default_factory=dict)
    submitting: bool = False


class TaskListController:
    def __init__(self, repo: TaskRepo, notifier: Notifier) -> None:
        self._repo = repo
        self._notifier = notifier
        self._alive = True

        self.tasks: list[Task] = []
        self.search = ""
        self.loading = False
        self.modal = ModalState()
        self.deleting_id: TaskId | None = None

    # ---- lifecycle ----

    @property
    def alive(self) -> bool:
        return self._alive

    async def mount(self) -> None:
        self._alive = True
        await self.refresh()

    def unmount(self) -> None:
        self._alive = False

    # ---- reads ----

    @property
    def count(self) -> int:
        return len(self.tasks) if isinstance(self.tasks, list) else 0

    def filtered(self) -> list[Task]:
        tasks = self.tasks if isinstance(self.tasks, list) else []
        return [t for t in tasks if t.matches(self.search)]

    def empty_message(self) -> str | None:
        if self.filtered():
            return None
        if self.count == 0:
            return "No tasks yet. Create your first!"
        return "No tasks match search."

    # ---- search ----

    async def set_search(self, query: str, *, refetch: bool = True) -> None:
        self.search = query or ""
        if refetch:
            await self.refresh()

    async def clear_search(self) -> None:
        await self.set_search("")

    async def refresh(self) -> None:
        """Re-fetch the collection. Never raises: on failure the collection becomes empty."""
        self.loading = True
        try:
            tasks = await self._repo.list(self.search or None)
        except TaskflowError as e:
            logger.warning("Fetch tasks failed: %s", e)
            self._notifier.error("Failed to load tasks")
            tasks = []

        if not self._alive:
            logger.debug("Dropping task list response for an unmounted view.")
            return
        self.tasks = tasks
        self.loading = False

    # ---- modal ----

    def open_modal(self, task: Task | None = None) -> None:
        self.modal = ModalState(open=True, editing=task, draft=TaskDraft.from_task(task))

    def close_modal(self) -> None:
        self.modal = ModalState()

    def change_field(self, name: str, value: str) -> None:
        if name not in ("title", "description"):
            raise ValueError(f"Unknown task field: {name}")
        setattr(self.modal.draft, name, value)
        self.modal.errors.pop(name, None)

    async def submit(self) -> bool:
        """
        Validate and send the modal draft (create or update).

        Returns True when the server accepted it. Validation errors are stored
        on the modal and nothing is sent. While a submit is in flight further
        calls return False without sending.
        """
        modal = self.modal
        if not modal.open or modal.submitting:
            return False

        errors = validate_task(modal.draft.title)
        if errors:
            modal.errors = errors
            return False

        modal.submitting = True
        try:
            if modal.editing is not None:
                await self._repo.update(modal.editing.id, modal.draft.to_payload())
                done_msg = "Task updated!"
            else:
                await self._repo.create(modal.draft)
                done_msg = "Task created!"
        except TaskflowError as e:
            logger.info("Task submit failed: %s", e)
            self._notifier.error(error_message(e, "Something went wrong"))
            return False
        finally:
            modal.submitting = False

        self._notifier.success(done_msg)
        if not self._alive:
            return True

        self.close_modal()
        # Re-fetch instead of splicing so count and content match the server exactly.
        await self.refresh()
        return True

    # ---- row actions ----

    async def toggle(self, task: Task) -> Task | None:
        """Flip `completed` on the server; the cached entry changes only after the server confirms."""
        payload = task.to_payload()
        payload["completed"] = not task.completed

        try:
            confirmed = await self._repo.update(task.id, payload)
        except TaskflowError as e:
            logger.info("Toggle failed for task id=%s: %s", task.id, e)
            self._notifier.error("Update failed")
            return None

        if self._alive:
            self.tasks = [confirmed if t.id == task.id else t for t in self.tasks]
        return confirmed

    async def delete(self, task_id: TaskId) -> bool:
        if self.deleting_id == task_id:
            logger.debug("Delete for task id=%s already in flight.", task_id)
            return False

        self.deleting_id = task_id
        try:
            await self._repo.delete(task_id)
        except TaskflowError as e:
            logger.info("Delete failed for task id=%s: %s", task_id, e)
            self._notifier.error("Delete failed")
            return False
        finally:
            if self._alive and self.deleting_id == task_id:
                self.deleting_id = None

        self._notifier.success("Task deleted")
        if self._alive:
            # Match by id: the list may have been re-ordered or re-fetched meanwhile.
            self.tasks = [t for t in self.tasks if t.id != task_id]
        return True
