# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.errors import DecodeError
from ..core.ports import TaskId


@dataclass(slots=True, frozen=True)
class Task:
    """
    Cached copy of a server-owned task.

    Instances are immutable: the controller replaces entries with what the
    server confirmed instead of mutating them in place.
    """

    id: TaskId
    title: str
    description: str | None = None
    completed: bool = False

    @classmethod
    def from_payload(cls, raw: Any) -> Task:
        if not isinstance(raw, dict):
            raise DecodeError(f"Expected a task object, got {type(raw).__name__}")

        task_id = raw.get("id")
        # bool is an int subclass; a boolean id is a malformed payload, not an identifier.
        if isinstance(task_id, bool) or not isinstance(task_id, (str, int)):
            raise DecodeError("Task is missing a valid 'id'")

        title = raw.get("title")
        if not isinstance(title, str):
            raise DecodeError(f"Task {task_id!r} is missing a 'title'")

        description = raw.get("description")
        if description is not None and not isinstance(description, str):
            raise DecodeError(f"Task {task_id!r} has a non-string 'description'")

        completed = raw.get("completed", False)
        if completed is None:
            completed = False
        if not isinstance(completed, bool):
            raise DecodeError(f"Task {task_id!r} has a non-boolean 'completed'")

        return cls(id=task_id, title=title, description=description, completed=completed)

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
        }

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title or description. Empty query matches everything."""
        q = (query or "").lower()
        if not q:
            return True
        return q in self.title.lower() or q in (self.description or "").lower()


@dataclass(slots=True)
class TaskDraft:
    title: str = ""
    description: str = ""

    @classmethod
    def from_task(cls, task: Task | None) -> TaskDraft:
        if task is None:
            return cls()
        return cls(title=task.title or "", description=task.description or "")

    def to_payload(self) -> dict[str, Any]:
        return {"title": self.title.strip(), "description": self.description}


def decode_task_list(raw: Any) -> list[Task]:
    """
    Decode a listing response.

    The server returns a bare JSON array of task objects. Anything else
    (a wrapper object, a string, null) is a contract violation.
    """
    if not isinstance(raw, list):
        raise DecodeError(f"Expected a list of tasks, got {type(raw).__name__}")
    return [Task.from_payload(item) for item in raw]
