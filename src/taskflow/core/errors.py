# src/taskflow/core/errors.py

"""
Error taxonomy.

- ValidationError: client-side, field-scoped, blocks a form submission.
- AuthError: login/signup rejected by the server.
- ApiError: any other non-2xx response (status + server message).
- SessionExpiredError: a 401; by the time it is raised the session is cleared.
- NetworkError: the request failed before a response arrived.
- DecodeError: the response body does not have the expected shape.

None of these are fatal: callers turn them into user-facing notifications.
"""

from __future__ import annotations

from typing import Any


class TaskflowError(Exception):
    """Base class for all client errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskflowError):
    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        summary = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(summary or "Invalid input")


class AuthError(TaskflowError):
    pass


class ApiError(TaskflowError):
    def __init__(self, status: int, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.message}"


class SessionExpiredError(ApiError):
    def __init__(self, message: str = "Session expired. Please sign in again.", payload: Any = None) -> None:
        super().__init__(401, message, payload)


class NetworkError(TaskflowError):
    pass


class DecodeError(TaskflowError):
    pass


def server_message(payload: Any) -> str | None:
    """Extract the `message` field servers put in error bodies, if any."""
    if isinstance(payload, dict):
        msg = payload.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return None


def error_message(err: BaseException, fallback: str) -> str:
    """Best user-facing text for an error: the server-provided message when there is one."""
    if isinstance(err, ApiError):
        return server_message(err.payload) or fallback
    if isinstance(err, (AuthError, ValidationError)) and err.message:
        return err.message
    return fallback
