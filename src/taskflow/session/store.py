# src/taskflow/session/store.py

"""
Session store.

Holds the bearer token and the minimal identity we know about the user,
mirrored into durable storage under the `token` key so a session survives
a restart.

Lifecycle:
- UNKNOWN until restore() has read storage once (loading=True).
- then AUTHENTICATED <-> ANONYMOUS on login/signup/logout/expire.

The only writers are login/signup/logout here and expire(), which the HTTP
adapter calls on a 401. Everything else only reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

from ..core.errors import ApiError, AuthError, server_message
from ..core.ports import KeyValueStorage
from ..core.validation import (
    LoginDraft,
    SignupDraft,
    require_valid,
    validate_login,
    validate_signup,
)
from .storage import LEGACY_USER_KEY, PROFILE_KEY, TOKEN_KEY

logger = logging.getLogger(__name__)


class SessionStatus(StrEnum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(slots=True, frozen=True)
class Session:
    token: str
    # Only known for sessions started in this process; storage keeps just the token.
    email: str | None = None


class AuthAPI(Protocol):
    async def login(self, payload: dict[str, str]) -> Any: ...
    async def signup(self, payload: dict[str, str]) -> Any: ...


def _extract_token(data: Any) -> str | None:
    if isinstance(data, dict):
        token = data.get("token")
        if isinstance(token, str) and token.strip():
            return token.strip()
    return None


class SessionStore:
    def __init__(self, storage: KeyValueStorage, auth_api: AuthAPI | None = None) -> None:
        self._storage = storage
        self._auth_api = auth_api
        self._session: Session | None = None
        self._status = SessionStatus.UNKNOWN

    def bind_auth_api(self, auth_api: AuthAPI) -> None:
        """Attach the auth endpoints once the HTTP adapter (which reads this store) exists."""
        self._auth_api = auth_api

    # ---- reads ----

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def loading(self) -> bool:
        return self._status is SessionStatus.UNKNOWN

    @property
    def token(self) -> str | None:
        return self._session.token if self._session is not None else None

    def current_session(self) -> Session | None:
        return self._session

    def restore(self) -> Session | None:
        """Resolve the startup state from durable storage. Runs once; later calls are no-ops."""
        if self._status is not SessionStatus.UNKNOWN:
            return self._session

        token = self._storage.get_item(TOKEN_KEY)
        if token:
            self._session = Session(token=token)
            self._status = SessionStatus.AUTHENTICATED
        else:
            self._session = None
            self._status = SessionStatus.ANONYMOUS

        logger.info("Session restored: %s", self._status.value)
        return self._session

    # ---- transitions ----

    def _require_api(self) -> AuthAPI:
        if self._auth_api is None:
            raise RuntimeError("SessionStore has no auth API bound.")
        return self._auth_api

    def _start(self, token: str, email: str) -> Session:
        self._storage.set_item(TOKEN_KEY, token)
        self._session = Session(token=token, email=email)
        self._status = SessionStatus.AUTHENTICATED
        logger.info("Session started for %s", email)
        return self._session

    async def login(self, draft: LoginDraft) -> Session:
        require_valid(validate_login(draft))

        email = draft.email.strip()
        try:
            data = await self._require_api().login({"email": email, "password": draft.password})
        except ApiError as e:
            logger.info("Login rejected: status=%s", e.status)
            raise AuthError(server_message(e.payload) or "Invalid credentials") from e

        token = _extract_token(data)
        if token is None:
            logger.warning("Login response carried no token.")
            raise AuthError("Invalid credentials")
        return self._start(token, email)

    async def signup(self, draft: SignupDraft) -> Session:
        require_valid(validate_signup(draft))

        email = draft.email.strip()
        payload = {"name": draft.name.strip(), "email": email, "password": draft.password}
        try:
            data = await self._require_api().signup(payload)
        except ApiError as e:
            logger.info("Signup rejected: status=%s", e.status)
            raise AuthError(server_message(e.payload) or "Signup failed. Try again.") from e

        token = _extract_token(data)
        if token is None:
            logger.warning("Signup response carried no token.")
            raise AuthError("Signup failed. Try again.")
        return self._start(token, email)

    def logout(self) -> None:
        """Drop the session and every cached profile field. Safe to call repeatedly."""
        was_authenticated = self._session is not None
        self._session = None
        self._status = SessionStatus.ANONYMOUS
        for key in (TOKEN_KEY, LEGACY_USER_KEY, PROFILE_KEY):
            self._storage.remove_item(key)
        if was_authenticated:
            logger.info("Logged out.")

    def expire(self) -> None:
        """Forced logout after the server rejected our token."""
        if self._session is not None:
            logger.warning("Session expired; clearing token.")
        self._session = None
        self._status = SessionStatus.ANONYMOUS
        self._storage.remove_item(TOKEN_KEY)
