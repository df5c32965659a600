# src/taskflow/session/gate.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .store import SessionStore

LOGIN_ROUTE = "/login"


class GateDecision(StrEnum):
    WAIT = "wait"
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(slots=True, frozen=True)
class GateResult:
    decision: GateDecision
    redirect_to: str | None = None


class AuthGate:
    """Blocks protected views until the session is resolved, then lets only authenticated users in."""

    def __init__(self, session: SessionStore) -> None:
        self._session = session

    @property
    def loading(self) -> bool:
        return self._session.loading

    @property
    def is_authenticated(self) -> bool:
        return self._session.current_session() is not None

    def check(self) -> GateResult:
        if self.loading:
            return GateResult(GateDecision.WAIT)
        if self.is_authenticated:
            return GateResult(GateDecision.ALLOW)
        return GateResult(GateDecision.REDIRECT, redirect_to=LOGIN_ROUTE)
