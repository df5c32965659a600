# tests/test_navigation.py

from __future__ import annotations

import pytest

from taskflow.core.events import SessionEvents, SessionExpired
from taskflow.core.navigation import Navigator, resolve_route
from taskflow.session.gate import AuthGate, GateDecision
from taskflow.session.storage import MemoryStorage
from taskflow.session.store import SessionStore


def _navigator(storage: MemoryStorage, *, restore: bool = True) -> tuple[Navigator, SessionStore, SessionEvents]:
    store = SessionStore(storage)
    if restore:
        store.restore()
    events = SessionEvents()
    return Navigator(AuthGate(store), events), store, events


def test_gate_waits_until_session_is_resolved() -> None:
    store = SessionStore(MemoryStorage({"token": "t"}))
    gate = AuthGate(store)

    assert gate.check().decision is GateDecision.WAIT

    store.restore()
    assert gate.check().decision is GateDecision.ALLOW
    assert gate.is_authenticated


def test_gate_redirects_anonymous_to_login() -> None:
    store = SessionStore(MemoryStorage())
    store.restore()

    result = AuthGate(store).check()
    assert result.decision is GateDecision.REDIRECT
    assert result.redirect_to == "/login"


@pytest.mark.parametrize(
    ("path", "expected"),
    [("/", "/dashboard"), ("", "/dashboard"), ("/nowhere", "/dashboard"), ("tasks/", "/tasks"), ("/LOGIN", "/login")],
)
def test_resolve_route(path, expected) -> None:
    assert resolve_route(path) == expected


def test_protected_routes_require_session() -> None:
    nav, _, _ = _navigator(MemoryStorage())

    assert nav.navigate("/tasks") == "/login"
    assert nav.navigate("/signup") == "/signup"


def test_navigation_waits_while_loading() -> None:
    nav, _, _ = _navigator(MemoryStorage({"token": "t"}), restore=False)

    assert nav.navigate("/dashboard") is None
    assert nav.current is None


def test_session_expiry_moves_to_login_and_notifies_listeners() -> None:
    nav, store, events = _navigator(MemoryStorage({"token": "t"}))
    changes = []
    nav.on_change(lambda route, previous: changes.append((previous, route)))

    assert nav.navigate("/profile") == "/profile"

    store.expire()
    events.emit(SessionExpired(method="GET", path="/tasks"))

    assert nav.current == "/login"
    assert changes == [(None, "/profile"), ("/profile", "/login")]
    assert nav.navigate("/profile") == "/login"


def test_broken_listener_does_not_block_others() -> None:
    events = SessionEvents()
    got = []

    def broken(event):
        raise RuntimeError("boom")

    events.subscribe(broken)
    unsubscribe = events.subscribe(got.append)
    events.emit(SessionExpired(method="PUT", path="/tasks/1"))
    unsubscribe()
    events.emit(SessionExpired(method="PUT", path="/tasks/2"))

    assert [e.path for e in got] == ["/tasks/1"]
