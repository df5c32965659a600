# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.cli.bootstrap import create_initial_state
from taskflow.core.state import AppState
from taskflow.session.storage import MemoryStorage

from .fakes import FakeNotifier, FakeTaskServer


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the HTTP adapter and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment.
    """
    return SimpleNamespace(
        app_name="taskflow-test",
        log_level="DEBUG",
        api_url="http://testserver/api",
        connect_timeout=1.0,
        read_timeout=1.0,
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
    )


@pytest.fixture()
def server() -> FakeTaskServer:
    return FakeTaskServer()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    server: FakeTaskServer,
    storage: MemoryStorage,
    notifier: FakeNotifier,
) -> AppState:
    """AppState wired exactly as in production, but talking to the fake server."""
    return create_initial_state(
        settings=settings,
        storage=storage,
        notifier=notifier,
        transport=server.transport(),
    )


@pytest.fixture()
def signed_in_state(
    settings: SimpleNamespace,
    server: FakeTaskServer,
    storage: MemoryStorage,
    notifier: FakeNotifier,
) -> AppState:
    """Same wiring as `state`, as if the app started with a valid token already stored."""
    storage.set_item("token", server.token)
    return create_initial_state(
        settings=settings,
        storage=storage,
        notifier=notifier,
        transport=server.transport(),
    )
