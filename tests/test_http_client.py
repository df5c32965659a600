# tests/test_http_client.py

from __future__ import annotations

import httpx
import pytest

from taskflow.core.errors import ApiError, NetworkError, SessionExpiredError
from taskflow.core.validation import LoginDraft
from taskflow.http.client import ApiClient, is_auth_endpoint
from taskflow.session.storage import MemoryStorage
from taskflow.session.store import SessionStore


def test_auth_endpoint_classification() -> None:
    assert is_auth_endpoint("/auth/login")
    assert is_auth_endpoint("/auth/signup")
    assert not is_auth_endpoint("/tasks")
    assert not is_auth_endpoint("/tasks/7")


@pytest.mark.asyncio
async def test_protected_request_carries_bearer(signed_in_state, server) -> None:
    await signed_in_state.api.get("/tasks")

    (req,) = server.calls("GET", "/tasks")
    assert req.authorization == f"Bearer {server.token}"


@pytest.mark.asyncio
async def test_auth_request_never_carries_cached_token(signed_in_state, server) -> None:
    # A stale token is cached, yet re-authentication goes out without it.
    await signed_in_state.session.login(LoginDraft(email="ann@example.com", password="secret1"))

    (req,) = server.calls("POST", "/auth/login")
    assert req.authorization is None


@pytest.mark.asyncio
async def test_protected_request_without_token_is_still_sent(state, server) -> None:
    with pytest.raises(SessionExpiredError):
        await state.api.get("/tasks")

    (req,) = server.calls("GET", "/tasks")
    assert req.authorization is None


@pytest.mark.asyncio
async def test_401_clears_session_and_emits_event(signed_in_state, server, storage) -> None:
    seen = []
    signed_in_state.events.subscribe(seen.append)
    server.token = "rotated-on-server"

    with pytest.raises(SessionExpiredError) as exc:
        await signed_in_state.api.get("/tasks")

    assert exc.value.status == 401
    assert signed_in_state.session.current_session() is None
    assert storage.get_item("token") is None
    assert [(e.method, e.path) for e in seen] == [("GET", "/tasks")]

    # The stale token is gone for good: the next protected call carries nothing.
    with pytest.raises(SessionExpiredError):
        await signed_in_state.api.get("/tasks")
    assert server.requests[-1].authorization is None


@pytest.mark.asyncio
async def test_other_errors_surface_status_and_server_message(signed_in_state, server) -> None:
    with pytest.raises(ApiError) as exc:
        await signed_in_state.api.delete("/tasks/999")

    assert not isinstance(exc.value, SessionExpiredError)
    assert exc.value.status == 404
    assert exc.value.message == "Task not found"
    # Non-401 failures do not touch the session.
    assert signed_in_state.session.current_session() is not None


@pytest.mark.asyncio
async def test_network_failure_raises_network_error(signed_in_state, server) -> None:
    server.down = True
    with pytest.raises(NetworkError):
        await signed_in_state.api.get("/tasks")
    assert signed_in_state.session.current_session() is not None


@pytest.mark.asyncio
async def test_error_without_json_body_falls_back_to_reason_phrase(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream down")

    store = SessionStore(MemoryStorage({"token": "t"}))
    store.restore()
    client = ApiClient(settings, store, transport=httpx.MockTransport(handler))

    with pytest.raises(ApiError) as exc:
        await client.get("/tasks")

    assert exc.value.status == 503
    assert exc.value.message == "Service Unavailable"
    assert exc.value.payload == "upstream down"
    await client.aclose()


@pytest.mark.asyncio
async def test_base_path_is_prefixed(settings) -> None:
    seen_urls = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_urls.append(str(request.url))
        return httpx.Response(204)

    store = SessionStore(MemoryStorage())
    store.restore()
    async with ApiClient(settings, store, transport=httpx.MockTransport(handler)) as client:
        assert await client.delete("/tasks/3") is None

    assert seen_urls == ["http://testserver/api/tasks/3"]


@pytest.mark.asyncio
async def test_undecodable_body_becomes_network_error(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not-gzip")

    store = SessionStore(MemoryStorage({"token": "t"}))
    store.restore()
    async with ApiClient(settings, store, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NetworkError):
            await client.get("/tasks")

    assert store.current_session() is not None
