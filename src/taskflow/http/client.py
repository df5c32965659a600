# src/taskflow/http/client.py

"""
Auth-aware HTTP adapter over httpx.AsyncClient.

Rules:
- Requests under /auth/ (login/signup) never carry a bearer token, even if one is cached.
- Every other request carries `Authorization: Bearer <token>` when we have one.
  Without a token the request is still sent; the server answers 401.
- A 401 from any endpoint clears the session and publishes SessionExpired,
  then raises SessionExpiredError to the caller.
- Other non-2xx statuses raise ApiError(status, server message).
- Transport failures (and any other httpx request error) raise NetworkError
  and leave the session alone.

No retries, no queueing: each call is one request.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import ApiError, NetworkError, SessionExpiredError, server_message
from ..core.events import SessionEvents, SessionExpired
from ..session.store import SessionStore

logger = logging.getLogger(__name__)

AUTH_PATH_MARKER = "/auth/"


def is_auth_endpoint(path: str) -> bool:
    return AUTH_PATH_MARKER in path


def _make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


def _decode_body(response: httpx.Response) -> Any:
    """JSON when the body is JSON, raw text otherwise, None when there is no body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    def __init__(
        self,
        settings,
        session: SessionStore,
        events: SessionEvents | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session = session
        self._events = events if events is not None else SessionEvents()
        self._client = httpx.AsyncClient(
            base_url=settings.api_url,
            headers={"Content-Type": "application/json"},
            timeout=_make_timeout(settings.connect_timeout, settings.read_timeout),
            transport=transport,
        )

    @property
    def events(self) -> SessionEvents:
        return self._events

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _auth_headers(self, method: str, path: str) -> dict[str, str]:
        if is_auth_endpoint(path):
            logger.debug("API %s %s: auth endpoint, no token", method, path)
            return {}

        token = self._session.token
        if not token:
            logger.warning("API %s %s: no token, expecting the server to reject", method, path)
            return {}

        logger.debug("API %s %s: bearer attached (len=%d)", method, path, len(token))
        return {"Authorization": f"Bearer {token}"}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        method = method.upper()
        headers = self._auth_headers(method, path)

        try:
            response = await self._client.request(method, path, json=json, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.info("API %s %s: timeout (%s)", method, path, e.__class__.__name__)
            raise NetworkError("Request timed out. Try again later.") from e
        except httpx.RequestError as e:
            # Also covers undecodable bodies and redirect loops.
            logger.info("API %s %s: network error (%s)", method, path, e.__class__.__name__)
            raise NetworkError("Network error. Check your connection.") from e

        payload = _decode_body(response)
        status = response.status_code

        if status == 401:
            logger.warning("API %s %s: 401, forcing logout", method, path)
            self._session.expire()
            self._events.emit(SessionExpired(method=method, path=path))
            raise SessionExpiredError(payload=payload)

        if not response.is_success:
            logger.info("API %s %s: HTTP %s", method, path, status)
            message = server_message(payload) or response.reason_phrase or "Request failed"
            raise ApiError(status, message, payload)

        logger.debug("API %s %s: HTTP %s", method, path, status)
        return payload

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, *, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
