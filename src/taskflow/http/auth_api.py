# src/taskflow/http/auth_api.py

from __future__ import annotations

from typing import Any

from .client import ApiClient


class HttpAuthAPI:
    """The two auth endpoints. Both are exempt from bearer credentials."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def signup(self, payload: dict[str, str]) -> Any:
        return await self._client.post("/auth/signup", json=payload)

    async def login(self, payload: dict[str, str]) -> Any:
        return await self._client.post("/auth/login", json=payload)
