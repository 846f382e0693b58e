"""Administración de usuarios (`/api/users/*`)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from adapters.resources._query import with_query
from adapters.secure_api import SecureApiClient


class UsersApi:
    _base = "/api/users"

    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def list_users(
        self,
        *,
        search: str | None = None,
        role: str | None = None,
        status: str | None = None,
        plan: str | None = None,
    ) -> list[dict[str, Any]]:
        url = with_query(self._base, {"search": search, "role": role, "status": status, "plan": plan})
        envelope = await self._api.get(url)
        return envelope.data or []

    async def get_user(self, user_id: str) -> dict[str, Any]:
        envelope = await self._api.get(f"{self._base}/{quote(user_id, safe='')}")
        return envelope.data

    async def create_user(self, user: dict[str, Any]) -> dict[str, Any]:
        envelope = await self._api.post(self._base, user)
        return envelope.data

    async def update_user(self, user_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        envelope = await self._api.put(f"{self._base}/{quote(user_id, safe='')}", changes)
        return envelope.data

    async def delete_user(self, user_id: str) -> None:
        await self._api.delete(f"{self._base}/{quote(user_id, safe='')}")

    async def toggle_status(self, user_id: str) -> dict[str, Any]:
        envelope = await self._api.patch(f"{self._base}/{quote(user_id, safe='')}/toggle-status")
        return envelope.data
