"""Widgets del dashboard (`/api/dashboard/*`)."""

from __future__ import annotations

from typing import Any

from adapters.resources._query import with_query
from adapters.secure_api import SecureApiClient


class DashboardApi:
    _base = "/api/dashboard"

    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def stats(self) -> dict[str, Any]:
        envelope = await self._api.get(f"{self._base}/stats")
        return envelope.data

    async def refresh_stats(self) -> dict[str, Any]:
        envelope = await self._api.get(f"{self._base}/stats/refresh")
        return envelope.data

    async def quick_actions(self) -> list[dict[str, Any]]:
        envelope = await self._api.get(f"{self._base}/quick-actions")
        return envelope.data or []

    async def recent_activity(self, limit: int = 10) -> list[dict[str, Any]]:
        envelope = await self._api.get(with_query(f"{self._base}/recent-activity", {"limit": limit}))
        return envelope.data or []

    async def system_health(self) -> dict[str, Any]:
        envelope = await self._api.get(f"{self._base}/system-health")
        return envelope.data
