"""Plantillas de contenido (`/api/templates/*`)."""

from __future__ import annotations

from typing import Any

from adapters.resources._query import with_query
from adapters.secure_api import SecureApiClient


class TemplatesApi:
    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def list_templates(self) -> list[dict[str, Any]]:
        envelope = await self._api.get("/api/templates")
        return envelope.data or []

    async def popular_templates(self) -> list[dict[str, Any]]:
        envelope = await self._api.get("/api/templates/popular")
        return envelope.data or []

    async def example_templates(self, category: str | None = None) -> list[dict[str, Any]]:
        envelope = await self._api.get(with_query("/api/example-templates", {"category": category}))
        data = envelope.data
        if not isinstance(data, dict):
            return []
        return list(data.get("templates") or [])
