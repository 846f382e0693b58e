"""Sesiones y mensajes del chatbot (`/api/chat/*`)."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from adapters.secure_api import SecureApiClient


class ChatApi:
    _base = "/api/chat"

    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def list_sessions(self) -> list[dict[str, Any]]:
        envelope = await self._api.get(f"{self._base}/sessions")
        return envelope.data or []

    async def get_session(self, session_id: str) -> dict[str, Any]:
        envelope = await self._api.get(f"{self._base}/sessions/{quote(session_id, safe='')}")
        return envelope.data

    async def create_session(self, title: str | None = None) -> dict[str, Any]:
        envelope = await self._api.post(f"{self._base}/sessions", {"title": title})
        return envelope.data

    async def delete_session(self, session_id: str) -> None:
        await self._api.delete(f"{self._base}/sessions/{quote(session_id, safe='')}")

    async def send_message(
        self,
        message: str,
        *,
        session_id: str | None = None,
        provider: str | None = None,
        model: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": message}
        if session_id:
            payload["sessionId"] = session_id
        if provider:
            payload["provider"] = provider
        if model:
            payload["model"] = model
        envelope = await self._api.post(f"{self._base}/message", payload)
        return envelope.data

    async def providers(self) -> list[dict[str, Any]]:
        envelope = await self._api.get(f"{self._base}/providers")
        return envelope.data or []

    async def models(self, provider_id: str) -> list[dict[str, Any]]:
        envelope = await self._api.get(f"{self._base}/providers/{quote(provider_id, safe='')}/models")
        return envelope.data or []
