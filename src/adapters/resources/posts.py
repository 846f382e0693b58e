"""Publicaciones sociales (`/api/posts/*`)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from adapters.secure_api import SecureApiClient


class PostsApi:
    _base = "/api/posts"

    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def create_post(self, post: dict[str, Any]) -> dict[str, Any]:
        envelope = await self._api.post(self._base, post)
        return envelope.data

    async def schedule_post(self, post_id: str, scheduled_for: datetime) -> dict[str, Any]:
        when = scheduled_for if scheduled_for.tzinfo else scheduled_for.replace(tzinfo=timezone.utc)
        envelope = await self._api.post(
            f"{self._base}/schedule",
            {
                "postId": post_id,
                "scheduledFor": when.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
            },
        )
        return envelope.data

    async def publish_post(self, post_id: str, platform: str = "instagram") -> dict[str, Any]:
        envelope = await self._api.post(f"{self._base}/publish", {"postId": post_id, "platform": platform})
        return envelope.data

    async def recent_posts(self) -> list[dict[str, Any]]:
        envelope = await self._api.get(f"{self._base}/recent")
        return envelope.data or []
