"""Generación de captions (`/api/captions/generate`)."""

from __future__ import annotations

from typing import Any

from adapters.secure_api import SecureApiClient


class CaptionsApi:
    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def generate(
        self,
        quote_text: str,
        *,
        platform: str | None = None,
        include_hashtags: bool | None = None,
        include_emojis: bool | None = None,
        tone: str | None = None,
    ) -> dict[str, Any]:
        payload = {
            "quoteText": quote_text,
            "platform": platform,
            "includeHashtags": include_hashtags,
            "includeEmojis": include_emojis,
            "tone": tone,
        }
        envelope = await self._api.post(
            "/api/captions/generate", {k: v for k, v in payload.items() if v is not None}
        )
        return envelope.data
