"""Generación de frases (`/api/quotes/*`)."""

from __future__ import annotations

from typing import Any

from adapters.secure_api import SecureApiClient

DEFAULT_OLLAMA_MODEL = "llama3.2"


def _quote_params(
    category: str | None,
    theme: str | None,
    tone: str | None,
    keywords: list[str] | None,
) -> dict[str, Any]:
    params = {"category": category, "theme": theme, "tone": tone, "keywords": keywords}
    return {k: v for k, v in params.items() if v is not None}


class QuotesApi:
    _base = "/api/quotes"

    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def generate(
        self,
        *,
        category: str | None = None,
        theme: str | None = None,
        tone: str | None = None,
        keywords: list[str] | None = None,
    ) -> dict[str, Any]:
        envelope = await self._api.post(
            f"{self._base}/generate", _quote_params(category, theme, tone, keywords)
        )
        return envelope.data

    async def generate_ollama(
        self,
        *,
        category: str | None = None,
        theme: str | None = None,
        tone: str | None = None,
        keywords: list[str] | None = None,
    ) -> dict[str, Any]:
        envelope = await self._api.post(
            f"{self._base}/generate-ollama", _quote_params(category, theme, tone, keywords)
        )
        return envelope.data

    async def generate_custom_ollama(self, prompt: str, model: str | None = None) -> dict[str, Any]:
        envelope = await self._api.post(
            f"{self._base}/generate-custom-ollama",
            {"prompt": prompt, "model": model or DEFAULT_OLLAMA_MODEL},
        )
        return envelope.data
