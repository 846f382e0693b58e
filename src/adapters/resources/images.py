"""Búsqueda de imágenes (Pexels/Pixabay vía `/api/images/*`)."""

from __future__ import annotations

from typing import Any

from adapters.resources._query import with_query
from adapters.secure_api import SecureApiClient


class ImagesApi:
    _base = "/api/images"

    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def search(
        self,
        q: str,
        *,
        page: int | None = None,
        per_page: int | None = None,
        orientation: str | None = None,
        category: str | None = None,
    ) -> dict[str, Any]:
        params = {"q": q, "page": page, "per_page": per_page, "orientation": orientation, "category": category}
        envelope = await self._api.get(with_query(f"{self._base}/search", params))
        return envelope.data

    async def curated(self, page: int = 1, per_page: int = 20) -> dict[str, Any]:
        envelope = await self._api.get(with_query(f"{self._base}/curated", {"page": page, "per_page": per_page}))
        return envelope.data

    async def search_pixabay(
        self,
        q: str,
        *,
        page: int | None = None,
        per_page: int | None = None,
        orientation: str | None = None,
        category: str | None = None,
        colors: str | None = None,
        order: str | None = None,
    ) -> dict[str, Any]:
        params = {
            "q": q,
            "page": page,
            "per_page": per_page,
            "orientation": orientation,
            "category": category,
            "colors": colors,
            "order": order,
        }
        envelope = await self._api.get(with_query(f"{self._base}/pixabay/search", params))
        return envelope.data

    async def categories(self) -> dict[str, Any]:
        envelope = await self._api.get(f"{self._base}/categories")
        return envelope.data
