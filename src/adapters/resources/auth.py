"""Endpoints de sesión (`/api/auth/*`)."""

from __future__ import annotations

from typing import Any

from adapters.secure_api import SecureApiClient
from core.domain.errors import ApiError
from core.domain.models import AuthUser, LoginCredentials


class AuthApi:
    _base = "/api/auth"

    def __init__(self, api: SecureApiClient) -> None:
        self._api = api

    async def csrf_token(self) -> str:
        """Fuerza un token nuevo y lo deja en la caché de la sesión."""

        return await self._api.fetcher.fetch_token()

    async def login(self, username: str, password: str) -> AuthUser:
        credentials = LoginCredentials(username=username, password=password)
        envelope = await self._api.post(f"{self._base}/login", credentials.model_dump(), retry=False)
        if not envelope.success or envelope.data is None:
            raise ApiError(envelope.error or "Login failed")
        return AuthUser.model_validate(envelope.data)

    async def logout(self) -> None:
        await self._api.post(f"{self._base}/logout", retry=False)
        # La sesión del servidor ya no existe: el token viejo tampoco vale.
        self._api.cache.clear()

    async def me(self) -> AuthUser:
        envelope = await self._api.get(f"{self._base}/me", retry=False)
        if not envelope.success or envelope.data is None:
            raise ApiError(envelope.error or "Failed to get current user")
        return AuthUser.model_validate(envelope.data)

    async def session_init(self) -> dict[str, Any] | None:
        envelope = await self._api.get(f"{self._base}/session-init", retry=False)
        return envelope.data
