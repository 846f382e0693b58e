"""Obtención del token anti-CSRF.

Responsabilidad:
- Pedir `GET /api/auth/csrf-token` con la sesión (cookies) actual.
- Parsear `{"data": {"csrfToken": "..."}}` y guardarlo en el `TokenCache`.

Si algo falla la caché queda vacía y se lanza `CsrfTokenError`; el cliente
autenticado decide cómo reclasificarlo.
"""

from __future__ import annotations

import httpx
from pydantic import ValidationError

from core.config import AppSettings
from core.domain.errors import CsrfTokenError
from core.domain.models import ApiResponse, CsrfTokenData
from core.log import get_logger
from core.services.token_cache import TokenCache

_logger = get_logger("adapters.csrf")


class CsrfTokenFetcher:
    """Rellena el `TokenCache` bajo demanda."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: TokenCache,
        settings: AppSettings | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._settings = settings or AppSettings()

    @property
    def cache(self) -> TokenCache:
        return self._cache

    async def ensure_token(self) -> str:
        """Devuelve el token cacheado o lo pide al servidor si no hay ninguno."""

        cached = self._cache.get()
        if cached:
            return cached
        return await self.fetch_token()

    async def fetch_token(self) -> str:
        """Pide siempre un token nuevo y sobrescribe la caché."""

        path = self._settings.csrf_token_path
        self._cache.clear()
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as exc:
            _logger.warning("csrf_token_fetch_failed", url=path, reason=type(exc).__name__)
            raise CsrfTokenError(f"Failed to fetch CSRF token: {exc}") from exc

        if not response.is_success:
            _logger.warning("csrf_token_fetch_failed", url=path, status_code=response.status_code)
            raise CsrfTokenError("Failed to fetch CSRF token", status_code=response.status_code)

        try:
            envelope = ApiResponse[CsrfTokenData].model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            _logger.warning("csrf_token_malformed", url=path)
            raise CsrfTokenError("Malformed CSRF token response", status_code=response.status_code) from exc

        if envelope.data is None:
            raise CsrfTokenError("Failed to obtain CSRF token", status_code=response.status_code)

        self._cache.set(envelope.data.csrf_token)
        _logger.debug("csrf_token_refreshed", url=path)
        return envelope.data.csrf_token
