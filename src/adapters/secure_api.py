"""Cliente HTTP autenticado con manejo de sesión y detección de reinicios.

Responsabilidad:
- Inyectar el token anti-CSRF en requests mutantes (no GET/HEAD/OPTIONS).
- Normalizar respuestas 2xx como `ApiResponse`.
- Clasificar fallos en `AuthenticationError`, `ServerRestartError` o
  `ApiError`; nunca deja escapar una excepción cruda de httpx.
- Reintentar una vez (configurable) cuando la sesión expira.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import httpx
from pydantic import ValidationError

from adapters.csrf import CsrfTokenFetcher
from adapters.http_client import error_message_from
from core.config import AppSettings
from core.domain.errors import ApiError, AuthenticationError, ServerRestartError
from core.domain.models import ApiResponse, RequestDescriptor
from core.log import get_logger
from core.services.token_cache import TokenCache

_logger = get_logger("adapters.secure_api")

# Fallos de transporte que se parecen a "servidor caído/reiniciando".
_UNREACHABLE_ERRORS: tuple[type[Exception], ...] = (httpx.NetworkError, httpx.ConnectTimeout)

Sleep = Callable[[float], Awaitable[None]]


class SecureApiClient:
    """Wrapper de `httpx.AsyncClient` con semántica de sesión del backend.

    Reglas de diseño:
    - El `TokenCache` es inyectado y compartido con el fetcher.
    - `call` hace un único intento; `call_with_retry` añade la política de
      reintento sobre `AuthenticationError`.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: TokenCache,
        *,
        fetcher: CsrfTokenFetcher | None = None,
        settings: AppSettings | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._cache = cache
        self._settings = settings or AppSettings()
        self._fetcher = fetcher or CsrfTokenFetcher(client, cache, self._settings)
        self._sleep = sleep

    @property
    def cache(self) -> TokenCache:
        return self._cache

    @property
    def fetcher(self) -> CsrfTokenFetcher:
        return self._fetcher

    @property
    def settings(self) -> AppSettings:
        return self._settings

    async def call(self, descriptor: RequestDescriptor) -> ApiResponse[Any]:
        """Ejecuta una llamada y devuelve el sobre del backend."""

        headers: dict[str, str] = {"Content-Type": "application/json", **descriptor.headers}

        if descriptor.is_mutating:
            try:
                token = await self._fetcher.ensure_token()
            except Exception as exc:
                # Sin token lo más probable es que el backend perdiera su estado en memoria.
                self._cache.clear()
                _logger.warning("csrf_token_unavailable", url=descriptor.url, reason=str(exc))
                raise ServerRestartError(
                    "Failed to obtain CSRF token - server may have restarted"
                ) from exc
            headers[self._settings.csrf_header_name] = token

        try:
            response = await self._client.request(
                descriptor.method,
                descriptor.url,
                headers=headers,
                json=descriptor.body,
            )
        except _UNREACHABLE_ERRORS as exc:
            _logger.warning("backend_unreachable", url=descriptor.url, reason=type(exc).__name__)
            raise ServerRestartError("Network error - server may be down or restarting") from exc
        except httpx.HTTPError as exc:
            _logger.warning("transport_error", url=descriptor.url, reason=type(exc).__name__)
            raise ApiError(str(exc) or type(exc).__name__) from exc

        return self._classify(descriptor, response)

    async def call_with_retry(
        self,
        descriptor: RequestDescriptor,
        max_retries: int | None = None,
    ) -> ApiResponse[Any]:
        """Reintenta solo ante `AuthenticationError`, hasta `max_retries` veces.

        Cualquier otro fallo (o el del último intento) se propaga sin tocar.
        """

        retries = self._settings.auth_retry_max if max_retries is None else max(0, max_retries)
        attempt = 0
        while True:
            try:
                return await self.call(descriptor)
            except AuthenticationError:
                if attempt >= retries:
                    raise
                self._cache.clear()
                attempt += 1
                _logger.info(
                    "auth_retry",
                    url=descriptor.url,
                    attempt=attempt,
                    max_retries=retries,
                    delay_seconds=self._settings.auth_retry_delay_seconds,
                )
                await self._sleep(self._settings.auth_retry_delay_seconds)

    def _classify(self, descriptor: RequestDescriptor, response: httpx.Response) -> ApiResponse[Any]:
        status = response.status_code

        if status == 401:
            self._cache.clear()
            _logger.info("session_expired", url=descriptor.url)
            raise AuthenticationError("Session expired or invalid")

        if status == 403:
            message = error_message_from(response)
            if message and "csrf" in message.lower():
                self._cache.clear()
                _logger.warning("csrf_rejected", url=descriptor.url, error=message)
                raise ServerRestartError(
                    "CSRF token invalid - server may have restarted", status_code=status
                )
            raise ApiError(message or "Forbidden", status_code=status)

        if not response.is_success:
            message = error_message_from(response)
            raise ApiError(
                message or f"HTTP {status}: {response.reason_phrase}",
                status_code=status,
            )

        if status == 204 or not response.content:
            return ApiResponse[Any](success=True)

        try:
            return ApiResponse[Any].model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ApiError("Malformed response from server", status_code=status) from exc

    # Helpers por verbo (mismos defaults de reintento que el cliente web).

    async def get(self, url: str, *, retry: bool = True, headers: dict[str, str] | None = None) -> ApiResponse[Any]:
        descriptor = RequestDescriptor(url=url, method="GET", headers=headers or {})
        return await (self.call_with_retry(descriptor) if retry else self.call(descriptor))

    async def post(self, url: str, data: Any = None, *, retry: bool = True) -> ApiResponse[Any]:
        descriptor = RequestDescriptor(url=url, method="POST", body=data)
        return await (self.call_with_retry(descriptor) if retry else self.call(descriptor))

    async def put(self, url: str, data: Any = None) -> ApiResponse[Any]:
        return await self.call(RequestDescriptor(url=url, method="PUT", body=data))

    async def patch(self, url: str, data: Any = None) -> ApiResponse[Any]:
        return await self.call(RequestDescriptor(url=url, method="PATCH", body=data))

    async def delete(self, url: str) -> ApiResponse[Any]:
        return await self.call(RequestDescriptor(url=url, method="DELETE"))
