"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base_url, timeouts y headers para todo el cliente.
- El `AsyncClient` mantiene el cookie jar de la sesión: es el equivalente a
  `credentials: include` del navegador, así que debe compartirse entre el
  fetcher de tokens y las llamadas autenticadas.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando al backend.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los adaptadores se comporten igual.
    - `transport` permite sustituir la red por un backend simulado.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def error_message_from(response: httpx.Response) -> str | None:
    """Extrae el campo `error` del cuerpo JSON, si existe.

    Devuelve None cuando el cuerpo no es JSON o no trae un `error` de texto.
    """

    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, str) and error:
        return error
    return None
