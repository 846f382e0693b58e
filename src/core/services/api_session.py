"""Composición de una sesión contra el backend.

Este módulo junta las piezas que antes vivían como singletons del cliente
web: un `httpx.AsyncClient` (cookies de sesión), un `TokenCache`, el fetcher,
el cliente autenticado, el bus de eventos y la recuperación de auth. Así la
CLI, un script o un test obtienen todo cableado con una sola llamada.
"""

from __future__ import annotations

import asyncio
from types import TracebackType

import httpx

from adapters.csrf import CsrfTokenFetcher
from adapters.http_client import build_async_client
from adapters.resources import (
    AuthApi,
    CaptionsApi,
    ChatApi,
    DashboardApi,
    ImagesApi,
    PostsApi,
    QuotesApi,
    TemplatesApi,
    UsersApi,
)
from adapters.secure_api import SecureApiClient, Sleep
from core.config import AppSettings
from core.services.auth_recovery import AuthRecovery
from core.services.event_bus import EventBus
from core.services.token_cache import TokenCache


class ApiSession:
    """Sesión autenticada con todos los recursos del backend.

    Uso:
        async with ApiSession() as session:
            await session.auth.login("user", "secret")
            posts = await session.posts.recent_posts()
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        events: EventBus | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings or AppSettings()
        self.http = build_async_client(self.settings, transport=transport)
        self.cache = TokenCache()
        self.events = events or EventBus()

        fetcher = CsrfTokenFetcher(self.http, self.cache, self.settings)
        self.api = SecureApiClient(
            self.http,
            self.cache,
            fetcher=fetcher,
            settings=self.settings,
            sleep=sleep,
        )
        self.recovery = AuthRecovery(self.api, self.events)

        self.auth = AuthApi(self.api)
        self.chat = ChatApi(self.api)
        self.users = UsersApi(self.api)
        self.posts = PostsApi(self.api)
        self.templates = TemplatesApi(self.api)
        self.quotes = QuotesApi(self.api)
        self.captions = CaptionsApi(self.api)
        self.images = ImagesApi(self.api)
        self.dashboard = DashboardApi(self.api)

    async def aclose(self) -> None:
        await self.recovery.drain()
        await self.http.aclose()

    async def __aenter__(self) -> "ApiSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
