from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from adapters.csrf import CsrfTokenFetcher
from adapters.http_client import build_async_client
from adapters.secure_api import SecureApiClient
from core.config import AppSettings
from core.services.token_cache import TokenCache

BASE_URL = "http://testserver"
CSRF_PATH = "/api/auth/csrf-token"

Responder = Callable[[httpx.Request], httpx.Response]


def envelope(data: Any = None, *, success: bool = True, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": success, "timestamp": "2025-01-01T00:00:00.000Z"}
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


class FakeBackend:
    """Scripted backend: each (method, path) owns a queue of responses.

    The last queued response is reused once the queue is drained.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[httpx.Response | Responder | Exception]] = {}
        self._token_counter = 0

    def add(self, method: str, path: str, *responses: httpx.Response | Responder | Exception) -> None:
        self._routes.setdefault((method.upper(), path), []).extend(responses)

    def json(self, method: str, path: str, status: int = 200, payload: Any = None) -> None:
        self.add(method, path, httpx.Response(status, json=payload if payload is not None else envelope()))

    def issue_tokens(self, *tokens: str) -> None:
        """Serve CSRF tokens; without arguments every fetch gets a new one."""

        if tokens:
            for token in tokens:
                self.json("GET", CSRF_PATH, payload=envelope({"csrfToken": token}))
            return

        def fresh(_: httpx.Request) -> httpx.Response:
            self._token_counter += 1
            return httpx.Response(200, json=envelope({"csrfToken": f"tok-{self._token_counter}"}))

        self.add("GET", CSRF_PATH, fresh)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"success": False, "error": "Not found"})
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        # Fresh copy: the same scripted response may be served many times.
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_base_url=BASE_URL,
        environment="test",
        auth_retry_delay_seconds=1.0,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_api(settings: AppSettings, backend: FakeBackend, sleeps: SleepRecorder):
    """Factory returning (client, cache); call it inside the coroutine under test."""

    def factory(cache: TokenCache | None = None, **overrides: Any) -> tuple[SecureApiClient, TokenCache]:
        effective = settings.model_copy(update=overrides) if overrides else settings
        http = build_async_client(effective, transport=backend.transport)
        cache = cache or TokenCache()
        fetcher = CsrfTokenFetcher(http, cache, effective)
        return SecureApiClient(http, cache, fetcher=fetcher, settings=effective, sleep=sleeps), cache

    return factory
