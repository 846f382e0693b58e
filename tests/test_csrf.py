import asyncio

import httpx
import pytest

from conftest import CSRF_PATH, envelope
from core.domain.errors import CsrfTokenError


def test_ensure_token_fetches_and_caches(make_api, backend) -> None:
    backend.issue_tokens("abc")

    async def run() -> None:
        api, cache = make_api()
        token = await api.fetcher.ensure_token()
        assert token == "abc"
        assert cache.get() == "abc"

    asyncio.run(run())


def test_ensure_token_is_idempotent_when_cached(make_api, backend) -> None:
    backend.issue_tokens()

    async def run() -> None:
        api, _ = make_api()
        first = await api.fetcher.ensure_token()
        second = await api.fetcher.ensure_token()
        assert first == second == "tok-1"

    asyncio.run(run())
    assert len(backend.calls("GET", CSRF_PATH)) == 1


def test_fetch_token_always_refreshes(make_api, backend) -> None:
    backend.issue_tokens()

    async def run() -> None:
        api, cache = make_api()
        await api.fetcher.ensure_token()
        refreshed = await api.fetcher.fetch_token()
        assert refreshed == "tok-2"
        assert cache.get() == "tok-2"

    asyncio.run(run())


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"success": False, "error": "boom"}),
        httpx.Response(200, json={"success": True, "data": {}}),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=envelope()),
    ],
)
def test_failed_fetch_leaves_cache_absent(make_api, backend, response) -> None:
    backend.add("GET", CSRF_PATH, response)

    async def run() -> None:
        api, cache = make_api()
        with pytest.raises(CsrfTokenError):
            await api.fetcher.ensure_token()
        assert cache.get() is None

    asyncio.run(run())


def test_transport_failure_becomes_csrf_error(make_api, backend) -> None:
    backend.add("GET", CSRF_PATH, httpx.ConnectError("connection refused"))

    async def run() -> None:
        api, cache = make_api()
        with pytest.raises(CsrfTokenError):
            await api.fetcher.ensure_token()
        assert cache.get() is None

    asyncio.run(run())
