import asyncio

import httpx
import pytest

from conftest import CSRF_PATH, envelope
from core.domain.errors import ApiError, AuthenticationError, ServerRestartError
from core.domain.models import RequestDescriptor
from core.services.token_cache import TokenCache


def test_mutating_call_fetches_token_once_before_request(make_api, backend) -> None:
    backend.issue_tokens("abc")
    backend.json("POST", "/api/posts", payload=envelope({"id": "p1"}))

    async def run() -> None:
        api, cache = make_api()
        result = await api.call(RequestDescriptor(url="/api/posts", method="post", body={"text": "hi"}))
        assert result.success is True
        assert result.data == {"id": "p1"}
        assert cache.get() == "abc"

    asyncio.run(run())

    paths = [(r.method, r.url.path) for r in backend.requests]
    assert paths == [("GET", CSRF_PATH), ("POST", "/api/posts")]
    post = backend.requests[1]
    assert post.headers["X-CSRF-Token"] == "abc"
    assert post.headers["Content-Type"] == "application/json"


def test_cached_token_is_reused_for_next_mutating_call(make_api, backend) -> None:
    backend.issue_tokens()
    backend.json("DELETE", "/api/chat/sessions/s1")
    backend.json("PUT", "/api/users/u1", payload=envelope({"id": "u1"}))

    async def run() -> None:
        api, _ = make_api()
        await api.delete("/api/chat/sessions/s1")
        await api.put("/api/users/u1", {"plan": "pro"})

    asyncio.run(run())
    assert len(backend.calls("GET", CSRF_PATH)) == 1
    assert backend.calls("PUT", "/api/users/u1")[0].headers["X-CSRF-Token"] == "tok-1"


@pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS"])
def test_safe_methods_do_not_need_a_token(make_api, backend, method) -> None:
    backend.json(method, "/api/templates", payload=envelope([]))

    async def run() -> None:
        api, cache = make_api()
        await api.call(RequestDescriptor(url="/api/templates", method=method))
        assert cache.get() is None

    asyncio.run(run())
    assert backend.calls("GET", CSRF_PATH) == []
    assert "X-CSRF-Token" not in backend.requests[0].headers


def test_caller_headers_are_merged(make_api, backend) -> None:
    backend.json("GET", "/api/dashboard/stats", payload=envelope({}))

    async def run() -> None:
        api, _ = make_api()
        await api.get("/api/dashboard/stats", headers={"X-Trace": "t-1"})

    asyncio.run(run())
    sent = backend.requests[0]
    assert sent.headers["X-Trace"] == "t-1"
    assert sent.headers["Content-Type"] == "application/json"


def test_success_envelope_is_passed_through(make_api, backend) -> None:
    payload = {"success": True, "data": {"n": 1}, "error": None, "timestamp": "2025-05-05T10:00:00Z"}
    backend.json("GET", "/api/quotes/latest", payload=payload)

    async def run() -> None:
        api, _ = make_api()
        result = await api.call(RequestDescriptor(url="/api/quotes/latest"))
        assert result.model_dump() == payload

    asyncio.run(run())


def test_401_raises_authentication_error_and_clears_cache(make_api, backend) -> None:
    backend.json("GET", "/api/auth/me", status=401, payload={"success": False, "error": "Not authenticated"})

    async def run() -> None:
        api, cache = make_api(TokenCache("stale"))
        with pytest.raises(AuthenticationError):
            await api.call(RequestDescriptor(url="/api/auth/me"))
        assert cache.get() is None

    asyncio.run(run())


def test_403_with_csrf_message_means_server_restart(make_api, backend) -> None:
    backend.json("POST", "/api/posts", status=403, payload={"success": False, "error": "CSRF token invalid"})

    async def run() -> None:
        api, cache = make_api(TokenCache("old-token"))
        with pytest.raises(ServerRestartError):
            await api.post("/api/posts", {"text": "x"}, retry=False)
        assert cache.get() is None

    asyncio.run(run())
    assert backend.calls("POST", "/api/posts")[0].headers["X-CSRF-Token"] == "old-token"


def test_403_without_csrf_message_keeps_server_text(make_api, backend) -> None:
    backend.json("POST", "/api/users", status=403, payload={"success": False, "error": "Admin role required"})

    async def run() -> None:
        api, cache = make_api(TokenCache("tok"))
        with pytest.raises(ApiError) as info:
            await api.post("/api/users", {"username": "bob"}, retry=False)
        assert not isinstance(info.value, (ServerRestartError, AuthenticationError))
        assert str(info.value) == "Admin role required"
        assert info.value.status_code == 403
        assert cache.get() == "tok"

    asyncio.run(run())


def test_403_without_body_defaults_to_forbidden(make_api, backend) -> None:
    backend.add("GET", "/api/users", httpx.Response(403))

    async def run() -> None:
        api, _ = make_api()
        with pytest.raises(ApiError, match="^Forbidden$"):
            await api.call(RequestDescriptor(url="/api/users"))

    asyncio.run(run())


def test_other_errors_carry_server_message_or_status_line(make_api, backend) -> None:
    backend.json("GET", "/api/images/search", status=422, payload={"success": False, "error": "q is required"})
    backend.add("GET", "/api/images/curated", httpx.Response(500, text="oops"))

    async def run() -> None:
        api, _ = make_api()
        with pytest.raises(ApiError, match="^q is required$"):
            await api.call(RequestDescriptor(url="/api/images/search"))
        with pytest.raises(ApiError, match=r"^HTTP 500: Internal Server Error$") as info:
            await api.call(RequestDescriptor(url="/api/images/curated"))
        assert type(info.value) is ApiError

    asyncio.run(run())


def test_token_failure_is_reported_as_server_restart(make_api, backend) -> None:
    backend.add("GET", CSRF_PATH, httpx.Response(503))
    backend.json("POST", "/api/captions/generate", payload=envelope({}))

    async def run() -> None:
        api, cache = make_api()
        with pytest.raises(ServerRestartError):
            await api.post("/api/captions/generate", {"quoteText": "x"})
        assert cache.get() is None

    asyncio.run(run())
    assert backend.calls("POST", "/api/captions/generate") == []


def test_connection_refused_is_reported_as_server_restart(make_api, backend) -> None:
    backend.add("GET", "/api/auth/me", httpx.ConnectError("[Errno 111] Connection refused"))

    async def run() -> None:
        api, _ = make_api()
        with pytest.raises(ServerRestartError) as info:
            await api.call(RequestDescriptor(url="/api/auth/me"))
        assert not isinstance(info.value, httpx.HTTPError)

    asyncio.run(run())


def test_read_timeout_is_a_generic_error(make_api, backend) -> None:
    backend.add("GET", "/api/dashboard/stats", httpx.ReadTimeout("timed out"))

    async def run() -> None:
        api, _ = make_api()
        with pytest.raises(ApiError) as info:
            await api.call(RequestDescriptor(url="/api/dashboard/stats"))
        assert type(info.value) is ApiError

    asyncio.run(run())


def test_unparseable_success_body_is_a_generic_error(make_api, backend) -> None:
    backend.add("GET", "/api/templates", httpx.Response(200, text="<!doctype html>"))

    async def run() -> None:
        api, _ = make_api()
        with pytest.raises(ApiError, match="Malformed"):
            await api.call(RequestDescriptor(url="/api/templates"))

    asyncio.run(run())


def test_no_content_is_an_empty_success(make_api, backend) -> None:
    backend.issue_tokens("abc")
    backend.add("DELETE", "/api/users/u1", httpx.Response(204))

    async def run() -> None:
        api, _ = make_api()
        result = await api.delete("/api/users/u1")
        assert result.success is True
        assert result.data is None

    asyncio.run(run())
