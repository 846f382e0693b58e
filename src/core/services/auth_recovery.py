"""Re-authentication side channel.

This module reacts to classified failures raised by the secure client:
it publishes application-wide signals (``auth:required``,
``auth:server-restart``) and schedules a best-effort background probe that
checks the session and, in development only, logs back in.

The probe is a fire-and-forget ``asyncio.Task``. Its result is discarded and
its failures are logged; nothing here ever raises into the caller that
reported the error.
"""

from __future__ import annotations

import asyncio
from typing import Any

from adapters.secure_api import SecureApiClient
from core.domain.errors import ApiError, AuthenticationError, ServerRestartError
from core.domain.models import LoginCredentials, RequestDescriptor
from core.interfaces.publisher import EventPublisher
from core.log import get_logger
from core.services.event_bus import AuthEvent

_logger = get_logger("core.auth_recovery")

ME_PATH = "/api/auth/me"
LOGIN_PATH = "/api/auth/login"
SESSION_INIT_PATH = "/api/auth/session-init"

AUTH_REQUIRED_MESSAGE = "Please log in to continue"
SERVER_RESTART_MESSAGE = "Server restarted - please log in again"


def describe_error(error: BaseException) -> str:
    """Text fit for end users; no signal is published."""

    if isinstance(error, AuthenticationError):
        return AUTH_REQUIRED_MESSAGE
    if isinstance(error, ServerRestartError):
        return SERVER_RESTART_MESSAGE
    return str(error)


class AuthRecovery:
    """Turns classified failures into signals plus a background re-auth probe."""

    def __init__(self, api: SecureApiClient, events: EventPublisher) -> None:
        self._api = api
        self._events = events
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> frozenset[asyncio.Task[Any]]:
        return frozenset(self._tasks)

    def handle_auth_error(self, error: BaseException) -> asyncio.Task[Any] | None:
        """Publish the signal matching ``error`` and schedule the probe.

        Returns the scheduled probe task, or None when ``error`` needs no
        action (or no event loop is running).
        """

        if isinstance(error, AuthenticationError):
            self._events.emit(AuthEvent.AUTH_REQUIRED, {"message": str(error)})
            return self._schedule_probe("auth_required")

        if isinstance(error, ServerRestartError):
            self._api.cache.clear()
            self._events.emit(AuthEvent.SERVER_RESTART, {"message": str(error)})
            return self._schedule_probe("server_restart")

        return None

    def user_message(self, error: BaseException) -> str:
        """Publish the matching signal and return text fit for end users."""

        if isinstance(error, AuthenticationError):
            self._events.emit(AuthEvent.AUTH_REQUIRED, {"message": str(error)})
        elif isinstance(error, ServerRestartError):
            self._events.emit(AuthEvent.SERVER_RESTART, {"message": str(error)})
        return describe_error(error)

    async def drain(self) -> None:
        """Wait for every scheduled probe to finish."""

        while True:
            pending = [t for t in self._tasks if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def _schedule_probe(self, reason: str) -> asyncio.Task[Any] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.warning("reauth_probe_skipped", reason=reason, detail="no running event loop")
            return None

        task = loop.create_task(self._probe(reason))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _probe(self, reason: str) -> None:
        try:
            ok = await self.force_auth_check()
        except Exception:
            _logger.exception("reauth_probe_failed", reason=reason)
            return
        _logger.info("reauth_probe_finished", reason=reason, authenticated=ok)

    async def force_auth_check(self) -> bool:
        """Verify the session; fall back to the development auto-login.

        Returns True when ``/api/auth/me`` reports success or the auto-login
        succeeds, False otherwise.
        """

        cache = self._api.cache
        cache.clear()
        try:
            await self._api.fetcher.ensure_token()
        except ApiError as exc:
            _logger.warning("csrf_refresh_failed", detail=str(exc))

        try:
            envelope = await self._api.get(ME_PATH, retry=False)
            return envelope.success
        except ApiError as exc:
            _logger.info("auth_check_failed", kind=type(exc).__name__, detail=str(exc))

        settings = self._api.settings
        if not settings.dev_autologin_enabled:
            return False

        credentials = LoginCredentials(
            username=settings.dev_login_username or "",
            password=settings.dev_login_password or "",
        )
        try:
            cache.clear()
            await self._api.fetcher.ensure_token()
            envelope = await self._api.call(
                RequestDescriptor(url=LOGIN_PATH, method="POST", body=credentials.model_dump())
            )
        except ApiError as exc:
            _logger.error("dev_autologin_failed", detail=str(exc))
            return False

        user = envelope.data if isinstance(envelope.data, dict) else {}
        _logger.info("dev_autologin_succeeded", username=user.get("username"))
        return True

    async def initialize_auth(self) -> bool:
        """Warm the session up on startup and run the auth check."""

        try:
            envelope = await self._api.get(SESSION_INIT_PATH, retry=False)
            if envelope.success:
                _logger.info("session_init_succeeded")
        except ApiError as exc:
            _logger.warning("session_init_unavailable", detail=str(exc))

        authenticated = await self.force_auth_check()
        if not authenticated:
            _logger.warning("auth_initialization_failed")
        return authenticated
