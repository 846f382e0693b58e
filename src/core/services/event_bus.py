"""In-process event bus used for side-channel auth notifications."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from core.log import get_logger

_logger = get_logger("core.events")


class AuthEvent(str, Enum):
    """Application-wide signals raised by the re-auth trigger."""

    AUTH_REQUIRED = "auth:required"
    SERVER_RESTART = "auth:server-restart"


@dataclass
class Event:
    """An emitted signal and its payload."""

    event_type: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


EventHandler = Callable[[Event], None]


class EventBus:
    """Synchronous pub/sub for listeners that live in the same process.

    Handlers run in registration order. A failing handler is logged and
    does not stop the others nor reach the emitter.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def on(self, event_type: str | AuthEvent, handler: EventHandler) -> None:
        key = _key(event_type)
        self._handlers.setdefault(key, []).append(handler)

    def off(self, event_type: str | AuthEvent, handler: EventHandler) -> None:
        key = _key(event_type)
        if key in self._handlers:
            self._handlers[key] = [h for h in self._handlers[key] if h != handler]

    def emit(self, event_type: str | AuthEvent, data: dict[str, Any] | None = None) -> int:
        key = _key(event_type)
        event = Event(key, dict(data or {}))
        handlers = list(self._handlers.get(key, []))
        _logger.debug("event_emitted", event_type=key, handlers=len(handlers))

        invoked = 0
        for handler in handlers:
            try:
                handler(event)
                invoked += 1
            except Exception:
                _logger.exception("event_handler_failed", event_type=key)
        return invoked


def _key(event_type: str | AuthEvent) -> str:
    return event_type.value if isinstance(event_type, AuthEvent) else str(event_type)
