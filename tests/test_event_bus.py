from core.interfaces.publisher import EventPublisher
from core.services.event_bus import AuthEvent, Event, EventBus


def test_bus_satisfies_publisher_protocol() -> None:
    assert isinstance(EventBus(), EventPublisher)


def test_handlers_receive_events_by_name_or_enum() -> None:
    bus = EventBus()
    seen: list[Event] = []
    bus.on(AuthEvent.AUTH_REQUIRED, seen.append)

    assert bus.emit("auth:required", {"message": "x"}) == 1
    assert bus.emit(AuthEvent.AUTH_REQUIRED) == 1
    assert bus.emit(AuthEvent.SERVER_RESTART) == 0

    assert [e.event_type for e in seen] == ["auth:required", "auth:required"]
    assert seen[0].data == {"message": "x"}


def test_off_unregisters_handler() -> None:
    bus = EventBus()
    seen: list[Event] = []
    bus.on("auth:server-restart", seen.append)
    bus.off("auth:server-restart", seen.append)

    assert bus.emit(AuthEvent.SERVER_RESTART) == 0
    assert seen == []


def test_failing_handler_does_not_reach_emitter() -> None:
    bus = EventBus()
    seen: list[Event] = []

    def broken(_: Event) -> None:
        raise RuntimeError("listener bug")

    bus.on(AuthEvent.AUTH_REQUIRED, broken)
    bus.on(AuthEvent.AUTH_REQUIRED, seen.append)

    assert bus.emit(AuthEvent.AUTH_REQUIRED) == 1
    assert len(seen) == 1
