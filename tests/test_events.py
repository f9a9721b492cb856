import logging

from raffle.core.events import Event, EventBus, EventType, winner_event


def test_subscribe_and_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(EventType.SPIN_COMPLETE, received.append)

    bus.emit(winner_event(EventType.SPIN_COMPLETE, 7, generation=0))
    bus.emit(Event(EventType.SPIN_STARTED))
    unsubscribe()
    bus.emit(winner_event(EventType.SPIN_COMPLETE, 8, generation=0))

    assert [event.data["winner"] for event in received] == [7]


def test_global_handlers_see_everything():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe_all(lambda event: received.append(event.type))

    bus.emit(Event(EventType.SPIN_STARTED))
    bus.emit(Event("custom"))
    unsubscribe()
    bus.emit(Event(EventType.DRAW_RESET))

    assert received == [EventType.SPIN_STARTED, "custom"]


def test_failing_handler_does_not_stop_delivery(caplog):
    bus = EventBus()
    received = []

    def broken(event):
        raise ValueError("bad handler")

    bus.subscribe(EventType.WHEEL_REFILLED, broken)
    bus.subscribe(EventType.WHEEL_REFILLED, received.append)

    with caplog.at_level(logging.ERROR):
        bus.emit(Event(EventType.WHEEL_REFILLED))

    assert len(received) == 1
    assert "bad handler" in caplog.text


def test_history_is_bounded_and_filterable():
    bus = EventBus(history_limit=5)
    for i in range(8):
        bus.emit(winner_event(EventType.SPIN_COMPLETE, i, generation=0))
    bus.emit(Event(EventType.DRAW_COMPLETE))

    history = bus.get_history(limit=100)
    assert len(history) == 5
    assert history[-1].type == EventType.DRAW_COMPLETE

    winners = bus.get_history(EventType.SPIN_COMPLETE, limit=2)
    assert [event.data["winner"] for event in winners] == [6, 7]

    bus.clear_history()
    assert bus.get_history() == []


def test_event_defaults():
    event = Event(EventType.SPIN_STARTED)
    assert event.data == {}
    assert event.source == "draw"
    assert isinstance(event.timestamp, float)
