from datetime import datetime

from cashminder.utils.event_bus import EventBus, EventType


def test_emit_reaches_subscribers_of_that_type_only():
    bus = EventBus()
    created, changed = [], []
    bus.subscribe(EventType.TRANSACTION_CREATED, created.append)
    bus.subscribe(EventType.TRANSACTIONS_CHANGED, changed.append)

    event = bus.emit(EventType.TRANSACTION_CREATED, user_id="u1", transaction_id="t1")

    assert created == [event]
    assert changed == []
    assert event.data == {"user_id": "u1", "transaction_id": "t1"}


def test_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(EventType.TRANSACTIONS_CHANGED, received.append)

    bus.emit(EventType.TRANSACTIONS_CHANGED, user_id="u1")
    unsubscribe()
    unsubscribe()
    bus.emit(EventType.TRANSACTIONS_CHANGED, user_id="u1")

    assert len(received) == 1


def test_failing_listener_does_not_block_others():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("view crashed")

    bus.subscribe(EventType.TRANSACTION_DELETED, broken)
    bus.subscribe(EventType.TRANSACTION_DELETED, received.append)

    bus.emit(EventType.TRANSACTION_DELETED, user_id="u1")

    assert len(received) == 1


def test_event_timestamp_is_local_time():
    bus = EventBus()
    before = datetime.now()
    event = bus.emit(EventType.TRANSACTIONS_CHANGED, user_id="u1")

    assert event.timestamp.tzinfo is None
    assert before <= event.timestamp <= datetime.now()
