"""
In-process publish/subscribe used to tell interested views that a user's
transactions changed, so they can recompute their analytics.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTIONS_CHANGED = "transactions_changed"


@dataclass(frozen=True)
class Event:
    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)


Listener = Callable[[Event], None]


class EventBus:
    def __init__(self) -> None:
        self._listeners: Dict[EventType, List[Listener]] = defaultdict(list)

    def subscribe(self, event_type: EventType, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it again."""
        self._listeners[event_type].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[event_type]:
                self._listeners[event_type].remove(listener)

        return unsubscribe

    def emit(self, event_type: EventType, **data: Any) -> Event:
        event = Event(type=event_type, data=data)
        logger.debug(f"Event emitted: {event_type.value} {data}")

        for listener in list(self._listeners[event_type]):
            try:
                listener(event)
            except Exception as e:
                # one broken view must not keep the others stale
                logger.error(f"Listener for {event_type.value} failed: {str(e)}", exc_info=True)
        return event
