from typing import Callable, Dict, List, NamedTuple
from datetime import datetime

__all__ = ['ENTRY_ADDED', 'ENTRY_EDITED', 'ENTRY_DELETED', 'Event', 'EventBus']

ENTRY_ADDED = "ENTRY_ADDED"
ENTRY_EDITED = "ENTRY_EDITED"
ENTRY_DELETED = "ENTRY_DELETED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    """Carries intended entry mutations from the views up to the store."""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(self._subscribers[name])]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        handlers = self._subscribers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)
