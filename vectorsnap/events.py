"""Synchronous event emission with explicit subscription handles."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class Event:
    type: str
    target: Any = None


Listener = Callable[[Event], Any]


@dataclass(frozen=True)
class EventsKey:
    """Opaque handle returned by :meth:`Observable.on`."""

    target: "Observable" = field(repr=False, compare=False)
    type: str
    listener: Listener = field(repr=False, compare=False)
    key_id: str = field(default_factory=lambda: uuid.uuid4().hex)


class Observable:
    """Mixin dispatching events to listeners in subscription order."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[EventsKey]] = {}

    def on(self, event_type: str, listener: Listener) -> EventsKey:
        key = EventsKey(self, event_type, listener)
        self._listeners.setdefault(event_type, []).append(key)
        return key

    def un_by_key(self, key: EventsKey) -> bool:
        """Release ``key``; returns ``False`` when it was already released."""

        keys = self._listeners.get(key.type, [])
        for idx, existing in enumerate(keys):
            if existing.key_id == key.key_id:
                del keys[idx]
                if not keys:
                    del self._listeners[key.type]
                return True
        logger.debug("Listener key %s for %r already released", key.key_id, key.type)
        return False

    def dispatch_event(self, event: Union[str, Event]) -> None:
        if isinstance(event, str):
            event = Event(event)
        if event.target is None:
            event.target = self
        # Copy so listeners may unsubscribe while being notified.
        for key in list(self._listeners.get(event.type, [])):
            key.listener(event)

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(keys) for keys in self._listeners.values())

    def has_listener(self, event_type: Optional[str] = None) -> bool:
        return self.listener_count(event_type) > 0


def unlisten_by_key(key: Optional[EventsKey]) -> bool:
    if key is None:
        return False
    return key.target.un_by_key(key)


__all__ = ["Event", "EventsKey", "Listener", "Observable", "unlisten_by_key"]
