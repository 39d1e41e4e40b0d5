# core/events.py

"""
Typed publish/subscribe primitives used by the roster store and the batch runner.

- `EventStream[T]` delivers events of one type to every subscriber, in publish order.
- `ChangeNotifier` keeps one `EventStream[RecordChange]` per record type, so observers
  subscribe to `Student` or `Rating` changes by class rather than by an event name string.

Subscriber callbacks run synchronously on the publishing thread. A callback that raises is
logged and skipped; it never affects the publisher or other subscribers.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChangeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ARCHIVED = "archived"
    RESTORED = "restored"
    MOVED = "moved"


class BackendStatus(str, Enum):
    # writes land in the persistent engine
    PRIMARY = "primary"
    # the engine failed; writes land only in the cache and the snapshot
    DEGRADED = "degraded"


@dataclass(frozen=True)
class RecordChange:
    record_type: type
    kind: ChangeKind
    record_id: str


@dataclass(frozen=True)
class StatusChange:
    record_id: str
    display_name: str
    kind: ChangeKind
    success: bool


class EventStream(Generic[T]):

    def __init__(self):
        self._subscribers: list[Callable[[T], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """
        Registers a callback for every future event.

        Args:
            callback (Callable[[T], None]): Invoked once per published event.

        Returns:
            A zero-argument function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: T) -> None:
        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)

            except Exception as e:
                logger.error(f"Subscriber {callback!r} failed on {event!r}: {e}")

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)


class ChangeNotifier:

    def __init__(self):
        self._streams: dict[type, EventStream[RecordChange]] = {}
        self._lock = threading.Lock()

    def stream_for(self, record_type: type) -> EventStream[RecordChange]:
        with self._lock:
            if record_type not in self._streams:
                self._streams[record_type] = EventStream()

            return self._streams[record_type]

    def subscribe(
        self, record_type: type, callback: Callable[[RecordChange], None]
    ) -> Callable[[], None]:
        return self.stream_for(record_type).subscribe(callback)

    def publish(self, change: RecordChange) -> None:
        self.stream_for(change.record_type).publish(change)
