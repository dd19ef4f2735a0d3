"""
In-process publish/subscribe for portal events.

Subscribers get a bounded queue each. A slow subscriber loses its oldest
queued event rather than blocking publishers. The broker also keeps a short
history so late subscribers and tests can inspect what was published.
"""

from __future__ import annotations

import json
import queue
import threading
from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Any, Deque, Dict, List, Optional

SUBSCRIBER_QUEUE_SIZE = 200


@dataclass(frozen=True)
class PortalEvent:
    id: str
    type: str
    subject: str
    occurred_at: str
    actor_user_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(asdict(self), default=str)


class EventBroker:
    def __init__(self, history_size: int = 500) -> None:
        self._subscribers: set[queue.Queue[PortalEvent]] = set()
        self._history: Deque[PortalEvent] = deque(maxlen=history_size)
        self._lock = threading.Lock()

    def subscribe(self) -> queue.Queue[PortalEvent]:
        q: queue.Queue[PortalEvent] = queue.Queue(maxsize=SUBSCRIBER_QUEUE_SIZE)
        with self._lock:
            self._subscribers.add(q)
        return q

    def unsubscribe(self, q: queue.Queue[PortalEvent]) -> None:
        with self._lock:
            self._subscribers.discard(q)

    def recent(self, *, event_type: Optional[str] = None, limit: Optional[int] = None) -> List[PortalEvent]:
        """Newest last."""
        with self._lock:
            events = list(self._history)
        if event_type is not None:
            events = [event for event in events if event.type == event_type]
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events

    def publish(self, event: PortalEvent) -> None:
        with self._lock:
            self._history.append(event)
            targets = list(self._subscribers)
        for q in targets:
            _offer(q, event)


def _offer(q: queue.Queue[PortalEvent], event: PortalEvent) -> None:
    try:
        q.put_nowait(event)
        return
    except queue.Full:
        pass
    try:
        q.get_nowait()
    except queue.Empty:
        pass
    try:
        q.put_nowait(event)
    except queue.Full:
        # Another publisher refilled the slot; this subscriber misses the event.
        pass


broker = EventBroker()


def publish_event(event: PortalEvent) -> None:
    broker.publish(event)
