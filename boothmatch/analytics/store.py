from __future__ import annotations

import time
from collections import deque
from typing import Any

MAX_EVENTS = 10_000


class EventLog:
    """Bounded analytics log; the oldest events drop off once ``max_events`` is reached."""

    def __init__(self, max_events: int = MAX_EVENTS) -> None:
        self._events: deque[dict[str, Any]] = deque(maxlen=max_events)

    def __len__(self) -> int:
        return len(self._events)

    def record(self, event_type: str, data: dict[str, Any]) -> None:
        self._events.append({
            "type": event_type,
            "timestamp": time.time(),
            **data,
        })

    def events(self, event_type: str | None = None) -> list[dict[str, Any]]:
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e["type"] == event_type]

    def clear(self) -> None:
        self._events.clear()
