"""Bounded in-memory log of telemetry attempts for debug dashboards."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from islandgate._constants import DEFAULT_DEBUG_BUFFER_MAX
from islandgate.host.signals import Listeners, Subscription


@dataclass(frozen=True)
class DebugRecord:
    name: str
    payload: dict[str, Any]
    consented: bool
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))


class DebugLog:
    """Keeps the most recent ``max_records`` attempts, oldest evicted first."""

    def __init__(self, max_records: int = DEFAULT_DEBUG_BUFFER_MAX) -> None:
        self._records: deque[DebugRecord] = deque(maxlen=max_records)
        self._listeners: Listeners[None] = Listeners()

    def push(self, record: DebugRecord) -> None:
        self._records.append(record)
        self._listeners.notify(None)

    def records(self) -> list[DebugRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()
        self._listeners.notify(None)

    def subscribe(self, on_change: Callable[[], None]) -> Subscription:
        return self._listeners.add(lambda _value: on_change())
