"""Idle scheduling on an asyncio loop."""

from __future__ import annotations

import asyncio
import logging

from islandgate._constants import DEFAULT_IDLE_TIMEOUT_MS
from islandgate.host.signals import OneShotSignal, Subscription

_logger = logging.getLogger(__name__)


class IdleScheduler:
    """Fire a host's interactive signal once the loop has gone idle.

    The loop is considered idle after the callbacks queued at paint time
    have drained (one ``call_soon`` turn). ``timeout_ms`` caps the wait when
    the loop never drains; whichever comes first fires the signal, and the
    signal itself guarantees subscribers run once.
    """

    def __init__(
        self,
        signal: OneShotSignal,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        timeout_ms: int = DEFAULT_IDLE_TIMEOUT_MS,
    ) -> None:
        self._signal = signal
        self._loop = loop
        self._timeout_ms = timeout_ms
        self._handles: list[asyncio.Handle] = []

    def start(self) -> Subscription:
        loop = self._loop or asyncio.get_running_loop()
        self._handles = [
            loop.call_soon(self._fire),
            loop.call_later(self._timeout_ms / 1000.0, self._fire),
        ]
        _logger.debug("Idle scheduling started timeout_ms=%d", self._timeout_ms)
        return Subscription(self.cancel)

    def _fire(self) -> None:
        self.cancel()
        self._signal.fire()

    def cancel(self) -> None:
        handles, self._handles = self._handles, []
        for handle in handles:
            handle.cancel()
