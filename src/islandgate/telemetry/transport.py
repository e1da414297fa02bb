"""Telemetry transports.

The gate hands each dispatched event to a transport exactly once. Delivery
semantics (batching, network errors) belong to the transport; the gate only
sees whether the hand-off itself was accepted.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from islandgate._redact import redact_for_log
from islandgate.exceptions import TelemetryTransportError

_logger = logging.getLogger(__name__)


class TelemetryTransport(Protocol):
    """Structural transport interface used by the dispatch gate."""

    def send(self, event_name: str, payload: Mapping[str, Any]) -> None:
        ...


class NoOpTransport:
    """Drops events. Used when no telemetry endpoint is configured."""

    def send(self, event_name: str, payload: Mapping[str, Any]) -> None:
        _logger.debug("Dropping telemetry event %s (no endpoint)", event_name)


class BeaconTransport:
    """Queue events and post them in batches from an asyncio task.

    ``send`` never blocks: it appends to the queue and makes sure a flush is
    scheduled on the loop. A batch that fails to deliver is logged and
    dropped; duplicate delivery is worse than occasional loss.
    """

    def __init__(
        self,
        endpoint: str,
        http_session: aiohttp.ClientSession,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        max_queue: int = 100,
    ) -> None:
        self._endpoint = endpoint
        self._http = http_session
        self._loop = loop
        self._max_queue = max_queue
        self._queue: list[dict[str, Any]] = []
        self._flush_task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def pending(self) -> int:
        return len(self._queue)

    def send(self, event_name: str, payload: Mapping[str, Any]) -> None:
        if self._closed:
            raise TelemetryTransportError("Beacon transport is closed", event_name=event_name)
        if len(self._queue) >= self._max_queue:
            raise TelemetryTransportError(
                f"Beacon queue full ({self._max_queue} events)",
                event_name=event_name,
            )
        try:
            loop = self._loop or asyncio.get_running_loop()
        except RuntimeError as exc:
            raise TelemetryTransportError("No running event loop for beacon delivery", event_name=event_name) from exc

        self._queue.append(
            {
                "name": event_name,
                "payload": dict(payload),
                "timestamp": int(time.time() * 1000),
            }
        )
        _logger.debug("Queued telemetry event %s payload=%s", event_name, redact_for_log(payload))
        if self._flush_task is None or self._flush_task.done():
            self._flush_task = loop.create_task(self._flush())

    async def _flush(self) -> None:
        while self._queue:
            batch, self._queue = self._queue, []
            body = json.dumps({"events": batch}, separators=(",", ":"))
            try:
                async with self._http.post(
                    self._endpoint,
                    data=body,
                    headers={"content-type": "application/json"},
                ) as resp:
                    if resp.status >= 300:
                        _logger.warning(
                            "Telemetry endpoint answered HTTP %s; dropped %d events",
                            resp.status,
                            len(batch),
                        )
            except (aiohttp.ClientError, asyncio.TimeoutError):
                _logger.warning("Telemetry delivery failed; dropped %d events", len(batch), exc_info=True)

    async def aclose(self) -> None:
        """Stop accepting events and wait for the in-flight flush."""
        self._closed = True
        task = self._flush_task
        self._flush_task = None
        if task is not None:
            await task
