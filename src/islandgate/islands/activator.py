"""Deferred island activation.

The activator waits for the host's interactive signal and then runs the
deferred bundle's bootstrap exactly once, with the consent snapshot taken at
scheduling time folded into the bootstrap context. The critical shell never
waits on it: failures are reported to the error-observability collaborator
and swallowed, and nothing is retried.
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from islandgate._constants import DEFERRED_SCRIPT_PATH
from islandgate.consent.state import ConsentSnapshot, analytics_allowed
from islandgate.exceptions import DeferredLoadError, IslandGateError
from islandgate.host.signals import OneShotSignal, Subscription
from islandgate.islands.bootstrap import BootstrapContext
from islandgate.islands.reporting import ErrorReporter, LoggingErrorReporter, safe_report

_logger = logging.getLogger(__name__)

ReadyCallback = Callable[[BootstrapContext], Awaitable[Any] | None]


class ActivationState(enum.StrEnum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    ACTIVATING = "activating"
    ACTIVE = "active"
    FAILED = "failed"
    CANCELLED = "cancelled"


class DeferredIslandActivator:
    """Runs one page instance's deferred bootstrap after interactivity.

    ``on_ready`` may return an awaitable (for example a bundle fetch); it is
    scheduled on the running asyncio loop and its outcome is tracked the same
    way as a synchronous call.
    """

    def __init__(
        self,
        signal: OneShotSignal,
        *,
        script_path: str = DEFERRED_SCRIPT_PATH,
        locale: str = "en",
        error_reporter: ErrorReporter | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._signal = signal
        self._script_path = script_path
        self._locale = locale
        self._reporter = error_reporter or LoggingErrorReporter()
        self._loop = loop
        self._state = ActivationState.IDLE
        self._subscription: Subscription | None = None
        self._on_ready: ReadyCallback | None = None
        self._context: BootstrapContext | None = None
        self._task: asyncio.Future[Any] | None = None
        self.error: DeferredLoadError | None = None

    @property
    def state(self) -> ActivationState:
        return self._state

    @property
    def context(self) -> BootstrapContext | None:
        return self._context

    def schedule(self, on_ready: ReadyCallback, consent: ConsentSnapshot | None) -> None:
        """Run *on_ready* once the host is interactive."""
        if self._state != ActivationState.IDLE:
            raise IslandGateError(f"Deferred activation already {self._state.value} for this page")
        self._on_ready = on_ready
        self._context = BootstrapContext(
            initial_analytics_consent=analytics_allowed(consent),
            script_path=self._script_path,
            locale=self._locale,
        )
        self._state = ActivationState.SCHEDULED
        _logger.debug(
            "Deferred activation scheduled initial_analytics_consent=%s",
            self._context.initial_analytics_consent,
        )
        subscription = self._signal.subscribe(self._activate)
        if self._state == ActivationState.SCHEDULED:
            self._subscription = subscription

    def _activate(self) -> None:
        if self._state != ActivationState.SCHEDULED:
            return
        self._state = ActivationState.ACTIVATING
        self._cancel_subscription()
        assert self._on_ready is not None and self._context is not None  # noqa: S101

        try:
            result = self._on_ready(self._context)
        except Exception as exc:
            self._fail(exc)
            return

        if not inspect.isawaitable(result):
            self._succeed()
            return

        try:
            loop = self._loop or asyncio.get_running_loop()
        except RuntimeError as exc:
            if inspect.iscoroutine(result):
                result.close()
            self._fail(exc)
            return
        self._task = asyncio.ensure_future(result, loop=loop)
        self._task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Future[Any]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._fail(exc)
        else:
            self._succeed()

    def _succeed(self) -> None:
        if self._state == ActivationState.ACTIVATING:
            self._state = ActivationState.ACTIVE
            _logger.debug("Deferred islands active")

    def _fail(self, exc: BaseException) -> None:
        if self._state == ActivationState.CANCELLED:
            return
        self._state = ActivationState.FAILED
        if isinstance(exc, DeferredLoadError):
            error = exc
        else:
            error = DeferredLoadError(f"Deferred bundle failed: {exc}", script_path=self._script_path)
            error.__cause__ = exc
        self.error = error
        safe_report(self._reporter, error)

    def _cancel_subscription(self) -> None:
        subscription = self._subscription
        self._subscription = None
        if subscription is not None:
            subscription.cancel()

    def cancel(self) -> None:
        """Tear down on unmount; no activation runs afterwards."""
        self._cancel_subscription()
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()
        if self._state in (ActivationState.IDLE, ActivationState.SCHEDULED, ActivationState.ACTIVATING):
            self._state = ActivationState.CANCELLED

    async def wait(self) -> ActivationState:
        """Wait for an in-flight asynchronous activation to settle."""
        task = self._task
        if task is not None:
            await asyncio.wait([task])
        return self._state
