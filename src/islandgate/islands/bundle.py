"""The deferred bundle: an ordered set of islands activated together."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

from islandgate.consent.source import ConsentSource
from islandgate.consent.state import ConsentSnapshot
from islandgate.exceptions import DeferredLoadError
from islandgate.host.signals import Subscription
from islandgate.islands.bootstrap import BootstrapContext
from islandgate.islands.reporting import ErrorReporter, LoggingErrorReporter, safe_report

_logger = logging.getLogger(__name__)


class Island(Protocol):
    name: str
    requires_analytics: bool

    def activate(self, context: BootstrapContext) -> None:
        ...


@dataclass
class FunctionIsland:
    """Island backed by a plain callable."""

    name: str
    fn: Callable[[BootstrapContext], None]
    requires_analytics: bool = False

    def activate(self, context: BootstrapContext) -> None:
        self.fn(context)


class IslandBundle:
    """Activates islands in registration order.

    Islands that need analytics are skipped when the bootstrap context carries
    no analytics consent. If the consent source later grants analytics while
    the bundle is open, those islands are activated once at that point. One
    island failing is reported and does not stop the others.
    """

    def __init__(
        self,
        islands: Iterable[Island] = (),
        *,
        consent: ConsentSource | None = None,
        error_reporter: ErrorReporter | None = None,
    ) -> None:
        self._islands: list[Island] = list(islands)
        self._consent = consent
        self._reporter = error_reporter or LoggingErrorReporter()
        self._activated: list[str] = []
        self._waiting: list[Island] = []
        self._context: BootstrapContext | None = None
        self._subscription: Subscription | None = None

    @property
    def activated(self) -> list[str]:
        return list(self._activated)

    @property
    def waiting_for_consent(self) -> list[str]:
        return [island.name for island in self._waiting]

    def register(self, island: Island) -> None:
        if self._context is not None:
            raise ValueError("Cannot register islands after the bundle has activated")
        self._islands.append(island)

    def activate(self, context: BootstrapContext) -> None:
        if self._context is not None:
            return
        self._context = context
        for island in self._islands:
            if island.requires_analytics and not context.initial_analytics_consent:
                _logger.debug("Island %s waits for analytics consent", island.name)
                self._waiting.append(island)
                continue
            self._activate_one(island, context)

        if self._waiting and self._consent is not None:
            self._subscription = self._consent.subscribe(self._on_consent_change)
            # The context carries the snapshot taken at scheduling time; a
            # grant recorded since then produces no further notification.
            self._on_consent_change(self._consent.current)

    def _activate_one(self, island: Island, context: BootstrapContext) -> None:
        try:
            island.activate(context)
        except Exception as exc:
            error = DeferredLoadError(f"Island {island.name} failed to activate: {exc}", script_path=context.script_path)
            error.__cause__ = exc
            safe_report(self._reporter, error)
            return
        self._activated.append(island.name)
        _logger.debug("Island %s activated", island.name)

    def _on_consent_change(self, snapshot: ConsentSnapshot | None) -> None:
        if snapshot is None or not snapshot.analytics_allowed or self._context is None:
            return
        waiting, self._waiting = self._waiting, []
        self._cancel_subscription()
        for island in waiting:
            self._activate_one(island, self._context)

    def _cancel_subscription(self) -> None:
        subscription = self._subscription
        self._subscription = None
        if subscription is not None:
            subscription.cancel()

    def close(self) -> None:
        self._cancel_subscription()
        self._waiting = []
