"""Telemetry observers: route views, brief opens and case study engagement.

Each observer instance owns its fire guards for its mount lifetime. An
occurrence skipped for lack of consent stays pending while the observer is
mounted and is retried once consent is granted; unmounting drops it.
"""

from __future__ import annotations

import logging
from typing import Any

from islandgate.consent.source import ConsentSource
from islandgate.consent.state import ConsentSnapshot
from islandgate.exceptions import TelemetryTransportError
from islandgate.host.signals import Subscription
from islandgate.telemetry.events import TelemetryEvent
from islandgate.telemetry.gate import DispatchGate
from islandgate.telemetry.guard import FireGuard
from islandgate.telemetry.outcome import DispatchOutcome, SkipReason

_logger = logging.getLogger(__name__)


class _Tracker:
    def __init__(self, gate: DispatchGate, consent: ConsentSource, locale: str) -> None:
        self._gate = gate
        self._consent = consent
        self._locale = locale
        self._subscription: Subscription | None = None
        self._pending: tuple[TelemetryEvent, FireGuard] | None = None

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def mount(self) -> None:
        if self._subscription is not None:
            return
        self._subscription = self._consent.subscribe(self._on_consent_change)
        self._on_mount()

    def unmount(self) -> None:
        subscription = self._subscription
        self._subscription = None
        self._pending = None
        if subscription is not None:
            subscription.cancel()

    def __enter__(self) -> Any:
        self.mount()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.unmount()

    def _on_mount(self) -> None:
        """Hook for observers that fire on mount."""

    def _attempt(self, event: TelemetryEvent, guard: FireGuard) -> DispatchOutcome | None:
        try:
            outcome = self._gate.try_dispatch(event, guard, self._consent.current)
        except TelemetryTransportError:
            self._pending = None
            _logger.warning("Telemetry %s not delivered", event.name, exc_info=True)
            return None
        if outcome.reason == SkipReason.CONSENT_DENIED:
            self._pending = (event, guard)
        else:
            self._pending = None
        return outcome

    def _on_consent_change(self, snapshot: ConsentSnapshot | None) -> None:
        if self._pending is None or snapshot is None or not snapshot.analytics_allowed:
            return
        event, guard = self._pending
        _logger.debug("Consent granted; retrying pending %s", event.name)
        self._attempt(event, guard)


class RouteViewTracker(_Tracker):
    """Fires ``route_view`` when the route path changes.

    Re-renders with the same path fire nothing. Each distinct path visit gets
    a fresh guard.
    """

    def __init__(self, gate: DispatchGate, consent: ConsentSource, locale: str) -> None:
        super().__init__(gate, consent, locale)
        self._last_path: str | None = None

    @property
    def last_path(self) -> str | None:
        return self._last_path

    def observe(self, pathname: str | None) -> DispatchOutcome | None:
        if not self.mounted or pathname is None:
            return None
        if pathname == self._last_path:
            return None
        self._last_path = pathname
        return self._attempt(TelemetryEvent.route_view(pathname, self._locale), FireGuard(f"route_view:{pathname}"))


class BriefOpenTracker(_Tracker):
    """Fires ``brief_open`` once per mounted brief page."""

    def __init__(self, gate: DispatchGate, consent: ConsentSource, locale: str) -> None:
        super().__init__(gate, consent, locale)
        self.guard = FireGuard("brief_open")

    def _on_mount(self) -> None:
        self._attempt(TelemetryEvent.brief_open(self._locale), self.guard)


class CaseStudyEngagementTracker(_Tracker):
    """Fires ``case_study_engagement`` once per mounted case study page."""

    def __init__(self, gate: DispatchGate, consent: ConsentSource, locale: str, slug: str) -> None:
        super().__init__(gate, consent, locale)
        self.slug = slug
        self.guard = FireGuard(f"case_study_engagement:{slug}")

    def _on_mount(self) -> None:
        if not self.slug:
            return
        self._attempt(TelemetryEvent.case_study_engagement(self.slug, self._locale), self.guard)
