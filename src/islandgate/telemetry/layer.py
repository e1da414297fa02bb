"""Telemetry as a deferred island.

The layer owns the observers of one page instance. It is an analytics
island: it only mounts once the bundle boots with analytics consent, or
later in the page when consent is granted. Until then navigation and page
events are remembered, not dispatched.
"""

from __future__ import annotations

import logging

from islandgate.consent.source import ConsentSource
from islandgate.islands.bootstrap import BootstrapContext
from islandgate.telemetry.gate import DispatchGate
from islandgate.telemetry.observers import BriefOpenTracker, CaseStudyEngagementTracker, RouteViewTracker

_logger = logging.getLogger(__name__)


class TelemetryLayer:
    name = "telemetry"
    requires_analytics = True

    def __init__(
        self,
        gate: DispatchGate,
        consent: ConsentSource,
        locale: str,
        *,
        pathname: str | None = None,
    ) -> None:
        self._gate = gate
        self._consent = consent
        self._locale = locale
        self._pathname = pathname
        self._active = False
        self.route = RouteViewTracker(gate, consent, locale)
        self.brief: BriefOpenTracker | None = None
        self.case_studies: dict[str, CaseStudyEngagementTracker] = {}

    @property
    def active(self) -> bool:
        return self._active

    def activate(self, context: BootstrapContext) -> None:
        if self._active:
            return
        self._active = True
        _logger.debug("Telemetry layer mounted locale=%s", self._locale)
        self.route.mount()
        self.route.observe(self._pathname)
        if self.brief is not None:
            self.brief.mount()
        for tracker in self.case_studies.values():
            tracker.mount()

    def navigate(self, pathname: str) -> None:
        self._pathname = pathname
        if self._active:
            self.route.observe(pathname)

    def brief_opened(self) -> None:
        if self.brief is None:
            self.brief = BriefOpenTracker(self._gate, self._consent, self._locale)
            if self._active:
                self.brief.mount()

    def case_study_viewed(self, slug: str) -> None:
        if not slug or slug in self.case_studies:
            return
        tracker = CaseStudyEngagementTracker(self._gate, self._consent, self._locale, slug)
        self.case_studies[slug] = tracker
        if self._active:
            tracker.mount()

    def close(self) -> None:
        self._active = False
        self.route.unmount()
        if self.brief is not None:
            self.brief.unmount()
        for tracker in self.case_studies.values():
            tracker.unmount()
