from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from islandgate.consent.source import ConsentSource
from islandgate.consent.state import ConsentState
from islandgate.telemetry.gate import DispatchGate
from islandgate.telemetry.observers import BriefOpenTracker, CaseStudyEngagementTracker, RouteViewTracker
from islandgate.telemetry.outcome import SkipReason


class _RecordingTransport:
    def __init__(self) -> None:
        self.sent: list[tuple[str, dict[str, Any]]] = []

    def send(self, event_name: str, payload: Mapping[str, Any]) -> None:
        self.sent.append((event_name, dict(payload)))

    def names(self, event_name: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.sent if name == event_name]


def _granted() -> ConsentSource:
    return ConsentSource(ConsentState.accept_all(timestamp=1))


def test_route_view_fires_only_on_path_change() -> None:
    transport = _RecordingTransport()
    tracker = RouteViewTracker(DispatchGate(transport), _granted(), "en")
    tracker.mount()

    tracker.observe("/en")
    second = tracker.observe("/en/books/foo")
    third = tracker.observe("/en/books/foo")

    assert second is not None and second.is_dispatched
    assert third is None
    views = transport.names("route_view")
    assert [v["pathname"] for v in views] == ["/en", "/en/books/foo"]
    assert views[1] == {"pathname": "/en/books/foo", "locale": "en"}


def test_route_view_ignores_missing_path_and_unmounted_tracker() -> None:
    transport = _RecordingTransport()
    tracker = RouteViewTracker(DispatchGate(transport), _granted(), "en")

    assert tracker.observe("/en") is None
    tracker.mount()
    assert tracker.observe(None) is None
    assert transport.sent == []


def test_brief_open_fires_once_per_mount_across_page_instances() -> None:
    transport = _RecordingTransport()
    gate = DispatchGate(transport)
    consent = _granted()

    first_page = BriefOpenTracker(gate, consent, "en")
    first_page.mount()
    first_page.mount()
    first_page.unmount()

    second_page = BriefOpenTracker(gate, consent, "en")
    with second_page:
        pass

    assert len(transport.names("brief_open")) == 2
    assert first_page.guard is not second_page.guard
    assert first_page.guard.latched and second_page.guard.latched


def test_case_study_engagement_requires_slug() -> None:
    transport = _RecordingTransport()
    gate = DispatchGate(transport)
    consent = _granted()

    with CaseStudyEngagementTracker(gate, consent, "uk", ""):
        pass
    with CaseStudyEngagementTracker(gate, consent, "uk", "harbor-rollout"):
        pass

    assert transport.sent == [("case_study_engagement", {"slug": "harbor-rollout", "locale": "uk"})]


def test_pending_occurrence_fires_after_consent_grant() -> None:
    transport = _RecordingTransport()
    consent = ConsentSource()
    tracker = BriefOpenTracker(DispatchGate(transport), consent, "es")
    tracker.mount()

    assert tracker.has_pending
    assert transport.sent == []

    consent.update(ConsentState.accept_all(timestamp=2))
    consent.update(ConsentState.reject_non_essential(timestamp=3))
    consent.update(ConsentState.accept_all(timestamp=4))

    assert transport.sent == [("brief_open", {"locale": "es"})]
    assert not tracker.has_pending


def test_rejection_keeps_occurrence_pending() -> None:
    transport = _RecordingTransport()
    consent = ConsentSource()
    tracker = RouteViewTracker(DispatchGate(transport), consent, "en")
    tracker.mount()

    outcome = tracker.observe("/en/brief")
    consent.update(ConsentState.reject_non_essential(timestamp=2))

    assert outcome is not None and outcome.reason == SkipReason.CONSENT_DENIED
    assert tracker.has_pending
    assert transport.sent == []


def test_unmount_drops_pending_and_consent_subscription() -> None:
    transport = _RecordingTransport()
    consent = ConsentSource()
    tracker = RouteViewTracker(DispatchGate(transport), consent, "en")
    tracker.mount()
    tracker.observe("/en")
    tracker.unmount()

    consent.update(ConsentState.accept_all(timestamp=2))

    assert transport.sent == []
    assert not tracker.mounted


def test_only_latest_route_is_retried_after_grant() -> None:
    transport = _RecordingTransport()
    consent = ConsentSource()
    tracker = RouteViewTracker(DispatchGate(transport), consent, "he")
    tracker.mount()
    tracker.observe("/he")
    tracker.observe("/he/brief")

    consent.update(ConsentState.accept_all(timestamp=2))

    assert transport.sent == [("route_view", {"pathname": "/he/brief", "locale": "he"})]


def test_transport_error_is_logged_not_raised(caplog) -> None:
    class _Broken:
        def send(self, event_name: str, payload: Mapping[str, Any]) -> None:
            raise RuntimeError("down")

    tracker = BriefOpenTracker(DispatchGate(_Broken()), _granted(), "en")
    with caplog.at_level("WARNING", logger="islandgate.telemetry.observers"):
        tracker.mount()

    assert tracker.guard.latched
    assert not tracker.has_pending
    assert "not delivered" in caplog.text
