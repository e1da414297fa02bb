"""Consent-gated, exactly-once telemetry."""

from islandgate.telemetry.debug import DebugLog, DebugRecord
from islandgate.telemetry.events import EventName, TelemetryEvent
from islandgate.telemetry.gate import DispatchGate
from islandgate.telemetry.guard import FireGuard
from islandgate.telemetry.layer import TelemetryLayer
from islandgate.telemetry.observers import BriefOpenTracker, CaseStudyEngagementTracker, RouteViewTracker
from islandgate.telemetry.outcome import DispatchOutcome, DispatchStatus, SkipReason
from islandgate.telemetry.transport import BeaconTransport, NoOpTransport, TelemetryTransport

__all__ = [
    "BeaconTransport",
    "BriefOpenTracker",
    "CaseStudyEngagementTracker",
    "DebugLog",
    "DebugRecord",
    "DispatchGate",
    "DispatchOutcome",
    "DispatchStatus",
    "EventName",
    "FireGuard",
    "NoOpTransport",
    "RouteViewTracker",
    "SkipReason",
    "TelemetryEvent",
    "TelemetryLayer",
    "TelemetryTransport",
]
