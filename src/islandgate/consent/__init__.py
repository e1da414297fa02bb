"""Consent decision model, cookie codec and the per-page consent source."""

from islandgate.consent.source import ConsentSource
from islandgate.consent.state import ConsentSnapshot, ConsentState, analytics_allowed

__all__ = ["ConsentSnapshot", "ConsentSource", "ConsentState", "analytics_allowed"]
