"""Consent state source.

Holds the latest consent decision for one page instance. Each decision is a
new immutable :class:`ConsentState`; readers get a fresh
:class:`ConsentSnapshot` and are notified when the snapshot changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from islandgate.consent.cookie import read_consent_cookie
from islandgate.consent.state import ConsentSnapshot, ConsentState
from islandgate.host.signals import Listeners, Subscription

_logger = logging.getLogger(__name__)


class ConsentSource:
    """Current consent decision, possibly absent."""

    def __init__(self, state: ConsentState | None = None) -> None:
        self._state = state
        self._listeners: Listeners[ConsentSnapshot | None] = Listeners()

    @classmethod
    def from_cookie_header(cls, header: str) -> ConsentSource:
        return cls(read_consent_cookie(header))

    @property
    def state(self) -> ConsentState | None:
        return self._state

    @property
    def current(self) -> ConsentSnapshot | None:
        """Snapshot of the current decision; ``None`` when undecided."""
        if self._state is None or not self._state.choice_made:
            return None
        return self._state.snapshot()

    def update(self, state: ConsentState) -> None:
        """Record a new decision and notify subscribers if the snapshot changed."""
        before = self.current
        self._state = state
        after = self.current
        if after == before:
            return
        _logger.debug(
            "Consent changed analytics_allowed=%s choice_made=%s",
            after.analytics_allowed if after else None,
            after.choice_made if after else None,
        )
        self._listeners.notify(after)

    def subscribe(self, callback: Callable[[ConsentSnapshot | None], None]) -> Subscription:
        return self._listeners.add(callback)
