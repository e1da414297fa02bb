"""Masthead scroll state.

``BELOW`` until the page is scrolled past the threshold, then ``PAST``.
With reduced motion the state is pinned to ``BELOW`` and the attribute is
cleared, whatever the scroll offset.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from islandgate._constants import ATTR_MASTHEAD_SCROLLED, DEFAULT_SCROLL_THRESHOLD, MQ_REDUCED_MOTION
from islandgate.host.signals import Subscription
from islandgate.host.window import Window

_logger = logging.getLogger(__name__)

OWNER = "scroll-observer"


class ScrollState(enum.StrEnum):
    BELOW = "below"
    PAST = "past"


class ScrollStateObserver:
    def __init__(self, window: Window, *, threshold: int = DEFAULT_SCROLL_THRESHOLD) -> None:
        self._window = window
        self._threshold = threshold
        self._state = ScrollState.BELOW
        self._subscriptions: list[Subscription] = []

    @property
    def state(self) -> ScrollState:
        return self._state

    @property
    def observing(self) -> bool:
        return bool(self._subscriptions)

    def start(self) -> None:
        """Register passive listeners and compute the initial state."""
        if self._subscriptions:
            return
        window = self._window
        try:
            self._subscriptions.append(window.scroll.add_listener(lambda _y: self.update(), passive=True))
            self._subscriptions.append(
                window.match_media(MQ_REDUCED_MOTION).add_change_listener(lambda _matches: self.update())
            )
            self.update()
        except Exception:
            self.stop()
            raise

    def stop(self) -> None:
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.cancel()

    def __enter__(self) -> ScrollStateObserver:
        self.start()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.stop()

    def compute(self) -> ScrollState:
        window = self._window
        if window.match_media(MQ_REDUCED_MOTION).matches:
            return ScrollState.BELOW
        return ScrollState.PAST if window.scroll_y > self._threshold else ScrollState.BELOW

    def update(self) -> ScrollState:
        state = self.compute()
        document = self._window.document
        if state == ScrollState.PAST:
            document.set_attribute(ATTR_MASTHEAD_SCROLLED, "", owner=OWNER)
        else:
            document.remove_attribute(ATTR_MASTHEAD_SCROLLED, owner=OWNER)
        if state != self._state:
            _logger.debug("Masthead scroll state %s -> %s", self._state, state)
            self._state = state
        return state
