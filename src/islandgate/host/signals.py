"""Callback-based host signals with explicit subscription handles.

Everything the coordinator waits on (host interactivity, scroll, media query
changes, consent updates) is expressed as registering a callback and getting
back a :class:`Subscription`. Cancelling a subscription is idempotent and
guarantees the callback never runs afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle for a registered callback."""

    def __init__(self, unsubscribe: Callable[[], None]) -> None:
        self._unsubscribe: Callable[[], None] | None = unsubscribe

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def cancel(self) -> None:
        unsubscribe = self._unsubscribe
        self._unsubscribe = None
        if unsubscribe is not None:
            unsubscribe()

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.cancel()


class _Registration(Generic[T]):
    __slots__ = ("active", "callback")

    def __init__(self, callback: Callable[[T], None]) -> None:
        self.callback = callback
        self.active = True


class Listeners(Generic[T]):
    """Ordered set of callbacks receiving a value."""

    def __init__(self) -> None:
        self._entries: list[_Registration[T]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, callback: Callable[[T], None]) -> Subscription:
        entry = _Registration(callback)
        self._entries.append(entry)

        def _remove() -> None:
            entry.active = False
            # Identity match; the same callable may be registered twice.
            self._entries = [registered for registered in self._entries if registered is not entry]

        return Subscription(_remove)

    def notify(self, value: T) -> None:
        # A callback removed by an earlier one in this round is skipped.
        for entry in list(self._entries):
            if entry.active:
                entry.callback(value)


class OneShotSignal:
    """A host lifecycle signal whose effect runs at most once per subscriber.

    The host may fire the signal repeatedly (re-hydration); each subscriber is
    called for the first firing only and then dropped. Subscribing after the
    signal has fired calls back immediately since the condition already holds.
    """

    def __init__(self, name: str = "interactive") -> None:
        self.name = name
        self._fired = False
        self._pending: Listeners[None] = Listeners()

    @property
    def fired(self) -> bool:
        return self._fired

    def subscribe(self, callback: Callable[[], None]) -> Subscription:
        if self._fired:
            callback()
            return Subscription(lambda: None)
        return self._pending.add(lambda _value: callback())

    def fire(self) -> None:
        first = not self._fired
        self._fired = True
        pending, self._pending = self._pending, Listeners()
        _logger.debug("Signal %s fired first=%s subscribers=%d", self.name, first, len(pending))
        pending.notify(None)


class EventSource(Generic[T]):
    """Repeating event source (scroll, resize...).

    ``passive`` mirrors the browser option: a passive listener cannot block
    the host. Only passive registration is supported.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: Listeners[T] = Listeners()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, callback: Callable[[T], None], *, passive: bool = True) -> Subscription:
        if not passive:
            raise ValueError(f"{self.name} listeners must be passive")
        return self._listeners.add(callback)

    def emit(self, value: T) -> None:
        self._listeners.notify(value)


class MediaQuery:
    """A host media query (``prefers-reduced-motion`` and friends)."""

    def __init__(self, query: str, *, matches: bool = False) -> None:
        self.query = query
        self._matches = matches
        self._listeners: Listeners[bool] = Listeners()

    @property
    def matches(self) -> bool:
        return self._matches

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def set_matches(self, matches: bool) -> None:
        if matches == self._matches:
            return
        self._matches = matches
        self._listeners.notify(matches)

    def add_change_listener(self, callback: Callable[[bool], None]) -> Subscription:
        return self._listeners.add(callback)
