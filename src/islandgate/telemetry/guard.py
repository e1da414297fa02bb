"""One-shot fire guards."""

from __future__ import annotations


class FireGuard:
    """A boolean latch owned by a single observer instance.

    Transitions ``False -> True`` exactly once and never resets. Guards are
    never shared between observers or looked up by event name; each owner
    creates its own.
    """

    __slots__ = ("_latched", "label")

    def __init__(self, label: str = "") -> None:
        self.label = label
        self._latched = False

    @property
    def latched(self) -> bool:
        return self._latched

    def latch(self) -> bool:
        """Latch the guard; ``True`` only for the call that performed the transition."""
        if self._latched:
            return False
        self._latched = True
        return True

    def __repr__(self) -> str:
        return f"FireGuard(label={self.label!r}, latched={self._latched})"
