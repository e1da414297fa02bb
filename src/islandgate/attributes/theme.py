"""Display preferences and their resolution against system settings.

A stored preference always wins. ``system`` (or nothing stored) defers to
the host's media queries, and the document never carries ``system`` itself.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass


class Theme(enum.StrEnum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ContrastMode(enum.StrEnum):
    DEFAULT = "default"
    HIGH = "high"


class MotionPreference(enum.StrEnum):
    DEFAULT = "default"
    REDUCED = "reduced"


THEME_COOKIE = "theme"
CONTRAST_COOKIE = "contrast"
MOTION_COOKIE = "motion"


@dataclass(frozen=True)
class DisplayPreferences:
    """Stored user preferences; ``None`` means "follow the system"."""

    theme: Theme = Theme.SYSTEM
    contrast: ContrastMode | None = None
    motion: MotionPreference | None = None

    @classmethod
    def from_cookies(cls, cookies: Mapping[str, str]) -> DisplayPreferences:
        """Read preferences from parsed cookies, ignoring unknown values."""
        theme = cookies.get(THEME_COOKIE)
        contrast = cookies.get(CONTRAST_COOKIE)
        motion = cookies.get(MOTION_COOKIE)
        return cls(
            theme=Theme(theme) if theme in set(Theme) else Theme.SYSTEM,
            contrast=ContrastMode(contrast) if contrast in set(ContrastMode) else None,
            motion=MotionPreference(motion) if motion in set(MotionPreference) else None,
        )


def resolve_theme(theme: Theme, *, prefers_dark: bool) -> Theme:
    if theme == Theme.SYSTEM:
        return Theme.DARK if prefers_dark else Theme.LIGHT
    return theme


def resolve_contrast(contrast: ContrastMode | None, *, prefers_more: bool) -> ContrastMode:
    if contrast is None:
        return ContrastMode.HIGH if prefers_more else ContrastMode.DEFAULT
    return contrast


def resolve_motion(motion: MotionPreference | None, *, prefers_reduced: bool) -> MotionPreference:
    if motion is None:
        return MotionPreference.REDUCED if prefers_reduced else MotionPreference.DEFAULT
    return motion
