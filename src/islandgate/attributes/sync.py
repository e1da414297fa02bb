"""Document attribute reconciliation.

The server renders its best guess for ``lang``, ``dir`` and ``data-theme``
(it cannot see the visitor's system preferences). On the first client pass
the synchronizer computes the true values and writes only the attributes
that differ. Running it again with nothing changed writes nothing.
"""

from __future__ import annotations

import logging

from islandgate._constants import (
    ATTR_CONTRAST,
    ATTR_DIR,
    ATTR_LANG,
    ATTR_MOTION,
    ATTR_THEME,
    MQ_DARK_SCHEME,
    MQ_MORE_CONTRAST,
    MQ_REDUCED_MOTION,
)
from islandgate.attributes.locale import ResolvedLocale
from islandgate.attributes.theme import (
    ContrastMode,
    DisplayPreferences,
    MotionPreference,
    resolve_contrast,
    resolve_motion,
    resolve_theme,
)
from islandgate.host.window import Window

_logger = logging.getLogger(__name__)

OWNER = "attribute-sync"

CONTROLLED_ATTRIBUTES: tuple[str, ...] = (ATTR_LANG, ATTR_DIR, ATTR_THEME, ATTR_CONTRAST, ATTR_MOTION)


class DocumentAttributeSynchronizer:
    """Sole writer of the locale, theme, contrast and motion attributes."""

    def __init__(
        self,
        window: Window,
        locale: ResolvedLocale,
        preferences: DisplayPreferences | None = None,
    ) -> None:
        self._window = window
        self._locale = locale
        self._preferences = preferences or DisplayPreferences()

    def computed(self) -> dict[str, str | None]:
        """True client values; ``None`` means the attribute must be absent."""
        window = self._window
        prefs = self._preferences
        theme = resolve_theme(prefs.theme, prefers_dark=window.match_media(MQ_DARK_SCHEME).matches)
        contrast = resolve_contrast(prefs.contrast, prefers_more=window.match_media(MQ_MORE_CONTRAST).matches)
        motion = resolve_motion(prefs.motion, prefers_reduced=window.match_media(MQ_REDUCED_MOTION).matches)
        return {
            ATTR_LANG: self._locale.locale,
            ATTR_DIR: self._locale.direction.value,
            ATTR_THEME: theme.value,
            ATTR_CONTRAST: ContrastMode.HIGH.value if contrast == ContrastMode.HIGH else None,
            ATTR_MOTION: MotionPreference.REDUCED.value if motion == MotionPreference.REDUCED else None,
        }

    def reconcile(self) -> tuple[str, ...]:
        """Apply the computed values; returns the names of changed attributes."""
        document = self._window.document
        changed: list[str] = []
        for name, value in self.computed().items():
            current = document.get_attribute(name)
            if current == value:
                continue
            if value is None:
                document.remove_attribute(name, owner=OWNER)
            else:
                document.set_attribute(name, value, owner=OWNER)
            changed.append(name)
        if changed:
            _logger.debug("Reconciled document attributes %s", changed)
        return tuple(changed)
