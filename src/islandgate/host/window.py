"""The rendering host as seen by the coordinator."""

from __future__ import annotations

from islandgate._constants import MQ_DARK_SCHEME, MQ_MORE_CONTRAST, MQ_REDUCED_MOTION
from islandgate.host.document import Document
from islandgate.host.signals import EventSource, MediaQuery, OneShotSignal


class Window:
    """One page instance's host: document, scroll position, media queries and
    the interactive signal used to start deferred work.

    Parameters
    ----------
    document : Document or None
        Document root; a fresh empty document when omitted.
    reduced_motion : bool
        Initial ``prefers-reduced-motion: reduce`` state.
    dark_scheme : bool
        Initial ``prefers-color-scheme: dark`` state.
    more_contrast : bool
        Initial ``prefers-contrast: more`` state.
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        reduced_motion: bool = False,
        dark_scheme: bool = False,
        more_contrast: bool = False,
    ) -> None:
        self.document = document if document is not None else Document()
        self.interactive = OneShotSignal("interactive")
        self.scroll: EventSource[float] = EventSource("scroll")
        self._scroll_y = 0.0
        self._media: dict[str, MediaQuery] = {
            MQ_REDUCED_MOTION: MediaQuery(MQ_REDUCED_MOTION, matches=reduced_motion),
            MQ_DARK_SCHEME: MediaQuery(MQ_DARK_SCHEME, matches=dark_scheme),
            MQ_MORE_CONTRAST: MediaQuery(MQ_MORE_CONTRAST, matches=more_contrast),
        }

    @property
    def scroll_y(self) -> float:
        return self._scroll_y

    def scroll_to(self, y: float) -> None:
        self._scroll_y = max(0.0, float(y))
        self.scroll.emit(self._scroll_y)

    def match_media(self, query: str) -> MediaQuery:
        media = self._media.get(query)
        if media is None:
            media = MediaQuery(query)
            self._media[query] = media
        return media
