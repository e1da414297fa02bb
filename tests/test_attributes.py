from __future__ import annotations

import pytest

from islandgate.attributes.locale import TextDirection, resolve_locale
from islandgate.attributes.scroll import ScrollState, ScrollStateObserver
from islandgate.attributes.sync import DocumentAttributeSynchronizer
from islandgate.attributes.theme import ContrastMode, DisplayPreferences, MotionPreference, Theme
from islandgate.exceptions import AttributeOwnershipError
from islandgate.host.document import Document
from islandgate.host.window import Window

_REDUCED_MOTION = "(prefers-reduced-motion: reduce)"


def _server_document() -> Document:
    # What the server guessed: default locale, unresolved theme.
    return Document({"lang": "en", "dir": "ltr", "data-theme": "system"})


def test_resolve_locale_from_path() -> None:
    assert resolve_locale("/he/brief").direction == TextDirection.RTL
    assert resolve_locale("/es").locale == "es"
    assert resolve_locale("/fr/brief").locale == "en"
    assert resolve_locale("/", default="uk").locale == "uk"


def test_reconcile_applies_only_differing_attributes() -> None:
    window = Window(_server_document(), dark_scheme=True)
    sync = DocumentAttributeSynchronizer(window, resolve_locale("/he/brief"))

    changed = sync.reconcile()

    assert set(changed) == {"lang", "dir", "data-theme"}
    assert window.document.attributes == {"lang": "he", "dir": "rtl", "data-theme": "dark"}


def test_reconcile_is_idempotent() -> None:
    window = Window(_server_document(), more_contrast=True)
    sync = DocumentAttributeSynchronizer(window, resolve_locale("/en"))

    sync.reconcile()
    before = window.document.mutation_count
    second = sync.reconcile()

    assert second == ()
    assert window.document.mutation_count == before
    assert window.document.get_attribute("data-contrast") == "high"


def test_reconcile_matching_server_guess_mutates_nothing() -> None:
    window = Window(Document({"lang": "en", "dir": "ltr", "data-theme": "light"}))
    sync = DocumentAttributeSynchronizer(window, resolve_locale("/en"))

    assert sync.reconcile() == ()
    assert window.document.mutation_count == 0


def test_stored_preferences_win_over_system() -> None:
    window = Window(_server_document(), dark_scheme=True, reduced_motion=True, more_contrast=True)
    prefs = DisplayPreferences(theme=Theme.LIGHT, contrast=ContrastMode.DEFAULT, motion=MotionPreference.DEFAULT)
    sync = DocumentAttributeSynchronizer(window, resolve_locale("/en"), prefs)

    sync.reconcile()

    assert window.document.get_attribute("data-theme") == "light"
    assert not window.document.has_attribute("data-contrast")
    assert not window.document.has_attribute("data-motion")


def test_preferences_from_cookies_ignore_unknown_values() -> None:
    prefs = DisplayPreferences.from_cookies({"theme": "dark", "contrast": "neon", "motion": "reduced"})

    assert prefs.theme == Theme.DARK
    assert prefs.contrast is None
    assert prefs.motion == MotionPreference.REDUCED


def test_scroll_state_computed_at_start_without_scrolling() -> None:
    window = Window()
    window.scroll_to(400)
    observer = ScrollStateObserver(window, threshold=10)

    observer.start()

    assert observer.state == ScrollState.PAST
    assert window.document.get_attribute("data-masthead-scrolled") == ""


def test_scroll_transitions_both_ways() -> None:
    window = Window()
    with ScrollStateObserver(window, threshold=10) as observer:
        assert observer.state == ScrollState.BELOW
        window.scroll_to(10)
        assert observer.state == ScrollState.BELOW
        window.scroll_to(11)
        assert observer.state == ScrollState.PAST
        window.scroll_to(0)
        assert observer.state == ScrollState.BELOW
        assert not window.document.has_attribute("data-masthead-scrolled")


@pytest.mark.parametrize("offset", [0, 5, 11, 10_000, 1e9])
def test_reduced_motion_always_below(offset: float) -> None:
    window = Window(reduced_motion=True)
    window.scroll_to(offset)
    with ScrollStateObserver(window) as observer:
        window.scroll_to(offset)
        assert observer.state == ScrollState.BELOW
        assert not window.document.has_attribute("data-masthead-scrolled")


def test_reduced_motion_change_clears_attribute() -> None:
    window = Window()
    window.scroll_to(200)
    with ScrollStateObserver(window) as observer:
        assert observer.state == ScrollState.PAST
        window.match_media(_REDUCED_MOTION).set_matches(True)
        assert observer.state == ScrollState.BELOW
        assert not window.document.has_attribute("data-masthead-scrolled")


def test_stop_deregisters_listeners() -> None:
    window = Window()
    observer = ScrollStateObserver(window)
    observer.start()
    observer.start()
    assert window.scroll.listener_count == 1

    observer.stop()
    window.scroll_to(500)

    assert window.scroll.listener_count == 0
    assert window.match_media(_REDUCED_MOTION).listener_count == 0
    assert observer.state == ScrollState.BELOW


def test_single_writer_per_attribute() -> None:
    window = Window(_server_document())
    DocumentAttributeSynchronizer(window, resolve_locale("/he")).reconcile()

    with pytest.raises(AttributeOwnershipError) as excinfo:
        window.document.set_attribute("dir", "ltr", owner="scroll-observer")

    assert excinfo.value.owner == "attribute-sync"
    assert window.document.get_attribute("dir") == "rtl"
