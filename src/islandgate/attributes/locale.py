"""Locale resolution for routes."""

from __future__ import annotations

import enum
from dataclasses import dataclass

LOCALES: tuple[str, ...] = ("en", "uk", "es", "he")
DEFAULT_LOCALE = "en"
RTL_LOCALES: frozenset[str] = frozenset({"he"})


class TextDirection(enum.StrEnum):
    LTR = "ltr"
    RTL = "rtl"


@dataclass(frozen=True)
class ResolvedLocale:
    locale: str
    direction: TextDirection


def is_rtl_locale(locale: str) -> bool:
    return locale in RTL_LOCALES


def text_direction(locale: str) -> TextDirection:
    return TextDirection.RTL if is_rtl_locale(locale) else TextDirection.LTR


def resolve_locale(pathname: str, *, default: str = DEFAULT_LOCALE) -> ResolvedLocale:
    """Resolve the locale from the first path segment (``/he/brief`` -> ``he``)."""
    segment = pathname.lstrip("/").split("/", 1)[0].split("?", 1)[0]
    locale = segment if segment in LOCALES else default
    return ResolvedLocale(locale=locale, direction=text_direction(locale))
