"""Consent cookie encoding.

The cookie value is base64 of compact UTF-8 JSON with short keys::

    {"v": 2, "t": <epoch ms>, "c": <choice made>, "cat": {...}, "pur": {...}, "model": <bool>}

Version 1 cookies (``{"v": 1, "a": <analytics>, "f": ..., "m": ...}``) are
migrated on read. Anything that cannot be decoded reads as "no decision".
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any
from urllib.parse import unquote

from pydantic import ValidationError

from islandgate._constants import CONSENT_COOKIE_MAX_AGE_DAYS, CONSENT_COOKIE_NAME
from islandgate.consent.state import CONSENT_VERSION, ConsentCategories, ConsentState

_logger = logging.getLogger(__name__)


def encode_consent_value(state: ConsentState) -> str:
    """Serialize *state* into a cookie value."""
    compact = {
        "v": state.version,
        "t": state.timestamp,
        "c": state.choice_made,
        "cat": state.categories.model_dump(),
        "pur": state.purposes.model_dump(),
        "model": state.model_participation,
    }
    raw = json.dumps(compact, separators=(",", ":"))
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def _timestamp(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"consent timestamp must be an integer, got {value!r}")
    return value


def _migrate_v1(o: dict[str, Any]) -> ConsentState:
    return ConsentState(
        timestamp=_timestamp(o.get("t")),
        choice_made=o.get("c", False),
        categories=ConsentCategories(
            analytics=o["a"],
            functional=o.get("f", False),
            marketing=o.get("m", False),
        ),
    )


def decode_consent_value(value: str) -> ConsentState | None:
    """Parse a cookie value; ``None`` when it is missing, corrupt or unsupported."""
    if not value:
        return None
    try:
        o = json.loads(base64.b64decode(value, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError):
        _logger.debug("Consent cookie is not base64 JSON; treating as undecided")
        return None
    if not isinstance(o, dict):
        return None

    try:
        if o.get("v") == 1 and isinstance(o.get("a"), bool):
            return _migrate_v1(o)

        if o.get("v") != CONSENT_VERSION:
            _logger.debug("Consent cookie version %r unsupported; treating as undecided", o.get("v"))
            return None

        return ConsentState(
            version=o["v"],
            timestamp=_timestamp(o.get("t")),
            choice_made=o.get("c", False),
            categories=o.get("cat") or {},
            purposes=o.get("pur") or {},
            model_participation=o.get("model", False),
        )
    except (ValidationError, TypeError, ValueError):
        _logger.debug("Consent cookie failed validation; treating as undecided", exc_info=True)
        return None


def parse_cookie_header(header: str) -> dict[str, str]:
    """Split a ``Cookie`` header into a name → decoded value mapping."""
    out: dict[str, str] = {}
    for part in header.split(";"):
        name, sep, val = part.partition("=")
        if not sep:
            continue
        key = unquote(name.strip())
        decoded = unquote(val.strip())
        if key and decoded:
            out[key] = decoded
    return out


def read_consent_cookie(header: str, *, cookie_name: str = CONSENT_COOKIE_NAME) -> ConsentState | None:
    """Read the consent decision from a ``Cookie`` header."""
    value = parse_cookie_header(header).get(cookie_name)
    if value is None:
        return None
    return decode_consent_value(value)


def build_set_cookie(state: ConsentState, *, cookie_name: str = CONSENT_COOKIE_NAME, path: str = "/") -> str:
    """``Set-Cookie`` header value persisting *state* for a year."""
    max_age = CONSENT_COOKIE_MAX_AGE_DAYS * 86400
    return f"{cookie_name}={encode_consent_value(state)}; Path={path}; Max-Age={max_age}; SameSite=Lax"
