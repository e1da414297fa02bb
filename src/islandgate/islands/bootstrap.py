"""Server-to-client consent bootstrap.

The server knows the consent cookie before the deferred bundle loads. It
serializes the analytics flag once into an inline script placed ahead of the
deferred script tag; the client reads it once when the bundle boots. It is a
message passed at a fixed point, not shared state.
"""

from __future__ import annotations

import html
import json
import re
from dataclasses import dataclass

from islandgate._constants import CONSENT_BOOTSTRAP_GLOBAL, DEFERRED_SCRIPT_PATH

_BOOTSTRAP_RE = re.compile(
    r"window\." + re.escape(CONSENT_BOOTSTRAP_GLOBAL) + r"\s*=\s*(true|false)\s*;",
)


@dataclass(frozen=True)
class BootstrapContext:
    """Values handed to the deferred bundle when it activates."""

    initial_analytics_consent: bool = False
    script_path: str = DEFERRED_SCRIPT_PATH
    locale: str = "en"


def render_consent_bootstrap(initial_analytics_consent: bool) -> str:
    """Inline script exposing the initial analytics consent flag."""
    value = json.dumps(bool(initial_analytics_consent))
    return f"<script data-deferred-bootstrap>window.{CONSENT_BOOTSTRAP_GLOBAL}={value};</script>"


def render_deferred_bootstrap(
    initial_analytics_consent: bool = False,
    *,
    script_path: str = DEFERRED_SCRIPT_PATH,
) -> str:
    """Bootstrap script followed by the deferred bundle tag.

    The bundle tag is ``defer`` so it never blocks parsing and runs only after
    the document has been parsed.
    """
    src = html.escape(script_path, quote=True)
    return (
        render_consent_bootstrap(initial_analytics_consent)
        + f'<script src="{src}" defer data-deferred-islands></script>'
    )


def read_consent_bootstrap(markup: str) -> bool:
    """Read the serialized flag back; absent or malformed reads as ``False``."""
    match = _BOOTSTRAP_RE.search(markup)
    if match is None:
        return False
    return match.group(1) == "true"
