"""Fixed identifiers shared between the server bootstrap and the client runtime."""

from __future__ import annotations

DEFERRED_SCRIPT_PATH = "/deferred/islands.js"
CONSENT_BOOTSTRAP_GLOBAL = "__INITIAL_ANALYTICS_CONSENT__"
CONSENT_COOKIE_NAME = "consent"
CONSENT_COOKIE_MAX_AGE_DAYS = 365

MAIN_CONTENT_ID = "main-content"

# Document attributes.
ATTR_LANG = "lang"
ATTR_DIR = "dir"
ATTR_THEME = "data-theme"
ATTR_CONTRAST = "data-contrast"
ATTR_MOTION = "data-motion"
ATTR_MASTHEAD_SCROLLED = "data-masthead-scrolled"

# Media queries consumed from the host.
MQ_REDUCED_MOTION = "(prefers-reduced-motion: reduce)"
MQ_DARK_SCHEME = "(prefers-color-scheme: dark)"
MQ_MORE_CONTRAST = "(prefers-contrast: more)"

DEFAULT_SCROLL_THRESHOLD = 10
DEFAULT_IDLE_TIMEOUT_MS = 500
DEFAULT_DEBUG_BUFFER_MAX = 100
