"""Helpers for safe debug logging.

Telemetry payloads and consent cookies can carry identifiers that must not
end up in logs verbatim. Sensitive fields are masked and path-like fields
lose their query string and fragment before reaching DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_MASK = "<redacted>"
_MAX_DEPTH = 20

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"email", "password", "token", "authorization", "cookie", "consent", "ip", "useragent", "sessionid"}
)
_PATH_KEYS: frozenset[str] = frozenset({"pathname", "path", "href", "url"})


def _normalize_key(key: Any) -> str:
    return str(key).lower().replace("_", "").replace("-", "")


def _path_only(value: str) -> str:
    return value.partition("#")[0].partition("?")[0]


class _Redactor:
    def __init__(self, max_string: int) -> None:
        self._max_string = max_string

    def value(self, value: Any, depth: int) -> Any:
        if depth > _MAX_DEPTH:
            return "<max-depth>"
        if value is None or isinstance(value, (bool, int, float)):
            return value
        if isinstance(value, str):
            return self._text(value)
        if isinstance(value, (bytes, bytearray)):
            return f"<bytes:{len(value)}b>"
        if isinstance(value, Mapping):
            return {str(k): self._field(k, v, depth + 1) for k, v in value.items()}
        if isinstance(value, Sequence):
            return [self.value(item, depth + 1) for item in value]
        return repr(value)

    def _field(self, key: Any, value: Any, depth: int) -> Any:
        normalized = _normalize_key(key)
        if normalized in _SENSITIVE_KEYS:
            return _MASK
        if normalized in _PATH_KEYS and isinstance(value, str):
            value = _path_only(value)
        return self.value(value, depth)

    def _text(self, value: str) -> str:
        if len(value) <= self._max_string:
            return value
        return f"{value[: self._max_string]}…<truncated>"


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    return _Redactor(max_string).value(value, 0)
