"""Coordinator configuration for islandgate."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from islandgate._constants import (
    DEFAULT_DEBUG_BUFFER_MAX,
    DEFAULT_IDLE_TIMEOUT_MS,
    DEFAULT_SCROLL_THRESHOLD,
    DEFERRED_SCRIPT_PATH,
)
from islandgate.exceptions import ConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type) -> Any:
    try:
        return cast(value)
    except ValueError as exc:
        raise ConfigError(f"{env_key} must be a {cast.__name__}, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class CoordinatorConfig:
    """Coordinator configuration.

    Parameters
    ----------
    base_url : str
        Origin the deferred bundle is fetched from.
    deferred_script_path : str
        Path of the deferred islands bundle, relative to ``base_url``.
    telemetry_endpoint : str or None
        URL the page shell's beacon transport posts event batches to. ``None``
        (or a shell without an HTTP session) disables network delivery and
        events are dropped by a no-op transport.
    telemetry_enabled : bool
        Master switch for the telemetry layer.
    scroll_threshold : int
        Scroll offset in pixels past which the masthead is marked scrolled.
    idle_timeout_ms : int
        Upper bound for waiting on host idleness before deferred work runs.
    debug_buffer_max : int
        Number of telemetry records kept in the in-memory debug log.
    default_locale : str
        Locale used when a route carries no recognised locale prefix.
    """

    base_url: str = "http://localhost:3000"
    deferred_script_path: str = DEFERRED_SCRIPT_PATH
    telemetry_endpoint: str | None = None
    telemetry_enabled: bool = True
    scroll_threshold: int = DEFAULT_SCROLL_THRESHOLD
    idle_timeout_ms: int = DEFAULT_IDLE_TIMEOUT_MS
    debug_buffer_max: int = DEFAULT_DEBUG_BUFFER_MAX
    default_locale: str = "en"

    def __post_init__(self) -> None:
        if not self.deferred_script_path.startswith("/"):
            raise ConfigError("deferred_script_path must be an absolute path")
        if self.scroll_threshold < 0:
            raise ConfigError("scroll_threshold must be >= 0")
        if self.idle_timeout_ms < 0:
            raise ConfigError("idle_timeout_ms must be >= 0")
        if self.debug_buffer_max <= 0:
            raise ConfigError("debug_buffer_max must be > 0")
        if not self.default_locale.strip():
            raise ConfigError("default_locale must be non-empty")

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    @property
    def deferred_script_url(self) -> str:
        return self.url_for(self.deferred_script_path)

    @classmethod
    def from_env(cls, **overrides: Any) -> CoordinatorConfig:
        """Create configuration from environment variables.

        Reads optional ``ISLANDGATE_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CoordinatorConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "ISLANDGATE_BASE_URL": "base_url",
            "ISLANDGATE_DEFERRED_SCRIPT_PATH": "deferred_script_path",
            "ISLANDGATE_TELEMETRY_ENDPOINT": "telemetry_endpoint",
            "ISLANDGATE_DEFAULT_LOCALE": "default_locale",
        }
        _ENV_INT_MAP = {
            "ISLANDGATE_SCROLL_THRESHOLD": "scroll_threshold",
            "ISLANDGATE_IDLE_TIMEOUT_MS": "idle_timeout_ms",
            "ISLANDGATE_DEBUG_BUFFER_MAX": "debug_buffer_max",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, int)

        if "telemetry_enabled" not in overrides:
            config_kwargs["telemetry_enabled"] = _env_bool(env.get("ISLANDGATE_TELEMETRY_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
