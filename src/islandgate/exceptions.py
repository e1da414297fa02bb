"""Custom exception hierarchy for islandgate."""

from __future__ import annotations


class IslandGateError(Exception):
    """Base exception for all islandgate errors."""


class ConfigError(IslandGateError):
    """Invalid or missing configuration."""


class TelemetryTransportError(IslandGateError):
    """The telemetry transport rejected or failed to accept an event.

    The event is considered attempted once it has been handed to the
    transport, so the owning fire guard stays latched and the event is
    never re-sent.
    """

    def __init__(self, message: str, *, event_name: str = "") -> None:
        self.event_name = event_name
        super().__init__(message)


class DeferredLoadError(IslandGateError):
    """A deferred bundle or island failed to fetch or execute."""

    def __init__(
        self,
        message: str,
        *,
        script_path: str = "",
        status_code: int | None = None,
    ) -> None:
        self.script_path = script_path
        self.status_code = status_code
        super().__init__(message)


class AttributeOwnershipError(IslandGateError):
    """A component tried to write a document attribute owned by another one."""

    def __init__(self, attribute: str, *, owner: str, writer: str) -> None:
        self.attribute = attribute
        self.owner = owner
        self.writer = writer
        super().__init__(f"Attribute {attribute!r} is owned by {owner!r}, not {writer!r}")
