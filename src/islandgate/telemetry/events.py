"""Telemetry event kinds and the per-occurrence event record.

Event names are stable identifiers and each kind has a fixed payload shape;
the coordinator does not accept extra or missing payload keys.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Primitive = str | int | float | bool


class EventName(StrEnum):
    ROUTE_VIEW = "route_view"
    BRIEF_OPEN = "brief_open"
    CASE_STUDY_ENGAGEMENT = "case_study_engagement"


PAYLOAD_KEYS: dict[EventName, frozenset[str]] = {
    EventName.ROUTE_VIEW: frozenset({"pathname", "locale"}),
    EventName.BRIEF_OPEN: frozenset({"locale"}),
    EventName.CASE_STUDY_ENGAGEMENT: frozenset({"slug", "locale"}),
}


class TelemetryEvent(BaseModel):
    """One semantic occurrence of a telemetry event.

    Build a new event per occurrence with :meth:`route_view`,
    :meth:`brief_open` or :meth:`case_study_engagement`.
    """

    model_config = ConfigDict(frozen=True)

    name: EventName
    locale: str = Field(..., description="Resolved locale of the page the event belongs to")
    payload: dict[str, Primitive] = Field(default_factory=dict)

    @field_validator("locale")
    @classmethod
    def _normalize_locale(cls, value: str) -> str:
        locale = value.strip()
        if not locale:
            raise ValueError("locale must be non-empty")
        return locale

    @model_validator(mode="after")
    def _check_payload_shape(self) -> TelemetryEvent:
        expected = PAYLOAD_KEYS[self.name]
        actual = frozenset(self.payload)
        if actual != expected:
            raise ValueError(f"{self.name} payload keys must be {sorted(expected)}, got {sorted(actual)}")
        if self.payload["locale"] != self.locale:
            raise ValueError("payload locale must match event locale")
        return self

    @classmethod
    def route_view(cls, pathname: str, locale: str) -> TelemetryEvent:
        return cls(name=EventName.ROUTE_VIEW, locale=locale, payload={"pathname": pathname, "locale": locale.strip()})

    @classmethod
    def brief_open(cls, locale: str) -> TelemetryEvent:
        return cls(name=EventName.BRIEF_OPEN, locale=locale, payload={"locale": locale.strip()})

    @classmethod
    def case_study_engagement(cls, slug: str, locale: str) -> TelemetryEvent:
        if not slug.strip():
            raise ValueError("slug must be non-empty")
        return cls(
            name=EventName.CASE_STUDY_ENGAGEMENT,
            locale=locale,
            payload={"slug": slug.strip(), "locale": locale.strip()},
        )

    def transport_payload(self) -> dict[str, Any]:
        return dict(self.payload)
