"""Result of a dispatch attempt."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, model_validator


class DispatchStatus(enum.StrEnum):
    DISPATCHED = "dispatched"
    SKIPPED = "skipped"


class SkipReason(enum.StrEnum):
    """Expected, non-error reasons for not dispatching."""

    ALREADY_FIRED = "already_fired"
    CONSENT_DENIED = "consent_denied"


class DispatchOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: DispatchStatus
    reason: SkipReason | None = None

    @model_validator(mode="after")
    def _reason_only_when_skipped(self) -> DispatchOutcome:
        if (self.status == DispatchStatus.SKIPPED) != (self.reason is not None):
            raise ValueError("reason is required for skipped outcomes and forbidden otherwise")
        return self

    @classmethod
    def dispatched(cls) -> DispatchOutcome:
        return cls(status=DispatchStatus.DISPATCHED)

    @classmethod
    def skipped(cls, reason: SkipReason) -> DispatchOutcome:
        return cls(status=DispatchStatus.SKIPPED, reason=reason)

    @property
    def is_dispatched(self) -> bool:
        return self.status == DispatchStatus.DISPATCHED
