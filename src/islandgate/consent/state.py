"""Versioned consent state and the snapshot derived from it.

``ConsentState`` is the full decision persisted by the consent collaborator
(categories, purpose scopes, model participation). The coordinator only ever
reads the reduced, immutable :class:`ConsentSnapshot`.
"""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONSENT_VERSION = 2


def _now_ms() -> int:
    return int(time.time() * 1000)


class ConsentCategories(BaseModel):
    """Category toggles. ``essential`` is always true at runtime."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    essential: bool = True
    functional: bool = False
    analytics: bool = False
    experience: bool = False
    marketing: bool = False

    @field_validator("essential")
    @classmethod
    def _essential_always_on(cls, value: bool) -> bool:
        return True


class ConsentPurposes(BaseModel):
    """Purpose-level consent used for vendor activation and emission."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    measurement: bool = False
    experimentation: bool = False
    personalization: bool = False
    security: bool = False
    fraud: bool = False
    recommendation: bool = False
    profiling: bool = False


class ConsentState(BaseModel):
    """A user's consent decision.

    Parameters
    ----------
    version : int
        Schema version; only :data:`CONSENT_VERSION` is accepted.
    timestamp : int
        Epoch milliseconds of the decision, ``0`` when no decision was made.
    choice_made : bool
        Whether the user actively chose (banner accepted/rejected/customised).
    categories : ConsentCategories
        Category toggles.
    purposes : ConsentPurposes
        Purpose scopes.
    model_participation : bool
        AI/model training participation; withdrawal must clear this.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: int = CONSENT_VERSION
    timestamp: int = 0
    choice_made: bool = False
    categories: ConsentCategories = Field(default_factory=ConsentCategories)
    purposes: ConsentPurposes = Field(default_factory=ConsentPurposes)
    model_participation: bool = False

    @field_validator("version")
    @classmethod
    def _known_version(cls, value: int) -> int:
        if value != CONSENT_VERSION:
            raise ValueError(f"unsupported consent version {value}")
        return value

    @classmethod
    def default(cls) -> ConsentState:
        """No decision yet: everything but essential is off."""
        return cls()

    @classmethod
    def accept_all(cls, *, timestamp: int | None = None) -> ConsentState:
        return cls(
            timestamp=_now_ms() if timestamp is None else timestamp,
            choice_made=True,
            categories=ConsentCategories(functional=True, analytics=True, experience=True, marketing=True),
            purposes=ConsentPurposes(
                measurement=True,
                experimentation=True,
                personalization=True,
                security=True,
                fraud=True,
                recommendation=True,
                profiling=True,
            ),
        )

    @classmethod
    def reject_non_essential(cls, *, timestamp: int | None = None) -> ConsentState:
        return cls(timestamp=_now_ms() if timestamp is None else timestamp, choice_made=True)

    def snapshot(self) -> ConsentSnapshot:
        return ConsentSnapshot.from_state(self)


class ConsentSnapshot(BaseModel):
    """Immutable view of the consent decision used for dispatch decisions."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    analytics_allowed: bool = False
    choice_made: bool = False

    @classmethod
    def from_state(cls, state: ConsentState) -> ConsentSnapshot:
        return cls(
            analytics_allowed=state.choice_made and state.categories.analytics,
            choice_made=state.choice_made,
        )

    @classmethod
    def granted(cls) -> ConsentSnapshot:
        return cls(analytics_allowed=True, choice_made=True)

    @classmethod
    def denied(cls) -> ConsentSnapshot:
        return cls(analytics_allowed=False, choice_made=True)


def analytics_allowed(consent: ConsentSnapshot | None) -> bool:
    """Whether *consent* allows analytics; an absent decision denies."""
    return consent is not None and consent.analytics_allowed
