from __future__ import annotations

import base64
import json

import pytest
from pydantic import ValidationError

from islandgate.consent.cookie import (
    build_set_cookie,
    decode_consent_value,
    encode_consent_value,
    parse_cookie_header,
    read_consent_cookie,
)
from islandgate.consent.source import ConsentSource
from islandgate.consent.state import ConsentSnapshot, ConsentState, analytics_allowed


def _b64(obj: object) -> str:
    return base64.b64encode(json.dumps(obj).encode("utf-8")).decode("ascii")


def test_encoded_cookie_uses_compact_keys() -> None:
    state = ConsentState.accept_all(timestamp=1_700_000_000_000)

    decoded = json.loads(base64.b64decode(encode_consent_value(state)))

    assert set(decoded) == {"v", "t", "c", "cat", "pur", "model"}
    assert decoded["v"] == 2
    assert decoded["cat"]["analytics"] is True
    assert decode_consent_value(encode_consent_value(state)) == state


def test_version_one_cookie_is_migrated() -> None:
    value = _b64({"v": 1, "t": 42, "c": True, "a": True, "f": False, "m": True})

    state = decode_consent_value(value)

    assert state is not None
    assert state.version == 2
    assert state.categories.analytics is True
    assert state.categories.marketing is True
    assert state.snapshot() == ConsentSnapshot.granted()


@pytest.mark.parametrize(
    "value",
    [
        "",
        "not-base64!!",
        base64.b64encode(b"\xff\xfe").decode("ascii"),
        _b64(["v", 2]),
        _b64({"v": 7, "c": True}),
        _b64({"v": 2, "c": True, "cat": {"analytics": True, "tracking": True}}),
    ],
)
def test_invalid_cookie_values_read_as_undecided(value: str) -> None:
    assert decode_consent_value(value) is None


def test_essential_cannot_be_switched_off() -> None:
    state = decode_consent_value(_b64({"v": 2, "c": True, "cat": {"essential": False}}))

    assert state is not None
    assert state.categories.essential is True


def test_read_consent_cookie_from_header() -> None:
    value = encode_consent_value(ConsentState.reject_non_essential(timestamp=1))
    header = f"theme=dark; consent={value}; other"

    assert parse_cookie_header(header)["theme"] == "dark"
    state = read_consent_cookie(header)
    assert state is not None
    assert state.snapshot() == ConsentSnapshot.denied()
    assert read_consent_cookie("theme=dark") is None


def test_build_set_cookie_persists_for_a_year() -> None:
    header = build_set_cookie(ConsentState.accept_all(timestamp=1))

    assert header.startswith("consent=")
    assert "Max-Age=31536000" in header
    assert "Path=/" in header


def test_absent_decision_denies_analytics() -> None:
    assert analytics_allowed(None) is False
    assert analytics_allowed(ConsentSnapshot()) is False
    assert analytics_allowed(ConsentSnapshot.granted()) is True


def test_source_without_choice_reports_no_decision() -> None:
    assert ConsentSource().current is None
    assert ConsentSource(ConsentState.default()).current is None
    assert ConsentSource.from_cookie_header("").current is None


def test_source_notifies_only_on_snapshot_change() -> None:
    source = ConsentSource()
    seen: list[ConsentSnapshot | None] = []
    subscription = source.subscribe(seen.append)

    source.update(ConsentState.accept_all(timestamp=1))
    source.update(ConsentState.accept_all(timestamp=2))
    source.update(ConsentState.reject_non_essential(timestamp=3))
    subscription.cancel()
    source.update(ConsentState.accept_all(timestamp=4))

    assert seen == [ConsentSnapshot.granted(), ConsentSnapshot.denied()]
    assert source.current == ConsentSnapshot.granted()


def test_snapshots_are_immutable() -> None:
    snapshot = ConsentSnapshot.granted()

    with pytest.raises(ValidationError):
        snapshot.analytics_allowed = False  # type: ignore[misc]


@pytest.mark.parametrize(
    "payload",
    [
        {"v": 1, "a": True, "t": "yesterday"},
        {"v": 1, "a": True, "c": {"chosen": True}},
        {"v": 2, "t": 1e400, "c": True, "cat": {"analytics": True}},
        {"v": 2, "t": 1.5, "c": True},
        {"v": 2, "t": True, "c": True},
    ],
)
def test_malformed_fields_read_as_undecided(payload: dict[str, object]) -> None:
    assert decode_consent_value(_b64(payload)) is None


def test_source_from_malformed_cookie_is_undecided() -> None:
    value = _b64({"v": 1, "a": True, "t": "yesterday"})

    source = ConsentSource.from_cookie_header(f"consent={value}")

    assert source.state is None
    assert source.current is None
