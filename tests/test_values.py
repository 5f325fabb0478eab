"""Unit tests for ratings, identifiers and email values."""

from __future__ import annotations

import uuid

import pytest

from domain.common import ErrorCategory, ErrorCode
from domain.values import MAX_RATING, MIN_RATING, Email, MatchId, PlayerId, Rating, SquadId


def test_rating_default_is_1000() -> None:
    assert Rating.default() == Rating(1000)


@pytest.mark.parametrize("value", [MIN_RATING - 1, MAX_RATING + 1, 0, -50])
def test_rating_rejects_out_of_range_values(value: int) -> None:
    with pytest.raises(ValueError):
        Rating(value)


def test_rating_rejects_non_integer_values() -> None:
    with pytest.raises(TypeError):
        Rating(1000.0)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Rating(True)  # type: ignore[arg-type]


def test_rating_add_and_subtract_clamp_to_bounds() -> None:
    assert Rating(1000).add(16) == Rating(1016)
    assert Rating(1000).subtract(16) == Rating(984)
    assert Rating(2390).add(50) == Rating(MAX_RATING)
    assert Rating(410).subtract(50) == Rating(MIN_RATING)
    assert Rating(MIN_RATING).add(-10_000) == Rating(MIN_RATING)


def test_rating_is_immutable_and_ordered() -> None:
    rating = Rating(1200)
    rating.add(10)
    assert rating.value == 1200
    assert Rating(1100) < Rating(1200)


def test_entity_ids_compare_by_value_and_type() -> None:
    raw = uuid.uuid4()
    assert PlayerId(raw) == PlayerId(raw)
    assert hash(PlayerId(raw)) == hash(PlayerId(raw))
    assert PlayerId(raw) != SquadId(raw)
    assert MatchId.parse(str(raw)).value == raw


def test_entity_ids_reject_nil_and_non_uuid_values() -> None:
    with pytest.raises(ValueError):
        PlayerId(uuid.UUID(int=0))
    with pytest.raises(TypeError):
        SquadId("not-a-uuid")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        MatchId.parse("not-a-uuid")


def test_email_parse_trims_and_lowercases() -> None:
    result = Email.parse("  Alice.Smith@Example.COM ")
    assert result.is_success
    assert result.value == Email("alice.smith@example.com")


@pytest.mark.parametrize("raw", ["", "   ", None, "no-at-sign", "a@b", "a b@example.com", "@example.com"])
def test_email_parse_rejects_malformed_input(raw: str | None) -> None:
    result = Email.parse(raw)
    assert result.is_failure
    assert result.error.code is ErrorCode.INVALID_EMAIL
    assert result.error.category is ErrorCategory.VALIDATION


def test_email_constructor_requires_normalised_address() -> None:
    with pytest.raises(ValueError):
        Email("Alice@Example.com")
