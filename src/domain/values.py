"""Immutable value objects: ratings, identifiers and email addresses."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass

from domain.common import ErrorCode, Result

MIN_RATING = 400
MAX_RATING = 2400
DEFAULT_RATING = 1000


@dataclass(frozen=True, order=True)
class Rating:
    """Skill rating bounded to [MIN_RATING, MAX_RATING]."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Rating value must be an int, got {type(self.value)!r}")
        if self.value < MIN_RATING or self.value > MAX_RATING:
            raise ValueError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}. Provided: {self.value}"
            )

    @classmethod
    def default(cls) -> Rating:
        return cls(DEFAULT_RATING)

    def add(self, delta: int) -> Rating:
        """Apply a change, clamping to the valid range."""
        return Rating(max(MIN_RATING, min(self.value + delta, MAX_RATING)))

    def subtract(self, delta: int) -> Rating:
        return self.add(-delta)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class _EntityId:
    value: uuid.UUID

    def __post_init__(self) -> None:
        if not isinstance(self.value, uuid.UUID):
            raise TypeError(f"{type(self).__name__} requires a UUID, got {type(self.value)!r}")
        if self.value.int == 0:
            raise ValueError(f"{type(self).__name__} cannot be empty.")

    @classmethod
    def new(cls):
        return cls(uuid.uuid4())

    @classmethod
    def parse(cls, text: str):
        return cls(uuid.UUID(str(text).strip()))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class PlayerId(_EntityId):
    """Identifier of a player account."""


@dataclass(frozen=True)
class SquadId(_EntityId):
    """Identifier of a squad."""


@dataclass(frozen=True)
class MatchId(_EntityId):
    """Identifier of a match."""


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", re.IGNORECASE)


@dataclass(frozen=True)
class Email:
    """Normalised (trimmed, lowercase) email address."""

    value: str

    def __post_init__(self) -> None:
        if not _EMAIL_PATTERN.match(self.value) or self.value != self.value.strip().lower():
            raise ValueError(f"Email must be a normalised address: {self.value!r}")

    @classmethod
    def parse(cls, raw: str | None) -> Result[Email]:
        if raw is None or not raw.strip():
            return Result.fail(ErrorCode.INVALID_EMAIL, "Email cannot be empty.")
        trimmed = raw.strip()
        if not _EMAIL_PATTERN.match(trimmed):
            return Result.fail(ErrorCode.INVALID_EMAIL, f"Invalid email format: {raw}")
        return Result.success(cls(trimmed.lower()))

    def __str__(self) -> str:
        return self.value


__all__ = [
    "DEFAULT_RATING",
    "MAX_RATING",
    "MIN_RATING",
    "Email",
    "MatchId",
    "PlayerId",
    "Rating",
    "SquadId",
]
