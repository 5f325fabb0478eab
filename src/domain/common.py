"""Shared result, error and clock helpers for the squad domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how rows are stored."""
    return datetime.now(UTC).replace(tzinfo=None)


class ErrorCategory(str, Enum):
    """Broad failure families callers map onto their own responses."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"


class ErrorCode(str, Enum):
    """Specific failure codes returned by aggregates and handlers."""

    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_EXTERNAL_TOKEN = "invalid_external_token"

    NOT_ADMIN = "not_admin"
    NOT_MEMBER = "not_member"

    INVALID_EMAIL = "invalid_email"
    INVALID_PASSWORD = "invalid_password"
    INVALID_NAME = "invalid_name"
    INVALID_PLAYER_COUNT = "invalid_player_count"
    INVALID_TEAM_SIZE = "invalid_team_size"
    DUPLICATE_PARTICIPANT = "duplicate_participant"
    INVALID_TEAMS = "invalid_teams"
    INVALID_WINNER = "invalid_winner"
    INVALID_CONFIGURATION = "invalid_configuration"

    ALREADY_MEMBER = "already_member"
    ALREADY_ADMIN = "already_admin"
    ALREADY_COMPLETED = "already_completed"
    LAST_ADMIN = "last_admin"
    PLAYER_NOT_IN_SQUAD = "player_not_in_squad"
    TEAMS_NOT_ASSIGNED = "teams_not_assigned"

    PLAYER_NOT_FOUND = "player_not_found"
    SQUAD_NOT_FOUND = "squad_not_found"
    MATCH_NOT_FOUND = "match_not_found"

    PERSISTENCE_FAILURE = "persistence_failure"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]


_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.INVALID_CREDENTIALS: ErrorCategory.AUTHENTICATION,
    ErrorCode.DUPLICATE_EMAIL: ErrorCategory.AUTHENTICATION,
    ErrorCode.INVALID_EXTERNAL_TOKEN: ErrorCategory.AUTHENTICATION,
    ErrorCode.NOT_ADMIN: ErrorCategory.AUTHORIZATION,
    ErrorCode.NOT_MEMBER: ErrorCategory.AUTHORIZATION,
    ErrorCode.INVALID_EMAIL: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_PASSWORD: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_NAME: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_PLAYER_COUNT: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_TEAM_SIZE: ErrorCategory.VALIDATION,
    ErrorCode.DUPLICATE_PARTICIPANT: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_TEAMS: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_WINNER: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_CONFIGURATION: ErrorCategory.VALIDATION,
    ErrorCode.ALREADY_MEMBER: ErrorCategory.CONFLICT,
    ErrorCode.ALREADY_ADMIN: ErrorCategory.CONFLICT,
    ErrorCode.ALREADY_COMPLETED: ErrorCategory.CONFLICT,
    ErrorCode.LAST_ADMIN: ErrorCategory.CONFLICT,
    ErrorCode.PLAYER_NOT_IN_SQUAD: ErrorCategory.CONFLICT,
    ErrorCode.TEAMS_NOT_ASSIGNED: ErrorCategory.CONFLICT,
    ErrorCode.PLAYER_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.SQUAD_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.MATCH_NOT_FOUND: ErrorCategory.NOT_FOUND,
    ErrorCode.PERSISTENCE_FAILURE: ErrorCategory.PERSISTENCE,
}


@dataclass(frozen=True)
class DomainError:
    """Structured failure carried by a failed Result."""

    code: ErrorCode
    message: str

    @property
    def category(self) -> ErrorCategory:
        return self.code.category

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class PersistenceError(RuntimeError):
    """Raised by storage adapters when a read or write fails."""


class Result(Generic[T]):
    """
    Success-with-value or failure-with-error.

    Business outcomes travel as Results so handlers never raise for
    expected conditions. A successful Result may carry ``None``.
    """

    __slots__ = ("_value", "_error")

    def __init__(self, value: T | None = None, error: DomainError | None = None) -> None:
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        self._value = value
        self._error = error

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: DomainError) -> Result[T]:
        if error is None:
            raise ValueError("failure requires an error")
        return cls(error=error)

    @classmethod
    def fail(cls, code: ErrorCode, message: str) -> Result[T]:
        return cls(error=DomainError(code=code, message=message))

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        """Success value; raises if the result is a failure."""
        if self._error is not None:
            raise ValueError(f"Cannot access value on failed result: {self._error}")
        return self._value  # type: ignore[return-value]

    @property
    def error(self) -> DomainError:
        """Failure details; raises if the result is a success."""
        if self._error is None:
            raise ValueError("Cannot access error on successful result")
        return self._error

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Result.failure({self._error.code.value!r}, {self._error.message!r})"
        return f"Result.success({self._value!r})"


__all__ = [
    "DomainError",
    "ErrorCategory",
    "ErrorCode",
    "PersistenceError",
    "Result",
    "utcnow",
]
