"""Squad, match and rating domain modules."""

from domain.common import DomainError, ErrorCategory, ErrorCode, PersistenceError, Result
from domain.values import Email, MatchId, PlayerId, Rating, SquadId

__all__ = [
    "DomainError",
    "Email",
    "ErrorCategory",
    "ErrorCode",
    "MatchId",
    "PersistenceError",
    "PlayerId",
    "Rating",
    "Result",
    "SquadId",
]
