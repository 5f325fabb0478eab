"""Command handlers and read queries."""

from application.matches import (
    CreateMatch,
    CreateMatchHandler,
    RatingChange,
    RecordMatchResult,
    RecordMatchResultHandler,
)
from application.players import (
    AuthenticatedPlayer,
    AuthenticatePlayer,
    AuthenticatePlayerHandler,
    AuthenticateWithProvider,
    AuthenticateWithProviderHandler,
    RegisterPlayer,
    RegisterPlayerHandler,
)
from application.security import WerkzeugPasswordHasher
from application.squads import (
    AddSquadAdmin,
    AddSquadAdminHandler,
    CreateSquad,
    CreateSquadHandler,
    JoinSquad,
    JoinSquadHandler,
    RemoveSquadAdmin,
    RemoveSquadAdminHandler,
    RemoveSquadMember,
    RemoveSquadMemberHandler,
)

__all__ = [
    "AddSquadAdmin",
    "AddSquadAdminHandler",
    "AuthenticatePlayer",
    "AuthenticatePlayerHandler",
    "AuthenticateWithProvider",
    "AuthenticateWithProviderHandler",
    "AuthenticatedPlayer",
    "CreateMatch",
    "CreateMatchHandler",
    "CreateSquad",
    "CreateSquadHandler",
    "JoinSquad",
    "JoinSquadHandler",
    "RatingChange",
    "RecordMatchResult",
    "RecordMatchResultHandler",
    "RegisterPlayer",
    "RegisterPlayerHandler",
    "RemoveSquadAdmin",
    "RemoveSquadAdminHandler",
    "RemoveSquadMember",
    "RemoveSquadMemberHandler",
    "WerkzeugPasswordHasher",
]
