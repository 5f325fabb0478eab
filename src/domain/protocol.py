"""Collaborator contracts the command handlers depend on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from domain.matches import Match
from domain.players import PlayerAccount
from domain.squads import Squad
from domain.values import Email, MatchId, PlayerId, SquadId


@dataclass(frozen=True)
class ExternalIdentity:
    """Identity asserted by an external provider after token verification."""

    provider_id: str
    email: str


@runtime_checkable
class PlayerRepository(Protocol):
    def get_by_id(self, player_id: PlayerId) -> PlayerAccount | None: ...

    def get_by_email(self, email: Email) -> PlayerAccount | None: ...

    def get_by_provider_id(self, provider_id: str) -> PlayerAccount | None: ...

    def add(self, player: PlayerAccount) -> None: ...

    def update(self, player: PlayerAccount) -> None: ...


@runtime_checkable
class SquadRepository(Protocol):
    def get_by_id(self, squad_id: SquadId) -> Squad | None: ...

    def list_for_player(self, player_id: PlayerId) -> list[Squad]:
        """Squads where the player is an active member or an admin."""
        ...

    def add(self, squad: Squad) -> None: ...

    def update(self, squad: Squad) -> None: ...


@runtime_checkable
class MatchRepository(Protocol):
    def get_by_id(self, match_id: MatchId) -> Match | None: ...

    def list_for_squad(self, squad_id: SquadId) -> list[Match]:
        """Matches of one squad, most recently scheduled first."""
        ...

    def add(self, match: Match) -> None: ...

    def update(self, match: Match) -> None: ...


@runtime_checkable
class IdentityVerifier(Protocol):
    def verify(self, token: str) -> ExternalIdentity | None:
        """Return the asserted identity, or None when the token is rejected."""
        ...


@runtime_checkable
class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password_hash: str, password: str) -> bool: ...


__all__ = [
    "ExternalIdentity",
    "IdentityVerifier",
    "MatchRepository",
    "PasswordHasher",
    "PlayerRepository",
    "SquadRepository",
]
