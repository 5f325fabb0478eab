"""Player account aggregate and squad membership value."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from domain.common import ErrorCode, Result, utcnow
from domain.values import Email, PlayerId, Rating, SquadId


@dataclass(frozen=True)
class SquadMembership:
    """A player's standing in one squad."""

    player_id: PlayerId
    squad_id: SquadId
    rating: Rating
    joined_at: datetime

    def with_rating(self, rating: Rating) -> SquadMembership:
        return replace(self, rating=rating)


class PlayerAccount:
    """Credentials plus the squads a player belongs to.

    Exactly one credential is present: a password hash or an external
    identity-provider id.
    """

    def __init__(
        self,
        *,
        player_id: PlayerId,
        email: Email,
        password_hash: str | None,
        provider_id: str | None,
        created_at: datetime,
        memberships: Iterable[SquadMembership] = (),
    ) -> None:
        has_password = bool(password_hash)
        has_provider = bool(provider_id)
        if has_password == has_provider:
            raise ValueError("Player account needs exactly one of password hash or provider id")

        self._id = player_id
        self._email = email
        self._password_hash = password_hash or None
        self._provider_id = provider_id or None
        self._created_at = created_at
        self._memberships: list[SquadMembership] = []
        for membership in memberships:
            if membership.player_id != player_id:
                raise ValueError(f"Membership for {membership.player_id} attached to {player_id}")
            if self.membership_for(membership.squad_id) is not None:
                raise ValueError(f"Duplicate membership for squad {membership.squad_id}")
            self._memberships.append(membership)

    @classmethod
    def register_with_password(cls, email: Email, password_hash: str) -> Result[PlayerAccount]:
        if not password_hash or not password_hash.strip():
            return Result.fail(ErrorCode.INVALID_PASSWORD, "Password hash cannot be empty.")
        return Result.success(
            cls(
                player_id=PlayerId.new(),
                email=email,
                password_hash=password_hash,
                provider_id=None,
                created_at=utcnow(),
            )
        )

    @classmethod
    def register_with_provider(cls, email: Email, provider_id: str) -> Result[PlayerAccount]:
        if not provider_id or not provider_id.strip():
            return Result.fail(ErrorCode.INVALID_EXTERNAL_TOKEN, "Provider id cannot be empty.")
        return Result.success(
            cls(
                player_id=PlayerId.new(),
                email=email,
                password_hash=None,
                provider_id=provider_id.strip(),
                created_at=utcnow(),
            )
        )

    @classmethod
    def rehydrate(
        cls,
        *,
        player_id: PlayerId,
        email: Email,
        password_hash: str | None,
        provider_id: str | None,
        created_at: datetime,
        memberships: Iterable[SquadMembership],
    ) -> PlayerAccount:
        """Rebuild a stored account; used by the persistence adapter only."""
        return cls(
            player_id=player_id,
            email=email,
            password_hash=password_hash,
            provider_id=provider_id,
            created_at=created_at,
            memberships=memberships,
        )

    @property
    def id(self) -> PlayerId:
        return self._id

    @property
    def email(self) -> Email:
        return self._email

    @property
    def password_hash(self) -> str | None:
        return self._password_hash

    @property
    def provider_id(self) -> str | None:
        return self._provider_id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def memberships(self) -> tuple[SquadMembership, ...]:
        return tuple(self._memberships)

    @property
    def uses_password(self) -> bool:
        return self._password_hash is not None

    @property
    def uses_provider(self) -> bool:
        return self._provider_id is not None

    def membership_for(self, squad_id: SquadId) -> SquadMembership | None:
        for membership in self._memberships:
            if membership.squad_id == squad_id:
                return membership
        return None

    def join_squad(
        self,
        squad_id: SquadId,
        rating: Rating,
        joined_at: datetime | None = None,
    ) -> Result[SquadMembership]:
        if self.membership_for(squad_id) is not None:
            return Result.fail(
                ErrorCode.ALREADY_MEMBER,
                f"Player {self._id} is already a member of squad {squad_id}.",
            )
        membership = SquadMembership(
            player_id=self._id,
            squad_id=squad_id,
            rating=rating,
            joined_at=joined_at or utcnow(),
        )
        self._memberships.append(membership)
        return Result.success(membership)

    def __repr__(self) -> str:
        return f"PlayerAccount(id={self._id}, email={self._email})"


__all__ = ["PlayerAccount", "SquadMembership"]
