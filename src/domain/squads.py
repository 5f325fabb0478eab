"""Squad aggregate: admins plus members with per-squad ratings."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from domain.common import ErrorCode, Result, utcnow
from domain.players import SquadMembership
from domain.values import PlayerId, Rating, SquadId


class Squad:
    """A group of players who schedule matches together.

    The squad's member list is the source of truth for each player's current
    rating in this squad. Admins need not be members.
    """

    def __init__(
        self,
        *,
        squad_id: SquadId,
        name: str,
        created_at: datetime,
        admin_ids: Iterable[PlayerId],
        members: Iterable[SquadMembership] = (),
    ) -> None:
        if not name or not name.strip():
            raise ValueError("Squad name cannot be empty.")

        self._id = squad_id
        self._name = name.strip()
        self._created_at = created_at
        self._admin_ids: list[PlayerId] = []
        for admin_id in admin_ids:
            if admin_id not in self._admin_ids:
                self._admin_ids.append(admin_id)
        if not self._admin_ids:
            raise ValueError("Squad needs at least one admin.")

        self._members: list[SquadMembership] = []
        for membership in members:
            if membership.squad_id != squad_id:
                raise ValueError(f"Membership for squad {membership.squad_id} attached to {squad_id}")
            if self.is_member(membership.player_id):
                raise ValueError(f"Duplicate membership for player {membership.player_id}")
            self._members.append(membership)

    @classmethod
    def create(cls, name: str, creator_id: PlayerId) -> Result[Squad]:
        """New squad with the creator as sole admin and no members."""
        if name is None or not name.strip():
            return Result.fail(ErrorCode.INVALID_NAME, "Squad name cannot be empty.")
        return Result.success(
            cls(
                squad_id=SquadId.new(),
                name=name,
                created_at=utcnow(),
                admin_ids=[creator_id],
            )
        )

    @classmethod
    def rehydrate(
        cls,
        *,
        squad_id: SquadId,
        name: str,
        created_at: datetime,
        admin_ids: Iterable[PlayerId],
        members: Iterable[SquadMembership],
    ) -> Squad:
        """Rebuild a stored squad; used by the persistence adapter only."""
        return cls(
            squad_id=squad_id,
            name=name,
            created_at=created_at,
            admin_ids=admin_ids,
            members=members,
        )

    @property
    def id(self) -> SquadId:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def admin_ids(self) -> frozenset[PlayerId]:
        return frozenset(self._admin_ids)

    @property
    def members(self) -> tuple[SquadMembership, ...]:
        return tuple(self._members)

    def is_admin(self, player_id: PlayerId) -> bool:
        return player_id in self._admin_ids

    def is_member(self, player_id: PlayerId) -> bool:
        return self.membership_for(player_id) is not None

    def membership_for(self, player_id: PlayerId) -> SquadMembership | None:
        for membership in self._members:
            if membership.player_id == player_id:
                return membership
        return None

    def add_admin(self, player_id: PlayerId) -> Result[None]:
        if self.is_admin(player_id):
            return Result.fail(
                ErrorCode.ALREADY_ADMIN,
                f"Player {player_id} is already an admin of this squad.",
            )
        self._admin_ids.append(player_id)
        return Result.success()

    def remove_admin(self, player_id: PlayerId) -> Result[None]:
        if not self.is_admin(player_id):
            return Result.fail(
                ErrorCode.NOT_ADMIN,
                f"Player {player_id} is not an admin of this squad.",
            )
        if len(self._admin_ids) == 1:
            return Result.fail(ErrorCode.LAST_ADMIN, "Cannot remove the last admin from the squad.")
        self._admin_ids.remove(player_id)
        return Result.success()

    def add_member(
        self,
        player_id: PlayerId,
        rating: Rating,
        joined_at: datetime | None = None,
    ) -> Result[SquadMembership]:
        if self.is_member(player_id):
            return Result.fail(
                ErrorCode.ALREADY_MEMBER,
                f"Player {player_id} is already a member of this squad.",
            )
        membership = SquadMembership(
            player_id=player_id,
            squad_id=self._id,
            rating=rating,
            joined_at=joined_at or utcnow(),
        )
        self._members.append(membership)
        return Result.success(membership)

    def remove_member(self, player_id: PlayerId) -> Result[SquadMembership]:
        """Detach a member; the returned membership holds their last rating."""
        membership = self.membership_for(player_id)
        if membership is None:
            return Result.fail(
                ErrorCode.PLAYER_NOT_IN_SQUAD,
                f"Player {player_id} is not a member of this squad.",
            )
        self._members.remove(membership)
        return Result.success(membership)

    def update_member_rating(self, player_id: PlayerId, rating: Rating) -> Result[SquadMembership]:
        for index, membership in enumerate(self._members):
            if membership.player_id == player_id:
                updated = membership.with_rating(rating)
                self._members[index] = updated
                return Result.success(updated)
        return Result.fail(
            ErrorCode.PLAYER_NOT_IN_SQUAD,
            f"Player {player_id} is not a member of this squad.",
        )

    def __repr__(self) -> str:
        return f"Squad(id={self._id}, name={self._name!r}, members={len(self._members)})"


__all__ = ["Squad"]
