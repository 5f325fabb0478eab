"""Squad administration commands."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from application.base import CommandHandler, rejected
from domain.common import ErrorCode, Result
from domain.players import SquadMembership
from domain.protocol import PlayerRepository, SquadRepository
from domain.settings import GameSettings
from domain.squads import Squad
from domain.values import PlayerId, Rating, SquadId


@dataclass(frozen=True)
class CreateSquad:
    name: str
    creator_id: PlayerId


@dataclass(frozen=True)
class JoinSquad:
    player_id: PlayerId
    squad_id: SquadId


@dataclass(frozen=True)
class AddSquadAdmin:
    squad_id: SquadId
    requesting_player_id: PlayerId
    target_player_id: PlayerId


@dataclass(frozen=True)
class RemoveSquadAdmin:
    squad_id: SquadId
    requesting_player_id: PlayerId
    target_player_id: PlayerId


@dataclass(frozen=True)
class RemoveSquadMember:
    squad_id: SquadId
    requesting_player_id: PlayerId
    target_player_id: PlayerId


def _squad_not_found(squad_id: SquadId) -> Result:
    return Result.fail(ErrorCode.SQUAD_NOT_FOUND, f"Squad {squad_id} not found.")


def _player_not_found(player_id: PlayerId) -> Result:
    return Result.fail(ErrorCode.PLAYER_NOT_FOUND, f"Player {player_id} not found.")


def _not_admin(player_id: PlayerId) -> Result:
    return Result.fail(ErrorCode.NOT_ADMIN, f"Player {player_id} is not a squad admin.")


class CreateSquadHandler(CommandHandler[CreateSquad, SquadId]):
    """Create a squad with the creator as sole admin; the creator joins separately."""

    operation = "CreateSquad"

    def __init__(self, squads: SquadRepository, players: PlayerRepository) -> None:
        self.squads = squads
        self.players = players

    def _execute(self, command: CreateSquad) -> Result[SquadId]:
        if not command.name or not command.name.strip():
            return Result.fail(ErrorCode.INVALID_NAME, "Squad name cannot be empty.")
        if self.players.get_by_id(command.creator_id) is None:
            return rejected(self.operation, _player_not_found(command.creator_id))

        created = Squad.create(command.name, command.creator_id)
        if created.is_failure:
            return created
        squad = created.value
        self.squads.add(squad)
        logger.info("Player {} created squad {} ({})", command.creator_id, squad.id, squad.name)
        return Result.success(squad.id)


class JoinSquadHandler(CommandHandler[JoinSquad, SquadMembership]):
    operation = "JoinSquad"

    def __init__(
        self,
        squads: SquadRepository,
        players: PlayerRepository,
        settings: GameSettings,
    ) -> None:
        self.squads = squads
        self.players = players
        self.settings = settings

    def _execute(self, command: JoinSquad) -> Result[SquadMembership]:
        player = self.players.get_by_id(command.player_id)
        if player is None:
            return _player_not_found(command.player_id)
        squad = self.squads.get_by_id(command.squad_id)
        if squad is None:
            return _squad_not_found(command.squad_id)
        if squad.is_member(command.player_id):
            return rejected(
                self.operation,
                Result.fail(ErrorCode.ALREADY_MEMBER, "Player is already a member of this squad."),
            )

        rating = Rating(self.settings.default_rating)
        added = squad.add_member(command.player_id, rating)
        if added.is_failure:
            return added
        membership = added.value
        joined = player.join_squad(command.squad_id, rating, joined_at=membership.joined_at)
        if joined.is_failure:
            return joined

        # Squad first: the player write only fills in rows the squad has not stored.
        self.squads.update(squad)
        self.players.update(player)
        logger.info(
            "Player {} joined squad {} at rating {}",
            command.player_id,
            command.squad_id,
            rating,
        )
        return Result.success(membership)


class AddSquadAdminHandler(CommandHandler[AddSquadAdmin, None]):
    operation = "AddSquadAdmin"

    def __init__(self, squads: SquadRepository, players: PlayerRepository) -> None:
        self.squads = squads
        self.players = players

    def _execute(self, command: AddSquadAdmin) -> Result[None]:
        squad = self.squads.get_by_id(command.squad_id)
        if squad is None:
            return _squad_not_found(command.squad_id)
        if not squad.is_admin(command.requesting_player_id):
            return rejected(self.operation, _not_admin(command.requesting_player_id))
        if self.players.get_by_id(command.target_player_id) is None:
            return _player_not_found(command.target_player_id)

        added = squad.add_admin(command.target_player_id)
        if added.is_failure:
            return added
        self.squads.update(squad)
        logger.info("Player {} is now an admin of squad {}", command.target_player_id, squad.id)
        return Result.success()


class RemoveSquadAdminHandler(CommandHandler[RemoveSquadAdmin, None]):
    operation = "RemoveSquadAdmin"

    def __init__(self, squads: SquadRepository) -> None:
        self.squads = squads

    def _execute(self, command: RemoveSquadAdmin) -> Result[None]:
        squad = self.squads.get_by_id(command.squad_id)
        if squad is None:
            return _squad_not_found(command.squad_id)
        if not squad.is_admin(command.requesting_player_id):
            return rejected(self.operation, _not_admin(command.requesting_player_id))

        removed = squad.remove_admin(command.target_player_id)
        if removed.is_failure:
            return rejected(self.operation, removed)
        self.squads.update(squad)
        logger.info("Player {} is no longer an admin of squad {}", command.target_player_id, squad.id)
        return Result.success()


class RemoveSquadMemberHandler(CommandHandler[RemoveSquadMember, SquadMembership]):
    """Detach a member; admin status of the target is left as it is."""

    operation = "RemoveSquadMember"

    def __init__(self, squads: SquadRepository) -> None:
        self.squads = squads

    def _execute(self, command: RemoveSquadMember) -> Result[SquadMembership]:
        squad = self.squads.get_by_id(command.squad_id)
        if squad is None:
            return _squad_not_found(command.squad_id)
        if not squad.is_admin(command.requesting_player_id):
            return rejected(self.operation, _not_admin(command.requesting_player_id))

        removed = squad.remove_member(command.target_player_id)
        if removed.is_failure:
            return removed
        self.squads.update(squad)
        logger.info(
            "Player {} removed from squad {} (last rating {})",
            command.target_player_id,
            squad.id,
            removed.value.rating,
        )
        return removed


__all__ = [
    "AddSquadAdmin",
    "AddSquadAdminHandler",
    "CreateSquad",
    "CreateSquadHandler",
    "JoinSquad",
    "JoinSquadHandler",
    "RemoveSquadAdmin",
    "RemoveSquadAdminHandler",
    "RemoveSquadMember",
    "RemoveSquadMemberHandler",
]
