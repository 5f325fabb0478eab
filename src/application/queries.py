"""Read-only queries over squads, memberships and matches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from application.base import CommandHandler
from domain.common import ErrorCode, Result
from domain.matches import Match, MatchStatus, TeamDesignation
from domain.players import SquadMembership
from domain.protocol import MatchRepository, PlayerRepository, SquadRepository
from domain.values import MatchId, PlayerId, Rating, SquadId


@dataclass(frozen=True)
class ListSquadsForPlayer:
    player_id: PlayerId


@dataclass(frozen=True)
class ListMatchesForSquad:
    squad_id: SquadId


@dataclass(frozen=True)
class GetPlayerRatingInSquad:
    player_id: PlayerId
    squad_id: SquadId


@dataclass(frozen=True)
class GetSquadStandings:
    squad_id: SquadId


@dataclass(frozen=True)
class GetMatch:
    match_id: MatchId


@dataclass(frozen=True)
class SquadSummary:
    squad_id: SquadId
    name: str
    is_admin: bool
    rating: Rating | None
    joined_at: datetime | None
    member_count: int

    @property
    def is_member(self) -> bool:
        return self.rating is not None


@dataclass(frozen=True)
class MatchSummary:
    match_id: MatchId
    scheduled_at: datetime
    team_size: int
    status: MatchStatus
    player_count: int
    winner: TeamDesignation | None
    completed_at: datetime | None


class ListSquadsForPlayerHandler(CommandHandler[ListSquadsForPlayer, list[SquadSummary]]):
    """Squads the player belongs to or administers, with their current rating."""

    operation = "ListSquadsForPlayer"

    def __init__(self, squads: SquadRepository, players: PlayerRepository) -> None:
        self.squads = squads
        self.players = players

    def _execute(self, query: ListSquadsForPlayer) -> Result[list[SquadSummary]]:
        if self.players.get_by_id(query.player_id) is None:
            return Result.fail(ErrorCode.PLAYER_NOT_FOUND, f"Player {query.player_id} not found.")

        summaries = []
        for squad in self.squads.list_for_player(query.player_id):
            membership = squad.membership_for(query.player_id)
            summaries.append(
                SquadSummary(
                    squad_id=squad.id,
                    name=squad.name,
                    is_admin=squad.is_admin(query.player_id),
                    rating=membership.rating if membership else None,
                    joined_at=membership.joined_at if membership else None,
                    member_count=len(squad.members),
                )
            )
        logger.debug("Player {} has {} squads", query.player_id, len(summaries))
        return Result.success(summaries)


class ListMatchesForSquadHandler(CommandHandler[ListMatchesForSquad, list[MatchSummary]]):
    operation = "ListMatchesForSquad"

    def __init__(self, squads: SquadRepository, matches: MatchRepository) -> None:
        self.squads = squads
        self.matches = matches

    def _execute(self, query: ListMatchesForSquad) -> Result[list[MatchSummary]]:
        if self.squads.get_by_id(query.squad_id) is None:
            return Result.fail(ErrorCode.SQUAD_NOT_FOUND, f"Squad {query.squad_id} not found.")
        return Result.success([_summarise(match) for match in self.matches.list_for_squad(query.squad_id)])


class GetPlayerRatingInSquadHandler(CommandHandler[GetPlayerRatingInSquad, SquadMembership]):
    operation = "GetPlayerRatingInSquad"

    def __init__(self, squads: SquadRepository) -> None:
        self.squads = squads

    def _execute(self, query: GetPlayerRatingInSquad) -> Result[SquadMembership]:
        squad = self.squads.get_by_id(query.squad_id)
        if squad is None:
            return Result.fail(ErrorCode.SQUAD_NOT_FOUND, f"Squad {query.squad_id} not found.")
        membership = squad.membership_for(query.player_id)
        if membership is None:
            return Result.fail(
                ErrorCode.PLAYER_NOT_IN_SQUAD,
                f"Player {query.player_id} is not a member of this squad.",
            )
        return Result.success(membership)


class GetSquadStandingsHandler(CommandHandler[GetSquadStandings, list[SquadMembership]]):
    """Members ordered by rating, highest first; earlier joiners win ties."""

    operation = "GetSquadStandings"

    def __init__(self, squads: SquadRepository) -> None:
        self.squads = squads

    def _execute(self, query: GetSquadStandings) -> Result[list[SquadMembership]]:
        squad = self.squads.get_by_id(query.squad_id)
        if squad is None:
            return Result.fail(ErrorCode.SQUAD_NOT_FOUND, f"Squad {query.squad_id} not found.")
        standings = sorted(squad.members, key=lambda member: (-member.rating.value, member.joined_at))
        return Result.success(standings)


class GetMatchHandler(CommandHandler[GetMatch, Match]):
    operation = "GetMatch"

    def __init__(self, matches: MatchRepository) -> None:
        self.matches = matches

    def _execute(self, query: GetMatch) -> Result[Match]:
        match = self.matches.get_by_id(query.match_id)
        if match is None:
            return Result.fail(ErrorCode.MATCH_NOT_FOUND, f"Match {query.match_id} not found.")
        return Result.success(match)


def _summarise(match: Match) -> MatchSummary:
    return MatchSummary(
        match_id=match.id,
        scheduled_at=match.scheduled_at,
        team_size=match.team_size,
        status=match.status,
        player_count=len(match.players),
        winner=match.result.winner if match.result else None,
        completed_at=match.result.recorded_at if match.result else None,
    )


__all__ = [
    "GetMatch",
    "GetMatchHandler",
    "GetPlayerRatingInSquad",
    "GetPlayerRatingInSquadHandler",
    "GetSquadStandings",
    "GetSquadStandingsHandler",
    "ListMatchesForSquad",
    "ListMatchesForSquadHandler",
    "ListSquadsForPlayer",
    "ListSquadsForPlayerHandler",
    "MatchSummary",
    "SquadSummary",
]
