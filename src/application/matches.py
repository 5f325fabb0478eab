"""Match scheduling and result recording commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from application.base import CommandHandler, rejected
from domain.balancing import balance_teams
from domain.common import ErrorCode, Result
from domain.elo import calculate_rating_changes
from domain.matches import Match, MatchPlayer, TeamDesignation
from domain.protocol import MatchRepository, SquadRepository
from domain.settings import GameSettings
from domain.values import MatchId, PlayerId, Rating, SquadId


@dataclass(frozen=True)
class CreateMatch:
    squad_id: SquadId
    scheduled_at: datetime
    player_ids: Sequence[PlayerId]
    requesting_player_id: PlayerId
    team_size: int | None = None


@dataclass(frozen=True)
class RecordMatchResult:
    match_id: MatchId
    winner: TeamDesignation
    requesting_player_id: PlayerId
    feedback: str | None = None


@dataclass(frozen=True)
class RatingChange:
    """Rating movement applied to one participant's squad membership."""

    player_id: PlayerId
    team: TeamDesignation
    previous_rating: Rating
    delta: int
    new_rating: Rating


class CreateMatchHandler(CommandHandler[CreateMatch, Match]):
    """Snapshot current squad ratings, balance the teams and store the match."""

    operation = "CreateMatch"

    def __init__(
        self,
        squads: SquadRepository,
        matches: MatchRepository,
        settings: GameSettings,
    ) -> None:
        self.squads = squads
        self.matches = matches
        self.settings = settings

    def _execute(self, command: CreateMatch) -> Result[Match]:
        squad = self.squads.get_by_id(command.squad_id)
        if squad is None:
            return Result.fail(ErrorCode.SQUAD_NOT_FOUND, f"Squad {command.squad_id} not found.")
        if not squad.is_admin(command.requesting_player_id):
            return rejected(
                self.operation,
                Result.fail(ErrorCode.NOT_ADMIN, "Only squad admins can create matches."),
            )

        player_ids = list(command.player_ids)
        if len(player_ids) < 2 or len(player_ids) % 2 != 0:
            return Result.fail(
                ErrorCode.INVALID_PLAYER_COUNT,
                f"Match needs an even number of at least 2 players, got {len(player_ids)}.",
            )
        team_size = self.settings.default_team_size if command.team_size is None else command.team_size
        if team_size < 1:
            return Result.fail(ErrorCode.INVALID_TEAM_SIZE, "Team size must be greater than zero.")

        participants: list[MatchPlayer] = []
        for player_id in player_ids:
            membership = squad.membership_for(player_id)
            if membership is None:
                return Result.fail(
                    ErrorCode.PLAYER_NOT_IN_SQUAD,
                    f"Player {player_id} is not a member of this squad.",
                )
            participants.append(MatchPlayer(player_id=player_id, rating=membership.rating))

        created = Match.create(squad.id, command.scheduled_at, participants, team_size)
        if created.is_failure:
            return rejected(self.operation, created)
        match = created.value

        team_a, team_b = balance_teams(match.players)
        assigned = match.assign_teams(team_a, team_b)
        if assigned.is_failure:
            return assigned

        self.matches.add(match)
        logger.info(
            "Created match {} in squad {}: {} players, team totals {} vs {}",
            match.id,
            squad.id,
            len(match.players),
            team_a.total_rating,
            team_b.total_rating,
        )
        return Result.success(match)


class RecordMatchResultHandler(CommandHandler[RecordMatchResult, list[RatingChange]]):
    """
    Complete a match and move each participant's live squad rating.

    Deltas are computed from the ratings frozen on the match, then applied to
    the current memberships (clamped to the rating bounds). Participants who
    have since left the squad are skipped.
    """

    operation = "RecordMatchResult"

    def __init__(
        self,
        squads: SquadRepository,
        matches: MatchRepository,
        settings: GameSettings,
    ) -> None:
        self.squads = squads
        self.matches = matches
        self.settings = settings

    def _execute(self, command: RecordMatchResult) -> Result[list[RatingChange]]:
        match = self.matches.get_by_id(command.match_id)
        if match is None:
            return Result.fail(ErrorCode.MATCH_NOT_FOUND, f"Match {command.match_id} not found.")
        squad = self.squads.get_by_id(match.squad_id)
        if squad is None:
            return Result.fail(ErrorCode.SQUAD_NOT_FOUND, f"Squad {match.squad_id} not found.")
        if not squad.is_admin(command.requesting_player_id):
            return rejected(
                self.operation,
                Result.fail(ErrorCode.NOT_ADMIN, "Only squad admins can record match results."),
            )

        try:
            winner = TeamDesignation(command.winner)
        except ValueError:
            return Result.fail(
                ErrorCode.INVALID_WINNER,
                f"Winner must be one of team_a, team_b or draw, got {command.winner!r}.",
            )
        recorded = match.record_result(winner, command.feedback)
        if recorded.is_failure:
            return rejected(self.operation, recorded)

        team_a, team_b = match.team_a, match.team_b
        if team_a is None or team_b is None:
            return Result.fail(ErrorCode.TEAMS_NOT_ASSIGNED, "Match teams have not been assigned.")
        deltas = calculate_rating_changes(team_a, team_b, winner, self.settings.k_factor)
        team_a_ids = set(team_a.player_ids)

        changes: list[RatingChange] = []
        for player_id, delta in deltas.items():
            membership = squad.membership_for(player_id)
            if membership is None:
                logger.warning(
                    "Player {} left squad {} before match {} was recorded; rating not changed",
                    player_id,
                    squad.id,
                    match.id,
                )
                continue
            new_rating = membership.rating.add(delta)
            squad.update_member_rating(player_id, new_rating)
            changes.append(
                RatingChange(
                    player_id=player_id,
                    team=TeamDesignation.TEAM_A if player_id in team_a_ids else TeamDesignation.TEAM_B,
                    previous_rating=membership.rating,
                    delta=delta,
                    new_rating=new_rating,
                )
            )

        self.matches.update(match)
        self.squads.update(squad)
        logger.info(
            "Recorded {} for match {}; updated {} ratings with k_factor={}",
            winner.value,
            match.id,
            len(changes),
            self.settings.k_factor,
        )
        return Result.success(changes)


__all__ = [
    "CreateMatch",
    "CreateMatchHandler",
    "RatingChange",
    "RecordMatchResult",
    "RecordMatchResultHandler",
]
