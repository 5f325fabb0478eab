"""Match aggregate, rating snapshots and team values."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from domain.common import DomainError, ErrorCode, Result, utcnow
from domain.settings import DEFAULT_TEAM_SIZE
from domain.values import MatchId, PlayerId, Rating, SquadId


class TeamDesignation(str, Enum):
    """Which side won, or a draw."""

    TEAM_A = "team_a"
    TEAM_B = "team_b"
    DRAW = "draw"


class MatchStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class MatchPlayer:
    """Participant with the rating frozen at match-creation time."""

    player_id: PlayerId
    rating: Rating


@dataclass(frozen=True)
class Team:
    players: tuple[MatchPlayer, ...]

    def __post_init__(self) -> None:
        if not self.players:
            raise ValueError("Team must have at least one player.")

    @classmethod
    def of(cls, players: Iterable[MatchPlayer]) -> Team:
        return cls(tuple(players))

    @property
    def total_rating(self) -> int:
        return sum(player.rating.value for player in self.players)

    @property
    def average_rating(self) -> float:
        return self.total_rating / len(self.players)

    @property
    def player_ids(self) -> tuple[PlayerId, ...]:
        return tuple(player.player_id for player in self.players)

    def __len__(self) -> int:
        return len(self.players)


@dataclass(frozen=True)
class MatchResult:
    winner: TeamDesignation
    feedback: str | None
    recorded_at: datetime


class Match:
    """One scheduled contest between two teams drawn from a squad.

    Status moves Pending -> Completed exactly once. Participant ratings are a
    snapshot and are never synchronised with the squad afterwards.
    """

    def __init__(
        self,
        *,
        match_id: MatchId,
        squad_id: SquadId,
        scheduled_at: datetime,
        team_size: int,
        players: Sequence[MatchPlayer],
        created_at: datetime,
        status: MatchStatus = MatchStatus.PENDING,
        team_a: Team | None = None,
        team_b: Team | None = None,
        result: MatchResult | None = None,
        version: int | None = None,
    ) -> None:
        problem = _participant_problem(players, team_size)
        if problem is not None:
            raise ValueError(problem.message)
        if (team_a is None) != (team_b is None):
            raise ValueError("Teams must be assigned together.")
        if (status is MatchStatus.COMPLETED) != (result is not None):
            raise ValueError("A completed match needs exactly one result.")

        self._id = match_id
        self._squad_id = squad_id
        self._scheduled_at = scheduled_at
        self._team_size = team_size
        self._players = tuple(players)
        self._created_at = created_at
        self._status = status
        self._team_a: Team | None = None
        self._team_b: Team | None = None
        self._result = result
        self._version = version
        if team_a is not None and team_b is not None:
            partition = self._partition_problem(team_a, team_b)
            if partition is not None:
                raise ValueError(partition)
            self._team_a = team_a
            self._team_b = team_b

    @classmethod
    def create(
        cls,
        squad_id: SquadId,
        scheduled_at: datetime,
        players: Sequence[MatchPlayer],
        team_size: int = DEFAULT_TEAM_SIZE,
    ) -> Result[Match]:
        problem = _participant_problem(players, team_size)
        if problem is not None:
            return Result.failure(problem)
        return Result.success(
            cls(
                match_id=MatchId.new(),
                squad_id=squad_id,
                scheduled_at=scheduled_at,
                team_size=team_size,
                players=players,
                created_at=utcnow(),
            )
        )

    @classmethod
    def rehydrate(
        cls,
        *,
        match_id: MatchId,
        squad_id: SquadId,
        scheduled_at: datetime,
        team_size: int,
        players: Sequence[MatchPlayer],
        created_at: datetime,
        status: MatchStatus,
        team_a: Team | None,
        team_b: Team | None,
        result: MatchResult | None,
        version: int | None = None,
    ) -> Match:
        """Rebuild a stored match; used by the persistence adapter only."""
        return cls(
            match_id=match_id,
            squad_id=squad_id,
            scheduled_at=scheduled_at,
            team_size=team_size,
            players=players,
            created_at=created_at,
            status=status,
            team_a=team_a,
            team_b=team_b,
            result=result,
            version=version,
        )

    @property
    def id(self) -> MatchId:
        return self._id

    @property
    def squad_id(self) -> SquadId:
        return self._squad_id

    @property
    def scheduled_at(self) -> datetime:
        return self._scheduled_at

    @property
    def team_size(self) -> int:
        return self._team_size

    @property
    def players(self) -> tuple[MatchPlayer, ...]:
        return self._players

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def status(self) -> MatchStatus:
        return self._status

    @property
    def team_a(self) -> Team | None:
        return self._team_a

    @property
    def team_b(self) -> Team | None:
        return self._team_b

    @property
    def result(self) -> MatchResult | None:
        return self._result

    @property
    def version(self) -> int | None:
        """Stored row version this instance was read at; None until first stored."""
        return self._version

    def mark_stored(self, version: int) -> None:
        self._version = version

    @property
    def teams_assigned(self) -> bool:
        return self._team_a is not None and self._team_b is not None

    def can_record_result(self) -> bool:
        return self._status is not MatchStatus.COMPLETED

    def assign_teams(self, team_a: Team, team_b: Team) -> Result[None]:
        if self._status is MatchStatus.COMPLETED:
            return Result.fail(ErrorCode.ALREADY_COMPLETED, "Cannot reassign teams of a completed match.")
        problem = self._partition_problem(team_a, team_b)
        if problem is not None:
            return Result.fail(ErrorCode.INVALID_TEAMS, problem)
        self._team_a = team_a
        self._team_b = team_b
        return Result.success()

    def record_result(
        self,
        winner: TeamDesignation,
        feedback: str | None = None,
        recorded_at: datetime | None = None,
    ) -> Result[MatchResult]:
        if not self.can_record_result():
            return Result.fail(
                ErrorCode.ALREADY_COMPLETED,
                "Match result has already been recorded.",
            )
        if not self.teams_assigned:
            return Result.fail(ErrorCode.TEAMS_NOT_ASSIGNED, "Match teams have not been assigned.")

        cleaned_feedback = feedback.strip() if feedback is not None else None
        result = MatchResult(
            winner=TeamDesignation(winner),
            feedback=cleaned_feedback or None,
            recorded_at=recorded_at or utcnow(),
        )
        self._result = result
        self._status = MatchStatus.COMPLETED
        return Result.success(result)

    def _partition_problem(self, team_a: Team, team_b: Team) -> str | None:
        assigned = [*team_a.player_ids, *team_b.player_ids]
        if len(assigned) != len(self._players):
            return "Team assignments must include all match players."
        if len(set(assigned)) != len(assigned):
            return "A player cannot appear twice in the team assignments."
        if set(assigned) != {player.player_id for player in self._players}:
            return "Team assignments must include exactly the match players."
        return None

    def __repr__(self) -> str:
        return f"Match(id={self._id}, squad_id={self._squad_id}, status={self._status.value})"


def _participant_problem(players: Sequence[MatchPlayer], team_size: int) -> DomainError | None:
    if len(players) < 2:
        return DomainError(ErrorCode.INVALID_PLAYER_COUNT, "Match must have at least 2 players.")
    if len(players) % 2 != 0:
        return DomainError(ErrorCode.INVALID_PLAYER_COUNT, "Match must have an even number of players.")
    player_ids = [player.player_id for player in players]
    if len(set(player_ids)) != len(player_ids):
        return DomainError(ErrorCode.DUPLICATE_PARTICIPANT, "A player cannot take part twice in one match.")
    if isinstance(team_size, bool) or not isinstance(team_size, int) or team_size < 1:
        return DomainError(ErrorCode.INVALID_TEAM_SIZE, "Team size must be greater than zero.")
    return None


__all__ = [
    "Match",
    "MatchPlayer",
    "MatchResult",
    "MatchStatus",
    "Team",
    "TeamDesignation",
]
