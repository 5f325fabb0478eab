"""SQLAlchemy persistence for matches and their rating snapshots."""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select

from domain.common import PersistenceError
from domain.matches import Match, MatchPlayer, MatchResult, MatchStatus, Team, TeamDesignation
from domain.values import MatchId, PlayerId, Rating, SquadId
from models import MatchPlayerRecord, MatchRecord
from repositories.base import SessionRepository, storage_errors


class SqlMatchRepository(SessionRepository):
    """Match storage with optimistic locking on ``matches.version``.

    Every loaded match carries the row version it was read at. ``update``
    refuses to write when the stored row has moved on since then, and the
    mapper-level ``version_id_col`` catches a row changed between that check
    and the flush. Either way the second writer gets a PersistenceError.
    """

    def get_by_id(self, match_id: MatchId) -> Match | None:
        with storage_errors("load match"):
            record = self.session.get(MatchRecord, match_id.value)
            return None if record is None else _to_domain(record)

    def list_for_squad(self, squad_id: SquadId) -> list[Match]:
        statement = (
            select(MatchRecord)
            .where(MatchRecord.squad_id == squad_id.value)
            .order_by(MatchRecord.scheduled_at.desc(), MatchRecord.created_at.desc())
        )
        with storage_errors("list matches for squad"):
            return [_to_domain(record) for record in self.session.execute(statement).scalars()]

    def add(self, match: Match) -> None:
        with storage_errors("add match"):
            record = MatchRecord(
                id=match.id.value,
                squad_id=match.squad_id.value,
                scheduled_at=match.scheduled_at,
                team_size=match.team_size,
                created_at=match.created_at,
            )
            record.players = [
                MatchPlayerRecord(
                    player_id=player.player_id.value,
                    rating_snapshot=player.rating.value,
                    position=position,
                )
                for position, player in enumerate(match.players)
            ]
            _write_state(record, match)
            self.session.add(record)
            self.session.flush()
        match.mark_stored(record.version)
        logger.debug("Stored match {} for squad {}", match.id, match.squad_id)

    def update(self, match: Match) -> None:
        with storage_errors("update match"):
            record = self.session.get(MatchRecord, match.id.value)
            if record is None:
                raise PersistenceError(f"Match {match.id} does not exist")
            if match.version is not None and record.version != match.version:
                raise PersistenceError(
                    f"Match {match.id} was changed by another transaction "
                    f"(read at version {match.version}, stored version {record.version})"
                )
            _write_state(record, match)
            self.session.flush()
        match.mark_stored(record.version)
        logger.debug("Updated match {} (status={})", match.id, match.status.value)


def _write_state(record: MatchRecord, match: Match) -> None:
    """Copy the mutable parts of a match (teams, status, result) onto its rows."""
    sides: dict[object, str] = {}
    if match.team_a is not None and match.team_b is not None:
        sides.update({player_id.value: "team_a" for player_id in match.team_a.player_ids})
        sides.update({player_id.value: "team_b" for player_id in match.team_b.player_ids})
    for row in record.players:
        row.team = sides.get(row.player_id)

    record.status = match.status.value
    if match.result is None:
        record.winner = None
        record.feedback = None
        record.recorded_at = None
    else:
        record.winner = match.result.winner.value
        record.feedback = match.result.feedback
        record.recorded_at = match.result.recorded_at


def _to_domain(record: MatchRecord) -> Match:
    players: list[MatchPlayer] = []
    team_a: list[MatchPlayer] = []
    team_b: list[MatchPlayer] = []
    for row in record.players:
        player = MatchPlayer(player_id=PlayerId(row.player_id), rating=Rating(row.rating_snapshot))
        players.append(player)
        if row.team == "team_a":
            team_a.append(player)
        elif row.team == "team_b":
            team_b.append(player)

    assigned = bool(team_a) and bool(team_b) and len(team_a) + len(team_b) == len(players)
    result = None
    if record.winner is not None and record.recorded_at is not None:
        result = MatchResult(
            winner=TeamDesignation(record.winner),
            feedback=record.feedback,
            recorded_at=record.recorded_at,
        )

    return Match.rehydrate(
        match_id=MatchId(record.id),
        squad_id=SquadId(record.squad_id),
        scheduled_at=record.scheduled_at,
        team_size=record.team_size,
        players=players,
        created_at=record.created_at,
        status=MatchStatus(record.status),
        team_a=Team.of(team_a) if assigned else None,
        team_b=Team.of(team_b) if assigned else None,
        result=result,
        version=record.version,
    )


__all__ = ["SqlMatchRepository"]
