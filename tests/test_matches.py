"""Unit tests for the match aggregate."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.common import ErrorCode
from domain.matches import Match, MatchPlayer, MatchStatus, Team, TeamDesignation
from domain.values import PlayerId, Rating, SquadId

KICK_OFF = datetime(2026, 3, 1, 19, 0)


def _players(*ratings: int) -> list[MatchPlayer]:
    return [MatchPlayer(player_id=PlayerId.new(), rating=Rating(rating)) for rating in ratings]


def _match(players: list[MatchPlayer]) -> Match:
    return Match.create(SquadId.new(), KICK_OFF, players).value


def test_create_defaults_to_pending_with_team_size_five() -> None:
    match = _match(_players(1000, 1000))
    assert match.status is MatchStatus.PENDING
    assert match.team_size == 5
    assert match.result is None
    assert not match.teams_assigned


@pytest.mark.parametrize("count", [0, 1, 3, 5])
def test_create_rejects_odd_or_insufficient_player_counts(count: int) -> None:
    result = Match.create(SquadId.new(), KICK_OFF, _players(*([1000] * count)))
    assert result.error.code is ErrorCode.INVALID_PLAYER_COUNT


def test_create_rejects_duplicate_participants() -> None:
    player = MatchPlayer(player_id=PlayerId.new(), rating=Rating(1000))
    result = Match.create(SquadId.new(), KICK_OFF, [player, player])
    assert result.error.code is ErrorCode.DUPLICATE_PARTICIPANT


def test_create_rejects_non_positive_team_size() -> None:
    result = Match.create(SquadId.new(), KICK_OFF, _players(1000, 1000), team_size=0)
    assert result.error.code is ErrorCode.INVALID_TEAM_SIZE


def test_team_totals_and_averages() -> None:
    team = Team.of(_players(1200, 1000, 1100))
    assert team.total_rating == 3300
    assert team.average_rating == pytest.approx(1100.0)
    with pytest.raises(ValueError):
        Team.of([])


def test_assign_teams_requires_exact_partition() -> None:
    players = _players(1000, 1000, 1000, 1000)
    match = _match(players)
    outsider = _players(1000)[0]

    missing = match.assign_teams(Team.of(players[:2]), Team.of(players[2:3]))
    assert missing.error.code is ErrorCode.INVALID_TEAMS

    foreign = match.assign_teams(Team.of(players[:2]), Team.of([players[2], outsider]))
    assert foreign.error.code is ErrorCode.INVALID_TEAMS

    doubled = match.assign_teams(Team.of(players[:2]), Team.of([players[1], players[2], players[3]]))
    assert doubled.error.code is ErrorCode.INVALID_TEAMS

    assert match.assign_teams(Team.of(players[:2]), Team.of(players[2:])).is_success
    assert match.teams_assigned


def test_record_result_requires_assigned_teams() -> None:
    match = _match(_players(1000, 1000))
    result = match.record_result(TeamDesignation.TEAM_A)
    assert result.error.code is ErrorCode.TEAMS_NOT_ASSIGNED
    assert match.status is MatchStatus.PENDING


def test_record_result_completes_exactly_once() -> None:
    players = _players(1000, 1000)
    match = _match(players)
    match.assign_teams(Team.of(players[:1]), Team.of(players[1:]))

    first = match.record_result(TeamDesignation.DRAW, feedback="  close game ")
    assert first.is_success
    assert first.value.feedback == "close game"
    assert match.status is MatchStatus.COMPLETED
    assert not match.can_record_result()

    second = match.record_result(TeamDesignation.TEAM_A)
    assert second.error.code is ErrorCode.ALREADY_COMPLETED
    assert match.result.winner is TeamDesignation.DRAW

    reassign = match.assign_teams(Team.of(players[1:]), Team.of(players[:1]))
    assert reassign.error.code is ErrorCode.ALREADY_COMPLETED
