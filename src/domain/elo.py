"""Team-versus-team Elo update with a uniform per-team delta."""

from __future__ import annotations

import math
from dataclasses import dataclass

from domain.matches import Team, TeamDesignation
from domain.values import PlayerId

DEFAULT_SCALE_FACTOR = 400.0


@dataclass(frozen=True)
class MatchRatingOutcome:
    team_a_average: float
    team_b_average: float
    team_a_expected: float
    team_b_expected: float
    team_a_actual: float
    team_b_actual: float
    team_a_raw_delta: float
    team_b_raw_delta: float
    team_a_delta: int
    team_b_delta: int
    k_factor: float


def calculate_expected_score(
    rating: float,
    opponent_rating: float,
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def round_half_away_from_zero(value: float) -> int:
    if value >= 0.0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def _actual_score(outcome: TeamDesignation) -> float:
    if outcome is TeamDesignation.TEAM_A:
        return 1.0
    if outcome is TeamDesignation.TEAM_B:
        return 0.0
    return 0.5


def evaluate_match(
    team_a: Team,
    team_b: Team,
    outcome: TeamDesignation,
    k_factor: float,
) -> MatchRatingOutcome:
    """
    Score one match between two teams.

    The delta is rounded once for TeamA and negated for TeamB so the two team
    deltas are always exact opposites.
    """
    if k_factor <= 0:
        raise ValueError(f"k_factor must be > 0, got {k_factor}")
    outcome = TeamDesignation(outcome)

    team_a_average = team_a.average_rating
    team_b_average = team_b.average_rating
    team_a_expected = calculate_expected_score(
        rating=team_a_average,
        opponent_rating=team_b_average,
    )
    team_b_expected = 1.0 - team_a_expected

    team_a_actual = _actual_score(outcome)
    team_b_actual = 1.0 - team_a_actual

    team_a_raw_delta = k_factor * (team_a_actual - team_a_expected)
    team_b_raw_delta = k_factor * (team_b_actual - team_b_expected)

    team_a_delta = round_half_away_from_zero(team_a_raw_delta)
    return MatchRatingOutcome(
        team_a_average=team_a_average,
        team_b_average=team_b_average,
        team_a_expected=team_a_expected,
        team_b_expected=team_b_expected,
        team_a_actual=team_a_actual,
        team_b_actual=team_b_actual,
        team_a_raw_delta=team_a_raw_delta,
        team_b_raw_delta=team_b_raw_delta,
        team_a_delta=team_a_delta,
        team_b_delta=-team_a_delta,
        k_factor=k_factor,
    )


def calculate_rating_changes(
    team_a: Team,
    team_b: Team,
    outcome: TeamDesignation,
    k_factor: float,
) -> dict[PlayerId, int]:
    """Map every participant to the signed delta of their team."""
    evaluated = evaluate_match(team_a, team_b, outcome, k_factor)
    changes: dict[PlayerId, int] = {}
    for player in team_a.players:
        changes[player.player_id] = evaluated.team_a_delta
    for player in team_b.players:
        changes[player.player_id] = evaluated.team_b_delta
    return changes


__all__ = [
    "DEFAULT_SCALE_FACTOR",
    "MatchRatingOutcome",
    "calculate_expected_score",
    "calculate_rating_changes",
    "evaluate_match",
    "round_half_away_from_zero",
]
