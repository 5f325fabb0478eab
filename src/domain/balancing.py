"""Greedy team balancing by rating."""

from __future__ import annotations

from collections.abc import Sequence

from domain.matches import MatchPlayer, Team


def balance_teams(players: Sequence[MatchPlayer]) -> tuple[Team, Team]:
    """
    Split players into two equal-sized teams with similar rating totals.

    Players are taken strongest first (stable, so tied ratings keep their input
    order) and each goes to the team with the lower running total, TeamA on
    equal totals. A team already holding half the players is full.
    """
    if not players:
        raise ValueError("Cannot balance an empty player list")
    if len(players) % 2 != 0:
        raise ValueError(f"Cannot balance an odd number of players ({len(players)})")

    capacity = len(players) // 2
    ordered = sorted(players, key=lambda player: player.rating.value, reverse=True)

    team_a: list[MatchPlayer] = []
    team_b: list[MatchPlayer] = []
    total_a = 0
    total_b = 0
    for player in ordered:
        if len(team_b) >= capacity or (len(team_a) < capacity and total_a <= total_b):
            team_a.append(player)
            total_a += player.rating.value
        else:
            team_b.append(player)
            total_b += player.rating.value

    return Team.of(team_a), Team.of(team_b)


__all__ = ["balance_teams"]
