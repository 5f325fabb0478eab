"""Round-trip tests for the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from db import create_db_engine, create_session_factory, transaction
from domain.balancing import balance_teams
from domain.common import PersistenceError
from domain.matches import Match, MatchPlayer, MatchStatus, TeamDesignation
from domain.players import PlayerAccount
from domain.squads import Squad
from domain.values import Email, MatchId, PlayerId, Rating, SquadId
from models import SquadMembershipRecord
from repositories import (
    SqlMatchRepository,
    SqlPlayerRepository,
    SqlSquadRepository,
    ensure_schema,
)

KICK_OFF = datetime(2026, 4, 7, 18, 30)


def test_ensure_schema_is_idempotent() -> None:
    engine = create_db_engine("sqlite://")
    try:
        created = ensure_schema(engine)
        assert set(created) == {
            "players",
            "squads",
            "squad_admins",
            "squad_memberships",
            "matches",
            "match_players",
            "system_settings",
        }
        assert ensure_schema(engine) == []
        assert "matches" in inspect(engine).get_table_names()
    finally:
        engine.dispose()


def test_player_round_trip(players: SqlPlayerRepository) -> None:
    player = PlayerAccount.register_with_provider(Email("kai@example.com"), "provider-kai").value
    players.add(player)

    by_id = players.get_by_id(player.id)
    assert by_id is not None
    assert by_id.email == Email("kai@example.com")
    assert by_id.provider_id == "provider-kai"
    assert by_id.password_hash is None

    assert players.get_by_email(Email("kai@example.com")).id == player.id
    assert players.get_by_provider_id("provider-kai").id == player.id
    assert players.get_by_email(Email("nobody@example.com")) is None
    assert players.get_by_provider_id("missing") is None
    assert players.get_by_id(PlayerId.new()) is None


def test_duplicate_email_is_a_persistence_error(
    players: SqlPlayerRepository,
    make_player: Callable[[str], PlayerAccount],
) -> None:
    make_player("dup@example.com")
    clash = PlayerAccount.register_with_password(Email("dup@example.com"), "other-hash").value
    with pytest.raises(PersistenceError):
        players.add(clash)


def test_update_missing_rows_raise_persistence_error(
    players: SqlPlayerRepository,
    squads: SqlSquadRepository,
    matches: SqlMatchRepository,
) -> None:
    player = PlayerAccount.register_with_password(Email("ghost@example.com"), "hash").value
    with pytest.raises(PersistenceError):
        players.update(player)
    with pytest.raises(PersistenceError):
        squads.update(Squad.create("Ghosts", player.id).value)
    players_in_match = [MatchPlayer(PlayerId.new(), Rating(1000)), MatchPlayer(PlayerId.new(), Rating(1000))]
    with pytest.raises(PersistenceError):
        matches.update(Match.create(SquadId.new(), KICK_OFF, players_in_match).value)


def test_squad_round_trip_with_admins_and_members(
    squads: SqlSquadRepository,
    players: SqlPlayerRepository,
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> None:
    admin = make_player("admin@example.com")
    member = make_player("member@example.com")
    squad = make_squad("Sunday League", admin, {admin.id: 1000, member.id: 1150})

    loaded = squads.get_by_id(squad.id)
    assert loaded is not None
    assert loaded.name == "Sunday League"
    assert loaded.admin_ids == frozenset({admin.id})
    assert {m.player_id: m.rating for m in loaded.members} == {
        admin.id: Rating(1000),
        member.id: Rating(1150),
    }
    assert players.get_by_id(member.id).membership_for(squad.id).rating == Rating(1150)
    assert squads.get_by_id(SquadId.new()) is None


def test_squad_update_syncs_admins_and_ratings(
    squads: SqlSquadRepository,
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> None:
    admin = make_player("admin@example.com")
    other = make_player("other@example.com")
    squad = make_squad("Squad", admin, {other.id: 1000})

    squad.add_admin(other.id)
    squad.update_member_rating(other.id, Rating(1032))
    squads.update(squad)
    squad.remove_admin(admin.id)
    squads.update(squad)

    loaded = squads.get_by_id(squad.id)
    assert loaded.admin_ids == frozenset({other.id})
    assert loaded.membership_for(other.id).rating == Rating(1032)


def test_removed_membership_is_kept_and_reactivated_on_rejoin(
    session: Session,
    squads: SqlSquadRepository,
    players: SqlPlayerRepository,
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> None:
    admin = make_player("admin@example.com")
    leaver = make_player("leaver@example.com")
    squad = make_squad("Squad", admin, {leaver.id: 1300})

    squad.remove_member(leaver.id)
    squads.update(squad)

    row = session.get(SquadMembershipRecord, (squad.id.value, leaver.id.value))
    assert row is not None
    assert row.removed_at is not None
    assert row.rating == 1300
    assert squads.get_by_id(squad.id).membership_for(leaver.id) is None
    assert players.get_by_id(leaver.id).membership_for(squad.id) is None
    assert squads.list_for_player(leaver.id) == []

    squad.add_member(leaver.id, Rating(1000))
    squads.update(squad)
    assert row.removed_at is None
    assert squads.get_by_id(squad.id).membership_for(leaver.id).rating == Rating(1000)


def test_list_for_player_includes_admin_only_squads(
    squads: SqlSquadRepository,
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> None:
    admin = make_player("admin@example.com")
    member = make_player("member@example.com")
    make_squad("Zebras", admin, {member.id: 1000})
    make_squad("Aardvarks", admin, {admin.id: 1000, member.id: 1000})
    make_squad("Other", member)

    assert [s.name for s in squads.list_for_player(admin.id)] == ["Aardvarks", "Zebras"]
    assert [s.name for s in squads.list_for_player(member.id)] == ["Aardvarks", "Other", "Zebras"]


def _stored_match(
    matches: SqlMatchRepository,
    squad: Squad,
    scheduled_at: datetime = KICK_OFF,
) -> Match:
    participants = [MatchPlayer(m.player_id, m.rating) for m in squad.members]
    match = Match.create(squad.id, scheduled_at, participants, team_size=2).value
    match.assign_teams(*balance_teams(match.players))
    matches.add(match)
    return match


def _four_player_squad(
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> Squad:
    admin = make_player("admin@example.com")
    others = [make_player(f"p{index}@example.com") for index in range(3)]
    ratings = dict(zip([admin.id, *(p.id for p in others)], [1400, 1100, 1000, 1300]))
    return make_squad("Squad", admin, ratings)


def test_match_round_trip_keeps_snapshot_and_teams(
    matches: SqlMatchRepository,
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> None:
    squad = _four_player_squad(make_player, make_squad)
    match = _stored_match(matches, squad)

    loaded = matches.get_by_id(match.id)
    assert loaded is not None
    assert loaded.status is MatchStatus.PENDING
    assert loaded.team_size == 2
    assert loaded.scheduled_at == KICK_OFF
    assert loaded.players == match.players
    assert set(loaded.team_a.player_ids) == set(match.team_a.player_ids)
    assert set(loaded.team_b.player_ids) == set(match.team_b.player_ids)
    assert matches.get_by_id(MatchId.new()) is None


def test_match_update_persists_result(
    matches: SqlMatchRepository,
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> None:
    squad = _four_player_squad(make_player, make_squad)
    match = _stored_match(matches, squad)

    match.record_result(TeamDesignation.TEAM_B, feedback="late winner")
    matches.update(match)

    loaded = matches.get_by_id(match.id)
    assert loaded.status is MatchStatus.COMPLETED
    assert loaded.result.winner is TeamDesignation.TEAM_B
    assert loaded.result.feedback == "late winner"


def test_match_update_tracks_row_version(
    matches: SqlMatchRepository,
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> None:
    squad = _four_player_squad(make_player, make_squad)
    match = _stored_match(matches, squad)
    assert match.version == 1

    earlier = matches.get_by_id(match.id)
    assert earlier.version == 1

    match.record_result(TeamDesignation.TEAM_A)
    matches.update(match)
    assert match.version == 2

    earlier.record_result(TeamDesignation.TEAM_B)
    with pytest.raises(PersistenceError, match="changed by another transaction"):
        matches.update(earlier)
    assert matches.get_by_id(match.id).result.winner is TeamDesignation.TEAM_A


def test_list_for_squad_orders_newest_first(
    matches: SqlMatchRepository,
    make_player: Callable[[str], PlayerAccount],
    make_squad: Callable[..., Squad],
) -> None:
    squad = _four_player_squad(make_player, make_squad)
    older = _stored_match(matches, squad, KICK_OFF)
    newer = _stored_match(matches, squad, KICK_OFF + timedelta(days=7))

    assert [m.id for m in matches.list_for_squad(squad.id)] == [newer.id, older.id]
    assert matches.list_for_squad(SquadId.new()) == []


def test_stale_match_update_raises_persistence_error(tmp_path: Path) -> None:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'stale.db'}")
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with transaction(session_factory) as session:
        admin = PlayerAccount.register_with_password(Email("admin@example.com"), "hash").value
        other = PlayerAccount.register_with_password(Email("other@example.com"), "hash").value
        SqlPlayerRepository(session).add(admin)
        SqlPlayerRepository(session).add(other)
        squad = Squad.create("Squad", admin.id).value
        squad.add_member(admin.id, Rating(1000))
        squad.add_member(other.id, Rating(1000))
        SqlSquadRepository(session).add(squad)
        match = _stored_match(SqlMatchRepository(session), squad)

    first = session_factory()
    second = session_factory()
    try:
        stale = SqlMatchRepository(second).get_by_id(match.id)

        fresh = SqlMatchRepository(first).get_by_id(match.id)
        fresh.record_result(TeamDesignation.TEAM_A)
        SqlMatchRepository(first).update(fresh)
        first.commit()

        stale.record_result(TeamDesignation.TEAM_B)
        with pytest.raises(PersistenceError):
            SqlMatchRepository(second).update(stale)
        second.rollback()
    finally:
        first.close()
        second.close()

    with session_factory() as session:
        assert SqlMatchRepository(session).get_by_id(match.id).result.winner is TeamDesignation.TEAM_A
    engine.dispose()
