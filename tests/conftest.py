"""Shared fixtures: an in-memory SQLite database and wired repositories."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from application.security import WerkzeugPasswordHasher
from db import create_db_engine, create_session_factory
from domain.players import PlayerAccount
from domain.settings import GameSettings
from domain.squads import Squad
from domain.values import Email, PlayerId, Rating
from repositories import (
    SettingsRepository,
    SqlMatchRepository,
    SqlPlayerRepository,
    SqlSquadRepository,
    ensure_schema,
)


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_db_engine("sqlite://")
    ensure_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        yield session


@pytest.fixture
def players(session: Session) -> SqlPlayerRepository:
    return SqlPlayerRepository(session)


@pytest.fixture
def squads(session: Session) -> SqlSquadRepository:
    return SqlSquadRepository(session)


@pytest.fixture
def matches(session: Session) -> SqlMatchRepository:
    return SqlMatchRepository(session)


@pytest.fixture
def settings_repository(session: Session) -> SettingsRepository:
    return SettingsRepository(session)


@pytest.fixture
def game_settings() -> GameSettings:
    return GameSettings()


@pytest.fixture
def hasher() -> WerkzeugPasswordHasher:
    # Low iteration count keeps the suite fast.
    return WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


@pytest.fixture
def make_player(players: SqlPlayerRepository) -> Callable[[str], PlayerAccount]:
    def _make(email: str) -> PlayerAccount:
        player = PlayerAccount.register_with_password(Email(email), "pbkdf2:sha256:1000$salt$hash").value
        players.add(player)
        return player

    return _make


@pytest.fixture
def make_squad(
    squads: SqlSquadRepository,
    players: SqlPlayerRepository,
) -> Callable[..., Squad]:
    """Store a squad owned by ``admin`` whose members join at the given ratings."""

    def _make(name: str, admin: PlayerAccount, members: dict[PlayerId, int] | None = None) -> Squad:
        squad = Squad.create(name, admin.id).value
        for player_id, rating in (members or {}).items():
            squad.add_member(player_id, Rating(rating))
        squads.add(squad)
        for membership in squad.members:
            account = players.get_by_id(membership.player_id)
            assert account is not None
            account.join_squad(squad.id, membership.rating, joined_at=membership.joined_at)
            players.update(account)
        return squad

    return _make
