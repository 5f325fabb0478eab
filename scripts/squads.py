#!/usr/bin/env python3
"""Register players and administer squads from the command line."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from sqlalchemy.orm import Session

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from application import (
    AddSquadAdmin,
    AddSquadAdminHandler,
    CreateSquad,
    CreateSquadHandler,
    JoinSquad,
    JoinSquadHandler,
    RegisterPlayer,
    RegisterPlayerHandler,
    RemoveSquadAdmin,
    RemoveSquadAdminHandler,
    RemoveSquadMember,
    RemoveSquadMemberHandler,
    WerkzeugPasswordHasher,
)
from application.queries import (
    GetSquadStandings,
    GetSquadStandingsHandler,
    ListSquadsForPlayer,
    ListSquadsForPlayerHandler,
)
from db import DEFAULT_DB_URL, create_db_engine, create_session_factory, transaction
from domain.common import Result
from domain.settings import GameSettings, load_game_settings
from domain.values import Email, PlayerId, SquadId
from repositories import SettingsRepository, SqlPlayerRepository, SqlSquadRepository

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Player registration and squad administration commands.",
)

DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        help="Database URL. Defaults to the local kickabout postgres instance.",
    ),
]
SettingsFileOption = Annotated[
    Path | None,
    typer.Option(
        "--settings-file",
        help="Optional TOML file supplying defaults for settings not stored in the database.",
    ),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")]
SquadOption = Annotated[str, typer.Option("--squad", help="Squad id.")]
AsOption = Annotated[str, typer.Option("--as", help="Email of the player issuing the command.")]
TargetOption = Annotated[str, typer.Option("--player", help="Email of the player acted upon.")]


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _session_factory(db_url: str):
    return create_session_factory(create_db_engine(db_url))


def _squad_id(raw: str) -> SquadId:
    try:
        return SquadId.parse(raw)
    except ValueError as exc:
        raise typer.BadParameter(f"'{raw}' is not a valid squad id", param_hint="--squad") from exc


def _player_id(session: Session, email: str, param_hint: str) -> PlayerId:
    parsed = Email.parse(email)
    if parsed.is_failure:
        raise typer.BadParameter(parsed.error.message, param_hint=param_hint)
    player = SqlPlayerRepository(session).get_by_email(parsed.value)
    if player is None:
        raise typer.BadParameter(f"no player registered as {parsed.value}", param_hint=param_hint)
    return player.id


def _unwrap(result: Result):
    if result.is_failure:
        typer.echo(f"error: {result.error}", err=True)
        raise typer.Exit(code=1)
    return result.value


@app.command()
def register(
    email: Annotated[str, typer.Argument(help="Email address of the new player.")],
    password: Annotated[
        str,
        typer.Option("--password", prompt=True, hide_input=True, confirmation_prompt=True),
    ],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Register a password-authenticated player."""
    _configure_logging(verbose)
    with transaction(_session_factory(db_url)) as session:
        handler = RegisterPlayerHandler(SqlPlayerRepository(session), WerkzeugPasswordHasher())
        player_id = _unwrap(handler.handle(RegisterPlayer(email=email, password=password)))
    typer.echo(f"registered player {player_id}")


@app.command()
def create_squad(
    name: Annotated[str, typer.Argument(help="Squad name.")],
    as_player: AsOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Create a squad administered by the issuing player."""
    _configure_logging(verbose)
    with transaction(_session_factory(db_url)) as session:
        creator_id = _player_id(session, as_player, "--as")
        handler = CreateSquadHandler(SqlSquadRepository(session), SqlPlayerRepository(session))
        squad_id = _unwrap(handler.handle(CreateSquad(name=name, creator_id=creator_id)))
    typer.echo(f"created squad {squad_id}")


@app.command()
def join(
    squad: SquadOption,
    as_player: AsOption,
    settings_file: SettingsFileOption = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Join a squad at the configured default rating."""
    _configure_logging(verbose)
    defaults = load_game_settings(settings_file) if settings_file is not None else GameSettings()
    squad_id = _squad_id(squad)
    with transaction(_session_factory(db_url)) as session:
        player_id = _player_id(session, as_player, "--as")
        handler = JoinSquadHandler(
            SqlSquadRepository(session),
            SqlPlayerRepository(session),
            SettingsRepository(session).load(defaults),
        )
        membership = _unwrap(handler.handle(JoinSquad(player_id=player_id, squad_id=squad_id)))
    typer.echo(f"joined squad {squad_id} at rating {membership.rating}")


@app.command()
def add_admin(
    squad: SquadOption,
    as_player: AsOption,
    target: TargetOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Grant admin rights on a squad to another player."""
    _configure_logging(verbose)
    squad_id = _squad_id(squad)
    with transaction(_session_factory(db_url)) as session:
        command = AddSquadAdmin(
            squad_id=squad_id,
            requesting_player_id=_player_id(session, as_player, "--as"),
            target_player_id=_player_id(session, target, "--player"),
        )
        _unwrap(AddSquadAdminHandler(SqlSquadRepository(session), SqlPlayerRepository(session)).handle(command))
    typer.echo(f"{target} is now an admin of {squad_id}")


@app.command()
def remove_admin(
    squad: SquadOption,
    as_player: AsOption,
    target: TargetOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Revoke admin rights; the last admin cannot be removed."""
    _configure_logging(verbose)
    squad_id = _squad_id(squad)
    with transaction(_session_factory(db_url)) as session:
        command = RemoveSquadAdmin(
            squad_id=squad_id,
            requesting_player_id=_player_id(session, as_player, "--as"),
            target_player_id=_player_id(session, target, "--player"),
        )
        _unwrap(RemoveSquadAdminHandler(SqlSquadRepository(session)).handle(command))
    typer.echo(f"{target} is no longer an admin of {squad_id}")


@app.command()
def remove_member(
    squad: SquadOption,
    as_player: AsOption,
    target: TargetOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Remove a member from a squad."""
    _configure_logging(verbose)
    squad_id = _squad_id(squad)
    with transaction(_session_factory(db_url)) as session:
        command = RemoveSquadMember(
            squad_id=squad_id,
            requesting_player_id=_player_id(session, as_player, "--as"),
            target_player_id=_player_id(session, target, "--player"),
        )
        membership = _unwrap(RemoveSquadMemberHandler(SqlSquadRepository(session)).handle(command))
    typer.echo(f"removed {target} from {squad_id} (last rating {membership.rating})")


@app.command()
def list_squads(
    as_player: AsOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """List the squads a player belongs to or administers."""
    _configure_logging(verbose)
    with transaction(_session_factory(db_url)) as session:
        player_id = _player_id(session, as_player, "--as")
        handler = ListSquadsForPlayerHandler(SqlSquadRepository(session), SqlPlayerRepository(session))
        summaries = _unwrap(handler.handle(ListSquadsForPlayer(player_id=player_id)))

    if not summaries:
        typer.echo("no squads")
        return
    for summary in summaries:
        rating = "-" if summary.rating is None else str(summary.rating)
        role = "admin" if summary.is_admin else "member"
        typer.echo(
            f"{summary.squad_id}  {summary.name:<24} rating={rating:<5} "
            f"role={role:<6} members={summary.member_count}"
        )


@app.command()
def ratings(
    squad: SquadOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Print a squad's members ordered by current rating."""
    _configure_logging(verbose)
    squad_id = _squad_id(squad)
    with transaction(_session_factory(db_url)) as session:
        standings = _unwrap(GetSquadStandingsHandler(SqlSquadRepository(session)).handle(GetSquadStandings(squad_id)))
        players = SqlPlayerRepository(session)
        rows = []
        for rank, membership in enumerate(standings, start=1):
            player = players.get_by_id(membership.player_id)
            email = player.email.value if player is not None else str(membership.player_id)
            rows.append((rank, email, membership))

    if not rows:
        typer.echo("squad has no members")
        return
    for rank, email, membership in rows:
        typer.echo(f"{rank:>3}. {email:<32} {membership.rating.value:>5}  joined {membership.joined_at:%Y-%m-%d}")


if __name__ == "__main__":
    app()
