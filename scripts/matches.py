#!/usr/bin/env python3
"""Schedule matches, record results and inspect match history."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from sqlalchemy.orm import Session

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from application import CreateMatch, CreateMatchHandler, RecordMatchResult, RecordMatchResultHandler
from application.queries import GetMatch, GetMatchHandler, ListMatchesForSquad, ListMatchesForSquadHandler
from db import DEFAULT_DB_URL, create_db_engine, create_session_factory, transaction
from domain.common import Result
from domain.matches import Team, TeamDesignation
from domain.settings import GameSettings, load_game_settings
from domain.values import Email, MatchId, PlayerId, SquadId
from repositories import SettingsRepository, SqlMatchRepository, SqlPlayerRepository, SqlSquadRepository

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Match scheduling and result commands.",
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
AsOption = Annotated[str, typer.Option("--as", help="Email of the squad admin issuing the command.")]
MatchOption = Annotated[str, typer.Option("--match", help="Match id.")]


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _game_settings(session: Session, settings_file: Path | None) -> GameSettings:
    defaults = load_game_settings(settings_file) if settings_file is not None else GameSettings()
    return SettingsRepository(session).load(defaults)


def _player_id(session: Session, email: str, param_hint: str) -> PlayerId:
    parsed = Email.parse(email)
    if parsed.is_failure:
        raise typer.BadParameter(parsed.error.message, param_hint=param_hint)
    player = SqlPlayerRepository(session).get_by_email(parsed.value)
    if player is None:
        raise typer.BadParameter(f"no player registered as {parsed.value}", param_hint=param_hint)
    return player.id


def _parse_id(factory, raw: str, param_hint: str):
    try:
        return factory.parse(raw)
    except ValueError as exc:
        raise typer.BadParameter(f"'{raw}' is not a valid id", param_hint=param_hint) from exc


def _unwrap(result: Result):
    if result.is_failure:
        typer.echo(f"error: {result.error}", err=True)
        raise typer.Exit(code=1)
    return result.value


def _echo_team(label: str, team: Team | None, emails: dict[PlayerId, str]) -> None:
    if team is None:
        typer.echo(f"{label}: not assigned")
        return
    typer.echo(f"{label}: total={team.total_rating} avg={team.average_rating:.1f}")
    for player in team.players:
        typer.echo(f"    {emails.get(player.player_id, str(player.player_id)):<32} {player.rating.value:>5}")


@app.command()
def create(
    squad: Annotated[str, typer.Option("--squad", help="Squad id.")],
    as_player: AsOption,
    players: Annotated[
        list[str],
        typer.Option("--player", "-p", help="Participant email; repeat for every player."),
    ],
    scheduled_at: Annotated[
        datetime,
        typer.Option("--at", formats=["%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M"], help="Kick-off time."),
    ],
    team_size: Annotated[
        int | None,
        typer.Option("--team-size", help="Players per side; defaults to the configured team size."),
    ] = None,
    settings_file: SettingsFileOption = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Create a match and split the listed players into balanced teams."""
    _configure_logging(verbose)
    if team_size is not None and team_size <= 0:
        raise typer.BadParameter("--team-size must be greater than 0")
    squad_id = _parse_id(SquadId, squad, "--squad")

    session_factory = create_session_factory(create_db_engine(db_url))
    with transaction(session_factory) as session:
        participant_ids = [_player_id(session, email, "--player") for email in players]
        emails = dict(zip(participant_ids, players))
        command = CreateMatch(
            squad_id=squad_id,
            scheduled_at=scheduled_at,
            player_ids=participant_ids,
            requesting_player_id=_player_id(session, as_player, "--as"),
            team_size=team_size,
        )
        handler = CreateMatchHandler(
            SqlSquadRepository(session),
            SqlMatchRepository(session),
            _game_settings(session, settings_file),
        )
        match = _unwrap(handler.handle(command))

    typer.echo(f"created match {match.id} at {match.scheduled_at:%Y-%m-%d %H:%M}")
    _echo_team("team A", match.team_a, emails)
    _echo_team("team B", match.team_b, emails)


@app.command()
def record_result(
    match: MatchOption,
    as_player: AsOption,
    winner: Annotated[TeamDesignation, typer.Option("--winner", help="Winning side or draw.")],
    feedback: Annotated[str | None, typer.Option("--feedback", help="Optional match notes.")] = None,
    settings_file: SettingsFileOption = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Record the outcome of a match and update squad ratings."""
    _configure_logging(verbose)
    match_id = _parse_id(MatchId, match, "--match")

    session_factory = create_session_factory(create_db_engine(db_url))
    with transaction(session_factory) as session:
        command = RecordMatchResult(
            match_id=match_id,
            winner=winner,
            requesting_player_id=_player_id(session, as_player, "--as"),
            feedback=feedback,
        )
        handler = RecordMatchResultHandler(
            SqlSquadRepository(session),
            SqlMatchRepository(session),
            _game_settings(session, settings_file),
        )
        changes = _unwrap(handler.handle(command))

    typer.echo(f"recorded {winner.value} for match {match_id}")
    for change in changes:
        typer.echo(
            f"  {change.player_id} {change.team.value:<6} "
            f"{change.previous_rating.value} -> {change.new_rating.value} ({change.delta:+d})"
        )


@app.command(name="list")
def list_matches(
    squad: Annotated[str, typer.Option("--squad", help="Squad id.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """List a squad's matches, most recent first."""
    _configure_logging(verbose)
    squad_id = _parse_id(SquadId, squad, "--squad")

    session_factory = create_session_factory(create_db_engine(db_url))
    with transaction(session_factory) as session:
        handler = ListMatchesForSquadHandler(SqlSquadRepository(session), SqlMatchRepository(session))
        summaries = _unwrap(handler.handle(ListMatchesForSquad(squad_id=squad_id)))

    if not summaries:
        typer.echo("no matches")
        return
    for summary in summaries:
        winner = summary.winner.value if summary.winner is not None else "-"
        typer.echo(
            f"{summary.match_id}  {summary.scheduled_at:%Y-%m-%d %H:%M}  "
            f"{summary.status.value:<9} players={summary.player_count:<3} winner={winner}"
        )


@app.command()
def show(
    match: MatchOption,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Show teams, rating snapshots and the result of one match."""
    _configure_logging(verbose)
    match_id = _parse_id(MatchId, match, "--match")

    session_factory = create_session_factory(create_db_engine(db_url))
    with transaction(session_factory) as session:
        found = _unwrap(GetMatchHandler(SqlMatchRepository(session)).handle(GetMatch(match_id=match_id)))
        players = SqlPlayerRepository(session)
        emails: dict[PlayerId, str] = {}
        for participant in found.players:
            account = players.get_by_id(participant.player_id)
            if account is not None:
                emails[participant.player_id] = account.email.value

    typer.echo(f"match {found.id} ({found.status.value}) at {found.scheduled_at:%Y-%m-%d %H:%M}")
    _echo_team("team A", found.team_a, emails)
    _echo_team("team B", found.team_b, emails)
    if found.result is not None:
        typer.echo(f"winner: {found.result.winner.value} (recorded {found.result.recorded_at:%Y-%m-%d %H:%M})")
        if found.result.feedback:
            typer.echo(f"feedback: {found.result.feedback}")


if __name__ == "__main__":
    app()
