#!/usr/bin/env python3
"""Create the schema and manage stored game settings."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory, transaction
from domain.settings import SETTING_RANGES, GameSettings, load_game_settings
from repositories import SettingsRepository, ensure_schema

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Database schema and game settings commands.",
)

DbUrlOption = Annotated[
    str,
    typer.Option(
        "--db-url",
        help="Database URL. Defaults to the local kickabout postgres instance.",
    ),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")]


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


@app.command()
def init(db_url: DbUrlOption = DEFAULT_DB_URL, verbose: VerboseOption = False) -> None:
    """Create all tables that do not exist yet."""
    _configure_logging(verbose)
    created = ensure_schema(create_db_engine(db_url))
    if created:
        typer.echo(f"created tables: {', '.join(created)}")
    else:
        typer.echo("schema already up to date")


@app.command()
def set_setting(
    key: Annotated[
        str,
        typer.Argument(help=f"Setting name ({', '.join(SETTING_RANGES)})."),
    ],
    value: Annotated[int, typer.Argument(help="New integer value.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Store one game setting override."""
    _configure_logging(verbose)
    if key not in SETTING_RANGES:
        raise typer.BadParameter(
            f"unknown setting '{key}'; expected one of: {', '.join(SETTING_RANGES)}",
            param_hint="KEY",
        )

    session_factory = create_session_factory(create_db_engine(db_url))
    with transaction(session_factory) as session:
        result = SettingsRepository(session).store(key, value)
        if result.is_failure:
            typer.echo(f"error: {result.error}", err=True)
            raise typer.Exit(code=1)
    typer.echo(f"{key} = {value}")


@app.command()
def show_settings(
    settings_file: Annotated[
        Path | None,
        typer.Option(
            "--settings-file",
            help="Optional TOML file supplying defaults for settings not stored in the database.",
        ),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    verbose: VerboseOption = False,
) -> None:
    """Print stored and effective values for every game setting."""
    _configure_logging(verbose)
    defaults = load_game_settings(settings_file) if settings_file is not None else GameSettings()

    session_factory = create_session_factory(create_db_engine(db_url))
    with transaction(session_factory) as session:
        repository = SettingsRepository(session)
        stored = repository.stored_values()
        effective = repository.load(defaults)

    for key, (minimum, maximum) in SETTING_RANGES.items():
        typer.echo(
            f"{key:<20} effective={effective.value_for(key):<6} "
            f"stored={stored.get(key, '-'):<6} range=[{minimum}, {maximum}]"
        )


if __name__ == "__main__":
    app()
