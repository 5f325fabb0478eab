"""Database repositories."""

from repositories.base import ensure_schema
from repositories.matches import SqlMatchRepository
from repositories.players import SqlPlayerRepository
from repositories.settings import SettingsRepository
from repositories.squads import SqlSquadRepository

__all__ = [
    "SettingsRepository",
    "SqlMatchRepository",
    "SqlPlayerRepository",
    "SqlSquadRepository",
    "ensure_schema",
]
