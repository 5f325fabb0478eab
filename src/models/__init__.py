"""ORM models."""

from models.base import Base
from models.matches import MatchPlayerRecord, MatchRecord
from models.players import PlayerRecord
from models.settings import SystemSetting
from models.squads import SquadAdminRecord, SquadMembershipRecord, SquadRecord

__all__ = [
    "Base",
    "MatchPlayerRecord",
    "MatchRecord",
    "PlayerRecord",
    "SquadAdminRecord",
    "SquadMembershipRecord",
    "SquadRecord",
    "SystemSetting",
]
