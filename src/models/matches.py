"""matches and match_players table models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base


class MatchRecord(Base):
    """One scheduled match; ``version`` guards concurrent result recording."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("team_size >= 1", name="ck_matches_team_size"),
        CheckConstraint(
            "(status = 'completed') = (winner IS NOT NULL)",
            name="ck_matches_completed_has_winner",
        ),
        Index("idx_matches_squad_scheduled", "squad_id", "scheduled_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    squad_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("squads.id", ondelete="CASCADE"),
        nullable=False,
    )
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    team_size: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        Enum("pending", "completed", name="match_status", native_enum=False),
        nullable=False,
    )
    winner: Mapped[str | None] = mapped_column(
        Enum("team_a", "team_b", "draw", name="match_winner", native_enum=False),
        nullable=True,
    )
    feedback: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    recorded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    players: Mapped[list[MatchPlayerRecord]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan",
        order_by="MatchPlayerRecord.position",
    )

    __mapper_args__ = {"version_id_col": version}


class MatchPlayerRecord(Base):
    """A participant with the rating they had when the match was created."""

    __tablename__ = "match_players"
    __table_args__ = (
        CheckConstraint(
            "rating_snapshot >= 400 AND rating_snapshot <= 2400",
            name="ck_match_players_rating_snapshot",
        ),
        Index("idx_match_players_player", "player_id"),
    )

    match_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("matches.id", ondelete="CASCADE"),
        primary_key=True,
    )
    player_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("players.id"),
        primary_key=True,
    )
    rating_snapshot: Mapped[int] = mapped_column(Integer, nullable=False)
    team: Mapped[str | None] = mapped_column(
        Enum("team_a", "team_b", name="match_team", native_enum=False),
        nullable=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    match: Mapped[MatchRecord] = relationship(back_populates="players")
