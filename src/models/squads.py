"""squads, squad_admins and squad_memberships table models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base


class SquadRecord(Base):
    __tablename__ = "squads"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    admins: Mapped[list[SquadAdminRecord]] = relationship(
        back_populates="squad",
        cascade="all, delete-orphan",
        order_by="SquadAdminRecord.added_at",
    )
    memberships: Mapped[list[SquadMembershipRecord]] = relationship(
        back_populates="squad",
        cascade="all, delete-orphan",
        order_by="SquadMembershipRecord.joined_at",
    )


class SquadAdminRecord(Base):
    """Admin relationship between a squad and a player."""

    __tablename__ = "squad_admins"
    __table_args__ = (Index("idx_squad_admins_player", "player_id"),)

    squad_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("squads.id", ondelete="CASCADE"),
        primary_key=True,
    )
    player_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("players.id", ondelete="CASCADE"),
        primary_key=True,
    )
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    squad: Mapped[SquadRecord] = relationship(back_populates="admins")


class SquadMembershipRecord(Base):
    """A player's rating in one squad.

    Removal sets ``removed_at`` instead of deleting, so the last rating is
    retained; rejoining clears it again.
    """

    __tablename__ = "squad_memberships"
    __table_args__ = (
        CheckConstraint("rating >= 400 AND rating <= 2400", name="ck_squad_memberships_rating"),
        Index("idx_squad_memberships_player", "player_id"),
    )

    squad_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("squads.id", ondelete="CASCADE"),
        primary_key=True,
    )
    player_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("players.id", ondelete="CASCADE"),
        primary_key=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    removed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    squad: Mapped[SquadRecord] = relationship(back_populates="memberships")
