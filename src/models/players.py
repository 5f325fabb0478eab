"""players table model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class PlayerRecord(Base):
    """One player account, authenticated by password hash or provider id."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint(
            "(password_hash IS NULL) <> (provider_id IS NULL)",
            name="ck_players_single_credential",
        ),
        Index("uq_players_email", "email", unique=True),
        Index("uq_players_provider_id", "provider_id", unique=True),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    provider_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
