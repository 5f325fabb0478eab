"""SQLAlchemy persistence for player accounts."""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select

from domain.common import PersistenceError
from domain.players import PlayerAccount, SquadMembership
from domain.values import Email, PlayerId, Rating, SquadId
from models import PlayerRecord, SquadMembershipRecord
from repositories.base import SessionRepository, storage_errors


class SqlPlayerRepository(SessionRepository):
    def get_by_id(self, player_id: PlayerId) -> PlayerAccount | None:
        with storage_errors("load player"):
            record = self.session.get(PlayerRecord, player_id.value)
            return None if record is None else self._to_domain(record)

    def get_by_email(self, email: Email) -> PlayerAccount | None:
        with storage_errors("load player by email"):
            record = self.session.execute(
                select(PlayerRecord).where(PlayerRecord.email == email.value)
            ).scalar_one_or_none()
            return None if record is None else self._to_domain(record)

    def get_by_provider_id(self, provider_id: str) -> PlayerAccount | None:
        with storage_errors("load player by provider id"):
            record = self.session.execute(
                select(PlayerRecord).where(PlayerRecord.provider_id == provider_id)
            ).scalar_one_or_none()
            return None if record is None else self._to_domain(record)

    def add(self, player: PlayerAccount) -> None:
        with storage_errors("add player"):
            self.session.add(
                PlayerRecord(
                    id=player.id.value,
                    email=player.email.value,
                    password_hash=player.password_hash,
                    provider_id=player.provider_id,
                    created_at=player.created_at,
                )
            )
            self.session.flush()
            self._write_memberships(player)
            self.session.flush()
        logger.debug("Stored player {}", player.id)

    def update(self, player: PlayerAccount) -> None:
        """Write account fields and any memberships not yet stored.

        Ratings on existing memberships belong to the squad and are left alone.
        """
        with storage_errors("update player"):
            record = self.session.get(PlayerRecord, player.id.value)
            if record is None:
                raise PersistenceError(f"Player {player.id} does not exist")
            record.email = player.email.value
            record.password_hash = player.password_hash
            record.provider_id = player.provider_id
            self._write_memberships(player)
            self.session.flush()
        logger.debug("Updated player {}", player.id)

    def _write_memberships(self, player: PlayerAccount) -> None:
        for membership in player.memberships:
            row = self.session.get(
                SquadMembershipRecord,
                (membership.squad_id.value, membership.player_id.value),
            )
            if row is None:
                self.session.add(
                    SquadMembershipRecord(
                        squad_id=membership.squad_id.value,
                        player_id=membership.player_id.value,
                        rating=membership.rating.value,
                        joined_at=membership.joined_at,
                    )
                )
            elif row.removed_at is not None:
                row.rating = membership.rating.value
                row.joined_at = membership.joined_at
                row.removed_at = None

    def _to_domain(self, record: PlayerRecord) -> PlayerAccount:
        rows = self.session.execute(
            select(SquadMembershipRecord)
            .where(
                SquadMembershipRecord.player_id == record.id,
                SquadMembershipRecord.removed_at.is_(None),
            )
            .order_by(SquadMembershipRecord.joined_at)
        ).scalars()
        return PlayerAccount.rehydrate(
            player_id=PlayerId(record.id),
            email=Email(record.email),
            password_hash=record.password_hash,
            provider_id=record.provider_id,
            created_at=record.created_at,
            memberships=[
                SquadMembership(
                    player_id=PlayerId(row.player_id),
                    squad_id=SquadId(row.squad_id),
                    rating=Rating(row.rating),
                    joined_at=row.joined_at,
                )
                for row in rows
            ],
        )


__all__ = ["SqlPlayerRepository"]
