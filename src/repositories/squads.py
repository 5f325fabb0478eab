"""SQLAlchemy persistence for squads, their admins and memberships."""

from __future__ import annotations

from loguru import logger
from sqlalchemy import or_, select

from domain.common import PersistenceError, utcnow
from domain.players import SquadMembership
from domain.squads import Squad
from domain.values import PlayerId, Rating, SquadId
from models import SquadAdminRecord, SquadMembershipRecord, SquadRecord
from repositories.base import SessionRepository, storage_errors


class SqlSquadRepository(SessionRepository):
    def get_by_id(self, squad_id: SquadId) -> Squad | None:
        with storage_errors("load squad"):
            record = self.session.get(SquadRecord, squad_id.value)
            return None if record is None else _to_domain(record)

    def list_for_player(self, player_id: PlayerId) -> list[Squad]:
        member_of = select(SquadMembershipRecord.squad_id).where(
            SquadMembershipRecord.player_id == player_id.value,
            SquadMembershipRecord.removed_at.is_(None),
        )
        admin_of = select(SquadAdminRecord.squad_id).where(SquadAdminRecord.player_id == player_id.value)
        statement = (
            select(SquadRecord)
            .where(or_(SquadRecord.id.in_(member_of), SquadRecord.id.in_(admin_of)))
            .order_by(SquadRecord.name, SquadRecord.created_at)
        )
        with storage_errors("list squads for player"):
            return [_to_domain(record) for record in self.session.execute(statement).scalars()]

    def add(self, squad: Squad) -> None:
        with storage_errors("add squad"):
            record = SquadRecord(id=squad.id.value, name=squad.name, created_at=squad.created_at)
            self.session.add(record)
            _sync_admins(record, squad)
            _sync_memberships(record, squad)
            self.session.flush()
        logger.debug("Stored squad {} ({})", squad.id, squad.name)

    def update(self, squad: Squad) -> None:
        with storage_errors("update squad"):
            record = self.session.get(SquadRecord, squad.id.value)
            if record is None:
                raise PersistenceError(f"Squad {squad.id} does not exist")
            record.name = squad.name
            _sync_admins(record, squad)
            _sync_memberships(record, squad)
            self.session.flush()
        logger.debug("Updated squad {}", squad.id)


def _sync_admins(record: SquadRecord, squad: Squad) -> None:
    wanted = {admin_id.value for admin_id in squad.admin_ids}
    for admin in list(record.admins):
        if admin.player_id not in wanted:
            record.admins.remove(admin)
    present = {admin.player_id for admin in record.admins}
    now = utcnow()
    for player_uuid in sorted(wanted - present):
        record.admins.append(SquadAdminRecord(player_id=player_uuid, added_at=now))


def _sync_memberships(record: SquadRecord, squad: Squad) -> None:
    rows = {row.player_id: row for row in record.memberships}
    active = {membership.player_id.value: membership for membership in squad.members}

    for player_uuid, membership in active.items():
        row = rows.get(player_uuid)
        if row is None:
            record.memberships.append(
                SquadMembershipRecord(
                    player_id=player_uuid,
                    rating=membership.rating.value,
                    joined_at=membership.joined_at,
                )
            )
            continue
        if row.removed_at is not None:
            row.removed_at = None
            row.joined_at = membership.joined_at
        row.rating = membership.rating.value

    now = utcnow()
    for player_uuid, row in rows.items():
        if player_uuid not in active and row.removed_at is None:
            row.removed_at = now


def _to_domain(record: SquadRecord) -> Squad:
    return Squad.rehydrate(
        squad_id=SquadId(record.id),
        name=record.name,
        created_at=record.created_at,
        admin_ids=[PlayerId(admin.player_id) for admin in record.admins],
        members=[
            SquadMembership(
                player_id=PlayerId(row.player_id),
                squad_id=SquadId(row.squad_id),
                rating=Rating(row.rating),
                joined_at=row.joined_at,
            )
            for row in record.memberships
            if row.removed_at is None
        ],
    )


__all__ = ["SqlSquadRepository"]
