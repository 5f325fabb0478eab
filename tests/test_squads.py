"""Unit tests for the squad aggregate."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.common import ErrorCode
from domain.squads import Squad
from domain.values import PlayerId, Rating, SquadId


def test_create_seeds_creator_as_sole_admin_with_no_members() -> None:
    creator = PlayerId.new()
    squad = Squad.create("  Tuesday Five-a-side ", creator).value
    assert squad.name == "Tuesday Five-a-side"
    assert squad.admin_ids == frozenset({creator})
    assert squad.members == ()
    assert not squad.is_member(creator)


@pytest.mark.parametrize("name", ["", "   ", None])
def test_create_rejects_blank_name(name: str | None) -> None:
    result = Squad.create(name, PlayerId.new())  # type: ignore[arg-type]
    assert result.error.code is ErrorCode.INVALID_NAME


def test_admin_set_can_never_become_empty() -> None:
    creator = PlayerId.new()
    other = PlayerId.new()
    squad = Squad.create("Squad", creator).value

    assert squad.remove_admin(creator).error.code is ErrorCode.LAST_ADMIN
    assert squad.add_admin(other).is_success
    assert squad.add_admin(other).error.code is ErrorCode.ALREADY_ADMIN
    assert squad.remove_admin(creator).is_success
    assert squad.admin_ids == frozenset({other})
    assert squad.remove_admin(creator).error.code is ErrorCode.NOT_ADMIN
    assert squad.remove_admin(other).error.code is ErrorCode.LAST_ADMIN


def test_membership_is_unique_per_player() -> None:
    squad = Squad.create("Squad", PlayerId.new()).value
    player = PlayerId.new()
    assert squad.add_member(player, Rating(1000)).is_success
    assert squad.add_member(player, Rating(1000)).error.code is ErrorCode.ALREADY_MEMBER
    assert len(squad.members) == 1


def test_remove_member_returns_last_rating_and_keeps_admin_status() -> None:
    admin = PlayerId.new()
    squad = Squad.create("Squad", admin).value
    squad.add_member(admin, Rating(1000))
    squad.update_member_rating(admin, Rating(1040))

    removed = squad.remove_member(admin)
    assert removed.value.rating == Rating(1040)
    assert not squad.is_member(admin)
    assert squad.is_admin(admin)
    assert squad.remove_member(admin).error.code is ErrorCode.PLAYER_NOT_IN_SQUAD


def test_update_member_rating_requires_membership() -> None:
    squad = Squad.create("Squad", PlayerId.new()).value
    result = squad.update_member_rating(PlayerId.new(), Rating(1100))
    assert result.error.code is ErrorCode.PLAYER_NOT_IN_SQUAD


def test_constructor_rejects_missing_admins() -> None:
    with pytest.raises(ValueError):
        Squad(squad_id=SquadId.new(), name="Squad", created_at=datetime(2026, 1, 1), admin_ids=[])
