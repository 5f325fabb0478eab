"""Unit tests for the player account aggregate."""

from __future__ import annotations

from datetime import datetime

import pytest

from domain.common import ErrorCode
from domain.players import PlayerAccount, SquadMembership
from domain.values import Email, PlayerId, Rating, SquadId


def _player() -> PlayerAccount:
    return PlayerAccount.register_with_password(Email("ada@example.com"), "hashed").value


def test_register_with_password_sets_single_credential() -> None:
    player = _player()
    assert player.uses_password
    assert not player.uses_provider
    assert player.memberships == ()


def test_register_with_provider_sets_single_credential() -> None:
    player = PlayerAccount.register_with_provider(Email("ada@example.com"), " provider-123 ").value
    assert player.provider_id == "provider-123"
    assert player.password_hash is None


def test_register_rejects_empty_credentials() -> None:
    assert PlayerAccount.register_with_password(Email("a@b.io"), " ").error.code is ErrorCode.INVALID_PASSWORD
    assert PlayerAccount.register_with_provider(Email("a@b.io"), "").error.code is ErrorCode.INVALID_EXTERNAL_TOKEN


def test_constructor_rejects_both_or_neither_credential() -> None:
    common = {
        "player_id": PlayerId.new(),
        "email": Email("a@b.io"),
        "created_at": datetime(2026, 1, 1),
    }
    with pytest.raises(ValueError):
        PlayerAccount(password_hash="hash", provider_id="prov", **common)
    with pytest.raises(ValueError):
        PlayerAccount(password_hash=None, provider_id=None, **common)


def test_join_squad_adds_membership_once() -> None:
    player = _player()
    squad_id = SquadId.new()

    joined = player.join_squad(squad_id, Rating(1000))
    assert joined.is_success
    assert player.membership_for(squad_id) == joined.value

    again = player.join_squad(squad_id, Rating(1200))
    assert again.error.code is ErrorCode.ALREADY_MEMBER
    assert len(player.memberships) == 1
    assert player.membership_for(squad_id).rating == Rating(1000)


def test_rehydrate_rejects_foreign_memberships() -> None:
    player_id = PlayerId.new()
    foreign = SquadMembership(
        player_id=PlayerId.new(),
        squad_id=SquadId.new(),
        rating=Rating(1000),
        joined_at=datetime(2026, 1, 1),
    )
    with pytest.raises(ValueError):
        PlayerAccount.rehydrate(
            player_id=player_id,
            email=Email("a@b.io"),
            password_hash="hash",
            provider_id=None,
            created_at=datetime(2026, 1, 1),
            memberships=[foreign],
        )
