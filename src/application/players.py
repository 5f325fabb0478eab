"""Account registration and sign-in commands."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from application.base import CommandHandler, rejected
from domain.common import ErrorCode, Result
from domain.players import PlayerAccount
from domain.protocol import IdentityVerifier, PasswordHasher, PlayerRepository
from domain.values import Email, PlayerId

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class RegisterPlayer:
    email: str
    password: str


@dataclass(frozen=True)
class AuthenticatePlayer:
    email: str
    password: str


@dataclass(frozen=True)
class AuthenticateWithProvider:
    token: str


@dataclass(frozen=True)
class AuthenticatedPlayer:
    player_id: PlayerId
    email: Email
    is_new_player: bool = False


def _invalid_credentials() -> Result[AuthenticatedPlayer]:
    return Result.fail(ErrorCode.INVALID_CREDENTIALS, "Invalid credentials.")


class RegisterPlayerHandler(CommandHandler[RegisterPlayer, PlayerId]):
    operation = "RegisterPlayer"

    def __init__(self, players: PlayerRepository, hasher: PasswordHasher) -> None:
        self.players = players
        self.hasher = hasher

    def _execute(self, command: RegisterPlayer) -> Result[PlayerId]:
        parsed = Email.parse(command.email)
        if parsed.is_failure:
            return rejected(self.operation, parsed)
        email = parsed.value

        if self.players.get_by_email(email) is not None:
            return rejected(
                self.operation,
                Result.fail(ErrorCode.DUPLICATE_EMAIL, "Email already exists."),
            )

        if not command.password or not command.password.strip():
            return Result.fail(ErrorCode.INVALID_PASSWORD, "Password cannot be empty.")
        if len(command.password) < MIN_PASSWORD_LENGTH:
            return Result.fail(
                ErrorCode.INVALID_PASSWORD,
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.",
            )

        created = PlayerAccount.register_with_password(email, self.hasher.hash(command.password))
        if created.is_failure:
            return created
        player = created.value
        self.players.add(player)
        logger.info("Registered player {} ({})", player.id, email)
        return Result.success(player.id)


class AuthenticatePlayerHandler(CommandHandler[AuthenticatePlayer, AuthenticatedPlayer]):
    """Password sign-in; every mismatch reports the same invalid-credentials error."""

    operation = "AuthenticatePlayer"

    def __init__(self, players: PlayerRepository, hasher: PasswordHasher) -> None:
        self.players = players
        self.hasher = hasher

    def _execute(self, command: AuthenticatePlayer) -> Result[AuthenticatedPlayer]:
        parsed = Email.parse(command.email)
        if parsed.is_failure:
            return _invalid_credentials()

        player = self.players.get_by_email(parsed.value)
        if player is None or player.password_hash is None:
            return _invalid_credentials()
        if not command.password or not command.password.strip():
            return _invalid_credentials()
        if not self.hasher.verify(player.password_hash, command.password):
            logger.warning("Failed password sign-in for player {}", player.id)
            return _invalid_credentials()

        logger.info("Player {} signed in", player.id)
        return Result.success(AuthenticatedPlayer(player_id=player.id, email=player.email))


class AuthenticateWithProviderHandler(CommandHandler[AuthenticateWithProvider, AuthenticatedPlayer]):
    """
    Sign in through an external identity provider.

    The first successful sign-in creates a provider-backed account unless the
    email already belongs to a password account.
    """

    operation = "AuthenticateWithProvider"

    def __init__(self, players: PlayerRepository, verifier: IdentityVerifier) -> None:
        self.players = players
        self.verifier = verifier

    def _execute(self, command: AuthenticateWithProvider) -> Result[AuthenticatedPlayer]:
        if not command.token or not command.token.strip():
            return Result.fail(ErrorCode.INVALID_EXTERNAL_TOKEN, "Invalid external token.")

        identity = self.verifier.verify(command.token)
        if identity is None:
            return rejected(
                self.operation,
                Result.fail(ErrorCode.INVALID_EXTERNAL_TOKEN, "Invalid external token."),
            )

        parsed = Email.parse(identity.email)
        if parsed.is_failure:
            return Result.fail(ErrorCode.INVALID_EMAIL, "Invalid email format from identity provider.")
        email = parsed.value

        existing = self.players.get_by_provider_id(identity.provider_id)
        if existing is not None:
            logger.info("Player {} signed in with provider", existing.id)
            return Result.success(AuthenticatedPlayer(player_id=existing.id, email=existing.email))

        if self.players.get_by_email(email) is not None:
            return rejected(
                self.operation,
                Result.fail(
                    ErrorCode.DUPLICATE_EMAIL,
                    "Email already registered with password authentication.",
                ),
            )

        created = PlayerAccount.register_with_provider(email, identity.provider_id)
        if created.is_failure:
            return created
        player = created.value
        self.players.add(player)
        logger.info("Created provider-backed player {} ({})", player.id, email)
        return Result.success(
            AuthenticatedPlayer(player_id=player.id, email=player.email, is_new_player=True)
        )


__all__ = [
    "MIN_PASSWORD_LENGTH",
    "AuthenticatePlayer",
    "AuthenticatePlayerHandler",
    "AuthenticateWithProvider",
    "AuthenticateWithProviderHandler",
    "AuthenticatedPlayer",
    "RegisterPlayer",
    "RegisterPlayerHandler",
]
