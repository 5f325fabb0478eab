"""Shared command-handler scaffold."""

from __future__ import annotations

from typing import Generic, TypeVar

from loguru import logger

from domain.common import ErrorCode, PersistenceError, Result

CommandT = TypeVar("CommandT")
ValueT = TypeVar("ValueT")


class CommandHandler(Generic[CommandT, ValueT]):
    """Run one command and turn storage failures into failed results."""

    operation = "command"

    def handle(self, command: CommandT) -> Result[ValueT]:
        try:
            return self._execute(command)
        except PersistenceError as exc:
            logger.error("{} failed in storage: {}", self.operation, exc)
            return Result.fail(
                ErrorCode.PERSISTENCE_FAILURE,
                f"{self.operation} could not be completed because storage failed.",
            )

    def _execute(self, command: CommandT) -> Result[ValueT]:
        raise NotImplementedError


def rejected(operation: str, result: Result) -> Result:
    """Log a business rejection at warning level and pass the result through."""
    logger.warning("{} rejected: {}", operation, result.error)
    return result


__all__ = ["CommandHandler", "rejected"]
