"""Key/value store for game settings with per-key fallback."""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select

from domain.common import ErrorCode, PersistenceError, Result, utcnow
from domain.settings import (
    DEFAULT_ELO_RATING_KEY,
    DEFAULT_TEAM_SIZE_KEY,
    K_FACTOR_KEY,
    SETTING_RANGES,
    GameSettings,
    validate_setting,
)
from models import SystemSetting
from repositories.base import SessionRepository, storage_errors


class SettingsRepository(SessionRepository):
    def stored_values(self) -> dict[str, str]:
        """Raw stored values keyed by setting name."""
        with storage_errors("read system settings"):
            rows = self.session.execute(select(SystemSetting).order_by(SystemSetting.key)).scalars()
            return {row.key: row.value for row in rows}

    def load(self, defaults: GameSettings | None = None) -> GameSettings:
        """
        Effective settings: stored overrides where valid, otherwise ``defaults``.

        A missing, non-integer or out-of-range value falls back to the default
        for that key alone.
        """
        defaults = defaults or GameSettings()
        stored = self.stored_values()
        values: dict[str, int] = {}
        for key in SETTING_RANGES:
            fallback = defaults.value_for(key)
            raw = stored.get(key)
            if raw is None:
                values[key] = fallback
                continue
            try:
                parsed = int(raw.strip())
            except ValueError:
                logger.warning("Setting {}={!r} is not an integer; using {}", key, raw, fallback)
                values[key] = fallback
                continue
            problem = validate_setting(key, parsed)
            if problem is not None:
                logger.warning("Setting {}={!r} rejected ({}); using {}", key, raw, problem, fallback)
                values[key] = fallback
                continue
            values[key] = parsed

        return GameSettings(
            default_rating=values[DEFAULT_ELO_RATING_KEY],
            k_factor=values[K_FACTOR_KEY],
            default_team_size=values[DEFAULT_TEAM_SIZE_KEY],
        )

    def store(self, key: str, value: int) -> Result[None]:
        problem = validate_setting(key, value)
        if problem is not None:
            return Result.fail(ErrorCode.INVALID_CONFIGURATION, problem)
        try:
            with storage_errors("store system setting"):
                row = self.session.get(SystemSetting, key)
                if row is None:
                    self.session.add(SystemSetting(key=key, value=str(value), updated_at=utcnow()))
                else:
                    row.value = str(value)
                    row.updated_at = utcnow()
                self.session.flush()
        except PersistenceError as exc:
            logger.error("Could not store setting {}: {}", key, exc)
            return Result.fail(ErrorCode.PERSISTENCE_FAILURE, str(exc))
        logger.info("Setting {} set to {}", key, value)
        return Result.success()


__all__ = ["SettingsRepository"]
