"""Game-wide tuning values and their TOML loader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.values import DEFAULT_RATING, MAX_RATING, MIN_RATING

DEFAULT_ELO_RATING_KEY = "default_elo_rating"
K_FACTOR_KEY = "k_factor"
DEFAULT_TEAM_SIZE_KEY = "default_team_size"

DEFAULT_K_FACTOR = 32
DEFAULT_TEAM_SIZE = 5

# key -> (min, max), both inclusive
SETTING_RANGES: dict[str, tuple[int, int]] = {
    DEFAULT_ELO_RATING_KEY: (MIN_RATING, MAX_RATING),
    K_FACTOR_KEY: (1, 100),
    DEFAULT_TEAM_SIZE_KEY: (1, 50),
}


@dataclass(frozen=True)
class GameSettings:
    default_rating: int = DEFAULT_RATING
    k_factor: int = DEFAULT_K_FACTOR
    default_team_size: int = DEFAULT_TEAM_SIZE

    def value_for(self, key: str) -> int:
        if key == DEFAULT_ELO_RATING_KEY:
            return self.default_rating
        if key == K_FACTOR_KEY:
            return self.k_factor
        if key == DEFAULT_TEAM_SIZE_KEY:
            return self.default_team_size
        raise KeyError(f"Unknown setting: {key}")

    def as_config_json(self) -> dict[str, int]:
        return {key: self.value_for(key) for key in SETTING_RANGES}


def validate_setting(key: str, value: Any) -> str | None:
    """Return a problem description, or None when the value is acceptable."""
    if key not in SETTING_RANGES:
        return f"Unknown setting '{key}'. Known settings: {', '.join(sorted(SETTING_RANGES))}"
    if isinstance(value, bool) or not isinstance(value, int):
        return f"{key} must be an integer"
    minimum, maximum = SETTING_RANGES[key]
    if value < minimum or value > maximum:
        return f"{key} must be between {minimum} and {maximum}"
    return None


def load_game_settings(file_path: Path) -> GameSettings:
    """Load and validate game settings from a TOML file."""
    if not file_path.exists():
        raise FileNotFoundError(f"Settings file not found: {file_path}")
    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return _parse_game_settings(raw, file_path)


def _parse_game_settings(raw: dict[str, Any], file_path: Path) -> GameSettings:
    ratings_raw = raw.get("ratings", {})
    matches_raw = raw.get("matches", {})

    settings = GameSettings(
        default_rating=_read_int(ratings_raw, "default_rating", DEFAULT_RATING, file_path, "ratings"),
        k_factor=_read_int(ratings_raw, "k_factor", DEFAULT_K_FACTOR, file_path, "ratings"),
        default_team_size=_read_int(
            matches_raw, "default_team_size", DEFAULT_TEAM_SIZE, file_path, "matches"
        ),
    )
    _validate_settings(file_path=file_path, settings=settings)
    return settings


def _read_int(section: dict[str, Any], key: str, default: int, file_path: Path, section_name: str) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{file_path}: [{section_name}].{key} must be an integer")
    return value


def _validate_settings(*, file_path: Path, settings: GameSettings) -> None:
    if settings.default_rating < MIN_RATING or settings.default_rating > MAX_RATING:
        raise ValueError(
            f"{file_path}: [ratings].default_rating must be between {MIN_RATING} and {MAX_RATING}"
        )
    if settings.k_factor < 1 or settings.k_factor > 100:
        raise ValueError(f"{file_path}: [ratings].k_factor must be between 1 and 100")
    if settings.default_team_size < 1 or settings.default_team_size > 50:
        raise ValueError(f"{file_path}: [matches].default_team_size must be between 1 and 50")


__all__ = [
    "DEFAULT_ELO_RATING_KEY",
    "DEFAULT_K_FACTOR",
    "DEFAULT_TEAM_SIZE",
    "DEFAULT_TEAM_SIZE_KEY",
    "GameSettings",
    "K_FACTOR_KEY",
    "SETTING_RANGES",
    "load_game_settings",
    "validate_setting",
]
