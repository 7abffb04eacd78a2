"""Configuration management for the dungeon crawler simulation core.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime overrides. Every tunable rule of the simulation (map size, sight
radius, spell strength) lives here; fixed defaults come from
``dungeon_crawler.core.constants``.

Example:
    >>> from dungeon_crawler.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.dungeon.map_width
    80

Environment Variables:
    DUNGEON_CRAWLER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    DUNGEON_CRAWLER_JSON_LOGS: Emit JSON log lines
    DUNGEON_CRAWLER_LOG_FILE: Write logs to this file
    DUNGEON_CRAWLER_DUNGEON_MAP_WIDTH: Map width in tiles
    DUNGEON_CRAWLER_GAME_TORCH_RADIUS: Sight radius for player and monsters
    DUNGEON_CRAWLER_SPELL_FIREBALL_DAMAGE: Fireball damage
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dungeon_crawler.core import constants
from dungeon_crawler.core.exceptions import ConfigurationError


DistanceMetric = Literal["euclidean", "chebyshev"]


class DungeonSettings(BaseSettings):
    """Configuration for level generation.

    Attributes:
        map_width: Map width in tiles.
        map_height: Map height in tiles.
        room_min_size: Smallest room edge, walls included.
        room_max_size: Largest room edge, walls included.
        max_rooms: Room placement attempts per generation pass.
        max_generation_retries: Generation passes before giving up.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWLER_DUNGEON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    map_width: int = Field(
        default=constants.MAP_WIDTH,
        ge=10,
        le=500,
        description="Map width in tiles",
    )
    map_height: int = Field(
        default=constants.MAP_HEIGHT,
        ge=10,
        le=500,
        description="Map height in tiles",
    )
    room_min_size: int = Field(
        default=constants.ROOM_MIN_SIZE,
        ge=3,
        description="Smallest room edge length",
    )
    room_max_size: int = Field(
        default=constants.ROOM_MAX_SIZE,
        ge=3,
        description="Largest room edge length",
    )
    max_rooms: int = Field(
        default=constants.MAX_ROOMS,
        ge=constants.MIN_ROOMS,
        le=1000,
        description="Room placement attempts per pass",
    )
    max_generation_retries: int = Field(
        default=constants.MAX_GENERATION_RETRIES,
        ge=1,
        le=50,
        description="Generation passes before failing",
    )

    @model_validator(mode="after")
    def validate_room_bounds(self) -> "DungeonSettings":
        """Ensure room sizes are ordered and fit inside the map.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If the room bounds are inconsistent.
        """
        if self.room_min_size > self.room_max_size:
            raise ConfigurationError(
                f"room_min_size ({self.room_min_size}) must not exceed "
                f"room_max_size ({self.room_max_size})",
                config_key="room_min_size",
            )
        if self.room_max_size >= min(self.map_width, self.map_height):
            raise ConfigurationError(
                f"room_max_size ({self.room_max_size}) must be smaller than "
                f"the map ({self.map_width}x{self.map_height})",
                config_key="room_max_size",
            )
        return self


class GameSettings(BaseSettings):
    """Configuration for turn rules and the player.

    Attributes:
        torch_radius: Sight radius shared by player and monsters.
        distance_metric: Metric used for sight radius, ranges and blasts.
        inventory_capacity: Maximum number of carried items.
        message_log_size: Maximum number of kept log entries.
        player_max_hp: Starting hit points.
        player_power: Starting attack power.
        player_defense: Starting defense.
        level_up_base: XP needed for the first level-up.
        level_up_factor: Extra XP needed per character level.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWLER_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    torch_radius: int = Field(
        default=constants.TORCH_RADIUS,
        ge=1,
        le=100,
        description="Sight radius",
    )
    distance_metric: DistanceMetric = Field(
        default="euclidean",
        description="Distance metric for sight, range and blast radius",
    )
    inventory_capacity: int = Field(
        default=constants.INVENTORY_CAPACITY,
        ge=1,
        le=100,
        description="Maximum carried items",
    )
    message_log_size: int = Field(
        default=constants.MESSAGE_LOG_SIZE,
        ge=1,
        description="Maximum kept log entries",
    )
    player_max_hp: int = Field(default=constants.PLAYER_START_HP, ge=1)
    player_power: int = Field(default=constants.PLAYER_START_POWER, ge=0)
    player_defense: int = Field(default=constants.PLAYER_START_DEFENSE, ge=0)
    level_up_base: int = Field(default=constants.LEVEL_UP_BASE, ge=1)
    level_up_factor: int = Field(default=constants.LEVEL_UP_FACTOR, ge=0)


class SpellSettings(BaseSettings):
    """Configuration for potions and scrolls.

    Attributes:
        heal_amount: Hit points restored by a healing potion.
        lightning_damage: Damage dealt by a lightning bolt.
        lightning_range: Maximum distance to a lightning target.
        confusion_turns: Turns of confusion applied by a scroll.
        confusion_range: Maximum distance to a confusion target.
        fireball_damage: Damage dealt to everything in the blast.
        fireball_radius: Blast radius around the target tile.
        fireball_range: Maximum distance to the target tile.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWLER_SPELL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    heal_amount: int = Field(default=constants.HEAL_AMOUNT, ge=1)
    lightning_damage: int = Field(default=constants.LIGHTNING_DAMAGE, ge=0)
    lightning_range: int = Field(default=constants.LIGHTNING_RANGE, ge=1)
    confusion_turns: int = Field(default=constants.CONFUSION_DURATION, ge=1)
    confusion_range: int = Field(default=constants.CONFUSION_RANGE, ge=1)
    fireball_damage: int = Field(default=constants.FIREBALL_DAMAGE, ge=0)
    fireball_radius: int = Field(default=constants.FIREBALL_RADIUS, ge=0)
    fireball_range: int = Field(default=constants.FIREBALL_RANGE, ge=1)


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Emit JSON log lines instead of console output.
        log_file: Append log lines to this file instead of stderr.
        dungeon: Level generation settings.
        game: Turn rule and player settings.
        spells: Potion and scroll settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUNGEON_CRAWLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Dungeon Crawler",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )
    log_file: Path | None = Field(
        default=None,
        description="Log file path; stderr when unset",
    )

    dungeon: DungeonSettings = Field(default_factory=DungeonSettings)
    game: GameSettings = Field(default_factory=GameSettings)
    spells: SpellSettings = Field(default_factory=SpellSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Mostly useful in tests or after environment variables changed.
    """
    get_settings.cache_clear()


__all__ = [
    "DistanceMetric",
    "DungeonSettings",
    "GameSettings",
    "SpellSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
