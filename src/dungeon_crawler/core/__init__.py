"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DungeonCrawlerError: Base exception for all application errors.
        ActionRejectedError: Recoverable, turn-preserving action failures.
        LevelGenerationError: Fatal level generation failure.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dungeon_crawler.core.config import (
    DistanceMetric,
    DungeonSettings,
    GameSettings,
    Settings,
    SpellSettings,
    clear_settings_cache,
    get_settings,
)
from dungeon_crawler.core.exceptions import (
    ActionRejectedError,
    BlockedError,
    ConfigurationError,
    DungeonCrawlerError,
    GameEngineError,
    GameOverError,
    InvalidGameStateError,
    InventoryFullError,
    ItemNotUsableError,
    LevelGenerationError,
    NoEligibleTargetError,
    NoLevelUpPendingError,
    NoSuchItemError,
    NotOnStairsError,
    OutOfBoundsError,
    TargetingCancelledError,
    ValidationError,
)
from dungeon_crawler.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "DungeonCrawlerError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "GameOverError",
    "LevelGenerationError",
    # Rejected actions
    "ActionRejectedError",
    "OutOfBoundsError",
    "BlockedError",
    "InventoryFullError",
    "NoSuchItemError",
    "NoEligibleTargetError",
    "TargetingCancelledError",
    "ItemNotUsableError",
    "NotOnStairsError",
    "NoLevelUpPendingError",
    # Configuration
    "Settings",
    "DistanceMetric",
    "DungeonSettings",
    "GameSettings",
    "SpellSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
