"""Dungeon Crawler - turn-based roguelike simulation core.

A rendering-free engine for a classic dungeon crawl: procedural levels
with guaranteed connectivity, symmetric field of view, pathfinding
monsters, deterministic melee, targeted scrolls and a strictly
sequential turn scheduler.

ARCHITECTURE:
- The TurnScheduler owns the GameState; nothing else keeps references
- Randomness comes from a seeded DiceRoller, never from global state
- Rendering and input live outside; they read LevelView and submit commands

Example:
    >>> from dungeon_crawler import TurnScheduler, Direction
    >>>
    >>> scheduler = TurnScheduler.start(seed=2024)
    >>> scheduler.move(Direction.NORTH).accepted in (True, False)
    True
    >>> view = scheduler.view()

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas for grid, entities and game state.
    engine: Generation, sight, AI, combat, effects and turn scheduling.
"""

from __future__ import annotations

# Core
from dungeon_crawler.core.config import Settings, get_settings
from dungeon_crawler.core.exceptions import ActionRejectedError, DungeonCrawlerError
from dungeon_crawler.core.logging import configure_logging, get_logger

# Models
from dungeon_crawler.models import Direction, GameState, Grid, LevelUpChoice

# Engine
from dungeon_crawler.engine import (
    DungeonGenerator,
    LevelView,
    TurnResult,
    TurnScheduler,
    compute_fov,
)


__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "DungeonCrawlerError",
    "ActionRejectedError",
    "configure_logging",
    "get_logger",
    # Models
    "Direction",
    "GameState",
    "Grid",
    "LevelUpChoice",
    # Engine
    "DungeonGenerator",
    "LevelView",
    "TurnResult",
    "TurnScheduler",
    "compute_fov",
]
