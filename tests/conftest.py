"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the dungeon crawler test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dungeon_crawler.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog defaults and drop bound context after each test."""
    import structlog

    from dungeon_crawler.core.logging import clear_context

    yield
    clear_context()
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep stray DUNGEON_CRAWLER_* variables and .env files out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("DUNGEON_CRAWLER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "DUNGEON_CRAWLER_DEBUG": "true",
        "DUNGEON_CRAWLER_LOG_LEVEL": "DEBUG",
        "DUNGEON_CRAWLER_GAME_TORCH_RADIUS": "6",
        "DUNGEON_CRAWLER_DUNGEON_MAP_WIDTH": "60",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings() -> Any:
    """Default application settings.

    Returns:
        Settings instance with every default.
    """
    from dungeon_crawler.core.config import Settings

    return Settings()


@pytest.fixture
def small_dungeon_settings() -> Any:
    """Dungeon settings for a small map that still fits several rooms.

    Returns:
        DungeonSettings instance.
    """
    from dungeon_crawler.core.config import DungeonSettings

    return DungeonSettings(
        map_width=40,
        map_height=30,
        room_min_size=4,
        room_max_size=8,
        max_rooms=20,
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> Any:
    """Create a seeded DiceRoller for reproducible tests.

    Returns:
        DiceRoller instance with fixed seed.
    """
    from dungeon_crawler.engine.dice import DiceRoller

    return DiceRoller(seed=42)


# =============================================================================
# Hand-built Levels
# =============================================================================


@pytest.fixture
def grid_from_ascii() -> Callable[[list[str]], Any]:
    """Build grids from ASCII art.

    ``#`` is wall, ``.`` is floor and ``>`` is the stairway down. Rows
    must all have the same length.

    Returns:
        Factory taking a list of rows and returning a Grid.
    """
    from dungeon_crawler.models.enums import TileKind
    from dungeon_crawler.models.grid import Grid

    symbols = {"#": TileKind.WALL, ".": TileKind.FLOOR, ">": TileKind.STAIR_DOWN}

    def build(rows: list[str]) -> Grid:
        grid = Grid.filled(len(rows[0]), len(rows))
        for y, row in enumerate(rows):
            for x, symbol in enumerate(row):
                grid.carve((x, y), symbols[symbol])
        return grid

    return build


OPEN_ROOM = [
    "####################",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#.................>#",
    "####################",
]


@pytest.fixture
def make_state(grid_from_ascii: Callable[[list[str]], Any]) -> Callable[..., Any]:
    """Build a GameState with a player and monsters on a hand-drawn map.

    The player always gets id 0; monsters get ids 1, 2, ... in the order
    given, which is also their turn order.

    Returns:
        Factory ``make_state(player=(x, y), monsters=[(species, (x, y))],
        rows=OPEN_ROOM, items=[(template_key, (x, y) | None)])``. Items
        with a None position go into the player's inventory.
    """
    from dungeon_crawler.models.entities import ITEM_TEMPLATES, create_monster, create_player
    from dungeon_crawler.models.game_state import GameState
    from dungeon_crawler.models.store import EntityStore

    def build(
        player: tuple[int, int] = (2, 2),
        monsters: list[tuple[Any, tuple[int, int]]] | None = None,
        rows: list[str] | None = None,
        items: list[tuple[str, tuple[int, int] | None]] | None = None,
    ) -> GameState:
        grid = grid_from_ascii(rows or OPEN_ROOM)
        store = EntityStore()
        hero = create_player(store.allocate_entity_id(), player, max_hp=30, power=5, defense=2)
        store.spawn(hero)
        for species, pos in monsters or []:
            store.spawn(create_monster(store.allocate_entity_id(), species, pos))
        for key, pos in items or []:
            item = ITEM_TEMPLATES[key].create(store.allocate_item_id())
            if pos is None:
                hero.inventory.append(item)
            else:
                store.add_floor_item(item, pos)
        return GameState(grid=grid, store=store, player_id=hero.id)

    return build
