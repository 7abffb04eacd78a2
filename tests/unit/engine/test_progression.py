"""Tests for starting runs and descending."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from dungeon_crawler.core.config import DungeonSettings, Settings
from dungeon_crawler.core.exceptions import NotOnStairsError
from dungeon_crawler.engine.dice import derive_level_seed
from dungeon_crawler.engine.generator import DungeonGenerator
from dungeon_crawler.engine.progression import PLAYER_ID, descend, new_game
from dungeon_crawler.models.enums import ItemKind, Visibility


@pytest.fixture
def small_settings(small_dungeon_settings: DungeonSettings) -> Settings:
    """Application settings with a small map."""
    return Settings(dungeon=small_dungeon_settings)


def _walk_to_stairs(state: Any) -> None:
    state.store.move_to(PLAYER_ID, state.grid.stairs, state.grid)


class TestNewGame:
    """Tests for new_game."""

    def test_initial_state(self, small_settings: Settings) -> None:
        """Test a new run starts at depth 1, turn 0, full health."""
        state = new_game(seed=3, settings=small_settings)

        assert state.depth == 1
        assert state.turn == 0
        assert state.game_seed == 3
        assert state.level_seed == derive_level_seed(3, 1)
        assert state.player_id == PLAYER_ID
        assert state.player.stats.hp == state.player.stats.max_hp == 30
        assert not state.game_over

    def test_player_first_then_monsters(self, small_settings: Settings) -> None:
        """Test the player holds id 0 and monsters follow in spawn order."""
        state = new_game(seed=3, settings=small_settings)

        ids = list(state.store.entities)
        assert ids[0] == PLAYER_ID
        assert ids == sorted(ids)
        assert all(state.store.get(i).is_monster for i in ids[1:])

    def test_view_applied(self, small_settings: Settings) -> None:
        """Test the player's surroundings are visible from the start."""
        state = new_game(seed=3, settings=small_settings)

        assert state.grid.visibility_at(state.player.position) is Visibility.VISIBLE
        assert state.player.position in state.grid.visible

    def test_welcome_message(self, small_settings: Settings) -> None:
        """Test the run opens with the welcome line."""
        state = new_game(seed=3, settings=small_settings)

        assert state.messages.recent(1)[0].text.startswith("Welcome stranger!")

    def test_same_seed_same_level(self, small_settings: Settings) -> None:
        """Test runs are reproducible from their seed."""
        first = new_game(seed=11, settings=small_settings)
        second = new_game(seed=11, settings=small_settings)

        assert first.grid == second.grid
        assert first.store == second.store

    def test_random_seed_drawn(self, small_settings: Settings) -> None:
        """Test a seed is chosen when none is given."""
        state = new_game(settings=small_settings)

        assert state.level_seed == derive_level_seed(state.game_seed, 1)

    def test_potions_use_configured_amount(self, small_dungeon_settings: DungeonSettings) -> None:
        """Test generated potions heal by the configured amount."""
        settings = Settings(dungeon=small_dungeon_settings)
        settings.spells.heal_amount = 12

        for seed in range(5):
            state = new_game(seed=seed, settings=settings)
            potions = [i for i in state.store.floor_items if i.kind is ItemKind.POTION]
            assert all(p.amount == 12 for p in potions)


class TestDescend:
    """Tests for descend."""

    def test_requires_stairs(self, make_state: Callable[..., Any], settings: Settings) -> None:
        """Test descending off the stairs is refused."""
        state = make_state(player=(2, 2))

        with pytest.raises(NotOnStairsError):
            descend(state, settings)

        assert state.depth == 1

    def test_new_level(self, small_settings: Settings) -> None:
        """Test the player keeps their character on a fresh level."""
        state = new_game(seed=5, settings=small_settings)
        player = state.player
        player.stats.xp = 120
        player.level = 2
        player.stats.hp = 10
        turn = state.turn
        _walk_to_stairs(state)

        level = descend(state, small_settings)

        assert state.depth == 2
        assert state.level_seed == derive_level_seed(5, 2)
        assert state.grid is level.grid
        assert state.player is player
        assert player.position == level.spawn
        assert player.stats.xp == 120
        assert player.level == 2
        assert player.stats.hp == 25
        assert state.turn == turn

    def test_heal_capped(self, small_settings: Settings) -> None:
        """Test the rest never exceeds maximum hp."""
        state = new_game(seed=5, settings=small_settings)
        _walk_to_stairs(state)

        descend(state, small_settings)

        assert state.player.stats.hp == 30

    def test_messages(self, small_settings: Settings) -> None:
        """Test the rest and descent are narrated."""
        state = new_game(seed=5, settings=small_settings)
        _walk_to_stairs(state)

        descend(state, small_settings)

        texts = [entry.text for entry in state.messages.recent(2)]
        assert texts[0].startswith("You take a moment to rest")
        assert texts[1].startswith("After a rare moment of peace")

    def test_item_ids_unique_across_levels(self, small_settings: Settings) -> None:
        """Test carried items never share ids with the new level's items."""
        state = new_game(seed=5, settings=small_settings)
        carried = {item.id for item in state.store.floor_items}
        for item in list(state.store.floor_items):
            state.player.inventory.append(state.store.take_floor_item(item.id))
        _walk_to_stairs(state)

        descend(state, small_settings)

        fresh = {item.id for item in state.store.floor_items}
        assert carried.isdisjoint(fresh)

    def test_deterministic_by_depth(self, small_settings: Settings) -> None:
        """Test the same run seed rebuilds the same second level."""
        generator = DungeonGenerator(small_settings.dungeon)
        grids = []
        for _ in range(2):
            state = new_game(seed=9, settings=small_settings, generator=generator)
            _walk_to_stairs(state)
            descend(state, small_settings, generator)
            grids.append(state.grid)

        assert grids[0] == grids[1]
