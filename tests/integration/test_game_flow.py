"""Integration tests for whole runs driven through the TurnScheduler.

A simple bot walks toward the stairs, fights whatever stands in its way,
spends level-ups and descends. Every turn the core invariants of the
simulation are checked.
"""

from __future__ import annotations

import pytest

from dungeon_crawler.core.config import DungeonSettings, Settings
from dungeon_crawler.engine.pathfinding import find_path
from dungeon_crawler.engine.turn_manager import TurnResult, TurnScheduler
from dungeon_crawler.models.enums import Direction, LevelUpChoice, Visibility


STEP_DIRECTIONS = {d.delta: d for d in Direction if d is not Direction.WAIT}


@pytest.fixture
def small_settings(small_dungeon_settings: DungeonSettings) -> Settings:
    return Settings(dungeon=small_dungeon_settings)


def _bot_turn(scheduler: TurnScheduler) -> TurnResult:
    state = scheduler.state
    player = state.player

    if state.pending_level_ups:
        return scheduler.choose_level_up(LevelUpChoice.CONSTITUTION)
    if state.on_stairs:
        return scheduler.descend_stairs()
    if state.store.items_at(player.position) and len(player.inventory) < 26:
        return scheduler.get_item()

    path = find_path(state.grid, player.position, state.grid.stairs)
    x, y = player.position
    nx, ny = path[0]
    return scheduler.move(STEP_DIRECTIONS[(nx - x, ny - y)])


def _check_invariants(scheduler: TurnScheduler) -> None:
    state = scheduler.state
    grid = state.grid
    living = [e for e in state.store.entities.values() if e.alive]
    positions = [e.position for e in living]

    assert len(positions) == len(set(positions))
    for entity in state.store.entities.values():
        assert 0 <= entity.stats.hp <= entity.stats.max_hp
        assert grid.is_walkable(entity.position)
        assert entity.alive == (entity.stats.hp > 0)
    for item in state.store.floor_items:
        assert item.position is not None
        assert not item.equipped
    for pos in grid.visible:
        assert grid.visibility_at(pos) is Visibility.VISIBLE
    if not state.game_over:
        assert state.player.position in grid.visible


class TestBotRun:
    """Tests for long scripted runs."""

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_run_keeps_invariants(self, small_settings: Settings, seed: int) -> None:
        """Test invariants hold over a run that descends several levels."""
        scheduler = TurnScheduler.start(seed=seed, settings=small_settings)
        last_turn = scheduler.state.turn

        for _ in range(600):
            if scheduler.game_over or scheduler.state.depth >= 4:
                break
            result = _bot_turn(scheduler)

            assert result.accepted, result.reason
            if result.turn_consumed:
                assert result.turn == last_turn + 1
            else:
                assert result.turn == last_turn
            last_turn = result.turn
            _check_invariants(scheduler)

        state = scheduler.state
        assert state.turn > 0
        assert state.game_over or state.depth >= 2

    def test_same_seed_same_run(self, small_settings: Settings) -> None:
        """Test two runs with the same seed and commands end identically."""
        finals = []
        for _ in range(2):
            scheduler = TurnScheduler.start(seed=77, settings=small_settings)
            for _ in range(150):
                if scheduler.game_over:
                    break
                _bot_turn(scheduler)
            finals.append(scheduler.state.model_dump_json())

        assert finals[0] == finals[1]


class TestMessages:
    """Tests for the player-facing narrative."""

    def test_messages_accompany_results(self, small_settings: Settings) -> None:
        """Test result messages are exactly the ones logged for the command."""
        scheduler = TurnScheduler.start(seed=4, settings=small_settings)
        log = scheduler.state.messages

        for _ in range(40):
            if scheduler.game_over:
                break
            before = log.written
            result = _bot_turn(scheduler)
            assert len(result.messages) == log.written - before

    def test_view_tracks_the_player(self, small_settings: Settings) -> None:
        """Test the view follows the player around."""
        scheduler = TurnScheduler.start(seed=4, settings=small_settings)
        for _ in range(10):
            if scheduler.game_over:
                break
            _bot_turn(scheduler)

        view = scheduler.view()
        player_view = next(e for e in view.entities if e.id == scheduler.state.player_id)

        assert player_view.position == scheduler.state.player.position
        assert view.turn == scheduler.state.turn
        assert len(view.messages) <= 6
