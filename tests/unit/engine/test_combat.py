"""Tests for melee combat, direct damage and experience."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from dungeon_crawler.core.config import GameSettings
from dungeon_crawler.engine.combat import (
    apply_damage,
    award_xp,
    compute_damage,
    resolve_attack,
    xp_to_next_level,
)
from dungeon_crawler.models.enums import AttackOutcome, MessageCategory, Species


@pytest.fixture
def game_settings() -> GameSettings:
    return GameSettings()


class TestComputeDamage:
    """Tests for the damage formula."""

    def test_power_minus_defense(self, make_state: Callable[..., Any]) -> None:
        """Test power 5 against defense 2 deals 3."""
        state = make_state(monsters=[(Species.TROLL, (3, 2))])
        troll = state.store.get(1)
        troll.stats.defense = 2

        assert compute_damage(state.player, troll) == 3

    def test_floored_at_zero(self, make_state: Callable[..., Any]) -> None:
        """Test weak attackers deal no damage instead of healing."""
        state = make_state(monsters=[(Species.ORC, (3, 2))])
        orc = state.store.get(1)
        orc.stats.power = 1
        state.player.stats.defense = 4

        assert compute_damage(orc, state.player) == 0

    def test_equipment_counts(self, make_state: Callable[..., Any]) -> None:
        """Test equipped gear changes the damage."""
        state = make_state(monsters=[(Species.ORC, (3, 2))], items=[("sword", None), ("shield", None)])
        for item in state.player.inventory:
            item.equipped = True
        orc = state.store.get(1)

        assert compute_damage(state.player, orc) == 8
        assert compute_damage(orc, state.player) == 0


class TestResolveAttack:
    """Tests for resolve_attack."""

    def test_hit(self, make_state: Callable[..., Any], game_settings: GameSettings) -> None:
        """Test a hit subtracts damage and logs it."""
        state = make_state(monsters=[(Species.TROLL, (3, 2))])
        state.store.get(1).stats.defense = 2

        result = resolve_attack(state, 0, 1, game_settings)

        assert result.outcome is AttackOutcome.HIT
        assert result.damage == 3
        assert state.store.get(1).stats.hp == 13
        last = state.messages.recent(1)[0]
        assert last.text == "Player attacks troll for 3 hit points."
        assert last.category is MessageCategory.COMBAT

    def test_blocked(self, make_state: Callable[..., Any], game_settings: GameSettings) -> None:
        """Test a fully absorbed attack is reported and changes nothing."""
        state = make_state(monsters=[(Species.ORC, (3, 2))])
        state.store.get(1).stats.power = 1
        state.player.stats.defense = 4

        result = resolve_attack(state, 1, 0, game_settings)

        assert result.outcome is AttackOutcome.BLOCKED
        assert result.damage == 0
        assert state.player.stats.hp == 30
        assert state.messages.recent(1)[0].text == "Orc attacks player but it has no effect!"

    def test_kill_awards_xp(self, make_state: Callable[..., Any], game_settings: GameSettings) -> None:
        """Test killing a monster marks it dead and pays out experience."""
        state = make_state(monsters=[(Species.ORC, (3, 2))])
        state.store.get(1).stats.hp = 4

        result = resolve_attack(state, 0, 1, game_settings)

        assert result.killed
        assert result.damage == 4
        assert result.xp_awarded == 35
        assert state.player.stats.xp == 35
        assert not state.store.get(1).alive
        assert state.grid.tile((3, 2)).corpse == "remains of orc"
        assert state.messages.recent(1)[0].text == "Orc is dead! You gain 35 experience points."

    def test_player_death_ends_game(
        self, make_state: Callable[..., Any], game_settings: GameSettings
    ) -> None:
        """Test the player reaching zero hp sets game over."""
        state = make_state(monsters=[(Species.TROLL, (3, 2))])
        state.player.stats.hp = 1

        result = resolve_attack(state, 1, 0, game_settings)

        assert result.killed
        assert state.player.stats.hp == 0
        assert not state.player.alive
        assert state.game_over
        assert state.messages.recent(1)[0].text == "You died!"


class TestApplyDamage:
    """Tests for direct damage."""

    def test_hp_never_negative(self, make_state: Callable[..., Any], game_settings: GameSettings) -> None:
        """Test overkill damage clamps hp at zero."""
        state = make_state(monsters=[(Species.ORC, (3, 2))])

        result = apply_damage(state, 1, 100, source_id=0, settings=game_settings)

        assert result.damage == 10
        assert state.store.get(1).stats.hp == 0

    def test_dead_target_ignored(
        self, make_state: Callable[..., Any], game_settings: GameSettings
    ) -> None:
        """Test damage to a corpse does nothing."""
        state = make_state(monsters=[(Species.ORC, (3, 2))])
        apply_damage(state, 1, 100, source_id=0, settings=game_settings)

        again = apply_damage(state, 1, 5, source_id=0, settings=game_settings)

        assert again.damage == 0
        assert not again.killed
        assert state.player.stats.xp == 35

    def test_no_xp_without_player(
        self, make_state: Callable[..., Any], game_settings: GameSettings
    ) -> None:
        """Test kills not made by the player award nothing."""
        state = make_state(monsters=[(Species.ORC, (3, 2)), (Species.TROLL, (4, 2))])

        result = apply_damage(state, 1, 50, source_id=2, settings=game_settings)

        assert result.killed
        assert result.xp_awarded == 0
        assert state.player.stats.xp == 0
        assert state.messages.recent(1)[0].text == "Orc is dead!"


class TestExperience:
    """Tests for experience and level-ups."""

    def test_threshold(self, game_settings: GameSettings) -> None:
        """Test the classic level-up curve."""
        assert xp_to_next_level(1, game_settings) == 350
        assert xp_to_next_level(2, game_settings) == 500

    def test_below_threshold(self, make_state: Callable[..., Any], game_settings: GameSettings) -> None:
        """Test small awards only accumulate."""
        state = make_state()

        assert award_xp(state, 100, game_settings) == 0
        assert state.player.stats.xp == 100
        assert state.pending_level_ups == 0

    def test_single_level_up(self, make_state: Callable[..., Any], game_settings: GameSettings) -> None:
        """Test crossing the threshold queues a level-up and keeps the rest."""
        state = make_state()

        assert award_xp(state, 400, game_settings) == 1
        assert state.player.level == 2
        assert state.player.stats.xp == 50
        assert state.pending_level_ups == 1
        assert state.messages.recent(1)[0].category is MessageCategory.LEVEL

    def test_multiple_level_ups(self, make_state: Callable[..., Any], game_settings: GameSettings) -> None:
        """Test one large award can queue several level-ups."""
        state = make_state()

        assert award_xp(state, 1000, game_settings) == 2
        assert state.player.level == 3
        assert state.player.stats.xp == 150
        assert state.pending_level_ups == 2
