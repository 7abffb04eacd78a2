"""Melee combat, direct damage and experience.

Damage is deterministic: attack power minus defense, never below zero.
There are no misses; an attack whose damage is fully absorbed is reported
as BLOCKED. Reaching zero hp applies the death transition through the
EntityStore, and a monster killed by the player awards its experience.
"""

from __future__ import annotations

from dataclasses import dataclass

from dungeon_crawler.core.config import GameSettings, get_settings
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.models.entities import Entity
from dungeon_crawler.models.enums import AttackOutcome, MessageCategory
from dungeon_crawler.models.game_state import GameState


logger = get_logger(__name__)


@dataclass(frozen=True)
class DamageResult:
    """Outcome of damage applied to one entity.

    Attributes:
        target_id: Entity that took the damage.
        damage: Hit points actually lost.
        killed: Whether this damage caused the death transition.
        xp_awarded: Experience granted to the player for the kill.
    """

    target_id: int
    damage: int
    killed: bool = False
    xp_awarded: int = 0


@dataclass(frozen=True)
class AttackResult:
    """Outcome of one melee attack."""

    attacker_id: int
    defender_id: int
    damage: int
    outcome: AttackOutcome
    killed: bool = False
    xp_awarded: int = 0


def compute_damage(attacker: Entity, defender: Entity) -> int:
    """Effective power minus effective defense, floored at zero."""
    return max(0, attacker.attack_power - defender.defense_value)


def resolve_attack(
    state: GameState,
    attacker_id: int,
    defender_id: int,
    settings: GameSettings | None = None,
) -> AttackResult:
    """Resolve a melee attack.

    Args:
        state: Current game state.
        attacker_id: Attacking entity.
        defender_id: Defending entity.
        settings: Game rules; defaults to the application settings.

    Returns:
        The attack outcome.
    """
    attacker = state.store.get(attacker_id)
    defender = state.store.get(defender_id)
    damage = compute_damage(attacker, defender)

    if damage == 0:
        state.log(
            f"{attacker.name.capitalize()} attacks {defender.name} but it has no effect!",
            MessageCategory.COMBAT,
        )
        logger.debug("Attack blocked", attacker_id=attacker_id, defender_id=defender_id)
        return AttackResult(
            attacker_id=attacker_id,
            defender_id=defender_id,
            damage=0,
            outcome=AttackOutcome.BLOCKED,
        )

    state.log(
        f"{attacker.name.capitalize()} attacks {defender.name} for {damage} hit points.",
        MessageCategory.COMBAT,
    )
    result = apply_damage(state, defender_id, damage, source_id=attacker_id, settings=settings)
    logger.debug(
        "Attack hit",
        attacker_id=attacker_id,
        defender_id=defender_id,
        damage=result.damage,
        killed=result.killed,
    )
    return AttackResult(
        attacker_id=attacker_id,
        defender_id=defender_id,
        damage=result.damage,
        outcome=AttackOutcome.HIT,
        killed=result.killed,
        xp_awarded=result.xp_awarded,
    )


def apply_damage(
    state: GameState,
    target_id: int,
    amount: int,
    source_id: int | None = None,
    settings: GameSettings | None = None,
) -> DamageResult:
    """Apply damage that bypasses defense.

    Hit points clamp at zero. Damage to an already dead entity is ignored.

    Args:
        state: Current game state.
        target_id: Entity to damage.
        amount: Damage before clamping; negative amounts count as zero.
        source_id: Entity responsible, used for experience.
        settings: Game rules; defaults to the application settings.

    Returns:
        What happened to the target.
    """
    target = state.store.get(target_id)
    if not target.alive:
        return DamageResult(target_id=target_id, damage=0)

    lost = target.stats.take_damage(amount)
    if target.stats.hp > 0:
        return DamageResult(target_id=target_id, damage=lost)

    xp = _kill(state, target, source_id, settings or get_settings().game)
    return DamageResult(target_id=target_id, damage=lost, killed=True, xp_awarded=xp)


def _kill(state: GameState, target: Entity, source_id: int | None, settings: GameSettings) -> int:
    state.store.mark_dead(target.id, state.grid)

    if target.is_player:
        state.game_over = True
        state.log("You died!", MessageCategory.DEATH)
        logger.info("Player died", entity_id=target.id, depth=state.depth, turn=state.turn)
        return 0

    logger.info("Monster died", entity_id=target.id, name=target.name, killer_id=source_id)
    if source_id != state.player_id or state.game_over:
        state.log(f"{target.name.capitalize()} is dead!", MessageCategory.DEATH)
        return 0

    xp = target.stats.xp
    state.log(
        f"{target.name.capitalize()} is dead! You gain {xp} experience points.",
        MessageCategory.DEATH,
    )
    award_xp(state, xp, settings)
    return xp


def xp_to_next_level(level: int, settings: GameSettings) -> int:
    """Experience needed to advance from ``level``."""
    return settings.level_up_base + level * settings.level_up_factor


def award_xp(state: GameState, amount: int, settings: GameSettings) -> int:
    """Give the player experience and queue any level-ups it earns.

    Returns:
        Number of level-ups queued.
    """
    player = state.player
    player.stats.xp += amount
    gained = 0
    while player.stats.xp >= xp_to_next_level(player.level, settings):
        player.stats.xp -= xp_to_next_level(player.level, settings)
        player.level += 1
        gained += 1
    if gained:
        state.pending_level_ups += gained
        state.log(
            f"Your battle skills grow stronger! You reached level {player.level}!",
            MessageCategory.LEVEL,
        )
        logger.info("Player leveled up", level=player.level, pending=state.pending_level_ups)
    return gained


__all__ = [
    "DamageResult",
    "AttackResult",
    "compute_damage",
    "resolve_attack",
    "apply_damage",
    "xp_to_next_level",
    "award_xp",
]
