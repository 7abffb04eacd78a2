"""Game engine module for the dungeon crawler simulation core.

This module provides level generation, field of view, pathfinding,
monster AI, combat, item effects and the turn scheduler that ties them
together.

Submodules:
    dice: Seeded, injectable randomness
    difficulty: Depth-dependent spawn tables
    generator: Procedural level generation with bounded retries
    fov: Symmetric shadowcasting field of view
    pathfinding: A* pathfinding and reachability
    ai: Monster decision making
    combat: Melee combat, direct damage and experience
    effects: Potions, scrolls and equipment
    progression: New runs and descending
    turn_manager: Turn scheduling and the player command surface

Example:
    >>> from dungeon_crawler.engine import TurnScheduler, Direction
    >>>
    >>> scheduler = TurnScheduler.start(seed=42)
    >>> result = scheduler.move(Direction.EAST)
    >>> if not result.accepted:
    ...     print(result.reason)
"""

from __future__ import annotations

from dungeon_crawler.models.enums import Direction, LevelUpChoice

# =============================================================================
# Randomness & Difficulty
# =============================================================================
from dungeon_crawler.engine.dice import DiceRoller, derive_level_seed
from dungeon_crawler.engine.difficulty import (
    SpawnParameters,
    expected_monster_strength,
    from_dungeon_level,
    spawn_parameters,
)

# =============================================================================
# Level Generation
# =============================================================================
from dungeon_crawler.engine.generator import (
    DungeonGenerator,
    GeneratedLevel,
    ItemPlacement,
    MonsterPlacement,
    Room,
)

# =============================================================================
# Sight & Movement
# =============================================================================
from dungeon_crawler.engine.fov import can_see, compute_fov
from dungeon_crawler.engine.pathfinding import find_path, next_step, reachable_from

# =============================================================================
# Behavior & Resolution
# =============================================================================
from dungeon_crawler.engine.ai import AIDecision, DecisionKind, decide
from dungeon_crawler.engine.combat import (
    AttackResult,
    DamageResult,
    apply_damage,
    award_xp,
    resolve_attack,
    xp_to_next_level,
)
from dungeon_crawler.engine.effects import (
    EffectResult,
    EffectSpec,
    EntityTarget,
    TargetRequest,
    TargetSelector,
    TileTarget,
    use_item,
)

# =============================================================================
# Progression & Scheduling
# =============================================================================
from dungeon_crawler.engine.progression import descend, new_game, refresh_fov
from dungeon_crawler.engine.turn_manager import (
    CharacterInfo,
    Command,
    DescendCommand,
    DropItemCommand,
    GetItemCommand,
    LevelUpCommand,
    LevelView,
    MoveCommand,
    TurnResult,
    TurnScheduler,
    UseItemCommand,
)


__all__ = [
    "Direction",
    "LevelUpChoice",
    # Randomness & difficulty
    "DiceRoller",
    "derive_level_seed",
    "SpawnParameters",
    "expected_monster_strength",
    "from_dungeon_level",
    "spawn_parameters",
    # Level generation
    "DungeonGenerator",
    "GeneratedLevel",
    "ItemPlacement",
    "MonsterPlacement",
    "Room",
    # Sight & movement
    "can_see",
    "compute_fov",
    "find_path",
    "next_step",
    "reachable_from",
    # Behavior & resolution
    "AIDecision",
    "DecisionKind",
    "decide",
    "AttackResult",
    "DamageResult",
    "apply_damage",
    "award_xp",
    "resolve_attack",
    "xp_to_next_level",
    "EffectResult",
    "EffectSpec",
    "EntityTarget",
    "TargetRequest",
    "TargetSelector",
    "TileTarget",
    "use_item",
    # Progression & scheduling
    "descend",
    "new_game",
    "refresh_fov",
    "CharacterInfo",
    "Command",
    "DescendCommand",
    "DropItemCommand",
    "GetItemCommand",
    "LevelUpCommand",
    "LevelView",
    "MoveCommand",
    "TurnResult",
    "TurnScheduler",
    "UseItemCommand",
]
