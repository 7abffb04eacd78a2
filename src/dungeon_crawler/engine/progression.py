"""Starting a run and moving between levels.

A level is fully determined by the run seed and its depth: the per-level
seed is derived from both, so regenerating a depth from a saved run seed
rebuilds the same layout.
"""

from __future__ import annotations

from dungeon_crawler.core.config import Settings, get_settings
from dungeon_crawler.core.exceptions import NotOnStairsError
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.engine.dice import DiceRoller, derive_level_seed
from dungeon_crawler.engine.difficulty import expected_monster_strength
from dungeon_crawler.engine.fov import compute_fov
from dungeon_crawler.engine.generator import DungeonGenerator, GeneratedLevel
from dungeon_crawler.models.entities import ITEM_TEMPLATES, Entity, IdleState, create_monster, create_player
from dungeon_crawler.models.enums import ItemKind, MessageCategory
from dungeon_crawler.models.game_state import GameState, MessageLog
from dungeon_crawler.models.grid import Position
from dungeon_crawler.models.store import EntityStore


logger = get_logger(__name__)

PLAYER_ID = 0


def populate_store(
    level: GeneratedLevel,
    player: Entity,
    settings: Settings,
    *,
    first_item_id: int = 0,
) -> EntityStore:
    """Build the entity store of a freshly generated level.

    The player is spawned first, then monsters in placement order, so
    monster turn order follows generation order.

    Args:
        level: Generated level.
        player: Player entity; moved to the level's spawn.
        settings: Spell settings fix the strength of generated potions.
        first_item_id: Lowest id for generated items, keeping item ids
            unique across the run.

    Returns:
        The populated store.
    """
    store = EntityStore(next_item_id=first_item_id)
    player.position = level.spawn
    store.spawn(player)

    for placement in level.monsters:
        store.spawn(create_monster(store.allocate_entity_id(), placement.species, placement.position))

    for placement in level.items:
        template = ITEM_TEMPLATES[placement.template]
        amount = settings.spells.heal_amount if template.kind is ItemKind.POTION else None
        store.add_floor_item(
            template.create(store.allocate_item_id(), amount=amount),
            placement.position,
        )
    return store


def refresh_fov(state: GameState, settings: Settings) -> frozenset[Position]:
    """Recompute the player's view and apply it to the grid."""
    visible = compute_fov(
        state.grid,
        state.player.position,
        settings.game.torch_radius,
        settings.game.distance_metric,
    )
    state.grid.apply_fov(visible)
    return visible


def new_game(
    seed: int | None = None,
    settings: Settings | None = None,
    generator: DungeonGenerator | None = None,
) -> GameState:
    """Start a run at depth 1.

    Args:
        seed: Run seed; a random one is drawn when None.
        settings: Application settings; defaults to the cached settings.
        generator: Level generator; built from ``settings`` when None.

    Returns:
        The initial game state with the player's view applied.
    """
    settings = settings or get_settings()
    generator = generator or DungeonGenerator(settings.dungeon)
    game_seed = seed if seed is not None else DiceRoller().next_seed()
    level_seed = derive_level_seed(game_seed, 1)
    level = generator.generate(depth=1, seed=level_seed)

    game = settings.game
    player = create_player(
        PLAYER_ID,
        level.spawn,
        max_hp=game.player_max_hp,
        power=game.player_power,
        defense=game.player_defense,
    )
    state = GameState(
        depth=1,
        turn=0,
        game_seed=game_seed,
        level_seed=level_seed,
        grid=level.grid,
        store=populate_store(level, player, settings),
        player_id=player.id,
        messages=MessageLog(max_size=game.message_log_size),
    )
    refresh_fov(state, settings)
    state.log(
        "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings.",
        MessageCategory.WARNING,
    )
    logger.info("New game started", game_seed=game_seed, level_seed=level_seed)
    return state


def descend(
    state: GameState,
    settings: Settings | None = None,
    generator: DungeonGenerator | None = None,
) -> GeneratedLevel:
    """Take the stairs down.

    The old grid and store are discarded. The player keeps stats,
    inventory, level and experience, recovers half of their maximum hp and
    appears at the new spawn. The turn counter carries on.

    Raises:
        NotOnStairsError: If the player is not standing on the stairway.
    """
    settings = settings or get_settings()
    if not state.on_stairs:
        raise NotOnStairsError(
            "There are no stairs here",
            details={"position": state.player.position, "stairs": state.grid.stairs},
        )
    generator = generator or DungeonGenerator(settings.dungeon)

    depth = state.depth + 1
    level_seed = derive_level_seed(state.game_seed, depth)
    level = generator.generate(depth=depth, seed=level_seed)

    player = state.store.remove(state.player_id)
    player.ai = IdleState()
    first_item_id = max(
        [state.store.next_item_id, *(item.id + 1 for item in player.inventory)]
    )
    state.store = populate_store(level, player, settings, first_item_id=first_item_id)
    state.grid = level.grid
    state.depth = depth
    state.level_seed = level_seed

    state.log(
        "You take a moment to rest, and recover your strength.",
        MessageCategory.INFO,
    )
    player.stats.heal(player.stats.max_hp // 2)
    state.log(
        "After a rare moment of peace, you descend deeper into the heart of the dungeon...",
        MessageCategory.WARNING,
    )
    refresh_fov(state, settings)
    logger.info("Descended", depth=depth, level_seed=level_seed, monsters=len(level.monsters))
    return level


__all__ = [
    "PLAYER_ID",
    "populate_store",
    "refresh_fov",
    "new_game",
    "descend",
    "expected_monster_strength",
]
