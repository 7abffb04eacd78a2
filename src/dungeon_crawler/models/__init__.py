"""Pydantic V2 schemas for the dungeon crawler simulation core.

This module provides the data model layer: the tile grid, entities and
items, the entity store and the game state container. Every persistent
model round-trips through JSON so a save layer can restore it exactly.

Submodules:
    enums: Enumeration types (TileKind, Visibility, ItemKind, Direction, etc.)
    grid: Tile grid with bounds-checked access and visibility memory
    entities: Entities, items, AI memory and species templates
    store: Id-keyed registry of the entities on a level
    game_state: Message log and the GameState container

Example:
    >>> from dungeon_crawler.models import Grid, TileKind
    >>> grid = Grid.filled(10, 10, TileKind.FLOOR)
    >>> grid.is_walkable((3, 4))
    True
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from dungeon_crawler.models.enums import (
    AttackOutcome,
    Direction,
    EntityKind,
    ItemKind,
    LevelUpChoice,
    MessageCategory,
    ScrollKind,
    Species,
    StatusKind,
    TileKind,
    Visibility,
)

# =============================================================================
# Grid
# =============================================================================
from dungeon_crawler.models.grid import (
    NEIGHBOR_OFFSETS,
    Grid,
    Position,
    Tile,
    distance,
    is_adjacent,
)

# =============================================================================
# Entities
# =============================================================================
from dungeon_crawler.models.entities import (
    ITEM_TEMPLATES,
    SPECIES,
    AIState,
    AttackingState,
    ChasingState,
    Entity,
    IdleState,
    Item,
    ItemTemplate,
    SpeciesTemplate,
    Stats,
    create_monster,
    create_player,
)

# =============================================================================
# Store & State
# =============================================================================
from dungeon_crawler.models.store import EntityStore
from dungeon_crawler.models.game_state import GameState, LogEntry, MessageLog


__all__ = [
    # Enums
    "AttackOutcome",
    "Direction",
    "EntityKind",
    "ItemKind",
    "LevelUpChoice",
    "MessageCategory",
    "ScrollKind",
    "Species",
    "StatusKind",
    "TileKind",
    "Visibility",
    # Grid
    "NEIGHBOR_OFFSETS",
    "Grid",
    "Position",
    "Tile",
    "distance",
    "is_adjacent",
    # Entities
    "ITEM_TEMPLATES",
    "SPECIES",
    "AIState",
    "AttackingState",
    "ChasingState",
    "Entity",
    "IdleState",
    "Item",
    "ItemTemplate",
    "SpeciesTemplate",
    "Stats",
    "create_monster",
    "create_player",
    # Store & State
    "EntityStore",
    "GameState",
    "LogEntry",
    "MessageLog",
]
