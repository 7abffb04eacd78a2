"""Depth-dependent spawn tables.

Each table is a list of ``(depth, value)`` transitions: the value applies
from that depth onwards until the next transition. Every table only ever
grows with depth, so deeper levels never get easier.
"""

from __future__ import annotations

from dataclasses import dataclass

from dungeon_crawler.core.exceptions import ValidationError
from dungeon_crawler.models.entities import SPECIES
from dungeon_crawler.models.enums import Species


Transition = tuple[int, int]
"""``(first depth, value)``."""


MAX_MONSTERS_PER_ROOM: list[Transition] = [(1, 2), (4, 3), (6, 5)]
MAX_ITEMS_PER_ROOM: list[Transition] = [(1, 1), (4, 2)]

MONSTER_CHANCES: dict[Species, list[Transition]] = {
    Species.ORC: [(1, 80)],
    Species.TROLL: [(3, 15), (5, 30), (7, 60)],
}

ITEM_CHANCES: dict[str, list[Transition]] = {
    "healing_potion": [(1, 35)],
    "confusion_scroll": [(2, 10)],
    "lightning_scroll": [(4, 25)],
    "sword": [(4, 5)],
    "fireball_scroll": [(6, 25)],
    "shield": [(8, 15)],
}


def from_dungeon_level(table: list[Transition], depth: int) -> int:
    """Value of a transition table at ``depth``; 0 before the first entry."""
    for first_depth, value in reversed(table):
        if depth >= first_depth:
            return value
    return 0


@dataclass(frozen=True)
class SpawnParameters:
    """Generation parameters for one depth.

    Attributes:
        depth: Dungeon depth.
        max_monsters_per_room: Upper bound of the uniform monster count.
        max_items_per_room: Upper bound of the uniform item count.
        monster_weights: Relative spawn weight per species.
        item_weights: Relative spawn weight per item template key.
    """

    depth: int
    max_monsters_per_room: int
    max_items_per_room: int
    monster_weights: dict[Species, int]
    item_weights: dict[str, int]

    @property
    def expected_monsters_per_room(self) -> float:
        return self.max_monsters_per_room / 2

    @property
    def mean_monster_strength(self) -> float:
        """Spawn-weighted mean strength of a single monster."""
        total = sum(self.monster_weights.values())
        if total == 0:
            return 0.0
        return (
            sum(SPECIES[species].strength * weight for species, weight in self.monster_weights.items())
            / total
        )


def spawn_parameters(depth: int) -> SpawnParameters:
    """Build the spawn parameters for a depth.

    Raises:
        ValidationError: If ``depth`` is below 1.
    """
    if depth < 1:
        raise ValidationError("Depth must be at least 1", field_name="depth", invalid_value=depth)
    return SpawnParameters(
        depth=depth,
        max_monsters_per_room=from_dungeon_level(MAX_MONSTERS_PER_ROOM, depth),
        max_items_per_room=from_dungeon_level(MAX_ITEMS_PER_ROOM, depth),
        monster_weights={
            species: from_dungeon_level(table, depth) for species, table in MONSTER_CHANCES.items()
        },
        item_weights={key: from_dungeon_level(table, depth) for key, table in ITEM_CHANCES.items()},
    )


def expected_monster_strength(depth: int) -> float:
    """Expected total monster strength of one room at ``depth``.

    Non-decreasing in depth.
    """
    params = spawn_parameters(depth)
    return params.expected_monsters_per_room * params.mean_monster_strength


__all__ = [
    "Transition",
    "MAX_MONSTERS_PER_ROOM",
    "MAX_ITEMS_PER_ROOM",
    "MONSTER_CHANCES",
    "ITEM_CHANCES",
    "from_dungeon_level",
    "SpawnParameters",
    "spawn_parameters",
    "expected_monster_strength",
]
