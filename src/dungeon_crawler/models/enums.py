"""Enumeration types for the dungeon crawler simulation core.

These enums are the tags of every tagged variant in the data model:
tile kinds, entity kinds, item kinds, statuses and the command surface.
"""

from __future__ import annotations

from enum import StrEnum


class TileKind(StrEnum):
    """What a grid tile is made of."""

    WALL = "wall"
    FLOOR = "floor"
    STAIR_DOWN = "stair_down"

    @property
    def walkable(self) -> bool:
        """Whether an entity may stand on this kind of tile."""
        return self is not TileKind.WALL

    @property
    def transparent(self) -> bool:
        """Whether this kind of tile lets sight through."""
        return self is not TileKind.WALL


class Visibility(StrEnum):
    """Player knowledge of a tile."""

    UNSEEN = "unseen"
    """Never seen."""

    REMEMBERED = "remembered"
    """Seen before; rendered from memory, entities hidden."""

    VISIBLE = "visible"
    """In the player's current field of view."""


class EntityKind(StrEnum):
    """Type of actor for polymorphic handling."""

    PLAYER = "player"
    MONSTER = "monster"


class Species(StrEnum):
    """Monster species."""

    ORC = "orc"
    TROLL = "troll"


class ItemKind(StrEnum):
    """Broad item categories."""

    POTION = "potion"
    WEAPON = "weapon"
    ARMOR = "armor"
    SCROLL = "scroll"

    @property
    def equippable(self) -> bool:
        """Whether items of this kind are equipped rather than consumed."""
        return self in (ItemKind.WEAPON, ItemKind.ARMOR)


class ScrollKind(StrEnum):
    """Spells that can be cast from a scroll."""

    CONFUSION = "confusion"
    LIGHTNING = "lightning"
    FIREBALL = "fireball"


class StatusKind(StrEnum):
    """Timed modifiers on an entity's behavior."""

    CONFUSED = "confused"


class Direction(StrEnum):
    """Eight compass directions plus waiting in place."""

    NORTH = "north"
    NORTH_EAST = "north_east"
    EAST = "east"
    SOUTH_EAST = "south_east"
    SOUTH = "south"
    SOUTH_WEST = "south_west"
    WEST = "west"
    NORTH_WEST = "north_west"
    WAIT = "wait"

    @property
    def delta(self) -> tuple[int, int]:
        """Get the (dx, dy) step for this direction.

        Returns:
            Offset where y grows downwards; (0, 0) for WAIT.
        """
        return _DIRECTION_DELTAS[self]


_DIRECTION_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.NORTH_EAST: (1, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH_EAST: (1, 1),
    Direction.SOUTH: (0, 1),
    Direction.SOUTH_WEST: (-1, 1),
    Direction.WEST: (-1, 0),
    Direction.NORTH_WEST: (-1, -1),
    Direction.WAIT: (0, 0),
}


class AttackOutcome(StrEnum):
    """How a melee attack resolved. There are no misses."""

    HIT = "hit"
    """Positive damage was dealt."""

    BLOCKED = "blocked"
    """The attack connected but defense absorbed all damage."""


class LevelUpChoice(StrEnum):
    """Stat the player improves when gaining a character level."""

    CONSTITUTION = "constitution"
    """+20 max hp and current hp."""

    STRENGTH = "strength"
    """+1 power."""

    AGILITY = "agility"
    """+1 defense."""


class MessageCategory(StrEnum):
    """Category of a message log entry, used by renderers for coloring."""

    INFO = "info"
    COMBAT = "combat"
    MAGIC = "magic"
    WARNING = "warning"
    DEATH = "death"
    LEVEL = "level"


__all__ = [
    "TileKind",
    "Visibility",
    "EntityKind",
    "Species",
    "ItemKind",
    "ScrollKind",
    "StatusKind",
    "Direction",
    "AttackOutcome",
    "LevelUpChoice",
    "MessageCategory",
]
