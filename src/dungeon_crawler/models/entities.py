"""Entity and item models for the dungeon crawler simulation core.

Players and monsters share one uniform shape, ``Entity``, tagged by
``EntityKind``; behavior differences live in the engine, not in a class
hierarchy. Monster AI memory is itself a tagged variant (``IdleState``,
``ChasingState``, ``AttackingState``) discriminated by its ``state`` field.

Entities never hold references to each other: every cross-reference is an
integer id resolved through the EntityStore.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dungeon_crawler.models.enums import (
    EntityKind,
    ItemKind,
    ScrollKind,
    Species,
    StatusKind,
)
from dungeon_crawler.models.grid import Position


# =============================================================================
# Stats Component
# =============================================================================


class Stats(BaseModel):
    """Combat statistics.

    ``power`` and ``defense`` are base values; equipment bonuses are folded
    in by ``Entity.attack_power`` and ``Entity.defense_value``.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    hp: int = Field(ge=0, description="Current hit points")
    max_hp: int = Field(ge=1, description="Maximum hit points")
    power: int = Field(ge=0, description="Base attack power")
    defense: int = Field(ge=0, description="Base defense")
    xp: int = Field(default=0, ge=0, description="Experience held, or awarded on death for monsters")

    @model_validator(mode="after")
    def check_hp(self) -> Self:
        if self.hp > self.max_hp:
            raise ValueError(f"hp ({self.hp}) exceeds max_hp ({self.max_hp})")
        return self

    def take_damage(self, amount: int) -> int:
        """Reduce hp, never below zero.

        Returns:
            Hit points actually lost.
        """
        lost = min(self.hp, max(0, amount))
        self.hp -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Restore hp, never above max_hp.

        Returns:
            Hit points actually restored.
        """
        gained = min(self.max_hp - self.hp, max(0, amount))
        self.hp += gained
        return gained


# =============================================================================
# Items
# =============================================================================


class Item(BaseModel):
    """A single carried or dropped item.

    An item is either on the grid (``position`` set) or in an inventory
    (``position`` is None), never both.

    Attributes:
        id: Stable item id.
        kind: Item category.
        name: Display name.
        glyph: Display character.
        scroll: Spell of a scroll; None for every other kind.
        amount: Heal amount, attack bonus or defense bonus depending on kind.
        equipped: Whether a weapon or armor is worn.
        position: Grid position when lying on the floor.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: int = Field(ge=0)
    kind: ItemKind
    name: str = Field(min_length=1, max_length=100)
    glyph: str = Field(min_length=1, max_length=1)
    scroll: ScrollKind | None = None
    amount: int = Field(default=0, ge=0)
    equipped: bool = False
    position: Position | None = None

    @model_validator(mode="after")
    def check_variant(self) -> Self:
        if (self.kind is ItemKind.SCROLL) != (self.scroll is not None):
            raise ValueError("scroll kind must be set for scrolls and only for scrolls")
        if self.equipped and not self.kind.equippable:
            raise ValueError(f"{self.kind} items cannot be equipped")
        return self


@dataclass(frozen=True)
class ItemTemplate:
    """Blueprint for generated items."""

    key: str
    name: str
    glyph: str
    kind: ItemKind
    amount: int = 0
    scroll: ScrollKind | None = None

    def create(
        self,
        item_id: int,
        position: Position | None = None,
        *,
        amount: int | None = None,
    ) -> Item:
        return Item(
            id=item_id,
            kind=self.kind,
            name=self.name,
            glyph=self.glyph,
            scroll=self.scroll,
            amount=self.amount if amount is None else amount,
            position=position,
        )


ITEM_TEMPLATES: dict[str, ItemTemplate] = {
    "healing_potion": ItemTemplate(
        key="healing_potion",
        name="healing potion",
        glyph="!",
        kind=ItemKind.POTION,
        amount=40,
    ),
    "lightning_scroll": ItemTemplate(
        key="lightning_scroll",
        name="scroll of lightning bolt",
        glyph="#",
        kind=ItemKind.SCROLL,
        scroll=ScrollKind.LIGHTNING,
    ),
    "fireball_scroll": ItemTemplate(
        key="fireball_scroll",
        name="scroll of fireball",
        glyph="#",
        kind=ItemKind.SCROLL,
        scroll=ScrollKind.FIREBALL,
    ),
    "confusion_scroll": ItemTemplate(
        key="confusion_scroll",
        name="scroll of confusion",
        glyph="#",
        kind=ItemKind.SCROLL,
        scroll=ScrollKind.CONFUSION,
    ),
    "sword": ItemTemplate(
        key="sword",
        name="sword",
        glyph="/",
        kind=ItemKind.WEAPON,
        amount=3,
    ),
    "shield": ItemTemplate(
        key="shield",
        name="shield",
        glyph="[",
        kind=ItemKind.ARMOR,
        amount=1,
    ),
}


# =============================================================================
# AI Memory (tagged variant)
# =============================================================================


class IdleState(BaseModel):
    """No known player location."""

    model_config = ConfigDict(frozen=True)

    state: Literal["idle"] = "idle"


class ChasingState(BaseModel):
    """Pursuing the player's current or last known position."""

    model_config = ConfigDict(frozen=True)

    state: Literal["chasing"] = "chasing"
    target: Position


class AttackingState(BaseModel):
    """Adjacent to the player and fighting."""

    model_config = ConfigDict(frozen=True)

    state: Literal["attacking"] = "attacking"
    target_id: int
    last_seen: Position


AIState = Annotated[
    IdleState | ChasingState | AttackingState,
    Field(discriminator="state"),
]


# =============================================================================
# Entity
# =============================================================================


class Entity(BaseModel):
    """An actor on the level: the player or a monster.

    Attributes:
        id: Stable id within a level, allocated in spawn order.
        kind: Player or monster.
        name: Display name.
        glyph: Display character.
        species: Monster species; None for the player.
        position: Current grid position.
        stats: Combat statistics.
        alive: False once hp reached zero. Never reset.
        statuses: Remaining turns per active status.
        inventory: Carried items, player only.
        ai: Monster AI memory.
        level: Character level, meaningful for the player.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    id: int = Field(ge=0)
    kind: EntityKind
    name: str = Field(min_length=1, max_length=100)
    glyph: str = Field(min_length=1, max_length=1)
    species: Species | None = None
    position: Position
    stats: Stats
    alive: bool = True
    statuses: dict[StatusKind, int] = Field(default_factory=dict)
    inventory: list[Item] = Field(default_factory=list)
    ai: AIState = Field(default_factory=IdleState)
    level: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def check_variant(self) -> Self:
        if self.kind is EntityKind.MONSTER:
            if self.species is None:
                raise ValueError("monsters need a species")
            if self.inventory:
                raise ValueError("monsters do not carry inventory")
        elif self.species is not None:
            raise ValueError("the player has no species")
        return self

    @property
    def is_player(self) -> bool:
        return self.kind is EntityKind.PLAYER

    @property
    def is_monster(self) -> bool:
        return self.kind is EntityKind.MONSTER

    @property
    def attack_power(self) -> int:
        """Base power plus the bonus of every equipped weapon."""
        return self.stats.power + sum(
            item.amount for item in self.inventory if item.equipped and item.kind is ItemKind.WEAPON
        )

    @property
    def defense_value(self) -> int:
        """Base defense plus the bonus of every equipped armor."""
        return self.stats.defense + sum(
            item.amount for item in self.inventory if item.equipped and item.kind is ItemKind.ARMOR
        )

    def status_turns(self, status: StatusKind) -> int:
        return self.statuses.get(status, 0)

    def has_status(self, status: StatusKind) -> bool:
        return self.status_turns(status) > 0

    def find_item(self, item_id: int) -> Item | None:
        for item in self.inventory:
            if item.id == item_id:
                return item
        return None

    def equipped_item(self, kind: ItemKind) -> Item | None:
        for item in self.inventory:
            if item.equipped and item.kind is kind:
                return item
        return None


# =============================================================================
# Species & Factories
# =============================================================================


@dataclass(frozen=True)
class SpeciesTemplate:
    """Base statistics of a monster species."""

    species: Species
    name: str
    glyph: str
    max_hp: int
    power: int
    defense: int
    xp: int

    @property
    def strength(self) -> int:
        """Rough threat score used to compare difficulty across depths."""
        return self.max_hp + 4 * self.power + 4 * self.defense


SPECIES: dict[Species, SpeciesTemplate] = {
    Species.ORC: SpeciesTemplate(
        species=Species.ORC,
        name="orc",
        glyph="o",
        max_hp=10,
        power=3,
        defense=0,
        xp=35,
    ),
    Species.TROLL: SpeciesTemplate(
        species=Species.TROLL,
        name="troll",
        glyph="T",
        max_hp=16,
        power=4,
        defense=1,
        xp=100,
    ),
}


def create_monster(entity_id: int, species: Species, position: Position) -> Entity:
    """Create a monster at full health.

    Args:
        entity_id: Id to assign.
        species: Monster species.
        position: Spawn position.

    Returns:
        The new monster entity.
    """
    template = SPECIES[species]
    return Entity(
        id=entity_id,
        kind=EntityKind.MONSTER,
        name=template.name,
        glyph=template.glyph,
        species=species,
        position=position,
        stats=Stats(
            hp=template.max_hp,
            max_hp=template.max_hp,
            power=template.power,
            defense=template.defense,
            xp=template.xp,
        ),
    )


def create_player(
    entity_id: int,
    position: Position,
    *,
    max_hp: int,
    power: int,
    defense: int,
    name: str = "player",
) -> Entity:
    """Create the player character at full health.

    Args:
        entity_id: Id to assign.
        position: Spawn position.
        max_hp: Starting hit points.
        power: Starting attack power.
        defense: Starting defense.
        name: Display name.

    Returns:
        The new player entity.
    """
    return Entity(
        id=entity_id,
        kind=EntityKind.PLAYER,
        name=name,
        glyph="@",
        position=position,
        stats=Stats(hp=max_hp, max_hp=max_hp, power=power, defense=defense),
    )


__all__ = [
    "Stats",
    "Item",
    "ItemTemplate",
    "ITEM_TEMPLATES",
    "IdleState",
    "ChasingState",
    "AttackingState",
    "AIState",
    "Entity",
    "SpeciesTemplate",
    "SPECIES",
    "create_monster",
    "create_player",
]
