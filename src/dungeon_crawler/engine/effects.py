"""Item use: potions, scrolls and equipment.

Every use either succeeds completely or fails with an ActionRejectedError
before any state is touched, so a rejected use never costs the item or
the turn. Consumables are removed from the inventory only after their
effect has been applied; equipment toggles and is never consumed.

Targeted scrolls that need a designation (Confusion, Fireball) take an
explicit target, or ask the caller through a ``TargetSelector`` callback.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from dungeon_crawler.core.config import Settings, get_settings
from dungeon_crawler.core.exceptions import (
    ItemNotUsableError,
    NoEligibleTargetError,
    NoSuchItemError,
    OutOfBoundsError,
    TargetingCancelledError,
)
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.engine.combat import DamageResult, apply_damage
from dungeon_crawler.engine.fov import compute_fov
from dungeon_crawler.models.entities import Entity, Item
from dungeon_crawler.models.enums import ItemKind, MessageCategory, ScrollKind, StatusKind
from dungeon_crawler.models.game_state import GameState
from dungeon_crawler.models.grid import Position, distance


logger = get_logger(__name__)


# =============================================================================
# Targets
# =============================================================================


class TileTarget(BaseModel):
    """Designates a grid position."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["tile"] = "tile"
    position: Position


class EntityTarget(BaseModel):
    """Designates an entity by id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["entity"] = "entity"
    entity_id: int


Target = Annotated[TileTarget | EntityTarget, Field(discriminator="kind")]


@dataclass(frozen=True)
class TargetRequest:
    """What the engine asks the caller to pick from.

    Attributes:
        scroll: Spell being cast.
        caster_id: Entity casting it.
        max_range: Largest allowed distance from the caster.
        candidate_ids: Entities that may be designated, if the spell
            targets entities.
        candidate_tiles: Tiles that may be designated.
    """

    scroll: ScrollKind
    caster_id: int
    max_range: int
    candidate_ids: tuple[int, ...] = ()
    candidate_tiles: frozenset[Position] = frozenset()


TargetSelector = Callable[[TargetRequest], TileTarget | EntityTarget | None]
"""Caller-supplied picker. Returning None cancels the use."""


@dataclass(frozen=True)
class EffectSpec:
    """A resolved spell: what, by whom, at what."""

    scroll: ScrollKind
    caster_id: int
    target: TileTarget | EntityTarget | None = None


@dataclass
class EffectResult:
    """Outcome of a successful item use.

    Attributes:
        item_id: Item that was used.
        consumed: Whether the item left the inventory.
        spec: The resolved spell, for scrolls.
        damage: Damage dealt per entity, in application order.
        affected_ids: Entities touched by a non-damaging effect.
        healed: Hit points restored.
        equipped: New equip state, for equipment.
    """

    item_id: int
    consumed: bool
    spec: EffectSpec | None = None
    damage: list[DamageResult] = field(default_factory=list)
    affected_ids: list[int] = field(default_factory=list)
    healed: int = 0
    equipped: bool | None = None

    @property
    def killed_ids(self) -> list[int]:
        return [result.target_id for result in self.damage if result.killed]


# =============================================================================
# Entry point
# =============================================================================


def use_item(
    state: GameState,
    caster_id: int,
    item_id: int,
    target: TileTarget | EntityTarget | None = None,
    selector: TargetSelector | None = None,
    settings: Settings | None = None,
) -> EffectResult:
    """Use an item from an entity's inventory.

    Args:
        state: Current game state.
        caster_id: Entity using the item.
        item_id: Item in the caster's inventory.
        target: Explicit designation for Confusion or Fireball.
        selector: Asked for a designation when ``target`` is None.
        settings: Spell and game rules; defaults to the application settings.

    Returns:
        What the item did.

    Raises:
        NoSuchItemError: If the caster does not carry the item.
        NoEligibleTargetError: If no valid target exists or the designation
            is not one of them.
        TargetingCancelledError: If selection was needed and aborted.
        ItemNotUsableError: If the item would have no effect.
        OutOfBoundsError: If a designated tile lies outside the grid.
    """
    settings = settings or get_settings()
    caster = state.store.get(caster_id)
    item = caster.find_item(item_id)
    if item is None:
        raise NoSuchItemError("You do not carry that item", item_id=item_id)

    logger.debug("Using item", caster_id=caster_id, item_id=item_id, kind=item.kind)

    if item.kind.equippable:
        return _toggle_equipment(state, caster, item)
    if item.kind is ItemKind.POTION:
        result = _drink_heal(state, caster, item)
    elif item.scroll is ScrollKind.LIGHTNING:
        result = _cast_lightning(state, caster, item, settings)
    elif item.scroll is ScrollKind.CONFUSION:
        result = _cast_confusion(state, caster, item, target, selector, settings)
    else:
        result = _cast_fireball(state, caster, item, target, selector, settings)

    caster.inventory.remove(item)
    return result


# =============================================================================
# Consumables
# =============================================================================


def _drink_heal(state: GameState, caster: Entity, item: Item) -> EffectResult:
    if caster.stats.hp >= caster.stats.max_hp:
        raise ItemNotUsableError(
            "You are already at full health",
            details={"item_id": item.id},
        )
    healed = caster.stats.heal(item.amount)
    state.log("Your wounds start to feel better!", MessageCategory.MAGIC)
    return EffectResult(item_id=item.id, consumed=True, healed=healed)


def _cast_lightning(state: GameState, caster: Entity, item: Item, settings: Settings) -> EffectResult:
    spells = settings.spells
    candidates = _visible_monsters(state, caster, spells.lightning_range, settings)
    if not candidates:
        raise NoEligibleTargetError(
            "No enemy is close enough to strike",
            details={"range": spells.lightning_range},
        )
    metric = settings.game.distance_metric
    victim = min(candidates, key=lambda m: (distance(caster.position, m.position, metric), m.id))

    state.log(
        f"A lightning bolt strikes the {victim.name} with a loud thunder! "
        f"The damage is {spells.lightning_damage} hit points.",
        MessageCategory.MAGIC,
    )
    damage = apply_damage(
        state, victim.id, spells.lightning_damage, source_id=caster.id, settings=settings.game
    )
    return EffectResult(
        item_id=item.id,
        consumed=True,
        spec=EffectSpec(ScrollKind.LIGHTNING, caster.id, EntityTarget(entity_id=victim.id)),
        damage=[damage],
    )


def _cast_confusion(
    state: GameState,
    caster: Entity,
    item: Item,
    target: TileTarget | EntityTarget | None,
    selector: TargetSelector | None,
    settings: Settings,
) -> EffectResult:
    spells = settings.spells
    candidates = _visible_monsters(state, caster, spells.confusion_range, settings)
    if not candidates:
        raise NoEligibleTargetError(
            "No enemy is close enough to confuse",
            details={"range": spells.confusion_range},
        )
    eligible = {monster.id: monster for monster in candidates}

    if target is None:
        target = _select(
            selector,
            TargetRequest(
                scroll=ScrollKind.CONFUSION,
                caster_id=caster.id,
                max_range=spells.confusion_range,
                candidate_ids=tuple(eligible),
                candidate_tiles=frozenset(m.position for m in candidates),
            ),
        )

    if isinstance(target, EntityTarget):
        victim_id: int | None = target.entity_id
    else:
        victim_id = state.store.entity_at(target.position) if state.grid.in_bounds(target.position) else None
    if victim_id not in eligible:
        raise NoEligibleTargetError(
            "That is not a valid target",
            details={"target": target.model_dump()},
        )

    victim = eligible[victim_id]
    victim.statuses[StatusKind.CONFUSED] = spells.confusion_turns
    state.log(
        f"The eyes of the {victim.name} look vacant, as it starts to stumble around!",
        MessageCategory.MAGIC,
    )
    logger.debug("Entity confused", entity_id=victim.id, turns=spells.confusion_turns)
    return EffectResult(
        item_id=item.id,
        consumed=True,
        spec=EffectSpec(ScrollKind.CONFUSION, caster.id, EntityTarget(entity_id=victim.id)),
        affected_ids=[victim.id],
    )


def _cast_fireball(
    state: GameState,
    caster: Entity,
    item: Item,
    target: TileTarget | EntityTarget | None,
    selector: TargetSelector | None,
    settings: Settings,
) -> EffectResult:
    spells = settings.spells
    metric = settings.game.distance_metric
    in_view = _field_of_view(state, caster, settings)
    tiles = frozenset(
        pos for pos in in_view if distance(caster.position, pos, metric) <= spells.fireball_range
    )

    if target is None:
        target = _select(
            selector,
            TargetRequest(
                scroll=ScrollKind.FIREBALL,
                caster_id=caster.id,
                max_range=spells.fireball_range,
                candidate_tiles=tiles,
            ),
        )

    if isinstance(target, EntityTarget):
        designated = state.store.entities.get(target.entity_id)
        if designated is None or not designated.alive:
            raise NoEligibleTargetError(
                "That is not a valid target",
                details={"entity_id": target.entity_id},
            )
        center = designated.position
    else:
        center = target.position
    if not state.grid.in_bounds(center):
        raise OutOfBoundsError("Target is outside the map", position=center)
    if center not in tiles:
        raise NoEligibleTargetError(
            "You cannot target that tile",
            details={"position": center, "range": spells.fireball_range},
        )

    state.log(
        f"The fireball explodes, burning everything within {spells.fireball_radius} tiles!",
        MessageCategory.MAGIC,
    )
    # Victims are fixed before any damage lands
    victims = [
        entity
        for entity in state.store.entities.values()
        if entity.alive and distance(center, entity.position, metric) <= spells.fireball_radius
    ]
    damage: list[DamageResult] = []
    for victim in victims:
        state.log(
            f"The {victim.name} gets burned for {spells.fireball_damage} hit points.",
            MessageCategory.MAGIC,
        )
        damage.append(
            apply_damage(
                state, victim.id, spells.fireball_damage, source_id=caster.id, settings=settings.game
            )
        )
    return EffectResult(
        item_id=item.id,
        consumed=True,
        spec=EffectSpec(ScrollKind.FIREBALL, caster.id, TileTarget(position=center)),
        damage=damage,
    )


# =============================================================================
# Equipment
# =============================================================================


def _toggle_equipment(state: GameState, caster: Entity, item: Item) -> EffectResult:
    if item.equipped:
        item.equipped = False
        state.log(f"Dequipped {item.name}.", MessageCategory.INFO)
        return EffectResult(item_id=item.id, consumed=False, equipped=False)

    current = caster.equipped_item(item.kind)
    if current is not None:
        current.equipped = False
        state.log(f"Dequipped {current.name}.", MessageCategory.INFO)
    item.equipped = True
    state.log(f"Equipped {item.name}.", MessageCategory.INFO)
    return EffectResult(item_id=item.id, consumed=False, equipped=True)


# =============================================================================
# Helpers
# =============================================================================


def _field_of_view(state: GameState, caster: Entity, settings: Settings) -> frozenset[Position]:
    return compute_fov(
        state.grid,
        caster.position,
        settings.game.torch_radius,
        settings.game.distance_metric,
    )


def _visible_monsters(
    state: GameState,
    caster: Entity,
    max_range: int,
    settings: Settings,
) -> list[Entity]:
    """Living monsters in the caster's view and within ``max_range``."""
    in_view = _field_of_view(state, caster, settings)
    metric = settings.game.distance_metric
    return [
        monster
        for monster in state.store.monsters()
        if monster.id != caster.id
        and monster.position in in_view
        and distance(caster.position, monster.position, metric) <= max_range
    ]


def _select(selector: TargetSelector | None, request: TargetRequest) -> TileTarget | EntityTarget:
    if selector is None:
        raise TargetingCancelledError("No target was chosen", details={"scroll": request.scroll})
    target = selector(request)
    if target is None:
        raise TargetingCancelledError("Targeting cancelled", details={"scroll": request.scroll})
    return target


__all__ = [
    "TileTarget",
    "EntityTarget",
    "Target",
    "TargetRequest",
    "TargetSelector",
    "EffectSpec",
    "EffectResult",
    "use_item",
]
