"""Entity store for one dungeon level.

The EntityStore is the single owner of every entity and floor item on a
level. Entities reference each other only by id; every lookup goes through
``get``. Iteration order is spawn order, which is also the turn order of
monsters.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dungeon_crawler.core.exceptions import (
    BlockedError,
    InvalidGameStateError,
    NoSuchItemError,
)
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.models.entities import Entity, IdleState, Item
from dungeon_crawler.models.grid import Grid, Position


logger = get_logger(__name__)


class EntityStore(BaseModel):
    """Id-keyed registry of the entities and floor items of a level.

    Attributes:
        entities: Entities keyed by id, in spawn order. Dead entities stay
            registered but are skipped by turn iteration and occupancy.
        floor_items: Items lying on the grid.
        next_entity_id: Next id handed out by ``allocate_entity_id``.
        next_item_id: Next id handed out by ``allocate_item_id``.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    entities: dict[int, Entity] = Field(default_factory=dict)
    floor_items: list[Item] = Field(default_factory=list)
    next_entity_id: int = Field(default=0, ge=0)
    next_item_id: int = Field(default=0, ge=0)

    # -------------------------------------------------------------------------
    # Id allocation
    # -------------------------------------------------------------------------

    def allocate_entity_id(self) -> int:
        entity_id = self.next_entity_id
        self.next_entity_id += 1
        return entity_id

    def allocate_item_id(self) -> int:
        item_id = self.next_item_id
        self.next_item_id += 1
        return item_id

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def spawn(self, entity: Entity) -> Entity:
        """Register an entity.

        Args:
            entity: The entity to add. Its id must be unused and its tile
                free of living entities.

        Returns:
            The registered entity.

        Raises:
            InvalidGameStateError: If the id is taken or the tile is occupied.
        """
        if entity.id in self.entities:
            raise InvalidGameStateError("Entity id already in use", entity_id=entity.id)
        occupant = self.entity_at(entity.position)
        if entity.alive and occupant is not None:
            raise InvalidGameStateError(
                "Spawn position is occupied",
                entity_id=entity.id,
                details={"position": entity.position, "occupant_id": occupant},
            )
        self.entities[entity.id] = entity
        self.next_entity_id = max(self.next_entity_id, entity.id + 1)
        for item in entity.inventory:
            self.next_item_id = max(self.next_item_id, item.id + 1)
        return entity

    def remove(self, entity_id: int) -> Entity:
        entity = self.get(entity_id)
        del self.entities[entity_id]
        return entity

    def get(self, entity_id: int) -> Entity:
        """Look up an entity by id.

        Raises:
            InvalidGameStateError: If no entity has this id.
        """
        try:
            return self.entities[entity_id]
        except KeyError:
            raise InvalidGameStateError("Unknown entity", entity_id=entity_id) from None

    def entity_at(self, pos: Position) -> int | None:
        """Id of the living entity standing on ``pos``, if any."""
        for entity in self.entities.values():
            if entity.alive and entity.position == pos:
                return entity.id
        return None

    def move_to(self, entity_id: int, pos: Position, grid: Grid) -> None:
        """Move an entity onto another tile.

        Raises:
            OutOfBoundsError: If ``pos`` is outside the grid.
            BlockedError: If the tile is a wall or holds a living entity.
        """
        entity = self.get(entity_id)
        if not grid.is_walkable(pos):
            raise BlockedError("That way is blocked", position=pos)
        occupant = self.entity_at(pos)
        if occupant is not None and occupant != entity_id:
            raise BlockedError("Someone is in the way", position=pos, occupant_id=occupant)
        entity.position = pos

    def turn_order(self) -> list[int]:
        """Ids of living entities in spawn order."""
        return [entity.id for entity in self.entities.values() if entity.alive]

    def monsters(self) -> list[Entity]:
        """Living monsters in spawn order."""
        return [e for e in self.entities.values() if e.alive and e.is_monster]

    def mark_dead(self, entity_id: int, grid: Grid) -> Entity:
        """Apply the death transition.

        The entity stays registered for lookups but no longer acts, blocks
        movement or counts as an occupant. A corpse marker is left on its
        tile. Dead entities are never resurrected.
        """
        entity = self.get(entity_id)
        if not entity.alive:
            return entity
        entity.alive = False
        entity.statuses = {}
        entity.ai = IdleState()
        grid.place_corpse(entity.position, f"remains of {entity.name}")
        logger.debug("Entity died", entity_id=entity_id, name=entity.name, position=entity.position)
        return entity

    # -------------------------------------------------------------------------
    # Floor items
    # -------------------------------------------------------------------------

    def add_floor_item(self, item: Item, pos: Position) -> Item:
        item.equipped = False
        item.position = pos
        self.floor_items.append(item)
        self.next_item_id = max(self.next_item_id, item.id + 1)
        return item

    def items_at(self, pos: Position) -> list[Item]:
        """Floor items on ``pos``, oldest first."""
        return [item for item in self.floor_items if item.position == pos]

    def take_floor_item(self, item_id: int) -> Item:
        """Lift an item off the floor.

        Raises:
            NoSuchItemError: If no floor item has this id.
        """
        for index, item in enumerate(self.floor_items):
            if item.id == item_id:
                del self.floor_items[index]
                item.position = None
                return item
        raise NoSuchItemError("There is no such item here", item_id=item_id)


__all__ = ["EntityStore"]
