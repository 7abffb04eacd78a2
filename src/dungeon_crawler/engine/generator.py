"""Procedural level generation.

A level is built by rejection-sampling rectangular rooms, joining each new
room to the previous one with an L-shaped corridor, and scattering monsters
and items according to the depth's spawn tables. Every layout is checked
for connectivity before it is accepted; rejected layouts are regenerated
from a fresh seed a bounded number of times.

Example:
    >>> from dungeon_crawler.core.config import DungeonSettings
    >>> level = DungeonGenerator(DungeonSettings()).generate(depth=1, seed=7)
    >>> level.grid.kind_at(level.stairs)
    <TileKind.STAIR_DOWN: 'stair_down'>
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from tenacity import retry, retry_if_exception_type, stop_after_attempt

from dungeon_crawler.core import constants
from dungeon_crawler.core.config import DungeonSettings
from dungeon_crawler.core.exceptions import LevelGenerationError, ValidationError
from dungeon_crawler.core.logging import get_logger
from dungeon_crawler.engine.difficulty import SpawnParameters, spawn_parameters
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.engine.pathfinding import reachable_from
from dungeon_crawler.models.enums import Species, TileKind
from dungeon_crawler.models.grid import Grid, Position


logger = get_logger(__name__)


# =============================================================================
# Layout Types
# =============================================================================


@dataclass(frozen=True)
class Room:
    """Axis-aligned room. The outer ring of the rectangle stays wall.

    Attributes:
        x1: Left wall column.
        y1: Top wall row.
        x2: Right wall column.
        y2: Bottom wall row.
    """

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def sized(cls, x: int, y: int, width: int, height: int) -> Room:
        return cls(x, y, x + width, y + height)

    @property
    def center(self) -> Position:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: Room) -> bool:
        """Overlap test, walls included: touching rooms intersect."""
        return (
            self.x1 <= other.x2
            and self.x2 >= other.x1
            and self.y1 <= other.y2
            and self.y2 >= other.y1
        )

    def interior(self) -> Iterator[Position]:
        for y in range(self.y1 + 1, self.y2):
            for x in range(self.x1 + 1, self.x2):
                yield (x, y)


@dataclass(frozen=True)
class MonsterPlacement:
    species: Species
    position: Position


@dataclass(frozen=True)
class ItemPlacement:
    template: str
    position: Position


@dataclass
class GeneratedLevel:
    """Output of a successful generation pass.

    Attributes:
        depth: Dungeon depth the level was built for.
        seed: Seed of the accepted pass.
        grid: Carved tile grid; all tiles unseen.
        spawn: Player start, the center of the first room.
        stairs: Stairway down, the center of the last room.
        rooms: Accepted rooms in acceptance order.
        monsters: Monster placements in spawn order.
        items: Item placements.
        attempts: Generation passes used.
    """

    depth: int
    seed: int
    grid: Grid
    spawn: Position
    stairs: Position
    rooms: list[Room] = field(default_factory=list)
    monsters: list[MonsterPlacement] = field(default_factory=list)
    items: list[ItemPlacement] = field(default_factory=list)
    attempts: int = 1


class _RejectedLayout(Exception):
    """A generation pass produced an unusable layout."""


# =============================================================================
# Generator
# =============================================================================


class DungeonGenerator:
    """Builds connected, populated levels.

    Attributes:
        settings: Map dimensions, room bounds and retry budget.
    """

    def __init__(self, settings: DungeonSettings | None = None) -> None:
        self.settings = settings or DungeonSettings()

    def generate(self, depth: int, seed: int | None = None) -> GeneratedLevel:
        """Generate a level.

        Args:
            depth: Dungeon depth, 1 or more. Controls spawn tables.
            seed: Seed of the first pass. Retries draw their seeds from it,
                so the result is a pure function of ``(depth, seed)``.

        Returns:
            The accepted level.

        Raises:
            ValidationError: If ``depth`` is below 1.
            LevelGenerationError: If every pass was rejected.
        """
        if depth < 1:
            raise ValidationError("Depth must be at least 1", field_name="depth", invalid_value=depth)

        params = spawn_parameters(depth)
        seeds = DiceRoller(seed=seed)
        max_attempts = self.settings.max_generation_retries
        attempts = 0

        @retry(
            retry=retry_if_exception_type(_RejectedLayout),
            stop=stop_after_attempt(max_attempts),
            reraise=True,
        )
        def _attempt() -> GeneratedLevel:
            nonlocal attempts
            attempts += 1
            pass_seed = seed if attempts == 1 and seed is not None else seeds.next_seed()
            return self._build(depth, pass_seed, params)

        try:
            level = _attempt()
        except _RejectedLayout as exc:
            logger.error("Level generation failed", depth=depth, seed=seed, attempts=attempts)
            raise LevelGenerationError(
                f"No valid level after {attempts} attempts: {exc}",
                depth=depth,
                attempts=attempts,
                details={"seed": seed},
            ) from exc

        level.attempts = attempts
        logger.info(
            "Level generated",
            depth=depth,
            seed=level.seed,
            rooms=len(level.rooms),
            monsters=len(level.monsters),
            items=len(level.items),
            attempts=attempts,
        )
        return level

    # -------------------------------------------------------------------------
    # One pass
    # -------------------------------------------------------------------------

    def _build(self, depth: int, seed: int, params: SpawnParameters) -> GeneratedLevel:
        rng = DiceRoller(seed=seed)
        cfg = self.settings
        grid = Grid.filled(cfg.map_width, cfg.map_height)
        rooms: list[Room] = []

        for _ in range(cfg.max_rooms):
            width = rng.randint(cfg.room_min_size, cfg.room_max_size)
            height = rng.randint(cfg.room_min_size, cfg.room_max_size)
            x = rng.randint(0, cfg.map_width - width - 1)
            y = rng.randint(0, cfg.map_height - height - 1)
            room = Room.sized(x, y, width, height)
            if any(room.intersects(other) for other in rooms):
                continue
            for pos in room.interior():
                grid.carve(pos)
            if rooms:
                self._connect(grid, rooms[-1].center, room.center, rng)
            rooms.append(room)

        if len(rooms) < constants.MIN_ROOMS:
            logger.debug("Rejected level layout", reason="too_few_rooms", rooms=len(rooms), seed=seed)
            raise _RejectedLayout(f"only {len(rooms)} rooms placed")

        spawn = rooms[0].center
        stairs = rooms[-1].center
        grid.carve(stairs, TileKind.STAIR_DOWN)

        reachable = reachable_from(grid, spawn)
        if len(reachable) != len(grid.walkable_positions()):
            logger.debug("Rejected level layout", reason="disconnected", seed=seed)
            raise _RejectedLayout("walkable tiles unreachable from spawn")

        monsters, items = self._populate(rooms, spawn, stairs, params, rng)
        return GeneratedLevel(
            depth=depth,
            seed=seed,
            grid=grid,
            spawn=spawn,
            stairs=stairs,
            rooms=rooms,
            monsters=monsters,
            items=items,
        )

    def _connect(self, grid: Grid, start: Position, end: Position, rng: DiceRoller) -> None:
        """Carve an L-shaped corridor, bending where fewer walls are dug."""
        horizontal_first = _l_path(start, end, horizontal_first=True)
        vertical_first = _l_path(start, end, horizontal_first=False)
        h_cost = sum(1 for pos in horizontal_first if not grid.is_walkable(pos))
        v_cost = sum(1 for pos in vertical_first if not grid.is_walkable(pos))
        if h_cost == v_cost:
            path = horizontal_first if rng.coin_flip() else vertical_first
        else:
            path = horizontal_first if h_cost < v_cost else vertical_first
        for pos in path:
            if not grid.is_walkable(pos):
                grid.carve(pos)

    def _populate(
        self,
        rooms: list[Room],
        spawn: Position,
        stairs: Position,
        params: SpawnParameters,
        rng: DiceRoller,
    ) -> tuple[list[MonsterPlacement], list[ItemPlacement]]:
        monsters: list[MonsterPlacement] = []
        items: list[ItemPlacement] = []
        reserved = {spawn, stairs}
        monster_tiles: set[Position] = set()
        item_tiles: set[Position] = set()

        for room in rooms:
            floor = list(room.interior())

            for _ in range(rng.randint(0, params.max_monsters_per_room)):
                pos = rng.choice(floor)
                if pos in reserved or pos in monster_tiles:
                    continue
                species = rng.weighted_choice(params.monster_weights)
                monsters.append(MonsterPlacement(species=species, position=pos))
                monster_tiles.add(pos)

            for _ in range(rng.randint(0, params.max_items_per_room)):
                pos = rng.choice(floor)
                if pos in reserved or pos in item_tiles:
                    continue
                template = rng.weighted_choice(params.item_weights)
                items.append(ItemPlacement(template=template, position=pos))
                item_tiles.add(pos)

        return monsters, items


def _segment(start: Position, end: Position) -> list[Position]:
    """Straight horizontal or vertical run, both ends included."""
    (x1, y1), (x2, y2) = start, end
    if y1 == y2:
        step = 1 if x2 >= x1 else -1
        return [(x, y1) for x in range(x1, x2 + step, step)]
    step = 1 if y2 >= y1 else -1
    return [(x1, y) for y in range(y1, y2 + step, step)]


def _l_path(start: Position, end: Position, *, horizontal_first: bool) -> list[Position]:
    corner = (end[0], start[1]) if horizontal_first else (start[0], end[1])
    return _segment(start, corner) + _segment(corner, end)[1:]


__all__ = [
    "Room",
    "MonsterPlacement",
    "ItemPlacement",
    "GeneratedLevel",
    "DungeonGenerator",
]
