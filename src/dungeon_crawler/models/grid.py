"""Tile grid for one dungeon level.

The Grid is a fixed-size rectangle of tiles addressed by ``(x, y)`` with
``y`` growing downwards. It answers walkability and transparency queries,
tracks what the player has seen, and carries decorative corpse markers.
All coordinate access is bounds-checked: a coordinate outside the grid
raises OutOfBoundsError rather than being clamped.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dungeon_crawler.core.config import DistanceMetric
from dungeon_crawler.core.exceptions import OutOfBoundsError
from dungeon_crawler.models.enums import TileKind, Visibility


Position = tuple[int, int]
"""An ``(x, y)`` grid coordinate."""

NEIGHBOR_OFFSETS: tuple[Position, ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)


def distance(a: Position, b: Position, metric: DistanceMetric = "euclidean") -> float:
    """Distance between two positions under the given metric.

    Args:
        a: First position.
        b: Second position.
        metric: ``"euclidean"`` or ``"chebyshev"``.

    Returns:
        The distance; Chebyshev distances are whole numbers.
    """
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    if metric == "chebyshev":
        return float(max(dx, dy))
    return math.hypot(dx, dy)


def is_adjacent(a: Position, b: Position) -> bool:
    """Whether two distinct positions touch, diagonals included."""
    return a != b and abs(a[0] - b[0]) <= 1 and abs(a[1] - b[1]) <= 1


class Tile(BaseModel):
    """A single map cell.

    Walkability and transparency are derived from the kind, so a stairway
    is always walkable and transparent. The corpse marker is decorative and
    never affects either.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    kind: TileKind = Field(default=TileKind.WALL)
    visibility: Visibility = Field(default=Visibility.UNSEEN)
    corpse: str | None = Field(default=None, description="Remains left on this tile")

    @property
    def walkable(self) -> bool:
        return self.kind.walkable

    @property
    def transparent(self) -> bool:
        return self.kind.transparent


class Grid(BaseModel):
    """Rectangular tile field for one level.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        tiles: Row-major tiles, indexed ``tiles[y][x]``.
        stairs: Position of the stairway down, once placed.
        visible: Positions in the player's current field of view.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    width: int = Field(ge=1)
    height: int = Field(ge=1)
    tiles: list[list[Tile]]
    stairs: Position | None = None
    visible: set[Position] = Field(default_factory=set)

    @model_validator(mode="after")
    def check_dimensions(self) -> Self:
        """Ensure the tile rows match the declared dimensions."""
        if len(self.tiles) != self.height or any(len(row) != self.width for row in self.tiles):
            raise ValueError(
                f"tile array does not match declared size {self.width}x{self.height}"
            )
        return self

    @classmethod
    def filled(cls, width: int, height: int, kind: TileKind = TileKind.WALL) -> Grid:
        """Create a grid where every tile has the same kind.

        Args:
            width: Number of columns.
            height: Number of rows.
            kind: Kind of every tile.

        Returns:
            A new Grid with all tiles unseen.
        """
        tiles = [[Tile(kind=kind) for _ in range(width)] for _ in range(height)]
        return cls(width=width, height=height, tiles=tiles)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def in_bounds(self, pos: Position) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, pos: Position) -> Tile:
        """Get the tile at a position.

        Raises:
            OutOfBoundsError: If the position lies outside the grid.
        """
        if not self.in_bounds(pos):
            raise OutOfBoundsError(
                "Position is outside the map",
                position=pos,
                details={"width": self.width, "height": self.height},
            )
        x, y = pos
        return self.tiles[y][x]

    def is_walkable(self, pos: Position) -> bool:
        return self.tile(pos).walkable

    def is_transparent(self, pos: Position) -> bool:
        return self.tile(pos).transparent

    def kind_at(self, pos: Position) -> TileKind:
        return self.tile(pos).kind

    def visibility_at(self, pos: Position) -> Visibility:
        return self.tile(pos).visibility

    def neighbors(self, pos: Position) -> Iterator[Position]:
        """Yield the in-bounds 8-way neighbors of a position."""
        x, y = pos
        for dx, dy in NEIGHBOR_OFFSETS:
            candidate = (x + dx, y + dy)
            if self.in_bounds(candidate):
                yield candidate

    def walkable_positions(self) -> list[Position]:
        """All walkable positions in row-major order."""
        return [
            (x, y)
            for y, row in enumerate(self.tiles)
            for x, tile in enumerate(row)
            if tile.walkable
        ]

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def carve(self, pos: Position, kind: TileKind = TileKind.FLOOR) -> None:
        """Set the kind of a tile. Used by level generation only."""
        self.tile(pos).kind = kind
        if kind is TileKind.STAIR_DOWN:
            self.stairs = pos

    def set_visibility(self, pos: Position, state: Visibility) -> None:
        self.tile(pos).visibility = state

    def apply_fov(self, visible: Iterable[Position]) -> None:
        """Apply a freshly computed field of view to the tile memory.

        Tiles in ``visible`` become Visible; tiles that were Visible and are
        no longer in view become Remembered; everything else is untouched,
        so never-seen tiles stay Unseen.

        Args:
            visible: Positions currently in view. Out-of-bounds positions
                raise OutOfBoundsError.
        """
        now_visible = set(visible)
        for pos in self.visible - now_visible:
            self.set_visibility(pos, Visibility.REMEMBERED)
        for pos in now_visible:
            self.set_visibility(pos, Visibility.VISIBLE)
        self.visible = now_visible

    def place_corpse(self, pos: Position, name: str) -> None:
        """Leave a decorative corpse marker. Walkability is unchanged."""
        self.tile(pos).corpse = name


__all__ = [
    "Position",
    "NEIGHBOR_OFFSETS",
    "distance",
    "is_adjacent",
    "Tile",
    "Grid",
]
