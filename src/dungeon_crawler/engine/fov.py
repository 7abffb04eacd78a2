"""Symmetric shadowcasting field of view.

The scan walks the four quadrants around the origin row by row, keeping
the visible arc of each row as a pair of exact rational slopes. A floor
tile is only revealed when its center lies inside the arc, which makes
sight symmetric: if A can see B then B can see A, for any two transparent
tiles. Walls are revealed whenever any part of them is lit.

Out-of-bounds tiles behave as opaque and are never part of the result.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction

from dungeon_crawler.core.config import DistanceMetric
from dungeon_crawler.models.grid import Grid, Position, distance


# Cardinal direction of a quadrant: north, east, south, west
_NORTH, _EAST, _SOUTH, _WEST = range(4)


@dataclass(frozen=True)
class _Quadrant:
    cardinal: int
    origin: Position

    def transform(self, depth: int, col: int) -> Position:
        ox, oy = self.origin
        if self.cardinal == _NORTH:
            return (ox + col, oy - depth)
        if self.cardinal == _SOUTH:
            return (ox + col, oy + depth)
        if self.cardinal == _EAST:
            return (ox + depth, oy + col)
        return (ox - depth, oy + col)


@dataclass
class _Row:
    depth: int
    start_slope: Fraction
    end_slope: Fraction

    def columns(self) -> range:
        min_col = _round_ties_up(self.depth * self.start_slope)
        max_col = _round_ties_down(self.depth * self.end_slope)
        return range(min_col, max_col + 1)

    def next(self) -> _Row:
        return _Row(self.depth + 1, self.start_slope, self.end_slope)

    def is_symmetric(self, col: int) -> bool:
        """Whether the tile center lies inside the visible arc."""
        return self.depth * self.start_slope <= col <= self.depth * self.end_slope


def _slope(depth: int, col: int) -> Fraction:
    return Fraction(2 * col - 1, 2 * depth)


def _round_ties_up(value: Fraction) -> int:
    return math.floor(value + Fraction(1, 2))


def _round_ties_down(value: Fraction) -> int:
    return math.ceil(value - Fraction(1, 2))


def compute_fov(
    grid: Grid,
    origin: Position,
    radius: int,
    metric: DistanceMetric = "euclidean",
) -> frozenset[Position]:
    """Compute the set of positions visible from ``origin``.

    Args:
        grid: Level to look across.
        origin: Viewer position; always part of the result.
        radius: Hard sight cutoff, measured with ``metric``.
        metric: ``"euclidean"`` or ``"chebyshev"``.

    Returns:
        Visible positions, all inside the grid.

    Raises:
        OutOfBoundsError: If ``origin`` is outside the grid.
    """
    grid.tile(origin)
    visible: set[Position] = {origin}
    if radius <= 0:
        return frozenset(visible)

    def blocks(pos: Position) -> bool:
        return not grid.in_bounds(pos) or not grid.is_transparent(pos)

    def reveal(pos: Position) -> None:
        if grid.in_bounds(pos) and distance(origin, pos, metric) <= radius:
            visible.add(pos)

    for cardinal in (_NORTH, _EAST, _SOUTH, _WEST):
        quadrant = _Quadrant(cardinal, origin)
        pending = [_Row(1, Fraction(-1), Fraction(1))]
        while pending:
            row = pending.pop()
            if row.depth > radius:
                continue
            prev_blocked: bool | None = None
            for col in row.columns():
                pos = quadrant.transform(row.depth, col)
                blocked = blocks(pos)
                if blocked or row.is_symmetric(col):
                    reveal(pos)
                if prev_blocked and not blocked:
                    row.start_slope = _slope(row.depth, col)
                if prev_blocked is False and blocked:
                    below = row.next()
                    below.end_slope = _slope(row.depth, col)
                    pending.append(below)
                prev_blocked = blocked
            if prev_blocked is False:
                pending.append(row.next())

    return frozenset(visible)


def can_see(
    grid: Grid,
    viewer: Position,
    target: Position,
    radius: int,
    metric: DistanceMetric = "euclidean",
) -> bool:
    """Whether ``target`` lies in the field of view from ``viewer``."""
    if distance(viewer, target, metric) > radius:
        return False
    return target in compute_fov(grid, viewer, radius, metric)


__all__ = [
    "compute_fov",
    "can_see",
]
