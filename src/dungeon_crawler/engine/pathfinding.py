"""Grid pathfinding and reachability.

A* runs over 8-way moves with uniform step cost and a Chebyshev heuristic,
which is exact for that move set. Living entities are soft obstacles: a
step onto an occupied tile costs extra, so paths bend around crowds but
still exist when a corridor is plugged. Walls are never crossed.
"""

from __future__ import annotations

import heapq
import itertools
from collections import deque
from collections.abc import Collection

from dungeon_crawler.models.grid import Grid, Position


OCCUPIED_STEP_COST = 10
"""Extra cost of stepping onto a tile held by another living entity."""


def chebyshev(a: Position, b: Position) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def find_path(
    grid: Grid,
    start: Position,
    goal: Position,
    occupied: Collection[Position] = (),
) -> list[Position]:
    """Shortest path from ``start`` to ``goal``.

    Args:
        grid: Level to search.
        start: First position; not part of the returned path.
        goal: Target position; the last step of the path. It may be
            occupied (monsters path to the player they want to attack).
        occupied: Tiles held by living entities other than the mover.

    Returns:
        Steps from the tile after ``start`` up to ``goal``, or an empty list
        when ``start == goal`` or no path exists.
    """
    if start == goal or not grid.in_bounds(goal) or not grid.is_walkable(goal):
        return []

    blocked = set(occupied)
    tie = itertools.count()
    open_heap: list[tuple[int, int, int, Position]] = [(chebyshev(start, goal), next(tie), 0, start)]
    came_from: dict[Position, Position] = {}
    g_score: dict[Position, int] = {start: 0}

    while open_heap:
        _, _, g, pos = heapq.heappop(open_heap)

        if pos == goal:
            path = [pos]
            while path[-1] in came_from and came_from[path[-1]] != start:
                path.append(came_from[path[-1]])
            path.reverse()
            return path

        if g > g_score.get(pos, g):
            continue

        for neighbor in grid.neighbors(pos):
            if not grid.is_walkable(neighbor):
                continue
            step = 1
            if neighbor in blocked and neighbor != goal:
                step += OCCUPIED_STEP_COST
            ng = g + step
            if ng < g_score.get(neighbor, ng + 1):
                g_score[neighbor] = ng
                came_from[neighbor] = pos
                heapq.heappush(open_heap, (ng + chebyshev(neighbor, goal), next(tie), ng, neighbor))

    return []


def next_step(
    grid: Grid,
    start: Position,
    goal: Position,
    occupied: Collection[Position] = (),
) -> Position | None:
    """First step toward ``goal``, or None if there is none to take.

    A step onto an occupied tile is never returned, so a mover whose best
    route is plugged waits instead of pushing through.
    """
    path = find_path(grid, start, goal, occupied)
    if not path:
        return None
    step = path[0]
    if step in occupied:
        return None
    return step


def reachable_from(grid: Grid, start: Position) -> set[Position]:
    """All walkable positions connected to ``start`` by 8-way moves.

    Raises:
        OutOfBoundsError: If ``start`` is outside the grid.
    """
    if not grid.is_walkable(start):
        return set()
    seen = {start}
    frontier = deque([start])
    while frontier:
        pos = frontier.popleft()
        for neighbor in grid.neighbors(pos):
            if neighbor not in seen and grid.is_walkable(neighbor):
                seen.add(neighbor)
                frontier.append(neighbor)
    return seen


__all__ = [
    "OCCUPIED_STEP_COST",
    "chebyshev",
    "find_path",
    "next_step",
    "reachable_from",
]
