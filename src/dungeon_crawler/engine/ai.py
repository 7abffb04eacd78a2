"""Monster decision making.

Each monster carries an AI memory that moves between three states:

    Idle --(sees player)--> Chasing --(adjacent)--> Attacking
      ^                        |                        |
      +--(last known spot      +<--(player steps away)--+
          reached, no sight)

``decide`` looks at the game state and returns an ``AIDecision`` without
applying it; the TurnScheduler carries the decision out. The only side
effect of deciding is drawing from the RNG for confused movement.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from dungeon_crawler.core.config import GameSettings
from dungeon_crawler.core.exceptions import InvalidGameStateError
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.engine.fov import can_see
from dungeon_crawler.engine.pathfinding import find_path, next_step
from dungeon_crawler.models.entities import (
    AIState,
    AttackingState,
    ChasingState,
    Entity,
    IdleState,
)
from dungeon_crawler.models.enums import StatusKind
from dungeon_crawler.models.game_state import GameState
from dungeon_crawler.models.grid import Position, is_adjacent


class DecisionKind(StrEnum):
    """What a monster does with its turn."""

    WAIT = "wait"
    MOVE = "move"
    ATTACK = "attack"
    BUMP = "bump"
    """Stumbled into another monster; nothing happens."""


@dataclass(frozen=True)
class AIDecision:
    """A monster's chosen action for one turn.

    Attributes:
        kind: Action to take.
        new_state: AI memory after this turn.
        destination: Tile to step onto, for MOVE and BUMP.
        target_id: Entity to attack, for ATTACK.
    """

    kind: DecisionKind
    new_state: AIState
    destination: Position | None = None
    target_id: int | None = None


def decide(
    state: GameState,
    monster_id: int,
    rng: DiceRoller,
    settings: GameSettings,
) -> AIDecision:
    """Choose what a monster does this turn.

    Args:
        state: Current game state; not modified.
        monster_id: The acting monster.
        rng: Randomness for confused movement.
        settings: Sight radius and distance metric.

    Returns:
        The decision to execute.

    Raises:
        InvalidGameStateError: If the monster is unknown or dead.
    """
    monster = state.store.get(monster_id)
    if not monster.alive:
        raise InvalidGameStateError("Dead monsters do not act", entity_id=monster_id)

    if monster.has_status(StatusKind.CONFUSED):
        return _stumble(state, monster, rng)

    player = state.player
    occupied = _occupied_tiles(state, monster)

    if player.alive and can_see(
        state.grid, monster.position, player.position, settings.torch_radius, settings.distance_metric
    ):
        if is_adjacent(monster.position, player.position):
            return AIDecision(
                kind=DecisionKind.ATTACK,
                new_state=AttackingState(target_id=player.id, last_seen=player.position),
                target_id=player.id,
            )
        chasing = ChasingState(target=player.position)
        step = next_step(state.grid, monster.position, player.position, occupied)
        if step is None:
            return AIDecision(kind=DecisionKind.WAIT, new_state=chasing)
        return AIDecision(kind=DecisionKind.MOVE, new_state=chasing, destination=step)

    memory = monster.ai
    if isinstance(memory, AttackingState):
        memory = ChasingState(target=memory.last_seen)
    if isinstance(memory, ChasingState):
        return _pursue(state, monster, memory, occupied)
    return AIDecision(kind=DecisionKind.WAIT, new_state=IdleState())


def _pursue(
    state: GameState,
    monster: Entity,
    memory: ChasingState,
    occupied: set[Position],
) -> AIDecision:
    """Walk toward the last known player position."""
    if monster.position == memory.target:
        return AIDecision(kind=DecisionKind.WAIT, new_state=IdleState())
    if is_adjacent(monster.position, memory.target) and memory.target in occupied:
        return AIDecision(kind=DecisionKind.WAIT, new_state=IdleState())
    if not find_path(state.grid, monster.position, memory.target, occupied):
        return AIDecision(kind=DecisionKind.WAIT, new_state=IdleState())
    step = next_step(state.grid, monster.position, memory.target, occupied)
    if step is None:
        return AIDecision(kind=DecisionKind.WAIT, new_state=memory)
    if step == memory.target:
        return AIDecision(kind=DecisionKind.MOVE, new_state=IdleState(), destination=step)
    return AIDecision(kind=DecisionKind.MOVE, new_state=memory, destination=step)


def _stumble(state: GameState, monster: Entity, rng: DiceRoller) -> AIDecision:
    """Confused movement: a uniformly random walkable neighbor."""
    options = [pos for pos in state.grid.neighbors(monster.position) if state.grid.is_walkable(pos)]
    if not options:
        return AIDecision(kind=DecisionKind.WAIT, new_state=monster.ai)

    destination = rng.choice(options)
    occupant = state.store.entity_at(destination)
    if occupant is None:
        return AIDecision(kind=DecisionKind.MOVE, new_state=monster.ai, destination=destination)
    if occupant == state.player_id:
        return AIDecision(
            kind=DecisionKind.ATTACK,
            new_state=monster.ai,
            destination=destination,
            target_id=occupant,
        )
    return AIDecision(kind=DecisionKind.BUMP, new_state=monster.ai, destination=destination)


def _occupied_tiles(state: GameState, monster: Entity) -> set[Position]:
    return {
        entity.position
        for entity in state.store.entities.values()
        if entity.alive and entity.id != monster.id
    }


__all__ = [
    "DecisionKind",
    "AIDecision",
    "decide",
]
