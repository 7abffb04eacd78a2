"""Turn scheduling and the player command surface.

The TurnScheduler exclusively owns the GameState. A player command is
either accepted, in which case exactly one game turn passes, or rejected,
in which case nothing changes except a warning in the message log.

An accepted turn runs in a fixed order:

1. The player's action is resolved completely.
2. The player's status counters tick down.
3. Every living monster, in spawn order, decides and acts, then its own
   status counters tick down.
4. The turn counter advances and the player's field of view is applied
   to the grid.

Descending the stairs replaces step 3: monsters on the new level wait
for the next turn. Choosing a level-up reward does not consume a turn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from dungeon_crawler.core import constants
from dungeon_crawler.core.config import Settings, get_settings
from dungeon_crawler.core.exceptions import (
    ActionRejectedError,
    GameOverError,
    InventoryFullError,
    NoLevelUpPendingError,
    NoSuchItemError,
    OutOfBoundsError,
)
from dungeon_crawler.core.logging import bind_context, configure_from_settings, get_logger
from dungeon_crawler.engine.ai import DecisionKind, decide
from dungeon_crawler.engine.combat import AttackResult, resolve_attack, xp_to_next_level
from dungeon_crawler.engine.dice import DiceRoller
from dungeon_crawler.engine.effects import (
    EffectResult,
    EntityTarget,
    Target,
    TargetSelector,
    TileTarget,
    use_item,
)
from dungeon_crawler.engine.generator import DungeonGenerator
from dungeon_crawler.engine.progression import descend, new_game, refresh_fov
from dungeon_crawler.models.entities import Entity, Item
from dungeon_crawler.models.enums import (
    Direction,
    EntityKind,
    LevelUpChoice,
    MessageCategory,
    StatusKind,
    TileKind,
    Visibility,
)
from dungeon_crawler.models.game_state import GameState, LogEntry
from dungeon_crawler.models.grid import Position


logger = get_logger(__name__)


# =============================================================================
# Commands
# =============================================================================


class _Command(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class MoveCommand(_Command):
    """Step in a direction, attack whatever stands there, or wait."""

    action: Literal["move"] = "move"
    direction: Direction


class GetItemCommand(_Command):
    """Pick up the oldest item on the player's tile."""

    action: Literal["get_item"] = "get_item"


class DropItemCommand(_Command):
    action: Literal["drop_item"] = "drop_item"
    item_id: int


class UseItemCommand(_Command):
    """Use an inventory item, optionally with an explicit target."""

    action: Literal["use_item"] = "use_item"
    item_id: int
    target: Target | None = None


class DescendCommand(_Command):
    action: Literal["descend_stairs"] = "descend_stairs"


class LevelUpCommand(_Command):
    """Spend a pending level-up. Does not consume a turn."""

    action: Literal["choose_level_up"] = "choose_level_up"
    choice: LevelUpChoice


class CharacterInfoRequest(_Command):
    action: Literal["request_character_info"] = "request_character_info"


class InventoryRequest(_Command):
    action: Literal["request_inventory"] = "request_inventory"


Command = Annotated[
    MoveCommand
    | GetItemCommand
    | DropItemCommand
    | UseItemCommand
    | DescendCommand
    | LevelUpCommand
    | CharacterInfoRequest
    | InventoryRequest,
    Field(discriminator="action"),
]

TurnCommand = MoveCommand | GetItemCommand | DropItemCommand | UseItemCommand | DescendCommand | LevelUpCommand


# =============================================================================
# Results & Views
# =============================================================================


@dataclass(frozen=True)
class TurnResult:
    """Outcome of a submitted command.

    Attributes:
        accepted: Whether the command was carried out.
        reason: Rejection code when not accepted.
        turn: Turn counter after the command.
        turn_consumed: Whether a game turn passed.
        messages: Messages written while handling the command.
        game_over: Whether the player is dead.
        attack: Player melee outcome, for bump attacks.
        effect: Item outcome, for item use.
    """

    accepted: bool
    turn: int
    reason: str | None = None
    turn_consumed: bool = False
    messages: tuple[LogEntry, ...] = ()
    game_over: bool = False
    attack: AttackResult | None = None
    effect: EffectResult | None = None


@dataclass(frozen=True)
class CharacterInfo:
    """Read-only snapshot of the player character."""

    name: str
    level: int
    xp: int
    xp_to_next_level: int
    hp: int
    max_hp: int
    power: int
    defense: int
    depth: int
    turn: int
    statuses: dict[StatusKind, int] = field(default_factory=dict)
    pending_level_ups: int = 0


@dataclass(frozen=True)
class TileView:
    kind: TileKind
    visibility: Visibility
    corpse: str | None = None


@dataclass(frozen=True)
class EntityView:
    id: int
    kind: EntityKind
    name: str
    glyph: str
    position: Position
    hp: int
    max_hp: int


@dataclass(frozen=True)
class ItemView:
    id: int
    name: str
    glyph: str
    position: Position


@dataclass(frozen=True)
class LevelView:
    """Everything a renderer may show, and nothing it may not.

    Entities and floor items are only listed on currently visible tiles.
    Tiles carry their memory state so renderers can draw remembered
    terrain without its occupants.
    """

    depth: int
    turn: int
    width: int
    height: int
    tiles: tuple[tuple[TileView, ...], ...]
    entities: tuple[EntityView, ...]
    items: tuple[ItemView, ...]
    player: CharacterInfo
    inventory: tuple[Item, ...]
    messages: tuple[LogEntry, ...]
    game_over: bool

    def tile_at(self, pos: Position) -> TileView:
        """Get the tile view at a position.

        Raises:
            OutOfBoundsError: If the position lies outside the map.
        """
        x, y = pos
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBoundsError(
                "Position is outside the map",
                position=pos,
                details={"width": self.width, "height": self.height},
            )
        return self.tiles[y][x]


# =============================================================================
# Scheduler
# =============================================================================


class TurnScheduler:
    """Drives the game one player command at a time.

    Example:
        >>> scheduler = TurnScheduler.start(seed=1234)
        >>> result = scheduler.move(Direction.WAIT)
        >>> result.accepted, result.turn
        (True, 1)
    """

    def __init__(
        self,
        state: GameState,
        *,
        settings: Settings | None = None,
        rng: DiceRoller | None = None,
        generator: DungeonGenerator | None = None,
        selector: TargetSelector | None = None,
    ) -> None:
        """Initialize the scheduler around an existing state.

        Args:
            state: Game state to own.
            settings: Application settings; defaults to the cached settings.
            rng: Randomness for monster behavior. When None, each turn
                draws from a roller seeded by the level seed and turn
                counter, so a restored save replays identically.
            generator: Level generator used when descending.
            selector: Target picker for scrolls used without a target.
        """
        self._state = state
        self._settings = settings or get_settings()
        self._rng = rng
        self._generator = generator or DungeonGenerator(self._settings.dungeon)
        self.selector = selector
        logger.info("TurnScheduler initialized", depth=state.depth, turn=state.turn)

    @classmethod
    def start(
        cls,
        seed: int | None = None,
        *,
        settings: Settings | None = None,
        selector: TargetSelector | None = None,
    ) -> TurnScheduler:
        """Start a new run at depth 1, configuring logging from ``settings``."""
        settings = settings or get_settings()
        configure_from_settings(settings)
        generator = DungeonGenerator(settings.dungeon)
        state = new_game(seed, settings=settings, generator=generator)
        return cls(state, settings=settings, generator=generator, selector=selector)

    @classmethod
    def from_state(
        cls,
        state: GameState,
        *,
        settings: Settings | None = None,
        selector: TargetSelector | None = None,
    ) -> TurnScheduler:
        """Resume a run from a restored state."""
        return cls(state, settings=settings, selector=selector)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def game_over(self) -> bool:
        return self._state.game_over

    # -------------------------------------------------------------------------
    # Command surface
    # -------------------------------------------------------------------------

    def move(self, direction: Direction) -> TurnResult:
        return self.submit_player_action(MoveCommand(direction=direction))

    def get_item(self) -> TurnResult:
        return self.submit_player_action(GetItemCommand())

    def drop_item(self, item_id: int) -> TurnResult:
        return self.submit_player_action(DropItemCommand(item_id=item_id))

    def use_item(self, item_id: int, target: TileTarget | EntityTarget | None = None) -> TurnResult:
        return self.submit_player_action(UseItemCommand(item_id=item_id, target=target))

    def descend_stairs(self) -> TurnResult:
        return self.submit_player_action(DescendCommand())

    def choose_level_up(self, choice: LevelUpChoice) -> TurnResult:
        return self.submit_player_action(LevelUpCommand(choice=choice))

    def submit(self, command: Command) -> TurnResult | CharacterInfo | list[Item]:
        """Dispatch any command, read-only requests included."""
        if isinstance(command, CharacterInfoRequest):
            return self.request_character_info()
        if isinstance(command, InventoryRequest):
            return self.request_inventory()
        return self.submit_player_action(command)

    def submit_player_action(self, command: TurnCommand) -> TurnResult:
        """Resolve a player command and, if accepted, advance the world.

        Args:
            command: The player's command.

        Returns:
            The outcome. Rejections are reported here, not raised.

        Raises:
            GameOverError: If the player is already dead.
        """
        state = self._state
        if state.game_over:
            raise GameOverError("The game is over", entity_id=state.player_id)

        bind_context(depth=state.depth, turn=state.turn)
        written = state.messages.written
        attack: AttackResult | None = None
        effect: EffectResult | None = None

        try:
            match command:
                case MoveCommand(direction=direction):
                    attack = self._player_move(direction)
                case GetItemCommand():
                    self._player_get_item()
                case DropItemCommand(item_id=item_id):
                    self._player_drop_item(item_id)
                case UseItemCommand(item_id=item_id, target=target):
                    effect = use_item(
                        state,
                        state.player_id,
                        item_id,
                        target,
                        self.selector,
                        self._settings,
                    )
                case DescendCommand():
                    descend(state, self._settings, self._generator)
                case LevelUpCommand(choice=choice):
                    self._apply_level_up(choice)
        except ActionRejectedError as exc:
            state.log(exc.message, MessageCategory.WARNING)
            logger.info("Action rejected", action=command.action, code=exc.code, details=exc.details)
            return TurnResult(
                accepted=False,
                reason=exc.code,
                turn=state.turn,
                messages=tuple(state.messages.since(written)),
                game_over=state.game_over,
            )

        consumed = not isinstance(command, LevelUpCommand)
        if consumed:
            self._finish_turn(monsters_act=not isinstance(command, DescendCommand))

        logger.debug("Action resolved", action=command.action, turn=state.turn)
        return TurnResult(
            accepted=True,
            turn=state.turn,
            turn_consumed=consumed,
            messages=tuple(state.messages.since(written)),
            game_over=state.game_over,
            attack=attack,
            effect=effect,
        )

    # -------------------------------------------------------------------------
    # Read-only requests
    # -------------------------------------------------------------------------

    def request_character_info(self) -> CharacterInfo:
        """Snapshot of the player. Never changes the game state."""
        state = self._state
        player = state.player
        return CharacterInfo(
            name=player.name,
            level=player.level,
            xp=player.stats.xp,
            xp_to_next_level=xp_to_next_level(player.level, self._settings.game),
            hp=player.stats.hp,
            max_hp=player.stats.max_hp,
            power=player.attack_power,
            defense=player.defense_value,
            depth=state.depth,
            turn=state.turn,
            statuses=dict(player.statuses),
            pending_level_ups=state.pending_level_ups,
        )

    def request_inventory(self) -> list[Item]:
        """Copies of the carried items. Never changes the game state."""
        return [item.model_copy(deep=True) for item in self._state.player.inventory]

    def view(self) -> LevelView:
        """Build the renderer-facing view of the current level."""
        state = self._state
        grid = state.grid
        tiles = tuple(
            tuple(TileView(kind=t.kind, visibility=t.visibility, corpse=t.corpse) for t in row)
            for row in grid.tiles
        )
        entities = tuple(
            EntityView(
                id=e.id,
                kind=e.kind,
                name=e.name,
                glyph=e.glyph,
                position=e.position,
                hp=e.stats.hp,
                max_hp=e.stats.max_hp,
            )
            for e in state.store.entities.values()
            if e.alive and e.position in grid.visible
        )
        items = tuple(
            ItemView(id=i.id, name=i.name, glyph=i.glyph, position=i.position)
            for i in state.store.floor_items
            if i.position in grid.visible
        )
        return LevelView(
            depth=state.depth,
            turn=state.turn,
            width=grid.width,
            height=grid.height,
            tiles=tiles,
            entities=entities,
            items=items,
            player=self.request_character_info(),
            inventory=tuple(self.request_inventory()),
            messages=tuple(state.messages.recent()),
            game_over=state.game_over,
        )

    # -------------------------------------------------------------------------
    # Player actions
    # -------------------------------------------------------------------------

    def _player_move(self, direction: Direction) -> AttackResult | None:
        state = self._state
        if direction is Direction.WAIT:
            return None
        x, y = state.player.position
        dx, dy = direction.delta
        destination = (x + dx, y + dy)
        state.grid.tile(destination)

        occupant = state.store.entity_at(destination)
        if occupant is not None and state.store.get(occupant).is_monster:
            return resolve_attack(state, state.player_id, occupant, self._settings.game)
        state.store.move_to(state.player_id, destination, state.grid)
        return None

    def _player_get_item(self) -> None:
        state = self._state
        player = state.player
        here = state.store.items_at(player.position)
        if not here:
            raise NoSuchItemError("There is nothing here to pick up")
        capacity = self._settings.game.inventory_capacity
        if len(player.inventory) >= capacity:
            raise InventoryFullError("Your inventory is full", capacity=capacity)
        item = state.store.take_floor_item(here[0].id)
        player.inventory.append(item)
        state.log(f"You picked up a {item.name}!", MessageCategory.INFO)

    def _player_drop_item(self, item_id: int) -> None:
        state = self._state
        player = state.player
        item = player.find_item(item_id)
        if item is None:
            raise NoSuchItemError("You do not carry that item", item_id=item_id)
        player.inventory.remove(item)
        state.store.add_floor_item(item, player.position)
        state.log(f"You dropped a {item.name}.", MessageCategory.INFO)

    def _apply_level_up(self, choice: LevelUpChoice) -> None:
        state = self._state
        if state.pending_level_ups == 0:
            raise NoLevelUpPendingError("You have no level-up to spend")
        stats = state.player.stats
        if choice is LevelUpChoice.CONSTITUTION:
            stats.max_hp += constants.LEVEL_UP_HP_BONUS
            stats.hp += constants.LEVEL_UP_HP_BONUS
        elif choice is LevelUpChoice.STRENGTH:
            stats.power += constants.LEVEL_UP_POWER_BONUS
        else:
            stats.defense += constants.LEVEL_UP_DEFENSE_BONUS
        state.pending_level_ups -= 1
        logger.info("Level-up applied", choice=choice, pending=state.pending_level_ups)

    # -------------------------------------------------------------------------
    # World turn
    # -------------------------------------------------------------------------

    def _finish_turn(self, *, monsters_act: bool) -> None:
        state = self._state
        if not state.game_over:
            self._tick_statuses(state.player)
        if monsters_act:
            rng = self._rng or DiceRoller(seed=state.level_seed + state.turn)
            for entity_id in state.store.turn_order():
                if state.game_over:
                    break
                monster = state.store.get(entity_id)
                if monster.alive and monster.is_monster:
                    self._monster_turn(monster, rng)
        state.turn += 1
        refresh_fov(state, self._settings)

    def _monster_turn(self, monster: Entity, rng: DiceRoller) -> None:
        state = self._state
        decision = decide(state, monster.id, rng, self._settings.game)
        monster.ai = decision.new_state

        if decision.kind is DecisionKind.MOVE:
            state.store.move_to(monster.id, decision.destination, state.grid)
        elif decision.kind is DecisionKind.ATTACK:
            resolve_attack(state, monster.id, decision.target_id, self._settings.game)
        elif decision.kind is DecisionKind.BUMP:
            logger.debug("Monster stumbled into another", entity_id=monster.id, position=decision.destination)

        if monster.alive:
            self._tick_statuses(monster)

    def _tick_statuses(self, entity: Entity) -> None:
        for status, turns in list(entity.statuses.items()):
            if turns > 1:
                entity.statuses[status] = turns - 1
                continue
            del entity.statuses[status]
            if status is StatusKind.CONFUSED:
                self._state.log(
                    f"The {entity.name} is no longer confused!",
                    MessageCategory.MAGIC,
                )


__all__ = [
    "MoveCommand",
    "GetItemCommand",
    "DropItemCommand",
    "UseItemCommand",
    "DescendCommand",
    "LevelUpCommand",
    "CharacterInfoRequest",
    "InventoryRequest",
    "Command",
    "TurnCommand",
    "TurnResult",
    "CharacterInfo",
    "TileView",
    "EntityView",
    "ItemView",
    "LevelView",
    "TurnScheduler",
]
