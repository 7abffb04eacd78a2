"""Game state models for the dungeon crawler simulation core.

This module defines the state owned by the turn scheduler: the message
log and the GameState container that bundles the current level with the
run-wide counters. GameState round-trips through ``model_dump_json`` /
``model_validate_json`` so a save layer can persist and restore it exactly.

Models:
    LogEntry: A single player-facing message.
    MessageLog: Bounded list of messages.
    GameState: Everything needed to resume a run.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from dungeon_crawler.core import constants
from dungeon_crawler.models.entities import Entity
from dungeon_crawler.models.enums import MessageCategory
from dungeon_crawler.models.grid import Grid
from dungeon_crawler.models.store import EntityStore


# =============================================================================
# Message Log
# =============================================================================


class LogEntry(BaseModel):
    """A player-facing message.

    Attributes:
        turn: Turn counter when the message was written.
        text: Message text.
        category: Category used by renderers for coloring.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    turn: int = Field(ge=0)
    text: str
    category: MessageCategory = MessageCategory.INFO


class MessageLog(BaseModel):
    """Bounded, oldest-first list of messages.

    Example:
        >>> log = MessageLog(max_size=2)
        >>> _ = log.add("You descend.", turn=3)
        >>> log.recent(1)[0].text
        'You descend.'
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    max_size: Annotated[int, Field(ge=1)] = constants.MESSAGE_LOG_SIZE
    entries: list[LogEntry] = Field(default_factory=list)
    written: int = Field(default=0, ge=0, description="Messages ever added, trimmed ones included")

    def add(
        self,
        text: str,
        category: MessageCategory = MessageCategory.INFO,
        *,
        turn: int = 0,
    ) -> LogEntry:
        entry = LogEntry(turn=turn, text=text, category=category)
        self.entries.append(entry)
        self.written += 1
        overflow = len(self.entries) - self.max_size
        if overflow > 0:
            del self.entries[:overflow]
        return entry

    def recent(self, count: int = constants.RECENT_MESSAGES) -> list[LogEntry]:
        """The last ``count`` messages, oldest first."""
        if count <= 0:
            return []
        return list(self.entries[-count:])

    def since(self, written: int) -> list[LogEntry]:
        """Messages added after the log had seen ``written`` messages."""
        fresh = self.written - written
        if fresh <= 0:
            return []
        return list(self.entries[-fresh:])

    def __len__(self) -> int:
        return len(self.entries)


# =============================================================================
# Game State
# =============================================================================


class GameState(BaseModel):
    """Complete state of a run, owned by the TurnScheduler.

    Attributes:
        depth: Current dungeon depth, starting at 1.
        turn: Turns elapsed since the start of the run.
        game_seed: Seed the per-level seeds are derived from.
        level_seed: Seed the current level was generated from.
        grid: Tile grid of the current level.
        store: Entities and floor items of the current level.
        player_id: Id of the player entity in ``store``.
        messages: Player-facing message log.
        game_over: Set once the player has died.
        pending_level_ups: Level-ups earned but not yet chosen.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    depth: int = Field(default=1, ge=1)
    turn: int = Field(default=0, ge=0)
    game_seed: int = 0
    level_seed: int = 0
    grid: Grid
    store: EntityStore
    player_id: int = Field(ge=0)
    messages: MessageLog = Field(default_factory=MessageLog)
    game_over: bool = False
    pending_level_ups: int = Field(default=0, ge=0)

    @property
    def player(self) -> Entity:
        return self.store.get(self.player_id)

    @property
    def on_stairs(self) -> bool:
        """Whether the player is standing on the stairway."""
        return self.grid.stairs is not None and self.player.position == self.grid.stairs

    def log(self, text: str, category: MessageCategory = MessageCategory.INFO) -> LogEntry:
        """Write a message stamped with the current turn."""
        return self.messages.add(text, category, turn=self.turn)


__all__ = [
    "LogEntry",
    "MessageLog",
    "GameState",
]
