"""Custom exception hierarchy for the dungeon crawler simulation core.

This module defines the exception hierarchy used across the engine. All
exceptions inherit from DungeonCrawlerError, enabling unified error handling
at the application boundary while preserving domain-specific context.

Two families matter to callers:

- ActionRejectedError and its subclasses are local, recoverable failures.
  The action that raised them consumes no turn and is reported to the
  player as a message.
- LevelGenerationError is fatal: a level with a reachable stairway could
  not be produced within the retry bound.

Example:
    >>> from dungeon_crawler.core.exceptions import BlockedError
    >>> raise BlockedError("Something is in the way", position=(3, 4))
"""

from __future__ import annotations

from typing import Any


class DungeonCrawlerError(Exception):
    """Base exception for all dungeon crawler errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(DungeonCrawlerError):
    """Base exception for all game engine errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when the game enters an invalid or inconsistent state.

    This typically occurs when an id lookup fails or a state transition
    violates an invariant of the level.
    """

    def __init__(
        self,
        message: str,
        *,
        entity_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with entity context.

        Args:
            message: Human-readable error description.
            entity_id: The entity involved, if any.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity_id is not None:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


class GameOverError(InvalidGameStateError):
    """Raised when a command is submitted after the player has died."""


class LevelGenerationError(GameEngineError):
    """Raised when no valid level could be generated after bounded retries.

    This is the only fatal condition inside the core.
    """

    def __init__(
        self,
        message: str,
        *,
        depth: int | None = None,
        attempts: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize level generation error with generation context.

        Args:
            message: Human-readable error description.
            depth: Dungeon depth that was being generated.
            attempts: Number of generation attempts made.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if depth is not None:
            combined_details["depth"] = depth
        if attempts is not None:
            combined_details["attempts"] = attempts
        super().__init__(message, details=combined_details)


# =============================================================================
# Rejected Actions (recoverable, turn-preserving)
# =============================================================================


class ActionRejectedError(GameEngineError):
    """Base exception for player actions that are refused without cost.

    Subclasses set ``code`` so that callers can branch on the reason
    without string matching.
    """

    code = "rejected"


class OutOfBoundsError(ActionRejectedError):
    """Raised when a coordinate lies outside the grid."""

    code = "out_of_bounds"

    def __init__(
        self,
        message: str,
        *,
        position: tuple[int, int] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize out-of-bounds error with position context.

        Args:
            message: Human-readable error description.
            position: The offending coordinate.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if position is not None:
            combined_details["position"] = position
        super().__init__(message, details=combined_details)


class BlockedError(ActionRejectedError):
    """Raised when a move target is not walkable or is occupied."""

    code = "blocked"

    def __init__(
        self,
        message: str,
        *,
        position: tuple[int, int] | None = None,
        occupant_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize blocked error with position context.

        Args:
            message: Human-readable error description.
            position: The tile that could not be entered.
            occupant_id: Entity standing on that tile, if any.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if position is not None:
            combined_details["position"] = position
        if occupant_id is not None:
            combined_details["occupant_id"] = occupant_id
        super().__init__(message, details=combined_details)


class InventoryFullError(ActionRejectedError):
    """Raised when picking up an item with no inventory capacity left."""

    code = "inventory_full"

    def __init__(
        self,
        message: str,
        *,
        capacity: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize inventory full error.

        Args:
            message: Human-readable error description.
            capacity: The inventory capacity that was reached.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if capacity is not None:
            combined_details["capacity"] = capacity
        super().__init__(message, details=combined_details)


class NoSuchItemError(ActionRejectedError):
    """Raised when a command references an item that is not available."""

    code = "no_such_item"

    def __init__(
        self,
        message: str,
        *,
        item_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize missing item error.

        Args:
            message: Human-readable error description.
            item_id: The referenced item id, if any.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if item_id is not None:
            combined_details["item_id"] = item_id
        super().__init__(message, details=combined_details)


class NoEligibleTargetError(ActionRejectedError):
    """Raised when a targeted effect has nothing valid to affect."""

    code = "no_eligible_target"


class TargetingCancelledError(ActionRejectedError):
    """Raised when the caller aborts target selection."""

    code = "targeting_cancelled"


class ItemNotUsableError(ActionRejectedError):
    """Raised when an item cannot be used right now (e.g. healing at full health)."""

    code = "item_not_usable"


class NotOnStairsError(ActionRejectedError):
    """Raised when descending while not standing on a stairway."""

    code = "not_on_stairs"


class NoLevelUpPendingError(ActionRejectedError):
    """Raised when a level-up choice is submitted without a pending level-up."""

    code = "no_level_up_pending"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(DungeonCrawlerError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(DungeonCrawlerError):
    """Raised when input to an engine operation fails validation."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "DungeonCrawlerError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "GameOverError",
    "LevelGenerationError",
    # Rejected actions
    "ActionRejectedError",
    "OutOfBoundsError",
    "BlockedError",
    "InventoryFullError",
    "NoSuchItemError",
    "NoEligibleTargetError",
    "TargetingCancelledError",
    "ItemNotUsableError",
    "NotOnStairsError",
    "NoLevelUpPendingError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
