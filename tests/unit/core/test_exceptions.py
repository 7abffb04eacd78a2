"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from dungeon_crawler.core.exceptions import (
    ActionRejectedError,
    BlockedError,
    ConfigurationError,
    DungeonCrawlerError,
    GameEngineError,
    GameOverError,
    InvalidGameStateError,
    InventoryFullError,
    ItemNotUsableError,
    LevelGenerationError,
    NoEligibleTargetError,
    NoLevelUpPendingError,
    NoSuchItemError,
    NotOnStairsError,
    OutOfBoundsError,
    TargetingCancelledError,
    ValidationError,
)


class TestDungeonCrawlerError:
    """Tests for the base DungeonCrawlerError exception."""

    def test_basic_message(self) -> None:
        """Test exception with basic message."""
        exc = DungeonCrawlerError("Test error message")
        assert exc.message == "Test error message"
        assert exc.details == {}
        assert str(exc) == "Test error message"

    def test_with_details(self) -> None:
        """Test exception with additional details."""
        exc = DungeonCrawlerError("Test error", details={"key": "value", "count": 42})
        assert exc.details == {"key": "value", "count": 42}
        assert "key='value'" in str(exc)
        assert "count=42" in str(exc)

    def test_repr(self) -> None:
        """Test exception repr output."""
        repr_str = repr(DungeonCrawlerError("Test", details={"x": 1}))
        assert "DungeonCrawlerError" in repr_str
        assert "Test" in repr_str
        assert "x" in repr_str


class TestRejectedActions:
    """Tests for recoverable, turn-preserving rejections."""

    @pytest.mark.parametrize(
        ("exc_type", "code"),
        [
            (OutOfBoundsError, "out_of_bounds"),
            (BlockedError, "blocked"),
            (InventoryFullError, "inventory_full"),
            (NoSuchItemError, "no_such_item"),
            (NoEligibleTargetError, "no_eligible_target"),
            (TargetingCancelledError, "targeting_cancelled"),
            (ItemNotUsableError, "item_not_usable"),
            (NotOnStairsError, "not_on_stairs"),
            (NoLevelUpPendingError, "no_level_up_pending"),
        ],
    )
    def test_codes(self, exc_type: type[ActionRejectedError], code: str) -> None:
        """Test every rejection carries a distinct code and shares the base."""
        exc = exc_type("nope")
        assert exc.code == code
        assert isinstance(exc, ActionRejectedError)
        assert isinstance(exc, GameEngineError)

    def test_blocked_error_context(self) -> None:
        """Test BlockedError records position and occupant."""
        exc = BlockedError("Someone is in the way", position=(3, 4), occupant_id=7)
        assert exc.details == {"position": (3, 4), "occupant_id": 7}

    def test_out_of_bounds_context(self) -> None:
        """Test OutOfBoundsError merges position into details."""
        exc = OutOfBoundsError("Outside", position=(-1, 0), details={"width": 10})
        assert exc.details == {"width": 10, "position": (-1, 0)}

    def test_inventory_full_capacity(self) -> None:
        """Test InventoryFullError records capacity."""
        assert InventoryFullError("Full", capacity=26).details["capacity"] == 26

    def test_no_such_item_id(self) -> None:
        """Test NoSuchItemError records the item id, zero included."""
        assert NoSuchItemError("Missing", item_id=0).details["item_id"] == 0


class TestEngineErrors:
    """Tests for non-recoverable engine errors."""

    def test_game_over_is_invalid_state(self) -> None:
        """Test GameOverError is an InvalidGameStateError, not a rejection."""
        exc = GameOverError("The game is over", entity_id=0)
        assert isinstance(exc, InvalidGameStateError)
        assert not isinstance(exc, ActionRejectedError)
        assert exc.details["entity_id"] == 0

    def test_level_generation_error(self) -> None:
        """Test LevelGenerationError records depth and attempts."""
        exc = LevelGenerationError("No level", depth=3, attempts=5)
        assert exc.details == {"depth": 3, "attempts": 5}
        assert not isinstance(exc, ActionRejectedError)


class TestConfigurationExceptions:
    """Tests for configuration and validation exceptions."""

    def test_configuration_error_key(self) -> None:
        """Test ConfigurationError with config key."""
        exc = ConfigurationError("Bad value", config_key="room_min_size")
        assert exc.details["config_key"] == "room_min_size"

    def test_validation_error_fields(self) -> None:
        """Test ValidationError with field context."""
        exc = ValidationError("Invalid depth", field_name="depth", invalid_value=0)
        assert exc.details["field_name"] == "depth"
        assert exc.details["invalid_value"] == 0
        assert isinstance(exc, DungeonCrawlerError)
