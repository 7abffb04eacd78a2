"""Tests for configuration management."""

from __future__ import annotations

import pytest

from dungeon_crawler.core.config import (
    DungeonSettings,
    GameSettings,
    Settings,
    SpellSettings,
    clear_settings_cache,
    get_settings,
)
from dungeon_crawler.core.exceptions import ConfigurationError


class TestDungeonSettings:
    """Tests for DungeonSettings configuration."""

    def test_default_values(self) -> None:
        """Test defaults match the classic map."""
        settings = DungeonSettings()

        assert settings.map_width == 80
        assert settings.map_height == 43
        assert settings.room_min_size == 6
        assert settings.room_max_size == 10
        assert settings.max_rooms == 30
        assert settings.max_generation_retries == 5

    def test_room_bounds_ordered(self) -> None:
        """Test that room_min_size must not exceed room_max_size."""
        with pytest.raises(ConfigurationError) as exc_info:
            DungeonSettings(room_min_size=9, room_max_size=6)

        assert "room_min_size" in str(exc_info.value)

    def test_rooms_fit_map(self) -> None:
        """Test that rooms must be smaller than the map."""
        with pytest.raises(ConfigurationError) as exc_info:
            DungeonSettings(map_width=20, map_height=12, room_max_size=12)

        assert exc_info.value.details["config_key"] == "room_max_size"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test environment variables override defaults."""
        monkeypatch.setenv("DUNGEON_CRAWLER_DUNGEON_MAP_WIDTH", "60")

        assert DungeonSettings().map_width == 60


class TestGameSettings:
    """Tests for GameSettings configuration."""

    def test_default_values(self) -> None:
        """Test default turn rules and player stats."""
        settings = GameSettings()

        assert settings.torch_radius == 10
        assert settings.distance_metric == "euclidean"
        assert settings.inventory_capacity == 26
        assert (settings.player_max_hp, settings.player_power, settings.player_defense) == (30, 5, 2)
        assert (settings.level_up_base, settings.level_up_factor) == (200, 150)

    def test_chebyshev_metric(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the distance metric can be switched."""
        monkeypatch.setenv("DUNGEON_CRAWLER_GAME_DISTANCE_METRIC", "chebyshev")

        assert GameSettings().distance_metric == "chebyshev"


class TestSpellSettings:
    """Tests for SpellSettings configuration."""

    def test_default_values(self) -> None:
        """Test default spell strengths."""
        spells = SpellSettings()

        assert spells.heal_amount == 40
        assert (spells.lightning_damage, spells.lightning_range) == (40, 5)
        assert (spells.confusion_turns, spells.confusion_range) == (5, 8)
        assert (spells.fireball_damage, spells.fireball_radius) == (25, 3)


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self) -> None:
        """Test default settings initialization."""
        settings = Settings()

        assert settings.app_name == "Dungeon Crawler"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert isinstance(settings.dungeon, DungeonSettings)
        assert isinstance(settings.game, GameSettings)
        assert isinstance(settings.spells, SpellSettings)

    def test_env_vars(self, mock_env_vars: dict[str, str]) -> None:
        """Test top-level and nested values come from the environment."""
        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.game.torch_radius == 6
        assert settings.dungeon.map_width == 60


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_returns_settings_instance(self) -> None:
        """Test that get_settings returns a Settings instance."""
        assert isinstance(get_settings(), Settings)

    def test_caching(self) -> None:
        """Test that settings are cached."""
        assert get_settings() is get_settings()

    def test_cache_clear(self) -> None:
        """Test that clearing the cache yields a fresh instance."""
        first = get_settings()
        clear_settings_cache()

        assert get_settings() is not first

    def test_invalid_configuration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test invalid environment configuration raises ConfigurationError."""
        monkeypatch.setenv("DUNGEON_CRAWLER_DUNGEON_ROOM_MIN_SIZE", "9")
        monkeypatch.setenv("DUNGEON_CRAWLER_DUNGEON_ROOM_MAX_SIZE", "7")

        with pytest.raises(ConfigurationError):
            get_settings()

    def test_malformed_value_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test pydantic validation failures are wrapped."""
        monkeypatch.setenv("DUNGEON_CRAWLER_GAME_TORCH_RADIUS", "not-a-number")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "original_error" in exc_info.value.details
