"""Tests for structured logging setup."""

from __future__ import annotations

import json
from pathlib import Path

from dungeon_crawler.core.config import DungeonSettings, Settings
from dungeon_crawler.core.logging import (
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    get_logger,
)
from dungeon_crawler.engine.turn_manager import TurnScheduler


def _json_lines(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_lines_to_file(self, tmp_path: Path) -> None:
        """Test JSON output carries the event, level, app and bound context."""
        log_file = tmp_path / "game.log"
        configure_logging(level="INFO", json_format=True, log_file=log_file)
        logger = get_logger("dungeon_crawler.engine.generator")

        bind_context(depth=3, turn=17)
        logger.info("Level generated", rooms=9)
        logger.debug("Room rejected")

        [line] = _json_lines(log_file)
        assert line["event"] == "Level generated"
        assert line["level"] == "info"
        assert line["app"] == "dungeon_crawler"
        assert line["rooms"] == 9
        assert line["depth"] == 3
        assert line["turn"] == 17
        assert "timestamp" in line

    def test_clear_context(self, tmp_path: Path) -> None:
        """Test cleared context keys stop appearing."""
        log_file = tmp_path / "game.log"
        configure_logging(json_format=True, log_file=log_file)
        logger = get_logger(__name__)

        bind_context(depth=2)
        clear_context()
        logger.info("Descended")

        [line] = _json_lines(log_file)
        assert "depth" not in line

    def test_console_text_to_file(self, tmp_path: Path) -> None:
        """Test console rendering respects the level filter."""
        log_file = tmp_path / "game.log"
        configure_logging(level="WARNING", log_file=log_file)
        logger = get_logger(__name__)

        logger.info("Action resolved")
        logger.warning("Generation retry")

        text = log_file.read_text(encoding="utf-8")
        assert "Generation retry" in text
        assert "Action resolved" not in text


class TestConfigureFromSettings:
    """Tests for settings-driven logging."""

    def test_debug_forces_debug_level(self, tmp_path: Path) -> None:
        """Test debug mode emits DEBUG lines tagged with the app name."""
        log_file = tmp_path / "run.log"
        settings = Settings(
            app_name="Crypt",
            debug=True,
            log_level="ERROR",
            json_logs=True,
            log_file=log_file,
        )

        configure_from_settings(settings)
        get_logger(__name__).debug("Monster decided", entity_id=4)

        [line] = _json_lines(log_file)
        assert line["event"] == "Monster decided"
        assert line["app"] == "Crypt"

    def test_scheduler_start_configures_logging(
        self, small_dungeon_settings: DungeonSettings, tmp_path: Path
    ) -> None:
        """Test starting a run writes its log where the settings say."""
        log_file = tmp_path / "run.log"
        settings = Settings(dungeon=small_dungeon_settings, json_logs=True, log_file=log_file)

        TurnScheduler.start(seed=5, settings=settings)

        events = [line["event"] for line in _json_lines(log_file)]
        assert "TurnScheduler initialized" in events
