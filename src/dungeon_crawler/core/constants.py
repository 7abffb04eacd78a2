"""Game-wide constants for the dungeon crawler simulation core.

These are the default values behind the settings classes in
``dungeon_crawler.core.config`` plus a few fixed rules that are not meant
to be tuned.
"""

from __future__ import annotations

# =============================================================================
# Map Generation
# =============================================================================

MAP_WIDTH = 80
"""Default map width in tiles."""

MAP_HEIGHT = 43
"""Default map height in tiles."""

ROOM_MIN_SIZE = 6
"""Smallest room edge length, walls included."""

ROOM_MAX_SIZE = 10
"""Largest room edge length, walls included."""

MAX_ROOMS = 30
"""Room placement attempts per generation pass."""

MAX_GENERATION_RETRIES = 5
"""Generation passes before a level is declared impossible."""

MIN_ROOMS = 2
"""A level needs a spawn room and a distinct stairway room."""

# =============================================================================
# Visibility
# =============================================================================

TORCH_RADIUS = 10
"""Sight radius shared by the player and monsters."""

# =============================================================================
# Player
# =============================================================================

PLAYER_START_HP = 30
PLAYER_START_POWER = 5
PLAYER_START_DEFENSE = 2

INVENTORY_CAPACITY = 26
"""One slot per letter of the alphabet."""

LEVEL_UP_BASE = 200
"""XP needed for the first level-up."""

LEVEL_UP_FACTOR = 150
"""Additional XP needed per character level."""

LEVEL_UP_HP_BONUS = 20
LEVEL_UP_POWER_BONUS = 1
LEVEL_UP_DEFENSE_BONUS = 1

# =============================================================================
# Items & Spells
# =============================================================================

HEAL_AMOUNT = 40

LIGHTNING_DAMAGE = 40
LIGHTNING_RANGE = 5

CONFUSION_DURATION = 5
"""Turns a Confusion scroll keeps its target confused. Re-applying resets it."""

CONFUSION_RANGE = 8

FIREBALL_DAMAGE = 25
FIREBALL_RADIUS = 3
FIREBALL_RANGE = 10

# =============================================================================
# Messages
# =============================================================================

MESSAGE_LOG_SIZE = 100
"""Maximum number of entries kept in the message log."""

RECENT_MESSAGES = 6
"""Entries included in a rendering view."""


__all__ = [
    # Map generation
    "MAP_WIDTH",
    "MAP_HEIGHT",
    "ROOM_MIN_SIZE",
    "ROOM_MAX_SIZE",
    "MAX_ROOMS",
    "MAX_GENERATION_RETRIES",
    "MIN_ROOMS",
    # Visibility
    "TORCH_RADIUS",
    # Player
    "PLAYER_START_HP",
    "PLAYER_START_POWER",
    "PLAYER_START_DEFENSE",
    "INVENTORY_CAPACITY",
    "LEVEL_UP_BASE",
    "LEVEL_UP_FACTOR",
    "LEVEL_UP_HP_BONUS",
    "LEVEL_UP_POWER_BONUS",
    "LEVEL_UP_DEFENSE_BONUS",
    # Items & spells
    "HEAL_AMOUNT",
    "LIGHTNING_DAMAGE",
    "LIGHTNING_RANGE",
    "CONFUSION_DURATION",
    "CONFUSION_RANGE",
    "FIREBALL_DAMAGE",
    "FIREBALL_RADIUS",
    "FIREBALL_RANGE",
    # Messages
    "MESSAGE_LOG_SIZE",
    "RECENT_MESSAGES",
]
