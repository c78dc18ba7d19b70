"""Configuration layer: constants and typed config dataclasses."""

from shiftboard.config.constants import (
    BOMB_RADIUS,
    DIFFICULTY_DECAY,
    HAZARDS_PER_ROUND,
    MAX_COUNTDOWN,
    MAX_GROUP_RETRIES,
    MAX_GROUP_SIZE,
    MIN_COUNTDOWN,
    MIN_GROUP_SIZE,
    ROBOT_COUNTDOWN,
    SPIKE_DIVISOR,
    TOTAL_TILES,
)
from shiftboard.config.types import EntityConfig, GameConfig, GenerationConfig

__all__ = [
    "BOMB_RADIUS",
    "DIFFICULTY_DECAY",
    "EntityConfig",
    "GameConfig",
    "GenerationConfig",
    "HAZARDS_PER_ROUND",
    "MAX_COUNTDOWN",
    "MAX_GROUP_RETRIES",
    "MAX_GROUP_SIZE",
    "MIN_COUNTDOWN",
    "MIN_GROUP_SIZE",
    "ROBOT_COUNTDOWN",
    "SPIKE_DIVISOR",
    "TOTAL_TILES",
]
