"""Configuration dataclasses for board generation and entity scheduling.

All frozen dataclasses that parameterise a generated board and the entity
turn loop live here. Validation happens in ``__post_init__`` so an invalid
configuration can never reach the generator or the session.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shiftboard.config.constants import (
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

__all__ = [
    "EntityConfig",
    "GameConfig",
    "GenerationConfig",
]


@dataclass(frozen=True)
class GenerationConfig:
    """Tile budget and group size bounds for one generated board."""

    total_tiles: int = TOTAL_TILES
    min_group_size: int = MIN_GROUP_SIZE
    max_group_size: int = MAX_GROUP_SIZE
    max_group_retries: int = MAX_GROUP_RETRIES
    """Growth attempts per group before the generation attempt is abandoned."""

    def __post_init__(self) -> None:
        if self.total_tiles < 1:
            raise ValueError("total_tiles must be >= 1")
        if self.min_group_size < 1:
            raise ValueError("min_group_size must be >= 1")
        if self.max_group_size < self.min_group_size:
            raise ValueError(
                f"max_group_size ({self.max_group_size}) must be >= "
                f"min_group_size ({self.min_group_size})"
            )
        if self.max_group_retries < 1:
            raise ValueError("max_group_retries must be >= 1")


@dataclass(frozen=True)
class EntityConfig:
    """Countdown ranges and spawn knobs for board entities."""

    min_countdown: int = MIN_COUNTDOWN
    max_countdown: int = MAX_COUNTDOWN
    robot_countdown: int = ROBOT_COUNTDOWN
    spike_divisor: int = SPIKE_DIVISOR
    """One spike per ``spike_divisor`` tiles; 0 disables spikes."""
    hazards_per_round: int = HAZARDS_PER_ROUND
    difficulty_decay: float = DIFFICULTY_DECAY

    def __post_init__(self) -> None:
        if self.min_countdown < 1:
            raise ValueError("min_countdown must be >= 1")
        if self.max_countdown < self.min_countdown:
            raise ValueError("max_countdown must be >= min_countdown")
        if self.robot_countdown < 1:
            raise ValueError("robot_countdown must be >= 1")
        if self.spike_divisor < 0:
            raise ValueError("spike_divisor must be >= 0")
        if self.hazards_per_round < 0:
            raise ValueError("hazards_per_round must be >= 0")
        if self.difficulty_decay < 0.0:
            raise ValueError("difficulty_decay must be >= 0.0")


@dataclass(frozen=True)
class GameConfig:
    """Top-level session configuration."""

    generation: GenerationConfig = field(default_factory=GenerationConfig)
    entities: EntityConfig = field(default_factory=EntityConfig)
    spawn_robot: bool = True
    """Disable to get a bare board (useful for puzzles and tests)."""
