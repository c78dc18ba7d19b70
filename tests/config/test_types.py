"""Tests for shiftboard.config.types validation."""

from __future__ import annotations

import dataclasses

import pytest

from shiftboard.config import EntityConfig, GameConfig, GenerationConfig


class TestGenerationConfig:
    def test_defaults_are_valid(self) -> None:
        config = GenerationConfig()
        assert config.min_group_size <= config.max_group_size <= config.total_tiles

    def test_is_frozen(self) -> None:
        config = GenerationConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.total_tiles = 10  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"total_tiles": 0}, "total_tiles must be >= 1"),
            ({"min_group_size": 0}, "min_group_size must be >= 1"),
            ({"min_group_size": 5, "max_group_size": 4}, "must be >= min_group_size"),
            ({"max_group_retries": 0}, "max_group_retries must be >= 1"),
        ],
    )
    def test_rejects_invalid_values(self, kwargs: dict[str, int], message: str) -> None:
        with pytest.raises(ValueError, match=message):
            GenerationConfig(**kwargs)

    def test_min_larger_than_total_is_a_generation_concern(self) -> None:
        config = GenerationConfig(total_tiles=3, min_group_size=4, max_group_size=6)
        assert config.total_tiles == 3


class TestEntityConfig:
    def test_defaults_are_valid(self) -> None:
        config = EntityConfig()
        assert config.min_countdown <= config.max_countdown

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"min_countdown": 0}, "min_countdown must be >= 1"),
            ({"min_countdown": 4, "max_countdown": 3}, "max_countdown must be >= min_countdown"),
            ({"robot_countdown": 0}, "robot_countdown must be >= 1"),
            ({"spike_divisor": -1}, "spike_divisor must be >= 0"),
            ({"hazards_per_round": -1}, "hazards_per_round must be >= 0"),
            ({"difficulty_decay": -0.1}, "difficulty_decay must be >= 0.0"),
        ],
    )
    def test_rejects_invalid_values(self, kwargs: dict[str, float], message: str) -> None:
        with pytest.raises(ValueError, match=message):
            EntityConfig(**kwargs)


class TestGameConfig:
    def test_nested_defaults(self) -> None:
        config = GameConfig()
        assert config.generation == GenerationConfig()
        assert config.entities == EntityConfig()
        assert config.spawn_robot is True
