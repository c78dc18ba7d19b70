"""Tests for shiftboard.domain.geometry."""

from __future__ import annotations

import pytest

from shiftboard.config.constants import TILE_FACE_OFFSET
from shiftboard.domain.geometry import (
    DOWN,
    LEFT,
    RIGHT,
    UP,
    board_to_world,
    cardinal_positions,
    rotate_around,
    rotate_direction,
    rotate_offsets,
    world_to_board,
)


class TestCardinalPositions:
    def test_order_is_up_right_down_left(self) -> None:
        assert cardinal_positions((2, 3)) == [(2, 4), (3, 3), (2, 2), (1, 3)]


class TestRotation:
    def test_quarter_turn_is_counter_clockwise(self) -> None:
        assert rotate_around((1, 0), (0, 0), 1) == (0, 1)
        assert rotate_around((0, 1), (0, 0), 1) == (-1, 0)

    def test_rotation_around_pivot(self) -> None:
        assert rotate_around((3, 2), (2, 2), 1) == (2, 3)
        assert rotate_around((3, 2), (2, 2), 2) == (1, 2)

    @pytest.mark.parametrize("steps", [-3, -1, 0, 1, 2, 5])
    def test_steps_are_taken_modulo_four(self, steps: int) -> None:
        point = (4, -1)
        assert rotate_around(point, (1, 1), steps) == rotate_around(point, (1, 1), steps % 4)

    def test_four_turns_are_identity(self) -> None:
        offsets = [(0, 0), (1, 0), (1, 1), (-2, 3)]
        assert rotate_offsets(offsets, 4) == offsets

    def test_rotate_offsets_matches_single_point_rotation(self) -> None:
        offsets = [(1, 2), (-3, 0), (0, -1)]
        rotated = rotate_offsets(offsets, 3)
        assert rotated == [rotate_around(o, (0, 0), 3) for o in offsets]

    def test_direction_cycles_through_cardinals(self) -> None:
        assert rotate_direction(UP, 1) == LEFT
        assert rotate_direction(LEFT, 1) == DOWN
        assert rotate_direction(DOWN, 1) == RIGHT
        assert rotate_direction(RIGHT, 1) == UP


class TestProjection:
    def test_board_to_world(self) -> None:
        assert board_to_world((0, 0)) == (0.0, 0.0, 0.0)
        assert board_to_world((1, 0)) == pytest.approx((0.5, -0.25, -0.05))
        assert board_to_world((2, 3)) == pytest.approx((2.5, 0.25, 0.05))

    @pytest.mark.parametrize("coord", [(0, 0), (3, -2), (-5, 7), (10, 10)])
    def test_world_to_board_inverts_the_tile_face(self, coord: tuple[int, int]) -> None:
        wx, wy, _ = board_to_world(coord)
        assert world_to_board(wx, wy + TILE_FACE_OFFSET) == coord

    def test_world_to_board_snaps_to_nearest_cell(self) -> None:
        wx, wy, _ = board_to_world((2, 1))
        assert world_to_board(wx + 0.1, wy + TILE_FACE_OFFSET - 0.05) == (2, 1)
