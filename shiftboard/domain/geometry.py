"""Lattice geometry: cardinal neighbourhoods, quarter turns, isometric projection.

Board coordinates live on an unbounded integer lattice and are 4-connected.
Nothing in this module holds state.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from shiftboard.config.constants import (
    ISO_DEPTH,
    ISO_HALF_HEIGHT,
    ISO_HALF_WIDTH,
    TILE_FACE_OFFSET,
)

Coord = tuple[int, int]

ORIGIN: Coord = (0, 0)
UP: Coord = (0, 1)
RIGHT: Coord = (1, 0)
DOWN: Coord = (0, -1)
LEFT: Coord = (-1, 0)

CARDINAL_DIRECTIONS: tuple[Coord, ...] = (UP, RIGHT, DOWN, LEFT)
"""Neighbour order used everywhere a cardinal scan happens."""

# Counter-clockwise quarter turn: (x, y) -> (-y, x)
_QUARTER_TURN = np.array([[0, -1], [1, 0]], dtype=np.int64)


def add(a: Coord, b: Coord) -> Coord:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Coord, b: Coord) -> Coord:
    return (a[0] - b[0], a[1] - b[1])


def cardinal_positions(coord: Coord) -> list[Coord]:
    """Return the four cardinal neighbours of ``coord`` (up, right, down, left)."""
    x, y = coord
    return [(x + dx, y + dy) for dx, dy in CARDINAL_DIRECTIONS]


def rotation_matrix(steps: int) -> np.ndarray:
    """Integer matrix for ``steps`` counter-clockwise quarter turns."""
    return np.linalg.matrix_power(_QUARTER_TURN, steps % 4)


def rotate_offsets(offsets: Iterable[Coord], steps: int) -> list[Coord]:
    """Rotate a batch of offsets about the origin by ``steps`` quarter turns."""
    points = np.asarray(list(offsets), dtype=np.int64).reshape(-1, 2)
    rotated = points @ rotation_matrix(steps).T
    return [(int(x), int(y)) for x, y in rotated]


def rotate_around(point: Coord, pivot: Coord, steps: int) -> Coord:
    """Rotate ``point`` around ``pivot`` by ``steps`` quarter turns."""
    (offset,) = rotate_offsets([sub(point, pivot)], steps)
    return add(offset, pivot)


def rotate_direction(direction: Coord, steps: int) -> Coord:
    """Rotate a facing vector; used to keep entities aligned with their group."""
    return rotate_around(direction, ORIGIN, steps)


def board_to_world(coord: Coord) -> tuple[float, float, float]:
    """Project a lattice cell to isometric world space ``(x, y, depth)``."""
    x, y = coord
    return (
        (x + y) * ISO_HALF_WIDTH,
        (y - x) * ISO_HALF_HEIGHT,
        (y - x) * ISO_DEPTH,
    )


def world_to_board(world_x: float, world_y: float) -> Coord:
    """Return the lattice cell nearest to a world-space point.

    The tile face sits slightly below the sprite anchor, hence the offset.
    """
    world_y -= TILE_FACE_OFFSET
    return (
        int(round(world_x - world_y * 2)),
        int(round(world_y * 2 + world_x)),
    )
