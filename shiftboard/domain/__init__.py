"""Domain layer: board geometry, generation, connectivity, mobility and entities."""

from shiftboard.domain.connectivity import (
    board_is_fully_connected,
    can_remove_group,
    group_adjacency_graph,
    removable_groups,
)
from shiftboard.domain.context import BoardContext, CountdownRoll
from shiftboard.domain.entities import Bomb, Entity, EntityKind, Laser, Robot, Spike
from shiftboard.domain.generator import can_partition, generate, generate_board, valid_group_sizes
from shiftboard.domain.geometry import (
    CARDINAL_DIRECTIONS,
    DOWN,
    LEFT,
    ORIGIN,
    RIGHT,
    UP,
    Coord,
    board_to_world,
    rotate_around,
    world_to_board,
)
from shiftboard.domain.mobility import GroupSnapshot, GroupState, MobilityEngine
from shiftboard.domain.registry import Tile, TileGroup, TileRegistry
from shiftboard.domain.scheduler import TurnScheduler

__all__ = [
    "BoardContext",
    "Bomb",
    "CARDINAL_DIRECTIONS",
    "Coord",
    "CountdownRoll",
    "DOWN",
    "Entity",
    "EntityKind",
    "GroupSnapshot",
    "GroupState",
    "LEFT",
    "Laser",
    "MobilityEngine",
    "ORIGIN",
    "RIGHT",
    "Robot",
    "Spike",
    "Tile",
    "TileGroup",
    "TileRegistry",
    "TurnScheduler",
    "UP",
    "board_is_fully_connected",
    "board_to_world",
    "can_partition",
    "can_remove_group",
    "generate",
    "generate_board",
    "group_adjacency_graph",
    "removable_groups",
    "rotate_around",
    "valid_group_sizes",
    "world_to_board",
]
