"""Discrete notifications handed to the presentation layer.

Core calls never animate; they return (or queue) these records and the
caller decides how and when to show each one.
"""

from __future__ import annotations

from dataclasses import dataclass

from shiftboard.domain.geometry import Coord


@dataclass(frozen=True)
class GroupCreated:
    group_id: int
    tile_ids: tuple[int, ...]


@dataclass(frozen=True)
class GroupSelected:
    group_id: int
    anchor_tile_id: int


@dataclass(frozen=True)
class SelectionCommitted:
    group_id: int


@dataclass(frozen=True)
class SelectionCancelled:
    group_id: int


@dataclass(frozen=True)
class TileMoved:
    tile_id: int
    group_id: int
    from_coord: Coord
    to_coord: Coord


@dataclass(frozen=True)
class EntitySpawned:
    entity_id: int
    kind: str
    coord: Coord
    countdown: int | None


@dataclass(frozen=True)
class EntityMoved:
    entity_id: int
    from_coord: Coord
    to_coord: Coord


@dataclass(frozen=True)
class EntityTurnResolved:
    """One entity took its turn; ``acted`` is False while it is still counting down."""

    entity_id: int
    countdown: int | None
    acted: bool


@dataclass(frozen=True)
class EntityKilled:
    entity_id: int
    kind: str
    cause: str


@dataclass(frozen=True)
class RoundEnded:
    round_number: int
    robot_alive: bool


Event = (
    GroupCreated
    | GroupSelected
    | SelectionCommitted
    | SelectionCancelled
    | TileMoved
    | EntitySpawned
    | EntityMoved
    | EntityTurnResolved
    | EntityKilled
    | RoundEnded
)
