"""Explicit context handed to every entity behaviour.

Bundles the registry, the live entities, the turn scheduler, the RNG and the
event sink so that no behaviour needs module-level managers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from random import Random
from typing import TYPE_CHECKING

from shiftboard.config.types import EntityConfig
from shiftboard.domain.entities import ENTITY_TYPES, Entity, EntityKind
from shiftboard.domain.events import (
    EntityKilled,
    EntityMoved,
    EntitySpawned,
    Event,
)
from shiftboard.domain.geometry import Coord
from shiftboard.domain.registry import TileRegistry

if TYPE_CHECKING:
    from shiftboard.domain.scheduler import TurnScheduler

logger = logging.getLogger(__name__)

CountdownRoll = Callable[[Random, int, EntityConfig], int]
"""(rng, rounds elapsed, entity config) -> fresh countdown."""


@dataclass
class BoardContext:
    """Mutable board state shared by the scheduler and the entities."""

    registry: TileRegistry
    rng: Random
    config: EntityConfig
    scheduler: TurnScheduler
    countdown_roll: CountdownRoll
    entities: dict[int, Entity] = field(default_factory=dict)  # entity_id -> Entity
    events: list[Event] = field(default_factory=list)
    round_number: int = 0
    lasers_destroyed: int = 0
    robot_id: int | None = None
    robot_killed: bool = False
    _next_entity_id: int = 0

    @property
    def robot_alive(self) -> bool:
        return not self.robot_killed

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def roll_countdown(self) -> int:
        return self.countdown_roll(self.rng, self.round_number, self.config)

    def coord_of(self, entity: Entity) -> Coord:
        return self.registry.tiles[entity.tile_id].coord

    def entity_on(self, tile_id: int) -> Entity | None:
        entity_id = self.registry.tiles[tile_id].entity_id
        return None if entity_id is None else self.entities.get(entity_id)

    def entity_at(self, coord: Coord) -> Entity | None:
        tile = self.registry.tile_at(coord)
        return None if tile is None else self.entity_on(tile.tile_id)

    def spawn(
        self,
        kind: EntityKind,
        tile_id: int,
        *,
        facing: Coord | None = None,
        countdown: int | None = None,
    ) -> Entity:
        """Create an entity on a free tile and hand it to the scheduler."""
        if tile_id not in self.registry.tiles:
            raise ValueError(f"unknown tile {tile_id}")
        if self.registry.tiles[tile_id].entity_id is not None:
            raise ValueError(f"tile {tile_id} is already occupied")

        entity_id = self._next_entity_id
        self._next_entity_id += 1
        entity = ENTITY_TYPES[kind](
            entity_id=entity_id,
            tile_id=tile_id,
            countdown=countdown,
            facing=facing,
            spawn_order=entity_id,
        )
        self.registry.place_entity(tile_id, entity_id)
        self.entities[entity_id] = entity
        if kind is EntityKind.ROBOT:
            self.robot_id = entity_id
            self.robot_killed = False
        entity.refresh_hazards(self)
        self.scheduler.on_entity_spawned(entity)
        self.emit(EntitySpawned(entity_id, kind.value, self.coord_of(entity), countdown))
        return entity

    def move_entity(self, entity: Entity, tile_id: int, *, share_tile: bool = False) -> None:
        """Move ``entity`` onto ``tile_id``.

        ``share_tile`` lets the entity stand on an occupied tile without
        claiming it (a robot walking onto a spike).
        """
        from_coord = self.coord_of(entity)
        self.registry.clear_entity(entity.tile_id, entity.entity_id)
        entity.tile_id = tile_id
        if not share_tile:
            self.registry.place_entity(tile_id, entity.entity_id)
        entity.refresh_hazards(self)
        self.emit(EntityMoved(entity.entity_id, from_coord, self.coord_of(entity)))

    def remove_entity(self, entity: Entity) -> None:
        self.registry.clear_entity(entity.tile_id, entity.entity_id)
        self.entities.pop(entity.entity_id, None)
        self.scheduler.on_entity_removed(entity)

    def kill(self, victim: Entity, cause: str) -> bool:
        """Remove ``victim`` and run its death hook; False if it cannot die."""
        if victim.killed or not victim.killable:
            return False
        victim.killed = True
        self.remove_entity(victim)
        if victim.kind is EntityKind.LASER:
            self.lasers_destroyed += 1
        if victim.entity_id == self.robot_id:
            self.robot_killed = True
        logger.debug("%s %d killed by %s", victim.kind.value, victim.entity_id, cause)
        self.emit(EntityKilled(victim.entity_id, victim.kind.value, cause))
        victim.on_kill(self)
        return True

    def refresh_hazards(self, entity_ids: Iterable[int] | None = None) -> None:
        ids = self.entities if entity_ids is None else entity_ids
        for entity_id in ids:
            self.entities[entity_id].refresh_hazards(self)

    def entities_on_group(self, group_id: int) -> list[Entity]:
        return [
            self.entities[tile.entity_id]
            for tile_id in self.registry.groups[group_id].tile_ids
            if (tile := self.registry.tiles[tile_id]).entity_id in self.entities
        ]
