"""Board entities: the robot and the hazards it has to survive.

Entities sit on tiles, not coordinates, so they ride along when the player
moves a group. Every behaviour works against an explicit ``BoardContext``;
entities never reach for global state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from shiftboard.config.constants import BOMB_RADIUS
from shiftboard.domain.geometry import Coord, add

if TYPE_CHECKING:
    from shiftboard.domain.context import BoardContext


class EntityKind(Enum):
    ROBOT = "robot"
    SPIKE = "spike"
    LASER = "laser"
    BOMB = "bomb"


@dataclass(eq=False)
class Entity:
    """Base entity; subclasses override the behaviour hooks."""

    entity_id: int
    tile_id: int
    countdown: int | None = None  # None -> passive, never scheduled
    facing: Coord | None = None
    spawn_order: int = 0
    turn_order: int = 0  # 1-based rank among entities sharing a countdown
    hazard_cells: frozenset[Coord] = frozenset()
    killed: bool = False

    kind: ClassVar[EntityKind]
    killable: ClassVar[bool] = True

    @property
    def passive(self) -> bool:
        return self.countdown is None

    def coord(self, ctx: BoardContext) -> Coord:
        return ctx.registry.tiles[self.tile_id].coord

    def compute_hazard_cells(self, ctx: BoardContext) -> frozenset[Coord]:
        return frozenset()

    def refresh_hazards(self, ctx: BoardContext) -> None:
        self.hazard_cells = self.compute_hazard_cells(ctx)

    def act(self, ctx: BoardContext) -> None:
        """Fire once the countdown has expired."""

    def on_kill(self, ctx: BoardContext) -> None:
        """Hook run after the entity has been removed from the board."""


def _kill_on_cells(ctx: BoardContext, cells: frozenset[Coord], cause: str) -> None:
    victims = [
        ctx.entities[tile.entity_id]
        for tile in ctx.registry.tiles_at(sorted(cells), only_occupied=True)
        if tile.entity_id in ctx.entities
    ]
    for victim in victims:
        ctx.kill(victim, cause)


@dataclass(eq=False)
class Robot(Entity):
    """Walks one cell along its facing every round."""

    kind: ClassVar[EntityKind] = EntityKind.ROBOT

    def act(self, ctx: BoardContext) -> None:
        if self.facing is None:
            raise RuntimeError(f"robot {self.entity_id} has no facing")
        self.countdown = ctx.config.robot_countdown
        ahead = ctx.registry.tile_at(add(self.coord(ctx), self.facing))
        if ahead is None:
            ctx.kill(self, "fell")
            return
        blocker = ctx.entity_on(ahead.tile_id)
        if blocker is None:
            ctx.move_entity(self, ahead.tile_id)
        elif blocker.kind is EntityKind.SPIKE:
            ctx.move_entity(self, ahead.tile_id, share_tile=True)
            ctx.kill(self, "spike")


@dataclass(eq=False)
class Spike(Entity):
    """Passive trap on its own cell; lethal to step on, indestructible."""

    kind: ClassVar[EntityKind] = EntityKind.SPIKE
    killable: ClassVar[bool] = False

    def compute_hazard_cells(self, ctx: BoardContext) -> frozenset[Coord]:
        return frozenset({self.coord(ctx)})


@dataclass(eq=False)
class Laser(Entity):
    """Fires along its axis in both directions, then recharges."""

    kind: ClassVar[EntityKind] = EntityKind.LASER

    def compute_hazard_cells(self, ctx: BoardContext) -> frozenset[Coord]:
        if self.facing is None:
            return frozenset()
        x, y = self.coord(ctx)
        dx, dy = self.facing
        reach = max(ctx.registry.tile_count - 1, 0)
        cells: set[Coord] = set()
        for step in range(1, reach + 1):
            cells.add((x + dx * step, y + dy * step))
            cells.add((x - dx * step, y - dy * step))
        return frozenset(cells)

    def act(self, ctx: BoardContext) -> None:
        _kill_on_cells(ctx, self.hazard_cells, "laser")
        self.countdown = ctx.roll_countdown()


@dataclass(eq=False)
class Bomb(Entity):
    """Blows up its 3x3 neighbourhood, itself included."""

    kind: ClassVar[EntityKind] = EntityKind.BOMB

    def compute_hazard_cells(self, ctx: BoardContext) -> frozenset[Coord]:
        x, y = self.coord(ctx)
        span = range(-BOMB_RADIUS, BOMB_RADIUS + 1)
        return frozenset((x + dx, y + dy) for dx in span for dy in span)

    def act(self, ctx: BoardContext) -> None:
        self.countdown = 0
        _kill_on_cells(ctx, self.hazard_cells, "bomb")

    def on_kill(self, ctx: BoardContext) -> None:
        # Chain reaction: a bomb caught in a blast before its timer ran out.
        if self.countdown is not None and self.countdown > 0:
            self.countdown = 0
            _kill_on_cells(ctx, self.hazard_cells, "bomb")


ENTITY_TYPES: dict[EntityKind, type[Entity]] = {
    EntityKind.ROBOT: Robot,
    EntityKind.SPIKE: Spike,
    EntityKind.LASER: Laser,
    EntityKind.BOMB: Bomb,
}
