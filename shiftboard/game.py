"""Game session: the API the presentation layer drives.

A session owns one generated board and walks it through the phases
``PLAYER_TURN -> ENTITY_TURN -> PLAYER_TURN ...`` until the robot dies.
Every call is synchronous and reports what happened as events; the caller
drains them with :meth:`GameSession.drain_events` and animates at its own pace.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from random import Random

from shiftboard.config.types import EntityConfig, GameConfig, GenerationConfig
from shiftboard.domain import connectivity
from shiftboard.domain.context import BoardContext, CountdownRoll
from shiftboard.domain.entities import Entity, EntityKind
from shiftboard.domain.events import Event, GroupCreated, RoundEnded
from shiftboard.domain.generator import generate_board
from shiftboard.domain.geometry import CARDINAL_DIRECTIONS, LEFT, UP, Coord
from shiftboard.domain.mobility import MobilityEngine
from shiftboard.domain.registry import Tile, TileRegistry
from shiftboard.domain.scheduler import TurnScheduler

logger = logging.getLogger(__name__)

LASER_FACINGS: tuple[Coord, ...] = (UP, LEFT)
"""A laser covers its whole axis, so two facings span both axes."""

ROUND_HAZARDS: tuple[EntityKind, ...] = (EntityKind.LASER, EntityKind.BOMB)


class GamePhase(Enum):
    GENERATE = "generate"
    PLAYER_TURN = "player_turn"
    ENTITY_TURN = "entity_turn"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class RoundResult:
    robot_alive: bool
    events: tuple[Event, ...]
    round_number: int


def default_countdown_roll(rng: Random, rounds: int, config: EntityConfig) -> int:
    """Difficulty curve: countdowns shrink exponentially as rounds pass."""
    value = config.max_countdown * math.exp(-rounds * config.difficulty_decay)
    rolled = math.ceil(rng.uniform(value - 1, value + 1))
    return max(config.min_countdown, min(config.max_countdown, rolled))


class GameSession:
    """One board, its entities and the turn loop around them."""

    def __init__(
        self,
        registry: TileRegistry,
        config: GameConfig | None = None,
        rng: Random | None = None,
        countdown_roll: CountdownRoll = default_countdown_roll,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or Random()
        self.phase = GamePhase.GENERATE
        self.turn_count = 0
        self.ctx = BoardContext(
            registry=registry,
            rng=self.rng,
            config=self.config.entities,
            scheduler=TurnScheduler(),
            countdown_roll=countdown_roll,
        )
        self.mobility = MobilityEngine(self.ctx)
        for group in registry.groups.values():
            self.ctx.emit(GroupCreated(group.group_id, tuple(group.tile_ids)))
        self.phase = GamePhase.PLAYER_TURN

    @classmethod
    def generate(
        cls,
        config: GameConfig | None = None,
        seed: int | None = None,
        *,
        countdown_roll: CountdownRoll = default_countdown_roll,
    ) -> GameSession:
        """Generate a board and populate it with the default spawn policy."""
        config = config or GameConfig()
        rng = Random(seed)
        registry = generate_board(config.generation, rng)
        session = cls(registry, config, rng, countdown_roll)
        session._spawn_initial()
        return session

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def registry(self) -> TileRegistry:
        return self.ctx.registry

    @property
    def entities(self) -> dict[int, Entity]:
        return self.ctx.entities

    @property
    def robot(self) -> Entity | None:
        if self.ctx.robot_id is None:
            return None
        return self.ctx.entities.get(self.ctx.robot_id)

    @property
    def lasers_destroyed(self) -> int:
        return self.ctx.lasers_destroyed

    @property
    def selected_group(self) -> int | None:
        return self.mobility.selected_group

    # ------------------------------------------------------------------
    # Player intents
    # ------------------------------------------------------------------

    def try_select_group(self, group_id: int, anchor_tile_id: int | None = None) -> bool:
        if self.phase is not GamePhase.PLAYER_TURN:
            logger.debug("select %d refused in phase %s", group_id, self.phase.value)
            return False
        return self.mobility.try_select(group_id, anchor_tile_id)

    def try_move_and_rotate(self, group_id: int, target: Coord, rotation_steps: int = 0) -> bool:
        if self.phase is not GamePhase.PLAYER_TURN:
            logger.debug("move %d refused in phase %s", group_id, self.phase.value)
            return False
        return self.mobility.try_move_and_rotate(group_id, target, rotation_steps)

    def commit_selection(self, group_id: int) -> bool:
        if self.phase is not GamePhase.PLAYER_TURN:
            return False
        committed = self.mobility.commit(group_id)
        if committed:
            self.phase = GamePhase.ENTITY_TURN
        return committed

    def cancel_selection(self, group_id: int) -> bool:
        if self.phase is not GamePhase.PLAYER_TURN:
            return False
        return self.mobility.cancel(group_id)

    # ------------------------------------------------------------------
    # Entity turn
    # ------------------------------------------------------------------

    def run_entity_round(self) -> RoundResult:
        """Resolve one round of entity turns and spawn the next hazards."""
        if self.phase is GamePhase.GAME_OVER:
            raise RuntimeError("the game is over")
        if self.mobility.selected_group is not None:
            raise RuntimeError(
                f"group {self.mobility.selected_group} is still selected; commit or cancel first"
            )

        self.phase = GamePhase.ENTITY_TURN
        start = len(self.ctx.events)
        self.ctx.scheduler.run_round(self.ctx)

        alive = self.ctx.robot_alive
        if alive:
            self._spawn_round_hazards()
            self.turn_count += 1
        round_number = self.ctx.round_number + 1
        self.ctx.round_number = round_number
        self.ctx.emit(RoundEnded(round_number, alive))
        self.phase = GamePhase.PLAYER_TURN if alive else GamePhase.GAME_OVER
        if not alive:
            logger.info("robot died in round %d after %d turns", round_number, self.turn_count)
        return RoundResult(alive, tuple(self.ctx.events[start:]), round_number)

    def spawn_entity(
        self,
        kind: EntityKind | str,
        tile_id: int,
        facing: Coord | None = None,
        countdown: int | None = None,
    ) -> Entity:
        """Place a new entity on a free tile; unset fields get kind defaults."""
        kind = EntityKind(kind)
        entities = self.config.entities
        if kind is EntityKind.ROBOT:
            if self.robot is not None:
                raise ValueError("the board already has a robot")
            facing = facing or self.rng.choice(CARDINAL_DIRECTIONS)
            countdown = countdown or entities.robot_countdown
        elif kind is EntityKind.SPIKE:
            facing, countdown = None, None
        elif kind is EntityKind.LASER:
            facing = facing or self.rng.choice(LASER_FACINGS)
            countdown = countdown or self.ctx.roll_countdown()
        else:
            facing = None
            countdown = countdown or self.ctx.roll_countdown()
        return self.ctx.spawn(kind, tile_id, facing=facing, countdown=countdown)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def tile_at(self, coord: Coord) -> Tile | None:
        return self.registry.tile_at(coord)

    def groups_adjacent_to(self, group_id: int) -> list[int]:
        return self.registry.groups_adjacent_to(group_id)

    def cardinal_neighbors_of(self, coord: Coord) -> list[Tile]:
        return self.registry.cardinal_neighbors_of(coord)

    def board_is_fully_connected(self) -> bool:
        return connectivity.board_is_fully_connected(self.registry)

    def removable_groups(self) -> set[int]:
        return connectivity.removable_groups(self.registry)

    def entity_at(self, coord: Coord) -> Entity | None:
        return self.ctx.entity_at(coord)

    def imminent_hazard_cells(self) -> set[Coord]:
        """Cells threatened by entities that fire on the next round."""
        cells: set[Coord] = set()
        for entity in self.ctx.entities.values():
            if entity.countdown == 1:
                cells |= entity.hazard_cells
        return cells

    def drain_events(self) -> list[Event]:
        events, self.ctx.events = self.ctx.events, []
        return events

    # ------------------------------------------------------------------
    # Spawn policy
    # ------------------------------------------------------------------

    def _robot_group(self) -> tuple[int, ...]:
        robot = self.robot
        if robot is None:
            return ()
        return (self.registry.tiles[robot.tile_id].group_id,)

    def _spawn_initial(self) -> None:
        generation: GenerationConfig = self.config.generation
        if self.config.spawn_robot:
            tile = self.registry.random_tile(self.rng, free_only=True)
            if tile is not None:
                self.spawn_entity(EntityKind.ROBOT, tile.tile_id)

        divisor = self.config.entities.spike_divisor
        spikes = generation.total_tiles // divisor if divisor else 0
        for _ in range(spikes):
            tile = self.registry.random_tile(
                self.rng, excluded_groups=self._robot_group(), free_only=True
            )
            if tile is None:
                logger.debug("no free tile left for a spike")
                break
            self.spawn_entity(EntityKind.SPIKE, tile.tile_id)
        logger.info(
            "spawned %d entities on %d tiles", len(self.ctx.entities), self.registry.tile_count
        )

    def _spawn_round_hazards(self) -> None:
        for _ in range(self.config.entities.hazards_per_round):
            tile = self.registry.random_tile(
                self.rng, excluded_groups=self._robot_group(), free_only=True
            )
            if tile is None:
                logger.debug("no free tile left for a hazard")
                return
            self.spawn_entity(self.rng.choice(ROUND_HAZARDS), tile.tile_id)


def generate(
    total_tiles: int,
    min_group_size: int,
    max_group_size: int,
    seed: int,
    *,
    spawn_robot: bool = True,
) -> GameSession:
    """Seeded shortcut for :meth:`GameSession.generate`."""
    config = GameConfig(
        generation=GenerationConfig(
            total_tiles=total_tiles,
            min_group_size=min_group_size,
            max_group_size=max_group_size,
        ),
        spawn_robot=spawn_robot,
    )
    return GameSession.generate(config, seed)
