"""Countdown-ordered turn queue.

Entities act in ascending countdown order; equal countdowns go to the entity
that spawned first. Each round every scheduled entity is decremented exactly
once (unless it dies first or the robot dies and the round ends early).
"""

from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from collections import deque
from typing import TYPE_CHECKING

from shiftboard.domain.events import EntityTurnResolved

if TYPE_CHECKING:
    from shiftboard.domain.context import BoardContext
    from shiftboard.domain.entities import Entity

logger = logging.getLogger(__name__)


class TurnScheduler:
    """Stable priority order of active entities plus the per-round queue."""

    def __init__(self) -> None:
        self._order: list[Entity] = []
        self._pending: deque[Entity] = deque()

    @property
    def order(self) -> list[Entity]:
        return list(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def on_entity_spawned(self, entity: Entity) -> None:
        """Insert after every entity whose countdown is <= the new one's."""
        if entity.countdown is None:
            return
        keys = [e.countdown for e in self._order]
        index = bisect_right(keys, entity.countdown)
        self._order.insert(index, entity)
        entity.turn_order = index - bisect_left(keys, entity.countdown) + 1

    def on_entity_removed(self, entity: Entity) -> None:
        """Drop ``entity`` from both the live order and this round's queue."""
        self._order = [e for e in self._order if e is not entity]
        self._pending = deque(e for e in self._pending if e is not entity)

    def run_round(self, ctx: BoardContext) -> None:
        self._pending = deque(self._order)
        while self._pending:
            entity = self._pending.popleft()
            if entity.countdown is None:
                raise RuntimeError(f"entity {entity.entity_id} has no countdown")
            entity.countdown -= 1
            acted = entity.countdown <= 0
            if acted:
                entity.act(ctx)
            ctx.emit(EntityTurnResolved(entity.entity_id, entity.countdown, acted))
            if not ctx.robot_alive:
                logger.debug("robot died in round %d; ending round early", ctx.round_number)
                break
        self._pending.clear()
        self._order.sort(key=lambda e: (e.countdown, e.spawn_order))
        self._renumber()

    def _renumber(self) -> None:
        previous: int | None = None
        rank = 0
        for entity in self._order:
            rank = rank + 1 if entity.countdown == previous else 1
            entity.turn_order = rank
            previous = entity.countdown
