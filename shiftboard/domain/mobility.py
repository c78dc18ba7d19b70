"""Selecting, moving, rotating and committing tile groups.

At most one group is selected at a time. Selecting saves a snapshot so the
move can be undone exactly; a placement is accepted only where it overlaps no
other group and touches at least one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from shiftboard.domain.connectivity import can_remove_group
from shiftboard.domain.context import BoardContext
from shiftboard.domain.events import (
    GroupSelected,
    SelectionCancelled,
    SelectionCommitted,
    TileMoved,
)
from shiftboard.domain.geometry import Coord, add, rotate_direction, rotate_offsets, sub
from shiftboard.domain.registry import TileGroup

logger = logging.getLogger(__name__)


class GroupState(Enum):
    AT_REST = "at_rest"
    SELECTED = "selected"


@dataclass(frozen=True)
class GroupSnapshot:
    """Everything needed to put a selected group back where it was."""

    group_id: int
    coords: dict[int, Coord]  # tile_id -> coord
    facings: dict[int, Coord | None]  # entity_id -> facing
    anchor_tile_id: int
    anchor_order: tuple[int, ...]


class MobilityEngine:
    """Player-driven group mutation gated by the connectivity check."""

    def __init__(self, ctx: BoardContext) -> None:
        self.ctx = ctx
        self.selected_group: int | None = None
        self._snapshot: GroupSnapshot | None = None

    def state_of(self, group_id: int) -> GroupState:
        return GroupState.SELECTED if group_id == self.selected_group else GroupState.AT_REST

    def try_select(self, group_id: int, anchor_tile_id: int | None = None) -> bool:
        registry = self.ctx.registry
        if self.selected_group is not None:
            logger.debug("select %d refused: group %d is selected", group_id, self.selected_group)
            return False
        if group_id not in registry.groups:
            logger.debug("select %d refused: unknown group", group_id)
            return False
        group = registry.groups[group_id]
        if anchor_tile_id is not None and anchor_tile_id not in group.tile_ids:
            logger.debug("select %d refused: tile %d not in group", group_id, anchor_tile_id)
            return False
        if not can_remove_group(registry, group_id):
            logger.debug("select %d refused: removal would split the board", group_id)
            return False

        if anchor_tile_id is not None:
            group.anchor_tile_id = anchor_tile_id
        group.anchor_order = registry.anchor_order(group_id, group.anchor_tile_id)
        self._snapshot = self._take_snapshot(group)
        self.selected_group = group_id
        self.ctx.emit(GroupSelected(group_id, group.anchor_tile_id))
        return True

    def try_move_and_rotate(self, group_id: int, target: Coord, rotation_steps: int = 0) -> bool:
        """Place the selected group with its anchor on ``target``.

        Candidate anchors are tried in ``anchor_order``; the first one that
        yields a legal placement becomes the new anchor.
        """
        if group_id != self.selected_group:
            logger.debug("move %d refused: group is not selected", group_id)
            return False
        registry = self.ctx.registry
        group = registry.groups[group_id]
        if rotation_steps % 4 == 0 and registry.tiles[group.anchor_tile_id].coord == target:
            return True

        for candidate in group.anchor_order:
            placement = self._placement(group, candidate, target, rotation_steps)
            if placement is not None:
                self._apply(group, candidate, placement, rotation_steps)
                return True
        logger.debug("move %d to %s refused: no legal placement", group_id, target)
        return False

    def commit(self, group_id: int) -> bool:
        if group_id != self.selected_group:
            logger.debug("commit %d refused: group is not selected", group_id)
            return False
        if self.is_at_saved_state(group_id):
            logger.debug("commit %d refused: group has not moved", group_id)
            return False
        self.selected_group = None
        self._snapshot = None
        self.ctx.emit(SelectionCommitted(group_id))
        return True

    def cancel(self, group_id: int) -> bool:
        if group_id != self.selected_group or self._snapshot is None:
            logger.debug("cancel %d refused: group is not selected", group_id)
            return False
        snapshot = self._snapshot
        registry = self.ctx.registry
        group = registry.groups[group_id]
        before = {tid: registry.tiles[tid].coord for tid in group.tile_ids}

        registry.move_tiles(group_id, snapshot.coords)
        for entity_id, facing in snapshot.facings.items():
            if entity_id in self.ctx.entities:
                self.ctx.entities[entity_id].facing = facing
        group.anchor_tile_id = snapshot.anchor_tile_id
        group.anchor_order = list(snapshot.anchor_order)
        self._after_move(group, before)

        self.selected_group = None
        self._snapshot = None
        self.ctx.emit(SelectionCancelled(group_id))
        return True

    def is_at_saved_state(self, group_id: int) -> bool:
        if group_id != self.selected_group or self._snapshot is None:
            return True
        registry = self.ctx.registry
        group = registry.groups[group_id]
        if any(registry.tiles[tid].coord != c for tid, c in self._snapshot.coords.items()):
            return False
        return all(
            self.ctx.entities[eid].facing == facing
            for eid, facing in self._snapshot.facings.items()
            if eid in self.ctx.entities and self.ctx.entities[eid].tile_id in group.tile_ids
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _take_snapshot(self, group: TileGroup) -> GroupSnapshot:
        registry = self.ctx.registry
        return GroupSnapshot(
            group_id=group.group_id,
            coords={tid: registry.tiles[tid].coord for tid in group.tile_ids},
            facings={e.entity_id: e.facing for e in self.ctx.entities_on_group(group.group_id)},
            anchor_tile_id=group.anchor_tile_id,
            anchor_order=tuple(group.anchor_order),
        )

    def _placement(
        self, group: TileGroup, candidate: int, target: Coord, rotation_steps: int
    ) -> dict[int, Coord] | None:
        registry = self.ctx.registry
        pivot = registry.tiles[candidate].coord
        offsets = [sub(registry.tiles[tid].coord, pivot) for tid in group.tile_ids]
        rotated = rotate_offsets(offsets, rotation_steps)
        placement = {tid: add(offset, target) for tid, offset in zip(group.tile_ids, rotated)}

        excluded = (group.group_id,)
        if registry.has_tiles_at(placement.values(), excluded_groups=excluded):
            return None
        touches = any(
            registry.cardinal_neighbors_of(coord, excluded_groups=excluded)
            for coord in placement.values()
        )
        return placement if touches else None

    def _apply(
        self,
        group: TileGroup,
        candidate: int,
        placement: dict[int, Coord],
        rotation_steps: int,
    ) -> None:
        registry = self.ctx.registry
        before = {tid: registry.tiles[tid].coord for tid in group.tile_ids}
        registry.move_tiles(group.group_id, placement)
        if rotation_steps % 4:
            for entity in self.ctx.entities_on_group(group.group_id):
                if entity.facing is not None:
                    entity.facing = rotate_direction(entity.facing, rotation_steps)
        if candidate != group.anchor_tile_id:
            group.anchor_tile_id = candidate
            group.anchor_order = registry.anchor_order(group.group_id, candidate)
        self._after_move(group, before)

    def _after_move(self, group: TileGroup, before: dict[int, Coord]) -> None:
        registry = self.ctx.registry
        self.ctx.refresh_hazards(e.entity_id for e in self.ctx.entities_on_group(group.group_id))
        for tid in group.tile_ids:
            to_coord = registry.tiles[tid].coord
            if to_coord != before[tid]:
                self.ctx.emit(TileMoved(tid, group.group_id, before[tid], to_coord))
