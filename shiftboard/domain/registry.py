"""Tile/group registry: the single source of truth for what occupies what.

The registry owns three integer-keyed arenas (tiles, groups, and the
coordinate grid) plus a group-adjacency cache that is refreshed incrementally
whenever a group is added or moved. Every spatial query in the package goes
through here; nothing re-derives adjacency geometrically.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from random import Random

import numpy as np

from shiftboard.domain.geometry import Coord, board_to_world, cardinal_positions


@dataclass
class Tile:
    """One occupied lattice cell."""

    tile_id: int
    coord: Coord
    group_id: int
    entity_id: int | None = None


@dataclass
class TileGroup:
    """A rigid, 4-connected cluster of tiles."""

    group_id: int
    tile_ids: list[int]
    anchor_tile_id: int
    anchor_order: list[int] = field(default_factory=list)
    """Anchor candidates tried in order when a placement does not fit."""

    def __len__(self) -> int:
        return len(self.tile_ids)


@dataclass
class TileRegistry:
    """Hash-map backed board: coordinate -> tile -> group."""

    grid: dict[Coord, int] = field(default_factory=dict)  # coord -> tile_id
    tiles: dict[int, Tile] = field(default_factory=dict)  # tile_id -> Tile
    groups: dict[int, TileGroup] = field(default_factory=dict)  # group_id -> TileGroup
    adjacency: dict[int, set[int]] = field(default_factory=dict)  # group_id -> neighbour ids
    _next_tile_id: int = 0
    _next_group_id: int = 0

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    @property
    def group_count(self) -> int:
        return len(self.groups)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_group(self, coords: Sequence[Coord]) -> TileGroup:
        """Materialise a group from free coordinates; the first one is the anchor."""
        if not coords:
            raise ValueError("a group needs at least one tile")
        if len(set(coords)) != len(coords):
            raise ValueError("group coordinates must be distinct")
        occupied = [c for c in coords if c in self.grid]
        if occupied:
            raise ValueError(f"coordinates already occupied: {occupied}")

        group_id = self._next_group_id
        self._next_group_id += 1
        tile_ids: list[int] = []
        for coord in coords:
            tile = Tile(tile_id=self._next_tile_id, coord=coord, group_id=group_id)
            self._next_tile_id += 1
            self.tiles[tile.tile_id] = tile
            self.grid[coord] = tile.tile_id
            tile_ids.append(tile.tile_id)

        group = TileGroup(group_id=group_id, tile_ids=tile_ids, anchor_tile_id=tile_ids[0])
        self.groups[group_id] = group
        group.anchor_order = self.anchor_order(group_id, group.anchor_tile_id)
        self.adjacency[group_id] = set()
        self._refresh_adjacency(group_id)
        return group

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def tile_at(self, coord: Coord) -> Tile | None:
        tile_id = self.grid.get(coord)
        return None if tile_id is None else self.tiles[tile_id]

    def group_of(self, tile_id: int) -> TileGroup:
        return self.groups[self.tiles[tile_id].group_id]

    def coords_of(self, group_id: int) -> list[Coord]:
        return [self.tiles[tid].coord for tid in self.groups[group_id].tile_ids]

    def tiles_at(
        self,
        coords: Iterable[Coord],
        *,
        only_groups: Collection[int] | None = None,
        excluded_groups: Collection[int] = (),
        only_occupied: bool = False,
        limit: int | None = None,
    ) -> list[Tile]:
        """Batched lookup, in request order, skipping empty cells.

        ``only_occupied`` keeps only tiles that carry an entity. With ``limit``
        the scan stops, leaving the rest of ``coords`` unread, once that many
        tiles have matched.
        """
        seen: set[Coord] = set()
        found: list[Tile] = []
        for coord in coords:
            if coord in seen:
                continue
            seen.add(coord)
            tile = self.tile_at(coord)
            if tile is None:
                continue
            if only_groups is not None and tile.group_id not in only_groups:
                continue
            if tile.group_id in excluded_groups:
                continue
            if only_occupied and tile.entity_id is None:
                continue
            found.append(tile)
            if limit is not None and len(found) >= limit:
                break
        return found

    def has_tiles_at(
        self, coords: Iterable[Coord], *, excluded_groups: Collection[int] = ()
    ) -> bool:
        return bool(self.tiles_at(coords, excluded_groups=excluded_groups, limit=1))

    def cardinal_neighbors_of(
        self,
        coord: Coord,
        *,
        only_groups: Collection[int] | None = None,
        excluded_groups: Collection[int] = (),
    ) -> list[Tile]:
        """Tiles on the four cardinal cells around ``coord``."""
        return self.tiles_at(
            cardinal_positions(coord), only_groups=only_groups, excluded_groups=excluded_groups
        )

    def free_cardinal_neighbors_of(
        self, coord: Coord, excluded: Collection[Coord] = ()
    ) -> list[Coord]:
        """Empty cardinal cells around ``coord`` that are not in ``excluded``."""
        return [c for c in cardinal_positions(coord) if c not in self.grid and c not in excluded]

    def groups_adjacent_to(self, group_id: int, excluding: Collection[int] = ()) -> list[int]:
        """Ids of groups sharing a cardinal edge with ``group_id`` (cached)."""
        return sorted(g for g in self.adjacency[group_id] if g not in excluding)

    def anchor_order(self, group_id: int, anchor_tile_id: int) -> list[int]:
        """Breadth-first tile order from ``anchor_tile_id`` within its group."""
        group = self.groups[group_id]
        if anchor_tile_id not in group.tile_ids:
            raise ValueError(f"tile {anchor_tile_id} is not in group {group_id}")
        order = [anchor_tile_id]
        seen = {anchor_tile_id}
        queue = deque([anchor_tile_id])
        while queue and len(order) < len(group):
            current = self.tiles[queue.popleft()]
            for neighbor in self.cardinal_neighbors_of(current.coord, only_groups=(group_id,)):
                if neighbor.tile_id in seen:
                    continue
                seen.add(neighbor.tile_id)
                order.append(neighbor.tile_id)
                queue.append(neighbor.tile_id)
        return order

    def random_tile(
        self,
        rng: Random,
        *,
        excluded_groups: Collection[int] = (),
        free_only: bool = False,
    ) -> Tile | None:
        """Uniformly pick a tile, or None when no tile qualifies."""
        candidates = [
            tile
            for tile in self.tiles.values()
            if tile.group_id not in excluded_groups
            and not (free_only and tile.entity_id is not None)
        ]
        if not candidates:
            return None
        return rng.choice(candidates)

    def center(self) -> tuple[float, float]:
        """Mean world-space position of every tile (camera target)."""
        if not self.tiles:
            return (0.0, 0.0)
        points = np.array([board_to_world(t.coord)[:2] for t in self.tiles.values()])
        mean_x, mean_y = points.mean(axis=0)
        return (float(mean_x), float(mean_y))

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def move_tiles(self, group_id: int, new_coords: Mapping[int, Coord]) -> None:
        """Atomically relocate every tile of ``group_id``.

        Raises ValueError before touching any state if the mapping is not a
        full, collision-free placement.
        """
        group = self.groups[group_id]
        if set(new_coords) != set(group.tile_ids):
            raise ValueError("new_coords must cover exactly the tiles of the group")
        targets = list(new_coords.values())
        if len(set(targets)) != len(targets):
            raise ValueError("new_coords must be distinct")
        for coord in targets:
            occupant = self.grid.get(coord)
            if occupant is not None and self.tiles[occupant].group_id != group_id:
                raise ValueError(f"coordinate {coord} is occupied by another group")

        for tile_id in group.tile_ids:
            del self.grid[self.tiles[tile_id].coord]
        for tile_id, coord in new_coords.items():
            self.tiles[tile_id].coord = coord
            self.grid[coord] = tile_id
        self._refresh_adjacency(group_id)

    def place_entity(self, tile_id: int, entity_id: int) -> None:
        tile = self.tiles[tile_id]
        if tile.entity_id is not None and tile.entity_id != entity_id:
            raise ValueError(f"tile {tile_id} already holds entity {tile.entity_id}")
        tile.entity_id = entity_id

    def clear_entity(self, tile_id: int, entity_id: int) -> None:
        """Vacate ``tile_id`` if (and only if) it holds ``entity_id``."""
        tile = self.tiles[tile_id]
        if tile.entity_id == entity_id:
            tile.entity_id = None

    def _neighbor_groups(self, group_id: int) -> set[int]:
        neighbors: set[int] = set()
        for coord in self.coords_of(group_id):
            for tile in self.cardinal_neighbors_of(coord, excluded_groups=(group_id,)):
                neighbors.add(tile.group_id)
        return neighbors

    def _refresh_adjacency(self, group_id: int) -> None:
        """Recompute the adjacency entries touching one group."""
        for other in self.adjacency.get(group_id, set()):
            self.adjacency[other].discard(group_id)
        neighbors = self._neighbor_groups(group_id)
        self.adjacency[group_id] = neighbors
        for other in neighbors:
            self.adjacency[other].add(group_id)
