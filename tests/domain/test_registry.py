"""Tests for shiftboard.domain.registry."""

from __future__ import annotations

from collections.abc import Iterator
from random import Random

import pytest

from shiftboard.domain.geometry import Coord
from shiftboard.domain.registry import TileRegistry


def _two_bars() -> TileRegistry:
    """Group 0: (0,0)-(2,0); group 1: (0,1)-(2,1) directly above it."""
    registry = TileRegistry()
    registry.add_group([(0, 0), (1, 0), (2, 0)])
    registry.add_group([(0, 1), (1, 1), (2, 1)])
    return registry


class TestAddGroup:
    def test_assigns_sequential_ids(self) -> None:
        registry = _two_bars()
        assert sorted(registry.groups) == [0, 1]
        assert registry.groups[1].tile_ids == [3, 4, 5]
        assert registry.tile_count == 6

    def test_first_coordinate_is_anchor(self) -> None:
        registry = TileRegistry()
        group = registry.add_group([(5, 5), (5, 6)])
        assert registry.tiles[group.anchor_tile_id].coord == (5, 5)

    def test_rejects_occupied_cells(self) -> None:
        registry = _two_bars()
        with pytest.raises(ValueError, match="already occupied"):
            registry.add_group([(2, 1), (3, 1)])
        assert registry.group_count == 2

    def test_rejects_empty_and_duplicate(self) -> None:
        registry = TileRegistry()
        with pytest.raises(ValueError):
            registry.add_group([])
        with pytest.raises(ValueError):
            registry.add_group([(0, 0), (0, 0)])

    def test_adjacency_is_symmetric(self) -> None:
        registry = _two_bars()
        registry.add_group([(5, 5)])
        assert registry.groups_adjacent_to(0) == [1]
        assert registry.groups_adjacent_to(1) == [0]
        assert registry.groups_adjacent_to(2) == []


class TestQueries:
    def test_tile_at_and_group_of(self) -> None:
        registry = _two_bars()
        tile = registry.tile_at((1, 1))
        assert tile is not None and tile.group_id == 1
        assert registry.group_of(tile.tile_id).group_id == 1
        assert registry.tile_at((9, 9)) is None

    def test_tiles_at_filters(self) -> None:
        registry = _two_bars()
        coords = [(0, 0), (0, 1), (7, 7)]
        assert [t.coord for t in registry.tiles_at(coords)] == [(0, 0), (0, 1)]
        assert [t.coord for t in registry.tiles_at(coords, only_groups=(1,))] == [(0, 1)]
        assert [t.coord for t in registry.tiles_at(coords, excluded_groups=(1,))] == [(0, 0)]
        assert registry.tiles_at(coords, only_occupied=True) == []

    def test_tiles_at_limit_stops_reading(self) -> None:
        registry = _two_bars()
        requested: list[Coord] = []

        def coords() -> Iterator[Coord]:
            for coord in [(7, 7), (0, 0), (0, 0), (0, 1), (1, 1)]:
                requested.append(coord)
                yield coord

        assert [t.coord for t in registry.tiles_at(coords(), limit=2)] == [(0, 0), (0, 1)]
        assert requested == [(7, 7), (0, 0), (0, 0), (0, 1)]

    def test_has_tiles_at(self) -> None:
        registry = _two_bars()
        assert registry.has_tiles_at([(0, 0)])
        assert not registry.has_tiles_at([(0, 0)], excluded_groups=(0,))

    def test_cardinal_neighbors(self) -> None:
        registry = _two_bars()
        neighbors = registry.cardinal_neighbors_of((1, 0))
        assert [t.coord for t in neighbors] == [(1, 1), (2, 0), (0, 0)]
        same = registry.cardinal_neighbors_of((1, 0), excluded_groups=(0,))
        assert [t.coord for t in same] == [(1, 1)]

    def test_free_cardinal_neighbors(self) -> None:
        registry = _two_bars()
        assert registry.free_cardinal_neighbors_of((0, 0)) == [(0, -1), (-1, 0)]
        assert registry.free_cardinal_neighbors_of((0, 0), excluded=[(0, -1)]) == [(-1, 0)]

    def test_anchor_order_is_breadth_first(self) -> None:
        registry = TileRegistry()
        # L shape: anchor at the corner
        group = registry.add_group([(0, 0), (1, 0), (2, 0), (0, 1), (0, 2)])
        order = registry.anchor_order(group.group_id, group.tile_ids[0])
        coords = [registry.tiles[tid].coord for tid in order]
        assert coords == [(0, 0), (0, 1), (1, 0), (0, 2), (2, 0)]

    def test_anchor_order_rejects_foreign_tile(self) -> None:
        registry = _two_bars()
        with pytest.raises(ValueError):
            registry.anchor_order(0, 4)

    def test_random_tile_respects_exclusions(self) -> None:
        registry = _two_bars()
        rng = Random(0)
        for _ in range(20):
            tile = registry.random_tile(rng, excluded_groups=(0,))
            assert tile is not None and tile.group_id == 1
        assert registry.random_tile(rng, excluded_groups=(0, 1)) is None

    def test_center_is_mean_world_position(self) -> None:
        registry = TileRegistry()
        registry.add_group([(0, 0), (1, 1)])
        # world positions (0, 0) and (1, 0)
        assert registry.center() == pytest.approx((0.5, 0.0))


class TestMutation:
    def test_move_tiles_updates_grid_and_adjacency(self) -> None:
        registry = _two_bars()
        registry.add_group([(4, 0)])
        top = registry.groups[1]
        registry.move_tiles(1, {tid: (x + 2, 1) for tid, x in zip(top.tile_ids, range(3))})
        assert registry.tile_at((0, 1)) is None
        assert registry.tile_at((4, 1)) is not None
        assert registry.groups_adjacent_to(1) == [0, 2]
        assert registry.groups_adjacent_to(2) == [1]

    def test_move_tiles_is_atomic_on_overlap(self) -> None:
        registry = _two_bars()
        top = registry.groups[1]
        before = registry.coords_of(1)
        bad = {tid: (x, 0) for tid, x in zip(top.tile_ids, range(3))}
        with pytest.raises(ValueError, match="occupied by another group"):
            registry.move_tiles(1, bad)
        assert registry.coords_of(1) == before

    def test_move_tiles_allows_self_overlap(self) -> None:
        registry = _two_bars()
        top = registry.groups[1]
        shifted = {tid: (x + 1, 1) for tid, x in zip(top.tile_ids, range(3))}
        registry.move_tiles(1, shifted)
        assert registry.coords_of(1) == [(1, 1), (2, 1), (3, 1)]

    def test_place_and_clear_entity(self) -> None:
        registry = _two_bars()
        registry.place_entity(0, 7)
        with pytest.raises(ValueError):
            registry.place_entity(0, 8)
        registry.clear_entity(0, 8)
        assert registry.tiles[0].entity_id == 7
        registry.clear_entity(0, 7)
        assert registry.tiles[0].entity_id is None
