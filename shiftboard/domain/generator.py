"""Board generation by frontier expansion.

A fixed tile budget is partitioned into 4-connected groups whose sizes lie in
``[min_group_size, max_group_size]``. Groups are grown one at a time from a
global frontier of free cells bordering the board, so every new group touches
an earlier one and the board stays connected by construction.

Size choice invariant: a group size is only drawn when the tiles left over
afterwards can still be split into valid groups. With ``k = leftover // min``
that holds iff ``leftover == 0`` or ``k * min <= leftover <= k * max``; no
larger group count fits and fewer groups cannot absorb as many tiles.
"""

from __future__ import annotations

import logging
from random import Random

from shiftboard.config.constants import MAX_GROUP_RETRIES
from shiftboard.config.types import GenerationConfig
from shiftboard.domain.geometry import ORIGIN, Coord, cardinal_positions
from shiftboard.domain.registry import TileRegistry
from shiftboard.errors import GenerationFailure

logger = logging.getLogger(__name__)


def can_partition(tile_count: int, min_size: int, max_size: int) -> bool:
    """True if ``tile_count`` tiles split exactly into groups sized in range."""
    if tile_count == 0:
        return True
    groups = tile_count // min_size
    return groups >= 1 and tile_count <= groups * max_size


def valid_group_sizes(remaining: int, min_size: int, max_size: int) -> list[int]:
    """Group sizes that keep the leftover tile count decomposable.

    Each size ``min_size + extra`` is admitted by the quotient/remainder test
    and then confirmed with :func:`can_partition`. A disagreement means the
    test admitted a dead end; it is logged and the size is dropped.
    """
    spread = max_size - min_size
    sizes: list[int] = []
    for extra in range(spread + 1):
        quotient, remainder = divmod(max(0, remaining - extra), min_size)
        if remainder >= (quotient - 1) * spread + 1:
            continue
        size = min_size + extra
        if size > remaining or not can_partition(remaining - size, min_size, max_size):
            logger.warning(
                "size %d admitted for %d remaining tiles leaves no valid split; dropped",
                size,
                remaining,
            )
            continue
        sizes.append(size)
    return sizes


class _Frontier:
    """Insertion-ordered set of candidate cells with uniform random draws."""

    def __init__(self, cells: list[Coord] | None = None) -> None:
        self._cells: dict[Coord, None] = dict.fromkeys(cells or [])

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell: object) -> bool:
        return cell in self._cells

    def add(self, cell: Coord) -> None:
        self._cells.setdefault(cell, None)

    def discard(self, cell: Coord) -> None:
        self._cells.pop(cell, None)

    def draw(self, rng: Random) -> Coord:
        """Remove and return a uniformly chosen cell."""
        cell = rng.choice(list(self._cells))
        del self._cells[cell]
        return cell

    def sample(self, rng: Random) -> Coord:
        """Return a uniformly chosen cell without removing it."""
        return rng.choice(list(self._cells))


def _grow_group(
    target_size: int,
    registry: TileRegistry,
    global_available: _Frontier,
    rng: Random,
) -> list[Coord] | None:
    """One growth attempt; returns the chosen cells or None if it got boxed in.

    Nothing is written to the registry here, so a failed attempt leaves all of
    its cells free.
    """
    first = global_available.sample(rng)
    chosen = [first]
    chosen_set = {first}
    frontier = _Frontier(registry.free_cardinal_neighbors_of(first))

    while len(chosen) < target_size:
        if not frontier:
            return None
        cell = frontier.draw(rng)
        chosen.append(cell)
        chosen_set.add(cell)
        for neighbor in registry.free_cardinal_neighbors_of(cell, excluded=chosen_set):
            frontier.add(neighbor)
    return chosen


def generate_board(config: GenerationConfig, rng: Random) -> TileRegistry:
    """Build a complete board or raise :class:`GenerationFailure`."""
    total = config.total_tiles
    min_size, max_size = config.min_group_size, config.max_group_size
    if min_size > total:
        raise GenerationFailure(
            f"min_group_size ({min_size}) exceeds total_tiles ({total})", remaining=total
        )

    registry = TileRegistry()
    global_available = _Frontier([ORIGIN])
    remaining = total

    while remaining > 0:
        sizes = valid_group_sizes(remaining, min_size, max_size)
        if not sizes:
            raise GenerationFailure(
                f"no valid group size for {remaining} remaining tiles "
                f"(range {min_size}..{max_size})",
                remaining=remaining,
            )
        target_size = rng.choice(sizes)

        cells: list[Coord] | None = None
        for attempt in range(config.max_group_retries):
            cells = _grow_group(target_size, registry, global_available, rng)
            if cells is not None:
                break
            logger.debug(
                "group of %d boxed in on attempt %d; retrying", target_size, attempt + 1
            )
        if cells is None:
            raise GenerationFailure(
                f"could not grow a group of {target_size} tiles after "
                f"{config.max_group_retries} attempts",
                remaining=remaining,
            )

        registry.add_group(cells)
        for cell in cells:
            global_available.discard(cell)
        for cell in cells:
            for neighbor in cardinal_positions(cell):
                if neighbor not in registry.grid:
                    global_available.add(neighbor)
        remaining -= target_size

    _verify_partition(registry, config)
    logger.info(
        "generated board: %d tiles in %d groups", registry.tile_count, registry.group_count
    )
    return registry


def _verify_partition(registry: TileRegistry, config: GenerationConfig) -> None:
    """Post-hoc tile-count and size-bound check on a finished board."""
    if registry.tile_count != config.total_tiles:
        raise GenerationFailure(
            f"board has {registry.tile_count} tiles, expected {config.total_tiles}",
            remaining=config.total_tiles - registry.tile_count,
        )
    for group in registry.groups.values():
        if not config.min_group_size <= len(group) <= config.max_group_size:
            raise GenerationFailure(
                f"group {group.group_id} has {len(group)} tiles, outside "
                f"{config.min_group_size}..{config.max_group_size}"
            )


def generate(
    total_tiles: int,
    min_group_size: int,
    max_group_size: int,
    seed: int,
    *,
    max_group_retries: int = MAX_GROUP_RETRIES,
) -> TileRegistry:
    """Seeded convenience wrapper around :func:`generate_board`."""
    config = GenerationConfig(
        total_tiles=total_tiles,
        min_group_size=min_group_size,
        max_group_size=max_group_size,
        max_group_retries=max_group_retries,
    )
    return generate_board(config, Random(seed))
