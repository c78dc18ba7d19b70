"""CLI entrypoint: generate a board or auto-play a session.

Supports ``--config path/to/config.json``; CLI arguments override config-file
values and config-file values override built-in defaults. A JSON summary is
printed to stdout, optionally preceded by an ASCII dump of the board.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from shiftboard.config.constants import (
    DIFFICULTY_DECAY,
    HAZARDS_PER_ROUND,
    MAX_COUNTDOWN,
    MAX_GROUP_RETRIES,
    MAX_GROUP_SIZE,
    MIN_COUNTDOWN,
    MIN_GROUP_SIZE,
    SPIKE_DIVISOR,
    TOTAL_TILES,
)
from shiftboard.config.types import EntityConfig, GameConfig, GenerationConfig
from shiftboard.domain.entities import Entity, EntityKind
from shiftboard.domain.geometry import cardinal_positions
from shiftboard.domain.registry import TileRegistry
from shiftboard.errors import GenerationFailure
from shiftboard.game import GamePhase, GameSession
from shiftboard.logging_config import configure_logging

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

MODES = ("generate", "play")
"""``generate`` builds one board; ``play`` also runs the turn loop."""

DEFAULT_ROUNDS = 20
"""Round limit for ``play`` mode."""

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

ENTITY_GLYPHS = {
    EntityKind.ROBOT: "R",
    EntityKind.SPIKE: "S",
    EntityKind.LASER: "L",
    EntityKind.BOMB: "B",
}
_GROUP_GLYPHS = "abcdefghijklmnopqrstuvwxyz0123456789"

# ---------------------------------------------------------------------------
# CLI parsing helpers
# ---------------------------------------------------------------------------


def _coerce_bool(raw: object, key: str) -> bool:
    """Accept JSON booleans and the usual on/off spellings."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Tile counts and seeds are whole numbers; ``12.0`` passes, ``12.5`` and ``true`` do not."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float) and not raw.is_integer():
        raise ValueError(f"{key} must be an integer value, got {raw!r}")
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer value, got {raw!r}") from exc


def _coerce_float(raw: object, key: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"{key} must be a float value")
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a float value, got {raw!r}") from exc


def _choice(options: tuple[str, ...]) -> Callable[[object, str], str]:
    """Coercer that accepts one of ``options`` (case-insensitive)."""

    def coerce(raw: object, key: str) -> str:
        if isinstance(raw, str):
            for option in options:
                if raw.strip().lower() == option.lower():
                    return option
        raise ValueError(f"{key} must be one of {', '.join(options)}")

    return coerce


class _Settings:
    """Resolves each option as CLI value > config-file value > built-in default.

    Option keys are the argparse ``dest`` names, which are also the JSON keys.
    """

    def __init__(self, args: argparse.Namespace, file_cfg: dict[str, object]) -> None:
        self._args = args
        self._file_cfg = file_cfg

    def raw(self, key: str, default: object) -> object:
        cli_val = getattr(self._args, key)
        if cli_val is not None:
            return cli_val
        return self._file_cfg.get(key, default)

    def get(self, key: str, default: T, coerce: Callable[[object, str], T]) -> T:
        return coerce(self.raw(key, default), key)

    def optional(self, key: str, coerce: Callable[[object, str], T]) -> T | None:
        raw = self.raw(key, None)
        return None if raw is None else coerce(raw, key)


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Generate and play shifting tile boards")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--mode", type=str, choices=MODES, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--total-tiles", type=int, default=None)
    parser.add_argument("--min-group-size", type=int, default=None)
    parser.add_argument("--max-group-size", type=int, default=None)
    parser.add_argument("--max-group-retries", type=int, default=None)
    parser.add_argument("--min-countdown", type=int, default=None)
    parser.add_argument("--max-countdown", type=int, default=None)
    parser.add_argument("--spike-divisor", type=int, default=None)
    parser.add_argument("--hazards-per-round", type=int, default=None)
    parser.add_argument("--difficulty-decay", type=float, default=None)
    parser.add_argument("--spawn-robot", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument("--rounds", type=int, default=None, help="round limit in play mode")
    parser.add_argument(
        "--show-board",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="print an ASCII dump of the final board before the summary",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=LOG_LEVELS,
        default=None,
    )
    return parser


# ---------------------------------------------------------------------------
# Rendering and auto-play
# ---------------------------------------------------------------------------


def render_board(registry: TileRegistry, entities: dict[int, Entity]) -> str:
    """ASCII dump, north up: entity glyph if occupied, else the group glyph."""
    if not registry.grid:
        return ""
    xs = [x for x, _ in registry.grid]
    ys = [y for _, y in registry.grid]
    rows: list[str] = []
    for y in range(max(ys), min(ys) - 1, -1):
        row = []
        for x in range(min(xs), max(xs) + 1):
            tile = registry.tile_at((x, y))
            if tile is None:
                row.append(".")
            elif tile.entity_id is not None and tile.entity_id in entities:
                row.append(ENTITY_GLYPHS[entities[tile.entity_id].kind])
            else:
                row.append(_GROUP_GLYPHS[tile.group_id % len(_GROUP_GLYPHS)])
        rows.append("".join(row))
    return "\n".join(rows)


def _play_turn(session: GameSession) -> bool:
    """Move the first removable group that has a legal placement; False if none."""
    registry = session.registry
    for group_id in sorted(session.removable_groups()):
        if not session.try_select_group(group_id):
            continue
        own = set(registry.coords_of(group_id))
        targets = sorted(
            {
                cell
                for coord, tile_id in registry.grid.items()
                if registry.tiles[tile_id].group_id != group_id
                for cell in cardinal_positions(coord)
                if cell not in registry.grid and cell not in own
            }
        )
        session.rng.shuffle(targets)
        for target in targets:
            steps = session.rng.randrange(4)
            if session.try_move_and_rotate(group_id, target, steps) and session.commit_selection(
                group_id
            ):
                return True
        session.cancel_selection(group_id)
    return False


def play(session: GameSession, rounds: int) -> int:
    """Alternate player moves and entity rounds; returns rounds played."""
    played = 0
    while played < rounds and session.phase is not GamePhase.GAME_OVER:
        if not _play_turn(session):
            logger.info("no legal move left; passing the turn")
        session.run_entity_round()
        played += 1
    return played


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = json.loads(Path(args.config).read_text())
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")
        if not isinstance(file_cfg, dict):
            parser.error(f"Config file must hold a JSON object: {args.config}")

    settings = _Settings(args, file_cfg)
    try:
        mode = settings.get("mode", "generate", _choice(MODES))
        seed = settings.optional("seed", _coerce_int)
        rounds = settings.get("rounds", DEFAULT_ROUNDS, _coerce_int)
        show_board = settings.get("show_board", False, _coerce_bool)
        log_level = settings.get("log_level", "WARNING", _choice(LOG_LEVELS))
        config = GameConfig(
            generation=GenerationConfig(
                total_tiles=settings.get("total_tiles", TOTAL_TILES, _coerce_int),
                min_group_size=settings.get("min_group_size", MIN_GROUP_SIZE, _coerce_int),
                max_group_size=settings.get("max_group_size", MAX_GROUP_SIZE, _coerce_int),
                max_group_retries=settings.get(
                    "max_group_retries", MAX_GROUP_RETRIES, _coerce_int
                ),
            ),
            entities=EntityConfig(
                min_countdown=settings.get("min_countdown", MIN_COUNTDOWN, _coerce_int),
                max_countdown=settings.get("max_countdown", MAX_COUNTDOWN, _coerce_int),
                spike_divisor=settings.get("spike_divisor", SPIKE_DIVISOR, _coerce_int),
                hazards_per_round=settings.get(
                    "hazards_per_round", HAZARDS_PER_ROUND, _coerce_int
                ),
                difficulty_decay=settings.get(
                    "difficulty_decay", DIFFICULTY_DECAY, _coerce_float
                ),
            ),
            spawn_robot=settings.get("spawn_robot", True, _coerce_bool),
        )
    except ValueError as exc:
        parser.error(str(exc))

    configure_logging(log_level)

    try:
        session = GameSession.generate(config, seed)
    except GenerationFailure as exc:
        parser.error(f"generation failed: {exc}")

    registry = session.registry
    summary: dict[str, object] = {
        "mode": mode,
        "seed": seed,
        "total_tiles": registry.tile_count,
        "groups": registry.group_count,
        "group_sizes": sorted(len(g) for g in registry.groups.values()),
        "fully_connected": session.board_is_fully_connected(),
        "removable_groups": len(session.removable_groups()),
    }
    if mode == "play":
        played = play(session, rounds)
        summary.update(
            {
                "rounds_played": played,
                "turn_count": session.turn_count,
                "robot_alive": session.phase is not GamePhase.GAME_OVER,
                "lasers_destroyed": session.lasers_destroyed,
                "entities": len(session.entities),
            }
        )

    if show_board:
        print(render_board(registry, session.entities))
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
