"""Tests for the shiftboard command line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from shiftboard.cli import main, render_board
from shiftboard.domain.entities import Robot
from shiftboard.domain.registry import TileRegistry


def _summary(capsys: pytest.CaptureFixture[str]) -> dict[str, object]:
    out = capsys.readouterr().out
    return json.loads(out[out.index("{") :])


class TestGenerateMode:
    def test_default_board_summary(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--seed", "1"])
        summary = _summary(capsys)
        assert summary["mode"] == "generate"
        assert summary["total_tiles"] == 36
        assert sum(summary["group_sizes"]) == 36
        assert set(summary["group_sizes"]) <= {4, 5, 6}
        assert summary["fully_connected"] is True

    def test_cli_overrides_config_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config_path = tmp_path / "board.json"
        config_path.write_text(
            json.dumps({"total_tiles": 20, "min_group_size": 2, "max_group_size": 3, "seed": 5})
        )
        main(["--config", str(config_path), "--total-tiles", "24"])
        summary = _summary(capsys)
        assert summary["total_tiles"] == 24
        assert summary["seed"] == 5
        assert set(summary["group_sizes"]) <= {2, 3}

    def test_show_board_prints_ascii_dump(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--seed", "2", "--show-board"])
        out = capsys.readouterr().out
        board = out[: out.index("{")]
        assert "R" in board
        assert sum(ch not in ".\n" for ch in board) == 36

    def test_file_values_are_normalised(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config_path = tmp_path / "board.json"
        config_path.write_text(
            json.dumps({"mode": "Generate", "log_level": "warning", "seed": 7.0})
        )
        main(["--config", str(config_path)])
        summary = _summary(capsys)
        assert summary["mode"] == "generate"
        assert summary["seed"] == 7


class TestPlayMode:
    def test_play_reports_turn_statistics(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--mode", "play", "--seed", "3", "--rounds", "3"])
        summary = _summary(capsys)
        assert summary["mode"] == "play"
        assert 1 <= summary["rounds_played"] <= 3
        assert summary["turn_count"] <= summary["rounds_played"]
        assert isinstance(summary["robot_alive"], bool)
        assert summary["lasers_destroyed"] >= 0


class TestErrors:
    def test_missing_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            main(["--config", str(tmp_path / "missing.json")])

    def test_invalid_json(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bad.json"
        config_path.write_text("{not json")
        with pytest.raises(SystemExit):
            main(["--config", str(config_path)])

    def test_non_integer_value_in_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bad.json"
        config_path.write_text(json.dumps({"total_tiles": 12.5}))
        with pytest.raises(SystemExit):
            main(["--config", str(config_path)])

    def test_unknown_mode_in_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bad.json"
        config_path.write_text(json.dumps({"mode": "replay"}))
        with pytest.raises(SystemExit):
            main(["--config", str(config_path)])

    def test_boolean_seed_in_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bad.json"
        config_path.write_text(json.dumps({"seed": True}))
        with pytest.raises(SystemExit):
            main(["--config", str(config_path)])

    def test_invalid_group_range(self) -> None:
        with pytest.raises(SystemExit):
            main(["--min-group-size", "6", "--max-group-size", "4"])

    def test_generation_failure(self) -> None:
        with pytest.raises(SystemExit):
            main(["--total-tiles", "5", "--min-group-size", "4", "--max-group-size", "4"])


class TestRenderBoard:
    def test_rows_run_north_to_south(self) -> None:
        registry = TileRegistry()
        registry.add_group([(0, 0), (1, 0)])
        registry.add_group([(1, 1)])
        registry.place_entity(0, 0)
        robot = Robot(entity_id=0, tile_id=0, countdown=1)
        assert render_board(registry, {0: robot}) == ".b\nRa"

    def test_empty_board(self) -> None:
        assert render_board(TileRegistry(), {}) == ""
