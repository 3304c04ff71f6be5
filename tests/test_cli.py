"""Tests for the sheet-games CLI."""

import pytest

from sheet_games.cli import _build_parser, main
from sheet_games.config import GameKind, SessionConfig


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_run_defaults(self):
        args = _build_parser().parse_args(["run"])
        assert args.command == "run"
        assert args.game is None
        assert args.ticks == 10
        assert args.cells == []
        assert args.start is None
        assert args.keys == []

    def test_run_with_flags(self):
        args = _build_parser().parse_args([
            "run",
            "--game", "snake",
            "--rows", "6",
            "--set", "1,2=2",
            "--start", "0,0",
            "--key", "3:d",
        ])
        assert args.game == "snake"
        assert args.rows == 6
        assert args.cells == [((1, 2), "2")]
        assert args.start == (0, 0)
        assert args.keys == [(3, "d")]

    def test_bad_location(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["run", "--start", "x"])

    def test_bad_key_press(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["run", "--key", "d"])


class TestCLIRun:
    def test_life_blinker(self, capsys):
        result = main([
            "run", "--game", "life", "--rows", "3", "--columns", "3",
            "--ticks", "1", "--quiet",
            "--set", "1,0=1", "--set", "1,1=1", "--set", "1,2=1",
        ])
        assert result == 0
        out = capsys.readouterr().out
        assert out.strip().splitlines() == [". 1 .", ". 1 .", ". 1 ."]

    def test_snake_without_start_prints_reminder(self, capsys):
        main(["run", "--game", "snake", "--rows", "4", "--columns", "4", "--ticks", "1"])
        assert "starting cell" in capsys.readouterr().out

    def test_snake_game_over(self, capsys):
        main([
            "run", "--game", "snake", "--rows", "4", "--columns", "4",
            "--start", "2,0", "--ticks", "5",
        ])
        out = capsys.readouterr().out
        assert "Game Over!" in out
        assert "-- tick 3" not in out

    def test_config_file(self, tmp_path, capsys):
        path = tmp_path / "session.json"
        SessionConfig(game=GameKind.TETROS, rows=5, columns=4, seed=1).save(path)
        assert main(["run", "--config", str(path), "--ticks", "2"]) == 0
        assert "-- tick 2" in capsys.readouterr().out
