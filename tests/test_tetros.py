"""Tests for the TetrosEngine module."""

import json

from sheet_games.grid import CellLocation, Grid
from sheet_games.random_source import RandomTile
from sheet_games.state import Outcome, TetrosStatus
from sheet_games.tetros import (
    TetrosEngine,
    clear_full_rows,
    is_row_full,
    tile_in_bounds,
    touching_pile,
)
from sheet_games.tile import FallingTile

O_TILE = 4
I_TILE = 5
T_TILE = 3


class FixedTiles:
    """Tile source returning a fixed sequence of shape indices."""

    def __init__(self, *indices):
        self.indices = list(indices)
        self.calls = 0

    def pick(self):
        index = self.indices[self.calls % len(self.indices)]
        self.calls += 1
        return index


def _rows(grid):
    return [
        [grid.value_at(CellLocation(r, c)) for c in range(grid.columns)]
        for r in range(grid.rows)
    ]


def _fill(grid, cells, value="9"):
    for r, c in cells:
        grid.update(CellLocation(r, c), value)


class TestPileChecks:
    def test_tile_in_bounds(self):
        grid = Grid(rows=4, columns=4)
        assert tile_in_bounds(grid, FallingTile.spawn(I_TILE))
        assert not tile_in_bounds(grid, FallingTile.spawn(I_TILE).dropped())
        assert not tile_in_bounds(grid, FallingTile.spawn(O_TILE).moved(-1))

    def test_touching_pile(self):
        grid = Grid(rows=4, columns=4)
        tile = FallingTile.spawn(O_TILE)
        assert not touching_pile(grid, tile)
        _fill(grid, [(1, 1)])
        assert touching_pile(grid, tile)

    def test_is_row_full(self):
        grid = Grid(rows=2, columns=3)
        _fill(grid, [(1, 0), (1, 1), (1, 2), (0, 0)])
        assert is_row_full(grid, 1)
        assert not is_row_full(grid, 0)


class TestClearFullRows:
    def test_bottom_row_cleared_and_rows_shift(self):
        grid = Grid(rows=4, columns=3)
        grid.update(CellLocation(3, 0), 1)
        grid.update(CellLocation(3, 1), 2)
        grid.update(CellLocation(3, 2), 3)
        grid.update(CellLocation(2, 0), 5)
        grid.update(CellLocation(1, 2), 6)
        grid.update(CellLocation(0, 1), 7)
        assert clear_full_rows(grid) == 1
        assert _rows(grid) == [
            ["", "", ""],
            ["", "7", ""],
            ["", "", "6"],
            ["5", "", ""],
        ]

    def test_cascade_of_full_rows(self):
        grid = Grid(rows=4, columns=2)
        _fill(grid, [(3, 0), (3, 1), (2, 0), (2, 1), (1, 1)])
        assert clear_full_rows(grid) == 2
        assert _rows(grid) == [["", ""], ["", ""], ["", ""], ["", "9"]]

    def test_no_full_rows(self):
        grid = Grid(rows=3, columns=2)
        _fill(grid, [(2, 0), (1, 1)])
        assert clear_full_rows(grid) == 0
        assert _rows(grid) == [["", ""], ["", "9"], ["9", ""]]

    def test_falling_tile_cells_are_skipped(self):
        grid = Grid(rows=4, columns=4)
        tile = FallingTile(
            tuple(CellLocation(r, c) for r, c in [(0, 1), (0, 2), (1, 1), (1, 2)]),
            3,
        )
        _fill(grid, tile.cells, "3")
        _fill(grid, [(3, 0), (3, 1), (3, 2), (3, 3)], "1")
        _fill(grid, [(2, 0)], "5")
        _fill(grid, [(0, 0)], "7")
        assert clear_full_rows(grid, tile) == 1
        assert _rows(grid) == [
            ["", "3", "3", ""],
            ["7", "3", "3", ""],
            ["", "", "", ""],
            ["5", "", "", ""],
        ]

    def test_row_held_by_tile_terminates(self):
        grid = Grid(rows=1, columns=4)
        tile = FallingTile(tuple(CellLocation(0, c) for c in range(4)), 6)
        _fill(grid, tile.cells, "6")
        assert clear_full_rows(grid, tile) == 0
        assert _rows(grid) == [["6", "6", "6", "6"]]

    def test_single_row_grid(self):
        grid = Grid(rows=1, columns=2)
        _fill(grid, [(0, 0), (0, 1)])
        assert clear_full_rows(grid) == 1
        assert _rows(grid) == [["", ""]]


class TestTetrosStart:
    def test_idle_before_start(self):
        engine = TetrosEngine(Grid(rows=6, columns=4), FixedTiles(O_TILE))
        assert engine.advance().outcome is Outcome.NO_CHANGE
        assert not engine.drop()
        engine.move(1)
        engine.rotate(1)
        assert engine.tile is None

    def test_start_spawns_tile(self):
        grid = Grid(rows=6, columns=4)
        engine = TetrosEngine(grid, FixedTiles(O_TILE))
        result = engine.start()
        assert result.outcome is Outcome.CHANGED
        assert engine.status is TetrosStatus.FALLING
        assert _rows(grid)[:2] == [["3", "3", "", ""], ["3", "3", "", ""]]

    def test_start_on_blocked_grid(self):
        grid = Grid(rows=6, columns=4)
        _fill(grid, [(0, 0)])
        engine = TetrosEngine(grid, FixedTiles(O_TILE))
        assert engine.start().outcome is Outcome.GAME_OVER
        assert engine.status is TetrosStatus.GAME_OVER
        assert grid.value_at(CellLocation(0, 1)) == ""


class TestTetrosMovement:
    def test_move_within_bounds(self):
        grid = Grid(rows=6, columns=4)
        engine = TetrosEngine(grid, FixedTiles(O_TILE))
        engine.start()
        engine.move(1)
        assert engine.tile.cells == ((0, 1), (0, 2), (1, 1), (1, 2))
        assert grid.value_at(CellLocation(0, 0)) == ""
        assert grid.value_at(CellLocation(0, 2)) == "3"

    def test_move_out_of_bounds_is_ignored(self):
        grid = Grid(rows=6, columns=4)
        engine = TetrosEngine(grid, FixedTiles(O_TILE))
        engine.start()
        engine.move(-1)
        assert engine.tile == FallingTile.spawn(O_TILE)
        assert grid.value_at(CellLocation(0, 0)) == "3"

    def test_rotate_out_of_bounds_is_ignored(self):
        engine = TetrosEngine(Grid(rows=6, columns=4), FixedTiles(T_TILE))
        engine.start()
        engine.rotate(1)
        assert engine.tile == FallingTile.spawn(T_TILE)

    def test_rotate_in_bounds(self):
        grid = Grid(rows=6, columns=4)
        engine = TetrosEngine(grid, FixedTiles(T_TILE))
        engine.start()
        engine.drop()
        engine.rotate(1)
        assert engine.tile.cells == ((2, 1), (1, 1), (0, 1), (1, 0))
        assert grid.value_at(CellLocation(1, 2)) == ""
        assert grid.value_at(CellLocation(0, 1)) == "8"

    def test_stop_and_commands_are_inert(self):
        engine = TetrosEngine(Grid(rows=6, columns=4), FixedTiles(O_TILE))
        engine.start()
        assert engine.stop().outcome is Outcome.NO_CHANGE
        assert engine.falling
        assert engine.commands() == {}

    def test_bindings(self):
        engine = TetrosEngine(Grid(rows=6, columns=4), FixedTiles(O_TILE))
        engine.start()
        keys = {b.key: b for b in engine.bindings()}
        assert set(keys) == {"a", "d", "q", "e", "s"}
        keys["d"].action()
        assert engine.tile.cells[0] == (0, 1)
        keys["s"].action()
        assert max(cell.row for cell in engine.tile.cells) == 5


class TestTetrosDropping:
    def test_drop_one_row(self):
        grid = Grid(rows=6, columns=4)
        engine = TetrosEngine(grid, FixedTiles(O_TILE))
        engine.start()
        assert engine.drop()
        assert _rows(grid)[:3] == [
            ["", "", "", ""], ["3", "3", "", ""], ["3", "3", "", ""],
        ]

    def test_full_drop_reaches_floor(self):
        grid = Grid(rows=6, columns=4)
        engine = TetrosEngine(grid, FixedTiles(I_TILE))
        engine.start()
        engine.full_drop()
        assert max(cell.row for cell in engine.tile.cells) == grid.rows - 1
        assert not engine.drop()
        assert [grid.value_at(CellLocation(r, 0)) for r in range(6)] == [
            "", "", "6", "6", "6", "6",
        ]

    def test_lands_on_pile(self):
        grid = Grid(rows=6, columns=4)
        _fill(grid, [(5, 0)])
        engine = TetrosEngine(grid, FixedTiles(O_TILE))
        engine.start()
        engine.full_drop()
        assert max(cell.row for cell in engine.tile.cells) == 4
        assert grid.value_at(CellLocation(5, 0)) == "9"


class TestTetrosTicks:
    def test_advance_drops(self):
        engine = TetrosEngine(Grid(rows=6, columns=4), FixedTiles(O_TILE))
        engine.start()
        assert engine.advance().outcome is Outcome.CHANGED
        assert engine.tile.cells[0] == (1, 0)

    def test_landed_tile_spawns_next(self):
        grid = Grid(rows=6, columns=4)
        engine = TetrosEngine(grid, FixedTiles(O_TILE, I_TILE))
        engine.start()
        engine.full_drop()
        result = engine.advance()
        assert result.outcome is Outcome.CHANGED
        assert engine.status is TetrosStatus.FALLING
        assert engine.tile == FallingTile.spawn(I_TILE)
        assert engine.tiles_dropped == 2

    def test_blocked_spawn_is_game_over(self):
        engine = TetrosEngine(Grid(rows=4, columns=4), FixedTiles(I_TILE))
        engine.start()
        result = engine.advance()
        assert result.outcome is Outcome.GAME_OVER
        assert result.message == "Game Over!"
        assert engine.status is TetrosStatus.GAME_OVER
        assert engine.advance().outcome is Outcome.NO_CHANGE

    def test_advance_clears_completed_row(self):
        grid = Grid(rows=5, columns=3)
        _fill(grid, [(4, 0), (4, 1)])
        engine = TetrosEngine(grid, FixedTiles(I_TILE))
        engine.start()
        engine.move(1)
        engine.move(1)
        engine.advance()
        assert engine.rows_cleared == 1
        assert grid.value_at(CellLocation(4, 0)) == ""
        assert grid.value_at(CellLocation(4, 1)) == ""

    def test_state_is_json_serializable(self):
        engine = TetrosEngine(Grid(rows=8, columns=6), RandomTile())
        engine.start()
        engine.advance()
        state = json.loads(json.dumps(engine.get_state()))
        assert state["status"] == "falling"
        assert len(state["tile"]["cells"]) == 4
