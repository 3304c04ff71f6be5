"""Falling-block game where the settled pile lives only in the grid.

Any non-blank cell that is not part of the falling tile belongs to the pile.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sheet_games.grid import EMPTY, CellGrid, CellLocation, paint
from sheet_games.random_source import TileSource
from sheet_games.state import (
    GameEvent,
    KeyBinding,
    TetrosStatus,
    TickResult,
    transition,
)
from sheet_games.tile import FallingTile

logger = logging.getLogger(__name__)


def tile_in_bounds(grid: CellGrid, tile: FallingTile) -> bool:
    """Check that every cell of ``tile`` lies within the grid."""
    return all(grid.contains(cell) for cell in tile.cells)


def touching_pile(grid: CellGrid, tile: FallingTile) -> bool:
    """Check whether any cell of ``tile`` overlaps a non-blank grid cell.

    The tile itself must not be rendered when this is called.
    """
    return any(grid.value_at(cell) != EMPTY for cell in tile.cells)


def is_row_full(grid: CellGrid, row: int) -> bool:
    return all(
        grid.value_at(CellLocation(row, column)) != EMPTY
        for column in range(grid.columns)
    )


def _shift_down(grid: CellGrid, row: int, tile: FallingTile | None) -> bool:
    """Move everything above ``row`` down one row, overwriting ``row``.

    Cells of the falling tile are neither copied nor overwritten from above,
    and the top row is blanked. Returns True if any cell changed.
    """
    changed = False
    for target in range(row, -1, -1):
        for column in range(grid.columns):
            source = CellLocation(target - 1, column)
            if tile is not None and tile.contains(source):
                continue
            location = CellLocation(target, column)
            if target == 0:
                if tile is not None and tile.contains(location):
                    continue
                value = EMPTY
            else:
                value = grid.value_at(source)
            if grid.value_at(location) != value:
                grid.update(location, value)
                changed = True
    return changed


def clear_full_rows(grid: CellGrid, tile: FallingTile | None = None) -> int:
    """Remove full rows, bottom to top, dropping the rows above them.

    After a row is cleared it is examined again, since the row above has
    moved into it. Returns the number of rows cleared.
    """
    cleared = 0
    row = grid.rows - 1
    while row >= 0:
        if is_row_full(grid, row) and _shift_down(grid, row, tile):
            cleared += 1
            continue
        row -= 1
    return cleared


class TetrosEngine:
    """Drops tiles onto a grid, one row per tick."""

    def __init__(self, grid: CellGrid, random_tile: TileSource) -> None:
        self.grid = grid
        self.random_tile = random_tile
        self.status = TetrosStatus.NOT_STARTED
        self.tile: FallingTile | None = None
        self.rows_cleared = 0
        self.tiles_dropped = 0

    @property
    def falling(self) -> bool:
        return self.status is TetrosStatus.FALLING

    def start(self, origin: CellLocation | None = None) -> TickResult:
        """Start the game by spawning the first tile. ``origin`` is ignored."""
        self.status = transition(self.status, GameEvent.START)
        self.rows_cleared = 0
        self.tiles_dropped = 0
        logger.info("Tetros started.")
        return self._spawn()

    def move(self, distance: int) -> None:
        """Shift the tile sideways if it stays within the grid."""
        if not self.falling:
            return
        self._replace(self.tile.moved(distance))

    def rotate(self, direction: int) -> None:
        """Rotate the tile if the result stays within the grid."""
        if not self.falling:
            return
        self._replace(self.tile.rotated(direction))

    def drop(self) -> bool:
        """Lower the tile one row.

        Returns False, leaving the tile where it was, if it would leave the
        grid or overlap the pile.
        """
        if not self.falling:
            return False
        dropped = self.tile.dropped()
        paint(self.grid, self.tile.cells, None)
        if tile_in_bounds(self.grid, dropped) and not touching_pile(
            self.grid, dropped,
        ):
            self.tile = dropped
            self._render()
            return True
        self._render()
        return False

    def full_drop(self) -> None:
        """Drop the tile until it lands."""
        while self.drop():
            pass

    def drop_new_tile(self) -> bool:
        """Spawn a random tile at the top.

        Returns False, without rendering it, if it overlaps the pile.
        """
        self.tile = FallingTile.spawn(self.random_tile.pick())
        if not tile_in_bounds(self.grid, self.tile) or touching_pile(
            self.grid, self.tile,
        ):
            return False
        self.tiles_dropped += 1
        self._render()
        return True

    def advance(self) -> TickResult:
        """Drop the tile, or spawn the next one, then clear full rows."""
        if not self.falling:
            return TickResult.no_change()

        result = TickResult.updated()
        if not self.drop():
            self.status = transition(self.status, GameEvent.LAND)
            result = self._spawn()

        cleared = clear_full_rows(self.grid, self.tile)
        if cleared:
            self.rows_cleared += cleared
            logger.debug("Cleared %d rows.", cleared)
        return result

    def stop(self) -> TickResult:
        """No-op: the game runs until it ends or is restarted."""
        return TickResult.no_change()

    def bindings(self) -> list[KeyBinding]:
        return [
            KeyBinding("a", "Move Left", lambda: self.move(-1)),
            KeyBinding("d", "Move Right", lambda: self.move(1)),
            KeyBinding("q", "Rotate Left", lambda: self.rotate(-1)),
            KeyBinding("e", "Rotate Right", lambda: self.rotate(1)),
            KeyBinding("s", "Drop", self.full_drop),
        ]

    def commands(self) -> dict[str, Callable[[], TickResult]]:
        return {}

    def get_state(self) -> dict:
        """Return the serializable game state."""
        return {
            "game": "tetros",
            "status": self.status.value,
            "tile": self.tile.to_dict() if self.tile is not None else None,
            "rows_cleared": self.rows_cleared,
            "tiles_dropped": self.tiles_dropped,
        }

    def _spawn(self) -> TickResult:
        if self.drop_new_tile():
            self.status = transition(self.status, GameEvent.SPAWN)
            return TickResult.updated()
        self.status = transition(self.status, GameEvent.BLOCK)
        logger.info(
            "Tetros over after %d tiles and %d cleared rows.",
            self.tiles_dropped, self.rows_cleared,
        )
        return TickResult.game_over()

    def _replace(self, candidate: FallingTile) -> None:
        paint(self.grid, self.tile.cells, None)
        if tile_in_bounds(self.grid, candidate):
            self.tile = candidate
        self._render()

    def _render(self) -> None:
        paint(self.grid, self.tile.cells, self.tile.tile_type)
