"""Conway's Game of Life played on the cells of a grid.

On cells hold the marker ``1``; every other cell is off. The game reads the
grid each tick, so cells can be edited by hand while it runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from sheet_games.grid import CellGrid, CellLocation
from sheet_games.state import GameEvent, KeyBinding, LifeStatus, TickResult, transition

logger = logging.getLogger(__name__)

ON_MARKER = "1"
START_COMMAND = "gol-start"
END_COMMAND = "gol-end"

# Live cells survive with 2 or 3 live neighbours; dead cells are born with 3.
SURVIVAL = frozenset({2, 3})
BIRTH = frozenset({3})


@dataclass(frozen=True)
class LifeState:
    """One on/off flag per grid cell, shaped ``(rows, columns)``."""

    cells: np.ndarray

    @classmethod
    def blank(cls, rows: int, columns: int) -> LifeState:
        return cls(np.zeros((rows, columns), dtype=bool))

    @property
    def shape(self) -> tuple[int, int]:
        return self.cells.shape

    def is_on(self, location: CellLocation) -> bool:
        return bool(self.cells[location.row, location.column])

    def on_cells(self) -> list[CellLocation]:
        """Return the locations of every on cell in row-major order."""
        rows, columns = np.nonzero(self.cells)
        return [
            CellLocation(r, c)
            for r, c in zip(rows.tolist(), columns.tolist(), strict=True)
        ]

    def __str__(self) -> str:
        return ", ".join(f"{cell}:ON" for cell in self.on_cells())


def read_state(grid: CellGrid) -> LifeState:
    """Snapshot the grid: a cell is on iff it renders exactly as ``1``."""
    cells = np.zeros((grid.rows, grid.columns), dtype=bool)
    for row in range(grid.rows):
        for column in range(grid.columns):
            value = grid.value_at(CellLocation(row, column))
            cells[row, column] = value == ON_MARKER
    return LifeState(cells)


def count_neighbours(cells: np.ndarray) -> np.ndarray:
    """Count on cells in each cell's Moore neighbourhood.

    Cells beyond the edge contribute nothing; the board does not wrap.
    """
    padded = np.pad(cells.astype(np.int8), 1)
    rows, columns = cells.shape
    counts = np.zeros((rows, columns), dtype=np.int8)
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            if dr == 0 and dc == 0:
                continue
            counts += padded[1 + dr:1 + dr + rows, 1 + dc:1 + dc + columns]
    return counts


def step(state: LifeState) -> LifeState:
    """Apply one generation of Conway's rules to ``state``.

    Every transition is computed from the incoming snapshot, which is left
    untouched.
    """
    counts = count_neighbours(state.cells)
    survives = state.cells & np.isin(counts, list(SURVIVAL))
    born = ~state.cells & np.isin(counts, list(BIRTH))
    return LifeState(survives | born)


def write_state(grid: CellGrid, state: LifeState) -> None:
    """Clear the grid and mark every on cell with ``1``."""
    grid.clear()
    for location in state.on_cells():
        grid.update(location, int(ON_MARKER))


class LifeEngine:
    """Runs the Game of Life on a grid, one generation per tick."""

    def __init__(self, grid: CellGrid) -> None:
        self.grid = grid
        self.status = LifeStatus.STOPPED
        self.state: LifeState | None = None
        self.generation = 0

    @property
    def running(self) -> bool:
        return self.status is LifeStatus.RUNNING

    def start(self, origin: CellLocation | None = None) -> TickResult:
        """Begin advancing on each tick. ``origin`` is ignored."""
        self.status = transition(self.status, GameEvent.START)
        logger.info("Game of Life started.")
        return TickResult.no_change()

    def stop(self) -> TickResult:
        """Stop advancing and discard the working state."""
        self.status = transition(self.status, GameEvent.STOP)
        self.state = None
        logger.info("Game of Life stopped after %d generations.", self.generation)
        return TickResult.no_change()

    def advance(self) -> TickResult:
        """Read the grid, apply one generation, and write it back."""
        if not self.running:
            return TickResult.no_change()
        self.state = step(read_state(self.grid))
        write_state(self.grid, self.state)
        self.generation += 1
        logger.debug("Life generation %d.", self.generation)
        return TickResult.updated()

    def bindings(self) -> list[KeyBinding]:
        return []

    def commands(self) -> dict[str, Callable[[], TickResult]]:
        """Menu commands that start and stop the game."""
        return {START_COMMAND: self.start, END_COMMAND: self.stop}

    def get_state(self) -> dict:
        """Return the serializable game state."""
        on_cells = self.state.on_cells() if self.state is not None else []
        return {
            "game": "life",
            "status": self.status.value,
            "generation": self.generation,
            "on_cells": [list(cell) for cell in on_cells],
        }
