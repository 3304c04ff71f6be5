"""Grid capability shared by the games, plus an in-memory implementation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple, Protocol, runtime_checkable

import numpy as np

# Rendered content of a blank cell.
EMPTY = ""


class CellLocation(NamedTuple):
    """A (row, column) cell reference, compared by value."""

    row: int
    column: int

    def offset(self, rows: int = 0, columns: int = 0) -> CellLocation:
        """Return the location shifted by the given deltas."""
        return CellLocation(self.row + rows, self.column + columns)

    def __str__(self) -> str:
        return f"({self.row}, {self.column})"


@runtime_checkable
class CellGrid(Protocol):
    """The narrow grid contract the game engines depend on.

    ``value_at`` returns the rendered cell content, ``""`` for blank cells.
    ``update`` accepts an integer marker, a string, or ``None`` to blank a
    cell.
    """

    @property
    def rows(self) -> int: ...

    @property
    def columns(self) -> int: ...

    def value_at(self, location: CellLocation) -> str: ...

    def update(self, location: CellLocation, value: int | str | None) -> None: ...

    def clear(self) -> None: ...

    def contains(self, location: CellLocation) -> bool: ...


def render_value(value: int | str | None) -> str:
    """Render a cell value the way the grid stores it."""
    if value is None:
        return EMPTY
    return str(value)


class Grid:
    """NumPy-backed rectangular grid of rendered cell values.

    Coordinates use (row, column) ordering consistent with NumPy indexing.
    """

    def __init__(self, rows: int = 20, columns: int = 10) -> None:
        if rows < 1 or columns < 1:
            raise ValueError("Grid dimensions must be at least 1×1.")
        self._rows = rows
        self._columns = columns
        self.cells = np.full((rows, columns), EMPTY, dtype=object)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self._rows * self._columns

    def contains(self, location: CellLocation) -> bool:
        """Check whether a location lies within the grid."""
        row, column = location
        return 0 <= row < self._rows and 0 <= column < self._columns

    def value_at(self, location: CellLocation) -> str:
        """Return the rendered value at ``location``.

        Raises:
            IndexError: If the location is outside the grid.
        """
        if not self.contains(location):
            raise IndexError(f"Cell {location} out of bounds")
        return self.cells[location[0], location[1]]

    def update(self, location: CellLocation, value: int | str | None) -> None:
        """Write ``value`` into the cell at ``location``.

        Raises:
            IndexError: If the location is outside the grid.
        """
        if not self.contains(location):
            raise IndexError(f"Cell {location} out of bounds")
        self.cells[location[0], location[1]] = render_value(value)

    def clear(self) -> None:
        """Reset all cells to blank."""
        self.cells[:] = EMPTY

    def empty_cells(self) -> list[CellLocation]:
        """Return every blank cell location."""
        rows, columns = np.where(self.cells == EMPTY)
        return [
            CellLocation(r, c)
            for r, c in zip(rows.tolist(), columns.tolist(), strict=True)
        ]

    def render_text(self, blank: str = ".") -> str:
        """Return a plain-text picture of the grid, one line per row."""
        width = max(
            [len(blank)] + [len(v) for v in self.cells.ravel().tolist()],
        )
        lines = []
        for row in self.cells.tolist():
            lines.append(" ".join((v or blank).rjust(width) for v in row))
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "rows": self._rows,
            "columns": self._columns,
            "cells": self.cells.tolist(),
        }


def paint(
    grid: CellGrid,
    locations: Iterable[CellLocation],
    value: int | str | None,
) -> None:
    """Write the same value into every listed cell."""
    for location in locations:
        grid.update(location, value)
