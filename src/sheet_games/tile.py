"""Falling tile definitions and their geometric moves.

Every move returns a new tile; none of them check bounds or the pile.
"""

from __future__ import annotations

from dataclasses import dataclass

from sheet_games.grid import CellLocation

Shape = tuple[tuple[int, int], ...]

# Spawn cells and rendered type code for each generation index. The type
# codes only distinguish the shapes on the grid.
SHAPES: tuple[tuple[Shape, int], ...] = (
    (((0, 0), (0, 1), (1, 1), (1, 2)), 4),  # Z
    (((0, 0), (1, 0), (2, 0), (2, 1)), 7),  # L
    (((0, 1), (1, 1), (2, 1), (2, 0)), 5),  # J
    (((0, 0), (0, 1), (0, 2), (1, 1)), 8),  # T
    (((0, 0), (0, 1), (1, 0), (1, 1)), 3),  # O
    (((0, 0), (1, 0), (2, 0), (3, 0)), 6),  # I
    (((0, 1), (0, 2), (1, 0), (1, 1)), 2),  # S
)


def _truncated_mean(values: list[int]) -> int:
    """Integer average, rounded toward zero."""
    total = sum(values)
    quotient = abs(total) // len(values)
    return quotient if total >= 0 else -quotient


@dataclass(frozen=True)
class FallingTile:
    """The tile currently falling: four cells and a type code."""

    cells: tuple[CellLocation, ...]
    tile_type: int

    @classmethod
    def spawn(cls, index: int) -> FallingTile:
        """Create the tile for generation ``index`` at the top-left corner.

        Raises:
            ValueError: If ``index`` is not a valid shape index.
        """
        if not 0 <= index < len(SHAPES):
            raise ValueError(
                f"Shape index must be in [0, {len(SHAPES)}), got {index}."
            )
        shape, tile_type = SHAPES[index]
        return cls(tuple(CellLocation(r, c) for r, c in shape), tile_type)

    def moved(self, distance: int) -> FallingTile:
        """Shift sideways; negative distances move left."""
        return FallingTile(
            tuple(cell.offset(columns=distance) for cell in self.cells),
            self.tile_type,
        )

    def dropped(self) -> FallingTile:
        """Shift down by one row."""
        return FallingTile(
            tuple(cell.offset(rows=1) for cell in self.cells),
            self.tile_type,
        )

    def centroid(self) -> CellLocation:
        """Truncated average row and column of the cells."""
        return CellLocation(
            _truncated_mean([cell.row for cell in self.cells]),
            _truncated_mean([cell.column for cell in self.cells]),
        )

    def rotated(self, direction: int) -> FallingTile:
        """Turn the tile about its centroid.

        Positive ``direction`` turns clockwise, negative anticlockwise; a
        magnitude above one scales the result. This is a discrete
        approximation rather than an exact rotation, and repeated turns are
        not guaranteed to compose.
        """
        centre = self.centroid()
        return FallingTile(
            tuple(
                CellLocation(
                    centre.row + (centre.column - cell.column) * direction,
                    centre.column + (centre.row - cell.row) * direction,
                )
                for cell in self.cells
            ),
            self.tile_type,
        )

    def contains(self, location: CellLocation) -> bool:
        """Check whether ``location`` is one of the tile's cells."""
        return location in self.cells

    def to_dict(self) -> dict:
        return {
            "cells": [list(cell) for cell in self.cells],
            "type": self.tile_type,
        }
