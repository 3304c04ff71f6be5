"""Snake food read from, and rendered onto, the grid."""

from __future__ import annotations

import logging

from sheet_games.grid import CellGrid, CellLocation, paint
from sheet_games.random_source import CellSource

logger = logging.getLogger(__name__)

FOOD_MARKER = "2"


class FoodSupply:
    """Tracks the food cells of a snake game.

    Food is placed by the user before the game starts. An eaten food cell is
    replaced by a random free cell. The food is lost instead when the draw
    lands on the cell just eaten or when the grid has no free cell left.
    """

    def __init__(self, grid: CellGrid, random_cell: CellSource) -> None:
        self.grid = grid
        self.random_cell = random_cell
        self.positions: list[CellLocation] = []

    def read(self) -> list[CellLocation]:
        """Load food from every cell rendered as ``2``."""
        self.positions = [
            CellLocation(row, column)
            for row in range(self.grid.rows)
            for column in range(self.grid.columns)
            if self.grid.value_at(CellLocation(row, column)) == FOOD_MARKER
        ]
        logger.debug("Read %d food cells from the grid.", len(self.positions))
        return self.positions

    def render(self) -> None:
        paint(self.grid, self.positions, int(FOOD_MARKER))

    def consume(self, head: CellLocation) -> bool:
        """Eat any food under ``head`` and re-render the food.

        Returns True if something was eaten.
        """
        eaten = False
        remaining: list[CellLocation] = []
        for position in self.positions:
            if position != head:
                remaining.append(position)
                continue
            eaten = True
            picked = self.random_cell.pick()
            if picked is None:
                logger.debug("No free cell to replace food at %s; dropped.", position)
                continue
            replacement = CellLocation(*picked)
            if replacement == position:
                logger.debug("Replacement food landed on %s; dropped.", position)
                continue
            remaining.append(replacement)
        self.positions = remaining
        self.render()
        return eaten

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {"positions": [list(p) for p in self.positions]}
