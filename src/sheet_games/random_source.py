"""Seedable random sources for food placement and tile generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import numpy as np

if TYPE_CHECKING:
    from sheet_games.grid import CellLocation, Grid

logger = logging.getLogger(__name__)

# Number of distinct tetromino shapes a tile source chooses between.
TILE_SHAPES = 7


class CellSource(Protocol):
    """Supplies a random free cell for new snake food, or None if full."""

    def pick(self) -> CellLocation | None: ...


class TileSource(Protocol):
    """Supplies a random shape index in ``range(TILE_SHAPES)``."""

    def pick(self) -> int: ...


class RandomCell:
    """Uniformly random blank cell of a grid.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()

    def pick(self) -> CellLocation | None:
        """Return a blank cell, or None when every cell is taken."""
        empty = self.grid.empty_cells()
        if not empty:
            logger.warning("No empty cells available for food.")
            return None
        return empty[int(self.rng.integers(len(empty)))]


class RandomTile:
    """Uniformly random tetromino shape index."""

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()

    def pick(self) -> int:
        return int(self.rng.integers(0, TILE_SHAPES))
