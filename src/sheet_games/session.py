"""In-process tick driver tying a grid, an engine, and a message channel."""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from sheet_games.config import GameKind, SessionConfig
from sheet_games.grid import CellLocation, Grid
from sheet_games.life import LifeEngine
from sheet_games.random_source import RandomCell, RandomTile
from sheet_games.snake_engine import SnakeEngine
from sheet_games.state import Engine, TickResult
from sheet_games.tetros import TetrosEngine

logger = logging.getLogger(__name__)

Notify = Callable[[str], None]


def create_engine(
    config: SessionConfig,
    grid: Grid,
    rng: np.random.Generator | None = None,
) -> Engine:
    """Build the engine ``config`` asks for on ``grid``."""
    rng = rng if rng is not None else np.random.default_rng(config.seed)
    if config.game is GameKind.LIFE:
        return LifeEngine(grid)
    if config.game is GameKind.SNAKE:
        return SnakeEngine(grid, RandomCell(grid, rng=rng))
    return TetrosEngine(grid, RandomTile(rng=rng))


class GameSession:
    """Runs one engine on its own grid.

    Each call to :meth:`tick` advances the engine once. Messages produced by
    the engine are kept in :attr:`messages` and passed to ``notify``.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        notify: Notify | None = None,
        engine: Engine | None = None,
        grid: Grid | None = None,
    ) -> None:
        self.config = config or SessionConfig()
        self.grid = grid or Grid(rows=self.config.rows, columns=self.config.columns)
        self.engine = engine or create_engine(self.config, self.grid)
        self.notify = notify
        self.messages: list[str] = []
        self.ticks = 0
        self.last_result = TickResult.no_change()

    @property
    def ended(self) -> bool:
        return self.last_result.ended

    def set_cell(self, location: CellLocation, value: int | str | None) -> None:
        """Write a cell by hand, e.g. live cells or food before starting."""
        self.grid.update(location, value)

    def start(self, origin: CellLocation | None = None) -> TickResult:
        """Send the start command, with the selected cell if any."""
        return self._record(self.engine.start(origin))

    def stop(self) -> TickResult:
        """Send the stop command; only Life has anything to stop."""
        return self._record(self.engine.stop())

    def command(self, name: str) -> TickResult:
        """Run a named menu command, e.g. ``gol-start`` for Life."""
        commands = self.engine.commands()
        if name not in commands:
            raise ValueError(f"Unknown command {name!r}.")
        return self._record(commands[name]())

    def press(self, key: str) -> bool:
        """Run the action bound to ``key``. Returns False if nothing is bound."""
        for binding in self.engine.bindings():
            if binding.key == key.lower():
                binding.action()
                return True
        logger.warning("No binding for key %r.", key)
        return False

    def tick(self) -> TickResult:
        """Advance the engine once."""
        self.ticks += 1
        return self._record(self.engine.advance())

    def get_state(self) -> dict:
        """Return the full, serializable session state."""
        return {
            "config": self.config.to_dict(),
            "ticks": self.ticks,
            "result": self.last_result.to_dict(),
            "engine": self.engine.get_state(),
            "grid": self.grid.to_dict(),
        }

    def _record(self, result: TickResult) -> TickResult:
        self.last_result = result
        if result.message:
            self.messages.append(result.message)
            logger.info("Message: %s", result.message)
            if self.notify is not None:
                self.notify(result.message)
        return result
