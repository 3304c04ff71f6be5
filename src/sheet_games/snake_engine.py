"""Tick-driven snake game composing the grid, snake, and food logic."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sheet_games.food import FoodSupply
from sheet_games.grid import CellGrid, CellLocation, paint
from sheet_games.random_source import CellSource
from sheet_games.snake import Direction, SnakeState
from sheet_games.state import (
    GameEvent,
    KeyBinding,
    SnakeStatus,
    TickResult,
    transition,
)

logger = logging.getLogger(__name__)

BODY_MARKER = 1
NO_ORIGIN_MESSAGE = "Select a starting cell before starting Snake."


class SnakeEngine:
    """Single-snake game played on a shared grid.

    The snake starts as one cell on the selected origin, heading down. Food
    eaten on one tick grows the snake on the next. At most one direction
    change is honoured between ticks.
    """

    def __init__(self, grid: CellGrid, random_cell: CellSource) -> None:
        self.grid = grid
        self.food = FoodSupply(grid, random_cell)
        self.status = SnakeStatus.NOT_STARTED
        self.snake: SnakeState | None = None
        self.score = 0
        self.tick = 0
        self._grow_next_tick = False
        self._changed_direction_this_tick = False

    @property
    def running(self) -> bool:
        return self.status is SnakeStatus.RUNNING

    def start(self, origin: CellLocation | None = None) -> TickResult:
        """Start a game with the snake on ``origin``.

        Without an origin inside the grid nothing starts and the result
        carries a reminder for the user.
        """
        if origin is None or not self.grid.contains(origin):
            return TickResult.no_change(NO_ORIGIN_MESSAGE)

        self.status = transition(self.status, GameEvent.START)
        self.snake = SnakeState.spawn(origin)
        self.score = 0
        self.tick = 0
        self._grow_next_tick = False
        self._changed_direction_this_tick = False

        self.food.read()
        self._render_snake()
        self.food.render()
        logger.info(
            "Snake started at %s with %d food.", self.snake.head,
            len(self.food.positions),
        )
        return TickResult.updated()

    def change_direction(self, direction: Direction) -> None:
        """Turn the snake, at most once per tick and never straight back."""
        if not self.running or self._changed_direction_this_tick:
            return
        assert self.snake is not None  # noqa: S101
        self.snake = self.snake.turned(direction)
        self._changed_direction_this_tick = True

    def advance(self) -> TickResult:
        """Move the snake one cell and resolve collisions and food."""
        if not self.running:
            return TickResult.no_change()
        assert self.snake is not None  # noqa: S101

        grow = self._grow_next_tick
        self._grow_next_tick = False
        moved = self.snake.moved(grow)

        if not self._in_bounds(moved) or moved.in_itself():
            self.status = transition(self.status, GameEvent.COLLIDE)
            self.tick += 1
            logger.info(
                "Snake died at tick %d with score %d.", self.tick, self.score,
            )
            return TickResult.game_over()

        won = moved.length == self.grid.rows * self.grid.columns

        paint(self.grid, self.snake.body, None)
        self.snake = moved
        self._render_snake()

        self._grow_next_tick = self.food.consume(self.snake.head)
        if self._grow_next_tick:
            self.score += 1
        self._changed_direction_this_tick = False
        self.tick += 1

        if won:
            self.status = transition(self.status, GameEvent.FILL)
            logger.info("Snake filled the grid at tick %d.", self.tick)
            return TickResult.win()
        return TickResult.updated()

    def stop(self) -> TickResult:
        """No-op: the game runs until it ends or is restarted."""
        return TickResult.no_change()

    def bindings(self) -> list[KeyBinding]:
        return [
            KeyBinding("w", "Turn Up", lambda: self.change_direction(Direction.UP)),
            KeyBinding("s", "Turn Down", lambda: self.change_direction(Direction.DOWN)),
            KeyBinding("a", "Turn Left", lambda: self.change_direction(Direction.LEFT)),
            KeyBinding("d", "Turn Right", lambda: self.change_direction(Direction.RIGHT)),
        ]

    def commands(self) -> dict[str, Callable[[], TickResult]]:
        return {}

    def get_state(self) -> dict:
        """Return the serializable game state."""
        return {
            "game": "snake",
            "status": self.status.value,
            "tick": self.tick,
            "score": self.score,
            "snake": self.snake.to_dict() if self.snake is not None else None,
            "food": self.food.to_dict(),
        }

    def _in_bounds(self, snake: SnakeState) -> bool:
        return all(self.grid.contains(cell) for cell in snake.body)

    def _render_snake(self) -> None:
        assert self.snake is not None  # noqa: S101
        paint(self.grid, self.snake.body, BODY_MARKER)
