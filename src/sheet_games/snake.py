"""Snake body representation and movement logic."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from sheet_games.grid import CellLocation


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @classmethod
    def parse(cls, name: str) -> Direction:
        """Look a direction up by case-insensitive name.

        Raises:
            ValueError: If ``name`` is not a direction.
        """
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown direction {name!r}.") from None


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def are_opposite(first: Direction, second: Direction) -> bool:
    """Check whether two directions point exactly away from each other."""
    return _OPPOSITES[first] is second


@dataclass(frozen=True)
class SnakeState:
    """Immutable snapshot of a snake.

    ``body`` runs tail first: the head is ``body[-1]``. Every move produces a
    new snapshot.
    """

    body: tuple[CellLocation, ...]
    direction: Direction = Direction.DOWN

    def __post_init__(self) -> None:
        if not self.body:
            raise ValueError("A snake needs at least one cell.")
        if not isinstance(self.direction, Direction):
            # Unreachable through the public API; a corrupt direction is fatal.
            raise RuntimeError(f"Invalid snake direction {self.direction!r}.")

    @classmethod
    def spawn(cls, origin: CellLocation) -> SnakeState:
        """Create a one-cell snake heading down."""
        return cls((CellLocation(*origin),), Direction.DOWN)

    @property
    def head(self) -> CellLocation:
        return self.body[-1]

    @property
    def tail(self) -> CellLocation:
        return self.body[0]

    @property
    def length(self) -> int:
        return len(self.body)

    def turned(self, direction: Direction) -> SnakeState:
        """Return this snake heading in ``direction``, ignoring reversals."""
        if are_opposite(self.direction, direction):
            return self
        return SnakeState(self.body, direction)

    def next_head(self) -> CellLocation:
        """Compute the next head position without moving."""
        dr, dc = self.direction.value
        return self.head.offset(dr, dc)

    def moved(self, grow: bool = False) -> SnakeState:
        """Return the snake one step forward, keeping the tail if growing."""
        body = self.body + (self.next_head(),)
        if not grow:
            body = body[1:]
        return SnakeState(body, self.direction)

    def head_at(self, location: CellLocation) -> bool:
        return self.head == location

    def in_itself(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        return self.head in self.body[:-1]

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [list(seg) for seg in self.body],
            "direction": self.direction.name,
            "length": self.length,
        }
