"""Tick results and the per-engine status machines."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NamedTuple, Protocol

from sheet_games.grid import CellLocation


class Outcome(str, enum.Enum):
    """What a single engine call did to the game."""

    NO_CHANGE = "no_change"
    CHANGED = "changed"
    GAME_OVER = "game_over"
    WIN = "win"


@dataclass(frozen=True)
class TickResult:
    """Outcome of an engine call plus any message for the user."""

    outcome: Outcome
    message: str | None = None

    @property
    def changed(self) -> bool:
        """True when the grid may have been written to."""
        return self.outcome is not Outcome.NO_CHANGE

    @property
    def ended(self) -> bool:
        return self.outcome in (Outcome.GAME_OVER, Outcome.WIN)

    @classmethod
    def no_change(cls, message: str | None = None) -> TickResult:
        return cls(Outcome.NO_CHANGE, message)

    @classmethod
    def updated(cls, message: str | None = None) -> TickResult:
        return cls(Outcome.CHANGED, message)

    @classmethod
    def game_over(cls, message: str = "Game Over!") -> TickResult:
        return cls(Outcome.GAME_OVER, message)

    @classmethod
    def win(cls, message: str = "You win!") -> TickResult:
        return cls(Outcome.WIN, message)

    def to_dict(self) -> dict:
        return {"outcome": self.outcome.value, "message": self.message}


class LifeStatus(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class SnakeStatus(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    GAME_OVER = "game_over"
    WIN = "win"


class TetrosStatus(enum.Enum):
    NOT_STARTED = "not_started"
    FALLING = "falling"
    # Transient: the tile could not drop and a new one is about to spawn.
    LANDED = "landed"
    GAME_OVER = "game_over"


class GameEvent(enum.Enum):
    """Inputs to the status machines."""

    START = "start"
    STOP = "stop"
    COLLIDE = "collide"
    FILL = "fill"
    LAND = "land"
    SPAWN = "spawn"
    BLOCK = "block"


class InvalidTransitionError(RuntimeError):
    """Raised when an engine requests a transition its machine lacks."""


_TRANSITIONS: dict[enum.Enum, dict[GameEvent, enum.Enum]] = {
    LifeStatus.STOPPED: {
        GameEvent.START: LifeStatus.RUNNING,
        GameEvent.STOP: LifeStatus.STOPPED,
    },
    LifeStatus.RUNNING: {
        GameEvent.START: LifeStatus.RUNNING,
        GameEvent.STOP: LifeStatus.STOPPED,
    },
    SnakeStatus.NOT_STARTED: {GameEvent.START: SnakeStatus.RUNNING},
    SnakeStatus.RUNNING: {
        GameEvent.START: SnakeStatus.RUNNING,
        GameEvent.COLLIDE: SnakeStatus.GAME_OVER,
        GameEvent.FILL: SnakeStatus.WIN,
    },
    SnakeStatus.GAME_OVER: {GameEvent.START: SnakeStatus.RUNNING},
    SnakeStatus.WIN: {GameEvent.START: SnakeStatus.RUNNING},
    TetrosStatus.NOT_STARTED: {GameEvent.START: TetrosStatus.LANDED},
    TetrosStatus.FALLING: {
        GameEvent.START: TetrosStatus.LANDED,
        GameEvent.LAND: TetrosStatus.LANDED,
    },
    TetrosStatus.LANDED: {
        GameEvent.SPAWN: TetrosStatus.FALLING,
        GameEvent.BLOCK: TetrosStatus.GAME_OVER,
    },
    TetrosStatus.GAME_OVER: {GameEvent.START: TetrosStatus.LANDED},
}


def transition(status: enum.Enum, event: GameEvent) -> enum.Enum:
    """Return the status reached from ``status`` on ``event``.

    Raises:
        InvalidTransitionError: If ``event`` is not defined for ``status``.
    """
    try:
        return _TRANSITIONS[status][event]
    except KeyError:
        raise InvalidTransitionError(
            f"No transition from {status!r} on {event.value!r}."
        ) from None


class KeyBinding(NamedTuple):
    """A key press bound to an engine action."""

    key: str
    label: str
    action: Callable[[], Any]


class Engine(Protocol):
    """What a tick driver needs from a game engine."""

    def start(self, origin: CellLocation | None = None) -> TickResult: ...

    def stop(self) -> TickResult: ...

    def advance(self) -> TickResult: ...

    def bindings(self) -> list[KeyBinding]: ...

    def commands(self) -> dict[str, Callable[[], TickResult]]: ...

    def get_state(self) -> dict: ...
