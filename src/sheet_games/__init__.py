"""Sheet games: Life, Snake, and Tetros engines on a shared grid."""

from sheet_games.config import GameKind, SessionConfig
from sheet_games.grid import CellGrid, CellLocation, Grid
from sheet_games.life import LifeEngine, LifeState
from sheet_games.session import GameSession
from sheet_games.snake import Direction, SnakeState
from sheet_games.snake_engine import SnakeEngine
from sheet_games.state import Outcome, TickResult
from sheet_games.tetros import TetrosEngine
from sheet_games.tile import FallingTile

__all__ = [
    "CellGrid",
    "CellLocation",
    "Direction",
    "FallingTile",
    "GameKind",
    "GameSession",
    "Grid",
    "LifeEngine",
    "LifeState",
    "Outcome",
    "SessionConfig",
    "SnakeEngine",
    "SnakeState",
    "TetrosEngine",
    "TickResult",
]
