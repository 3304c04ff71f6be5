"""Session configuration with JSON persistence."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

MIN_TICK_RATE_MS = 50
MAX_TICK_RATE_MS = 2000
MAX_GRID_SIDE = 100


class GameKind(str, enum.Enum):
    """The games a session can run."""

    LIFE = "life"
    SNAKE = "snake"
    TETROS = "tetros"


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for one game session.

    ``seed`` fixes the random sources so that a session can be replayed.
    """

    game: GameKind = GameKind.LIFE
    rows: int = 20
    columns: int = 10
    tick_rate_ms: int = 200
    seed: int | None = None

    def __post_init__(self) -> None:
        # Accept the plain string form, e.g. from JSON.
        object.__setattr__(self, "game", GameKind(self.game))
        if not 1 <= self.rows <= MAX_GRID_SIDE:
            raise ValueError(f"rows must be between 1 and {MAX_GRID_SIDE}.")
        if not 1 <= self.columns <= MAX_GRID_SIDE:
            raise ValueError(f"columns must be between 1 and {MAX_GRID_SIDE}.")
        if not MIN_TICK_RATE_MS <= self.tick_rate_ms <= MAX_TICK_RATE_MS:
            raise ValueError(
                f"tick_rate_ms must be between {MIN_TICK_RATE_MS} and "
                f"{MAX_TICK_RATE_MS}."
            )

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        d = asdict(self)
        d["game"] = self.game.value
        return d

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> SessionConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
