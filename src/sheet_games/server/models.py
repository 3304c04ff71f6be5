"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from sheet_games.config import (
    MAX_GRID_SIDE,
    MAX_TICK_RATE_MS,
    MIN_TICK_RATE_MS,
    GameKind,
)


class SessionStatus(str, enum.Enum):
    """Lifecycle states for a hosted session."""

    ACTIVE = "active"
    FINISHED = "finished"


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    game: GameKind = GameKind.LIFE
    rows: int = Field(default=20, ge=1, le=MAX_GRID_SIDE)
    columns: int = Field(default=10, ge=1, le=MAX_GRID_SIDE)
    tick_rate_ms: int = Field(
        default=200, ge=MIN_TICK_RATE_MS, le=MAX_TICK_RATE_MS,
    )
    seed: int | None = None


class CellRequest(BaseModel):
    """Request body for PUT /sessions/{session_id}/cells."""

    row: int = Field(ge=0)
    column: int = Field(ge=0)
    value: int | str | None = None


class StartRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/start.

    Row and column are the selected cell; omit both when none is selected.
    """

    row: int | None = Field(default=None, ge=0)
    column: int | None = Field(default=None, ge=0)


class KeyRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/keys."""

    key: str = Field(min_length=1, max_length=1)


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    game: GameKind
    status: SessionStatus
    rows: int
    columns: int
    tick_rate_ms: int


class CommandResponse(BaseModel):
    """Result of a start or menu command."""

    session_id: str
    outcome: str
    message: str | None = None
