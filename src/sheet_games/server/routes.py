"""REST API route handlers for session lifecycle and input."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response

from sheet_games.grid import CellLocation
from sheet_games.server.models import (
    CellRequest,
    CommandResponse,
    CreateSessionRequest,
    KeyRequest,
    SessionSummary,
    StartRequest,
)
from sheet_games.server.session_manager import SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a session and start ticking it."""
    manager = _get_manager(request)
    try:
        hosted = manager.create_session(
            game=body.game,
            rows=body.rows,
            columns=body.columns,
            tick_rate_ms=body.tick_rate_ms,
            seed=body.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return hosted.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List running sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get the full session state."""
    hosted = _get_manager(request).get_session(session_id)
    if hosted is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    return hosted.snapshot()


@router.put("/{session_id}/cells", status_code=204)
async def set_cell(
    session_id: str, body: CellRequest, request: Request,
) -> Response:
    """Write a single cell, e.g. a live cell or a piece of food."""
    manager = _get_manager(request)
    try:
        await manager.set_cell(
            session_id, CellLocation(body.row, body.column), body.value,
        )
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return Response(status_code=204)


@router.post("/{session_id}/start")
async def start_session(
    session_id: str, body: StartRequest, request: Request,
) -> CommandResponse:
    """Send the start command with the selected cell, if any."""
    manager = _get_manager(request)
    origin = None
    if body.row is not None and body.column is not None:
        origin = CellLocation(body.row, body.column)
    try:
        result = await manager.start(session_id, origin)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return CommandResponse(
        session_id=session_id,
        outcome=result.outcome.value,
        message=result.message,
    )


@router.post("/{session_id}/commands/{name}")
async def run_command(
    session_id: str, name: str, request: Request,
) -> CommandResponse:
    """Run a menu command such as ``gol-start`` or ``gol-end``."""
    manager = _get_manager(request)
    try:
        result = await manager.command(session_id, name)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return CommandResponse(
        session_id=session_id,
        outcome=result.outcome.value,
        message=result.message,
    )


@router.post("/{session_id}/keys")
async def press_key(
    session_id: str, body: KeyRequest, request: Request,
) -> dict:
    """Press a key bound by the session's game."""
    manager = _get_manager(request)
    try:
        handled = await manager.press(session_id, body.key)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"session_id": session_id, "key": body.key, "handled": handled}


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> Response:
    """Stop and remove a session."""
    try:
        await _get_manager(request).delete_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)
