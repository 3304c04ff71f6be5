"""WebSocket handler for real-time play."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from sheet_games.grid import CellLocation
from sheet_games.server.models import SessionStatus
from sheet_games.server.session_manager import SessionManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


def _parse_origin(raw: object) -> CellLocation | None:
    if (
        isinstance(raw, list)
        and len(raw) == 2
        and all(isinstance(v, int) for v in raw)
    ):
        return CellLocation(raw[0], raw[1])
    return None


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send keys or start, receive state each tick."""
    manager = _get_manager(websocket)
    hosted = manager.get_session(session_id)
    if hosted is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    hosted.players.append(websocket)
    logger.info("Player connected to session %s.", session_id)

    # Send initial state snapshot so the client gets immediate feedback.
    await websocket.send_text(
        json.dumps(hosted.snapshot(), separators=(",", ":")),
    )

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            if "start" in msg:
                if hosted.status != SessionStatus.ACTIVE:
                    continue
                result = await manager.start(
                    session_id, _parse_origin(msg["start"]),
                )
                await websocket.send_text(
                    json.dumps(result.to_dict(), separators=(",", ":")),
                )
                continue

            key = msg.get("key")
            if isinstance(key, str) and key:
                await manager.press(session_id, key)
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    finally:
        if websocket in hosted.players:
            hosted.players.remove(websocket)
