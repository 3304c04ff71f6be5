"""In-memory session registry, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field

from starlette.websockets import WebSocket, WebSocketState

from sheet_games.config import GameKind, SessionConfig
from sheet_games.grid import CellLocation
from sheet_games.server.models import SessionStatus, SessionSummary
from sheet_games.session import GameSession
from sheet_games.state import TickResult

logger = logging.getLogger(__name__)

_MAX_FINISHED_SESSIONS = 100


@dataclass
class HostedSession:
    """A game session plus its connections and tick task."""

    session_id: str
    session: GameSession
    status: SessionStatus = SessionStatus.ACTIVE
    players: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def config(self) -> SessionConfig:
        return self.session.config

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            game=self.config.game,
            status=self.status,
            rows=self.config.rows,
            columns=self.config.columns,
            tick_rate_ms=self.config.tick_rate_ms,
        )

    def snapshot(self) -> dict:
        """Return the session state with its id and status."""
        state = self.session.get_state()
        state["session_id"] = self.session_id
        state["status"] = self.status.value
        return state


class SessionManager:
    """Central registry managing all hosted sessions.

    Each session ticks on its own asyncio task from creation until it ends
    or is deleted. Inputs and ticks never interleave: both hold the
    session lock.
    """

    def __init__(
        self, max_finished_sessions: int = _MAX_FINISHED_SESSIONS,
    ) -> None:
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        self._sessions: dict[str, HostedSession] = {}
        self._max_finished_sessions = max_finished_sessions

    def create_session(
        self,
        game: str = "life",
        rows: int = 20,
        columns: int = 10,
        tick_rate_ms: int = 200,
        seed: int | None = None,
    ) -> HostedSession:
        """Create a session and start its tick loop."""
        config = SessionConfig(
            game=GameKind(game),
            rows=rows,
            columns=columns,
            tick_rate_ms=tick_rate_ms,
            seed=seed,
        )
        session_id = uuid.uuid4().hex[:12]
        hosted = HostedSession(session_id=session_id, session=GameSession(config))
        self._sessions[session_id] = hosted
        hosted._task = asyncio.create_task(self._tick_loop(hosted))
        logger.info("Session %s created (game=%s).", session_id, config.game.value)
        return hosted

    def get_session(self, session_id: str) -> HostedSession | None:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> HostedSession:
        hosted = self._sessions.get(session_id)
        if hosted is None:
            raise KeyError(f"Session {session_id} not found.")
        return hosted

    def list_sessions(self) -> list[SessionSummary]:
        """Return summaries of sessions that are still running."""
        return [
            h.summary() for h in self._sessions.values()
            if h.status != SessionStatus.FINISHED
        ]

    async def set_cell(
        self,
        session_id: str,
        location: CellLocation,
        value: int | str | None,
    ) -> None:
        """Write a cell in a running session."""
        hosted = self._require(session_id)
        async with hosted.lock:
            if not hosted.session.grid.contains(location):
                raise ValueError(f"Cell {location} is outside the grid.")
            hosted.session.set_cell(location, value)

    async def start(
        self, session_id: str, origin: CellLocation | None,
    ) -> TickResult:
        """Send the start command to a running session."""
        hosted = self._require(session_id)
        if hosted.status != SessionStatus.ACTIVE:
            raise ValueError("Session has finished.")
        async with hosted.lock:
            return hosted.session.start(origin)

    async def command(self, session_id: str, name: str) -> TickResult:
        """Run a named menu command in a running session."""
        hosted = self._require(session_id)
        if hosted.status != SessionStatus.ACTIVE:
            raise ValueError("Session has finished.")
        async with hosted.lock:
            return hosted.session.command(name)

    async def press(self, session_id: str, key: str) -> bool:
        """Press a bound key in a running session."""
        hosted = self._require(session_id)
        async with hosted.lock:
            if hosted.status != SessionStatus.ACTIVE:
                return False
            return hosted.session.press(key)

    async def delete_session(self, session_id: str) -> None:
        """Stop a session's tick loop and forget it."""
        hosted = self._sessions.pop(session_id, None)
        if hosted is None:
            raise KeyError(f"Session {session_id} not found.")
        task = hosted._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        self._mark_finished(hosted)
        await self._close_connections(hosted)
        logger.info("Session %s deleted.", session_id)

    async def _tick_loop(self, hosted: HostedSession) -> None:
        """Advance the session each interval, broadcasting its state."""
        tick_interval = hosted.config.tick_rate_ms / 1000.0
        try:
            while hosted.status == SessionStatus.ACTIVE:
                await asyncio.sleep(tick_interval)
                async with hosted.lock:
                    result = hosted.session.tick()
                    if result.ended:
                        self._mark_finished(hosted)
                    state = hosted.snapshot()
                if result.changed:
                    await self._broadcast(hosted, state)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", hosted.session_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", hosted.session_id)
            self._mark_finished(hosted)
        finally:
            if hosted.status == SessionStatus.FINISHED:
                await self._close_connections(hosted)
                self._prune_finished_sessions()

    def _mark_finished(self, hosted: HostedSession) -> None:
        """Transition a session to finished exactly once."""
        if hosted.status != SessionStatus.FINISHED:
            hosted.status = SessionStatus.FINISHED
            hosted.finished_at = time.monotonic()
            logger.info(
                "Session %s finished after %d ticks.",
                hosted.session_id, hosted.session.ticks,
            )

    async def _close_connections(self, hosted: HostedSession) -> None:
        """Close any live sockets of a finished session."""
        for ws in list(hosted.players):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Session finished.")
            except Exception:
                logger.warning(
                    "Failed closing socket in session %s.", hosted.session_id,
                )
        hosted.players.clear()

    def _prune_finished_sessions(self) -> None:
        """Bound retained finished sessions."""
        finished = [
            h for h in self._sessions.values()
            if h.status == SessionStatus.FINISHED
        ]
        overflow = len(finished) - self._max_finished_sessions
        if overflow <= 0:
            return

        finished.sort(
            key=lambda h: h.finished_at if h.finished_at is not None else h.created_at,
        )
        for stale in finished[:overflow]:
            self._sessions.pop(stale.session_id, None)
        logger.info(
            "Pruned %d finished sessions (retaining up to %d).",
            overflow,
            self._max_finished_sessions,
        )

    async def _broadcast(self, hosted: HostedSession, state: dict) -> None:
        """Send session state to every connected socket."""
        payload = json.dumps(state, separators=(",", ":"))
        dead: list[WebSocket] = []

        # Iterate over a snapshot so disconnect handlers can mutate the list.
        for ws in list(hosted.players):
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            if ws in hosted.players:
                hosted.players.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        tasks = [
            h._task for h in self._sessions.values()
            if h._task and not h._task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("SessionManager cleanup complete.")
