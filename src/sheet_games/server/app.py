"""FastAPI application hosting game sessions over REST and WebSocket."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sheet_games.server.routes import router
from sheet_games.server.session_manager import SessionManager
from sheet_games.server.websocket import ws_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    # Routes and sockets reach the registry through app.state.
    app.state.session_manager = SessionManager()
    logger.info("Session manager ready.")
    try:
        yield
    finally:
        await app.state.session_manager.cleanup()


def create_app() -> FastAPI:
    """Build the Sheet Games API.

    ``app.state.session_manager`` holds the :class:`SessionManager` for the
    app's lifetime; tests may replace it before issuing requests. Every
    session ticks on its own asyncio task until it ends or is deleted.
    """
    app = FastAPI(
        title="Sheet Games API",
        description="Life, Snake, and Tetros sessions on an in-memory grid.",
        version="0.1.0",
        lifespan=_lifespan,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app
