"""
WebSocket API for the duel server.
Thin wrapper: the lifespan builds the matchmaker, registry and gateway; the
endpoints hand each socket to the gateway.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import partial
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from puckhero import config
from puckhero.services import ConnectionGateway, Matchmaker, Session, SessionRegistry

logger = logging.getLogger(__name__)


def build_gateway(
    tick_rate: int = config.TICK_RATE,
    friction: float = config.PUCK_FRICTION,
    queue_size: int = config.OUTBOUND_QUEUE_SIZE,
) -> ConnectionGateway:
    """Wire a fresh registry, matchmaker and gateway together."""
    registry = SessionRegistry()
    session_factory = partial(Session, tick_rate=tick_rate, friction=friction)
    matchmaker = Matchmaker(registry, session_factory=session_factory)
    return ConnectionGateway(matchmaker, registry, queue_size=queue_size)


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app.state.gateway = build_gateway()
    logger.info("Duel server ready (tick rate %d Hz, friction %s)", config.TICK_RATE, config.PUCK_FRICTION)
    try:
        yield
    finally:
        app.state.gateway.shutdown()


# ---------- FastAPI app ----------
app = FastAPI(
    title="PuckHero Online",
    description="Authoritative two-player air hockey over WebSocket",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/status")
def get_status(request: Request) -> dict[str, Any]:
    """Live session ids and whether a player is waiting. Read-only."""
    gateway: ConnectionGateway = request.app.state.gateway
    return {
        "active_sessions": len(gateway.registry),
        "session_ids": gateway.registry.session_ids(),
        "waiting": gateway.matchmaker.waiting is not None,
    }


# The browser client opens its socket on the page origin, so "/" is the primary path.
@app.websocket("/")
@app.websocket("/ws")
async def websocket_duel(websocket: WebSocket) -> None:
    """
    Join the duel queue. Server pushes waiting / start / gameState / playerDisconnected;
    client sends playerMove and puckHit.
    """
    await websocket.app.state.gateway.serve(websocket)


# ---------- Run with: python -m puckhero.run_server ----------
