"""
Connection gateway: accepts transport connections, runs pairing, parses inbound
frames and routes them to the owning Session, and turns closes into session
termination.
"""
from __future__ import annotations

import logging

from fastapi import WebSocket, WebSocketDisconnect

from puckhero import config
from puckhero.models import SIDES
from puckhero.protocol import ProtocolError, parse_client_message, start_frame, waiting_frame

from .connection import Connection
from .matchmaker import Matchmaker
from .registry import SessionRegistry
from .session import Session

logger = logging.getLogger(__name__)


class ConnectionGateway:
    """Transport-facing entry point. Matchmaker and registry are injected, never global."""

    def __init__(
        self,
        matchmaker: Matchmaker,
        registry: SessionRegistry,
        queue_size: int = config.OUTBOUND_QUEUE_SIZE,
    ) -> None:
        self.matchmaker = matchmaker
        self.registry = registry
        self._queue_size = queue_size

    def connect(self, conn: Connection) -> Session | None:
        """Pair or park a new connection and send the matching notice."""
        conn.on_lost = self.disconnect
        session = self.matchmaker.on_arrive(conn)
        if session is None:
            conn.send(waiting_frame())
            return None
        for side, player in zip(SIDES, session.connections):
            player.send(start_frame(side))
        session.start()
        return session

    async def dispatch(self, conn: Connection, raw: str | bytes) -> bool:
        """
        Parse one inbound frame and hand it to the owning session.
        Malformed frames and frames from unpaired connections are dropped; the
        connection stays open. Returns True if the frame was applied.
        """
        try:
            message = parse_client_message(raw)
        except ProtocolError as e:
            logger.warning("Connection %s: dropped frame: %s", conn.id, e)
            return False
        if conn.session_id is None:
            return False
        session = self.registry.lookup(conn.session_id)
        if session is None:
            return False
        await session.handle_message(conn, message)
        return True

    def disconnect(self, conn: Connection) -> None:
        """Close bookkeeping for a connection. Safe to call more than once."""
        session_id = conn.session_id
        if conn.close():
            logger.info("Connection %s closed", conn.id)
        self.matchmaker.on_leave(conn)
        if session_id is None:
            return
        session = self.registry.lookup(session_id)
        if session is not None:
            session.terminate(conn)

    def shutdown(self) -> None:
        """Terminate every live session (server stopping)."""
        for session in self.registry:
            session.terminate()

    async def serve(self, websocket: WebSocket) -> None:
        """Run one WebSocket client from accept to close."""
        await websocket.accept()
        conn = Connection(websocket.send_text, websocket.close, queue_size=self._queue_size)
        conn.start()
        logger.info("Connection %s opened", conn.id)
        self.connect(conn)
        try:
            while conn.is_open:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                await self.dispatch(conn, raw)
        except WebSocketDisconnect:
            pass
        except Exception:
            logger.exception("Connection %s: transport error", conn.id)
        finally:
            self.disconnect(conn)
