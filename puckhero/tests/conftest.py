"""
Shared fixtures: in-memory transports standing in for WebSocket clients.
"""
from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import pytest

# Ensure project root on path (run from project root: python -m pytest)
_root = Path(__file__).resolve().parent.parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from puckhero.services import Connection


class FakeTransport:
    """Records frames sent to one client. `stalled` never completes a send; `broken` fails every send."""

    def __init__(self, stalled: bool = False, broken: bool = False) -> None:
        self.frames: list[str] = []
        self.closed = False
        self.stalled = stalled
        self.broken = broken

    async def send_text(self, frame: str) -> None:
        if self.broken:
            raise ConnectionResetError("peer went away")
        if self.stalled:
            await asyncio.Event().wait()
        self.frames.append(frame)

    async def close(self) -> None:
        self.closed = True

    def messages(self) -> list[dict]:
        return [json.loads(f) for f in self.frames]

    def types(self) -> list[str]:
        return [m["type"] for m in self.messages()]

    def of_type(self, kind: str) -> list[dict]:
        return [m for m in self.messages() if m["type"] == kind]


@pytest.fixture
def make_client():
    """Factory: (transport, connection) pair. Call conn.start() inside the event loop."""

    def _make(conn_id: str | None = None, queue_size: int = 120, **transport_kwargs) -> tuple[FakeTransport, Connection]:
        transport = FakeTransport(**transport_kwargs)
        conn = Connection(transport.send_text, transport.close, queue_size=queue_size, conn_id=conn_id)
        return transport, conn

    return _make
