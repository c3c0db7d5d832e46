"""
Connection handle: one client endpoint with a fire-and-forget outbound queue.

send() never awaits the network. A writer task drains the queue to the
transport; a full queue drops the frame, so a stalled client cannot hold up
the tick loop or its opponent.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Awaitable, Callable

from puckhero import config

logger = logging.getLogger(__name__)

SendText = Callable[[str], Awaitable[None]]
CloseTransport = Callable[[], Awaitable[None]]


class Connection:
    """
    Opaque client endpoint. The gateway owns it; a Session only references it.
    session_id and side are set while the connection belongs to a session.
    """

    def __init__(
        self,
        send_text: SendText,
        close_transport: CloseTransport | None = None,
        queue_size: int = config.OUTBOUND_QUEUE_SIZE,
        conn_id: str | None = None,
    ) -> None:
        self.id = conn_id or uuid.uuid4().hex[:12]
        self.session_id: int | None = None
        self.side: int | None = None
        # Called once if the writer finds the transport dead
        self.on_lost: Callable[[Connection], None] | None = None
        self._send_text = send_text
        self._close_transport = close_transport
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=queue_size)
        self._writer: asyncio.Task | None = None
        self._open = True
        self.dropped_frames = 0

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, open={self._open}, session={self.session_id}, side={self.side})"

    @property
    def is_open(self) -> bool:
        return self._open

    def attach(self, session_id: int, side: int) -> None:
        self.session_id = session_id
        self.side = side

    def detach(self) -> None:
        self.session_id = None
        self.side = None

    def start(self) -> None:
        """Start the writer task. Must be called from inside the event loop."""
        if self._writer is None:
            self._writer = asyncio.create_task(self._drain(), name=f"conn-{self.id}-writer")

    def send(self, frame: str) -> bool:
        """Queue a frame for delivery. Returns False if closed or the buffer is full."""
        if not self._open:
            return False
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull:
            self.dropped_frames += 1
            logger.debug("Connection %s: outbound queue full, frame dropped", self.id)
            return False
        return True

    async def flush(self) -> None:
        """Wait until every queued frame has been handed to the transport."""
        await self._queue.join()

    def close(self) -> bool:
        """Mark closed and stop the writer; queued frames are discarded. Returns False if already closed."""
        if not self._open:
            return False
        self._open = False
        if self._writer is not None:
            self._writer.cancel()
        return True

    async def _drain(self) -> None:
        while True:
            frame = await self._queue.get()
            try:
                await self._send_text(frame)
            except Exception as e:
                logger.info("Connection %s: send failed (%s), treating as disconnected", self.id, e)
                self._queue.task_done()
                await self._lost()
                return
            self._queue.task_done()

    async def _lost(self) -> None:
        self._open = False
        if self._close_transport is not None:
            try:
                await self._close_transport()
            except Exception:
                logger.debug("Connection %s: transport close failed", self.id, exc_info=True)
        if self.on_lost is not None:
            self.on_lost(self)
