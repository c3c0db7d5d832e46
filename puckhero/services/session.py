"""
Session: one two-player match. State machine, fixed-rate tick loop, inbound handling.

All mutable match state (score, puck, paddles) lives behind the session's own
methods and is only touched under self._lock, so a paddle move or puck hit can
never interleave with an in-flight tick.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace

from puckhero import config
from puckhero.models import SIDES, GameSnapshot, PaddleState, Score, SessionStatus
from puckhero.physics import DEFAULT_TABLE, SeededRNG, TableGeometry, step
from puckhero.protocol import PlayerMove, PuckHit, game_state_frame, player_disconnected_frame

from .connection import Connection
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


# ---------- Exceptions ----------


class SessionTransitionError(ValueError):
    """Invalid session status transition (e.g. terminated -> active)."""


# ---------- Valid transitions ----------

_VALID_TRANSITIONS: dict[SessionStatus, set[SessionStatus]] = {
    SessionStatus.ACTIVE: {SessionStatus.TERMINATED},
    SessionStatus.TERMINATED: set(),
}


# ---------- Session ----------


class Session:
    """
    Authoritative state for one match between exactly two connections.
    Created ACTIVE by the Matchmaker; start() launches the tick task; terminate()
    ends it exactly once.
    """

    def __init__(
        self,
        session_id: int,
        player1: Connection,
        player2: Connection,
        registry: SessionRegistry,
        *,
        table: TableGeometry = DEFAULT_TABLE,
        tick_rate: int = config.TICK_RATE,
        friction: float = config.PUCK_FRICTION,
        rng: SeededRNG | None = None,
    ) -> None:
        if player1 is player2:
            raise ValueError("A session needs two distinct connections")
        if tick_rate <= 0:
            raise ValueError(f"tick_rate must be positive, got {tick_rate}")
        self._id = session_id
        self._connections = (player1, player2)
        self._registry = registry
        self._table = table
        self._tick_interval = 1.0 / tick_rate
        self._friction = friction
        self._rng = rng or SeededRNG()
        self._status = SessionStatus.ACTIVE
        self._score = Score()
        self._puck = table.opening_puck()
        self._paddles = {side: table.opening_paddle(side) for side in SIDES}
        self._ticks = 0
        self._lock = asyncio.Lock()
        self._tick_task: asyncio.Task | None = None
        for side, conn in zip(SIDES, self._connections):
            conn.attach(session_id, side)

    def __repr__(self) -> str:
        a, b = self._connections
        return f"Session(id={self._id}, status={self._status.value}, players=({a.id}, {b.id}))"

    # ---------- Read-only views ----------

    @property
    def session_id(self) -> int:
        return self._id

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def connections(self) -> tuple[Connection, Connection]:
        return self._connections

    @property
    def ticks(self) -> int:
        return self._ticks

    def side_of(self, conn: Connection) -> int:
        for side, c in zip(SIDES, self._connections):
            if c is conn:
                return side
        raise ValueError(f"Connection {conn.id} is not part of session {self._id}")

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            score=(self._score.player1, self._score.player2),
            puck=self._puck,
            player1=self._paddles[1],
            player2=self._paddles[2],
        )

    # ---------- Lifecycle ----------

    def _transition(self, new_status: SessionStatus) -> None:
        allowed = _VALID_TRANSITIONS.get(self._status, set())
        if new_status not in allowed:
            raise SessionTransitionError(
                f"Invalid transition: {self._status.value} -> {new_status.value}"
            )
        self._status = new_status

    def start(self) -> None:
        """Launch the tick task. Must be called from inside the event loop."""
        if self._status is not SessionStatus.ACTIVE:
            raise SessionTransitionError(f"Session {self._id} is {self._status.value}; cannot start")
        if self._tick_task is not None:
            raise SessionTransitionError(f"Session {self._id} already started")
        self._tick_task = asyncio.create_task(self._run_ticks(), name=f"session-{self._id}-ticks")

    def terminate(self, closed: Connection | None = None) -> bool:
        """
        ACTIVE -> TERMINATED: cancel the tick task, tell the surviving player, drop
        out of the registry. `closed` is the connection that went away (None when
        the session ends for another reason). Returns False if already terminated.
        """
        if self._status is SessionStatus.TERMINATED:
            return False
        self._transition(SessionStatus.TERMINATED)
        if self._tick_task is not None:
            self._tick_task.cancel()
        for conn in self._connections:
            if conn is not closed and conn.is_open:
                conn.send(player_disconnected_frame())
            conn.detach()
        self._registry.remove(self._id)
        logger.info(
            "Session %s terminated after %d ticks (score %d-%d)",
            self._id, self._ticks, self._score.player1, self._score.player2,
        )
        return True

    # ---------- Tick loop ----------

    async def _run_ticks(self) -> None:
        """Fire tick() on absolute deadlines. A late tick runs at once and later ones catch up."""
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        try:
            while self._status is SessionStatus.ACTIVE:
                deadline += self._tick_interval
                await asyncio.sleep(max(0.0, deadline - loop.time()))
                await self.tick()
        except Exception:
            logger.exception("Session %s: tick loop failed", self._id)
            self.terminate()

    async def tick(self) -> GameSnapshot | None:
        """Advance the puck one step and broadcast the full state to both players."""
        async with self._lock:
            if self._status is not SessionStatus.ACTIVE:
                return None
            result = step(self._puck, self._table, self._rng, self._friction)
            self._puck = result.puck
            if result.scorer is not None:
                self._score.record_goal(result.scorer)
                logger.info(
                    "Session %s: goal for side %d (%d-%d)",
                    self._id, result.scorer, self._score.player1, self._score.player2,
                )
            self._ticks += 1
            snapshot = self.snapshot()
        self._broadcast(game_state_frame(snapshot))
        return snapshot

    def _broadcast(self, frame: str) -> None:
        for conn in self._connections:
            if conn.is_open:
                conn.send(frame)

    # ---------- Inbound ----------

    async def handle_message(self, conn: Connection, message: PlayerMove | PuckHit) -> None:
        """
        Apply a client message. Positions and velocities are taken as sent:
        clients decide whether a hit is in reach, the server does not re-check.
        """
        side = self.side_of(conn)
        async with self._lock:
            if self._status is not SessionStatus.ACTIVE:
                return
            if isinstance(message, PlayerMove):
                self._paddles[side] = PaddleState(x=message.position.x, y=message.position.y)
            elif isinstance(message, PuckHit):
                self._puck = replace(self._puck, vx=message.velocityX, vy=message.velocityY)
            else:
                raise ValueError(f"Unsupported message: {type(message).__name__}")
