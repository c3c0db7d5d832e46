"""
FIFO two-party matchmaking: one waiting slot, paired with the next arrival.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable

from .connection import Connection
from .registry import SessionRegistry
from .session import Session

logger = logging.getLogger(__name__)

SessionFactory = Callable[[int, Connection, Connection, SessionRegistry], Session]


class Matchmaker:
    """
    Holds at most one waiting connection. Every arrival and departure is a single
    critical section, so two arrivals can never both find the slot empty and the
    same waiting connection is never paired twice.
    """

    def __init__(self, registry: SessionRegistry, session_factory: SessionFactory | None = None) -> None:
        self._registry = registry
        self._session_factory: SessionFactory = session_factory or Session
        self._lock = threading.Lock()
        self._waiting: Connection | None = None

    @property
    def waiting(self) -> Connection | None:
        return self._waiting

    def on_arrive(self, conn: Connection) -> Session | None:
        """
        Park conn if nobody is waiting and return None. Otherwise pair it with the
        waiting connection (waiting -> side 1, conn -> side 2), register and return
        the new session. The caller sends the waiting/start notices and starts it.
        """
        with self._lock:
            waiting = self._waiting
            if waiting is conn:
                return None
            if waiting is None or not waiting.is_open:
                self._waiting = conn
                logger.info("Connection %s waiting for an opponent", conn.id)
                return None
            self._waiting = None
            session = self._session_factory(self._registry.next_id(), waiting, conn, self._registry)
            self._registry.register(session)
        logger.info("Session %s paired %s (side 1) with %s (side 2)", session.session_id, waiting.id, conn.id)
        return session

    def on_leave(self, conn: Connection) -> bool:
        """Clear the slot if conn was waiting in it. No one is notified."""
        with self._lock:
            if self._waiting is conn:
                self._waiting = None
                logger.info("Connection %s left while waiting", conn.id)
                return True
            return False
