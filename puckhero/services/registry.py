"""
Session registry: routes inbound frames to the owning Session by id.
"""
from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from .session import Session


class SessionRegistry:
    """In-memory map of session id -> Session. Ids come from a monotonic counter and are never reused."""

    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        return next(self._ids)

    def register(self, session: Session) -> None:
        if session.session_id in self._sessions:
            raise ValueError(f"Session already registered: {session.session_id}")
        self._sessions[session.session_id] = session

    def lookup(self, session_id: int) -> Session | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: int) -> Session | None:
        return self._sessions.pop(session_id, None)

    def session_ids(self) -> list[int]:
        return sorted(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))
