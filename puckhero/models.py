"""
Data models for the duel server.
Domain objects only, no transport or scheduling logic.

A session holds one puck, two paddles and a score. Sides are numbered 1 and 2;
side 1 defends the left goal, side 2 the right goal.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

SIDES = (1, 2)


# ---------- Session status (state machine) ----------
class SessionStatus(str, Enum):
    """Session lifecycle: active → terminated. No other states."""
    ACTIVE = "active"
    TERMINATED = "terminated"


# ---------- Puck ----------
@dataclass(frozen=True)
class PuckState:
    """Puck position and per-tick velocity. Replaced, never mutated."""
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0

    def speed(self) -> float:
        return (self.vx * self.vx + self.vy * self.vy) ** 0.5

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "velocityX": self.vx, "velocityY": self.vy}


# ---------- Paddle ----------
@dataclass(frozen=True)
class PaddleState:
    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


# ---------- Score ----------
@dataclass
class Score:
    """Goals per side. Only ever incremented, one goal at a time."""
    player1: int = 0
    player2: int = 0

    def record_goal(self, side: int) -> None:
        if side == 1:
            self.player1 += 1
        elif side == 2:
            self.player2 += 1
        else:
            raise ValueError(f"Invalid side: {side}")

    def to_dict(self) -> dict[str, int]:
        return {"player1": self.player1, "player2": self.player2}


# ---------- Snapshot ----------
@dataclass(frozen=True)
class GameSnapshot:
    """
    Full authoritative state at the end of a tick.
    Serialized as the `state` field of every gameState frame.
    """
    score: tuple[int, int]
    puck: PuckState
    player1: PaddleState
    player2: PaddleState

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": {"player1": self.score[0], "player2": self.score[1]},
            "puck": self.puck.to_dict(),
            "player1": self.player1.to_dict(),
            "player2": self.player2.to_dict(),
        }
