"""
Table geometry shared by the physics engine and session setup.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..models import PaddleState, PuckState


@dataclass(frozen=True)
class TableGeometry:
    """Rink dimensions in pixels. Goal mouths are centred vertically on both short edges."""
    width: float = 800.0
    height: float = 600.0
    puck_radius: float = 10.0
    paddle_radius: float = 30.0
    goal_width: float = 8.0
    goal_height: float = 120.0
    paddle_inset: float = 100.0  # starting distance of each paddle from its own edge
    reset_speed: float = 3.0  # per-axis speed of the puck after a goal

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @property
    def goal_top(self) -> float:
        return self.height / 2 - self.goal_height / 2

    @property
    def goal_bottom(self) -> float:
        return self.goal_top + self.goal_height

    def in_goal_mouth(self, y: float) -> bool:
        return self.goal_top <= y <= self.goal_bottom

    def opening_puck(self) -> PuckState:
        """Puck at rest in the centre, as at the start of a session."""
        cx, cy = self.center
        return PuckState(x=cx, y=cy)

    def opening_paddle(self, side: int) -> PaddleState:
        if side == 1:
            return PaddleState(x=self.paddle_inset, y=self.height / 2)
        if side == 2:
            return PaddleState(x=self.width - self.paddle_inset, y=self.height / 2)
        raise ValueError(f"Invalid side: {side}")


DEFAULT_TABLE = TableGeometry()
