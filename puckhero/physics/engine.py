"""
Puck physics: pure functions over PuckState and TableGeometry.
One call to step() is one server tick. No I/O, no shared state; randomness
only enters through the RNG passed to reset_puck().
"""
from __future__ import annotations

from dataclasses import dataclass, replace

from ..models import PuckState
from .geometry import TableGeometry
from .rng import SeededRNG

# Authoritative per-tick decay. Clients may animate with their own value.
DEFAULT_FRICTION = 0.99


@dataclass(frozen=True)
class StepResult:
    """Puck after one tick, and the side that scored during it (None if no goal)."""
    puck: PuckState
    scorer: int | None = None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def integrate(puck: PuckState) -> PuckState:
    return replace(puck, x=puck.x + puck.vx, y=puck.y + puck.vy)


def apply_friction(puck: PuckState, friction: float = DEFAULT_FRICTION) -> PuckState:
    return replace(puck, vx=puck.vx * friction, vy=puck.vy * friction)


def bounce_walls(puck: PuckState, table: TableGeometry) -> PuckState:
    """Reflect off the top and bottom rails, keeping the puck fully on the table."""
    r = table.puck_radius
    if puck.y - r <= 0 or puck.y + r >= table.height:
        return replace(puck, vy=-puck.vy, y=_clamp(puck.y, r, table.height - r))
    return puck


def crosses_side(puck: PuckState, table: TableGeometry) -> bool:
    r = table.puck_radius
    return puck.x - r <= 0 or puck.x + r >= table.width


def goal_scored_by(puck: PuckState, table: TableGeometry) -> int | None:
    """
    Side credited with a goal if the puck edge is over a goal line inside a mouth.
    A puck in the left goal scores for side 2, in the right goal for side 1.
    """
    if not table.in_goal_mouth(puck.y):
        return None
    r = table.puck_radius
    at_left = puck.x - r <= table.goal_width
    at_right = puck.x + r >= table.width - table.goal_width
    if not (at_left or at_right):
        return None
    return 2 if puck.x < table.width / 2 else 1


def bounce_sides(puck: PuckState, table: TableGeometry) -> PuckState:
    """Reflect off the left and right rails outside the goal mouths."""
    if not crosses_side(puck, table):
        return puck
    r = table.puck_radius
    return replace(puck, vx=-puck.vx, x=_clamp(puck.x, r, table.width - r))


def reset_puck(table: TableGeometry, rng: SeededRNG) -> PuckState:
    """Centre face-off with a diagonal velocity; each axis sign picked independently."""
    cx, cy = table.center
    return PuckState(
        x=cx,
        y=cy,
        vx=rng.sign() * table.reset_speed,
        vy=rng.sign() * table.reset_speed,
    )


def step(
    puck: PuckState,
    table: TableGeometry,
    rng: SeededRNG,
    friction: float = DEFAULT_FRICTION,
) -> StepResult:
    """
    Advance one tick: integrate, friction, top/bottom bounce, then either a goal
    (puck reset to centre) or a left/right bounce.
    """
    if not 0.0 < friction < 1.0:
        raise ValueError(f"friction must be in (0, 1), got {friction}")
    p = integrate(puck)
    p = apply_friction(p, friction)
    p = bounce_walls(p, table)
    if crosses_side(p, table):
        scorer = goal_scored_by(p, table)
        if scorer is not None:
            return StepResult(puck=reset_puck(table, rng), scorer=scorer)
        p = bounce_sides(p, table)
    return StepResult(puck=p)
