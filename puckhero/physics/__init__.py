"""
Authoritative puck physics for the duel server: table geometry, per-tick
integration, rail bounces and goal detection.
"""
from .geometry import TableGeometry, DEFAULT_TABLE
from .rng import SeededRNG
from .engine import (
    DEFAULT_FRICTION,
    StepResult,
    integrate,
    apply_friction,
    bounce_walls,
    bounce_sides,
    crosses_side,
    goal_scored_by,
    reset_puck,
    step,
)

__all__ = [
    "TableGeometry",
    "DEFAULT_TABLE",
    "SeededRNG",
    "DEFAULT_FRICTION",
    "StepResult",
    "integrate",
    "apply_friction",
    "bounce_walls",
    "bounce_sides",
    "crosses_side",
    "goal_scored_by",
    "reset_puck",
    "step",
]
