"""
Wire protocol: JSON text frames with a `type` discriminator.

Client → server: playerMove {position: {x, y}}, puckHit {velocityX, velocityY}.
Server → client: waiting, start {player}, gameState {state}, playerDisconnected.

Inbound frames are validated into typed models; anything that does not fit
raises ProtocolError and is dropped by the gateway.
"""
from __future__ import annotations

import json
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .models import GameSnapshot


class ProtocolError(ValueError):
    """Inbound frame could not be parsed (bad JSON, NaN or Infinity literals, unknown type, missing field)."""


# ---------- Inbound ----------


class Position(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float
    y: float


class PlayerMove(BaseModel):
    """Sender's paddle is now at `position`. Trusted as-is."""
    model_config = ConfigDict(allow_inf_nan=False)

    type: Literal["playerMove"]
    position: Position


class PuckHit(BaseModel):
    """Sender struck the puck; its velocity becomes (velocityX, velocityY). Trusted as-is."""
    model_config = ConfigDict(allow_inf_nan=False)

    type: Literal["puckHit"]
    velocityX: float
    velocityY: float


ClientMessage = Annotated[Union[PlayerMove, PuckHit], Field(discriminator="type")]

_client_message = TypeAdapter(ClientMessage)


def parse_client_message(raw: str | bytes) -> PlayerMove | PuckHit:
    try:
        return _client_message.validate_json(raw)
    except ValidationError as e:
        errors = "; ".join(f"{'.'.join(str(p) for p in err['loc']) or '<frame>'}: {err['msg']}" for err in e.errors())
        raise ProtocolError(f"Malformed frame: {errors}") from e


# ---------- Outbound ----------


def _frame(payload: dict) -> str:
    return json.dumps(payload, separators=(",", ":"), allow_nan=False)


def waiting_frame() -> str:
    return _frame({"type": "waiting"})


def start_frame(side: int) -> str:
    return _frame({"type": "start", "player": side})


def game_state_frame(snapshot: GameSnapshot) -> str:
    return _frame({"type": "gameState", "state": snapshot.to_dict()})


def player_disconnected_frame() -> str:
    return _frame({"type": "playerDisconnected"})
