"""
Service layer: matchmaking, session registry, session state machine and the
connection gateway. Physics lives in puckhero.physics; wire format in
puckhero.protocol.
"""
from .connection import Connection
from .registry import SessionRegistry
from .session import Session, SessionTransitionError
from .matchmaker import Matchmaker
from .gateway import ConnectionGateway

__all__ = [
    "Connection",
    "SessionRegistry",
    "Session",
    "SessionTransitionError",
    "Matchmaker",
    "ConnectionGateway",
]
