"""
Runtime settings, read once from the environment.
Every value has a development default so the server starts with no setup.
"""
from __future__ import annotations

import os

PORT = int(os.environ.get("PORT", "3001"))
HOST = os.environ.get("HOST", "0.0.0.0")

# Simulation
TICK_RATE = int(os.environ.get("TICK_RATE", "60"))  # ticks per second
PUCK_FRICTION = float(os.environ.get("PUCK_FRICTION", "0.99"))

# Outbound frames buffered per connection before new ones are dropped (~2s at 60 Hz)
OUTBOUND_QUEUE_SIZE = int(os.environ.get("OUTBOUND_QUEUE_SIZE", "120"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

_DEFAULT_CORS_ORIGINS = "http://localhost:3001,http://127.0.0.1:3001,http://localhost:5173,http://127.0.0.1:5173"
CORS_ORIGINS = [
    o.strip() for o in os.environ.get("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS).split(",") if o.strip()
]
