"""
API integration tests.
Uses TestClient to avoid starting a server; two WebSocket clients play a short match.
Requires: pip install httpx (for TestClient)
"""
from __future__ import annotations

import pytest

try:
    from fastapi.testclient import TestClient
    HAS_HTTPX = True
except (ImportError, RuntimeError):
    HAS_HTTPX = False

pytestmark = pytest.mark.skipif(not HAS_HTTPX, reason="httpx required for TestClient")

from puckhero.api import app

MAX_FRAMES = 2000


def _receive_until(ws, predicate):
    """Read frames until predicate(frame) holds; fail rather than hang forever."""
    for _ in range(MAX_FRAMES):
        frame = ws.receive_json()
        if predicate(frame):
            return frame
    pytest.fail("expected frame never arrived")


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def test_status_idle(client):
    """GET /status with nobody connected."""
    resp = client.get("/status")
    assert resp.status_code == 200
    assert resp.json() == {"active_sessions": 0, "session_ids": [], "waiting": False}


def test_single_client_waits(client):
    with client.websocket_connect("/") as ws:
        assert ws.receive_json() == {"type": "waiting"}
        assert client.get("/status").json()["waiting"] is True


def test_two_clients_play_and_disconnect(client):
    with client.websocket_connect("/") as ws1:
        assert ws1.receive_json() == {"type": "waiting"}
        with client.websocket_connect("/ws") as ws2:
            assert ws2.receive_json() == {"type": "start", "player": 2}
            assert ws1.receive_json() == {"type": "start", "player": 1}

            state = _receive_until(ws1, lambda f: f["type"] == "gameState")["state"]
            assert set(state) == {"score", "puck", "player1", "player2"}
            assert state["score"] == {"player1": 0, "player2": 0}

            status = client.get("/status").json()
            assert status["active_sessions"] == 1
            assert status["waiting"] is False

            # Garbage is dropped; the socket stays usable
            ws1.send_text("this is not json")
            ws1.send_json({"type": "warp", "to": "anywhere"})
            ws1.send_json({"type": "playerMove", "position": {"x": 42.0, "y": 24.0}})
            moved = _receive_until(
                ws2,
                lambda f: f["type"] == "gameState" and f["state"]["player1"] == {"x": 42.0, "y": 24.0},
            )
            assert moved["state"]["player2"] == {"x": 700.0, "y": 300.0}

            ws2.send_json({"type": "puckHit", "velocityX": 0.0, "velocityY": 5.0})
            _receive_until(ws1, lambda f: f["type"] == "gameState" and f["state"]["puck"]["velocityY"] > 0)

        _receive_until(ws1, lambda f: f["type"] == "playerDisconnected")
        assert client.get("/status").json()["active_sessions"] == 0
