"""
Tests for FIFO matchmaking and the session registry.
Arrival order decides sides; the waiting slot is never shared or reused.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from puckhero.services import Matchmaker, Session, SessionRegistry


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def matchmaker(registry):
    return Matchmaker(registry)


# ---- Registry ----
class TestSessionRegistry:
    def test_ids_are_unique_and_increasing(self, registry):
        ids = [registry.next_id() for _ in range(1000)]
        assert len(set(ids)) == 1000
        assert ids == sorted(ids)

    def test_register_lookup_remove(self, registry, make_client):
        _, a = make_client("a")
        _, b = make_client("b")
        session = Session(registry.next_id(), a, b, registry)
        registry.register(session)
        assert registry.lookup(session.session_id) is session
        assert len(registry) == 1
        assert registry.remove(session.session_id) is session
        assert registry.lookup(session.session_id) is None
        assert registry.remove(session.session_id) is None
        assert len(registry) == 0

    def test_duplicate_register_rejected(self, registry, make_client):
        _, a = make_client()
        _, b = make_client()
        session = Session(registry.next_id(), a, b, registry)
        registry.register(session)
        with pytest.raises(ValueError):
            registry.register(session)

    def test_lookup_unknown_id(self, registry):
        assert registry.lookup(42) is None


# ---- Matchmaker ----
class TestMatchmaker:
    def test_first_arrival_waits(self, matchmaker, registry, make_client):
        _, a = make_client("a")
        assert matchmaker.on_arrive(a) is None
        assert matchmaker.waiting is a
        assert len(registry) == 0

    def test_two_arrivals_pair_in_order(self, matchmaker, registry, make_client):
        _, a = make_client("a")
        _, b = make_client("b")
        matchmaker.on_arrive(a)
        session = matchmaker.on_arrive(b)
        assert session is not None
        assert session.connections == (a, b)
        assert session.side_of(a) == 1
        assert session.side_of(b) == 2
        assert (a.side, b.side) == (1, 2)
        assert a.session_id == b.session_id == session.session_id
        assert matchmaker.waiting is None
        assert registry.lookup(session.session_id) is session
        assert len(registry) == 1

    def test_third_waits_and_fourth_pairs_with_it(self, matchmaker, registry, make_client):
        conns = [make_client(f"c{i}")[1] for i in range(4)]
        results = [matchmaker.on_arrive(c) for c in conns[:3]]
        assert results[0] is None
        assert results[1] is not None
        assert results[2] is None
        assert matchmaker.waiting is conns[2]
        assert len(registry) == 1

        second = matchmaker.on_arrive(conns[3])
        assert second is not None
        assert second.connections == (conns[2], conns[3])
        assert second.session_id != results[1].session_id
        assert len(registry) == 2

    def test_same_connection_never_pairs_with_itself(self, matchmaker, registry, make_client):
        _, a = make_client()
        matchmaker.on_arrive(a)
        assert matchmaker.on_arrive(a) is None
        assert matchmaker.waiting is a
        assert len(registry) == 0

    def test_closed_waiting_connection_is_replaced(self, matchmaker, registry, make_client):
        _, a = make_client("a")
        _, b = make_client("b")
        matchmaker.on_arrive(a)
        a.close()
        assert matchmaker.on_arrive(b) is None
        assert matchmaker.waiting is b
        assert len(registry) == 0

    def test_on_leave_clears_waiting_slot(self, matchmaker, make_client):
        _, a = make_client()
        _, b = make_client()
        matchmaker.on_arrive(a)
        assert matchmaker.on_leave(b) is False
        assert matchmaker.waiting is a
        assert matchmaker.on_leave(a) is True
        assert matchmaker.waiting is None

    def test_concurrent_arrivals_pair_everyone_exactly_once(self, matchmaker, registry, make_client):
        conns = [make_client(f"c{i}")[1] for i in range(200)]
        with ThreadPoolExecutor(max_workers=16) as pool:
            sessions = [s for s in pool.map(matchmaker.on_arrive, conns) if s is not None]
        assert len(sessions) == 100
        assert len(registry) == 100
        assert matchmaker.waiting is None
        paired = [c for s in sessions for c in s.connections]
        assert len(paired) == 200
        assert len({id(c) for c in paired}) == 200
