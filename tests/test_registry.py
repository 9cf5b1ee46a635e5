import threading

import pytest

from tcpchat.errors import CapacityExceeded
from tcpchat.registry import Registry


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        Registry(0)


def test_add_until_full(make_session):
    registry = Registry(2)
    registry.add(make_session("alice"))
    registry.add(make_session("bob"))
    assert registry.is_full()
    with pytest.raises(CapacityExceeded):
        registry.add(make_session("carol"))
    assert len(registry) == 2


def test_try_add_reports_admission(make_session):
    registry = Registry(1)
    assert registry.try_add(make_session("alice"))
    assert not registry.try_add(make_session("bob"))
    assert registry.names() == ["alice"]


def test_concurrent_admission_never_exceeds_limit(make_session):
    registry = Registry(5)
    barrier = threading.Barrier(40)
    results = []
    results_lock = threading.Lock()

    def connect(i):
        session = make_session(f"user{i}")
        barrier.wait()
        admitted = registry.try_add(session)
        with results_lock:
            results.append(admitted)

    threads = [threading.Thread(target=connect, args=(i,)) for i in range(40)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 5
    assert len(registry) == 5


def test_remove_is_idempotent(make_session):
    registry = Registry(3)
    alice, bob = make_session("alice"), make_session("bob")
    registry.add(alice)
    registry.add(bob)

    assert registry.remove(alice) is True
    assert registry.remove(alice) is False
    assert registry.snapshot() == [bob]
    assert alice not in registry


def test_remove_unknown_session(make_session):
    registry = Registry(3)
    assert registry.remove(make_session("ghost")) is False
    assert len(registry) == 0


def test_snapshot_is_a_copy(make_session):
    registry = Registry(3)
    alice = make_session("alice")
    registry.add(alice)
    view = registry.snapshot()
    registry.remove(alice)
    assert view == [alice]
    assert registry.snapshot() == []


def test_names_skip_sessions_without_handshake(make_session):
    registry = Registry(3)
    registry.add(make_session("alice"))
    registry.add(make_session(None))
    assert registry.names() == ["alice"]


def test_close_all(make_session):
    registry = Registry(3)
    sessions = [make_session("alice"), make_session("bob")]
    for session in sessions:
        registry.add(session)
    registry.close_all()
    assert all(session.closed for session in sessions)


def test_claim_name_refuses_taken_name(make_session):
    registry = Registry(3)
    alice, impostor = make_session("alice"), make_session(None)
    registry.add(alice)
    registry.add(impostor)

    assert registry.claim_name(impostor, "alice") is False
    assert impostor.name is None
    assert registry.claim_name(impostor, "bob") is True
    assert registry.names() == ["alice", "bob"]


def test_concurrent_claims_give_name_once(make_session):
    registry = Registry(20)
    sessions = [make_session(None) for _ in range(20)]
    for session in sessions:
        registry.add(session)
    barrier = threading.Barrier(len(sessions))

    def claim(session):
        barrier.wait()
        registry.claim_name(session, "alice")

    threads = [threading.Thread(target=claim, args=(s,)) for s in sessions]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert registry.names() == ["alice"]


def test_closed_registry_admits_nothing(make_session):
    registry = Registry(3)
    registry.add(make_session("alice"))
    registry.close_all()

    assert registry.closed
    assert not registry.try_add(make_session("bob"))
    with pytest.raises(CapacityExceeded):
        registry.add(make_session("carol"))
    assert registry.names() == ["alice"]
