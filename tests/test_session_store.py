"""Tests for SessionStore (get/set/destroy/touch against a real SQLite table)."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine, func, select, text
from sqlalchemy.orm import sessionmaker

from app.argus.models import Base, SessionRecord
from app.argus.session_store import CorruptSessionError, SessionStore, SessionStoreError

T0 = 1_700_000_000
HOUR = 3600


class FakeClock:
    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _at(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path/'sessions.db'}")
    Base.metadata.create_all(bind=engine, tables=[SessionRecord.__table__])
    yield engine
    engine.dispose()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(engine, clock):
    return SessionStore(sessionmaker(bind=engine), clock=clock)


def _row(engine, sid):
    with sessionmaker(bind=engine)() as s:
        return s.get(SessionRecord, sid)


def _count(engine) -> int:
    with sessionmaker(bind=engine)() as s:
        return s.scalar(select(func.count()).select_from(SessionRecord))


def test_get_unknown_id_returns_none(store):
    assert store.get("never-written") is None


def test_set_then_get_returns_equal_payload(store):
    payload = {"user_id": 7, "flags": ["a", "b"], "nested": {"k": None, "n": 1.5}}
    store.set("sid-1", payload, _at(T0 + HOUR))
    assert store.get("sid-1") == payload


def test_expiry_boundary_is_exclusive(store, clock):
    store.set("sid-1", {"user_id": 7}, _at(T0 + HOUR))

    clock.now = T0 + HOUR - 1
    assert store.get("sid-1") == {"user_id": 7}

    clock.now = T0 + HOUR
    assert store.get("sid-1") is None

    clock.now = T0 + HOUR + 1
    assert store.get("sid-1") is None


def test_set_without_expiry_uses_default_ttl(store, engine, clock):
    store.set("sid-1", {"user_id": 7})
    assert _row(engine, "sid-1").expires == T0 + 7 * 24 * HOUR

    clock.now = T0 + 7 * 24 * HOUR - 1
    assert store.get("sid-1") == {"user_id": 7}
    clock.now = T0 + 7 * 24 * HOUR
    assert store.get("sid-1") is None


def test_custom_default_ttl(engine, clock):
    store = SessionStore(sessionmaker(bind=engine), default_ttl=timedelta(minutes=5), clock=clock)
    store.set("sid-1", {"x": 1})
    assert _row(engine, "sid-1").expires == T0 + 300


def test_set_replaces_previous_payload_entirely(store, engine):
    store.set("sid-1", {"a": 1, "b": 2}, _at(T0 + HOUR))
    store.set("sid-1", {"a": 3}, _at(T0 + 2 * HOUR))

    assert store.get("sid-1") == {"a": 3}
    assert _row(engine, "sid-1").expires == T0 + 2 * HOUR
    assert _count(engine) == 1


def test_set_revives_an_expired_row(store, clock):
    store.set("sid-1", {"a": 1}, _at(T0 + 10))
    clock.now = T0 + 20
    assert store.get("sid-1") is None

    store.set("sid-1", {"a": 2}, _at(T0 + HOUR))
    assert store.get("sid-1") == {"a": 2}


def test_destroy_missing_id_is_not_an_error(store):
    store.destroy("nope")
    assert store.get("nope") is None


def test_destroy_removes_row(store, engine):
    store.set("sid-1", {"a": 1}, _at(T0 + HOUR))
    store.destroy("sid-1")
    assert store.get("sid-1") is None
    assert _count(engine) == 0


def test_touch_missing_id_does_not_create(store, engine):
    assert store.touch("ghost", {"user_id": 1}, _at(T0 + HOUR)) is False
    assert store.get("ghost") is None
    assert _count(engine) == 0


def test_touch_expired_id_is_noop(store, engine, clock):
    store.set("sid-1", {"user_id": 1}, _at(T0 + 10))
    clock.now = T0 + 10

    assert store.touch("sid-1", {"user_id": 2}, _at(T0 + HOUR)) is False
    assert store.get("sid-1") is None
    row = _row(engine, "sid-1")
    assert row.expires == T0 + 10


def test_touch_after_destroy_does_not_resurrect(store):
    store.set("sid-1", {"user_id": 1}, _at(T0 + HOUR))
    store.destroy("sid-1")
    assert store.touch("sid-1", {"user_id": 1}, _at(T0 + 2 * HOUR)) is False
    assert store.get("sid-1") is None


def test_touch_live_id_extends_expiry(store, clock):
    store.set("sid-1", {"user_id": 1}, _at(T0 + HOUR))
    assert store.touch("sid-1", {"user_id": 1}, _at(T0 + 3 * HOUR)) is True

    clock.now = T0 + 2 * HOUR
    assert store.get("sid-1") == {"user_id": 1}
    clock.now = T0 + 3 * HOUR
    assert store.get("sid-1") is None


def test_login_lookup_logout_scenario(store):
    store.set("abc", {"userId": 7}, _at(T0 + HOUR))
    assert store.get("abc") == {"userId": 7}
    store.destroy("abc")
    assert store.get("abc") is None


def test_tagged_values_survive(store):
    payload = {"raw": b"\x00\x01", "pair": (1, 2)}
    store.set("sid-1", payload, _at(T0 + HOUR))
    assert store.get("sid-1") == payload


def _insert_raw(engine, sid, data):
    with engine.begin() as conn:
        conn.execute(
            text("INSERT INTO sessions (id, expires, data) VALUES (:id, :expires, :data)"),
            {"id": sid, "expires": T0 + HOUR, "data": data},
        )


def test_corrupt_payload_raises(store, engine):
    _insert_raw(engine, "bad", "{not json")
    with pytest.raises(CorruptSessionError):
        store.get("bad")


@pytest.mark.parametrize("data", ["", "   "])
def test_empty_payload_is_corrupt_not_absent(store, engine, data):
    _insert_raw(engine, "blank", data)
    with pytest.raises(CorruptSessionError):
        store.get("blank")


def test_expired_corrupt_row_is_absent(store, engine, clock):
    _insert_raw(engine, "blank", "")
    clock.now = T0 + HOUR
    assert store.get("blank") is None


def test_non_mapping_payload_raises(store, engine):
    _insert_raw(engine, "list", "[1, 2, 3]")
    with pytest.raises(CorruptSessionError):
        store.get("list")


def test_corrupt_is_a_store_error():
    assert issubclass(CorruptSessionError, SessionStoreError)


def test_storage_faults_propagate(store, engine):
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE sessions"))

    with pytest.raises(SessionStoreError):
        store.get("sid-1")
    with pytest.raises(SessionStoreError):
        store.set("sid-1", {"a": 1})
    with pytest.raises(SessionStoreError):
        store.destroy("sid-1")
    with pytest.raises(SessionStoreError):
        store.touch("sid-1", {"a": 1})
