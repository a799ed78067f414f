from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bistro.database import get_db
from bistro.main import app
from bistro.models import Base, Reservations, Tables
from bistro.redis_client import get_redis
from bistro.services.slots import BookingConfig, HoldLedger, get_booking_config, get_hold_ledger

# Monday: default hours 11:00-22:00
MONDAY = date(2030, 1, 7)
# Friday: permanent closure
FRIDAY = date(2030, 1, 11)


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class BrokenSession:
    """Session stand-in whose every query fails like an unreachable database."""

    def __init__(self):
        self.calls = 0

    def query(self, *args, **kwargs):
        self.calls += 1
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def rollback(self):
        pass


class FakeRedis:
    """Just enough of redis.Redis for the read cache."""

    def __init__(self):
        self.store: dict[str, bytes] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value.encode() if isinstance(value, str) else value
        self.ttls[key] = ttl


_counter = {"n": 0}


def add_reservation(db, on_date, at, table_number=None, status="confirmed", party_size=2, created_at=None):
    _counter["n"] += 1
    n = _counter["n"]
    hour, minute = (int(p) for p in at.split(":"))
    extra = {"created_at": created_at} if created_at else {}
    db.add(Reservations(
        id=f"r-{n}",
        booking_code=f"BK{n:06d}",
        guest_name=f"Guest {n}",
        guest_phone="0800000000",
        party_size=party_size,
        reservation_date=on_date,
        reservation_time=time(hour, minute),
        table_number=table_number,
        status=status,
        **extra,
    ))
    db.commit()
    return f"r-{n}"


def add_tables(db, count, start=1, is_active=1):
    for number in range(start, start + count):
        db.add(Tables(table_number=number, capacity=4, is_active=is_active))
    db.commit()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(clock):
    return HoldLedger(hold_duration_seconds=30, clock=clock)


@pytest.fixture
def config():
    return BookingConfig(retry_base_delay_seconds=0)


@pytest.fixture
def client(db, ledger, config):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_hold_ledger] = lambda: ledger
    app.dependency_overrides[get_booking_config] = lambda: config
    app.dependency_overrides[get_redis] = lambda: None
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
