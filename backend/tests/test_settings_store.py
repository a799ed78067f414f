import json

from redis import RedisError

from bistro.models import Holidays, Settings
from bistro.services.slots.settings_store import (
    get_business_hours,
    get_holiday_dates,
    get_reservation_policy,
    get_total_tables,
)
from conftest import MONDAY, BrokenSession, FakeRedis, add_tables


def put(db, key, value):
    db.add(Settings(key=key, value=value))
    db.commit()


class DownRedis:
    def get(self, key):
        raise RedisError("connection refused")

    def setex(self, key, ttl, value):
        raise RedisError("connection refused")


# ── Reservation policy ───────────────────────────────────────────────────


def test_policy_defaults(db, config):
    policy = get_reservation_policy(db, config)
    assert (policy.dining_duration, policy.buffer_time) == (90, 15)
    assert policy.total_duration == 105


def test_policy_from_settings(db, config):
    put(db, "dining_duration", "120")
    put(db, "buffer_time", "10")

    assert get_reservation_policy(db, config).total_duration == 130


def test_policy_bad_value_falls_back_per_key(db, config):
    put(db, "dining_duration", "two hours")
    put(db, "buffer_time", "0")

    policy = get_reservation_policy(db, config)
    assert (policy.dining_duration, policy.buffer_time) == (90, 0)


def test_policy_unreadable_database(config):
    policy = get_reservation_policy(BrokenSession(), config)
    assert policy.total_duration == 105


# ── Business hours ───────────────────────────────────────────────────────


def test_business_hours_unset(db, config):
    assert get_business_hours(db, config) is None


def test_business_hours_parsed(db, config):
    put(db, "business_hours", json.dumps({"1": {"open": "17:00", "close": "02:00"}}))
    assert get_business_hours(db, config) == {"1": {"open": "17:00", "close": "02:00"}}


def test_business_hours_invalid_json(db, config):
    put(db, "business_hours", "{not json")
    assert get_business_hours(db, config) is None


def test_business_hours_unreadable_database(config):
    assert get_business_hours(BrokenSession(), config) is None


# ── Tables ───────────────────────────────────────────────────────────────


def test_table_count_fallback(db, config):
    assert get_total_tables(db, config) == 5


def test_table_count_active_only(db, config):
    add_tables(db, 7)
    add_tables(db, 3, start=8, is_active=0)
    assert get_total_tables(db, config) == 7


def test_table_count_unreadable_database(config):
    broken = BrokenSession()
    assert get_total_tables(broken, config) == 5
    assert broken.calls == 3


# ── Holidays ─────────────────────────────────────────────────────────────


def test_holiday_dates(db, config):
    db.add(Holidays(holiday_date=MONDAY, description="Staff party"))
    db.commit()

    assert get_holiday_dates(db, MONDAY, config) == {MONDAY}
    assert get_holiday_dates(db, MONDAY.replace(day=8), config) == set()


def test_holiday_dates_unreadable_database(config):
    assert get_holiday_dates(BrokenSession(), MONDAY, config) == set()


# ── Read cache ───────────────────────────────────────────────────────────


def test_cached_value_served_from_redis(db, config):
    redis = FakeRedis()
    add_tables(db, 6)

    assert get_total_tables(db, config, redis) == 6
    assert redis.ttls["cache:bistro:table_count"] == config.cache_ttl_seconds

    add_tables(db, 2, start=7)
    assert get_total_tables(db, config, redis) == 6


def test_redis_failure_reads_database(db, config):
    put(db, "buffer_time", "20")
    assert get_reservation_policy(db, config, DownRedis()).buffer_time == 20
