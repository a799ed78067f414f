from datetime import datetime, timedelta

from bistro.database import get_db
from bistro.main import app
from bistro.models import Reservations
from bistro.routers.cron import get_cron_secret
from bistro.services.auto_cancel import cancel_expired_pending
from conftest import MONDAY, BrokenSession, add_reservation, add_tables

NOW = datetime(2030, 1, 7, 10, 0, 0)
LONG_AGO = "2020-01-01 00:00:00"


def stamp(dt):
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def statuses(db):
    db.expire_all()
    return {r.id: r.status for r in db.query(Reservations)}


# ── Service ──────────────────────────────────────────────────────────────


def test_cancels_only_stale_pending(db):
    stale = add_reservation(db, MONDAY, "18:00", 1, status="pending", created_at=stamp(NOW - timedelta(minutes=45)))
    fresh = add_reservation(db, MONDAY, "18:00", 2, status="pending", created_at=stamp(NOW - timedelta(minutes=5)))
    confirmed = add_reservation(db, MONDAY, "18:00", 3, status="confirmed", created_at=stamp(NOW - timedelta(hours=2)))

    assert cancel_expired_pending(db, now=NOW) == [stale]
    assert statuses(db) == {stale: "cancelled", fresh: "pending", confirmed: "confirmed"}


def test_cutoff_boundary(db):
    at_cutoff = add_reservation(db, MONDAY, "18:00", 1, status="pending", created_at=stamp(NOW - timedelta(minutes=30)))
    past_cutoff = add_reservation(
        db, MONDAY, "18:00", 2, status="pending", created_at=stamp(NOW - timedelta(minutes=30, seconds=1))
    )

    assert cancel_expired_pending(db, now=NOW) == [past_cutoff]
    assert statuses(db)[at_cutoff] == "pending"


def test_cancelled_row_gets_updated_at(db):
    rid = add_reservation(db, MONDAY, "18:00", 1, status="pending", created_at=LONG_AGO)

    cancel_expired_pending(db, now=NOW)

    assert db.get(Reservations, rid).updated_at == stamp(NOW)


def test_nothing_to_cancel(db):
    add_reservation(db, MONDAY, "18:00", 1, status="confirmed", created_at=LONG_AGO)
    assert cancel_expired_pending(db, now=NOW) == []


# ── Route ────────────────────────────────────────────────────────────────


def test_route_frees_the_slot(client, db):
    app.dependency_overrides[get_cron_secret] = lambda: None
    add_tables(db, 5)
    for table in range(1, 6):
        add_reservation(db, MONDAY, "18:00", table, status="pending", created_at=LONG_AGO)

    slots = {s["time"]: s["status"] for s in client.get("/api/timeslots", params={"date": MONDAY.isoformat()}).json()["slots"]}
    assert slots["18:00"] == "booked"

    r = client.get("/api/cron/auto-cancel")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["cancelled"] == 5
    assert len(body["ids"]) == 5
    assert body["message"] == "Cancelled 5 expired reservations"

    db.expire_all()
    slots = {s["time"]: s["status"] for s in client.get("/api/timeslots", params={"date": MONDAY.isoformat()}).json()["slots"]}
    assert slots["18:00"] == "available"


def test_route_requires_secret(client):
    app.dependency_overrides[get_cron_secret] = lambda: "s3cret"

    assert client.get("/api/cron/auto-cancel").status_code == 401
    wrong = client.get("/api/cron/auto-cancel", headers={"Authorization": "Bearer nope"})
    assert wrong.status_code == 401
    assert wrong.json() == {"success": False, "error": "Unauthorized"}

    ok = client.get("/api/cron/auto-cancel", headers={"Authorization": "Bearer s3cret"})
    assert ok.status_code == 200
    assert ok.json() == {
        "success": True,
        "message": "No expired reservations to cancel",
        "cancelled": 0,
        "ids": [],
    }


def test_route_database_failure(client):
    app.dependency_overrides[get_cron_secret] = lambda: None
    app.dependency_overrides[get_db] = lambda: BrokenSession()

    r = client.get("/api/cron/auto-cancel")
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Failed to process auto-cancel"}
