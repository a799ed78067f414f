import threading
import time

from bistro.models import Holidays, Reservations
from bistro.routers import reservations as reservations_router
from conftest import MONDAY, add_reservation, add_tables

DAY = MONDAY.isoformat()


def payload(**overrides):
    body = {
        "guest_name": "Somchai",
        "guest_phone": "0812345678",
        "party_size": 4,
        "reservation_date": DAY,
        "reservation_time": "18:00",
        "table_number": 3,
    }
    body.update(overrides)
    return body


def test_create_reservation(client, db):
    r = client.post("/api/reservations", json=payload(special_requests="Window seat"))
    assert r.status_code == 201

    data = r.json()["data"]
    assert data["status"] == "pending"
    assert data["reservation_date"] == DAY
    assert data["reservation_time"].startswith("18:00")
    assert data["table_number"] == 3
    assert len(data["booking_code"]) == 8

    stored = db.query(Reservations).filter(Reservations.id == data["id"]).one()
    assert stored.guest_name == "Somchai"
    assert stored.special_requests == "Window seat"


def test_create_requires_fields(client):
    body = payload()
    del body["guest_phone"]

    r = client.post("/api/reservations", json=body)
    assert r.status_code == 400
    assert r.json() == {"error": "Missing required field: guest_phone"}


def test_create_rejects_party_size(client):
    r = client.post("/api/reservations", json=payload(party_size=51))
    assert r.status_code == 400
    assert r.json() == {"error": "Party size must be between 1 and 50"}


def test_create_rejects_bad_date(client):
    r = client.post("/api/reservations", json=payload(reservation_date="2030-1-7"))
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid date format"}


def test_table_overlap_rejected(client, db):
    add_reservation(db, MONDAY, "17:00", table_number=3)

    r = client.post("/api/reservations", json=payload(reservation_time="18:30", locale="en"))
    assert r.status_code == 409
    assert "105" in r.json()["error"]


def test_table_free_exactly_one_duration_apart(client, db):
    add_reservation(db, MONDAY, "16:15", table_number=3)

    r = client.post("/api/reservations", json=payload(reservation_time="18:00"))
    assert r.status_code == 201


def test_other_tables_and_cancelled_rows_do_not_block(client, db):
    add_reservation(db, MONDAY, "18:00", table_number=4)
    add_reservation(db, MONDAY, "18:00", table_number=3, status="cancelled")

    r = client.post("/api/reservations", json=payload())
    assert r.status_code == 201


def test_create_releases_callers_hold(client, db, ledger):
    add_tables(db, 5)
    hold = client.post(
        "/api/timeslots",
        json={"date": DAY, "time": "18:00", "action": "hold", "sessionId": "s1"},
    )
    assert hold.json() == {"success": True}

    r = client.post("/api/reservations", json=payload(session_id="s1"))
    assert r.status_code == 201
    assert ledger.active_holds(DAY) == []


def test_list_reservations_public_fields(client, db):
    add_reservation(db, MONDAY, "19:00", table_number=2)
    add_reservation(db, MONDAY, "18:00", table_number=1, status="pending")
    add_reservation(db, MONDAY, "12:00", table_number=5, status="cancelled")

    r = client.get("/api/reservations", params={"date": DAY})
    assert r.status_code == 200

    rows = r.json()["data"]
    assert [row["table_number"] for row in rows] == [1, 2]
    assert set(rows[0]) == {"reservation_date", "reservation_time", "table_number", "status"}


def test_list_reservations_status_filter(client, db):
    add_reservation(db, MONDAY, "19:00", table_number=2)
    add_reservation(db, MONDAY, "18:00", table_number=1, status="pending")

    rows = client.get("/api/reservations", params={"status": "pending"}).json()["data"]
    assert [row["table_number"] for row in rows] == [1]


def test_list_holidays(client, db):
    db.add_all([
        Holidays(holiday_date=MONDAY.replace(day=20), description="Songkran prep"),
        Holidays(holiday_date=MONDAY, description="Staff party"),
    ])
    db.commit()

    r = client.get("/api/holidays")
    assert r.status_code == 200
    assert [h["holiday_date"] for h in r.json()["data"]] == ["2030-01-07", "2030-01-20"]


def test_concurrent_bookings_never_double_book_a_table(client, db, monkeypatch):
    check = reservations_router.has_table_conflict

    def slow_check(*args, **kwargs):
        result = check(*args, **kwargs)
        time.sleep(0.1)
        return result

    monkeypatch.setattr(reservations_router, "has_table_conflict", slow_check)

    barrier = threading.Barrier(2)
    codes = []

    def book(at):
        barrier.wait()
        r = client.post("/api/reservations", json=payload(reservation_time=at))
        codes.append(r.status_code)

    threads = [threading.Thread(target=book, args=(at,)) for at in ("18:00", "18:30")]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert sorted(codes) == [201, 409]
    assert db.query(Reservations).filter(Reservations.table_number == 3).count() == 1
