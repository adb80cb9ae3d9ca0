from datetime import date

from fastapi.testclient import TestClient
from sqlalchemy import event

from app.database import SessionLocal
from app.main import app
from app.models.attendance import AttendanceRecord
from app.schemas.staff import AttendanceMark
from app.services import attendance_service

client = TestClient(app)


def _create_staff(name: str = "Deepa") -> dict:
    resp = client.post("/staff", json={"name": name, "role": "Electrician", "monthly_salary": "18000"})
    assert resp.status_code == 200, resp.text
    return resp.json()["staff"]


def test_staff_crud():
    staff = _create_staff()
    assert staff["status"] == "active"
    assert staff["joining_date"] == date.today().isoformat()

    updated = client.put(
        f"/staff/{staff['id']}",
        json={"name": "Deepa R", "role": "Senior Electrician", "monthly_salary": "20000", "status": "inactive"},
    )
    assert updated.status_code == 200
    assert updated.json()["staff"]["role"] == "Senior Electrician"

    inactive = client.get("/staff", params={"status": "inactive"}).json()["staff"]
    assert [s["id"] for s in inactive] == [staff["id"]]
    assert client.get("/staff", params={"status": "active"}).json()["staff"] == []

    assert client.delete(f"/staff/{staff['id']}").status_code == 200
    missing = client.get(f"/staff/{staff['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Staff member not found"


def test_marking_same_day_twice_keeps_one_record():
    staff = _create_staff()

    first = client.post(
        "/attendance",
        json={"staff_id": staff["id"], "date": "2026-10-05", "status": "present"},
    )
    assert first.status_code == 200, first.text

    second = client.post(
        "/attendance",
        json={"staff_id": staff["id"], "date": "2026-10-05", "status": "half_day", "notes": "Left early"},
    )
    assert second.status_code == 200, second.text
    assert second.json()["attendance"]["id"] == first.json()["attendance"]["id"]

    db = SessionLocal()
    try:
        rows = db.query(AttendanceRecord).filter(AttendanceRecord.staff_id == staff["id"]).all()
        assert len(rows) == 1
        assert rows[0].status == "half_day"
        assert rows[0].notes == "Left early"
    finally:
        db.close()


def test_attendance_rejects_unknown_staff_and_status():
    staff = _create_staff()

    unknown_staff = client.post(
        "/attendance",
        json={"staff_id": "nobody", "date": "2026-10-05", "status": "present"},
    )
    assert unknown_staff.status_code == 404

    bad_status = client.post(
        "/attendance",
        json={"staff_id": staff["id"], "date": "2026-10-05", "status": "late"},
    )
    assert bad_status.status_code == 400


def test_attendance_list_filters():
    deepa = _create_staff("Deepa")
    farhan = _create_staff("Farhan")

    for staff_id, day, status in [
        (deepa["id"], "2026-10-05", "present"),
        (deepa["id"], "2026-11-02", "absent"),
        (farhan["id"], "2026-10-05", "half_day"),
    ]:
        resp = client.post("/attendance", json={"staff_id": staff_id, "date": day, "status": status})
        assert resp.status_code == 200, resp.text

    by_staff = client.get("/attendance", params={"staff_id": deepa["id"]}).json()["attendance"]
    assert [r["date"] for r in by_staff] == ["2026-11-02", "2026-10-05"]

    by_date = client.get("/attendance", params={"date": "2026-10-05"}).json()["attendance"]
    assert {r["staff"]["name"] for r in by_date} == {"Deepa", "Farhan"}

    by_month = client.get("/attendance", params={"month": "2026-11"}).json()["attendance"]
    assert [r["status"] for r in by_month] == ["absent"]

    bad_month = client.get("/attendance", params={"month": "2026-1"})
    assert bad_month.status_code == 400


def test_deleting_staff_removes_attendance():
    staff = _create_staff()
    client.post("/attendance", json={"staff_id": staff["id"], "date": "2026-10-06", "status": "present"})

    assert client.delete(f"/staff/{staff['id']}").status_code == 200

    db = SessionLocal()
    try:
        assert db.query(AttendanceRecord).filter(AttendanceRecord.staff_id == staff["id"]).count() == 0
    finally:
        db.close()


def test_mark_replaces_a_record_written_concurrently():
    staff = _create_staff()
    day = date(2026, 10, 7)
    rival_ids = []

    def _rival_mark(orm_execute_state):
        if not orm_execute_state.is_insert or rival_ids:
            return
        other = SessionLocal()
        try:
            rival = AttendanceRecord(staff_id=staff["id"], date=day, status="absent")
            other.add(rival)
            other.commit()
            rival_ids.append(rival.id)
        finally:
            other.close()

    db = SessionLocal()
    event.listen(db, "do_orm_execute", _rival_mark)
    try:
        record = attendance_service.mark_attendance(
            AttendanceMark(staff_id=staff["id"], date=day, status="present"),
            db=db,
        )
    finally:
        event.remove(db, "do_orm_execute", _rival_mark)
        db.close()

    assert len(rival_ids) == 1
    assert record.id == rival_ids[0]
    assert record.status == "present"

    check = SessionLocal()
    try:
        rows = check.query(AttendanceRecord).filter(AttendanceRecord.staff_id == staff["id"]).all()
        assert [(r.date, r.status) for r in rows] == [(day, "present")]
    finally:
        check.close()
