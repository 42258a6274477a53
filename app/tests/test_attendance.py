"""
Tests for attendance marking and listing
"""
from datetime import date
from unittest.mock import MagicMock

import pytest
from fastapi import status
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.models.attendance import AttendanceRecord
from app.models.employee import Employee
from app.schemas.attendance import AttendanceMark
from app.services.attendance_service import mark_attendance, list_attendance


@pytest.fixture
def second_employee(db: Session):
    employee = Employee(
        employee_id="EMP-TEST0002",
        full_name="Alan Turing",
        email="alan@bletchley.uk",
        department="Research",
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def _mark(client, employee_id, day, status_value):
    return client.post(
        "/api/attendance",
        json={"employee_id": employee_id, "date": day, "status": status_value},
    )


def test_mark_attendance_creates_record(client, db, test_employee):
    response = _mark(client, test_employee.employee_id, "2024-01-01", "Present")

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["employee_id"] == test_employee.employee_id
    assert data["date"] == "2024-01-01"
    assert data["status"] == "Present"
    assert isinstance(data["id"], int)


def test_mark_attendance_twice_overwrites_status(client, db, test_employee):
    """Same (employee_id, date) leaves exactly one row holding the latest status"""
    first = _mark(client, test_employee.employee_id, "2024-01-01", "Present")
    second = _mark(client, test_employee.employee_id, "2024-01-01", "Absent")

    assert first.status_code == status.HTTP_201_CREATED
    assert second.status_code == status.HTTP_201_CREATED
    assert second.json()["status"] == "Absent"
    assert second.json()["id"] == first.json()["id"]

    rows = db.query(AttendanceRecord).all()
    assert len(rows) == 1
    assert rows[0].status == "Absent"


def test_mark_same_status_again_is_idempotent(client, db, test_employee):
    for _ in range(3):
        assert _mark(client, test_employee.employee_id, "2024-01-01", "Present").status_code == 201
    assert db.query(AttendanceRecord).count() == 1


def test_mark_attendance_different_days_are_separate(client, db, test_employee):
    _mark(client, test_employee.employee_id, "2024-01-01", "Present")
    _mark(client, test_employee.employee_id, "2024-01-02", "Absent")

    assert db.query(AttendanceRecord).count() == 2


def test_mark_attendance_unknown_employee(client, db):
    response = _mark(client, "EMP-GHOST000", "2024-01-01", "Present")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Employee not found"
    assert db.query(AttendanceRecord).count() == 0


def test_mark_attendance_unknown_employee_service(db: Session):
    with pytest.raises(NotFoundError):
        mark_attendance(db, AttendanceMark(employee_id="EMP-GHOST000", date="2024-01-01", status="Present"))
    assert db.query(AttendanceRecord).count() == 0


def test_mark_attendance_returns_its_own_write(db: Session, test_employee, monkeypatch):
    """A write to the same key landing right after commit does not leak into the result"""
    employee_id = test_employee.employee_id
    engine = db.get_bind()
    real_commit = db.commit

    def commit_then_competing_write():
        real_commit()
        with engine.begin() as conn:
            conn.execute(
                update(AttendanceRecord)
                .where(AttendanceRecord.employee_id == employee_id)
                .values(status="Present")
            )

    monkeypatch.setattr(db, "commit", commit_then_competing_write)

    record = mark_attendance(
        db,
        AttendanceMark(employee_id=employee_id, date="2024-01-01", status="Absent"),
    )

    assert record.status == "Absent"
    assert record.date == date(2024, 1, 1)
    assert record.employee_id == employee_id
    assert isinstance(record.id, int)
    # the competing write did land in the store
    assert db.query(AttendanceRecord).one().status == "Present"


@pytest.mark.parametrize("bad_status", ["present", "Late", "PRESENT", " Present"])
def test_mark_attendance_invalid_status(client, db, test_employee, bad_status):
    response = _mark(client, test_employee.employee_id, "2024-01-01", bad_status)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == 'Status must be either "Present" or "Absent"'
    assert db.query(AttendanceRecord).count() == 0


def test_invalid_status_never_reaches_store():
    session = MagicMock()

    with pytest.raises(ValidationError):
        mark_attendance(session, AttendanceMark(employee_id="EMP-1", date="2024-01-01", status="Late"))

    session.get_bind.assert_not_called()
    session.execute.assert_not_called()
    session.commit.assert_not_called()


@pytest.mark.parametrize("missing", ["employee_id", "date", "status"])
def test_mark_attendance_requires_fields(client, db, test_employee, missing):
    payload = {"employee_id": test_employee.employee_id, "date": "2024-01-01", "status": "Present"}
    payload[missing] = ""

    response = client.post("/api/attendance", json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "All fields are required: employee_id, date, status"


def test_missing_field_reported_before_invalid_status(client, db):
    response = client.post("/api/attendance", json={"employee_id": "EMP-1", "status": "Late"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"].startswith("All fields are required")


@pytest.mark.parametrize("bad_date", ["2024-13-01", "01/02/2024", "2024-1-1", "yesterday", "2024-01-01T10:00:00"])
def test_mark_attendance_rejects_non_iso_date(client, db, test_employee, bad_date):
    response = _mark(client, test_employee.employee_id, bad_date, "Present")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "YYYY-MM-DD" in response.json()["detail"]


def test_list_attendance_newest_first(client, db, test_employee):
    for day in ("2024-01-02", "2024-01-03", "2024-01-01"):
        _mark(client, test_employee.employee_id, day, "Present")

    response = client.get("/api/attendance")

    assert response.status_code == status.HTTP_200_OK
    assert [r["date"] for r in response.json()] == ["2024-01-03", "2024-01-02", "2024-01-01"]


def test_list_attendance_filter_by_employee(client, db, test_employee, second_employee):
    _mark(client, test_employee.employee_id, "2024-01-01", "Present")
    _mark(client, second_employee.employee_id, "2024-01-01", "Absent")
    _mark(client, second_employee.employee_id, "2024-01-02", "Present")

    response = client.get("/api/attendance", params={"employee_id": second_employee.employee_id})

    assert response.status_code == status.HTTP_200_OK
    records = response.json()
    assert len(records) == 2
    assert {r["employee_id"] for r in records} == {second_employee.employee_id}
    assert records[0]["date"] == "2024-01-02"

    assert len(client.get("/api/attendance").json()) == 3


def test_list_attendance_blank_filter_returns_all(db: Session, test_employee, second_employee):
    db.add_all([
        AttendanceRecord(employee_id=test_employee.employee_id, date=date(2024, 1, 1), status="Present"),
        AttendanceRecord(employee_id=second_employee.employee_id, date=date(2024, 1, 1), status="Absent"),
    ])
    db.commit()

    assert len(list_attendance(db, employee_id="  ")) == 2


def test_end_to_end_create_mark_remark_list(client, db):
    """Create employee, mark Present, re-mark Absent, list shows one Absent record"""
    response = client.post(
        "/api/employees",
        json={"full_name": "Ada Lovelace", "email": "ada@x.io", "department": "Engineering"},
    )
    assert response.status_code == status.HTTP_201_CREATED
    employee_id = response.json()["employee_id"]
    assert employee_id.startswith("EMP-") and len(employee_id) == 12

    assert _mark(client, employee_id, "2024-01-01", "Present").status_code == status.HTTP_201_CREATED
    assert _mark(client, employee_id, "2024-01-01", "Absent").status_code == status.HTTP_201_CREATED

    response = client.get("/api/attendance", params={"employee_id": employee_id})
    assert response.status_code == status.HTTP_200_OK
    records = response.json()
    assert len(records) == 1
    assert records[0]["status"] == "Absent"
    assert records[0]["date"] == "2024-01-01"
