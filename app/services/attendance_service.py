"""
Attendance service - business logic for attendance management

One record per (employee_id, date): marking the same day again overwrites
the status in place through the store's native insert-or-update.
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.dialects import postgresql, sqlite
from app.core.errors import (
    NotFoundError,
    StoreError,
    ValidationError,
    classify_integrity_error,
)
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.schemas.attendance import AttendanceMark
from app.utils.validators import clean, parse_iso_date

logger = logging.getLogger(__name__)

ALLOWED_STATUSES = {s.value for s in AttendanceStatus}
CONFLICT_COLUMNS = ["employee_id", "date"]


def build_upsert_statement(dialect_name: str, employee_id: str, work_date: date, status: str):
    """
    Build an atomic insert-or-update keyed on uq_attendance_employee_date

    The statement returns the row it wrote, so no second read is needed.

    Args:
        dialect_name: SQLAlchemy dialect name of the bound engine
        employee_id: Employee business key
        work_date: Attendance date
        status: Present or Absent

    Returns:
        Executable INSERT ... ON CONFLICT DO UPDATE ... RETURNING statement

    Raises:
        StoreError: If the dialect is neither PostgreSQL nor SQLite
    """
    if dialect_name == "postgresql":
        insert = postgresql.insert
    elif dialect_name == "sqlite":
        insert = sqlite.insert
    else:
        raise StoreError(f"Attendance upsert is not supported on {dialect_name}")

    stmt = insert(AttendanceRecord).values(employee_id=employee_id, date=work_date, status=status)
    return stmt.on_conflict_do_update(
        index_elements=CONFLICT_COLUMNS,
        set_={"status": stmt.excluded.status},
    ).returning(
        AttendanceRecord.id,
        AttendanceRecord.employee_id,
        AttendanceRecord.date,
        AttendanceRecord.status,
    )


def mark_attendance(db: Session, attendance_data: AttendanceMark) -> AttendanceRecord:
    """
    Record an employee's status for a date, replacing any earlier mark

    Args:
        db: Database session
        attendance_data: employee_id, date (YYYY-MM-DD) and status

    Returns:
        The inserted or updated AttendanceRecord

    Raises:
        ValidationError: Missing field, invalid status, or malformed date
            (raised before the session is touched)
        NotFoundError: If employee_id does not match an employee
        StoreError: If the write fails for any other reason
    """
    employee_id = clean(attendance_data.employee_id)
    raw_date = clean(attendance_data.date)
    status = attendance_data.status
    if not employee_id or not raw_date or not clean(status):
        raise ValidationError("All fields are required: employee_id, date, status")

    if status not in ALLOWED_STATUSES:
        raise ValidationError('Status must be either "Present" or "Absent"')

    work_date = parse_iso_date(raw_date)

    try:
        stmt = build_upsert_statement(db.get_bind().dialect.name, employee_id, work_date, status)
        row = db.execute(stmt).one()
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if classify_integrity_error(e) == "foreign_key":
            raise NotFoundError("Employee not found")
        logger.error("Failed to mark attendance for %s on %s: %s", employee_id, work_date, e)
        raise StoreError("Failed to mark attendance")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to mark attendance for %s on %s: %s", employee_id, work_date, e)
        raise StoreError("Failed to mark attendance")

    # detached copy of the RETURNING row; later commits do not refresh it
    record = AttendanceRecord(id=row.id, employee_id=row.employee_id, date=row.date, status=row.status)
    logger.info("Attendance marked: %s %s %s", employee_id, work_date, status)
    return record


def list_attendance(db: Session, employee_id: Optional[str] = None) -> List[AttendanceRecord]:
    """
    List attendance records, newest date first

    Args:
        db: Database session
        employee_id: Optional filter; blank is treated as no filter

    Raises:
        StoreError: If the store cannot be read
    """
    employee_id = clean(employee_id)
    try:
        query = db.query(AttendanceRecord)
        if employee_id:
            query = query.filter(AttendanceRecord.employee_id == employee_id)
        return query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.id.desc()).all()
    except SQLAlchemyError as e:
        logger.error("Failed to fetch attendance: %s", e)
        raise StoreError("Failed to fetch attendance")
