"""
Attendance endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.core.deps import get_db
from app.schemas.attendance import AttendanceMark, AttendanceOut
from app.services.attendance_service import mark_attendance, list_attendance

router = APIRouter()


@router.get("", response_model=List[AttendanceOut])
def list_attendance_endpoint(
    employee_id: Optional[str] = Query(None, description="Only this employee's records"),
    db: Session = Depends(get_db),
):
    """List attendance records, newest date first"""
    return list_attendance(db, employee_id=employee_id)


@router.post("", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
def mark_attendance_endpoint(
    attendance_data: AttendanceMark,
    db: Session = Depends(get_db),
):
    """
    Mark attendance for an employee on a date.

    Marking the same employee and date again overwrites the status.
    Returns 404 if the employee does not exist.
    """
    return mark_attendance(db, attendance_data)
