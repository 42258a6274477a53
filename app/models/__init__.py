"""
Database models
"""
from app.models.employee import Employee
from app.models.attendance import AttendanceRecord, AttendanceStatus

__all__ = [
    "Employee",
    "AttendanceRecord",
    "AttendanceStatus",
]
