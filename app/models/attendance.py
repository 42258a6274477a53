"""
Attendance record model
"""
import enum
from sqlalchemy import CheckConstraint, Column, Integer, Date, ForeignKey, String, UniqueConstraint
from app.db.base import Base


class AttendanceStatus(str, enum.Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class AttendanceRecord(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(
        String,
        ForeignKey("employees.employee_id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    date = Column(Date, nullable=False, index=True)
    status = Column(String, nullable=False)  # AttendanceStatus value

    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
        CheckConstraint("status IN ('Present', 'Absent')", name="ck_attendance_status"),
    )
