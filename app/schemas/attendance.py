"""
Attendance schemas
"""
from datetime import date as date_type
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AttendanceMark(BaseModel):
    """Schema for marking attendance (insert or overwrite for the same employee and date)"""
    employee_id: Optional[str] = Field(None, description="Employee business key")
    date: Optional[str] = Field(None, description="ISO calendar date, YYYY-MM-DD")
    status: Optional[str] = Field(None, description="Present or Absent")


class AttendanceOut(BaseModel):
    """Schema for attendance output"""
    id: int
    employee_id: str
    date: date_type
    status: str

    model_config = ConfigDict(from_attributes=True)
