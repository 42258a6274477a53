"""
Employee schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class EmployeeCreate(BaseModel):
    """
    Schema for creating an employee.

    Fields are optional at the schema level so that missing values are
    reported by the service as a single "All fields are required" error.
    """
    full_name: Optional[str] = Field(None, description="Employee full name")
    email: Optional[str] = Field(None, description="Employee email")
    department: Optional[str] = Field(None, description="Department name")
    employee_id: Optional[str] = Field(None, description="Business key; generated as EMP-XXXXXXXX when omitted")


class EmployeeOut(BaseModel):
    """Schema for employee output"""
    id: int
    employee_id: str
    full_name: str
    email: str
    department: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageOut(BaseModel):
    """Plain confirmation message"""
    message: str
