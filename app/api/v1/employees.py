"""
Employee endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.core.config import Settings
from app.core.deps import get_db, get_app_settings
from app.schemas.employee import EmployeeCreate, EmployeeOut, MessageOut
from app.services.employee_service import (
    create_employee,
    list_employees,
    delete_employee,
)

router = APIRouter()


@router.get("", response_model=List[EmployeeOut])
def list_employees_endpoint(db: Session = Depends(get_db)):
    """List all employees, newest first"""
    return list_employees(db)


@router.post("", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee_endpoint(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Create an employee.

    employee_id is optional; when omitted an EMP-XXXXXXXX identifier is generated.
    Returns 409 if the employee_id is already taken.
    """
    return create_employee(db, employee_data, max_attempts=settings.EMPLOYEE_ID_MAX_ATTEMPTS)


@router.delete("", response_model=MessageOut)
def delete_employee_endpoint(
    employee_id: Optional[str] = Query(None, description="Business key of the employee to delete"),
    db: Session = Depends(get_db),
):
    """
    Delete an employee by employee_id.

    Succeeds even when no employee matches. Returns 409 while attendance
    records still reference the employee.
    """
    delete_employee(db, employee_id)
    return MessageOut(message="Employee deleted successfully")
