"""
Employee service - business logic for employee management
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.core.errors import (
    ConflictError,
    StoreError,
    ValidationError,
    classify_integrity_error,
)
from app.models.employee import Employee
from app.schemas.employee import EmployeeCreate
from app.utils.identifiers import generate_employee_id
from app.utils.validators import clean, is_valid_email

logger = logging.getLogger(__name__)


def list_employees(db: Session) -> List[Employee]:
    """
    List all employees, most recently created first

    Raises:
        StoreError: If the store cannot be read
    """
    try:
        return (
            db.query(Employee)
            .order_by(Employee.created_at.desc(), Employee.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        logger.error("Failed to fetch employees: %s", e)
        raise StoreError("Failed to fetch employees")


def create_employee(
    db: Session,
    employee_data: EmployeeCreate,
    max_attempts: int = 1
) -> Employee:
    """
    Create a new employee

    Args:
        db: Database session
        employee_data: Employee creation data
        max_attempts: How many generated employee IDs to try before giving up.
            Only applies when the caller did not supply an employee_id.

    Returns:
        Created Employee instance

    Raises:
        ValidationError: If a required field is missing or the email is malformed
        ConflictError: If the employee_id is already taken
        StoreError: If the insert fails for any other reason
    """
    full_name = clean(employee_data.full_name)
    email = clean(employee_data.email)
    department = clean(employee_data.department)
    if not full_name or not email or not department:
        raise ValidationError("All fields are required: full_name, email, department")

    if not is_valid_email(email):
        raise ValidationError("Invalid email format")

    supplied_id = clean(employee_data.employee_id)
    attempts = 1 if supplied_id else max(1, max_attempts)

    for attempt in range(1, attempts + 1):
        candidate_id = supplied_id or generate_employee_id()
        employee = Employee(
            employee_id=candidate_id,
            full_name=full_name,
            email=email,
            department=department,
        )
        db.add(employee)
        try:
            db.commit()
            db.refresh(employee)
        except IntegrityError as e:
            db.rollback()
            if classify_integrity_error(e) != "unique":
                logger.error("Failed to create employee %s: %s", candidate_id, e)
                raise StoreError("Failed to create employee")
            if attempt < attempts:
                logger.warning(
                    "Generated employee_id %s already taken, retrying (%d/%d)",
                    candidate_id, attempt, attempts
                )
                continue
            raise ConflictError("Employee ID already exists")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to create employee %s: %s", candidate_id, e)
            raise StoreError("Failed to create employee")

        logger.info("Employee created: %s (%s)", employee.employee_id, employee.department)
        return employee

    # attempts is always >= 1, so the loop either returns or raises
    raise StoreError("Failed to create employee")


def delete_employee(db: Session, employee_id: Optional[str]) -> int:
    """
    Delete an employee by business key

    Deleting an unknown employee_id is not an error; the return value is the
    number of rows removed (0 or 1).

    Raises:
        ValidationError: If employee_id is missing
        ConflictError: If attendance records still reference the employee
        StoreError: If the delete fails for any other reason
    """
    employee_id = clean(employee_id)
    if not employee_id:
        raise ValidationError("employee_id is required")

    try:
        deleted = (
            db.query(Employee)
            .filter(Employee.employee_id == employee_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if classify_integrity_error(e) == "foreign_key":
            raise ConflictError("Employee has attendance records and cannot be deleted")
        logger.error("Failed to delete employee %s: %s", employee_id, e)
        raise StoreError("Failed to delete employee")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Failed to delete employee %s: %s", employee_id, e)
        raise StoreError("Failed to delete employee")

    logger.info("Employee delete: employee_id=%s rows=%d", employee_id, deleted)
    return deleted
