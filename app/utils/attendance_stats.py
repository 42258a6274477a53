"""
Attendance counts for the dashboard and per-employee record pages.

These run over records already fetched from the attendance listing; the API
itself exposes no aggregation endpoints. Records can be ORM rows, pydantic
models, or plain dicts (e.g. decoded JSON), with `date` either a date or an
ISO string.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Union

from app.models.attendance import AttendanceStatus

DateLike = Union[date, str]


@dataclass(frozen=True)
class DailySummary:
    total_employees: int
    present: int
    absent: int
    attendance_rate: int  # whole percent of all employees marked Present


@dataclass(frozen=True)
class EmployeeSummary:
    total_days_marked: int
    present: int
    absent: int


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _status(record: Any) -> str:
    status = _field(record, "status")
    if isinstance(status, AttendanceStatus):
        return status.value
    return status


def summarize_day(records: Iterable[Any], day: DateLike, total_employees: int) -> DailySummary:
    """
    Count Present/Absent marks for one day and the attendance rate.

    Args:
        records: attendance records (any day; others are ignored)
        day: the day to count
        total_employees: head count the rate is measured against

    Returns:
        DailySummary; attendance_rate is 0 when there are no employees
    """
    day = _as_date(day)
    present = absent = 0
    for record in records:
        record_date = _field(record, "date")
        if record_date is None or _as_date(record_date) != day:
            continue
        status = _status(record)
        if status == AttendanceStatus.PRESENT.value:
            present += 1
        elif status == AttendanceStatus.ABSENT.value:
            absent += 1

    # half-up rounding, so 12.5% shows as 13%
    rate = (present * 200 + total_employees) // (2 * total_employees) if total_employees > 0 else 0
    return DailySummary(
        total_employees=total_employees,
        present=present,
        absent=absent,
        attendance_rate=rate,
    )


def summarize_employee(records: Iterable[Any]) -> EmployeeSummary:
    """Totals over one employee's attendance history."""
    statuses = [_status(record) for record in records]
    return EmployeeSummary(
        total_days_marked=len(statuses),
        present=statuses.count(AttendanceStatus.PRESENT.value),
        absent=statuses.count(AttendanceStatus.ABSENT.value),
    )
