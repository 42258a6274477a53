#!/usr/bin/env python3
"""
Print the dashboard attendance counts for a day, and optionally one
employee's totals. Uses the same DATABASE_URL as the app.

Run from project root:
    python scripts/attendance_summary.py
    python scripts/attendance_summary.py --date 2024-01-01 --employee EMP-L2X94QAZ
"""
import argparse
import os
import sys
from datetime import date

# Ensure app is importable when run from the repo root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Attendance summary from the records database")
    parser.add_argument("--date", default=date.today().isoformat(), help="Day to summarise (YYYY-MM-DD, default today)")
    parser.add_argument("--employee", default=None, help="Also print totals for this employee_id")
    args = parser.parse_args(argv)

    from app.core.config import get_settings
    from app.core.errors import RecordServiceError
    from app.db.session import Database
    from app.services.attendance_service import list_attendance
    from app.services.employee_service import list_employees
    from app.utils.attendance_stats import summarize_day, summarize_employee
    from app.utils.validators import parse_iso_date

    database = Database(get_settings())
    db = database.session()
    try:
        day = parse_iso_date(args.date)
        employees = list_employees(db)
        records = list_attendance(db)
        summary = summarize_day(records, day, total_employees=len(employees))
        print(f"Date:            {day.isoformat()}")
        print(f"Total employees: {summary.total_employees}")
        print(f"Present:         {summary.present}")
        print(f"Absent:          {summary.absent}")
        print(f"Attendance rate: {summary.attendance_rate}%")

        if args.employee:
            if not any(e.employee_id == args.employee for e in employees):
                print(f"Employee {args.employee} not found", file=sys.stderr)
                return 1
            totals = summarize_employee(list_attendance(db, employee_id=args.employee))
            print()
            print(f"Employee:        {args.employee}")
            print(f"Days marked:     {totals.total_days_marked}")
            print(f"Present:         {totals.present}")
            print(f"Absent:          {totals.absent}")
    except RecordServiceError as e:
        print(f"Error: {e.detail}", file=sys.stderr)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
