"""Time entry validation rules."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from payroll_integration.models import TimeEntry

MIN_HOURS = Decimal("0")
MAX_HOURS = Decimal("24")
# Upper bounds of the time_entry columns
MAX_EMPLOYEE_ID = 2**31 - 1
MAX_CUSTOMER_NAME_LENGTH = 200

EMPLOYEE_REQUIRED = "EmployeeId is required."
HOURS_OUT_OF_RANGE = "Hours must be between 0–24."
DATE_IN_FUTURE = "Date cannot be in the future."
EMPLOYEE_OUT_OF_RANGE = f"EmployeeId cannot exceed {MAX_EMPLOYEE_ID}."
CUSTOMER_TOO_LONG = f"Customer name cannot exceed {MAX_CUSTOMER_NAME_LENGTH} characters."

VALIDATION_RULES = [
    f"EmployeeId must be between 1 and {MAX_EMPLOYEE_ID}.",
    "Hours must be between 0 and 24 for a single day.",
    "Date cannot be in the future.",
    f"Customer name is at most {MAX_CUSTOMER_NAME_LENGTH} characters.",
]


class ValidationFailure(Exception):
    """Raised when a candidate time entry breaks one or more rules."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def validate_time_entry(entry: TimeEntry, today: date) -> list[str]:
    """Return every rule the entry violates; empty means valid.

    All rules are checked so callers see every problem at once.
    """
    errors: list[str] = []

    if entry.employee_id is None or entry.employee_id <= 0:
        errors.append(EMPLOYEE_REQUIRED)
    elif entry.employee_id > MAX_EMPLOYEE_ID:
        errors.append(EMPLOYEE_OUT_OF_RANGE)

    hours = entry.hours
    if hours is None or not (MIN_HOURS <= Decimal(str(hours)) <= MAX_HOURS):
        errors.append(HOURS_OUT_OF_RANGE)

    if entry.work_date is None or entry.work_date > today:
        errors.append(DATE_IN_FUTURE)

    if entry.customer_name is not None and len(entry.customer_name) > MAX_CUSTOMER_NAME_LENGTH:
        errors.append(CUSTOMER_TOO_LONG)

    return errors
