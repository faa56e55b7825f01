"""Tests for time entry validation rules."""

from datetime import timedelta
from decimal import Decimal

import pytest

from payroll_integration.models import TimeEntry
from payroll_integration.services.validation import (
    CUSTOMER_TOO_LONG,
    DATE_IN_FUTURE,
    EMPLOYEE_OUT_OF_RANGE,
    EMPLOYEE_REQUIRED,
    MAX_EMPLOYEE_ID,
    HOURS_OUT_OF_RANGE,
    ValidationFailure,
    validate_time_entry,
)
from tests.conftest import TODAY


def make_entry(employee_id=1, hours="8", work_date=TODAY) -> TimeEntry:
    return TimeEntry(
        employee_id=employee_id,
        work_date=work_date,
        hours=Decimal(hours) if hours is not None else None,
    )


class TestValidateTimeEntry:
    """Each rule is checked independently and in order."""

    def test_valid_entry_has_no_errors(self):
        assert validate_time_entry(make_entry(), TODAY) == []

    @pytest.mark.parametrize("employee_id", [0, -3])
    def test_employee_id_must_be_positive(self, employee_id):
        assert validate_time_entry(make_entry(employee_id=employee_id), TODAY) == [
            EMPLOYEE_REQUIRED
        ]

    def test_employee_id_upper_bound(self):
        assert validate_time_entry(make_entry(employee_id=MAX_EMPLOYEE_ID), TODAY) == []
        assert validate_time_entry(make_entry(employee_id=MAX_EMPLOYEE_ID + 1), TODAY) == [
            EMPLOYEE_OUT_OF_RANGE
        ]

    def test_customer_name_length(self):
        entry = make_entry()
        entry.customer_name = "A" * 200
        assert validate_time_entry(entry, TODAY) == []

        entry.customer_name = "A" * 201
        assert validate_time_entry(entry, TODAY) == [CUSTOMER_TOO_LONG]

    @pytest.mark.parametrize("hours", ["0", "24", "0.25", "23.99"])
    def test_hours_bounds_are_inclusive(self, hours):
        assert validate_time_entry(make_entry(hours=hours), TODAY) == []

    @pytest.mark.parametrize("hours", ["-0.01", "24.01", "30"])
    def test_hours_outside_day_rejected(self, hours):
        assert validate_time_entry(make_entry(hours=hours), TODAY) == [HOURS_OUT_OF_RANGE]

    def test_missing_hours_rejected(self):
        assert validate_time_entry(make_entry(hours=None), TODAY) == [HOURS_OUT_OF_RANGE]

    def test_today_is_allowed(self):
        assert validate_time_entry(make_entry(work_date=TODAY), TODAY) == []

    def test_past_date_is_allowed(self):
        past = TODAY - timedelta(days=400)
        assert validate_time_entry(make_entry(work_date=past), TODAY) == []

    def test_future_date_rejected(self):
        tomorrow = TODAY + timedelta(days=1)
        assert validate_time_entry(make_entry(work_date=tomorrow), TODAY) == [DATE_IN_FUTURE]

    def test_all_violations_reported_together(self):
        entry = make_entry(employee_id=0, hours="25", work_date=TODAY + timedelta(days=2))

        assert validate_time_entry(entry, TODAY) == [
            EMPLOYEE_REQUIRED,
            HOURS_OUT_OF_RANGE,
            DATE_IN_FUTURE,
        ]

    def test_messages(self):
        assert EMPLOYEE_REQUIRED == "EmployeeId is required."
        assert HOURS_OUT_OF_RANGE == "Hours must be between 0–24."
        assert DATE_IN_FUTURE == "Date cannot be in the future."

    def test_validation_does_not_touch_entry(self):
        entry = make_entry(employee_id=0, hours="30")
        validate_time_entry(entry, TODAY)

        assert entry.employee_id == 0
        assert entry.hours == Decimal("30")


class TestValidationFailure:
    def test_message_joins_errors_with_semicolons(self):
        failure = ValidationFailure([EMPLOYEE_REQUIRED, HOURS_OUT_OF_RANGE])

        assert str(failure) == "EmployeeId is required.; Hours must be between 0–24."
        assert failure.errors == [EMPLOYEE_REQUIRED, HOURS_OUT_OF_RANGE]
