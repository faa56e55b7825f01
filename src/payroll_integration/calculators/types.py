"""Value types produced by the payroll calculators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

HOURS_QUANT = Decimal("0.01")


def to_hours(value: Decimal | float | int | None) -> Decimal:
    """Normalize an hours value coming back from the database."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(HOURS_QUANT)


class TrendLabel(str, Enum):
    """Direction of an employee's recent activity."""

    INCREASING = "Increasing"
    DECREASING = "Decreasing"
    STABLE = "Stable"


@dataclass(frozen=True)
class PayrollSummary:
    """Hours and pay for one employee in the current payroll period.

    Derived on every request from time entries; never stored.
    """

    employee_id: int
    total_hours: Decimal
    period: str  # YYYY-MM
    hourly_rate: Decimal
    total_pay: Decimal
    customer_name: str


@dataclass(frozen=True)
class ActivitySnapshot:
    """Shape of an employee's time entry history."""

    average_hours_per_day: float
    first_entry_date: date | None
    last_entry_date: date | None
    trend_label: TrendLabel


@dataclass(frozen=True)
class EmployeeMetrics:
    """Gross-to-net split and activity for one employee.

    ``tax_amount`` and ``commission_amount`` are rounded to cents
    (ROUND_HALF_UP) before ``net_pay`` is derived, so the three amounts are
    payable as stated and ``gross_pay == tax_amount + commission_amount +
    net_pay`` holds exactly.
    """

    employee_id: int
    period: str
    total_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    tax_amount: Decimal
    commission_amount: Decimal
    net_pay: Decimal
    tax_rate_percent: Decimal
    commission_rate_percent: Decimal
    average_hours_per_day: float
    first_entry_date: date | None
    last_entry_date: date | None
    trend_label: TrendLabel
