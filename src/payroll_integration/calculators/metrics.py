"""Per-employee gross-to-net split and activity trend."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_integration.calculators.aggregator import PayrollAggregator
from payroll_integration.calculators.rate_resolver import RateTable
from payroll_integration.calculators.types import (
    ActivitySnapshot,
    EmployeeMetrics,
    TrendLabel,
    to_hours,
)
from payroll_integration.clock import Clock
from payroll_integration.models import TimeEntry

TAX_RATE = Decimal("0.32")
COMMISSION_RATE = Decimal("0.05")
TREND_THRESHOLD = Decimal("0.10")
TREND_WINDOW_DAYS = 7

CENTS = Decimal("0.01")


def _round_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def classify_trend(recent: Decimal, previous: Decimal) -> TrendLabel:
    """Compare two window totals with a +/-10% dead band."""
    if recent > previous * (1 + TREND_THRESHOLD):
        return TrendLabel.INCREASING
    if recent < previous * (1 - TREND_THRESHOLD):
        return TrendLabel.DECREASING
    return TrendLabel.STABLE


def activity_snapshot(entries: Sequence[TimeEntry], today: date) -> ActivitySnapshot:
    """Average hours per day and trend for a set of entries.

    The average spreads the total over the inclusive span between the first
    and last entry. The trend compares the last 7 days (today included) with
    the 7 days before that.
    """
    if not entries:
        return ActivitySnapshot(
            average_hours_per_day=0.0,
            first_entry_date=None,
            last_entry_date=None,
            trend_label=TrendLabel.STABLE,
        )

    first = min(e.work_date for e in entries)
    last = max(e.work_date for e in entries)
    span_days = (last - first).days + 1
    total = sum((to_hours(e.hours) for e in entries), Decimal("0"))

    recent_start = today - timedelta(days=TREND_WINDOW_DAYS - 1)
    previous_start = today - timedelta(days=2 * TREND_WINDOW_DAYS - 1)
    previous_end = today - timedelta(days=TREND_WINDOW_DAYS)

    recent = sum(
        (to_hours(e.hours) for e in entries if recent_start <= e.work_date <= today),
        Decimal("0"),
    )
    previous = sum(
        (to_hours(e.hours) for e in entries if previous_start <= e.work_date <= previous_end),
        Decimal("0"),
    )

    return ActivitySnapshot(
        average_hours_per_day=float(total / span_days),
        first_entry_date=first,
        last_entry_date=last,
        trend_label=classify_trend(recent, previous),
    )


class EmployeeMetricsCalculator:
    """Builds EmployeeMetrics from the current summary and entry history."""

    def __init__(self, session: AsyncSession, rate_table: RateTable, clock: Clock):
        self.session = session
        self.clock = clock
        self.aggregator = PayrollAggregator(session, rate_table, clock)

    async def calculate(self, employee_id: int) -> EmployeeMetrics | None:
        """Metrics for one employee, or None when they have no entries."""
        summaries = await self.aggregator.summarize()
        summary = next((s for s in summaries if s.employee_id == employee_id), None)
        if summary is None:
            return None

        gross = summary.total_pay
        tax = _round_money(gross * TAX_RATE)
        commission = _round_money(gross * COMMISSION_RATE)
        net = gross - tax - commission

        result = await self.session.execute(
            select(TimeEntry)
            .where(TimeEntry.employee_id == employee_id)
            .order_by(TimeEntry.work_date)
        )
        snapshot = activity_snapshot(result.scalars().all(), self.clock.today())

        return EmployeeMetrics(
            employee_id=summary.employee_id,
            period=summary.period,
            total_hours=summary.total_hours,
            hourly_rate=summary.hourly_rate,
            gross_pay=gross,
            tax_amount=tax,
            commission_amount=commission,
            net_pay=net,
            tax_rate_percent=TAX_RATE * 100,
            commission_rate_percent=COMMISSION_RATE * 100,
            average_hours_per_day=snapshot.average_hours_per_day,
            first_entry_date=snapshot.first_entry_date,
            last_entry_date=snapshot.last_entry_date,
            trend_label=snapshot.trend_label,
        )
