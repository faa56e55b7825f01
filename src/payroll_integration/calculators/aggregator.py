"""Payroll aggregation over persisted time entries."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_integration.calculators.rate_resolver import RateResolver, RateTable
from payroll_integration.calculators.types import PayrollSummary, to_hours
from payroll_integration.clock import Clock
from payroll_integration.models import DEFAULT_CUSTOMER, TimeEntry

ALL_CUSTOMERS = "All"


def normalize_customer(customer: str | None) -> str | None:
    """Map the "no filter" spellings (None, blank, "All") to None."""
    if customer is None:
        return None
    customer = customer.strip()
    if not customer or customer == ALL_CUSTOMERS:
        return None
    return customer


def current_period(clock: Clock) -> str:
    """Payroll period label for the evaluation instant."""
    return clock.now().strftime("%Y-%m")


class PayrollAggregator:
    """Groups time entries by employee and values them.

    The period label is always the month of evaluation, not the month the
    entries fall in: every persisted entry counts towards "this month".
    """

    def __init__(self, session: AsyncSession, rate_table: RateTable, clock: Clock):
        self.session = session
        self.resolver = RateResolver(rate_table)
        self.clock = clock

    async def summarize(self, customer: str | None = None) -> list[PayrollSummary]:
        """Summaries for every employee with entries, optionally for one customer."""
        customer = normalize_customer(customer)
        period = current_period(self.clock)

        query = select(TimeEntry.employee_id, func.sum(TimeEntry.hours)).group_by(
            TimeEntry.employee_id
        )
        if customer is not None:
            query = query.where(TimeEntry.customer_name == customer)
        query = query.order_by(TimeEntry.employee_id)

        rows = (await self.session.execute(query)).all()
        if not rows:
            return []

        labels = {}
        if customer is None:
            labels = await self._latest_customer_labels()

        summaries = []
        for employee_id, hours_sum in rows:
            total_hours = to_hours(hours_sum)
            rate, total_pay = self.resolver.pay_for(employee_id, total_hours)
            summaries.append(
                PayrollSummary(
                    employee_id=employee_id,
                    total_hours=total_hours,
                    period=period,
                    hourly_rate=rate,
                    total_pay=total_pay,
                    customer_name=customer or labels.get(employee_id, DEFAULT_CUSTOMER),
                )
            )
        return summaries

    async def _latest_customer_labels(self) -> dict[int, str]:
        """Customer label of each employee's most recent entry.

        Most recent is the latest work date, then the highest id.
        """
        ranked = select(
            TimeEntry.employee_id,
            TimeEntry.customer_name,
            func.row_number()
            .over(
                partition_by=TimeEntry.employee_id,
                order_by=[TimeEntry.work_date.desc(), TimeEntry.time_entry_id.desc()],
            )
            .label("recency"),
        ).subquery()

        result = await self.session.execute(
            select(ranked.c.employee_id, ranked.c.customer_name).where(ranked.c.recency == 1)
        )
        return {employee_id: customer_name for employee_id, customer_name in result}
