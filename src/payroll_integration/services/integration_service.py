"""Integration orchestration: import, export, retry and manual entry.

Every pipeline operation writes exactly one run log row per outcome so that
health can be derived from the log alone. Failures inside import and export
are caught here and turned into a log row plus a result object; callers do
not see raw exceptions from the time source, the sink or the database.

Concurrent calls are not serialized. Two imports running at the same time
(for instance the background sync and a manual trigger) both persist their
batches and both log.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_integration.calculators.aggregator import PayrollAggregator, normalize_customer
from payroll_integration.calculators.metrics import EmployeeMetricsCalculator
from payroll_integration.calculators.rate_resolver import RateTable
from payroll_integration.calculators.types import EmployeeMetrics, PayrollSummary, to_hours
from payroll_integration.clients.time_source import TimeSourceClient
from payroll_integration.clock import Clock
from payroll_integration.models import (
    MANUAL_CUSTOMER,
    EntrySource,
    FailedExport,
    IntegrationRunLog,
    Operation,
    TimeEntry,
)
from payroll_integration.providers.base import ExportBatch, PayrollSink
from payroll_integration.services.health import (
    FAILURE_WINDOW,
    HealthState,
    evaluate_health,
)
from payroll_integration.services.validation import (
    VALIDATION_RULES,
    ValidationFailure,
    validate_time_entry,
)

logger = logging.getLogger(__name__)

NO_DATA_PAYLOAD = "No data to export."
NO_DATA_MESSAGE = "No data to export – queued."
DEFAULT_LOG_LIMIT = 50
CHART_DAYS = 7

LOG_RANGES: dict[str, timedelta | None] = {
    "1h": timedelta(hours=1),
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "all": None,
}

MAPPING_DESCRIPTION = (
    "Each user returned by the time source becomes one time entry dated "
    "today. EmployeeId is the upstream user id, Hours is a placeholder of "
    "(id mod 5) + 5, Customer is the user's company name (or 'Demo "
    "customer'), and Source is 'API'."
)

_INVALID_COUNT = re.compile(r"(\d+) invalid")


class EntryNotSaved(Exception):
    """Raised when a valid manual entry could not be written to the database."""


@dataclass(frozen=True)
class ImportResult:
    imported: int
    invalid: int


@dataclass(frozen=True)
class ExportResult:
    exported_count: int
    failed_queued: int
    success: bool


@dataclass(frozen=True)
class HealthReport:
    """Health status plus the inputs it was derived from."""

    status: HealthState
    description: str
    last_import: datetime | None
    last_export: datetime | None
    failed_last_24h: int
    failed_exports_queued: int
    active_employees: int


@dataclass(frozen=True)
class DayHours:
    day: date
    total_hours: Decimal


@dataclass(frozen=True)
class Dashboard:
    summaries: list[PayrollSummary]
    logs: list[IntegrationRunLog]
    total_employees: int
    total_hours: Decimal
    total_payout: Decimal
    failed_exports_queued: int
    hours_labels: list[str]
    hours_values: list[Decimal]
    health: HealthReport


@dataclass(frozen=True)
class ExportPreview:
    customer_name: str | None
    summaries: list[PayrollSummary]
    batch_id: str
    generated_at: datetime

    @property
    def total_employees(self) -> int:
        return len(self.summaries)

    @property
    def total_hours(self) -> Decimal:
        return sum((s.total_hours for s in self.summaries), Decimal("0"))

    @property
    def total_payout(self) -> Decimal:
        return sum((s.total_pay for s in self.summaries), Decimal("0"))


@dataclass(frozen=True)
class DataQuality:
    last_import_at: datetime | None
    last_import_invalid_count: int | None
    validation_rules: list[str] = field(default_factory=lambda: list(VALIDATION_RULES))
    mapping_description: str = MAPPING_DESCRIPTION


@dataclass(frozen=True)
class EmployeeCalendar:
    employee_id: int
    month: str  # YYYY-MM
    days: list[DayHours]
    hourly_rate: Decimal

    @property
    def total_hours(self) -> Decimal:
        return sum((d.total_hours for d in self.days), Decimal("0"))

    @property
    def gross_pay(self) -> Decimal:
        return self.total_hours * self.hourly_rate


def since_for_range(range_key: str, now: datetime) -> datetime | None:
    """Lower bound for a log range key ("1h", "24h", "7d", "all")."""
    try:
        window = LOG_RANGES[range_key]
    except KeyError:
        raise ValueError(f"Unknown log range: {range_key!r}") from None
    return None if window is None else now - window


def parse_month(month: str) -> date:
    """First day of a "YYYY-MM" month."""
    try:
        return datetime.strptime(f"{month}-01", "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid month {month!r}, expected YYYY-MM") from None


def _next_month(first: date) -> date:
    if first.month == 12:
        return date(first.year + 1, 1, 1)
    return date(first.year, first.month + 1, 1)


def _error_text(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


class IntegrationService:
    """Facade over the import/export pipeline.

    One instance is bound to one session; the background sync creates a
    fresh instance per iteration.
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        time_source: TimeSourceClient,
        sink: PayrollSink,
        rate_table: RateTable,
        clock: Clock,
    ):
        self.session = session
        self.time_source = time_source
        self.sink = sink
        self.rate_table = rate_table
        self.clock = clock
        self.aggregator = PayrollAggregator(session, rate_table, clock)

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    async def import_time_entries(self) -> ImportResult:
        """Fetch, validate and persist one batch from the time source.

        Valid entries and the log row are committed together. Any error
        discards the whole batch and is logged as a failed import.
        """
        try:
            candidates = await self.time_source.fetch()
            today = self.clock.today()
            imported = invalid = 0

            for entry in candidates:
                errors = validate_time_entry(entry, today)
                if errors:
                    invalid += 1
                    logger.warning(
                        "Invalid entry for employee %s: %s",
                        entry.employee_id,
                        ", ".join(errors),
                    )
                    continue
                self.session.add(entry)
                imported += 1

            await self.session.flush()
            self._add_log(
                Operation.IMPORT, True, f"Imported {imported} entries, {invalid} invalid."
            )
            await self.session.commit()
        except Exception as e:
            logger.exception("Import failed")
            await self.session.rollback()
            self._add_log(Operation.IMPORT, False, _error_text(e))
            await self._commit_failure_record()
            return ImportResult(imported=0, invalid=0)

        logger.info("Import finished: %d imported, %d invalid", imported, invalid)
        return ImportResult(imported=imported, invalid=invalid)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    async def export_payroll(self, customer: str | None = None) -> ExportResult:
        """Hand the current summaries to the sink.

        The sink is always called, including for an empty batch, so every
        export pays the round trip. An empty batch or a sink error queues a
        failed export for retry.
        """
        try:
            summaries = await self.aggregator.summarize(customer)
            batch = ExportBatch(
                batch_id=uuid4().hex,
                generated_at=self.clock.now(),
                summaries=summaries,
                customer_name=normalize_customer(customer),
            )
            await self.sink.submit(batch)

            if not summaries:
                logger.warning("Export found no data, queued for retry")
                self._queue_failed_export(NO_DATA_PAYLOAD)
                self._add_log(Operation.EXPORT, False, NO_DATA_MESSAGE)
                await self.session.commit()
                return ExportResult(exported_count=0, failed_queued=1, success=False)

            self._add_log(Operation.EXPORT, True, f"Exported {len(summaries)} employees.")
            await self.session.commit()
        except Exception as e:
            logger.exception("Export failed")
            await self.session.rollback()
            self._queue_failed_export(_error_text(e))
            self._add_log(Operation.EXPORT, False, _error_text(e))
            await self._commit_failure_record()
            return ExportResult(exported_count=0, failed_queued=1, success=False)

        logger.info("Export finished: %d employees", len(summaries))
        return ExportResult(exported_count=len(summaries), failed_queued=0, success=True)

    async def retry_failed_exports(self) -> int:
        """Retry every queued failed export once.

        A successful retry removes the queue row and logs a Retry entry in the
        same commit. A failed retry bumps ``retry_count`` and keeps the row;
        it is reported to the application log only, not to the run log.
        """
        result = await self.session.execute(
            select(FailedExport).order_by(FailedExport.failed_at, FailedExport.failed_export_id)
        )
        queued = result.scalars().all()
        retried = 0

        for failed in queued:
            try:
                await self.sink.resubmit(failed.payload)
            except Exception:
                failed.retry_count += 1
                logger.exception(
                    "Retry failed for FailedExport %s (attempt %d)",
                    failed.failed_export_id,
                    failed.retry_count,
                )
                continue

            await self.session.delete(failed)
            self._add_log(Operation.RETRY, True, f"Retried payload {failed.failed_export_id}")
            retried += 1

        await self.session.commit()
        if queued:
            logger.info("Retried %d of %d failed exports", retried, len(queued))
        return retried

    # ------------------------------------------------------------------
    # Manual entry
    # ------------------------------------------------------------------

    async def manual_add(self, entry: TimeEntry) -> TimeEntry:
        """Persist a manually entered time entry.

        Raises:
            ValidationFailure: with every violated rule; nothing is stored
                or logged in that case.
            EntryNotSaved: if the database rejects the write. The session
                is rolled back.
        """
        entry.source = EntrySource.MANUAL.value
        if not (entry.customer_name or "").strip():
            entry.customer_name = MANUAL_CUSTOMER

        errors = validate_time_entry(entry, self.clock.today())
        if errors:
            raise ValidationFailure(errors)

        self.session.add(entry)
        self._add_log(Operation.MANUAL_ADD, True, f"Manual entry for employee {entry.employee_id}")
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.exception("Manual entry for employee %s not saved", entry.employee_id)
            await self.session.rollback()
            raise EntryNotSaved("Time entry could not be saved.") from e
        return entry

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_current_summaries(self, customer: str | None = None) -> list[PayrollSummary]:
        return await self.aggregator.summarize(customer)

    async def get_logs(
        self,
        operation: Operation | str | None = None,
        status: str | None = None,
        since: datetime | None = None,
        limit: int = DEFAULT_LOG_LIMIT,
    ) -> list[IntegrationRunLog]:
        """Most recent run log rows, newest first.

        ``status`` is "Success", "Failed" or "All"/None.
        """
        query = select(IntegrationRunLog)
        if operation and operation != "All":
            query = query.where(IntegrationRunLog.operation == Operation(operation).value)
        if status == "Success":
            query = query.where(IntegrationRunLog.success.is_(True))
        elif status == "Failed":
            query = query.where(IntegrationRunLog.success.is_(False))
        elif status not in (None, "All"):
            raise ValueError(f"Unknown status filter: {status!r}")
        if since is not None:
            query = query.where(IntegrationRunLog.run_at >= since)

        query = query.order_by(
            IntegrationRunLog.run_at.desc(), IntegrationRunLog.log_id.desc()
        ).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_health(self, customer: str | None = None) -> HealthReport:
        """Health derived from the run log.

        The run log is not partitioned by customer; the filter only scopes
        the active employee count.
        """
        now = self.clock.now()
        last_import = await self._last_run(Operation.IMPORT)
        last_export = await self._last_run(Operation.EXPORT)
        failed_last_24h = await self.session.scalar(
            select(func.count())
            .select_from(IntegrationRunLog)
            .where(
                IntegrationRunLog.success.is_(False),
                IntegrationRunLog.run_at >= now - FAILURE_WINDOW,
            )
        ) or 0

        health = evaluate_health(last_import, last_export, failed_last_24h, now)
        summaries = await self.aggregator.summarize(customer)

        return HealthReport(
            status=health.status,
            description=health.description,
            last_import=last_import,
            last_export=last_export,
            failed_last_24h=failed_last_24h,
            failed_exports_queued=await self._failed_export_count(),
            active_employees=len(summaries),
        )

    async def get_metrics(self, employee_id: int) -> EmployeeMetrics | None:
        calculator = EmployeeMetricsCalculator(self.session, self.rate_table, self.clock)
        return await calculator.calculate(employee_id)

    async def get_dashboard(self, customer: str | None = None) -> Dashboard:
        """Everything the overview page shows, in one call."""
        customer = normalize_customer(customer)
        summaries = await self.aggregator.summarize(customer)
        logs = await self.get_logs()

        start = self.clock.today() - timedelta(days=CHART_DAYS - 1)
        query = (
            select(TimeEntry.work_date, func.sum(TimeEntry.hours))
            .where(TimeEntry.work_date >= start)
            .group_by(TimeEntry.work_date)
        )
        if customer is not None:
            query = query.where(TimeEntry.customer_name == customer)
        daily = {day: to_hours(hours) for day, hours in (await self.session.execute(query)).all()}

        days = [start + timedelta(days=i) for i in range(CHART_DAYS)]

        return Dashboard(
            summaries=summaries,
            logs=logs,
            total_employees=len(summaries),
            total_hours=sum((s.total_hours for s in summaries), Decimal("0")),
            total_payout=sum((s.total_pay for s in summaries), Decimal("0")),
            failed_exports_queued=await self._failed_export_count(),
            hours_labels=[d.strftime("%d %b") for d in days],
            hours_values=[daily.get(d, to_hours(0)) for d in days],
            health=await self.get_health(customer),
        )

    async def get_export_preview(self, customer: str | None = None) -> ExportPreview:
        customer = normalize_customer(customer)
        return ExportPreview(
            customer_name=customer,
            summaries=await self.aggregator.summarize(customer),
            batch_id=uuid4().hex,
            generated_at=self.clock.now(),
        )

    async def get_data_quality(self) -> DataQuality:
        """Outcome of the last successful import and the rules it applied."""
        result = await self.session.execute(
            select(IntegrationRunLog)
            .where(
                IntegrationRunLog.operation == Operation.IMPORT.value,
                IntegrationRunLog.success.is_(True),
            )
            .order_by(IntegrationRunLog.run_at.desc(), IntegrationRunLog.log_id.desc())
            .limit(1)
        )
        last = result.scalar_one_or_none()
        if last is None:
            return DataQuality(last_import_at=None, last_import_invalid_count=None)

        match = _INVALID_COUNT.search(last.message or "")
        return DataQuality(
            last_import_at=last.run_at,
            last_import_invalid_count=int(match.group(1)) if match else None,
        )

    async def list_customers(self) -> list[str]:
        result = await self.session.execute(
            select(TimeEntry.customer_name)
            .where(TimeEntry.customer_name != "")
            .distinct()
            .order_by(TimeEntry.customer_name)
        )
        return list(result.scalars().all())

    async def get_employee_calendar(
        self, employee_id: int, month: str | None = None
    ) -> EmployeeCalendar:
        """Hours per day for one employee in a month (default: this month)."""
        if month:
            first = parse_month(month)
        else:
            first = self.clock.today().replace(day=1)

        result = await self.session.execute(
            select(TimeEntry.work_date, func.sum(TimeEntry.hours))
            .where(
                TimeEntry.employee_id == employee_id,
                TimeEntry.work_date >= first,
                TimeEntry.work_date < _next_month(first),
            )
            .group_by(TimeEntry.work_date)
            .order_by(TimeEntry.work_date)
        )
        return EmployeeCalendar(
            employee_id=employee_id,
            month=first.strftime("%Y-%m"),
            days=[DayHours(day=d, total_hours=to_hours(h)) for d, h in result.all()],
            hourly_rate=self.rate_table.rate_for(employee_id),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _add_log(self, operation: Operation, success: bool, message: str | None) -> None:
        self.session.add(
            IntegrationRunLog(
                run_at=self.clock.now(),
                operation=operation.value,
                success=success,
                message=message,
            )
        )

    def _queue_failed_export(self, payload: str) -> None:
        self.session.add(
            FailedExport(payload=payload, failed_at=self.clock.now(), retry_count=0)
        )

    async def _commit_failure_record(self) -> None:
        """Commit a failure log row; if even that fails, only the app log knows."""
        try:
            await self.session.commit()
        except Exception:
            logger.exception("Could not record pipeline failure")
            await self.session.rollback()

    async def _last_run(self, operation: Operation) -> datetime | None:
        return await self.session.scalar(
            select(func.max(IntegrationRunLog.run_at)).where(
                IntegrationRunLog.operation == operation.value
            )
        )

    async def _failed_export_count(self) -> int:
        return await self.session.scalar(
            select(func.count()).select_from(FailedExport)
        ) or 0
