"""Time entry, integration run log and failed export models."""

from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from payroll_integration.models.base import Base, TimestampMixin, UTCDateTime

DEFAULT_CUSTOMER = "Demo customer"
MANUAL_CUSTOMER = "Manual entry"


class EntrySource(str, enum.Enum):
    """Where a time entry came from."""

    API = "API"
    MANUAL = "Manual"


class Operation(str, enum.Enum):
    """Pipeline operations recorded in the run log."""

    IMPORT = "Import"
    EXPORT = "Export"
    RETRY = "Retry"
    MANUAL_ADD = "ManualAdd"


class TimeEntry(Base, TimestampMixin):
    """Hours worked by one employee on one day.

    Rows are written by import or manual add and never updated afterwards.
    """

    __tablename__ = "time_entry"

    time_entry_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(Integer, nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False, default=EntrySource.API.value)
    customer_name: Mapped[str] = mapped_column(
        String(200), nullable=False, default=DEFAULT_CUSTOMER
    )

    __table_args__ = (
        CheckConstraint("employee_id > 0", name="time_entry_employee_check"),
        CheckConstraint("hours >= 0 AND hours <= 24", name="time_entry_hours_check"),
        Index("ix_time_entry_employee_date", "employee_id", "work_date"),
    )

    def __repr__(self) -> str:
        return (
            f"TimeEntry(employee_id={self.employee_id}, work_date={self.work_date}, "
            f"hours={self.hours}, source={self.source!r})"
        )


class IntegrationRunLog(Base):
    """Append-only record of one pipeline operation and its outcome."""

    __tablename__ = "integration_run_log"

    log_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    run_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, index=True)
    operation: Mapped[str] = mapped_column(String(20), nullable=False)
    success: Mapped[bool] = mapped_column(nullable=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)


class FailedExport(Base):
    """Export attempt waiting in the failure queue for a retry."""

    __tablename__ = "failed_export"

    failed_export_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    failed_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    retry_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("retry_count >= 0", name="failed_export_retry_count_check"),
    )
