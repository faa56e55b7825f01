"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict

from payroll_integration.calculators.types import TrendLabel
from payroll_integration.services.health import HealthState


# ============================================================================
# Pipeline operations
# ============================================================================


class ImportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    imported: int
    invalid: int


class ExportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    exported_count: int
    failed_queued: int
    success: bool


class RetryResponse(BaseModel):
    retried: int


class TimeEntryCreate(BaseModel):
    """Manual time entry.

    Range checks are left to the service so the caller gets the same
    messages as imports produce.
    """

    employee_id: int
    work_date: date
    hours: Decimal
    customer_name: str | None = None


class TimeEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    time_entry_id: int
    employee_id: int
    work_date: date
    hours: Decimal
    source: str
    customer_name: str


# ============================================================================
# Read models
# ============================================================================


class PayrollSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    total_hours: Decimal
    period: str
    hourly_rate: Decimal
    total_pay: Decimal
    customer_name: str


class RunLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    log_id: int
    run_at: datetime
    operation: str
    success: bool
    message: str | None = None


class HealthReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: HealthState
    description: str
    last_import: datetime | None = None
    last_export: datetime | None = None
    failed_last_24h: int
    failed_exports_queued: int
    active_employees: int


class EmployeeMetricsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
    first_entry_date: date | None = None
    last_entry_date: date | None = None
    trend_label: TrendLabel


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    summaries: list[PayrollSummaryResponse]
    logs: list[RunLogResponse]
    total_employees: int
    total_hours: Decimal
    total_payout: Decimal
    failed_exports_queued: int
    hours_labels: list[str]
    hours_values: list[Decimal]
    health: HealthReportResponse


class ExportPreviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    customer_name: str | None = None
    summaries: list[PayrollSummaryResponse]
    total_employees: int
    total_hours: Decimal
    total_payout: Decimal
    batch_id: str
    generated_at: datetime


class DataQualityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    last_import_at: datetime | None = None
    last_import_invalid_count: int | None = None
    validation_rules: list[str]
    mapping_description: str


class DayHoursResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: date
    total_hours: Decimal


class EmployeeCalendarResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    month: str
    days: list[DayHoursResponse]
    hourly_rate: Decimal
    total_hours: Decimal
    gross_pay: Decimal


# ============================================================================
# Errors
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None


class ValidationFailureResponse(BaseModel):
    """Rule violations for a rejected time entry."""

    detail: str
    errors: list[str]
