"""Integration pipeline endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, HTTPException, Path, Query, status
from fastapi.responses import JSONResponse

from payroll_integration.api.dependencies import Integration
from payroll_integration.api.schemas import (
    DashboardResponse,
    DataQualityResponse,
    EmployeeCalendarResponse,
    EmployeeMetricsResponse,
    ErrorResponse,
    ExportPreviewResponse,
    ExportResponse,
    HealthReportResponse,
    ImportResponse,
    PayrollSummaryResponse,
    RetryResponse,
    RunLogResponse,
    TimeEntryCreate,
    TimeEntryResponse,
    ValidationFailureResponse,
)
from payroll_integration.models import Operation, TimeEntry
from payroll_integration.services.integration_service import EntryNotSaved, since_for_range
from payroll_integration.services.validation import ValidationFailure

router = APIRouter(prefix="/integration", tags=["integration"])

CustomerFilter = Annotated[str | None, Query(description="Customer label; omit or 'All' for every customer")]


# ============================================================================
# Pipeline operations
# ============================================================================


@router.post("/import", response_model=ImportResponse)
async def import_time_entries(service: Integration) -> ImportResponse:
    """Pull one batch from the time source."""
    result = await service.import_time_entries()
    return ImportResponse.model_validate(result)


@router.post("/export", response_model=ExportResponse)
async def export_payroll(service: Integration, customer: CustomerFilter = None) -> ExportResponse:
    """Hand current summaries to the payroll sink."""
    result = await service.export_payroll(customer)
    return ExportResponse.model_validate(result)


@router.post("/retry", response_model=RetryResponse)
async def retry_failed_exports(service: Integration) -> RetryResponse:
    """Retry every queued failed export once."""
    return RetryResponse(retried=await service.retry_failed_exports())


@router.post(
    "/time-entries",
    response_model=TimeEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ValidationFailureResponse},
        503: {"model": ErrorResponse},
    },
)
async def add_time_entry(service: Integration, payload: TimeEntryCreate):
    """Add a manual time entry."""
    entry = TimeEntry(
        employee_id=payload.employee_id,
        work_date=payload.work_date,
        hours=payload.hours,
        customer_name=payload.customer_name or "",
    )
    try:
        saved = await service.manual_add(entry)
    except ValidationFailure as e:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(e), "errors": e.errors},
        )
    except EntryNotSaved as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(e), "code": "ENTRY_NOT_SAVED"},
        )
    return TimeEntryResponse.model_validate(saved)


# ============================================================================
# Read models
# ============================================================================


@router.get("/summaries", response_model=list[PayrollSummaryResponse])
async def get_summaries(
    service: Integration, customer: CustomerFilter = None
) -> list[PayrollSummaryResponse]:
    summaries = await service.get_current_summaries(customer)
    return [PayrollSummaryResponse.model_validate(s) for s in summaries]


@router.get(
    "/logs",
    response_model=list[RunLogResponse],
    responses={400: {"model": ErrorResponse}},
)
async def get_logs(
    service: Integration,
    operation: Annotated[Literal["All", "Import", "Export", "Retry", "ManualAdd"], Query()] = "All",
    status_filter: Annotated[Literal["All", "Success", "Failed"], Query(alias="status")] = "All",
    range_key: Annotated[Literal["1h", "24h", "7d", "all"], Query(alias="range")] = "24h",
) -> list[RunLogResponse]:
    """Recent run log rows, newest first."""
    since = since_for_range(range_key, service.clock.now())
    logs = await service.get_logs(
        operation=None if operation == "All" else Operation(operation),
        status=status_filter,
        since=since,
    )
    return [RunLogResponse.model_validate(log) for log in logs]


@router.get("/health", response_model=HealthReportResponse)
async def get_health(service: Integration, customer: CustomerFilter = None) -> HealthReportResponse:
    report = await service.get_health(customer)
    return HealthReportResponse.model_validate(report)


@router.get(
    "/metrics/{employee_id}",
    response_model=EmployeeMetricsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_metrics(
    service: Integration,
    employee_id: Annotated[int, Path(gt=0)],
) -> EmployeeMetricsResponse:
    metrics = await service.get_metrics(employee_id)
    if metrics is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No payroll data for employee {employee_id}",
        )
    return EmployeeMetricsResponse.model_validate(metrics)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(service: Integration, customer: CustomerFilter = None) -> DashboardResponse:
    dashboard = await service.get_dashboard(customer)
    return DashboardResponse.model_validate(dashboard)


@router.get("/export-preview", response_model=ExportPreviewResponse)
async def get_export_preview(
    service: Integration, customer: CustomerFilter = None
) -> ExportPreviewResponse:
    preview = await service.get_export_preview(customer)
    return ExportPreviewResponse.model_validate(preview)


@router.get("/data-quality", response_model=DataQualityResponse)
async def get_data_quality(service: Integration) -> DataQualityResponse:
    return DataQualityResponse.model_validate(await service.get_data_quality())


@router.get("/customers", response_model=list[str])
async def list_customers(service: Integration) -> list[str]:
    return await service.list_customers()


@router.get(
    "/employees/{employee_id}/calendar",
    response_model=EmployeeCalendarResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_employee_calendar(
    service: Integration,
    employee_id: Annotated[int, Path(gt=0)],
    month: Annotated[str | None, Query(description="YYYY-MM, defaults to this month")] = None,
) -> EmployeeCalendarResponse:
    try:
        calendar = await service.get_employee_calendar(employee_id, month)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return EmployeeCalendarResponse.model_validate(calendar)
