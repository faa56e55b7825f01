"""Integration services."""

from payroll_integration.services.health import HealthState, HealthStatus, evaluate_health
from payroll_integration.services.integration_service import (
    EntryNotSaved,
    ExportResult,
    HealthReport,
    ImportResult,
    IntegrationService,
)
from payroll_integration.services.scheduler import BackgroundSync
from payroll_integration.services.validation import ValidationFailure, validate_time_entry

__all__ = [
    "EntryNotSaved",
    "HealthState",
    "HealthStatus",
    "evaluate_health",
    "ExportResult",
    "HealthReport",
    "ImportResult",
    "IntegrationService",
    "BackgroundSync",
    "ValidationFailure",
    "validate_time_entry",
]
