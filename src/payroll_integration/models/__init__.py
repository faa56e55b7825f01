"""ORM models."""

from payroll_integration.models.base import Base, TimestampMixin, UTCDateTime
from payroll_integration.models.integration import (
    DEFAULT_CUSTOMER,
    MANUAL_CUSTOMER,
    EntrySource,
    FailedExport,
    IntegrationRunLog,
    Operation,
    TimeEntry,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "DEFAULT_CUSTOMER",
    "MANUAL_CUSTOMER",
    "EntrySource",
    "FailedExport",
    "IntegrationRunLog",
    "Operation",
    "TimeEntry",
]
