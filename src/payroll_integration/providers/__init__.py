"""Payroll sink adapters."""

from payroll_integration.providers.base import (
    ExportBatch,
    PayrollSink,
    SinkError,
    SinkResult,
    SinkUnavailableError,
)
from payroll_integration.providers.sink_stub import StubPayrollSink

__all__ = [
    "ExportBatch",
    "PayrollSink",
    "SinkError",
    "SinkResult",
    "SinkUnavailableError",
    "StubPayrollSink",
]
