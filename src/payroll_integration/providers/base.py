"""Protocol and types for downstream payroll sinks.

A sink receives the aggregated payroll for a period. Real adapters push to a
payroll provider's API; failures must surface as exceptions so the export
can be queued for retry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from payroll_integration.calculators.types import PayrollSummary


class SinkError(Exception):
    """Raised when the sink rejects or cannot receive a batch."""


class SinkUnavailableError(SinkError):
    """Raised when the sink cannot be reached."""


@dataclass(frozen=True)
class ExportBatch:
    """Payroll summaries handed to the sink in one call."""

    batch_id: str
    generated_at: datetime
    summaries: list[PayrollSummary] = field(default_factory=list)
    customer_name: str | None = None

    @property
    def total_hours(self) -> Decimal:
        return sum((s.total_hours for s in self.summaries), Decimal("0"))

    @property
    def total_payout(self) -> Decimal:
        return sum((s.total_pay for s in self.summaries), Decimal("0"))


@dataclass(frozen=True)
class SinkResult:
    """Acknowledgement from the sink."""

    accepted: bool
    reference: str
    message: str = ""


class PayrollSink(Protocol):
    """Protocol for payroll sink adapters."""

    sink_name: str

    async def submit(self, batch: ExportBatch) -> SinkResult:
        """Deliver a batch of summaries.

        Raises:
            SinkError: if the batch could not be delivered.
        """
        ...

    async def resubmit(self, payload: str) -> SinkResult:
        """Retry a previously failed export described by ``payload``.

        Raises:
            SinkError: if the retry did not go through.
        """
        ...
