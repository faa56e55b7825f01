"""Stub payroll sink for local development and testing.

Replace with a real payroll provider adapter for production.
"""

from __future__ import annotations

import asyncio
import uuid

from payroll_integration.providers.base import (
    ExportBatch,
    SinkResult,
    SinkUnavailableError,
)


class StubPayrollSink:
    """Sink that only waits, standing in for the network round trip.

    Failures can be switched on per operation to exercise the failure queue.
    Every call is recorded for inspection in tests.
    """

    sink_name = "payroll_stub"

    def __init__(
        self,
        latency: float = 0.3,
        retry_latency: float = 0.2,
        *,
        fail_submit: bool = False,
        fail_resubmit: bool = False,
    ):
        """Initialize stub sink.

        Args:
            latency: Seconds to wait on every submit.
            retry_latency: Seconds to wait on every resubmit.
            fail_submit: If True, submit raises SinkUnavailableError.
            fail_resubmit: If True, resubmit raises SinkUnavailableError.
        """
        self.latency = latency
        self.retry_latency = retry_latency
        self.fail_submit = fail_submit
        self.fail_resubmit = fail_resubmit
        self.submitted: list[ExportBatch] = []
        self.resubmitted: list[str] = []

    async def submit(self, batch: ExportBatch) -> SinkResult:
        if self.latency:
            await asyncio.sleep(self.latency)
        if self.fail_submit:
            raise SinkUnavailableError("Payroll sink unavailable")
        self.submitted.append(batch)
        return SinkResult(
            accepted=True,
            reference=f"STUB-{batch.batch_id}",
            message=f"Stub accepted {len(batch.summaries)} summaries",
        )

    async def resubmit(self, payload: str) -> SinkResult:
        if self.retry_latency:
            await asyncio.sleep(self.retry_latency)
        if self.fail_resubmit:
            raise SinkUnavailableError("Payroll sink unavailable")
        self.resubmitted.append(payload)
        return SinkResult(
            accepted=True,
            reference=f"STUB-RETRY-{uuid.uuid4().hex[:12]}",
            message="Stub accepted retry",
        )
