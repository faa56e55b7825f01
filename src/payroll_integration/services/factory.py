"""Wiring of IntegrationService from settings."""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_integration.calculators.rate_resolver import RateTable
from payroll_integration.clients.time_source import TimeSourceClient
from payroll_integration.clock import Clock, SystemClock
from payroll_integration.config import get_settings
from payroll_integration.database import get_session
from payroll_integration.providers.base import PayrollSink
from payroll_integration.providers.sink_stub import StubPayrollSink
from payroll_integration.services.integration_service import IntegrationService


@lru_cache(maxsize=1)
def get_clock() -> Clock:
    return SystemClock()


@lru_cache(maxsize=1)
def get_rate_table() -> RateTable:
    return RateTable.default()


@lru_cache(maxsize=1)
def get_sink() -> PayrollSink:
    settings = get_settings()
    return StubPayrollSink(
        latency=settings.sink_latency_seconds,
        retry_latency=settings.retry_latency_seconds,
    )


@lru_cache(maxsize=1)
def get_time_source() -> TimeSourceClient:
    settings = get_settings()
    return TimeSourceClient(
        settings.time_source_url,
        get_clock(),
        batch_size=settings.time_source_batch_size,
        timeout=settings.time_source_timeout,
    )


def build_integration_service(session: AsyncSession) -> IntegrationService:
    """IntegrationService bound to ``session`` with the process-wide collaborators."""
    return IntegrationService(
        session,
        time_source=get_time_source(),
        sink=get_sink(),
        rate_table=get_rate_table(),
        clock=get_clock(),
    )


@asynccontextmanager
async def integration_service_scope() -> AsyncGenerator[IntegrationService, None]:
    """One IntegrationService on a fresh session; used by the background sync."""
    async with get_session() as session:
        yield build_integration_service(session)
