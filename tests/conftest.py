"""Pytest fixtures for payroll integration tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator, Iterable

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_integration.calculators.rate_resolver import RateTable
from payroll_integration.clock import FixedClock
from payroll_integration.models import (
    Base,
    EntrySource,
    FailedExport,
    IntegrationRunLog,
    TimeEntry,
)
from payroll_integration.providers.sink_stub import StubPayrollSink
from payroll_integration.services.integration_service import IntegrationService

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


class FakeTimeSource:
    """Time source returning a fixed list of candidates, or raising."""

    def __init__(self, rows: Iterable[dict] = (), error: Exception | None = None):
        self.rows = list(rows)
        self.error = error
        self.calls = 0

    async def fetch(self) -> list[TimeEntry]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [TimeEntry(**row) for row in self.rows]


@pytest_asyncio.fixture
async def engine():
    """Create test database engine with a fresh schema."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def rate_table() -> RateTable:
    return RateTable.default()


@pytest.fixture
def sink() -> StubPayrollSink:
    return StubPayrollSink(latency=0, retry_latency=0)


@pytest.fixture
def time_source() -> FakeTimeSource:
    return FakeTimeSource()


@pytest.fixture
def service(session, time_source, sink, rate_table, clock) -> IntegrationService:
    return IntegrationService(
        session,
        time_source=time_source,
        sink=sink,
        rate_table=rate_table,
        clock=clock,
    )


async def seed_entries(
    session: AsyncSession,
    employee_id: int,
    hours: Iterable[float | str],
    *,
    days: Iterable[date] | None = None,
    customer_name: str = "Demo customer",
) -> list[TimeEntry]:
    """Insert entries directly, bypassing the pipeline."""
    hours = list(hours)
    days = list(days) if days is not None else [TODAY] * len(hours)
    entries = [
        TimeEntry(
            employee_id=employee_id,
            work_date=day,
            hours=Decimal(str(h)),
            source=EntrySource.API.value,
            customer_name=customer_name,
        )
        for h, day in zip(hours, days)
    ]
    session.add_all(entries)
    await session.commit()
    return entries


async def count_rows(session: AsyncSession, model) -> int:
    return await session.scalar(select(func.count()).select_from(model)) or 0


async def all_logs(session: AsyncSession) -> list[IntegrationRunLog]:
    result = await session.execute(
        select(IntegrationRunLog).order_by(IntegrationRunLog.log_id)
    )
    return list(result.scalars().all())


async def queued_exports(session: AsyncSession) -> list[FailedExport]:
    result = await session.execute(
        select(FailedExport).order_by(FailedExport.failed_export_id)
    )
    return list(result.scalars().all())
