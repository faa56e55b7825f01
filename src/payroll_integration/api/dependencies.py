"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_integration.database import get_session_factory
from payroll_integration.services.factory import build_integration_service
from payroll_integration.services.integration_service import IntegrationService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_integration_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> IntegrationService:
    return build_integration_service(session)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Integration = Annotated[IntegrationService, Depends(get_integration_service)]
