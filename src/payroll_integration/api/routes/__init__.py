"""API routes."""

from payroll_integration.api.routes.health import router as health_router
from payroll_integration.api.routes.integration import router as integration_router

__all__ = ["health_router", "integration_router"]
