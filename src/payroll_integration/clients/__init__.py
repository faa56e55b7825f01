"""Clients for upstream systems."""

from payroll_integration.clients.time_source import TimeSourceClient, TimeSourceError

__all__ = ["TimeSourceClient", "TimeSourceError"]
