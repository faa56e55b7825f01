"""Client for the external HR/time system.

The upstream only exposes a list of users. Each user becomes one time entry
for today with a placeholder hour count derived from the user id, so the
feed is reproducible until a real timesheet endpoint exists.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import httpx

from payroll_integration.clock import Clock
from payroll_integration.models import DEFAULT_CUSTOMER, EntrySource, TimeEntry

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 30


class TimeSourceError(Exception):
    """Raised when the time source is unreachable or returns unusable data."""


def placeholder_hours(user_id: int) -> Decimal:
    """Deterministic stand-in for hours worked: 5 to 9 depending on the id."""
    return Decimal((user_id % 5) + 5)


class TimeSourceClient:
    """Fetches users from the time source and maps them to time entries."""

    def __init__(
        self,
        base_url: str,
        clock: Clock,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.clock = clock
        self.batch_size = batch_size
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> list[TimeEntry]:
        """Fetch one batch of entries.

        Raises:
            TimeSourceError: on transport errors, non-2xx responses or a
                payload that does not look like ``{"users": [...]}``.
        """
        users = await self._get_users()
        today = self.clock.today()

        entries = []
        for user in users[: self.batch_size]:
            user_id = user.get("id") if isinstance(user, dict) else None
            if not isinstance(user_id, int) or isinstance(user_id, bool):
                raise TimeSourceError(f"Malformed user record from time source: {user!r}")
            entries.append(
                TimeEntry(
                    employee_id=user_id,
                    work_date=today,
                    hours=placeholder_hours(user_id),
                    source=EntrySource.API.value,
                    customer_name=self._customer_name(user),
                )
            )

        logger.debug("Fetched %d entries from %s", len(entries), self.base_url)
        return entries

    async def _get_users(self) -> list[Any]:
        url = f"{self.base_url}/users"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            raise TimeSourceError(f"Time source request failed: {e}") from e
        except ValueError as e:
            raise TimeSourceError(f"Time source returned invalid JSON: {e}") from e

        users = payload.get("users") if isinstance(payload, dict) else None
        if not isinstance(users, list):
            raise TimeSourceError("Time source response has no 'users' list")
        return users

    @staticmethod
    def _customer_name(user: dict[str, Any]) -> str:
        company = user.get("company")
        if isinstance(company, dict):
            name = company.get("name")
            if isinstance(name, str) and name.strip():
                return name.strip()
        return DEFAULT_CUSTOMER
