"""Hourly rate lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

DEFAULT_HOURLY_RATE = Decimal("280")

_BUILTIN_RATES = {
    1: Decimal("250"),
    2: Decimal("260"),
    3: Decimal("275"),
    4: Decimal("280"),
    5: Decimal("290"),
}


@dataclass(frozen=True)
class RateTable:
    """Read-only employee id -> hourly rate mapping.

    Built once at startup and passed to whatever needs rates. Employees
    without an entry are paid ``default_rate``.
    """

    rates: Mapping[int, Decimal] = field(default_factory=dict)
    default_rate: Decimal = DEFAULT_HOURLY_RATE

    def __post_init__(self) -> None:
        frozen = MappingProxyType({int(k): Decimal(v) for k, v in self.rates.items()})
        object.__setattr__(self, "rates", frozen)
        object.__setattr__(self, "default_rate", Decimal(self.default_rate))

    @classmethod
    def default(cls) -> RateTable:
        """The fixed rate table used in production."""
        return cls(rates=_BUILTIN_RATES, default_rate=DEFAULT_HOURLY_RATE)

    def rate_for(self, employee_id: int) -> Decimal:
        """Hourly rate for an employee, falling back to the default."""
        return self.rates.get(employee_id, self.default_rate)


class RateResolver:
    """Resolves pay for an employee from a rate table."""

    def __init__(self, rate_table: RateTable):
        self.rate_table = rate_table

    def resolve_rate(self, employee_id: int) -> Decimal:
        return self.rate_table.rate_for(employee_id)

    def pay_for(self, employee_id: int, hours: Decimal) -> tuple[Decimal, Decimal]:
        """Return ``(rate, rate * hours)`` without rounding."""
        rate = self.resolve_rate(employee_id)
        return rate, rate * hours
