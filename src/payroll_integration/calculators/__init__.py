"""Payroll aggregation and metrics calculators."""

from payroll_integration.calculators.aggregator import PayrollAggregator
from payroll_integration.calculators.metrics import EmployeeMetricsCalculator
from payroll_integration.calculators.rate_resolver import RateResolver, RateTable
from payroll_integration.calculators.types import (
    ActivitySnapshot,
    EmployeeMetrics,
    PayrollSummary,
    TrendLabel,
)

__all__ = [
    "PayrollAggregator",
    "EmployeeMetricsCalculator",
    "RateResolver",
    "RateTable",
    "ActivitySnapshot",
    "EmployeeMetrics",
    "PayrollSummary",
    "TrendLabel",
]
