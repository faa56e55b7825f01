"""Payroll integration engine: time import, payroll export and pipeline health."""

__version__ = "0.1.0"
