"""Tests for the rate table and rate resolution."""

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from payroll_integration.calculators.rate_resolver import (
    DEFAULT_HOURLY_RATE,
    RateResolver,
    RateTable,
)


class TestRateTable:
    def test_builtin_rates(self):
        table = RateTable.default()

        assert table.rate_for(1) == Decimal("250")
        assert table.rate_for(2) == Decimal("260")
        assert table.rate_for(3) == Decimal("275")
        assert table.rate_for(4) == Decimal("280")
        assert table.rate_for(5) == Decimal("290")

    def test_unknown_employee_gets_default(self):
        assert RateTable.default().rate_for(999) == DEFAULT_HOURLY_RATE == Decimal("280")

    def test_custom_table(self):
        table = RateTable(rates={7: "312.50"}, default_rate="100")

        assert table.rate_for(7) == Decimal("312.50")
        assert table.rate_for(8) == Decimal("100")

    def test_mapping_is_read_only(self):
        table = RateTable.default()

        with pytest.raises(TypeError):
            table.rates[1] = Decimal("1")  # type: ignore[index]

    def test_table_is_frozen(self):
        table = RateTable.default()

        with pytest.raises(FrozenInstanceError):
            table.default_rate = Decimal("1")  # type: ignore[misc]

    def test_source_dict_changes_do_not_leak(self):
        source = {1: Decimal("10")}
        table = RateTable(rates=source)
        source[1] = Decimal("99")

        assert table.rate_for(1) == Decimal("10")


class TestRateResolver:
    @pytest.mark.parametrize(
        "rate,hours,expected",
        [
            ("280", "37.5", "10500"),
            ("250", "8.25", "2062.50"),
            ("290", "0.01", "2.90"),
            ("275", "21", "5775"),
            ("260", "0", "0"),
        ],
    )
    def test_pay_is_exact_product(self, rate, hours, expected):
        resolver = RateResolver(RateTable(rates={1: rate}))

        resolved_rate, pay = resolver.pay_for(1, Decimal(hours))

        assert resolved_rate == Decimal(rate)
        assert pay == Decimal(expected)
