"""
Tests for DateWindow, zero tolerance and fiscal year boundaries.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.values import (
    DEFAULT_ZERO_TOLERANCE,
    DateWindow,
    fiscal_year_start,
    is_effectively_zero,
)


class TestDateWindow:
    """The four temporal filters."""

    def test_as_on_includes_the_day(self):
        window = DateWindow.as_on(date(2025, 3, 31))
        assert window.contains(date(2025, 3, 31))
        assert window.contains(date(2000, 1, 1))
        assert not window.contains(date(2025, 4, 1))

    def test_before_excludes_the_day(self):
        window = DateWindow.before(date(2025, 1, 1))
        assert window.on_or_before == date(2024, 12, 31)
        assert window.contains(date(2024, 12, 31))
        assert not window.contains(date(2025, 1, 1))

    def test_between_is_inclusive(self):
        window = DateWindow.between(date(2025, 1, 1), date(2025, 1, 31))
        assert window.contains(date(2025, 1, 1))
        assert window.contains(date(2025, 1, 31))
        assert not window.contains(date(2024, 12, 31))
        assert not window.contains(date(2025, 2, 1))

    def test_unbounded(self):
        window = DateWindow.unbounded()
        assert window.contains(date(1900, 1, 1))
        assert not window.is_empty

    def test_inverted_window_is_empty(self):
        window = DateWindow.between(date(2025, 2, 1), date(2025, 1, 1))
        assert window.is_empty
        assert not window.contains(date(2025, 1, 15))

    def test_single_day_window_not_empty(self):
        day = date(2025, 1, 15)
        assert not DateWindow.between(day, day).is_empty

    def test_before_first_day_is_empty(self):
        window = DateWindow.before(date.min)
        assert window.is_empty
        assert not window.contains(date.min)

    def test_before_and_as_on_share_a_representation(self):
        assert DateWindow.before(date(2025, 1, 1)) == DateWindow.as_on(date(2024, 12, 31))

    def test_describe(self):
        assert DateWindow.as_on(date(2025, 3, 31)).describe() == "[* .. 2025-03-31]"


class TestZeroTolerance:
    @pytest.mark.parametrize("amount,expected", [
        ("0", True),
        ("0.009", True),
        ("-0.009", True),
        ("0.0091", False),
        ("-0.01", False),
    ])
    def test_default(self, amount, expected):
        assert is_effectively_zero(Decimal(amount)) is expected

    def test_custom(self):
        assert is_effectively_zero(Decimal("0.4"), Decimal("0.5"))
        assert DEFAULT_ZERO_TOLERANCE == Decimal("0.009")


class TestFiscalYearStart:
    @pytest.mark.parametrize("as_on,expected", [
        (date(2025, 3, 31), date(2024, 4, 1)),
        (date(2025, 4, 1), date(2025, 4, 1)),
        (date(2024, 12, 31), date(2024, 4, 1)),
        (date(2025, 1, 1), date(2024, 4, 1)),
    ])
    def test_april_year(self, as_on, expected):
        assert fiscal_year_start(as_on) == expected

    def test_calendar_year(self):
        assert fiscal_year_start(date(2025, 3, 31), start_month=1) == date(2025, 1, 1)

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, month):
        with pytest.raises(ValueError):
            fiscal_year_start(date(2025, 1, 1), start_month=month)
