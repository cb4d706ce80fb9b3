"""
Value objects -- temporal windows and zero handling.

Responsibility:
    ``DateWindow`` expresses the four temporal filters every statement is
    computed over (as-on, strictly-before, inclusive range, unbounded).
    ``is_effectively_zero`` decides when a balance is too small to list.
    ``fiscal_year_start`` maps a date to the first day of its fiscal year.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Windows are closed intervals on ``voucher_date``; ``before(d)`` is
      stored as ``<= d - 1 day`` so every window has one representation.
    - An inverted window (start after end) is empty, never an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

ZERO = Decimal("0")

# Balances within this magnitude are treated as zero (sub-paisa residue).
DEFAULT_ZERO_TOLERANCE = Decimal("0.009")


def is_effectively_zero(amount: Decimal, tolerance: Decimal = DEFAULT_ZERO_TOLERANCE) -> bool:
    """True when ``|amount| <= tolerance``."""
    return abs(amount) <= tolerance


@dataclass(frozen=True)
class DateWindow:
    """
    Inclusive voucher-date filter.

    Either bound may be None (open).  Use the constructors rather than the
    raw fields::

        DateWindow.as_on(d)          # voucher_date <= d
        DateWindow.before(d)         # voucher_date <  d
        DateWindow.between(a, b)     # a <= voucher_date <= b
        DateWindow.unbounded()
    """

    on_or_after: date | None = None
    on_or_before: date | None = None

    @classmethod
    def as_on(cls, day: date) -> DateWindow:
        return cls(on_or_after=None, on_or_before=day)

    @classmethod
    def before(cls, day: date) -> DateWindow:
        if day == date.min:
            # Nothing precedes the first representable day.
            return cls(on_or_after=day + timedelta(days=1), on_or_before=day)
        return cls(on_or_after=None, on_or_before=day - timedelta(days=1))

    @classmethod
    def between(cls, start: date, end: date) -> DateWindow:
        return cls(on_or_after=start, on_or_before=end)

    @classmethod
    def unbounded(cls) -> DateWindow:
        return cls()

    @property
    def is_empty(self) -> bool:
        return (
            self.on_or_after is not None
            and self.on_or_before is not None
            and self.on_or_after > self.on_or_before
        )

    def contains(self, day: date) -> bool:
        if self.on_or_after is not None and day < self.on_or_after:
            return False
        if self.on_or_before is not None and day > self.on_or_before:
            return False
        return True

    def describe(self) -> str:
        start = self.on_or_after.isoformat() if self.on_or_after else "*"
        end = self.on_or_before.isoformat() if self.on_or_before else "*"
        return f"[{start} .. {end}]"


def fiscal_year_start(as_on: date, start_month: int = 4) -> date:
    """
    First day of the fiscal year containing ``as_on``.

    With the Indian April-March year: 2025-03-31 -> 2024-04-01,
    2025-04-01 -> 2025-04-01.
    """
    if not 1 <= start_month <= 12:
        raise ValueError(f"start_month must be 1-12, got {start_month}")
    year = as_on.year if as_on.month >= start_month else as_on.year - 1
    return date(year, start_month, 1)
