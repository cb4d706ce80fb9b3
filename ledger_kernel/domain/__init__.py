"""Pure domain core: value objects, DTOs, clock and the repository contract."""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.dtos import (
    AccountGroupInfo,
    LedgerEntryLine,
    LedgerInfo,
    Movement,
    StockItemInfo,
    VoucherEntryInfo,
    VoucherInfo,
)
from ledger_kernel.domain.repository import InMemoryLedgerRepository, LedgerRepository
from ledger_kernel.domain.values import (
    DEFAULT_ZERO_TOLERANCE,
    ZERO,
    DateWindow,
    fiscal_year_start,
    is_effectively_zero,
)

__all__ = [
    "AccountGroupInfo",
    "Clock",
    "DEFAULT_ZERO_TOLERANCE",
    "DateWindow",
    "DeterministicClock",
    "InMemoryLedgerRepository",
    "LedgerEntryLine",
    "LedgerInfo",
    "LedgerRepository",
    "Movement",
    "StockItemInfo",
    "SystemClock",
    "VoucherEntryInfo",
    "VoucherInfo",
    "ZERO",
    "fiscal_year_start",
    "is_effectively_zero",
]
