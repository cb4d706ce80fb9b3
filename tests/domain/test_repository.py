"""
InMemoryLedgerRepository tests.

Verifies:
- Only POSTED vouchers contribute to movements and statement entries
- Window filtering on voucher date
- Statement ordering: date, voucher number, creation time, line number
- Inactive ledgers and items are hidden unless requested
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from ledger_kernel.domain.dtos import (
    LedgerInfo,
    Movement,
    StockItemInfo,
    VoucherEntryInfo,
    VoucherInfo,
)
from ledger_kernel.domain.repository import InMemoryLedgerRepository
from ledger_kernel.domain.values import DateWindow
from ledger_kernel.models.voucher import VoucherStatus

GROUP = uuid4()
CASH = LedgerInfo(uuid4(), "CASH", "Cash", GROUP)
BANK = LedgerInfo(uuid4(), "BANK", "Bank", GROUP)
OLD = LedgerInfo(uuid4(), "OLD", "Closed account", GROUP, is_active=False)


def _voucher(number, day, status=VoucherStatus.POSTED):
    return VoucherInfo(uuid4(), day, number, "journal", status)


def _entry(voucher, ledger, debit="0", credit="0", line=1, created_at=None, narration=None):
    return VoucherEntryInfo(
        entry_id=uuid4(),
        voucher_id=voucher.voucher_id,
        ledger_id=ledger.ledger_id,
        debit=Decimal(debit),
        credit=Decimal(credit),
        narration=narration,
        line_number=line,
        created_at=created_at,
    )


def _repo(vouchers, entries, items=()):
    return InMemoryLedgerRepository(
        ledgers=[CASH, BANK, OLD], vouchers=vouchers, entries=entries, items=items,
    )


class TestMovements:
    def test_sums_per_ledger(self):
        v1 = _voucher("V-1", date(2025, 1, 1))
        v2 = _voucher("V-2", date(2025, 1, 2))
        repo = _repo([v1, v2], [
            _entry(v1, CASH, debit="100"), _entry(v1, BANK, credit="100", line=2),
            _entry(v2, CASH, credit="40"), _entry(v2, BANK, debit="40", line=2),
        ])
        movements = repo.movements(DateWindow.unbounded())
        assert movements[CASH.ledger_id] == Movement(Decimal("100"), Decimal("40"))
        assert movements[BANK.ledger_id] == Movement(Decimal("40"), Decimal("100"))

    def test_unposted_excluded(self):
        posted = _voucher("V-1", date(2025, 1, 1))
        draft = _voucher("V-2", date(2025, 1, 1), VoucherStatus.DRAFT)
        cancelled = _voucher("V-3", date(2025, 1, 1), VoucherStatus.CANCELLED)
        repo = _repo([posted, draft, cancelled], [
            _entry(posted, CASH, debit="1"),
            _entry(draft, CASH, debit="10"),
            _entry(cancelled, CASH, debit="100"),
        ])
        assert repo.movements(DateWindow.unbounded())[CASH.ledger_id].debit == Decimal("1")

    def test_window_filters_on_voucher_date(self):
        v1 = _voucher("V-1", date(2024, 12, 31))
        v2 = _voucher("V-2", date(2025, 1, 1))
        repo = _repo([v1, v2], [_entry(v1, CASH, debit="1"), _entry(v2, CASH, debit="2")])
        assert repo.movements(DateWindow.before(date(2025, 1, 1)))[CASH.ledger_id].debit == Decimal("1")
        assert repo.movements(DateWindow.as_on(date(2025, 1, 1)))[CASH.ledger_id].debit == Decimal("3")

    def test_empty_window_and_untouched_ledgers(self):
        v1 = _voucher("V-1", date(2025, 1, 1))
        repo = _repo([v1], [_entry(v1, CASH, debit="1")])
        assert repo.movements(DateWindow.between(date(2025, 2, 1), date(2025, 1, 1))) == {}
        assert BANK.ledger_id not in repo.movements(DateWindow.unbounded())


class TestStatementEntries:
    def test_ordering(self):
        late = _voucher("A-9", date(2025, 1, 2))
        b = _voucher("B-1", date(2025, 1, 1))
        a = _voucher("A-1", date(2025, 1, 1))
        t0 = datetime(2025, 1, 1, 9, tzinfo=timezone.utc)
        t1 = datetime(2025, 1, 1, 10, tzinfo=timezone.utc)
        repo = _repo([late, b, a], [
            _entry(late, CASH, debit="1", narration="late"),
            _entry(b, CASH, debit="1", narration="b"),
            _entry(a, CASH, debit="1", line=2, created_at=t1, narration="a-second"),
            _entry(a, CASH, debit="1", line=1, created_at=t1, narration="a-first"),
            _entry(a, CASH, debit="1", line=9, created_at=t0, narration="a-earliest"),
        ])
        lines = repo.statement_entries(CASH.ledger_id, DateWindow.unbounded())
        assert [line.narration for line in lines] == [
            "a-earliest", "a-first", "a-second", "b", "late",
        ]

    def test_only_requested_ledger(self):
        v1 = _voucher("V-1", date(2025, 1, 1))
        repo = _repo([v1], [_entry(v1, CASH, debit="5"), _entry(v1, BANK, credit="5", line=2)])
        lines = repo.statement_entries(BANK.ledger_id, DateWindow.unbounded())
        assert len(lines) == 1
        assert lines[0].credit == Decimal("5")
        assert lines[0].voucher_number == "V-1"


class TestChartAccess:
    def test_ledgers_sorted_and_active(self):
        repo = _repo([], [])
        assert [ledger.code for ledger in repo.ledgers()] == ["BANK", "CASH"]
        assert [ledger.code for ledger in repo.ledgers(include_inactive=True)] == [
            "BANK", "CASH", "OLD",
        ]

    def test_lookup(self):
        repo = _repo([], [])
        assert repo.get_ledger(CASH.ledger_id) == CASH
        assert repo.get_ledger(uuid4()) is None
        assert repo.get_ledger_by_code("OLD") == OLD
        assert repo.get_ledger_by_code("NOPE") is None

    def test_inventory_items(self):
        items = [
            StockItemInfo(uuid4(), "Live"),
            StockItemInfo(uuid4(), "Retired", is_active=False),
        ]
        repo = _repo([], [], items)
        assert [i.name for i in repo.inventory_items()] == ["Live"]
        assert len(repo.inventory_items(include_inactive=True)) == 2
