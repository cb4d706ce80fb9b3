"""
LedgerRepository -- tenant-scoped read contract for statement generation.

Responsibility:
    Defines the read operations every statement generator needs (chart of
    accounts, aggregated movements per ledger, ordered posted entries for
    one ledger, inventory snapshot) and an in-memory implementation over
    DTO lists.

Architecture position:
    Kernel > Domain.  ``LedgerSelector`` (kernel selectors) implements the
    same contract over a SQLAlchemy Session.  Report code depends only on
    this ABC, so a repository instance *is* the tenant context: there is
    no ambient "current tenant".

Invariants enforced:
    - Only vouchers with status POSTED contribute to movements or entries.
    - ``movements()`` performs one aggregation pass per call; ledgers with
      no matching entries are absent from the result.
    - ``statement_entries()`` orders by voucher date, voucher number,
      entry creation time, then line number.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from ledger_kernel.domain.dtos import (
    AccountGroupInfo,
    LedgerEntryLine,
    LedgerInfo,
    Movement,
    StockItemInfo,
    VoucherEntryInfo,
    VoucherInfo,
)
from ledger_kernel.domain.values import DateWindow


class LedgerRepository(ABC):
    """
    Read-only access to one tenant's ledger data.

    Contract:
        Implementations never mutate data.  Data-access errors propagate
        unchanged to the caller.
    """

    tenant_id: str | None = None

    @abstractmethod
    def account_groups(self) -> list[AccountGroupInfo]:
        """All account groups of the tenant."""

    @abstractmethod
    def ledgers(self, include_inactive: bool = False) -> list[LedgerInfo]:
        """Ledgers ordered by code; active only unless ``include_inactive``."""

    @abstractmethod
    def get_ledger(self, ledger_id: UUID) -> LedgerInfo | None:
        """Single ledger by id, or None."""

    @abstractmethod
    def get_ledger_by_code(self, code: str) -> LedgerInfo | None:
        """Single ledger by code, or None."""

    @abstractmethod
    def movements(self, window: DateWindow) -> dict[UUID, Movement]:
        """Summed posted debits and credits per ledger within ``window``."""

    @abstractmethod
    def statement_entries(
        self,
        ledger_id: UUID,
        window: DateWindow,
    ) -> list[LedgerEntryLine]:
        """Posted entries of one ledger within ``window``, in statement order."""

    @abstractmethod
    def inventory_items(self, include_inactive: bool = False) -> list[StockItemInfo]:
        """Inventory items; active only unless ``include_inactive``."""


def _created_key(created_at: datetime | None) -> float:
    return created_at.timestamp() if created_at is not None else 0.0


class InMemoryLedgerRepository(LedgerRepository):
    """
    LedgerRepository over plain DTO collections.

    Used by the YAML dataset loader, the CLI and the pure statement tests.
    Entries keep their given order as the final tie-breaker, which stands
    in for insertion order when ``created_at`` is absent.
    """

    def __init__(
        self,
        groups: Iterable[AccountGroupInfo] = (),
        ledgers: Iterable[LedgerInfo] = (),
        vouchers: Iterable[VoucherInfo] = (),
        entries: Iterable[VoucherEntryInfo] = (),
        items: Iterable[StockItemInfo] = (),
        tenant_id: str | None = None,
    ):
        self.tenant_id = tenant_id
        self._groups = list(groups)
        self._ledgers = sorted(ledgers, key=lambda ledger: ledger.code)
        self._vouchers = {v.voucher_id: v for v in vouchers}
        self._entries = list(entries)
        self._items = list(items)

    def account_groups(self) -> list[AccountGroupInfo]:
        return list(self._groups)

    def ledgers(self, include_inactive: bool = False) -> list[LedgerInfo]:
        if include_inactive:
            return list(self._ledgers)
        return [ledger for ledger in self._ledgers if ledger.is_active]

    def get_ledger(self, ledger_id: UUID) -> LedgerInfo | None:
        for ledger in self._ledgers:
            if ledger.ledger_id == ledger_id:
                return ledger
        return None

    def get_ledger_by_code(self, code: str) -> LedgerInfo | None:
        for ledger in self._ledgers:
            if ledger.code == code:
                return ledger
        return None

    def _posted_in(self, window: DateWindow):
        if window.is_empty:
            return
        for entry in self._entries:
            voucher = self._vouchers.get(entry.voucher_id)
            if voucher is None or not voucher.is_posted:
                continue
            if window.contains(voucher.voucher_date):
                yield voucher, entry

    def movements(self, window: DateWindow) -> dict[UUID, Movement]:
        totals: dict[UUID, Movement] = {}
        for _, entry in self._posted_in(window):
            current = totals.get(entry.ledger_id, Movement.zero())
            totals[entry.ledger_id] = current + Movement(entry.debit, entry.credit)
        return totals

    def statement_entries(
        self,
        ledger_id: UUID,
        window: DateWindow,
    ) -> list[LedgerEntryLine]:
        rows = [
            (position, LedgerEntryLine.from_parts(voucher, entry))
            for position, (voucher, entry) in enumerate(self._posted_in(window))
            if entry.ledger_id == ledger_id
        ]
        rows.sort(
            key=lambda pair: (
                pair[1].voucher_date,
                pair[1].voucher_number,
                _created_key(pair[1].created_at),
                pair[1].line_number,
                pair[0],
            )
        )
        return [line for _, line in rows]

    def inventory_items(self, include_inactive: bool = False) -> list[StockItemInfo]:
        if include_inactive:
            return list(self._items)
        return [item for item in self._items if item.is_active]
