"""
Module: ledger_kernel.selectors.ledger_selector
Responsibility: SQL implementation of ``LedgerRepository``.  Reads the chart
    of accounts, aggregates posted voucher entries per ledger, and returns
    ordered entries for ledger statements.
Architecture position: Kernel > Selectors.  May import from models/,
    domain/ and selectors/base.py.

Invariants enforced:
    - Only POSTED vouchers contribute.  Draft and cancelled vouchers are
      filtered in SQL, never in Python.
    - movements() is a single ``GROUP BY ledger_id`` query per call.  No
      per-ledger round trips.
    - No stored balances are read: Ledger.current_balance is ignored.

Failure modes:
    - SQLAlchemy errors (connection, missing tables) propagate unchanged.
    - An empty window short-circuits to an empty result without a query.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.dtos import (
    AccountGroupInfo,
    LedgerEntryLine,
    LedgerInfo,
    Movement,
    StockItemInfo,
)
from ledger_kernel.domain.repository import LedgerRepository
from ledger_kernel.domain.values import DateWindow
from ledger_kernel.models.account_group import AccountGroup
from ledger_kernel.models.inventory import InventoryItem
from ledger_kernel.models.ledger import Ledger
from ledger_kernel.models.voucher import Voucher, VoucherLedgerEntry, VoucherStatus
from ledger_kernel.selectors.base import BaseSelector


class LedgerSelector(BaseSelector, LedgerRepository):
    """
    Selector over one tenant database.

    Contract:
        The session is bound to the tenant's database by the caller; the
        selector carries ``tenant_id`` only as a label for logging.
    """

    def __init__(self, session: Session, tenant_id: str | None = None):
        super().__init__(session)
        self.tenant_id = tenant_id

    @staticmethod
    def _window_clauses(query, window: DateWindow):
        if window.on_or_after is not None:
            query = query.where(Voucher.voucher_date >= window.on_or_after)
        if window.on_or_before is not None:
            query = query.where(Voucher.voucher_date <= window.on_or_before)
        return query

    def account_groups(self) -> list[AccountGroupInfo]:
        rows = self.session.execute(
            select(AccountGroup).order_by(AccountGroup.group_code)
        ).scalars()
        return [AccountGroupInfo.from_model(g) for g in rows]

    def ledgers(self, include_inactive: bool = False) -> list[LedgerInfo]:
        query = select(Ledger).order_by(Ledger.ledger_code)
        if not include_inactive:
            query = query.where(Ledger.is_active.is_(True))
        return [LedgerInfo.from_model(row) for row in self.session.execute(query).scalars()]

    def get_ledger(self, ledger_id: UUID) -> LedgerInfo | None:
        model = self.session.get(Ledger, ledger_id)
        return LedgerInfo.from_model(model) if model is not None else None

    def get_ledger_by_code(self, code: str) -> LedgerInfo | None:
        model = self.session.execute(
            select(Ledger).where(Ledger.ledger_code == code)
        ).scalar_one_or_none()
        return LedgerInfo.from_model(model) if model is not None else None

    def movements(self, window: DateWindow) -> dict[UUID, Movement]:
        """
        Aggregate posted debits and credits per ledger.

        Postconditions: one entry per ledger with at least one posted line
            in the window; amounts are full-precision Decimal.
        """
        if window.is_empty:
            return {}

        query = (
            select(
                VoucherLedgerEntry.ledger_id,
                func.sum(VoucherLedgerEntry.debit_amount).label("debit_total"),
                func.sum(VoucherLedgerEntry.credit_amount).label("credit_total"),
            )
            .join(Voucher, VoucherLedgerEntry.voucher_id == Voucher.id)
            .where(Voucher.status == VoucherStatus.POSTED.value)
            .group_by(VoucherLedgerEntry.ledger_id)
        )
        query = self._window_clauses(query, window)

        return {
            row.ledger_id: Movement(
                debit=Decimal(row.debit_total or 0),
                credit=Decimal(row.credit_total or 0),
            )
            for row in self.session.execute(query).all()
        }

    def statement_entries(
        self,
        ledger_id: UUID,
        window: DateWindow,
    ) -> list[LedgerEntryLine]:
        if window.is_empty:
            return []

        query = (
            select(VoucherLedgerEntry, Voucher)
            .join(Voucher, VoucherLedgerEntry.voucher_id == Voucher.id)
            .where(Voucher.status == VoucherStatus.POSTED.value)
            .where(VoucherLedgerEntry.ledger_id == ledger_id)
            .order_by(
                Voucher.voucher_date,
                Voucher.voucher_number,
                VoucherLedgerEntry.created_at,
                VoucherLedgerEntry.line_number,
            )
        )
        query = self._window_clauses(query, window)

        return [
            LedgerEntryLine(
                entry_id=entry.id,
                ledger_id=entry.ledger_id,
                voucher_date=voucher.voucher_date,
                voucher_number=voucher.voucher_number,
                voucher_type=voucher.voucher_type,
                debit=entry.debit_amount or Decimal("0"),
                credit=entry.credit_amount or Decimal("0"),
                narration=entry.narration,
                line_number=entry.line_number or 0,
                created_at=entry.created_at,
            )
            for entry, voucher in self.session.execute(query).all()
        ]

    def inventory_items(self, include_inactive: bool = False) -> list[StockItemInfo]:
        query = select(InventoryItem).order_by(InventoryItem.name)
        if not include_inactive:
            query = query.where(InventoryItem.is_active.is_(True))
        return [StockItemInfo.from_model(row) for row in self.session.execute(query).scalars()]
