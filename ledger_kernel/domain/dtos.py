"""
DTOs -- Immutable snapshots of the chart of accounts and posted entries.

Responsibility:
    Defines the frozen data structures the statement engine computes over:
    AccountGroupInfo, LedgerInfo, VoucherInfo, VoucherEntryInfo,
    LedgerEntryLine (a statement row source), StockItemInfo, and the
    aggregated Movement.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  ``from_model()`` class methods are
    the ORM-to-DTO boundary converters, invoked only by selectors.

Invariants enforced:
    - Report logic accepts and returns DTOs, never ORM entities.
    - Every monetary field is ``Decimal``.
    - Balance sides are normalized to ``BalanceSide`` at the boundary, so
      "Dr", "debit" and "DEBIT" all mean the same thing downstream.

Failure modes:
    - ValueError from ``LedgerInfo.from_model`` when a stored balance side
      is not a recognisable debit/credit marker.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from ledger_kernel.domain.values import ZERO
from ledger_kernel.models.account_group import AccountNature, BsCategory
from ledger_kernel.models.ledger import BalanceSide
from ledger_kernel.models.voucher import VoucherStatus

if TYPE_CHECKING:
    from ledger_kernel.models.account_group import AccountGroup as AccountGroupModel
    from ledger_kernel.models.inventory import InventoryItem as InventoryItemModel
    from ledger_kernel.models.ledger import Ledger as LedgerModel
    from ledger_kernel.models.voucher import Voucher as VoucherModel
    from ledger_kernel.models.voucher import VoucherLedgerEntry as EntryModel


@dataclass(frozen=True)
class AccountGroupInfo:
    """Snapshot of account group metadata used for classification."""

    group_id: UUID
    group_code: str
    name: str
    nature: AccountNature
    bs_category: BsCategory | None = None
    affects_pl: bool = False
    affects_gross_profit: bool = False
    is_tax_group: bool = False

    @classmethod
    def from_model(cls, model: AccountGroupModel) -> AccountGroupInfo:
        return cls(
            group_id=model.id,
            group_code=model.group_code,
            name=model.name,
            nature=AccountNature(model.nature),
            bs_category=BsCategory(model.bs_category) if model.bs_category else None,
            affects_pl=bool(model.affects_pl),
            affects_gross_profit=bool(model.affects_gross_profit),
            is_tax_group=bool(model.is_tax_group),
        )


@dataclass(frozen=True)
class LedgerInfo:
    """
    Snapshot of a ledger.

    Contract:
        opening_balance is an unsigned magnitude; opening_balance_type
        carries its side.  balance_type, when present, is the ledger's
        explicit natural side and overrides the group nature.
    """

    ledger_id: UUID
    code: str
    name: str
    account_group_id: UUID
    opening_balance: Decimal = ZERO
    opening_balance_type: BalanceSide | None = None
    balance_type: BalanceSide | None = None
    current_balance: Decimal = ZERO
    is_active: bool = True

    @classmethod
    def from_model(cls, model: LedgerModel) -> LedgerInfo:
        return cls(
            ledger_id=model.id,
            code=model.ledger_code,
            name=model.ledger_name,
            account_group_id=model.account_group_id,
            opening_balance=model.opening_balance or ZERO,
            opening_balance_type=BalanceSide.parse(model.opening_balance_type),
            balance_type=BalanceSide.parse(model.balance_type),
            current_balance=model.current_balance or ZERO,
            is_active=bool(model.is_active),
        )


@dataclass(frozen=True)
class Movement:
    """Summed debits and credits of one ledger over a window."""

    debit: Decimal = ZERO
    credit: Decimal = ZERO

    @classmethod
    def zero(cls) -> Movement:
        return cls()

    @property
    def net(self) -> Decimal:
        """Debit-positive net movement."""
        return self.debit - self.credit

    @property
    def is_zero(self) -> bool:
        return self.debit == ZERO and self.credit == ZERO

    def __add__(self, other: Movement) -> Movement:
        if not isinstance(other, Movement):
            return NotImplemented
        return Movement(self.debit + other.debit, self.credit + other.credit)


@dataclass(frozen=True)
class VoucherInfo:
    """Voucher header snapshot."""

    voucher_id: UUID
    voucher_date: date
    voucher_number: str
    voucher_type: str
    status: VoucherStatus = VoucherStatus.POSTED

    @property
    def is_posted(self) -> bool:
        return self.status == VoucherStatus.POSTED

    @classmethod
    def from_model(cls, model: VoucherModel) -> VoucherInfo:
        return cls(
            voucher_id=model.id,
            voucher_date=model.voucher_date,
            voucher_number=model.voucher_number,
            voucher_type=model.voucher_type,
            status=VoucherStatus(model.status),
        )


@dataclass(frozen=True)
class VoucherEntryInfo:
    """One debit/credit line of a voucher."""

    entry_id: UUID
    voucher_id: UUID
    ledger_id: UUID
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    narration: str | None = None
    line_number: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, model: EntryModel) -> VoucherEntryInfo:
        return cls(
            entry_id=model.id,
            voucher_id=model.voucher_id,
            ledger_id=model.ledger_id,
            debit=model.debit_amount or ZERO,
            credit=model.credit_amount or ZERO,
            narration=model.narration,
            line_number=model.line_number or 0,
            created_at=model.created_at,
        )


@dataclass(frozen=True)
class LedgerEntryLine:
    """A posted entry joined with its voucher header, ready for a statement."""

    entry_id: UUID
    ledger_id: UUID
    voucher_date: date
    voucher_number: str
    voucher_type: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    narration: str | None = None
    line_number: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_parts(cls, voucher: VoucherInfo, entry: VoucherEntryInfo) -> LedgerEntryLine:
        return cls(
            entry_id=entry.entry_id,
            ledger_id=entry.ledger_id,
            voucher_date=voucher.voucher_date,
            voucher_number=voucher.voucher_number,
            voucher_type=voucher.voucher_type,
            debit=entry.debit,
            credit=entry.credit,
            narration=entry.narration,
            line_number=entry.line_number,
            created_at=entry.created_at,
        )


@dataclass(frozen=True)
class StockItemInfo:
    """Inventory item snapshot for stock valuation."""

    item_id: UUID
    name: str
    quantity_on_hand: Decimal = ZERO
    avg_cost: Decimal = ZERO
    opening_balance: Decimal = ZERO
    is_active: bool = True

    @property
    def closing_value(self) -> Decimal:
        return self.quantity_on_hand * self.avg_cost

    @classmethod
    def from_model(cls, model: InventoryItemModel) -> StockItemInfo:
        return cls(
            item_id=model.id,
            name=model.name,
            quantity_on_hand=model.quantity_on_hand or ZERO,
            avg_cost=model.avg_cost or ZERO,
            opening_balance=model.opening_balance or ZERO,
            is_active=bool(model.is_active),
        )
