"""
Module: ledger_kernel.models.voucher
Responsibility: ORM persistence for vouchers (transaction documents) and
    their ledger entries -- the posted stream every statement is derived from.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Only vouchers with status POSTED contribute to any report.
    - A posted voucher is immutable except for explicit cancellation.

Non-goals:
    - This model does NOT enforce debit == credit per voucher.  The posting
      pipeline owns that invariant; the statement engine only reports on it
      (trial balance difference).
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import Base, UUIDString


class VoucherStatus(str, Enum):
    """Lifecycle status of a voucher.

    Contract: DRAFT -> POSTED -> CANCELLED.  Only POSTED is visible to reports.
    """

    DRAFT = "draft"
    POSTED = "posted"
    CANCELLED = "cancelled"


class Voucher(Base):
    """Voucher header -- invoice, payment, receipt, journal, ..."""

    __tablename__ = "vouchers"

    __table_args__ = (
        Index("idx_voucher_date", "voucher_date"),
        Index("idx_voucher_status", "status"),
    )

    voucher_date: Mapped[date] = mapped_column(nullable=False)

    voucher_number: Mapped[str] = mapped_column(String(50), nullable=False)

    voucher_type: Mapped[str] = mapped_column(String(50), nullable=False)

    status: Mapped[VoucherStatus] = mapped_column(
        String(20),
        default=VoucherStatus.DRAFT.value,
        nullable=False,
    )

    entries: Mapped[list["VoucherLedgerEntry"]] = relationship(
        back_populates="voucher",
        order_by="VoucherLedgerEntry.line_number",
    )

    def __repr__(self) -> str:
        return f"<Voucher {self.voucher_number} ({self.status})>"


class VoucherLedgerEntry(Base):
    """
    One debit or credit posting of a voucher against a ledger.

    Guarantees:
        - Amounts are non-negative magnitudes; exactly one side is nonzero
          in a well-formed voucher.
        - created_at and line_number give a stable creation order for
          entries sharing a voucher date and number.
    """

    __tablename__ = "voucher_ledger_entries"

    __table_args__ = (
        Index("idx_entry_ledger", "ledger_id"),
        Index("idx_entry_voucher", "voucher_id"),
    )

    voucher_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("vouchers.id"),
        nullable=False,
    )

    ledger_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("ledgers.id"),
        nullable=False,
    )

    debit_amount: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    credit_amount: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    narration: Mapped[str | None] = mapped_column(Text, nullable=True)

    line_number: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )

    voucher: Mapped[Voucher] = relationship(back_populates="entries")

    def __repr__(self) -> str:
        return (
            f"<VoucherLedgerEntry ledger={self.ledger_id} "
            f"Dr={self.debit_amount} Cr={self.credit_amount}>"
        )
