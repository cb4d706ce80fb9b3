"""
Module: ledger_kernel.models.ledger
Responsibility: ORM persistence for ledgers -- the accounts of the chart of
    accounts that voucher entries post to.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Ledgers are never deleted, only deactivated (is_active = False).
    - opening_balance is an unsigned magnitude; its side lives in
      opening_balance_type.

Audit relevance:
    current_balance is maintained by the posting pipeline and is NOT read
    by the statement engine, which derives every balance from posted
    voucher entries.
"""

from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import Base, UUIDString


class BalanceSide(str, Enum):
    """Debit or credit side of a balance."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def short_label(self) -> str:
        return "Dr" if self is BalanceSide.DEBIT else "Cr"

    @classmethod
    def parse(cls, value: "str | BalanceSide | None") -> "BalanceSide | None":
        """Normalize 'Dr', 'Cr', 'Debit', 'credit', ... to a BalanceSide.

        Returns None for None/blank input.  Raises ValueError for anything
        that is not recognisably a debit or credit marker.
        """
        if value is None:
            return None
        if isinstance(value, BalanceSide):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        if text in ("dr", "debit"):
            return cls.DEBIT
        if text in ("cr", "credit"):
            return cls.CREDIT
        raise ValueError(f"Not a balance side: {value!r}")


class Ledger(Base):
    """
    Chart of Accounts ledger.

    Contract:
        ledger_code is unique.  account_group_id references the group whose
        metadata drives statement placement.  balance_type, when set,
        overrides the group nature as the ledger's natural side.
    """

    __tablename__ = "ledgers"

    __table_args__ = (
        UniqueConstraint("ledger_code", name="uq_ledger_code"),
        Index("idx_ledger_group", "account_group_id"),
        Index("idx_ledger_active", "is_active"),
    )

    ledger_code: Mapped[str] = mapped_column(String(50), nullable=False)

    ledger_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # No foreign key: a dangling group reference is reported and skipped by
    # the statement engine.
    account_group_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)

    opening_balance: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    opening_balance_type: Mapped[str | None] = mapped_column(
        String(10),
        nullable=True,
    )

    balance_type: Mapped[str | None] = mapped_column(
        String(10),
        nullable=True,
    )

    current_balance: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Ledger {self.ledger_code}: {self.ledger_name}>"
