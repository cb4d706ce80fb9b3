"""
Module: ledger_kernel.models.account_group
Responsibility: ORM persistence for account groups -- the static metadata
    that decides how every ledger in the group behaves on the financial
    statements (nature, balance-sheet bucket, P&L / trading placement, tax
    netting).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Every ledger resolves to exactly one AccountGroup.
    - A group's nature never changes once ledgers reference it; changing it
      would retroactively move historical balances between statements.

Failure modes:
    - A ledger whose account_group_id has no row here is unresolved; the
      reporting layer skips and logs it rather than failing the statement.
"""

from enum import Enum

from sqlalchemy import Boolean, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import Base


class AccountNature(str, Enum):
    """Fundamental nature of an account group."""

    ASSET = "asset"
    LIABILITY = "liability"
    INCOME = "income"
    EXPENSE = "expense"
    EQUITY = "equity"

    @property
    def is_balance_sheet(self) -> bool:
        return self in (
            AccountNature.ASSET,
            AccountNature.LIABILITY,
            AccountNature.EQUITY,
        )

    @property
    def is_debit_natured(self) -> bool:
        return self in (AccountNature.ASSET, AccountNature.EXPENSE)


class BsCategory(str, Enum):
    """Balance Sheet bucket a group belongs to (balance-sheet natures only)."""

    FIXED_ASSET = "fixed_asset"
    CURRENT_ASSET = "current_asset"
    INVESTMENT = "investment"
    CURRENT_LIABILITY = "current_liability"
    NONCURRENT_LIABILITY = "noncurrent_liability"
    EQUITY = "equity"
    OTHER = "other"


class AccountGroup(Base):
    """
    Account group -- one node of the chart-of-accounts classification.

    Contract:
        group_code is unique.  affects_pl marks groups whose ledgers appear
        in the Profit & Loss; affects_gross_profit places them in the
        Trading Account rather than the indirect P&L section; is_tax_group
        marks GST/TDS groups whose ledgers are netted on the Balance Sheet.
    """

    __tablename__ = "account_groups"

    __table_args__ = (
        UniqueConstraint("group_code", name="uq_account_group_code"),
        Index("idx_account_group_nature", "nature"),
    )

    group_code: Mapped[str] = mapped_column(String(50), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    nature: Mapped[AccountNature] = mapped_column(String(20), nullable=False)

    bs_category: Mapped[BsCategory | None] = mapped_column(
        String(30),
        nullable=True,
    )

    affects_pl: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    affects_gross_profit: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    is_tax_group: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AccountGroup {self.group_code}: {self.name}>"
