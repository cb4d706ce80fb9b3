"""
Financial Reporting Domain Models (``ledger_modules.reporting.models``).

Responsibility
--------------
Frozen dataclass value objects representing statement outputs: trial
balance, trading and profit-and-loss account, balance sheet and ledger
statement, plus the shared ``StatementTotals`` computation core that both
the detailed and the Tally-style presentation read from.

Architecture position
---------------------
**Modules layer** -- pure data definitions with ZERO I/O.  Built by
``statements.py``, returned by ``ReportingService``, mapped to JSON by
``presentation.py``.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` at full precision -- NEVER ``float``.
  Rounding happens only at the presentation boundary.

Audit relevance
---------------
* ``ReportMetadata`` carries the generation timestamp (from the injected
  clock) and the temporal parameters, so a report can be reproduced.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ledger_kernel.models.account_group import AccountNature
from ledger_kernel.models.ledger import BalanceSide


# =========================================================================
# Enums
# =========================================================================


class ReportType(str, Enum):
    """Types of financial reports."""

    TRIAL_BALANCE = "trial_balance"
    PROFIT_LOSS = "profit_loss"
    BALANCE_SHEET = "balance_sheet"
    LEDGER_STATEMENT = "ledger_statement"


class CogsMethod(str, Enum):
    """How cost of goods sold is derived."""

    AUTO = "auto"
    PERIODIC = "periodic"  # opening + net purchases + direct expenses - closing
    PERPETUAL = "perpetual"  # COGS ledger posted on every sale


class ReportStyle(str, Enum):
    """Presentation shape for P&L and balance sheet."""

    DETAILED = "detailed"
    TALLY = "tally"


# =========================================================================
# Report Metadata (common to all reports)
# =========================================================================


@dataclass(frozen=True)
class ReportMetadata:
    """Metadata attached to every financial report."""

    report_type: ReportType
    entity_name: str
    currency: str
    generated_at: str  # ISO format timestamp from injected clock
    as_on_date: date | None = None
    period_start: date | None = None
    period_end: date | None = None
    tenant_id: str | None = None


# =========================================================================
# Trial Balance
# =========================================================================


@dataclass(frozen=True)
class TrialBalanceLine:
    """A single ledger in the trial balance; exactly one column is nonzero."""

    ledger_id: UUID
    ledger_code: str
    ledger_name: str
    group_code: str
    group_name: str
    nature: AccountNature
    debit: Decimal
    credit: Decimal
    net: Decimal  # debit-positive


@dataclass(frozen=True)
class TrialBalanceReport:
    metadata: ReportMetadata
    lines: tuple[TrialBalanceLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    difference: Decimal  # |total_debit - total_credit|
    is_balanced: bool


# =========================================================================
# Trading and Profit & Loss
# =========================================================================


@dataclass(frozen=True)
class StatementLine:
    """One ledger's contribution to a statement section."""

    ledger_id: UUID | None
    code: str | None
    name: str
    group_name: str | None
    amount: Decimal


@dataclass(frozen=True)
class StatementSection:
    label: str
    lines: tuple[StatementLine, ...]
    total: Decimal


@dataclass(frozen=True)
class StatementTotals:
    """
    The computation core of a P&L.

    Every figure either presentation needs is here; presentations never
    recompute from sections.
    """

    sales: Decimal
    sales_returns: Decimal
    net_sales: Decimal
    direct_income: Decimal
    indirect_income: Decimal
    other_income: Decimal  # direct_income + indirect_income
    purchases: Decimal
    purchase_returns: Decimal
    net_purchases: Decimal
    direct_expenses: Decimal
    indirect_expenses: Decimal
    opening_stock: Decimal
    closing_stock: Decimal
    goods_available: Decimal
    cogs: Decimal
    gross_profit: Decimal
    net_profit: Decimal
    gross_profit_margin: Decimal
    net_profit_margin: Decimal
    cogs_percentage: Decimal
    cogs_method: CogsMethod

    @property
    def is_profit(self) -> bool:
        return self.net_profit >= 0


@dataclass(frozen=True)
class TallyEntry:
    label: str
    amount: Decimal


@dataclass(frozen=True)
class TallyColumns:
    """Two-column (Dr / Cr) rendering of the combined trading and P&L account."""

    debit_side: tuple[TallyEntry, ...]
    credit_side: tuple[TallyEntry, ...]
    debit_total: Decimal
    credit_total: Decimal


@dataclass(frozen=True)
class ProfitLossReport:
    metadata: ReportMetadata
    # Trading account
    sales: StatementSection
    sales_returns: StatementSection
    direct_income: StatementSection
    purchases: StatementSection
    purchase_returns: StatementSection
    direct_expenses: StatementSection
    # Profit & loss account
    indirect_income: StatementSection
    indirect_expenses: StatementSection
    totals: StatementTotals
    tally: TallyColumns
    stock_source: str
    notes: tuple[str, ...] = ()


# =========================================================================
# Balance Sheet
# =========================================================================


@dataclass(frozen=True)
class BalanceSheetLine:
    """A ledger, or a synthetic line such as "Net GST Payable"."""

    label: str
    amount: Decimal
    code: str | None = None
    group_name: str | None = None
    ledger_id: UUID | None = None
    synthetic: bool = False


@dataclass(frozen=True)
class BalanceSheetSection:
    label: str
    lines: tuple[BalanceSheetLine, ...]
    total: Decimal


@dataclass(frozen=True)
class TaxPosition:
    total_input_gst: Decimal
    total_output_gst: Decimal
    net_gst_payable: Decimal  # output - input; negative means receivable
    total_tds_payable: Decimal
    total_tds_receivable: Decimal


@dataclass(frozen=True)
class ProfitAndLossLine:
    """Current fiscal year result folded into liabilities and equity."""

    amount: Decimal
    is_profit: bool
    period_start: date
    period_end: date

    @property
    def type(self) -> str:
        return "profit" if self.is_profit else "loss"


@dataclass(frozen=True)
class FinancialRatios:
    current_ratio: Decimal
    debt_to_equity: Decimal
    working_capital: Decimal


@dataclass(frozen=True)
class BalanceSheetReport:
    metadata: ReportMetadata
    fixed_assets: BalanceSheetSection
    investments: BalanceSheetSection
    current_assets: BalanceSheetSection
    other_assets: BalanceSheetSection
    capital: BalanceSheetSection
    reserves: BalanceSheetSection
    noncurrent_liabilities: BalanceSheetSection
    current_liabilities: BalanceSheetSection
    other_liabilities: BalanceSheetSection
    profit_and_loss: ProfitAndLossLine
    tax_position: TaxPosition
    total_assets: Decimal
    total_liabilities: Decimal  # includes profit_and_loss.amount
    difference: Decimal  # total_assets - total_liabilities
    is_balanced: bool
    ratios: FinancialRatios
    stock_source: str

    @property
    def asset_sections(self) -> tuple[BalanceSheetSection, ...]:
        return (self.fixed_assets, self.investments, self.current_assets, self.other_assets)

    @property
    def liability_sections(self) -> tuple[BalanceSheetSection, ...]:
        return (
            self.capital,
            self.reserves,
            self.noncurrent_liabilities,
            self.current_liabilities,
            self.other_liabilities,
        )


# =========================================================================
# Ledger Statement
# =========================================================================


class StatementRowKind(str, Enum):
    OPENING = "opening"
    ENTRY = "entry"
    CLOSING = "closing"


@dataclass(frozen=True)
class LedgerStatementRow:
    """
    One statement row.

    ``balance`` is the running balance on the ledger's natural side (negative
    means the balance has crossed to the other side); ``balance_type`` is
    the side it currently sits on.
    """

    kind: StatementRowKind
    date: date | None
    voucher_number: str | None
    voucher_type: str | None
    debit: Decimal
    credit: Decimal
    balance: Decimal
    balance_type: BalanceSide
    narration: str | None = None


@dataclass(frozen=True)
class LedgerStatementSummary:
    total_debit: Decimal
    total_credit: Decimal
    entry_count: int
    opening_balance: Decimal
    opening_balance_type: BalanceSide
    closing_balance: Decimal
    closing_balance_type: BalanceSide


@dataclass(frozen=True)
class LedgerStatementReport:
    metadata: ReportMetadata
    ledger_id: UUID
    ledger_code: str
    ledger_name: str
    group_code: str | None
    group_name: str | None
    debit_natured: bool
    rows: tuple[LedgerStatementRow, ...]
    summary: LedgerStatementSummary

    @property
    def entries(self) -> tuple[LedgerStatementRow, ...]:
        return tuple(r for r in self.rows if r.kind == StatementRowKind.ENTRY)
