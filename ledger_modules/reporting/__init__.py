"""
Financial Reporting Module (``ledger_modules.reporting``).

Responsibility
--------------
Read-only module that derives financial statements from posted voucher
entries: trial balance, trading and profit & loss account, balance sheet
(with GST/TDS netting and the current fiscal year result folded into
equity), and per-ledger running-balance statements.

Architecture position
---------------------
**Modules layer** -- statement logic is implemented as pure functions in
``statements.py``; ``ReportingService`` loads data from a
``LedgerRepository`` and ``queries`` maps results to JSON-shaped dicts.

Invariants enforced
-------------------
* Nothing is written: every figure is derived from posted entries at
  query time; stored ledger balances are never read.
* Imbalance is reported, never raised.

Failure modes
-------------
* Ledger with an unknown account group -> skipped and logged.
* Unknown ledger for a statement -> ``LedgerNotFoundError``.
"""

from ledger_modules.reporting.config import ClassificationRules, ReportingConfig
from ledger_modules.reporting.models import (
    BalanceSheetReport,
    CogsMethod,
    LedgerStatementReport,
    ProfitLossReport,
    ReportStyle,
    ReportType,
    StatementTotals,
    TrialBalanceReport,
)
from ledger_modules.reporting.queries import (
    get_balance_sheet,
    get_ledger_statement,
    get_profit_loss,
    get_trial_balance,
)
from ledger_modules.reporting.service import ReportingService

__all__ = [
    "BalanceSheetReport",
    "ClassificationRules",
    "CogsMethod",
    "LedgerStatementReport",
    "ProfitLossReport",
    "ReportStyle",
    "ReportType",
    "ReportingConfig",
    "ReportingService",
    "StatementTotals",
    "TrialBalanceReport",
    "get_balance_sheet",
    "get_ledger_statement",
    "get_profit_loss",
    "get_trial_balance",
]
