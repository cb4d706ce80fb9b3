"""
AccountGroup classifier (``ledger_modules.reporting.classifier``).

Responsibility
--------------
Resolves every ledger once per report into a ``ClassifiedLedger``: its
account group, a ``TradingRole`` (where it lands on the trading / P&L
account or the tax netting), a ``BalanceSheetBucket``, and its natural
side.  Statement builders branch on these enums only; no string matching
happens past this module.

Architecture position
---------------------
**Modules layer** -- pure function over DTOs, ZERO I/O apart from logging.

Failure modes
-------------
* A ledger whose ``account_group_id`` resolves to no group is skipped and
  logged as ``ledger_group_unresolved`` (WARNING).  One malformed ledger
  never aborts a statement.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from ledger_kernel.domain.dtos import AccountGroupInfo, LedgerInfo
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account_group import AccountNature, BsCategory
from ledger_kernel.models.ledger import BalanceSide
from ledger_modules.reporting.config import ClassificationRules

logger = get_logger("modules.reporting.classifier")


class TradingRole(str, Enum):
    SALES = "sales"
    SALES_RETURN = "sales_return"
    PURCHASE = "purchase"
    PURCHASE_RETURN = "purchase_return"
    DIRECT_EXPENSE = "direct_expense"
    INDIRECT_EXPENSE = "indirect_expense"
    OTHER_INCOME = "other_income"
    STOCK = "stock"
    TAX_INPUT = "tax_input"
    TAX_OUTPUT = "tax_output"
    TDS_PAYABLE = "tds_payable"
    TDS_RECEIVABLE = "tds_receivable"
    NONE = "none"

    @property
    def is_tax(self) -> bool:
        return self in _TAX_ROLES


_TAX_ROLES = frozenset({
    TradingRole.TAX_INPUT,
    TradingRole.TAX_OUTPUT,
    TradingRole.TDS_PAYABLE,
    TradingRole.TDS_RECEIVABLE,
})


class BalanceSheetBucket(str, Enum):
    FIXED_ASSET = "fixed_asset"
    CURRENT_ASSET = "current_asset"
    INVESTMENT = "investment"
    OTHER_ASSET = "other_asset"
    CAPITAL = "capital"
    RESERVES = "reserves"
    CURRENT_LIABILITY = "current_liability"
    NONCURRENT_LIABILITY = "noncurrent_liability"
    OTHER_LIABILITY = "other_liability"

    @property
    def is_asset(self) -> bool:
        return self in (
            BalanceSheetBucket.FIXED_ASSET,
            BalanceSheetBucket.CURRENT_ASSET,
            BalanceSheetBucket.INVESTMENT,
            BalanceSheetBucket.OTHER_ASSET,
        )


@dataclass(frozen=True)
class ClassifiedLedger:
    """
    A ledger with everything report logic needs to place it.

    ``group`` is None only for a ledger classified on its own for a
    ledger statement; chart-wide reports never see such ledgers.
    """

    ledger: LedgerInfo
    group: AccountGroupInfo | None
    role: TradingRole
    bs_bucket: BalanceSheetBucket | None
    debit_natured: bool
    is_round_off: bool = False
    is_cogs_ledger: bool = False

    @property
    def ledger_id(self) -> UUID:
        return self.ledger.ledger_id

    @property
    def natural_side(self) -> BalanceSide:
        return BalanceSide.DEBIT if self.debit_natured else BalanceSide.CREDIT

    @property
    def affects_pl(self) -> bool:
        return self.group is not None and self.group.affects_pl

    @property
    def is_tax(self) -> bool:
        return self.role.is_tax


@dataclass(frozen=True)
class ChartClassification:
    ledgers: tuple[ClassifiedLedger, ...]
    unresolved: tuple[LedgerInfo, ...] = ()

    def get(self, ledger_id: UUID) -> ClassifiedLedger | None:
        for classified in self.ledgers:
            if classified.ledger_id == ledger_id:
                return classified
        return None


def _is_debit_natured(ledger: LedgerInfo, group: AccountGroupInfo | None) -> bool:
    if ledger.balance_type is not None:
        return ledger.balance_type == BalanceSide.DEBIT
    if group is None:
        return True
    return group.nature.is_debit_natured


def _tax_role(
    ledger: LedgerInfo,
    group: AccountGroupInfo,
    rules: ClassificationRules,
) -> TradingRole | None:
    text = f"{ledger.code} {ledger.name}"
    is_tds = rules.has_tag(text, rules.tds_markers)
    is_gst = rules.has_tag(text, rules.gst_markers)
    if not (group.is_tax_group or is_tds or is_gst):
        return None

    if is_tds:
        if rules.contains_marker(text, rules.receivable_markers):
            return TradingRole.TDS_RECEIVABLE
        if rules.contains_marker(text, rules.payable_markers):
            return TradingRole.TDS_PAYABLE
        if group.nature == AccountNature.ASSET:
            return TradingRole.TDS_RECEIVABLE
        return TradingRole.TDS_PAYABLE

    if rules.contains_marker(text, rules.input_markers):
        return TradingRole.TAX_INPUT
    if rules.contains_marker(text, rules.output_markers):
        return TradingRole.TAX_OUTPUT
    if group.nature == AccountNature.ASSET:
        return TradingRole.TAX_INPUT
    return TradingRole.TAX_OUTPUT


def _pl_role(
    group: AccountGroupInfo,
    debit_natured: bool,
    is_cogs: bool,
    rules: ClassificationRules,
) -> TradingRole:
    code = group.group_code
    if code in rules.sales_group_codes:
        return TradingRole.SALES
    if code in rules.sales_return_group_codes:
        return TradingRole.SALES_RETURN
    if code in rules.purchase_group_codes:
        return TradingRole.PURCHASE
    if code in rules.purchase_return_group_codes:
        return TradingRole.PURCHASE_RETURN
    if code in rules.direct_expense_group_codes or is_cogs:
        return TradingRole.DIRECT_EXPENSE
    if group.nature == AccountNature.INCOME:
        return TradingRole.OTHER_INCOME
    if group.nature == AccountNature.EXPENSE or debit_natured:
        if group.affects_gross_profit:
            return TradingRole.DIRECT_EXPENSE
        return TradingRole.INDIRECT_EXPENSE
    return TradingRole.OTHER_INCOME


def _bs_bucket(group: AccountGroupInfo, rules: ClassificationRules) -> BalanceSheetBucket:
    category = group.bs_category
    if group.nature == AccountNature.ASSET:
        if category == BsCategory.FIXED_ASSET:
            return BalanceSheetBucket.FIXED_ASSET
        if category == BsCategory.CURRENT_ASSET:
            return BalanceSheetBucket.CURRENT_ASSET
        if category == BsCategory.INVESTMENT:
            return BalanceSheetBucket.INVESTMENT
        return BalanceSheetBucket.OTHER_ASSET

    if group.group_code in rules.capital_group_codes:
        return BalanceSheetBucket.CAPITAL
    if group.nature == AccountNature.EQUITY or category == BsCategory.EQUITY:
        return BalanceSheetBucket.RESERVES
    if category == BsCategory.CURRENT_LIABILITY:
        return BalanceSheetBucket.CURRENT_LIABILITY
    if category == BsCategory.NONCURRENT_LIABILITY:
        return BalanceSheetBucket.NONCURRENT_LIABILITY
    # Income/expense natures in a non-P&L group land by natural side.
    if group.nature == AccountNature.EXPENSE:
        return BalanceSheetBucket.OTHER_ASSET
    return BalanceSheetBucket.OTHER_LIABILITY


def classify_ledger(
    ledger: LedgerInfo,
    group: AccountGroupInfo | None,
    rules: ClassificationRules,
) -> ClassifiedLedger:
    """Classify a single ledger against its (possibly missing) group."""
    debit_natured = _is_debit_natured(ledger, group)
    if group is None:
        return ClassifiedLedger(
            ledger=ledger,
            group=None,
            role=TradingRole.NONE,
            bs_bucket=None,
            debit_natured=debit_natured,
        )

    is_round_off = rules.contains_marker(ledger.name, rules.round_off_markers)
    is_cogs = ledger.code in rules.cogs_ledger_codes or rules.contains_marker(
        ledger.name, rules.cogs_name_markers
    )

    bs_bucket: BalanceSheetBucket | None = None
    if group.group_code in rules.stock_group_codes:
        role = TradingRole.STOCK
        if not group.affects_pl:
            bs_bucket = _bs_bucket(group, rules)
    elif group.affects_pl:
        role = _pl_role(group, debit_natured, is_cogs, rules)
    else:
        role = _tax_role(ledger, group, rules) or TradingRole.NONE
        if not role.is_tax:
            bs_bucket = _bs_bucket(group, rules)

    logger.debug(
        "ledger_classified",
        extra={"ledger_code": ledger.code, "role": role.value},
    )
    return ClassifiedLedger(
        ledger=ledger,
        group=group,
        role=role,
        bs_bucket=bs_bucket,
        debit_natured=debit_natured,
        is_round_off=is_round_off and group.affects_pl,
        is_cogs_ledger=is_cogs and group.affects_pl,
    )


def classify_chart(
    groups: list[AccountGroupInfo],
    ledgers: list[LedgerInfo],
    rules: ClassificationRules,
) -> ChartClassification:
    """
    Resolve every ledger of the chart.

    Ledgers keep the order they were given in (code order from the
    repository).  Unresolved ledgers are collected and logged, never raised.
    """
    by_id = {g.group_id: g for g in groups}
    classified: list[ClassifiedLedger] = []
    unresolved: list[LedgerInfo] = []

    for ledger in ledgers:
        group = by_id.get(ledger.account_group_id)
        if group is None:
            logger.warning(
                "ledger_group_unresolved",
                extra={
                    "ledger_id": str(ledger.ledger_id),
                    "ledger_code": ledger.code,
                    "account_group_id": str(ledger.account_group_id),
                },
            )
            unresolved.append(ledger)
            continue
        classified.append(classify_ledger(ledger, group, rules))

    logger.info(
        "chart_classified",
        extra={
            "group_count": len(groups),
            "ledger_count": len(classified),
            "unresolved_count": len(unresolved),
        },
    )
    return ChartClassification(ledgers=tuple(classified), unresolved=tuple(unresolved))
