"""
Pure financial statement transformation functions.

These functions turn a classified chart of accounts, aggregated ledger
movements and a stock valuation into structured statements.  ZERO I/O.
ZERO side effects.

All monetary values are Decimal. All inputs/outputs are frozen dataclasses.

Functions in this module follow the ledger_kernel/domain/ purity convention:
- No database access
- No clock access (the generation timestamp arrives inside ReportMetadata)
- No file I/O
- Deterministic: same inputs always produce same outputs
"""

from __future__ import annotations

import dataclasses
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ledger_kernel.domain.dtos import LedgerEntryLine, Movement
from ledger_kernel.domain.values import ZERO, is_effectively_zero
from ledger_kernel.models.ledger import BalanceSide
from ledger_modules.inventory.valuation import (
    StockLedgerBalance,
    StockValuation,
    ValuationSource,
)
from ledger_modules.reporting.balances import (
    SignedBalance,
    resolve_signed_balance,
)
from ledger_modules.reporting.classifier import (
    BalanceSheetBucket,
    ChartClassification,
    ClassifiedLedger,
    TradingRole,
)
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    BalanceSheetLine,
    BalanceSheetReport,
    BalanceSheetSection,
    CogsMethod,
    FinancialRatios,
    LedgerStatementReport,
    LedgerStatementRow,
    LedgerStatementSummary,
    ProfitAndLossLine,
    ProfitLossReport,
    ReportMetadata,
    StatementLine,
    StatementRowKind,
    StatementSection,
    StatementTotals,
    TallyColumns,
    TallyEntry,
    TaxPosition,
    TrialBalanceLine,
    TrialBalanceReport,
)

HUNDRED = Decimal("100")

PERPETUAL_NOTE = (
    "Perpetual inventory: cost of goods sold is the period debit of the COGS "
    "ledger(s); purchases are carried in the stock ledger, so net purchases "
    "and stock are reported as zero."
)

# =========================================================================
# Helpers
# =========================================================================


def _movement(movements: dict[UUID, Movement], ledger_id: UUID) -> Movement:
    return movements.get(ledger_id) or Movement.zero()


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator, or 0 when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return numerator / denominator


def _percentage(amount: Decimal, base: Decimal) -> Decimal:
    if base <= 0:
        return ZERO
    return amount / base * HUNDRED


def _statement_line(classified: ClassifiedLedger, amount: Decimal) -> StatementLine:
    return StatementLine(
        ledger_id=classified.ledger_id,
        code=classified.ledger.code,
        name=classified.ledger.name,
        group_name=classified.group.name if classified.group else None,
        amount=amount,
    )


def _make_section(label: str, lines: list[StatementLine]) -> StatementSection:
    """Create a statement section from lines, ordered by ledger code."""
    ordered = tuple(sorted(lines, key=lambda x: (x.code or "", x.name)))
    return StatementSection(
        label=label,
        lines=ordered,
        total=sum((line.amount for line in ordered), ZERO),
    )


def _make_bs_section(label: str, lines: list[BalanceSheetLine]) -> BalanceSheetSection:
    """Ledger lines by code, synthetic lines after them in insertion order."""
    ledgers = sorted((x for x in lines if not x.synthetic), key=lambda x: x.code or "")
    synthetic = [x for x in lines if x.synthetic]
    ordered = tuple(ledgers + synthetic)
    return BalanceSheetSection(
        label=label,
        lines=ordered,
        total=sum((line.amount for line in ordered), ZERO),
    )


# =========================================================================
# 1. TRIAL BALANCE
# =========================================================================


def build_trial_balance(
    classification: ChartClassification,
    movements: dict[UUID, Movement],
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> TrialBalanceReport:
    """
    Build a trial balance: every resolved ledger's signed balance
    (opening included) split into a debit or credit column.

    Never raises on imbalance; the difference is reported.
    """
    lines: list[TrialBalanceLine] = []
    for classified in classification.ledgers:
        balance = resolve_signed_balance(
            classified, _movement(movements, classified.ledger_id),
        )
        if balance.is_zero(config.zero_tolerance):
            continue
        lines.append(
            TrialBalanceLine(
                ledger_id=classified.ledger_id,
                ledger_code=classified.ledger.code,
                ledger_name=classified.ledger.name,
                group_code=classified.group.group_code,
                group_name=classified.group.name,
                nature=classified.group.nature,
                debit=balance.debit,
                credit=balance.credit,
                net=balance.net,
            )
        )

    ordered = tuple(sorted(lines, key=lambda x: x.ledger_code))
    total_debit = sum((line.debit for line in ordered), ZERO)
    total_credit = sum((line.credit for line in ordered), ZERO)
    difference = abs(total_debit - total_credit)

    return TrialBalanceReport(
        metadata=metadata,
        lines=ordered,
        total_debit=total_debit,
        total_credit=total_credit,
        difference=difference,
        is_balanced=difference <= config.rounding_tolerance,
    )


# =========================================================================
# 2. TRADING AND PROFIT & LOSS
# =========================================================================


def stock_ledger_balances(
    classification: ChartClassification,
    opening_movements: dict[UUID, Movement],
    closing_movements: dict[UUID, Movement],
) -> list[StockLedgerBalance]:
    """
    Period-start and period-end balances of stock-role ledgers.

    ``opening_movements`` covers everything before the period and
    ``closing_movements`` everything up to its end, so one period's
    closing stock is the next period's opening stock.
    """
    balances = []
    for classified in classification.ledgers:
        if classified.role != TradingRole.STOCK:
            continue
        opening = resolve_signed_balance(
            classified, _movement(opening_movements, classified.ledger_id),
        )
        closing = resolve_signed_balance(
            classified, _movement(closing_movements, classified.ledger_id),
        )
        balances.append(
            StockLedgerBalance(
                code=classified.ledger.code,
                opening=opening.net,
                closing=closing.net,
            )
        )
    return balances


def resolve_cogs_method(
    configured: CogsMethod,
    purchases_moved: bool,
    cogs_ledger_moved: bool,
) -> CogsMethod:
    """
    Pick periodic or perpetual COGS.

    AUTO: periodic whenever purchases moved; otherwise perpetual when a
    COGS ledger carries an amount; otherwise periodic.
    """
    if configured != CogsMethod.AUTO:
        return configured
    if purchases_moved:
        return CogsMethod.PERIODIC
    if cogs_ledger_moved:
        return CogsMethod.PERPETUAL
    return CogsMethod.PERIODIC


def build_tally_columns(totals: StatementTotals) -> TallyColumns:
    """
    Two-column rendering of the combined trading and P&L account.

    Dr: opening stock, net purchases, direct and indirect expenses, net profit.
    Cr: net sales, closing stock, other income, net loss.
    Both sides total the same by construction.
    """
    net_profit = max(totals.net_profit, ZERO)
    net_loss = max(-totals.net_profit, ZERO)

    debit_side = (
        TallyEntry("Opening Stock", totals.opening_stock),
        TallyEntry("Purchases", totals.net_purchases),
        TallyEntry("Direct Expenses", totals.direct_expenses),
        TallyEntry("Indirect Expenses", totals.indirect_expenses),
        TallyEntry("Net Profit", net_profit),
    )
    credit_side = (
        TallyEntry("Sales", totals.net_sales),
        TallyEntry("Closing Stock", totals.closing_stock),
        TallyEntry("Other Income", totals.other_income),
        TallyEntry("Net Loss", net_loss),
    )
    return TallyColumns(
        debit_side=debit_side,
        credit_side=credit_side,
        debit_total=sum((e.amount for e in debit_side), ZERO),
        credit_total=sum((e.amount for e in credit_side), ZERO),
    )


def build_profit_loss(
    classification: ChartClassification,
    movements: dict[UUID, Movement],
    stock: StockValuation,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> ProfitLossReport:
    """
    Build the trading and profit & loss account from period movements.

    Only ledgers whose group affects P&L take part; stock ledgers are
    valued separately.  Returns are contra accounts measured on their own
    side so they always reduce their parent figure.  Round-off ledgers
    land by net side.  Amounts within the zero tolerance are dropped.
    """
    tol = config.zero_tolerance
    buckets: dict[str, list[StatementLine]] = {
        "sales": [],
        "sales_returns": [],
        "direct_income": [],
        "indirect_income": [],
        "purchases": [],
        "purchase_returns": [],
        "direct_expenses": [],
        "indirect_expenses": [],
    }
    cogs_ledger_moved = False

    for classified in classification.ledgers:
        if not classified.affects_pl or classified.role == TradingRole.STOCK:
            continue
        move = _movement(movements, classified.ledger_id)

        if classified.is_round_off:
            if move.net > tol:
                buckets["indirect_expenses"].append(_statement_line(classified, move.net))
            elif move.net < -tol:
                buckets["indirect_income"].append(_statement_line(classified, -move.net))
            continue

        role = classified.role
        if role == TradingRole.SALES:
            key, amount = "sales", move.credit - move.debit
        elif role == TradingRole.SALES_RETURN:
            key, amount = "sales_returns", move.debit - move.credit
        elif role == TradingRole.PURCHASE:
            key, amount = "purchases", move.debit - move.credit
        elif role == TradingRole.PURCHASE_RETURN:
            key, amount = "purchase_returns", move.credit - move.debit
        elif role == TradingRole.DIRECT_EXPENSE:
            key, amount = "direct_expenses", move.debit - move.credit
        elif role == TradingRole.INDIRECT_EXPENSE:
            key, amount = "indirect_expenses", move.debit - move.credit
        elif role == TradingRole.OTHER_INCOME:
            key = "direct_income" if classified.group.affects_gross_profit else "indirect_income"
            amount = move.credit - move.debit
        else:
            continue

        if is_effectively_zero(amount, tol):
            continue
        if classified.is_cogs_ledger:
            cogs_ledger_moved = True
        buckets[key].append(_statement_line(classified, amount))

    sections = {
        "sales": _make_section("Sales", buckets["sales"]),
        "sales_returns": _make_section("Sales Returns", buckets["sales_returns"]),
        "direct_income": _make_section("Direct Income", buckets["direct_income"]),
        "indirect_income": _make_section("Indirect Income", buckets["indirect_income"]),
        "purchases": _make_section("Purchases", buckets["purchases"]),
        "purchase_returns": _make_section("Purchase Returns", buckets["purchase_returns"]),
        "direct_expenses": _make_section("Direct Expenses", buckets["direct_expenses"]),
        "indirect_expenses": _make_section("Indirect Expenses", buckets["indirect_expenses"]),
    }

    purchases_moved = bool(buckets["purchases"] or buckets["purchase_returns"])
    method = resolve_cogs_method(config.cogs_method, purchases_moved, cogs_ledger_moved)

    sales = sections["sales"].total
    sales_returns = sections["sales_returns"].total
    net_sales = sales - sales_returns
    direct_income = sections["direct_income"].total
    indirect_income = sections["indirect_income"].total
    purchases = sections["purchases"].total
    purchase_returns = sections["purchase_returns"].total
    direct_expenses = sections["direct_expenses"].total
    indirect_expenses = sections["indirect_expenses"].total

    notes: list[str] = []
    if method == CogsMethod.PERPETUAL:
        opening_stock = ZERO
        closing_stock = ZERO
        net_purchases = ZERO
        cogs = direct_expenses
        notes.append(PERPETUAL_NOTE)
    else:
        opening_stock = stock.opening_stock
        closing_stock = stock.closing_stock
        net_purchases = purchases - purchase_returns
        cogs = opening_stock + net_purchases + direct_expenses - closing_stock
        if stock.source == ValuationSource.NONE:
            notes.append("No inventory items or stock ledgers: stock valued at zero.")

    goods_available = opening_stock + net_purchases + direct_expenses
    gross_profit = net_sales + direct_income - cogs
    net_profit = gross_profit + indirect_income - indirect_expenses

    totals = StatementTotals(
        sales=sales,
        sales_returns=sales_returns,
        net_sales=net_sales,
        direct_income=direct_income,
        indirect_income=indirect_income,
        other_income=direct_income + indirect_income,
        purchases=purchases,
        purchase_returns=purchase_returns,
        net_purchases=net_purchases,
        direct_expenses=direct_expenses,
        indirect_expenses=indirect_expenses,
        opening_stock=opening_stock,
        closing_stock=closing_stock,
        goods_available=goods_available,
        cogs=cogs,
        gross_profit=gross_profit,
        net_profit=net_profit,
        gross_profit_margin=_percentage(gross_profit, net_sales),
        net_profit_margin=_percentage(net_profit, net_sales),
        cogs_percentage=_percentage(cogs, net_sales),
        cogs_method=method,
    )

    return ProfitLossReport(
        metadata=metadata,
        sales=sections["sales"],
        sales_returns=sections["sales_returns"],
        direct_income=sections["direct_income"],
        purchases=sections["purchases"],
        purchase_returns=sections["purchase_returns"],
        direct_expenses=sections["direct_expenses"],
        indirect_income=sections["indirect_income"],
        indirect_expenses=sections["indirect_expenses"],
        totals=totals,
        tally=build_tally_columns(totals),
        stock_source=stock.source.value,
        notes=tuple(notes),
    )


# =========================================================================
# 3. BALANCE SHEET
# =========================================================================


def _place(
    amount: Decimal,
    label: str,
    liability_side: list[BalanceSheetLine],
    asset_side: list[BalanceSheetLine],
    tol: Decimal,
    liability_natured: bool,
) -> None:
    """Put a synthetic amount on its natural side, or its magnitude on the other."""
    if is_effectively_zero(amount, tol):
        return
    natural, other = (liability_side, asset_side) if liability_natured else (asset_side, liability_side)
    target = natural if amount > 0 else other
    target.append(BalanceSheetLine(label=label, amount=abs(amount), synthetic=True))


def build_balance_sheet(
    classification: ChartClassification,
    movements: dict[UUID, Movement],
    profit_loss: ProfitLossReport,
    stock: StockValuation,
    config: ReportingConfig,
    metadata: ReportMetadata,
) -> BalanceSheetReport:
    """
    Build the balance sheet as of ``metadata.as_on_date``.

    ``movements`` run from the beginning of time to the as-on date.
    ``profit_loss`` covers the current fiscal year and is folded into the
    liabilities total.  Tax ledgers are netted into synthetic lines.
    """
    tol = config.zero_tolerance
    bucket_lines: dict[BalanceSheetBucket, list[BalanceSheetLine]] = {
        bucket: [] for bucket in BalanceSheetBucket
    }

    # Closing stock replaces the stock ledgers only when the trading
    # account was valued from inventory items.
    synthetic_stock = (
        profit_loss.totals.cogs_method == CogsMethod.PERIODIC
        and stock.source == ValuationSource.INVENTORY_ITEMS
    )

    input_gst = output_gst = tds_payable = tds_receivable = ZERO

    for classified in classification.ledgers:
        if classified.affects_pl:
            continue
        if classified.role == TradingRole.STOCK and synthetic_stock:
            continue
        balance = resolve_signed_balance(
            classified, _movement(movements, classified.ledger_id),
        )

        role = classified.role
        if role == TradingRole.TAX_INPUT:
            input_gst += balance.net
            continue
        if role == TradingRole.TAX_OUTPUT:
            output_gst -= balance.net
            continue
        if role == TradingRole.TDS_PAYABLE:
            tds_payable -= balance.net
            continue
        if role == TradingRole.TDS_RECEIVABLE:
            tds_receivable += balance.net
            continue

        bucket = classified.bs_bucket
        if bucket is None or balance.is_zero(tol):
            continue
        amount = balance.net if bucket.is_asset else -balance.net
        bucket_lines[bucket].append(
            BalanceSheetLine(
                label=classified.ledger.name,
                amount=amount,
                code=classified.ledger.code,
                group_name=classified.group.name,
                ledger_id=classified.ledger_id,
            )
        )

    current_assets = bucket_lines[BalanceSheetBucket.CURRENT_ASSET]
    current_liabilities = bucket_lines[BalanceSheetBucket.CURRENT_LIABILITY]

    if synthetic_stock and not is_effectively_zero(stock.closing_stock, tol):
        current_assets.append(
            BalanceSheetLine(label="Closing Stock", amount=stock.closing_stock, synthetic=True)
        )

    net_gst_payable = output_gst - input_gst
    if net_gst_payable > tol:
        current_liabilities.append(
            BalanceSheetLine(label="Net GST Payable", amount=net_gst_payable, synthetic=True)
        )
    elif net_gst_payable < -tol:
        current_assets.append(
            BalanceSheetLine(label="Net GST Receivable", amount=-net_gst_payable, synthetic=True)
        )
    _place(tds_payable, "TDS Payable", current_liabilities, current_assets, tol, True)
    _place(tds_receivable, "TDS Receivable", current_liabilities, current_assets, tol, False)

    s = {
        bucket: _make_bs_section(label, bucket_lines[bucket])
        for bucket, label in (
            (BalanceSheetBucket.FIXED_ASSET, "Fixed Assets"),
            (BalanceSheetBucket.INVESTMENT, "Investments"),
            (BalanceSheetBucket.CURRENT_ASSET, "Current Assets"),
            (BalanceSheetBucket.OTHER_ASSET, "Other Assets"),
            (BalanceSheetBucket.CAPITAL, "Capital"),
            (BalanceSheetBucket.RESERVES, "Reserves & Surplus"),
            (BalanceSheetBucket.NONCURRENT_LIABILITY, "Non-Current Liabilities"),
            (BalanceSheetBucket.CURRENT_LIABILITY, "Current Liabilities"),
            (BalanceSheetBucket.OTHER_LIABILITY, "Other Liabilities"),
        )
    }

    net_profit = profit_loss.totals.net_profit
    total_assets = sum((sec.total for b, sec in s.items() if b.is_asset), ZERO)
    total_liabilities = net_profit + sum(
        (sec.total for b, sec in s.items() if not b.is_asset), ZERO,
    )
    difference = total_assets - total_liabilities

    ca = s[BalanceSheetBucket.CURRENT_ASSET].total
    cl = s[BalanceSheetBucket.CURRENT_LIABILITY].total
    equity = s[BalanceSheetBucket.CAPITAL].total + s[BalanceSheetBucket.RESERVES].total

    return BalanceSheetReport(
        metadata=metadata,
        fixed_assets=s[BalanceSheetBucket.FIXED_ASSET],
        investments=s[BalanceSheetBucket.INVESTMENT],
        current_assets=s[BalanceSheetBucket.CURRENT_ASSET],
        other_assets=s[BalanceSheetBucket.OTHER_ASSET],
        capital=s[BalanceSheetBucket.CAPITAL],
        reserves=s[BalanceSheetBucket.RESERVES],
        noncurrent_liabilities=s[BalanceSheetBucket.NONCURRENT_LIABILITY],
        current_liabilities=s[BalanceSheetBucket.CURRENT_LIABILITY],
        other_liabilities=s[BalanceSheetBucket.OTHER_LIABILITY],
        profit_and_loss=ProfitAndLossLine(
            amount=net_profit,
            is_profit=net_profit >= 0,
            period_start=profit_loss.metadata.period_start,
            period_end=profit_loss.metadata.period_end,
        ),
        tax_position=TaxPosition(
            total_input_gst=input_gst,
            total_output_gst=output_gst,
            net_gst_payable=net_gst_payable,
            total_tds_payable=tds_payable,
            total_tds_receivable=tds_receivable,
        ),
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        difference=difference,
        is_balanced=abs(difference) < config.balance_tolerance,
        ratios=FinancialRatios(
            current_ratio=_ratio(ca, cl),
            debt_to_equity=_ratio(s[BalanceSheetBucket.NONCURRENT_LIABILITY].total, equity),
            working_capital=ca - cl,
        ),
        stock_source=stock.source.value,
    )


# =========================================================================
# 4. LEDGER STATEMENT
# =========================================================================


def _side_of(natural: Decimal, classified: ClassifiedLedger) -> BalanceSide:
    if natural >= 0:
        return classified.natural_side
    return BalanceSide.CREDIT if classified.debit_natured else BalanceSide.DEBIT


def build_ledger_statement(
    classified: ClassifiedLedger,
    opening: SignedBalance,
    entries: list[LedgerEntryLine],
    metadata: ReportMetadata,
) -> LedgerStatementReport:
    """
    Build a running-balance statement.

    ``opening`` is the signed balance (opening balance plus all movement
    before the period start).  The running balance is kept on the natural
    side: debit-natured ledgers add ``debit - credit``, credit-natured
    ledgers add ``credit - debit``.
    """
    running = opening.natural
    rows: list[LedgerStatementRow] = [
        LedgerStatementRow(
            kind=StatementRowKind.OPENING,
            date=metadata.period_start,
            voucher_number=None,
            voucher_type=None,
            debit=ZERO,
            credit=ZERO,
            balance=running,
            balance_type=_side_of(running, classified),
            narration="Opening Balance",
        )
    ]

    total_debit = ZERO
    total_credit = ZERO
    for entry in entries:
        if classified.debit_natured:
            running += entry.debit - entry.credit
        else:
            running += entry.credit - entry.debit
        total_debit += entry.debit
        total_credit += entry.credit
        rows.append(
            LedgerStatementRow(
                kind=StatementRowKind.ENTRY,
                date=entry.voucher_date,
                voucher_number=entry.voucher_number,
                voucher_type=entry.voucher_type,
                debit=entry.debit,
                credit=entry.credit,
                balance=running,
                balance_type=_side_of(running, classified),
                narration=entry.narration,
            )
        )

    rows.append(
        LedgerStatementRow(
            kind=StatementRowKind.CLOSING,
            date=metadata.period_end,
            voucher_number=None,
            voucher_type=None,
            debit=ZERO,
            credit=ZERO,
            balance=running,
            balance_type=_side_of(running, classified),
            narration="Closing Balance",
        )
    )

    return LedgerStatementReport(
        metadata=metadata,
        ledger_id=classified.ledger_id,
        ledger_code=classified.ledger.code,
        ledger_name=classified.ledger.name,
        group_code=classified.group.group_code if classified.group else None,
        group_name=classified.group.name if classified.group else None,
        debit_natured=classified.debit_natured,
        rows=tuple(rows),
        summary=LedgerStatementSummary(
            total_debit=total_debit,
            total_credit=total_credit,
            entry_count=len(entries),
            opening_balance=opening.natural,
            opening_balance_type=_side_of(opening.natural, classified),
            closing_balance=running,
            closing_balance_type=_side_of(running, classified),
        ),
    )


# =========================================================================
# Serialization
# =========================================================================


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any report dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - UUID -> str
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)
