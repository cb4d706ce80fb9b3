"""
Presentation mapping for report DTOs.

Maps report dataclasses to the JSON-shaped dicts returned by the query
operations.  This is the only place money is rounded: amounts are
quantized to ``precision`` places with ROUND_HALF_UP and rendered as
decimal strings.  The P&L and balance sheet come in two shapes, DETAILED
(per-ledger sections) and TALLY (two-column summary), both read from the
same report DTO.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ledger_modules.reporting.models import (
    BalanceSheetReport,
    BalanceSheetSection,
    LedgerStatementReport,
    LedgerStatementRow,
    ProfitLossReport,
    ReportMetadata,
    ReportStyle,
    StatementSection,
    TallyEntry,
    TrialBalanceReport,
)


def money(amount: Decimal, precision: int = 2) -> str:
    """Round half-up to ``precision`` places; never renders "-0.00"."""
    quantum = Decimal(1).scaleb(-precision)
    rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return str(rounded)


def _date(value) -> str | None:
    return value.isoformat() if value is not None else None


def _metadata(md: ReportMetadata) -> dict[str, Any]:
    return {
        "report_type": md.report_type.value,
        "entity_name": md.entity_name,
        "currency": md.currency,
        "generated_at": md.generated_at,
        "tenant_id": md.tenant_id,
    }


# =========================================================================
# Trial balance
# =========================================================================


def present_trial_balance(report: TrialBalanceReport, precision: int = 2) -> dict[str, Any]:
    md = report.metadata
    return {
        "as_on_date": _date(md.as_on_date),
        "from_date": _date(md.period_start),
        "metadata": _metadata(md),
        "trialBalance": [
            {
                "ledger_id": str(line.ledger_id),
                "ledger_code": line.ledger_code,
                "ledger_name": line.ledger_name,
                "group_code": line.group_code,
                "group_name": line.group_name,
                "nature": line.nature.value,
                "debit": money(line.debit, precision),
                "credit": money(line.credit, precision),
            }
            for line in report.lines
        ],
        "totals": {
            "totalDebit": money(report.total_debit, precision),
            "totalCredit": money(report.total_credit, precision),
            "difference": money(report.difference, precision),
            "isBalanced": report.is_balanced,
        },
    }


# =========================================================================
# Profit & loss
# =========================================================================


def _section(section: StatementSection, precision: int) -> dict[str, Any]:
    return {
        "label": section.label,
        "total": money(section.total, precision),
        "accounts": [
            {
                "code": line.code,
                "name": line.name,
                "group": line.group_name,
                "amount": money(line.amount, precision),
            }
            for line in section.lines
        ],
    }


def _tally_side(entries: tuple[TallyEntry, ...], precision: int) -> list[dict[str, str]]:
    return [
        {"label": e.label, "amount": money(e.amount, precision)}
        for e in entries
        if e.amount != 0
    ]


def present_profit_loss(
    report: ProfitLossReport,
    style: ReportStyle = ReportStyle.DETAILED,
    precision: int = 2,
) -> dict[str, Any]:
    t = report.totals
    md = report.metadata

    totals = {
        "net_sales": money(t.net_sales, precision),
        "cost_of_goods_sold": money(t.cogs, precision),
        "gross_profit": money(t.gross_profit, precision),
        "net_profit": money(t.net_profit, precision),
        "type": "profit" if t.is_profit else "loss",
        "gross_profit_margin": money(t.gross_profit_margin, precision),
        "net_profit_margin": money(t.net_profit_margin, precision),
        "cogs_percentage": money(t.cogs_percentage, precision),
    }
    sales_revenue = {
        "sales": money(t.sales, precision),
        "sales_returns": money(t.sales_returns, precision),
        "net_sales": money(t.net_sales, precision),
    }

    if style == ReportStyle.TALLY:
        trading_account = {
            "debit_side": _tally_side(report.tally.debit_side, precision),
            "credit_side": _tally_side(report.tally.credit_side, precision),
            "debit_total": money(report.tally.debit_total, precision),
            "credit_total": money(report.tally.credit_total, precision),
        }
        profit_loss_account = {
            "gross_profit": money(t.gross_profit, precision),
            "indirect_income": money(t.indirect_income, precision),
            "indirect_expenses": money(t.indirect_expenses, precision),
            "net_profit": money(t.net_profit, precision),
        }
    else:
        sales_revenue["accounts"] = {
            "sales": _section(report.sales, precision),
            "sales_returns": _section(report.sales_returns, precision),
        }
        trading_account = {
            "opening_stock": money(t.opening_stock, precision),
            "purchases": {
                **_section(report.purchases, precision),
                "returns": _section(report.purchase_returns, precision),
                "net": money(t.net_purchases, precision),
            },
            "direct_expenses": _section(report.direct_expenses, precision),
            "goods_available": money(t.goods_available, precision),
            "closing_stock": money(t.closing_stock, precision),
            "cost_of_goods_sold": money(t.cogs, precision),
            "direct_income": _section(report.direct_income, precision),
            "gross_profit": money(t.gross_profit, precision),
        }
        profit_loss_account = {
            "gross_profit": money(t.gross_profit, precision),
            "indirect_income": _section(report.indirect_income, precision),
            "indirect_expenses": _section(report.indirect_expenses, precision),
            "net_profit": money(t.net_profit, precision),
        }

    return {
        "period": {"from_date": _date(md.period_start), "to_date": _date(md.period_end)},
        "style": style.value,
        "metadata": _metadata(md),
        "trading_account": trading_account,
        "sales_revenue": sales_revenue,
        "profit_loss_account": profit_loss_account,
        "totals": totals,
        "cogs_method": t.cogs_method.value,
        "stock_source": report.stock_source,
        "notes": list(report.notes),
    }


# =========================================================================
# Balance sheet
# =========================================================================


def _bs_section(section: BalanceSheetSection, precision: int) -> dict[str, Any]:
    return {
        "total": money(section.total, precision),
        "accounts": [
            {
                "name": line.label,
                "code": line.code,
                "group": line.group_name,
                "balance": money(line.amount, precision),
                "synthetic": line.synthetic,
            }
            for line in section.lines
        ],
    }


def _tally_groups(sections: tuple[BalanceSheetSection, ...], precision: int) -> list[dict[str, str]]:
    return [
        {"label": s.label, "amount": money(s.total, precision)}
        for s in sections
        if s.lines
    ]


def present_balance_sheet(
    report: BalanceSheetReport,
    style: ReportStyle = ReportStyle.DETAILED,
    precision: int = 2,
) -> dict[str, Any]:
    pl = report.profit_and_loss
    profit_and_loss = {
        "amount": money(pl.amount, precision),
        "type": pl.type,
        "period_start": _date(pl.period_start),
        "as_of_date": _date(pl.period_end),
    }

    if style == ReportStyle.TALLY:
        assets = {
            "entries": _tally_groups(report.asset_sections, precision),
            "total": money(report.total_assets, precision),
        }
        liability_entries = _tally_groups(report.liability_sections, precision)
        liability_entries.append(
            {"label": "Profit & Loss A/c", "amount": money(pl.amount, precision)}
        )
        liabilities = {
            "entries": liability_entries,
            "total": money(report.total_liabilities, precision),
        }
    else:
        assets = {
            "fixed_assets": _bs_section(report.fixed_assets, precision),
            "investments": _bs_section(report.investments, precision),
            "current_assets": _bs_section(report.current_assets, precision),
            "other_assets": _bs_section(report.other_assets, precision),
            "total": money(report.total_assets, precision),
        }
        liabilities = {
            "capital": _bs_section(report.capital, precision),
            "reserves_and_surplus": _bs_section(report.reserves, precision),
            "profit_and_loss": profit_and_loss,
            "noncurrent_liabilities": _bs_section(report.noncurrent_liabilities, precision),
            "current_liabilities": _bs_section(report.current_liabilities, precision),
            "other_liabilities": _bs_section(report.other_liabilities, precision),
            "total": money(report.total_liabilities, precision),
        }

    tax = report.tax_position
    return {
        "as_on_date": _date(report.metadata.as_on_date),
        "style": style.value,
        "metadata": _metadata(report.metadata),
        "assets": assets,
        "liabilities_and_equity": liabilities,
        "profit_and_loss": profit_and_loss,
        "balance_check": {
            "total_assets": money(report.total_assets, precision),
            "total_liabilities_and_equity": money(report.total_liabilities, precision),
            "difference": money(report.difference, precision),
            "is_balanced": report.is_balanced,
        },
        "financial_ratios": {
            "current_ratio": money(report.ratios.current_ratio, precision),
            "debt_to_equity_ratio": money(report.ratios.debt_to_equity, precision),
            "working_capital": money(report.ratios.working_capital, precision),
        },
        "tax_summary": {
            "total_input_gst": money(tax.total_input_gst, precision),
            "total_output_gst": money(tax.total_output_gst, precision),
            "net_gst_payable": money(tax.net_gst_payable, precision),
            "total_tds_payable": money(tax.total_tds_payable, precision),
            "total_tds_receivable": money(tax.total_tds_receivable, precision),
        },
        "stock_source": report.stock_source,
    }


# =========================================================================
# Ledger statement
# =========================================================================


def _row(row: LedgerStatementRow, precision: int) -> dict[str, Any]:
    return {
        "type": row.kind.value,
        "date": _date(row.date),
        "voucher_number": row.voucher_number,
        "voucher_type": row.voucher_type,
        "debit": money(row.debit, precision),
        "credit": money(row.credit, precision),
        "balance": money(abs(row.balance), precision),
        "balance_type": row.balance_type.short_label,
        "narration": row.narration,
    }


def present_ledger_statement(report: LedgerStatementReport, precision: int = 2) -> dict[str, Any]:
    s = report.summary
    md = report.metadata
    return {
        "ledger": {
            "id": str(report.ledger_id),
            "code": report.ledger_code,
            "name": report.ledger_name,
            "group_code": report.group_code,
            "group_name": report.group_name,
            "natural_side": "Dr" if report.debit_natured else "Cr",
        },
        "period": {"from_date": _date(md.period_start), "to_date": _date(md.period_end)},
        "metadata": _metadata(md),
        "statement": [_row(row, precision) for row in report.rows],
        "closing_balance": {
            "amount": money(abs(s.closing_balance), precision),
            "type": s.closing_balance_type.short_label,
        },
        "summary": {
            "total_debit": money(s.total_debit, precision),
            "total_credit": money(s.total_credit, precision),
            "entry_count": s.entry_count,
            "opening_balance": money(abs(s.opening_balance), precision),
            "opening_balance_type": s.opening_balance_type.short_label,
            "closing_balance": money(abs(s.closing_balance), precision),
            "closing_balance_type": s.closing_balance_type.short_label,
        },
    }
