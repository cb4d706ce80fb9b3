"""
Pure function unit tests for classifier.py.

NO database, NO I/O. Every trading role and balance-sheet bucket is
resolved from group metadata plus the configured code lists and markers.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_kernel.domain.dtos import AccountGroupInfo, LedgerInfo
from ledger_kernel.models.account_group import AccountNature, BsCategory
from ledger_modules.reporting.classifier import (
    BalanceSheetBucket,
    TradingRole,
    classify_chart,
    classify_ledger,
)
from ledger_modules.reporting.config import ClassificationRules

from tests.reporting.conftest import standard_groups


def _rules() -> ClassificationRules:
    return ClassificationRules()


def _groups() -> dict[str, AccountGroupInfo]:
    return standard_groups().groups


def _ledger(code: str, group: AccountGroupInfo, name: str | None = None) -> LedgerInfo:
    return LedgerInfo(
        ledger_id=uuid4(),
        code=code,
        name=name or code,
        account_group_id=group.group_id,
        opening_balance=Decimal("0"),
    )


def _classify(code: str, group_code: str, name: str | None = None):
    group = _groups()[group_code]
    return classify_ledger(_ledger(code, group, name), group, _rules())


class TestTradingRoles:
    """P&L groups resolve to trading roles."""

    @pytest.mark.parametrize("group_code,role", [
        ("SAL", TradingRole.SALES),
        ("SAL_RET", TradingRole.SALES_RETURN),
        ("PUR", TradingRole.PURCHASE),
        ("PUR_RET", TradingRole.PURCHASE_RETURN),
        ("DIR_EXP", TradingRole.DIRECT_EXPENSE),
        ("DIR_INC", TradingRole.OTHER_INCOME),
        ("IND_EXP", TradingRole.INDIRECT_EXPENSE),
        ("IND_INC", TradingRole.OTHER_INCOME),
    ])
    def test_role_by_group(self, group_code, role):
        classified = _classify("L", group_code, name="Some ledger")
        assert classified.role == role
        assert classified.bs_bucket is None
        assert classified.affects_pl is True

    def test_expense_group_affecting_gross_profit_is_direct(self):
        group = AccountGroupInfo(
            group_id=uuid4(), group_code="MFG", name="Manufacturing Expenses",
            nature=AccountNature.EXPENSE, affects_pl=True, affects_gross_profit=True,
        )
        classified = classify_ledger(_ledger("POWER", group), group, _rules())
        assert classified.role == TradingRole.DIRECT_EXPENSE

    def test_cogs_ledger_by_code(self):
        classified = _classify("COGS", "IND_EXP", name="Cost of sales")
        assert classified.role == TradingRole.DIRECT_EXPENSE
        assert classified.is_cogs_ledger is True

    def test_cogs_ledger_by_name(self):
        classified = _classify("5001", "IND_EXP", name="Cost of Goods Sold")
        assert classified.is_cogs_ledger is True

    def test_round_off_flag_only_in_pl_groups(self):
        assert _classify("RND", "IND_EXP", name="Round Off").is_round_off is True
        assert _classify("RND", "CA", name="Round Off").is_round_off is False

    def test_stock_group_is_stock_role_with_bucket(self):
        classified = _classify("STOCK", "INV", name="Closing Stock")
        assert classified.role == TradingRole.STOCK
        assert classified.bs_bucket == BalanceSheetBucket.CURRENT_ASSET


class TestTaxRoles:
    """Tax ledgers are recognised by group flag or GST/TDS markers."""

    @pytest.mark.parametrize("code,name,role", [
        ("GST_IN", "Input GST", TradingRole.TAX_INPUT),
        ("GST_OUT", "Output GST", TradingRole.TAX_OUTPUT),
        ("CGST_IN", "CGST Input Credit", TradingRole.TAX_INPUT),
        ("TDS_PAY", "TDS Payable", TradingRole.TDS_PAYABLE),
        ("TDS_REC", "TDS Receivable", TradingRole.TDS_RECEIVABLE),
    ])
    def test_markers(self, code, name, role):
        classified = _classify(code, "DUTIES", name=name)
        assert classified.role == role
        assert classified.is_tax is True
        assert classified.bs_bucket is None

    def test_markers_outside_tax_group(self):
        """A GST ledger filed under current assets is still a tax ledger."""
        classified = _classify("ITC", "CA", name="GST Input Credit")
        assert classified.role == TradingRole.TAX_INPUT

    def test_tax_group_without_direction_uses_nature(self):
        asset_tax = AccountGroupInfo(
            group_id=uuid4(), group_code="ADV_TAX", name="Advance Tax",
            nature=AccountNature.ASSET, bs_category=BsCategory.CURRENT_ASSET,
            is_tax_group=True,
        )
        classified = classify_ledger(_ledger("GST_CASH", asset_tax, "GST Cash Ledger"), asset_tax, _rules())
        assert classified.role == TradingRole.TAX_INPUT

        liability = _classify("GST", "DUTIES", name="GST Ledger")
        assert liability.role == TradingRole.TAX_OUTPUT

    def test_tds_without_direction_uses_nature(self):
        classified = _classify("TDS", "DUTIES", name="TDS on Contracts")
        assert classified.role == TradingRole.TDS_PAYABLE

    @pytest.mark.parametrize("code,name,group_code,bucket", [
        ("KING", "Kingston Traders", "CA", BalanceSheetBucket.CURRENT_ASSET),
        ("LONG", "Longstaff Supplies", "CL", BalanceSheetBucket.CURRENT_LIABILITY),
        ("OUTS", "Outstanding Expenses", "CL", BalanceSheetBucket.CURRENT_LIABILITY),
    ])
    def test_marker_letters_inside_a_word_are_not_tax(self, code, name, group_code, bucket):
        classified = _classify(code, group_code, name=name)
        assert classified.is_tax is False
        assert classified.bs_bucket == bucket

    @pytest.mark.parametrize("text,expected", [
        ("IGST Output", True),
        ("SGST_PAY", True),
        ("TDS-194C Payable", True),
        ("Kingston Traders", False),
        ("Longstaff Supplies", False),
    ])
    def test_tag_matching(self, text, expected):
        assert ClassificationRules.has_tag(text, ("GST", "TDS")) is expected

    def test_tax_markers_ignored_in_pl_groups(self):
        classified = _classify("GST_EXP", "IND_EXP", name="GST Late Fee")
        assert classified.role == TradingRole.INDIRECT_EXPENSE


class TestBalanceSheetBuckets:
    """Balance-sheet groups resolve to buckets."""

    @pytest.mark.parametrize("group_code,bucket", [
        ("FA", BalanceSheetBucket.FIXED_ASSET),
        ("CA", BalanceSheetBucket.CURRENT_ASSET),
        ("CAP", BalanceSheetBucket.CAPITAL),
        ("RES", BalanceSheetBucket.RESERVES),
        ("CL", BalanceSheetBucket.CURRENT_LIABILITY),
        ("LOANS", BalanceSheetBucket.NONCURRENT_LIABILITY),
    ])
    def test_bucket_by_group(self, group_code, bucket):
        classified = _classify("L", group_code, name="Some ledger")
        assert classified.role == TradingRole.NONE
        assert classified.bs_bucket == bucket
        assert classified.affects_pl is False

    def test_investment_and_other_asset(self):
        inv = AccountGroupInfo(
            group_id=uuid4(), group_code="INVST", name="Investments",
            nature=AccountNature.ASSET, bs_category=BsCategory.INVESTMENT,
        )
        other = AccountGroupInfo(
            group_id=uuid4(), group_code="MISC", name="Misc Assets",
            nature=AccountNature.ASSET, bs_category=BsCategory.OTHER,
        )
        assert classify_ledger(_ledger("FD", inv), inv, _rules()).bs_bucket == BalanceSheetBucket.INVESTMENT
        assert classify_ledger(_ledger("DEP", other), other, _rules()).bs_bucket == BalanceSheetBucket.OTHER_ASSET

    def test_uncategorised_liability_is_other(self):
        group = AccountGroupInfo(
            group_id=uuid4(), group_code="SUSP", name="Suspense",
            nature=AccountNature.LIABILITY,
        )
        classified = classify_ledger(_ledger("SUSPENSE", group), group, _rules())
        assert classified.bs_bucket == BalanceSheetBucket.OTHER_LIABILITY

    def test_expense_nature_outside_pl_lands_on_asset_side(self):
        group = AccountGroupInfo(
            group_id=uuid4(), group_code="PRE", name="Preliminary Expenses",
            nature=AccountNature.EXPENSE,
        )
        classified = classify_ledger(_ledger("PRELIM", group), group, _rules())
        assert classified.bs_bucket == BalanceSheetBucket.OTHER_ASSET
        assert classified.bs_bucket.is_asset is True


class TestCustomRules:
    """Code lists and markers come from configuration."""

    def test_custom_sales_group_code(self):
        group = AccountGroupInfo(
            group_id=uuid4(), group_code="REV", name="Revenue",
            nature=AccountNature.INCOME, affects_pl=True, affects_gross_profit=True,
        )
        rules = ClassificationRules(sales_group_codes=("REV",))
        assert classify_ledger(_ledger("S", group), group, rules).role == TradingRole.SALES

    def test_string_code_list_is_coerced(self):
        rules = ClassificationRules(capital_group_codes="OWNER")
        assert rules.capital_group_codes == ("OWNER",)

    def test_markers_are_case_insensitive(self):
        assert ClassificationRules.contains_marker("Rounding Off", ("ROUND",)) is True
        assert ClassificationRules.contains_marker("Freight", ("round",)) is False


class TestClassifyChart:
    """Chart-wide classification."""

    def test_unresolved_ledger_skipped_and_logged(self, captured_logs):
        groups = _groups()
        good = _ledger("CASH", groups["CA"])
        orphan = LedgerInfo(
            ledger_id=uuid4(), code="ORPHAN", name="Orphan",
            account_group_id=uuid4(),
        )
        chart = classify_chart(list(groups.values()), [good, orphan], _rules())

        assert [c.ledger.code for c in chart.ledgers] == ["CASH"]
        assert chart.unresolved == (orphan,)
        assert chart.get(good.ledger_id) is not None
        assert chart.get(orphan.ledger_id) is None

        logs = captured_logs()
        warning = next(r for r in logs if r["message"] == "ledger_group_unresolved")
        assert warning["level"] == "WARNING"
        assert warning["ledger_code"] == "ORPHAN"
        summary = next(r for r in logs if r["message"] == "chart_classified")
        assert summary["unresolved_count"] == 1

    def test_order_preserved(self):
        groups = _groups()
        ledgers = [_ledger(code, groups["CA"]) for code in ("A", "B", "C")]
        chart = classify_chart(list(groups.values()), ledgers, _rules())
        assert [c.ledger.code for c in chart.ledgers] == ["A", "B", "C"]
