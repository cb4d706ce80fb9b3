"""
Stock valuation tests.

Inventory items win over stock ledgers; with neither, stock is zero.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

from ledger_kernel.domain.dtos import StockItemInfo
from ledger_modules.inventory.valuation import (
    StockLedgerBalance,
    ValuationSource,
    value_stock,
)


def _item(name, qty, cost, opening="0"):
    return StockItemInfo(uuid4(), name, Decimal(qty), Decimal(cost), Decimal(opening))


class TestValueStock:
    def test_from_items(self):
        valuation = value_stock([
            _item("Widget", "80", "150", "12000"),
            _item("Gadget", "10", "300", "8000"),
        ])
        assert valuation.source == ValuationSource.INVENTORY_ITEMS
        assert valuation.opening_stock == Decimal("20000")
        assert valuation.closing_stock == Decimal("15000")
        assert valuation.item_count == 2

    def test_fractional_cost(self):
        valuation = value_stock([_item("Bolt", "3", "0.333")])
        assert valuation.closing_stock == Decimal("0.999")

    def test_items_preferred_over_ledgers(self):
        valuation = value_stock(
            [_item("Widget", "1", "10")],
            [StockLedgerBalance("STOCK", Decimal("500"), Decimal("700"))],
        )
        assert valuation.source == ValuationSource.INVENTORY_ITEMS
        assert valuation.closing_stock == Decimal("10")

    def test_from_stock_ledgers(self):
        valuation = value_stock([], [
            StockLedgerBalance("RAW", Decimal("500"), Decimal("700")),
            StockLedgerBalance("FG", Decimal("100"), Decimal("50")),
        ])
        assert valuation.source == ValuationSource.STOCK_LEDGERS
        assert valuation.opening_stock == Decimal("600")
        assert valuation.closing_stock == Decimal("750")
        assert valuation.item_count == 0

    def test_nothing_to_value(self):
        valuation = value_stock([])
        assert valuation.source == ValuationSource.NONE
        assert valuation.opening_stock == valuation.closing_stock == Decimal("0")

    def test_logged(self, captured_logs):
        value_stock([_item("Widget", "2", "5")])
        record = next(r for r in captured_logs() if r["message"] == "stock_valued")
        assert record["source"] == "inventory_items"
        assert record["closing_stock"] == "10"
