"""Inventory valuation used by the trading account and balance sheet."""

from ledger_modules.inventory.valuation import (
    StockLedgerBalance,
    StockValuation,
    ValuationSource,
    value_stock,
)

__all__ = [
    "StockLedgerBalance",
    "StockValuation",
    "ValuationSource",
    "value_stock",
]
