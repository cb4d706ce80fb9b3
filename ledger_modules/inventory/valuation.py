"""
Stock valuation for the trading account.

Opening stock is the sum of item opening values; closing stock is
quantity on hand times weighted average cost.  When the tenant keeps no
inventory items, stock-group ledgers stand in: their opening balance and
their balance at the end of the window.  With neither, stock is zero.

Inventory items are a current snapshot, so closing stock from items does
not vary with the report date.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Sequence

from ledger_kernel.domain.dtos import StockItemInfo
from ledger_kernel.domain.values import ZERO
from ledger_kernel.logging_config import get_logger

logger = get_logger("modules.inventory.valuation")


class ValuationSource(str, Enum):
    INVENTORY_ITEMS = "inventory_items"
    STOCK_LEDGERS = "stock_ledgers"
    NONE = "none"


@dataclass(frozen=True)
class StockLedgerBalance:
    """Opening and window-end balance of one stock-group ledger (debit-positive)."""

    code: str
    opening: Decimal
    closing: Decimal


@dataclass(frozen=True)
class StockValuation:
    opening_stock: Decimal
    closing_stock: Decimal
    item_count: int
    source: ValuationSource

    @classmethod
    def none(cls) -> StockValuation:
        return cls(ZERO, ZERO, 0, ValuationSource.NONE)


def value_stock(
    items: Sequence[StockItemInfo],
    stock_ledgers: Sequence[StockLedgerBalance] = (),
) -> StockValuation:
    """Value opening and closing stock, preferring inventory items."""
    if items:
        valuation = StockValuation(
            opening_stock=sum((i.opening_balance for i in items), ZERO),
            closing_stock=sum((i.closing_value for i in items), ZERO),
            item_count=len(items),
            source=ValuationSource.INVENTORY_ITEMS,
        )
    elif stock_ledgers:
        valuation = StockValuation(
            opening_stock=sum((s.opening for s in stock_ledgers), ZERO),
            closing_stock=sum((s.closing for s in stock_ledgers), ZERO),
            item_count=0,
            source=ValuationSource.STOCK_LEDGERS,
        )
    else:
        valuation = StockValuation.none()

    logger.debug(
        "stock_valued",
        extra={
            "source": valuation.source.value,
            "opening_stock": str(valuation.opening_stock),
            "closing_stock": str(valuation.closing_stock),
            "item_count": valuation.item_count,
        },
    )
    return valuation
