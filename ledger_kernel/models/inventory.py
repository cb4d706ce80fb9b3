"""
Module: ledger_kernel.models.inventory
Responsibility: ORM persistence for inventory items as seen by the
    statement engine: quantity on hand, weighted average cost and opening
    stock value.  Stock movements do not flow through voucher entries in
    this view; items are only read for stock valuation.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from decimal import Decimal

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import Base


class InventoryItem(Base):
    """Stock item with quantity on hand and average cost."""

    __tablename__ = "inventory_items"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    quantity_on_hand: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    avg_cost: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    # Opening stock value (not quantity)
    opening_balance: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<InventoryItem {self.name}: {self.quantity_on_hand} @ {self.avg_cost}>"
