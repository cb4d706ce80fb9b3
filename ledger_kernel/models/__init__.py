"""ORM models for the ledger kernel."""

from ledger_kernel.models.account_group import AccountGroup, AccountNature, BsCategory
from ledger_kernel.models.inventory import InventoryItem
from ledger_kernel.models.ledger import BalanceSide, Ledger
from ledger_kernel.models.voucher import Voucher, VoucherLedgerEntry, VoucherStatus

__all__ = [
    "AccountGroup",
    "AccountNature",
    "BsCategory",
    "BalanceSide",
    "InventoryItem",
    "Ledger",
    "Voucher",
    "VoucherLedgerEntry",
    "VoucherStatus",
]
