"""
Signed balance resolver.

Combines a ledger's opening balance with its aggregated movement into one
debit-positive number, and exposes the natural-side and Dr/Cr column
views every statement reads.

    debit-natured,  opening 1000 Dr, Dr 500, Cr 200  -> net  1300 (1300 Dr)
    credit-natured, opening 1000 Cr, Dr 200, Cr 500  -> net -1300 (1300 Cr)

ZERO I/O.  Deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ledger_kernel.domain.dtos import LedgerInfo, Movement
from ledger_kernel.domain.values import DEFAULT_ZERO_TOLERANCE, ZERO, is_effectively_zero
from ledger_kernel.models.ledger import BalanceSide
from ledger_modules.reporting.classifier import ClassifiedLedger


@dataclass(frozen=True)
class SignedBalance:
    """
    Debit-positive balance of one ledger.

    ``net > 0`` is a debit balance, ``net < 0`` a credit balance.
    ``natural`` is positive when the balance sits on the ledger's natural
    side.
    """

    net: Decimal
    debit_natured: bool

    @property
    def natural(self) -> Decimal:
        return self.net if self.debit_natured else -self.net

    @property
    def debit(self) -> Decimal:
        return self.net if self.net > 0 else ZERO

    @property
    def credit(self) -> Decimal:
        return -self.net if self.net < 0 else ZERO

    @property
    def side(self) -> BalanceSide:
        if self.net == 0:
            return BalanceSide.DEBIT if self.debit_natured else BalanceSide.CREDIT
        return BalanceSide.DEBIT if self.net > 0 else BalanceSide.CREDIT

    def is_zero(self, tolerance: Decimal = DEFAULT_ZERO_TOLERANCE) -> bool:
        return is_effectively_zero(self.net, tolerance)


def opening_side(ledger: LedgerInfo, debit_natured: bool) -> BalanceSide:
    """Side of the opening balance: explicit type, then balance type, then nature."""
    if ledger.opening_balance_type is not None:
        return ledger.opening_balance_type
    if ledger.balance_type is not None:
        return ledger.balance_type
    return BalanceSide.DEBIT if debit_natured else BalanceSide.CREDIT


def signed_opening(ledger: LedgerInfo, debit_natured: bool) -> Decimal:
    amount = abs(ledger.opening_balance)
    if opening_side(ledger, debit_natured) == BalanceSide.DEBIT:
        return amount
    return -amount


def resolve_signed_balance(
    classified: ClassifiedLedger,
    movement: Movement | None,
    include_opening: bool = True,
) -> SignedBalance:
    """
    Signed balance of ``classified`` after applying ``movement``.

    A missing movement is treated as zero.
    """
    movement = movement or Movement.zero()
    net = movement.debit - movement.credit
    if include_opening:
        net += signed_opening(classified.ledger, classified.debit_natured)
    return SignedBalance(net=net, debit_natured=classified.debit_natured)
