"""
Reporting-specific test fixtures.

Provides:
- ReportingService instances over in-memory repositories
- ChartBuilder, a compact way to describe account groups, ledgers,
  vouchers and inventory items for one tenant
- A standard Indian-style chart of accounts used across report tests
- persist_books, which writes a builder's books as ORM rows
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_kernel.domain.dtos import (
    AccountGroupInfo,
    LedgerInfo,
    StockItemInfo,
    VoucherEntryInfo,
    VoucherInfo,
)
from ledger_kernel.domain.repository import InMemoryLedgerRepository
from ledger_kernel.models.account_group import AccountGroup, AccountNature, BsCategory
from ledger_kernel.models.inventory import InventoryItem
from ledger_kernel.models.ledger import BalanceSide, Ledger
from ledger_kernel.models.voucher import Voucher, VoucherLedgerEntry, VoucherStatus
from ledger_kernel.selectors.ledger_selector import LedgerSelector
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.service import ReportingService

TENANT = "test-tenant"


class ChartBuilder:
    """
    Fluent builder for a tenant's books.

    Voucher lines are ``(ledger_code, debit, credit)`` or
    ``(ledger_code, debit, credit, narration)``; amounts are strings or
    numbers and are converted through ``str`` into Decimal.
    """

    def __init__(self, tenant_id: str | None = TENANT):
        self.tenant_id = tenant_id
        self.groups: dict[str, AccountGroupInfo] = {}
        self.ledgers: dict[str, LedgerInfo] = {}
        self.vouchers: list[VoucherInfo] = []
        self.entries: list[VoucherEntryInfo] = []
        self.items: list[StockItemInfo] = []

    def group(
        self,
        code: str,
        nature: AccountNature,
        *,
        name: str | None = None,
        bs_category: BsCategory | None = None,
        affects_pl: bool = False,
        affects_gross_profit: bool = False,
        is_tax_group: bool = False,
    ) -> ChartBuilder:
        self.groups[code] = AccountGroupInfo(
            group_id=uuid4(),
            group_code=code,
            name=name or code,
            nature=nature,
            bs_category=bs_category,
            affects_pl=affects_pl,
            affects_gross_profit=affects_gross_profit,
            is_tax_group=is_tax_group,
        )
        return self

    def ledger(
        self,
        code: str,
        group_code: str,
        *,
        name: str | None = None,
        opening: str | int = "0",
        opening_type: BalanceSide | None = None,
        balance_type: BalanceSide | None = None,
        is_active: bool = True,
    ) -> ChartBuilder:
        group = self.groups.get(group_code)
        self.ledgers[code] = LedgerInfo(
            ledger_id=uuid4(),
            code=code,
            name=name or code,
            # A group code not declared on the builder leaves a dangling id
            account_group_id=group.group_id if group else uuid4(),
            opening_balance=Decimal(str(opening)),
            opening_balance_type=opening_type,
            balance_type=balance_type,
            is_active=is_active,
        )
        return self

    def voucher(
        self,
        number: str,
        day: date,
        *lines: tuple,
        voucher_type: str = "journal",
        status: VoucherStatus = VoucherStatus.POSTED,
    ) -> ChartBuilder:
        voucher = VoucherInfo(
            voucher_id=uuid4(),
            voucher_date=day,
            voucher_number=number,
            voucher_type=voucher_type,
            status=status,
        )
        self.vouchers.append(voucher)
        for line_number, line in enumerate(lines, start=1):
            code, debit, credit, *rest = line
            self.entries.append(
                VoucherEntryInfo(
                    entry_id=uuid4(),
                    voucher_id=voucher.voucher_id,
                    ledger_id=self.ledgers[code].ledger_id,
                    debit=Decimal(str(debit)),
                    credit=Decimal(str(credit)),
                    narration=rest[0] if rest else None,
                    line_number=line_number,
                )
            )
        return self

    def item(
        self,
        name: str,
        quantity: str | int,
        avg_cost: str | int,
        opening: str | int = "0",
        is_active: bool = True,
    ) -> ChartBuilder:
        self.items.append(
            StockItemInfo(
                item_id=uuid4(),
                name=name,
                quantity_on_hand=Decimal(str(quantity)),
                avg_cost=Decimal(str(avg_cost)),
                opening_balance=Decimal(str(opening)),
                is_active=is_active,
            )
        )
        return self

    def id_of(self, code: str):
        return self.ledgers[code].ledger_id

    def repository(self) -> InMemoryLedgerRepository:
        return InMemoryLedgerRepository(
            groups=self.groups.values(),
            ledgers=self.ledgers.values(),
            vouchers=self.vouchers,
            entries=self.entries,
            items=self.items,
            tenant_id=self.tenant_id,
        )


def standard_groups(builder: ChartBuilder | None = None) -> ChartBuilder:
    """Account groups of a small Indian trading company."""
    builder = builder or ChartBuilder()
    return (
        builder
        .group("CAP", AccountNature.EQUITY, name="Capital Account",
               bs_category=BsCategory.EQUITY)
        .group("RES", AccountNature.EQUITY, name="Reserves & Surplus",
               bs_category=BsCategory.EQUITY)
        .group("FA", AccountNature.ASSET, name="Fixed Assets",
               bs_category=BsCategory.FIXED_ASSET)
        .group("CA", AccountNature.ASSET, name="Current Assets",
               bs_category=BsCategory.CURRENT_ASSET)
        .group("INV", AccountNature.ASSET, name="Stock-in-Hand",
               bs_category=BsCategory.CURRENT_ASSET)
        .group("CL", AccountNature.LIABILITY, name="Current Liabilities",
               bs_category=BsCategory.CURRENT_LIABILITY)
        .group("LOANS", AccountNature.LIABILITY, name="Secured Loans",
               bs_category=BsCategory.NONCURRENT_LIABILITY)
        .group("DUTIES", AccountNature.LIABILITY, name="Duties & Taxes",
               bs_category=BsCategory.CURRENT_LIABILITY, is_tax_group=True)
        .group("SAL", AccountNature.INCOME, name="Sales Accounts",
               affects_pl=True, affects_gross_profit=True)
        .group("SAL_RET", AccountNature.EXPENSE, name="Sales Returns",
               affects_pl=True, affects_gross_profit=True)
        .group("PUR", AccountNature.EXPENSE, name="Purchase Accounts",
               affects_pl=True, affects_gross_profit=True)
        .group("PUR_RET", AccountNature.INCOME, name="Purchase Returns",
               affects_pl=True, affects_gross_profit=True)
        .group("DIR_EXP", AccountNature.EXPENSE, name="Direct Expenses",
               affects_pl=True, affects_gross_profit=True)
        .group("DIR_INC", AccountNature.INCOME, name="Direct Incomes",
               affects_pl=True, affects_gross_profit=True)
        .group("IND_EXP", AccountNature.EXPENSE, name="Indirect Expenses",
               affects_pl=True)
        .group("IND_INC", AccountNature.INCOME, name="Indirect Incomes",
               affects_pl=True)
    )


def trading_company() -> ChartBuilder:
    """
    A full fiscal year (2024-04-01 .. 2025-03-31) of a trading company.

    Sales 100000, returns 5000, purchases 50000, freight 5000, rent 10000,
    interest received 2000.  Stock: opening 20000, closing 100 x 150.

        COGS  = 20000 + 50000 + 5000 - 15000 = 60000
        GP    = 95000 - 60000               = 35000
        NP    = 35000 + 2000 - 10000        = 27000

    Capital carries the opening stock, so the balance sheet balances at
    447000 while the trial balance shows the 20000 opening stock gap.
    """
    b = standard_groups()
    (
        b.ledger("CAPITAL", "CAP", name="Proprietor's Capital",
                 opening=420000, opening_type=BalanceSide.CREDIT)
        .ledger("CASH", "CA", name="Cash in Hand",
                opening=400000, opening_type=BalanceSide.DEBIT)
        .ledger("SALES", "SAL", name="Sales")
        .ledger("SALES_RET", "SAL_RET", name="Sales Returns")
        .ledger("PURCHASES", "PUR", name="Purchases")
        .ledger("FREIGHT", "DIR_EXP", name="Freight Inward")
        .ledger("RENT", "IND_EXP", name="Office Rent")
        .ledger("INTEREST", "IND_INC", name="Interest Received")
    )
    (
        b.voucher("S-001", date(2024, 5, 1),
                  ("CASH", 100000, 0), ("SALES", 0, 100000), voucher_type="sales")
        .voucher("P-001", date(2024, 5, 10),
                 ("PURCHASES", 50000, 0), ("CASH", 0, 50000), voucher_type="purchase")
        .voucher("J-001", date(2024, 5, 11),
                 ("FREIGHT", 5000, 0), ("CASH", 0, 5000))
        .voucher("CN-001", date(2024, 6, 1),
                 ("SALES_RET", 5000, 0), ("CASH", 0, 5000), voucher_type="credit_note")
        .voucher("PY-001", date(2024, 7, 1),
                 ("RENT", 10000, 0), ("CASH", 0, 10000), voucher_type="payment")
        .voucher("RC-001", date(2024, 8, 1),
                 ("CASH", 2000, 0), ("INTEREST", 0, 2000), voucher_type="receipt")
    )
    b.item("Widget", quantity=100, avg_cost=150, opening=20000)
    return b


def persist_books(session, builder: ChartBuilder) -> LedgerSelector:
    """Write a builder's books as ORM rows, keeping every id."""
    for g in builder.groups.values():
        session.add(AccountGroup(
            id=g.group_id,
            group_code=g.group_code,
            name=g.name,
            nature=g.nature.value,
            bs_category=g.bs_category.value if g.bs_category else None,
            affects_pl=g.affects_pl,
            affects_gross_profit=g.affects_gross_profit,
            is_tax_group=g.is_tax_group,
        ))
    for ledger in builder.ledgers.values():
        session.add(Ledger(
            id=ledger.ledger_id,
            ledger_code=ledger.code,
            ledger_name=ledger.name,
            account_group_id=ledger.account_group_id,
            opening_balance=ledger.opening_balance,
            opening_balance_type=(
                ledger.opening_balance_type.short_label if ledger.opening_balance_type else None
            ),
            balance_type=ledger.balance_type.value if ledger.balance_type else None,
            # Stale on purpose; reports derive balances from entries
            current_balance=Decimal("999999"),
            is_active=ledger.is_active,
        ))
    for v in builder.vouchers:
        session.add(Voucher(
            id=v.voucher_id,
            voucher_date=v.voucher_date,
            voucher_number=v.voucher_number,
            voucher_type=v.voucher_type,
            status=v.status.value,
        ))
    session.flush()
    for e in builder.entries:
        session.add(VoucherLedgerEntry(
            id=e.entry_id,
            voucher_id=e.voucher_id,
            ledger_id=e.ledger_id,
            debit_amount=e.debit,
            credit_amount=e.credit,
            narration=e.narration,
            line_number=e.line_number,
        ))
    for item in builder.items:
        session.add(InventoryItem(
            id=item.item_id,
            name=item.name,
            quantity_on_hand=item.quantity_on_hand,
            avg_cost=item.avg_cost,
            opening_balance=item.opening_balance,
            is_active=item.is_active,
        ))
    session.flush()
    return LedgerSelector(session, tenant_id=builder.tenant_id)


@pytest.fixture
def reporting_config() -> ReportingConfig:
    """Standard reporting configuration for tests."""
    return ReportingConfig.with_defaults()


@pytest.fixture
def service_for(deterministic_clock, reporting_config):
    """Factory: ReportingService over a builder's in-memory repository."""

    def _make(builder: ChartBuilder, config: ReportingConfig | None = None) -> ReportingService:
        return ReportingService(
            builder.repository(),
            clock=deterministic_clock,
            config=config or reporting_config,
        )

    return _make
