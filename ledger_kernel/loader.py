"""
Dataset Loader (``ledger_kernel.loader``).

Responsibility
--------------
Loads a YAML dataset -- account groups, ledgers, vouchers with their
entries, and inventory items -- into an ``InMemoryLedgerRepository``.
Used by the ``view_reports`` CLI and by tests that want a realistic
chart without a database.

Dataset layout::

    tenant_id: demo
    account_groups:
      - {code: SAL, name: Sales Accounts, nature: income,
         affects_pl: true, affects_gross_profit: true}
    ledgers:
      - {code: SALES, name: Sales, group: SAL}
      - {code: CAPITAL, name: Capital, group: CAP,
         opening_balance: 400000, opening_balance_type: Cr}
    vouchers:
      - number: SI-001
        date: 2024-05-01
        type: sales
        status: posted            # default
        entries:
          - {ledger: CASH, debit: 100000}
          - {ledger: SALES, credit: 100000, narration: Cash sale}
    inventory_items:
      - {name: Widget, quantity_on_hand: 10, avg_cost: 150, opening_balance: 0}

Invariants enforced
-------------------
* Ids are deterministic ``uuid5`` values derived from codes, so loading
  the same file twice yields identical reports.
* Amounts are parsed through ``str`` into ``Decimal`` -- never float
  arithmetic.
* A ledger may name a group that is not in the file; that ledger is
  reported as unresolved at statement time, not rejected here.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing keys, unknown nature/category/side/status, bad dates or amounts,
  or an entry naming an unknown ledger  -> ``InvalidDatasetError``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any
from uuid import NAMESPACE_URL, UUID, uuid5

import yaml

from ledger_kernel.domain.dtos import (
    AccountGroupInfo,
    LedgerInfo,
    StockItemInfo,
    VoucherEntryInfo,
    VoucherInfo,
)
from ledger_kernel.domain.repository import InMemoryLedgerRepository
from ledger_kernel.exceptions import InvalidDatasetError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account_group import AccountNature, BsCategory
from ledger_kernel.models.ledger import BalanceSide
from ledger_kernel.models.voucher import VoucherStatus

logger = get_logger("loader")

DATASET_NAMESPACE = uuid5(NAMESPACE_URL, "urn:ledger-kernel:dataset")


def stable_id(kind: str, key: str) -> UUID:
    """Deterministic id for a dataset record of ``kind`` keyed by ``key``."""
    return uuid5(DATASET_NAMESPACE, f"{kind}:{key}")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_amount(value: Any, section: str, ref: str | None = None) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise InvalidDatasetError(section, f"not an amount: {value!r}", ref) from None


def parse_date(value: Any, section: str, ref: str | None = None) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise InvalidDatasetError(section, f"not an ISO date: {value!r}", ref)


def _required(record: dict, key: str, section: str, ref: str | None) -> Any:
    if not isinstance(record, dict):
        raise InvalidDatasetError(section, "record must be a mapping", ref)
    if record.get(key) in (None, ""):
        raise InvalidDatasetError(section, f"missing '{key}'", ref)
    return record[key]


def _side(value: Any, section: str, ref: str) -> BalanceSide | None:
    try:
        return BalanceSide.parse(value)
    except ValueError as exc:
        raise InvalidDatasetError(section, str(exc), ref) from None


def _parse_groups(records: list[dict]) -> list[AccountGroupInfo]:
    groups = []
    for index, record in enumerate(records):
        code = str(_required(record, "code", "account_groups", str(index)))
        try:
            nature = AccountNature(str(_required(record, "nature", "account_groups", code)).lower())
            category = record.get("bs_category")
            bs_category = BsCategory(str(category).lower()) if category else None
        except ValueError as exc:
            raise InvalidDatasetError("account_groups", str(exc), code) from None
        groups.append(
            AccountGroupInfo(
                group_id=stable_id("group", code),
                group_code=code,
                name=str(record.get("name") or code),
                nature=nature,
                bs_category=bs_category,
                affects_pl=bool(record.get("affects_pl", False)),
                affects_gross_profit=bool(record.get("affects_gross_profit", False)),
                is_tax_group=bool(record.get("is_tax_group", False)),
            )
        )
    return groups


def _parse_ledgers(records: list[dict]) -> list[LedgerInfo]:
    ledgers = []
    for index, record in enumerate(records):
        code = str(_required(record, "code", "ledgers", str(index)))
        group_code = str(_required(record, "group", "ledgers", code))
        ledgers.append(
            LedgerInfo(
                ledger_id=stable_id("ledger", code),
                code=code,
                name=str(record.get("name") or code),
                account_group_id=stable_id("group", group_code),
                opening_balance=abs(parse_amount(record.get("opening_balance"), "ledgers", code)),
                opening_balance_type=_side(record.get("opening_balance_type"), "ledgers", code),
                balance_type=_side(record.get("balance_type"), "ledgers", code),
                is_active=bool(record.get("is_active", True)),
            )
        )
    return ledgers


def _parse_vouchers(
    records: list[dict],
    ledger_ids: dict[str, UUID],
) -> tuple[list[VoucherInfo], list[VoucherEntryInfo]]:
    vouchers: list[VoucherInfo] = []
    entries: list[VoucherEntryInfo] = []
    for index, record in enumerate(records):
        number = str(_required(record, "number", "vouchers", str(index)))
        voucher_id = stable_id("voucher", number)
        try:
            status = VoucherStatus(str(record.get("status", "posted")).lower())
        except ValueError as exc:
            raise InvalidDatasetError("vouchers", str(exc), number) from None
        vouchers.append(
            VoucherInfo(
                voucher_id=voucher_id,
                voucher_date=parse_date(_required(record, "date", "vouchers", number), "vouchers", number),
                voucher_number=number,
                voucher_type=str(record.get("type") or "journal"),
                status=status,
            )
        )
        for line_number, line in enumerate(record.get("entries") or [], start=1):
            ref = f"{number}#{line_number}"
            ledger_code = str(_required(line, "ledger", "entries", ref))
            ledger_id = ledger_ids.get(ledger_code)
            if ledger_id is None:
                raise InvalidDatasetError("entries", f"unknown ledger '{ledger_code}'", ref)
            entries.append(
                VoucherEntryInfo(
                    entry_id=stable_id("entry", ref),
                    voucher_id=voucher_id,
                    ledger_id=ledger_id,
                    debit=parse_amount(line.get("debit"), "entries", ref),
                    credit=parse_amount(line.get("credit"), "entries", ref),
                    narration=line.get("narration"),
                    line_number=line_number,
                )
            )
    return vouchers, entries


def _parse_items(records: list[dict]) -> list[StockItemInfo]:
    items = []
    for index, record in enumerate(records):
        name = str(_required(record, "name", "inventory_items", str(index)))
        items.append(
            StockItemInfo(
                item_id=stable_id("item", name),
                name=name,
                quantity_on_hand=parse_amount(record.get("quantity_on_hand"), "inventory_items", name),
                avg_cost=parse_amount(record.get("avg_cost"), "inventory_items", name),
                opening_balance=parse_amount(record.get("opening_balance"), "inventory_items", name),
                is_active=bool(record.get("is_active", True)),
            )
        )
    return items


def build_repository(data: dict[str, Any]) -> InMemoryLedgerRepository:
    """Build an in-memory repository from an already-parsed dataset dict."""
    groups = _parse_groups(data.get("account_groups") or [])
    ledgers = _parse_ledgers(data.get("ledgers") or [])
    ledger_ids = {ledger.code: ledger.ledger_id for ledger in ledgers}
    vouchers, entries = _parse_vouchers(data.get("vouchers") or [], ledger_ids)
    items = _parse_items(data.get("inventory_items") or [])

    tenant_id = data.get("tenant_id")
    logger.info(
        "dataset_loaded",
        extra={
            "tenant": tenant_id,
            "group_count": len(groups),
            "ledger_count": len(ledgers),
            "voucher_count": len(vouchers),
            "entry_count": len(entries),
            "item_count": len(items),
        },
    )
    return InMemoryLedgerRepository(
        groups=groups,
        ledgers=ledgers,
        vouchers=vouchers,
        entries=entries,
        items=items,
        tenant_id=str(tenant_id) if tenant_id is not None else None,
    )


def load_dataset(path: Path | str) -> InMemoryLedgerRepository:
    """Load a YAML dataset file into an ``InMemoryLedgerRepository``."""
    return build_repository(load_yaml_file(Path(path)))
