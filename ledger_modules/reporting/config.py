"""
Reporting Configuration Schema.

Defines classification rules and report formatting options.  Ledger
placement is driven by account group metadata (nature, bs_category,
affects_pl, affects_gross_profit, is_tax_group); the code lists and name
markers below only resolve the trading roles group metadata cannot
express (sales vs. sales returns, tax direction, round-off, COGS).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from decimal import Decimal
from pathlib import Path
from typing import Any, Self

from ledger_kernel.logging_config import get_logger
from ledger_modules.reporting.models import CogsMethod

logger = get_logger("modules.reporting.config")

_WORD_SPLIT = re.compile(r"[^0-9a-z]+")


@dataclass
class ClassificationRules:
    """
    Rules for resolving ledgers into trading roles.

    Group codes match exactly.  GST/TDS markers are tags: they match a
    word of the ledger code or name that starts or ends with them.  The
    other markers match case-insensitively as substrings.
    """

    # Trading account -- by account group code
    sales_group_codes: tuple[str, ...] = ("SAL", "SALES")
    sales_return_group_codes: tuple[str, ...] = ("SAL_RET", "SALES_RETURNS")
    purchase_group_codes: tuple[str, ...] = ("PUR", "PURCHASE")
    purchase_return_group_codes: tuple[str, ...] = ("PUR_RET", "PURCHASE_RETURNS")
    direct_expense_group_codes: tuple[str, ...] = ("DIR_EXP",)
    stock_group_codes: tuple[str, ...] = ("INV",)

    # Balance sheet -- by account group code
    capital_group_codes: tuple[str, ...] = ("CAP",)

    # Perpetual inventory COGS ledger
    cogs_ledger_codes: tuple[str, ...] = ("COGS",)
    cogs_name_markers: tuple[str, ...] = ("cost of goods sold",)

    # Manual carve-out: classified by net side, not by group
    round_off_markers: tuple[str, ...] = ("round",)

    # Tax ledgers
    gst_markers: tuple[str, ...] = ("GST",)
    tds_markers: tuple[str, ...] = ("TDS",)
    input_markers: tuple[str, ...] = ("INPUT",)
    output_markers: tuple[str, ...] = ("OUTPUT",)
    payable_markers: tuple[str, ...] = ("PAYABLE",)
    receivable_markers: tuple[str, ...] = ("RECEIVABLE",)

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, str):
                value = (value,)
            setattr(self, f.name, tuple(str(v) for v in value))

    @staticmethod
    def contains_marker(text: str, markers: tuple[str, ...]) -> bool:
        """Case-insensitive substring match against any marker."""
        lowered = text.lower()
        return any(m.lower() in lowered for m in markers)

    @staticmethod
    def has_tag(text: str, markers: tuple[str, ...]) -> bool:
        """
        Case-insensitive match of a tax tag against the words of ``text``.

        A word carries the tag when it starts or ends with it, so "CGST",
        "GST_IN" and "TDS-194C" match "GST"/"TDS" while "Kingston" does not.
        """
        words = [w for w in _WORD_SPLIT.split(text.lower()) if w]
        for marker in markers:
            tag = marker.lower()
            if any(w.startswith(tag) or w.endswith(tag) for w in words):
                return True
        return False


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls classification, tolerances, fiscal calendar and formatting.
    """

    # Classification rules
    classification: ClassificationRules = field(
        default_factory=ClassificationRules,
    )

    # Entity name shown on reports
    entity_name: str = "Company"

    # Currency of all amounts (single-currency books)
    currency: str = "INR"

    # Rounding precision for display
    display_precision: int = 2

    # |balance| at or below this is treated as zero and not listed
    zero_tolerance: Decimal = Decimal("0.009")

    # Trial balance passes when |Dr - Cr| is within this
    rounding_tolerance: Decimal = Decimal("0.01")

    # Balance sheet passes when |assets - liabilities| is below this
    balance_tolerance: Decimal = Decimal("1.0")

    # April for the Indian fiscal year
    fiscal_year_start_month: int = 4

    # Whether to include inactive ledgers and inventory items
    include_inactive: bool = False

    cogs_method: CogsMethod = CogsMethod.AUTO

    def __post_init__(self):
        for name in ("zero_tolerance", "rounding_tolerance", "balance_tolerance"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                setattr(self, name, Decimal(str(value)))
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")
        if not isinstance(self.cogs_method, CogsMethod):
            self.cogs_method = CogsMethod(str(self.cogs_method).lower())
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if len(self.currency) != 3:
            raise ValueError("currency must be a 3-letter ISO 4217 code")
        if not 1 <= self.fiscal_year_start_month <= 12:
            raise ValueError("fiscal_year_start_month must be between 1 and 12")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        data = dict(data)
        if "classification" in data and isinstance(data["classification"], dict):
            data["classification"] = ClassificationRules(**data["classification"])
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """
        Load config from a YAML file.

        The file may hold the fields at top level or under a ``reporting``
        key.
        """
        from ledger_kernel.loader import load_yaml_file

        data = load_yaml_file(Path(path))
        if isinstance(data.get("reporting"), dict):
            data = data["reporting"]
        return cls.from_dict(data)
