"""
Query operations -- the engine's external interface.

Each operation takes the tenant's ``LedgerRepository`` explicitly, runs
the matching ``ReportingService`` method and returns the JSON-shaped
report dict.  Dates may be ``date`` objects or ISO strings; ledger ids
may be ``UUID`` or string.
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from ledger_kernel.domain.clock import Clock
from ledger_kernel.domain.repository import LedgerRepository
from ledger_kernel.exceptions import LedgerNotFoundError
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import ReportStyle
from ledger_modules.reporting.presentation import (
    present_balance_sheet,
    present_ledger_statement,
    present_profit_loss,
    present_trial_balance,
)
from ledger_modules.reporting.service import ReportingService

DateLike = date | str | None


def _to_date(value: DateLike) -> date | None:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _service(
    repository: LedgerRepository,
    config: ReportingConfig | None,
    clock: Clock | None,
) -> ReportingService:
    return ReportingService(repository, clock=clock, config=config)


def get_trial_balance(
    repository: LedgerRepository,
    as_on_date: DateLike = None,
    from_date: DateLike = None,
    *,
    config: ReportingConfig | None = None,
    clock: Clock | None = None,
) -> dict[str, Any]:
    service = _service(repository, config, clock)
    report = service.trial_balance(_to_date(as_on_date), _to_date(from_date))
    return present_trial_balance(report, service.config.display_precision)


def get_profit_loss(
    repository: LedgerRepository,
    from_date: DateLike = None,
    to_date: DateLike = None,
    style: ReportStyle | str = ReportStyle.DETAILED,
    *,
    config: ReportingConfig | None = None,
    clock: Clock | None = None,
) -> dict[str, Any]:
    service = _service(repository, config, clock)
    report = service.profit_loss(_to_date(from_date), _to_date(to_date))
    return present_profit_loss(report, ReportStyle(style), service.config.display_precision)


def get_balance_sheet(
    repository: LedgerRepository,
    as_on_date: DateLike = None,
    style: ReportStyle | str = ReportStyle.DETAILED,
    *,
    config: ReportingConfig | None = None,
    clock: Clock | None = None,
) -> dict[str, Any]:
    service = _service(repository, config, clock)
    report = service.balance_sheet(_to_date(as_on_date))
    return present_balance_sheet(report, ReportStyle(style), service.config.display_precision)


def get_ledger_statement(
    repository: LedgerRepository,
    ledger_id: UUID | str,
    from_date: DateLike = None,
    to_date: DateLike = None,
    *,
    config: ReportingConfig | None = None,
    clock: Clock | None = None,
) -> dict[str, Any]:
    service = _service(repository, config, clock)
    if not isinstance(ledger_id, UUID):
        try:
            ledger_id = UUID(str(ledger_id))
        except ValueError:
            raise LedgerNotFoundError(str(ledger_id)) from None
    report = service.ledger_statement(ledger_id, _to_date(from_date), _to_date(to_date))
    return present_ledger_statement(report, service.config.display_precision)
