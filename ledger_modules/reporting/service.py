"""
Reporting Module Service (``ledger_modules.reporting.service``).

Responsibility
--------------
Orchestrates statement generation -- trial balance, trading and profit &
loss, balance sheet and ledger statement -- by bridging a tenant's
``LedgerRepository`` to the pure transformation functions in
``statements.py``.  This is a **read-only** service.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``ReportingService`` is the sole public
entry point for statement generation.  Constructor: ``repository`` +
``clock`` + ``config``.  The repository is the tenant context; nothing
here reads ambient tenant state.

Invariants enforced
-------------------
* Read-only -- no mutations through the repository.
* One aggregation query per temporal filter, never one per ledger.
* All monetary amounts use ``Decimal`` -- NEVER ``float``.
* Default dates come from the injected clock, so runs are reproducible.

Failure modes
-------------
* Repository / SQLAlchemy failure  -> exception propagates unchanged.
* Unknown ledger for a statement  -> ``LedgerNotFoundError``.
* Ledger with an unknown account group  -> skipped and logged.
* Trial balance or balance sheet imbalance  -> reported in the DTO, never
  raised (balance sheet imbalance is additionally logged at WARNING).
* Inverted date range  -> empty period, zero-valued report.

Audit relevance
---------------
Structured log events are emitted for every report generation, carrying
report type, period and headline figures.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.repository import LedgerRepository
from ledger_kernel.domain.values import DateWindow, fiscal_year_start
from ledger_kernel.exceptions import LedgerNotFoundError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_modules.inventory.valuation import StockValuation, value_stock
from ledger_modules.reporting.balances import resolve_signed_balance
from ledger_modules.reporting.classifier import (
    ChartClassification,
    TradingRole,
    classify_chart,
    classify_ledger,
)
from ledger_modules.reporting.config import ReportingConfig
from ledger_modules.reporting.models import (
    BalanceSheetReport,
    LedgerStatementReport,
    ProfitLossReport,
    ReportMetadata,
    ReportType,
    TrialBalanceReport,
)
from ledger_modules.reporting.statements import (
    build_balance_sheet,
    build_ledger_statement,
    build_profit_loss,
    build_trial_balance,
    stock_ledger_balances,
)

logger = get_logger("modules.reporting.service")


class ReportingService:
    """
    Financial statement generation service.

    Contract
    --------
    * Every public method returns a typed report DTO.
    * All methods are **read-only**.

    Guarantees
    ----------
    * Report generation delegates to pure transformation functions in
      ``statements.py``; no financial logic lives in this class.
    * Clock is injectable for deterministic testing.

    Non-goals
    ---------
    * Does NOT resolve tenants or open sessions; the caller hands in a
      repository already scoped to one tenant.
    """

    def __init__(
        self,
        repository: LedgerRepository,
        clock: Clock | None = None,
        config: ReportingConfig | None = None,
    ):
        self._repository = repository
        self._clock = clock or SystemClock()
        self._config = config or ReportingConfig.with_defaults()

        logger.info(
            "reporting_service_initialized",
            extra={
                "entity_name": self._config.entity_name,
                "currency": self._config.currency,
                "repository": type(repository).__name__,
            },
        )

    @property
    def config(self) -> ReportingConfig:
        return self._config

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _context(self, report_type: ReportType):
        return LogContext.bind(
            tenant_id=self._repository.tenant_id,
            report_type=report_type.value,
        )

    def _classify(self) -> ChartClassification:
        """Load and classify the chart of accounts once per report."""
        return classify_chart(
            self._repository.account_groups(),
            self._repository.ledgers(include_inactive=self._config.include_inactive),
            self._config.classification,
        )

    def _build_metadata(
        self,
        report_type: ReportType,
        as_on_date: date | None = None,
        period_start: date | None = None,
        period_end: date | None = None,
    ) -> ReportMetadata:
        """Build report metadata with injected clock timestamp."""
        return ReportMetadata(
            report_type=report_type,
            entity_name=self._config.entity_name,
            currency=self._config.currency,
            generated_at=self._clock.now().isoformat(),
            as_on_date=as_on_date,
            period_start=period_start,
            period_end=period_end,
            tenant_id=self._repository.tenant_id,
        )

    def _fiscal_year_start(self, as_on: date) -> date:
        return fiscal_year_start(as_on, self._config.fiscal_year_start_month)

    def _value_stock(
        self,
        classification: ChartClassification,
        period_start: date,
        period_end: date,
    ) -> StockValuation:
        items = self._repository.inventory_items(
            include_inactive=self._config.include_inactive,
        )
        stock_ledgers = []
        has_stock_ledgers = any(
            c.role == TradingRole.STOCK for c in classification.ledgers
        )
        if not items and has_stock_ledgers:
            stock_ledgers = stock_ledger_balances(
                classification,
                self._repository.movements(DateWindow.before(period_start)),
                self._repository.movements(DateWindow.as_on(period_end)),
            )
        return value_stock(items, stock_ledgers)

    def _profit_loss(
        self,
        classification: ChartClassification,
        from_date: date,
        to_date: date,
    ) -> tuple[ProfitLossReport, StockValuation]:
        movements = self._repository.movements(DateWindow.between(from_date, to_date))
        stock = self._value_stock(classification, from_date, to_date)
        metadata = self._build_metadata(
            ReportType.PROFIT_LOSS,
            as_on_date=to_date,
            period_start=from_date,
            period_end=to_date,
        )
        report = build_profit_loss(classification, movements, stock, self._config, metadata)
        return report, stock

    # =========================================================================
    # Public API
    # =========================================================================

    def trial_balance(
        self,
        as_on_date: date | None = None,
        from_date: date | None = None,
    ) -> TrialBalanceReport:
        """
        Generate a trial balance.

        Args:
            as_on_date: Cutoff date (defaults to today).
            from_date: If given, movement is taken from this date through
                the cutoff instead of from the beginning of time.  Opening
                balances are always included.

        Returns:
            TrialBalanceReport with totals and the Dr/Cr difference.
        """
        as_on = as_on_date or self._clock.today()
        if from_date is not None:
            window = DateWindow.between(from_date, as_on)
        else:
            window = DateWindow.as_on(as_on)

        with self._context(ReportType.TRIAL_BALANCE):
            classification = self._classify()
            movements = self._repository.movements(window)
            metadata = self._build_metadata(
                ReportType.TRIAL_BALANCE,
                as_on_date=as_on,
                period_start=from_date,
                period_end=as_on,
            )
            report = build_trial_balance(classification, movements, self._config, metadata)

            logger.info(
                "trial_balance_generated",
                extra={
                    "as_on_date": as_on.isoformat(),
                    "window": window.describe(),
                    "line_count": len(report.lines),
                    "total_debit": str(report.total_debit),
                    "total_credit": str(report.total_credit),
                    "is_balanced": report.is_balanced,
                },
            )
        return report

    def profit_loss(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> ProfitLossReport:
        """
        Generate the trading and profit & loss account.

        Args:
            from_date: Period start (defaults to the fiscal year start of
                ``to_date``).
            to_date: Period end (defaults to today).
        """
        to = to_date or self._clock.today()
        start = from_date or self._fiscal_year_start(to)

        with self._context(ReportType.PROFIT_LOSS):
            classification = self._classify()
            report, _ = self._profit_loss(classification, start, to)

            logger.info(
                "profit_loss_generated",
                extra={
                    "period_start": start.isoformat(),
                    "period_end": to.isoformat(),
                    "cogs_method": report.totals.cogs_method.value,
                    "net_sales": str(report.totals.net_sales),
                    "gross_profit": str(report.totals.gross_profit),
                    "net_profit": str(report.totals.net_profit),
                },
            )
        return report

    def balance_sheet(self, as_on_date: date | None = None) -> BalanceSheetReport:
        """
        Generate the balance sheet.

        The current fiscal year's profit or loss (fiscal year start to
        ``as_on_date``) is folded into liabilities and equity.

        Returns:
            BalanceSheetReport with the assets vs. liabilities difference.
        """
        as_on = as_on_date or self._clock.today()
        fy_start = self._fiscal_year_start(as_on)

        with self._context(ReportType.BALANCE_SHEET):
            classification = self._classify()
            profit_loss, stock = self._profit_loss(classification, fy_start, as_on)
            movements = self._repository.movements(DateWindow.as_on(as_on))
            metadata = self._build_metadata(
                ReportType.BALANCE_SHEET,
                as_on_date=as_on,
                period_start=fy_start,
                period_end=as_on,
            )
            report = build_balance_sheet(
                classification, movements, profit_loss, stock, self._config, metadata,
            )

            logger.info(
                "balance_sheet_generated",
                extra={
                    "as_on_date": as_on.isoformat(),
                    "fiscal_year_start": fy_start.isoformat(),
                    "total_assets": str(report.total_assets),
                    "total_liabilities": str(report.total_liabilities),
                    "is_balanced": report.is_balanced,
                },
            )
            if not report.is_balanced:
                logger.warning(
                    "balance_sheet_unbalanced",
                    extra={
                        "as_on_date": as_on.isoformat(),
                        "difference": str(report.difference),
                    },
                )
        return report

    def ledger_statement(
        self,
        ledger_id: UUID,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> LedgerStatementReport:
        """
        Generate a running-balance statement for one ledger.

        Args:
            ledger_id: Ledger to report on.
            from_date: Period start (defaults to the fiscal year start of
                ``to_date``).
            to_date: Period end (defaults to today).

        Raises:
            LedgerNotFoundError: if the ledger does not exist.
        """
        to = to_date or self._clock.today()
        start = from_date or self._fiscal_year_start(to)

        with self._context(ReportType.LEDGER_STATEMENT):
            ledger = self._repository.get_ledger(ledger_id)
            if ledger is None:
                raise LedgerNotFoundError(str(ledger_id))

            group = next(
                (g for g in self._repository.account_groups()
                 if g.group_id == ledger.account_group_id),
                None,
            )
            if group is None:
                logger.warning(
                    "ledger_group_unresolved",
                    extra={
                        "ledger_id": str(ledger.ledger_id),
                        "ledger_code": ledger.code,
                        "account_group_id": str(ledger.account_group_id),
                    },
                )
            classified = classify_ledger(ledger, group, self._config.classification)

            prior = self._repository.movements(DateWindow.before(start))
            opening = resolve_signed_balance(classified, prior.get(ledger.ledger_id))
            entries = self._repository.statement_entries(
                ledger.ledger_id, DateWindow.between(start, to),
            )
            metadata = self._build_metadata(
                ReportType.LEDGER_STATEMENT,
                as_on_date=to,
                period_start=start,
                period_end=to,
            )
            report = build_ledger_statement(classified, opening, entries, metadata)

            logger.info(
                "ledger_statement_generated",
                extra={
                    "ledger_code": ledger.code,
                    "period_start": start.isoformat(),
                    "period_end": to.isoformat(),
                    "entry_count": report.summary.entry_count,
                    "closing_balance": str(report.summary.closing_balance),
                },
            )
        return report
