#!/usr/bin/env python3
"""
View financial reports from a YAML dataset or a ledger database.

Prints one report as JSON: the presentation shape by default, or the raw
report dataclasses with --raw.

Usage:
    python3 scripts/view_reports.py trial-balance --dataset tests/fixtures/sample_dataset.yaml
    python3 scripts/view_reports.py profit-loss --dataset data.yaml --from 2024-04-01 --to 2025-03-31
    python3 scripts/view_reports.py balance-sheet --db-url sqlite:///books.db --as-on 2025-03-31 --style tally
    python3 scripts/view_reports.py ledger-statement --dataset data.yaml --ledger CASH \\
        --from 2025-01-01 --to 2025-01-31
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

REPORTS = ("trial-balance", "profit-loss", "balance-sheet", "ledger-statement")


def _date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print a financial statement as JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("report", choices=REPORTS, help="Report to generate")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--dataset", type=Path, help="YAML dataset file")
    source.add_argument("--db-url", type=str, help="Database URL")
    parser.add_argument("--config", type=Path, help="Reporting config YAML")
    parser.add_argument("--as-on", type=_date, help="As-on date (trial balance, balance sheet)")
    parser.add_argument("--from", dest="from_date", type=_date, help="Period start")
    parser.add_argument("--to", dest="to_date", type=_date, help="Period end")
    parser.add_argument("--ledger", type=str, help="Ledger code or id (ledger statement)")
    parser.add_argument(
        "--style", choices=("detailed", "tally"), default="detailed",
        help="P&L / balance sheet layout",
    )
    parser.add_argument("--raw", action="store_true", help="Print the report dataclasses")
    parser.add_argument("--verbose", action="store_true", help="Emit structured logs to stderr")
    return parser


def _resolve_ledger_id(repository, ref: str):
    from uuid import UUID

    from ledger_kernel.exceptions import LedgerNotFoundError

    ledger = repository.get_ledger_by_code(ref)
    if ledger is not None:
        return ledger.ledger_id
    try:
        return UUID(ref)
    except ValueError:
        raise LedgerNotFoundError(ref) from None


def run(args, repository) -> object:
    from ledger_modules.reporting.config import ReportingConfig
    from ledger_modules.reporting.models import ReportStyle
    from ledger_modules.reporting.presentation import (
        present_balance_sheet,
        present_ledger_statement,
        present_profit_loss,
        present_trial_balance,
    )
    from ledger_modules.reporting.service import ReportingService
    from ledger_modules.reporting.statements import render_to_dict

    config = ReportingConfig.from_yaml(args.config) if args.config else ReportingConfig()
    service = ReportingService(repository, config=config)
    style = ReportStyle(args.style)
    precision = config.display_precision

    if args.report == "trial-balance":
        report = service.trial_balance(args.as_on, args.from_date)
        shaped = present_trial_balance(report, precision)
    elif args.report == "profit-loss":
        report = service.profit_loss(args.from_date, args.to_date)
        shaped = present_profit_loss(report, style, precision)
    elif args.report == "balance-sheet":
        report = service.balance_sheet(args.as_on)
        shaped = present_balance_sheet(report, style, precision)
    else:
        if not args.ledger:
            raise SystemExit("ledger-statement requires --ledger")
        ledger_id = _resolve_ledger_id(repository, args.ledger)
        report = service.ledger_statement(ledger_id, args.from_date, args.to_date)
        shaped = present_ledger_statement(report, precision)

    return render_to_dict(report) if args.raw else shaped


def main() -> int:
    args = build_parser().parse_args()

    from ledger_kernel.exceptions import LedgerKernelError
    from ledger_kernel.logging_config import configure_logging

    if args.verbose:
        configure_logging(level=logging.DEBUG)
    else:
        logging.disable(logging.CRITICAL)

    try:
        if args.dataset:
            from ledger_kernel.loader import load_dataset

            output = run(args, load_dataset(args.dataset))
        else:
            from ledger_kernel.db.engine import init_engine_from_url, session_scope
            from ledger_kernel.selectors.ledger_selector import LedgerSelector

            init_engine_from_url(args.db_url, echo=False)
            with session_scope() as session:
                output = run(args, LedgerSelector(session))
    except LedgerKernelError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
