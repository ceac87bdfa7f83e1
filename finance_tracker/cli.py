"""Command line entry point: dashboard summary, export and import."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from . import backup, config
from .auth import PinAuthenticator
from .errors import FinanceTrackerError
from .formatting import format_currency, format_period
from .models import Session, User
from .service import FinanceService
from .storage import Storage

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    today = date.today()
    parser = argparse.ArgumentParser(prog="finance-tracker", description=__doc__)
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory holding the JSON collections")
    parser.add_argument("--log-level", default=None, help="Logging level (default from FINTRACK_LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="Print the dashboard figures for a month")
    summary.add_argument("--month", type=int, default=today.month, help="Month number, 1-12")
    summary.add_argument("--year", type=int, default=today.year)

    export = sub.add_parser("export", help="Write a JSON backup of every collection")
    export.add_argument("--output-dir", type=Path, default=None)

    restore = sub.add_parser("import", help="Replace stored data with a JSON backup")
    restore.add_argument("file", type=Path)
    return parser


def _session(storage: Storage) -> Session:
    session = PinAuthenticator(storage).current_session()
    return session or Session(user=User.from_dict(config.LOCAL_USER))


def _print_summary(service: FinanceService, month: int, year: int) -> None:
    snapshot = service.refresh(month, year)
    summary = snapshot.summary()
    monthly = summary["monthly"]
    annual = summary["annual"]

    print(format_period(month, year))
    print(f"  Revenu Total      {format_currency(monthly['income'])}")
    print(f"  Dépenses Totales  {format_currency(monthly['expenses'])}")
    print(f"  Épargne           {format_currency(monthly['savings'])}")
    print(f"  Solde Net         {format_currency(monthly['net'])}")
    print(f"  Report            {format_currency(summary['rollover'])}")
    print(f"  Disponible        {format_currency(summary['available_liquidity'])}")
    print(f"Année {year}")
    print(f"  Entrées  {format_currency(annual['income'])}")
    print(f"  Dépenses {format_currency(annual['expenses'])}")
    print(f"  Épargne  {format_currency(annual['savings'])}")

    progress = snapshot.budget_progress()
    if not progress.empty:
        print("Budgets")
        for _, row in progress.iterrows():
            flag = " (dépassement)" if row["Over"] else (" (objectif atteint)" if row["Met"] else "")
            print(
                f"  {row['Category']:<20} {format_currency(row['Actual'])} / "
                f"{format_currency(row['Planned'])} {row['Percent']:.0f}%{flag}"
            )


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    config.configure_logging(args.log_level)

    storage = Storage(args.data_dir)
    config.ensure_data_directories(storage.data_dir)
    service = FinanceService(storage, _session(storage))

    try:
        if args.command == "summary":
            if not 1 <= args.month <= 12:
                print("Month must be between 1 and 12", file=sys.stderr)
                return 1
            _print_summary(service, args.month - 1, args.year)
        elif args.command == "export":
            path = backup.write_backup(storage, args.output_dir)
            print(f"Sauvegarde écrite: {path}")
        elif args.command == "import":
            counts = service.import_data(backup.read_backup(args.file))
            print("Données importées avec succès !")
            for name, count in counts.items():
                print(f"  {name}: {count}")
    except FinanceTrackerError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
