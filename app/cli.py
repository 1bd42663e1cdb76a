#!/usr/bin/env python3
"""
Finance Tracker CLI — statement import, dashboard figures, Excel export and API server.

USAGE:
  python -m app.cli seed --user alice                          # Default account + categories
  python -m app.cli import statement.csv --user alice          # Import into first account
  python -m app.cli import statement.xlsx --user alice --account <id>
  python -m app.cli import statement.xlsx --user alice --dry-run

  python -m app.cli summary --user alice                       # This month
  python -m app.cli summary --user alice --year 2024 --month 5
  python -m app.cli trends --user alice --months 12

  python -m app.cli export --user alice                        # Transactions workbook
  python -m app.cli export --user alice --what accounts --output ./accounts.xlsx

  python -m app.cli serve --port 8000                          # Start API server
"""
from __future__ import annotations

import argparse
import datetime as dt
import logging
import os
import sys
from pathlib import Path

from app.config import EXPORTS_FOLDER, STORE_FILE, CURRENCY_SYMBOLS, DEFAULT_CURRENCY
from app.data.store import DataStore
from app.data.schemas import DateWindow
from app.errors import FinanceTrackerError
from app.logging_setup import configure_logging

logger = logging.getLogger("app.cli")

SYMBOL = CURRENCY_SYMBOLS.get(DEFAULT_CURRENCY, "")


def _money(value) -> str:
    return f"{SYMBOL}{value:,.2f}"


def _open_store(args) -> DataStore:
    return DataStore(Path(args.store)).load()


def _build_window(args) -> DateWindow | None:
    if getattr(args, "year", None) and getattr(args, "month", None):
        return DateWindow.month(args.year, args.month)
    return None


def cmd_seed(args) -> int:
    """Create the default account and categories for a user."""
    store = _open_store(args)
    created = store.seed_defaults(args.user)
    print(f"Seeded {created['accounts']} account(s), {created['categories']} categories for {args.user}")
    return 0


def cmd_import(args) -> int:
    """Import a bank statement file."""
    from app.services.importer import import_statement, parse_statement

    path = Path(args.file)
    content = path.read_bytes()

    if args.dry_run:
        report = parse_statement(content, path.name)
        print(f"\n{path.name}: {report.total_rows} rows -> {len(report.transactions)} transactions "
              f"({report.skipped} skipped)\n")
        for t in report.transactions[:20]:
            sign = "+" if t.kind.value == "income" else "-"
            print(f"  {t.date:%d/%m/%Y}  {sign}{_money(t.amount):>14}  {t.description[:50]}")
        if len(report.transactions) > 20:
            print(f"  ... {len(report.transactions) - 20} more")
        return 0

    store = _open_store(args)
    result = import_statement(store, args.user, content, path.name, args.account)
    print(f"\nImported {result.imported} transactions into '{result.account.name}' "
          f"({result.report.skipped} rows skipped)\n")
    for reason, n in sorted(result.report.dropped.items()):
        print(f"  skipped {n:>4}  {reason}")
    return 0


def cmd_summary(args) -> int:
    """Print the dashboard header figures."""
    from app.analytics.aggregation import balance_summary, category_breakdown, current_month_window
    from app.analytics.common import savings_rate

    store = _open_store(args)
    window = _build_window(args) or current_month_window()
    txs = store.transactions(args.user)
    s = balance_summary(store.accounts(args.user), txs, window)

    print("\n" + "=" * 60)
    print(f"  {args.user} — {window.label}")
    print("=" * 60)
    print(f"  Total balance   {_money(s.total_balance):>18}")
    print(f"  Income          {_money(s.income):>18}")
    print(f"  Expenses        {_money(s.expenses):>18}")
    print(f"  Net             {_money(s.net):>18}")
    print(f"  Savings rate    {savings_rate(s.income, s.expenses):>17.1f}%")
    print(f"  Transactions    {s.transaction_count:>18}")

    rows = category_breakdown(txs, window, store.category_map(args.user))
    if rows:
        print("\n  EXPENSES BY CATEGORY")
        for r in rows:
            print(f"    {r.name[:30]:<32}{_money(r.total):>16}")
    print()
    return 0


def cmd_trends(args) -> int:
    """Print the trailing monthly income/expense series."""
    from app.analytics.aggregation import monthly_series

    store = _open_store(args)
    points = monthly_series(store.transactions(args.user), args.months)
    print(f"\n  {'Month':<8}{'Income':>16}{'Expenses':>16}{'Net':>16}")
    for p in points:
        print(f"  {p.label:<8}{_money(p.income):>16}{_money(p.expenses):>16}{_money(p.net):>16}")
    print()
    return 0


def cmd_export(args) -> int:
    """Write an Excel export for a user."""
    from app.reports import accounts_export, dashboard_report, transactions_export

    store = _open_store(args)
    window = _build_window(args)

    if args.what == "accounts":
        out = Path(args.output or EXPORTS_FOLDER / accounts_export.default_filename())
        accounts_export.generate_excel(store, args.user, out)
    elif args.what == "dashboard":
        out = Path(args.output or EXPORTS_FOLDER / f"dashboard_report_{dt.date.today():%Y-%m-%d}.xlsx")
        dashboard_report.generate_excel(store, args.user, out, window)
    else:
        out = Path(args.output or EXPORTS_FOLDER / transactions_export.default_filename())
        transactions_export.generate_excel(store, args.user, out, window)

    print(f"Export saved to: {out}")
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Finance Tracker API on {args.host}:{args.port}...")
    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=args.reload,
                timeout_keep_alive=65)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Finance Tracker — bank statement import and personal finance reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--store", default=str(STORE_FILE), help=f"Store file (default {STORE_FILE})")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING...")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    seed_parser = subparsers.add_parser("seed", help="Create default account and categories")
    seed_parser.add_argument("--user", required=True, help="User id")
    seed_parser.set_defaults(func=cmd_seed)

    import_parser = subparsers.add_parser("import", help="Import a bank statement (.xlsx, .xls, .csv)")
    import_parser.add_argument("file", help="Statement file")
    import_parser.add_argument("--user", required=True, help="User id")
    import_parser.add_argument("--account", default=None, help="Account id (default: first account)")
    import_parser.add_argument("--dry-run", action="store_true", help="Parse only, save nothing")
    import_parser.set_defaults(func=cmd_import)

    summary_parser = subparsers.add_parser("summary", help="Balance, income and expenses for a month")
    summary_parser.add_argument("--user", required=True, help="User id")
    summary_parser.add_argument("--year", type=int, choices=range(1, 10000), metavar="YEAR", help="Year")
    summary_parser.add_argument("--month", type=int, choices=range(1, 13), metavar="MONTH", help="Month (1-12)")
    summary_parser.set_defaults(func=cmd_summary)

    trends_parser = subparsers.add_parser("trends", help="Monthly income/expenses")
    trends_parser.add_argument("--user", required=True, help="User id")
    trends_parser.add_argument("--months", type=int, default=6, help="Trailing months (default 6)")
    trends_parser.set_defaults(func=cmd_trends)

    export_parser = subparsers.add_parser("export", help="Write an Excel export")
    export_parser.add_argument("--user", required=True, help="User id")
    export_parser.add_argument("--what", choices=["transactions", "accounts", "dashboard"],
                               default="transactions", help="Which workbook (default transactions)")
    export_parser.add_argument("--output", default=None, help="Output .xlsx path")
    export_parser.add_argument("--year", type=int, choices=range(1, 10000), metavar="YEAR", help="Year")
    export_parser.add_argument("--month", type=int, choices=range(1, 13), metavar="MONTH", help="Month (1-12)")
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (FinanceTrackerError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
