#!/usr/bin/env python3
"""
View revenue reports from persisted database data.

Connects to the database (assumes tables and data already exist --
run seed_data.py first) and prints the best profession and best clients
for a payment-date window.

Usage:
    python3 scripts/view_reports.py --start 2020-08-10 --end 2020-08-17
    python3 scripts/view_reports.py --start 2020-08-10 --end 2020-08-17 --limit 3
"""

import argparse
import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def main() -> int:
    parser = argparse.ArgumentParser(description="Best profession and best clients for a window.")
    parser.add_argument("--start", type=str, required=True, help="Window start YYYY-MM-DD")
    parser.add_argument("--end", type=str, required=True, help="Window end YYYY-MM-DD")
    parser.add_argument("--limit", type=str, default=None, help="Number of clients (default from settings)")
    parser.add_argument("--db-url", type=str, default=None, help="SQLAlchemy URL (defaults to settings)")
    args = parser.parse_args()

    logging.disable(logging.CRITICAL)

    from marketplace_config import get_active_settings
    from marketplace_kernel.db.engine import create_engine_from_url, create_session_factory, session_scope
    from marketplace_kernel.db.types import round_money
    from marketplace_kernel.domain.reporting_window import parse_date_window, resolve_limit
    from marketplace_kernel.exceptions import InvalidDateRangeError
    from marketplace_kernel.selectors.reporting_selector import ReportingSelector

    settings = get_active_settings()

    try:
        window = parse_date_window(args.start, args.end)
    except InvalidDateRangeError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 2
    limit = resolve_limit(args.limit, settings.best_clients_default_limit)

    try:
        engine = create_engine_from_url(args.db_url or settings.database_url)
    except Exception as exc:
        print(f"  ERROR: Could not connect: {exc}", file=sys.stderr)
        return 1

    factory = create_session_factory(engine)
    with session_scope(factory) as session:
        selector = ReportingSelector(session)
        best = selector.best_profession(window)
        clients = selector.best_clients(window, limit)

    print()
    print(f"  Window: {window.start.isoformat()} .. {window.end.isoformat()}")
    print()
    print("  BEST PROFESSION")
    if best is None:
        print("    (no paid jobs in window)")
    else:
        print(f"    {best.profession:<30} {round_money(best.earned):>12}")
    print()
    print(f"  BEST CLIENTS (top {limit})")
    if not clients:
        print("    (no paid jobs in window)")
    for row in clients:
        print(f"    {row.full_name:<30} {round_money(row.paid):>12}")
    print()

    engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
