"""
Run a log file through the parser and correlator and print a report.

Usage:
    python tools/run_log_analysis.py path/to/app.log [--search TEXT] [--limit N]
"""

import argparse
import os
import sys

sys.path.append(os.getcwd())

from logpair.analysis import LogAnalysisSession
from logpair.common.config import get_config
from logpair.common.logging_setup import configure_logging


def main():
    arg_parser = argparse.ArgumentParser(description="Correlate request/response transactions in a log file")
    arg_parser.add_argument("path", help="Log file to analyse")
    arg_parser.add_argument("--search", default="", help="Only show transactions containing this text")
    arg_parser.add_argument("--limit", type=int, default=20, help="Transactions to print")
    args = arg_parser.parse_args()

    config = get_config()
    configure_logging(config.log_level)

    with open(args.path, "r", encoding="utf-8", errors="replace") as f:
        raw_logs = f.read()

    session = LogAnalysisSession(config=config)
    session.analyze(raw_logs)

    stats = session.stats()
    print("\n" + "=" * 60)
    print(f"LOG ANALYSIS - {args.path}")
    print("=" * 60)
    print(f"   Records:  {stats.total}")
    print(f"   Errors:   {stats.errors}")
    print(f"   Warnings: {stats.warnings}")
    print(f"   Info:     {stats.info}")
    print(f"   Debug:    {stats.debug}")
    print(f"   Tags:     {', '.join(session.tags[:15]) or '-'}")

    page = session.query_transactions(search=args.search, page=1, page_size=args.limit)
    tx_stats = session.transaction_stats()

    print(f"\nTRANSACTIONS ({tx_stats.total} total, avg {tx_stats.avg_duration_ms} ms):")
    for idx, tx in enumerate(page.items, 1):
        started = tx.timestamp.isoformat() if tx.timestamp else "?"
        print(f"   {idx}. [{tx.status.value.upper():7s}] {started} {tx.duration_ms:>7d} ms "
              f"via {tx.match_basis.value:4s} {tx.key_info}")

    if page.total_items > len(page.items):
        print(f"   ... {page.total_items - len(page.items)} more")


if __name__ == "__main__":
    main()
