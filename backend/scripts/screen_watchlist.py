"""Screen a saved Stockbit watchlist page.

Usage:
    python scripts/screen_watchlist.py watchlist.html --ruleset strict
"""
import os
import sys
import argparse
from typing import List, Optional

import pandas as pd

# Add parent directory to sys.path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from modules.ruleset import DEFAULT_RULESET_ID, RULESETS
from modules.screener import WatchlistScreener, results_to_frame
from modules.explain import format_value

DISPLAY_COLUMNS = [
    'symbol', 'entry_ready', 'score', 'failed',
    'net_foreign_flow', 'net_foreign_flow_ma10', 'foreign_buy_streak',
    'accum_dist_index', 'flow_value',
]
VALUE_COLUMNS = ['net_foreign_flow', 'net_foreign_flow_ma10', 'flow_value']


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Watchlist entry-readiness screener")
    parser.add_argument("html_file", help="Saved watchlist page (HTML)")
    parser.add_argument("--ruleset", default=DEFAULT_RULESET_ID,
                        help=f"Rule set id ({', '.join(RULESETS)}); unknown ids use {DEFAULT_RULESET_ID}")
    parser.add_argument("--only-ready", action="store_true", help="Show entry-ready rows only")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    with open(args.html_file, 'r', encoding='utf-8') as f:
        markup = f.read()

    report = WatchlistScreener().screen_html(markup, args.ruleset)
    if not report.table_found:
        print(f"[!] No watchlist table found in {args.html_file}")
        return 1
    if not report.table_ready:
        print("[!] Watchlist table is still loading, nothing to screen")
        return 1

    df = results_to_frame(report.results)
    if args.only_ready:
        df = df[df['entry_ready']]

    view = df[DISPLAY_COLUMNS].copy()
    for column in VALUE_COLUMNS:
        view[column] = view[column].map(lambda v: format_value(None if pd.isna(v) else v))

    print("=" * 60)
    print(f"RULESET: {report.ruleset_id}")
    print("=" * 60)
    print(view.to_string(index=False) if not view.empty else "(no rows)")
    print("-" * 60)
    print(f"{report.passed} passed, {report.failed} failed, {report.not_ready} not ready")
    return 0


if __name__ == "__main__":
    sys.exit(main())
