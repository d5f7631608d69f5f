"""
Watchlist Screener

Driver around the parser and the rule evaluator: locates the watchlist
table, skips rows that are still loading, evaluates ready rows with an
explicitly passed rule set and reuses cached results for rows whose
content fingerprint has not changed since the previous pass.

Scheduling (when to re-screen) is left to the caller.
"""
import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd
from bs4.element import Tag

from modules.ruleset import DEFAULT_RULESET_ID, NUMERIC_FIELDS, EvaluationResult, StockRecord, evaluate, get_ruleset
from modules.table_parser import (
    extract_headers,
    find_watchlist_table,
    body_rows,
    is_placeholder_row,
    is_row_ready,
    is_table_ready,
    parse_row,
)

logger = logging.getLogger(__name__)


def record_fingerprint(record: StockRecord, ruleset_id: str) -> str:
    """SHA-256 over the key-sorted record and the rule-set id."""
    payload = json.dumps({'ruleset': ruleset_id, 'record': record.to_dict()}, sort_keys=True)
    return hashlib.sha256(payload.encode('utf-8')).hexdigest()


@dataclass
class ScreenReport:
    ruleset_id: str
    results: List[EvaluationResult] = field(default_factory=list)
    evaluated: int = 0
    skipped: int = 0
    not_ready: int = 0
    table_found: bool = True
    table_ready: bool = True

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.entry_ready)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    def summary(self) -> Dict:
        return {
            'ruleset_id': self.ruleset_id,
            'table_found': self.table_found,
            'table_ready': self.table_ready,
            'total': len(self.results),
            'passed': self.passed,
            'failed': self.failed,
            'evaluated': self.evaluated,
            'skipped': self.skipped,
            'not_ready': self.not_ready,
        }


class WatchlistScreener:
    """Screens watchlist tables, caching results per symbol by fingerprint."""

    def __init__(self):
        self._cache: Dict[str, Tuple[str, EvaluationResult]] = {}

    def reset(self):
        """Forget cached results (next pass re-evaluates every row)."""
        self._cache.clear()

    def screen_html(self, markup: Union[str, Tag], ruleset_id: Optional[str] = DEFAULT_RULESET_ID,
                    force: bool = False) -> ScreenReport:
        table = find_watchlist_table(markup)
        if table is None:
            logger.info("No watchlist table found")
            return ScreenReport(ruleset_id=get_ruleset(ruleset_id).id, table_found=False, table_ready=False)
        return self.screen_table(table, ruleset_id, force=force)

    def screen_table(self, table: Tag, ruleset_id: Optional[str] = DEFAULT_RULESET_ID,
                     force: bool = False) -> ScreenReport:
        """
        Screen every row of a watchlist table.

        Args:
            table: The <table> element.
            ruleset_id: Rule set to apply; unknown ids use the default.
            force: Re-evaluate rows even if their fingerprint is unchanged.
        """
        resolved_id = get_ruleset(ruleset_id).id
        report = ScreenReport(ruleset_id=resolved_id)

        if not is_table_ready(table):
            logger.info("Watchlist table not ready")
            report.table_ready = False
            return report

        headers = extract_headers(table)
        logger.debug(f"Headers: {headers}")

        for row in body_rows(table):
            if is_placeholder_row(row):
                continue
            if not is_row_ready(row):
                report.not_ready += 1
                continue

            record = parse_row(row, headers)
            if not record.symbol:
                report.not_ready += 1
                continue

            fingerprint = record_fingerprint(record, resolved_id)
            cached = self._cache.get(record.symbol)
            if not force and cached is not None and cached[0] == fingerprint:
                report.skipped += 1
                report.results.append(cached[1])
                continue

            result = evaluate(record, resolved_id)
            self._cache[record.symbol] = (fingerprint, result)
            report.evaluated += 1
            report.results.append(result)

            logger.debug(
                f"{record.symbol}: entry_ready={result.entry_ready} score={result.score} "
                f"failed={[c.code for c in result.conditions if not c.passed]}"
            )

        logger.info(
            f"Processed {report.evaluated + report.skipped} stocks: {report.passed} passed, "
            f"{report.failed} failed, {report.skipped} unchanged, {report.not_ready} not ready ({resolved_id})"
        )
        return report


def results_to_frame(results: List[EvaluationResult]) -> pd.DataFrame:
    """Flatten results into a DataFrame ranked by entry readiness, then score."""
    columns = ['symbol', 'ruleset_id', 'entry_ready', 'score', 'failed'] + list(NUMERIC_FIELDS)
    rows = []
    for result in results:
        row = {
            'symbol': result.symbol,
            'ruleset_id': result.ruleset_id,
            'entry_ready': result.entry_ready,
            'score': result.score,
            'failed': ','.join(c.code for c in result.conditions if not c.passed),
        }
        for name in NUMERIC_FIELDS:
            row[name] = getattr(result.record, name)
        rows.append(row)

    df = pd.DataFrame(rows, columns=columns)
    if df.empty:
        return df
    return df.sort_values(['entry_ready', 'score', 'symbol'], ascending=[False, False, True]).reset_index(drop=True)
