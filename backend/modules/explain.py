"""
Human-readable explanations for evaluation results: compact number
formatting and per-condition tooltips showing the values involved.
"""
from typing import Optional

from modules.ruleset import EvaluationResult, Predicate, get_ruleset

FIELD_LABELS = {
    'price': 'Price',
    'net_foreign_flow': 'Foreign',
    'net_foreign_flow_ma10': 'MA10',
    'net_foreign_flow_ma20': 'MA20',
    'one_week_foreign_flow': '1W Flow',
    'one_month_foreign_flow': '1M Flow',
    'foreign_buy_streak': 'Streak',
    'accum_dist_index': 'B.Accum/Dist',
    'flow_value': 'Bandar Value',
    'flow_value_ma10': 'Bandar MA10',
    'flow_value_ma20': 'Bandar MA20',
}

_SCALES = (
    (1_000_000_000_000, 'T'),
    (1_000_000_000, 'B'),
    (1_000_000, 'M'),
)


def format_value(value: Optional[float]) -> str:
    """Format large numbers for display, e.g. -3219880000000 -> "-3.2T"."""
    if value is None:
        return '-'
    abs_value = abs(value)
    sign = '-' if value < 0 else ''
    for scale, suffix in _SCALES:
        if abs_value >= scale:
            return f"{sign}{abs_value / scale:.1f}{suffix}"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def _format_field(name: str, value: Optional[float]) -> str:
    if value is None:
        return '-'
    if name == 'foreign_buy_streak':
        return f"{int(value)} days" if float(value).is_integer() else f"{value} days"
    if name == 'accum_dist_index':
        return f"{value:.2f}"
    return format_value(value)


def _find_predicate(code: str, ruleset_id: str) -> Optional[Predicate]:
    ruleset = get_ruleset(ruleset_id)
    for predicate in ruleset.predicates():
        if predicate.code == code:
            return predicate
    for item in ruleset.score_weights:
        if item.predicate.code == code:
            return item.predicate
    return None


def condition_tooltip(code: str, result: EvaluationResult) -> str:
    """
    Tooltip text for a condition or score code, with the record's actual values.

    Example:
        "F1: Net Foreign > Net Foreign MA10 (acceleration)\\nForeign: 177.7B vs MA10: -33.0B"
    """
    predicate = _find_predicate(code, result.ruleset_id)
    if predicate is None:
        return code

    record = result.record
    parts = [
        f"{FIELD_LABELS.get(name, name)}: {_format_field(name, getattr(record, name))}"
        for name in predicate.fields
    ]
    separator = ' vs ' if len(predicate.clauses) == 1 else ', '
    return f"{predicate.code}: {predicate.description}\n{separator.join(parts)}"
