"""
Value Normalizer Module

Turns the textual numbers rendered in the watchlist table into floats.

Stockbit formats:
- "-" or empty cell        -> None (no data, not zero)
- "(1,234.5)"              -> negative value
- "45.57 B" / "12.3M"      -> scaled by 1e9 / 1e6
- "1,234"                  -> thousands separators dropped
"""
import math
import re
from typing import Optional

NULL_PLACEHOLDERS = ('', '-')

# Suffixes are matched case-sensitively, uppercase only
UNIT_MULTIPLIERS = {
    'B': 1_000_000_000,
    'M': 1_000_000,
}

_NUMBER_RE = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$')


def _split_unit(text: str):
    """Strip a trailing unit suffix (optionally preceded by one whitespace character)."""
    for suffix, multiplier in UNIT_MULTIPLIERS.items():
        if text.endswith(suffix):
            stripped = text[:-len(suffix)]
            if stripped[-1:].isspace():
                stripped = stripped[:-1]
            return stripped, multiplier
    return text, 1


def normalize(raw) -> Optional[float]:
    """
    Normalize a raw cell value into a finite float.

    Args:
        raw: Cell text. None and plain numbers are accepted as well.

    Returns:
        The parsed value, or None when the cell carries no usable number.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None
    if not isinstance(raw, str):
        return None

    trimmed = raw.strip()
    if trimmed in NULL_PLACEHOLDERS:
        return None

    is_negative = len(trimmed) >= 2 and trimmed.startswith('(') and trimmed.endswith(')')
    cleaned = trimmed[1:-1].strip() if is_negative else trimmed
    cleaned = cleaned.replace(',', '')
    cleaned, multiplier = _split_unit(cleaned)

    if not _NUMBER_RE.match(cleaned):
        return None

    value = float(cleaned) * multiplier
    if not math.isfinite(value):
        return None

    if is_negative:
        return -abs(value)
    # Avoid "-0.0" leaking out of inputs such as "-0"
    return value + 0.0
