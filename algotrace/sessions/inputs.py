"""
Lenient parsing of user-entered values.

Anything that does not parse returns None (or is skipped in lists), so
sessions can ignore bad input without logging anything.
"""

import math
import re
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

_TABLE_ENTRY = re.compile(r"^\s*(.+?)\s*:\s*(\S+)\s*$")


def parse_number(raw: Any) -> Optional[Number]:
    """int or float from a number or numeric string; None otherwise."""
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        if value.is_integer():
            return int(value)
    return value


def parse_int(raw: Any) -> Optional[int]:
    """Integral value or None."""
    value = parse_number(raw)
    return value if isinstance(value, int) else None


def parse_values(raw: Any) -> List[int]:
    """Integers from a list or a comma/space separated string, skipping the rest."""
    if raw is None:
        return []
    items = re.split(r"[,\s]+", raw) if isinstance(raw, str) else list(raw)
    values = []
    for item in items:
        value = parse_int(item)
        if value is not None:
            values.append(value)
    return values


def parse_frequency_table(raw: Any) -> Optional[Dict[str, Number]]:
    """
    Symbol -> frequency table from a mapping or a "a:5, b:9" string.

    Entries with a non-positive or non-numeric frequency are skipped.
    Returns None when a string is not in table form at all.
    """
    if isinstance(raw, dict):
        entries = list(raw.items())
    elif isinstance(raw, str):
        parts = [part for part in raw.split(",") if part.strip()]
        matches = [_TABLE_ENTRY.match(part) for part in parts]
        if not parts or not all(matches):
            return None
        entries = [(m.group(1), m.group(2)) for m in matches]
    else:
        return None

    table: Dict[str, Number] = {}
    for symbol, frequency in entries:
        value = parse_number(frequency)
        if value is not None and value > 0:
            table[str(symbol)] = value
    return table
