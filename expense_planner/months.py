"""Month keys: the ``"YYYY-MM"`` strings used as the time axis everywhere.

Zero padding makes lexicographic order coincide with chronological order, so
keys are compared as plain strings.
"""

import re
from datetime import date
from typing import Tuple

MONTH_KEY_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

MONTH_LABELS: Tuple[str, ...] = (
    "jan", "fev", "mar", "abr", "mai", "jun",
    "jul", "ago", "set", "out", "nov", "dez",
)


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def compare(a: str, b: str) -> int:
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def is_month_key(value) -> bool:
    return isinstance(value, str) and MONTH_KEY_RE.match(value) is not None


def parse_month_key(key: str) -> Tuple[int, int]:
    if not is_month_key(key):
        raise ValueError(f"Invalid month key: {key!r}")
    year, month = key.split("-")
    return int(year), int(month)


def month_key_of(d: date) -> str:
    return month_key(d.year, d.month)


def shift_month(key: str, delta: int) -> str:
    year, month = parse_month_key(key)
    index = year * 12 + (month - 1) + delta
    return month_key(index // 12, index % 12 + 1)


def months_of_year(year: int) -> Tuple[str, ...]:
    return tuple(month_key(year, m) for m in range(1, 13))


def trailing_months(anchor: str, count: int) -> Tuple[str, ...]:
    """The ``count`` months ending at ``anchor`` (inclusive), oldest first."""
    return tuple(shift_month(anchor, -offset) for offset in range(count - 1, -1, -1))


def month_label(key: str) -> str:
    _, month = parse_month_key(key)
    return MONTH_LABELS[month - 1]
