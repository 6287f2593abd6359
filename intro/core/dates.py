"""Date conversion into the day-month-year form used in Singapore and Malaysia."""

from __future__ import annotations

import re
from dataclasses import dataclass


MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sept", "Oct", "Nov", "Dec",
)

# Year first only; tried in order
_DATE_PATTERNS = (
    re.compile(r"(\d{4})\.(\d{1,2})\.(\d{1,2})", re.ASCII),  # 2025.10.3
    re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})", re.ASCII),  # 2025-10-03
    re.compile(r"(\d{4})年(\d{1,2})月(\d{1,2})日", re.ASCII),  # 2025年10月3日
)

DECORATION = "✨ {date} | 更新记录 ✨"


@dataclass(frozen=True)
class ParsedDate:
    year: int
    month: int
    day: int


def parse_date(text: str | None) -> ParsedDate | None:
    """Parse ``Y.M.D``, ``Y-M-D`` or ``Y年M月D日`` into a :class:`ParsedDate`.

    Only month 1-12 and day 1-31 are checked; ``2025-2-31`` is accepted.
    Returns ``None`` for anything else.
    """
    if not text:
        return None
    s = text.strip()
    for pattern in _DATE_PATTERNS:
        m = pattern.fullmatch(s)
        if not m:
            continue
        year, month, day = (int(g) for g in m.groups())
        if 1 <= month <= 12 and 1 <= day <= 31:
            return ParsedDate(year, month, day)
    return None


def format_date(date: ParsedDate) -> str:
    return f"{date.day} {MONTH_ABBR[date.month - 1]} {date.year}"


def convert_date(text: str | None) -> str | None:
    parsed = parse_date(text)
    if parsed is None:
        return None
    return format_date(parsed)


def decorate(date_text: str) -> str:
    return DECORATION.format(date=date_text)
