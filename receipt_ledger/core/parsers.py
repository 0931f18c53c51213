"""
Parsers for extracting the date and total amount from receipt text.

Both extractors come in two flavours: parse_* returns None when nothing
usable is found, extract_* never fails and falls back to a default
(today's date, zero).
"""

import re
import datetime as dt
from enum import Enum
from typing import Callable, Dict, List, Optional

from .models import ReceiptFields
from .utils import DATE_PATTERNS, AMOUNT_PATTERNS, REIWA_OFFSET, normalize_amount, normalize_text


class AmountStrategy(str, Enum):
    """How to pick one amount out of several candidates at the same level."""
    MAX = "max"
    MIN = "min"
    LAST = "last"
    LABELED_ONLY = "labeled-only"


# Receipts usually print a subtotal before the total, so the largest wins by default
_SELECTORS: Dict[AmountStrategy, Callable[[List[int]], int]] = {
    AmountStrategy.MAX: max,
    AmountStrategy.MIN: min,
    AmountStrategy.LAST: lambda values: values[-1],
    AmountStrategy.LABELED_ONLY: max,
}


def _to_year_month_day(name: str, groups) -> tuple:
    a, b, c = (int(g) for g in groups)
    if name in ("ymd_kanji", "ymd"):
        return a, b, c
    if name == "yy_md":
        return 2000 + a, b, c
    if name == "md_yy":
        return 2000 + c, a, b
    if name == "reiwa":
        return REIWA_OFFSET + a, b, c
    raise ValueError(f"Unknown date pattern: {name}")


def parse_date(text: str) -> Optional[str]:
    """Extract a date from receipt text as YYYY-MM-DD, or None."""
    text = text or ""
    for name, pat in DATE_PATTERNS:
        # Only the first textual match of each pattern is considered
        m = re.search(pat, text)
        if not m:
            continue
        y, mo, d = _to_year_month_day(name, m.groups())
        try:
            return dt.date(y, mo, d).isoformat()
        except ValueError:
            continue
    return None


def extract_date(text: str, today: Optional[dt.date] = None) -> str:
    """Like parse_date, but falls back to today's date."""
    parsed = parse_date(text)
    if parsed:
        return parsed
    return (today or dt.date.today()).isoformat()


def parse_amount(text: str, strategy: AmountStrategy = AmountStrategy.MAX) -> Optional[int]:
    """
    Extract the total amount (in yen) from receipt text.

    Tries the labeled, trailing and plain yen patterns in that order. At the
    first level with a positive match, all matches at that level are reduced
    to one value by the strategy.

    Returns:
        The amount, or None if no positive yen amount is found
    """
    strategy = AmountStrategy(strategy)
    select = _SELECTORS[strategy]
    normalized = normalize_text(text)

    for name, pat in AMOUNT_PATTERNS:
        if strategy is AmountStrategy.LABELED_ONLY and name != "labeled":
            break
        values = []
        for m in re.finditer(pat, normalized, flags=re.MULTILINE):
            val = normalize_amount(m.group(1))
            if val and val > 0:
                values.append(val)
        if values:
            return select(values)

    return None


def extract_amount(text: str, strategy: AmountStrategy = AmountStrategy.MAX) -> int:
    """Like parse_amount, but falls back to 0."""
    return parse_amount(text, strategy) or 0


def resolve_receipt_fields(text: str, today: Optional[dt.date] = None,
                           strategy: AmountStrategy = AmountStrategy.MAX) -> ReceiptFields:
    """Parse date and amount independently from one receipt's text."""
    date = parse_date(text)
    amount = parse_amount(text, strategy)
    return ReceiptFields(
        date=date or (today or dt.date.today()).isoformat(),
        amount=amount or 0,
        date_found=date is not None,
        amount_found=amount is not None,
    )
