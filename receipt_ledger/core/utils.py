"""
Utility functions and constants for receipt parsing and ledger building.
"""

import calendar
import re
import datetime as dt
from typing import List, Optional, Tuple, Union

# File type constants
TEXT_EXTS = {".txt"}
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp"}

# Pattern constants for parsing, in priority order
DATE_PATTERNS = [
    ("ymd_kanji", r"(\d{4})年(\d{1,2})月(\d{1,2})日"),          # YYYY年MM月DD日
    ("ymd", r"(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})"),             # YYYY/MM/DD or YYYY-MM-DD
    ("yy_md", r"(\d{2})[/\-](\d{1,2})[/\-](\d{1,2})"),           # YY/MM/DD
    ("md_yy", r"(\d{1,2})[/\-](\d{1,2})[/\-](\d{2})"),           # MM/DD/YY
    ("reiwa", r"令和(\d{1,2})年(\d{1,2})月(\d{1,2})日"),          # 令和N年MM月DD日
]

REIWA_OFFSET = 2018

YEN = r"[¥￥]"
YEN_NUMBER = r"(\d{1,3}(?:,\d{3})+(?!\d)|\d+)"

TOTAL_KEYWORDS = ["合計金額", "お買上げ合計", "総合計", "合計", "お会計"]

AMOUNT_PATTERNS = [
    # Labeled totals (most reliable)
    ("labeled", r"(?:" + "|".join(TOTAL_KEYWORDS) + r").*?" + YEN + YEN_NUMBER),
    # Last yen amount on a line
    ("trailing", YEN + YEN_NUMBER + r"[^\d]*$"),
    # Any yen amount
    ("any", YEN + YEN_NUMBER),
]

FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")

MonthLike = Union[str, Tuple[int, int], dt.date]


def normalize_text(s: str) -> str:
    """Strip all whitespace and convert full-width digits to ASCII."""
    return re.sub(r"\s+", "", s or "").translate(FULLWIDTH_DIGITS)


def normalize_amount(s: str) -> Optional[int]:
    """Normalize a comma-grouped amount string to int."""
    if not s:
        return None
    s = s.replace(",", "")
    try:
        return int(s)
    except ValueError:
        return None


def parse_iso_date(value: str) -> dt.date:
    """Parse a YYYY-MM-DD string; raises ValueError on anything else."""
    return dt.datetime.strptime(value, "%Y-%m-%d").date()


def record_date(value) -> Optional[dt.date]:
    """Date of a stored record, or None when it is not a valid YYYY-MM-DD string."""
    try:
        return parse_iso_date(value)
    except (TypeError, ValueError):
        return None


def parse_month(month: MonthLike) -> Tuple[int, int]:
    """
    Interpret a month selector as a (year, month) pair.

    Accepts "YYYY-MM", a (year, month) tuple or a date (its day is ignored).
    Raises ValueError for anything that is not a valid calendar month.
    """
    if isinstance(month, dt.date):
        return month.year, month.month

    if isinstance(month, str):
        m = re.fullmatch(r"(\d{4})-(\d{1,2})", month.strip())
        if not m:
            raise ValueError(f"Invalid month {month!r}: expected YYYY-MM")
        year, mon = int(m.group(1)), int(m.group(2))
    elif isinstance(month, tuple) and len(month) == 2:
        year, mon = month
        if not isinstance(year, int) or not isinstance(mon, int):
            raise ValueError(f"Invalid month {month!r}: year and month must be integers")
    else:
        raise ValueError(f"Invalid month {month!r}: expected YYYY-MM or (year, month)")

    if not 1 <= mon <= 12 or not dt.MINYEAR <= year <= dt.MAXYEAR:
        raise ValueError(f"Invalid month {month!r}: out of range")
    return year, mon


def month_bounds(month: MonthLike) -> Tuple[dt.date, dt.date]:
    """Return the first and last day of the month (both inclusive)."""
    year, mon = parse_month(month)
    last_day = calendar.monthrange(year, mon)[1]
    return dt.date(year, mon, 1), dt.date(year, mon, last_day)


def days_in_month(month: MonthLike) -> List[dt.date]:
    """Every day of the month, in order."""
    start, end = month_bounds(month)
    return [start + dt.timedelta(days=i) for i in range((end - start).days + 1)]


def format_month(month: MonthLike) -> str:
    year, mon = parse_month(month)
    return f"{year:04d}-{mon:02d}"


def get_current_month() -> str:
    """Return current month as YYYY-MM (e.g., 2025-03)."""
    return dt.date.today().strftime("%Y-%m")


def money_fmt(v: Optional[int]) -> str:
    """Format amount as yen."""
    if v is None:
        return ""
    sign = "-" if v < 0 else ""
    return f"{sign}¥{abs(v):,}"
