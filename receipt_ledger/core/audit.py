"""
Checks for fixed expenses that have not been recorded yet.
"""

from typing import Iterable, List

from .models import Expense, FixedExpense
from .utils import MonthLike, month_bounds, record_date


def is_recorded(fixed: FixedExpense, expenses: Iterable[Expense], month: MonthLike) -> bool:
    """
    True if an expense flagged as fixed, with description equal to the fixed
    expense's name, is dated within the month. A matching description alone
    is not enough. An expense with an unparseable date never matches.
    """
    start, end = month_bounds(month)
    for e in expenses:
        if not e.is_fixed or e.description != fixed.name:
            continue
        day = record_date(e.date)
        if day is not None and start <= day <= end:
            return True
    return False


def find_missing_fixed_expenses(fixed_expenses: Iterable[FixedExpense],
                                expenses: Iterable[Expense],
                                month: MonthLike) -> List[FixedExpense]:
    """
    Return the active fixed expenses with no recorded expense in the month,
    in configuration order. Inactive ones are never reported.
    """
    month_bounds(month)  # fail fast even when there is nothing to check
    expenses = list(expenses)
    return [f for f in fixed_expenses
            if f.is_active and not is_recorded(f, expenses, month)]


def missing_total(missing: Iterable[FixedExpense]) -> int:
    """Planned amount still to be paid for the missing fixed expenses."""
    return sum(f.amount for f in missing)
