"""
Cash journal construction.
"""

from typing import Iterable, List

from .models import DailySale, Expense, JournalEntry, JournalTotals, Transaction
from .utils import MonthLike, month_bounds, record_date

SALES_ACCOUNT_TITLE = "sales revenue"
SALES_DESCRIPTION = "cash sales"


def expense_to_transaction(expense: Expense) -> Transaction:
    """An expense counts as income only when explicitly marked (refunds, corrections)."""
    return Transaction(
        id=expense.id,
        date=expense.date,
        is_income=bool(expense.is_income),
        amount=expense.amount,
        account_title=expense.account_title or "",
        description=expense.description,
    )


def sale_to_transaction(sale: DailySale) -> Transaction:
    return Transaction(
        id=sale.id,
        date=sale.date,
        is_income=True,
        amount=sale.amount,
        account_title=SALES_ACCOUNT_TITLE,
        description=SALES_DESCRIPTION,
    )


def transactions_in_month(transactions: Iterable[Transaction], month: MonthLike) -> List[Transaction]:
    """
    Keep the transactions dated within the month, sorted by date.

    The sort is stable, so same-day transactions keep their input order.

    Transactions whose date is not YYYY-MM-DD are treated as outside the month.

    Raises:
        ValueError: if the month is invalid
    """
    start, end = month_bounds(month)
    dated = []
    for t in transactions:
        day = record_date(t.date)
        if day is not None and start <= day <= end:
            dated.append((day, t))
    dated.sort(key=lambda pair: pair[0])
    return [t for _, t in dated]


def build_cash_journal(expenses: Iterable[Expense], sales: Iterable[DailySale],
                       month: MonthLike, opening_balance: int = 0) -> List[JournalEntry]:
    """
    Build the cash journal for one month.

    Args:
        expenses: All recorded expenses (any month)
        sales: All daily sales (any month)
        month: Target month, e.g. "2024-03" or (2024, 3)
        opening_balance: Balance carried forward from the previous month

    Returns:
        One JournalEntry per transaction in the month, ordered by date, each
        carrying the running balance after it. The carried-forward row is
        left to the caller.
    """
    transactions = [expense_to_transaction(e) for e in expenses]
    transactions.extend(sale_to_transaction(s) for s in sales)

    entries = []
    balance = opening_balance
    for t in transactions_in_month(transactions, month):
        income = t.amount if t.is_income else 0
        expense = 0 if t.is_income else t.amount
        balance = balance + income - expense
        entries.append(JournalEntry(
            id=t.id,
            date=t.date,
            account_title=t.account_title,
            description=t.description,
            income=income,
            expense=expense,
            balance=balance,
        ))
    return entries


def journal_totals(entries: List[JournalEntry], opening_balance: int = 0) -> JournalTotals:
    """Sum income and expense over the entries."""
    income = sum(e.income for e in entries)
    expense = sum(e.expense for e in entries)
    return JournalTotals(
        opening_balance=opening_balance,
        income=income,
        expense=expense,
        closing_balance=opening_balance + income - expense,
    )
