"""
Data models for expenses, sales and the cash journal.
"""

from dataclasses import dataclass, asdict, fields
from typing import Optional


class _Record:
    """Dict conversion shared by all records."""

    def to_dict(self):
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict):
        """Build from a dictionary, ignoring unknown keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass(frozen=True)
class Expense(_Record):
    """A recorded expense (or a refund/correction entered as income)."""
    id: str
    date: str
    amount: int
    category: str = ""
    description: str = ""
    notes: str = ""
    is_fixed: bool = False
    receipt_url: Optional[str] = None
    created_at: str = ""
    account_title: str = ""
    payment_method: str = ""
    is_income: bool = False


@dataclass(frozen=True)
class DailySale(_Record):
    """Cash sales for one day."""
    id: str
    date: str
    amount: int


@dataclass(frozen=True)
class FixedExpense(_Record):
    """A recurring expense expected once per month."""
    id: str
    name: str
    amount: int
    category: str = ""
    due_day: int = 1
    account_title: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class Transaction(_Record):
    """Common shape of an expense or a sale as seen by the ledger."""
    id: str
    date: str
    is_income: bool
    amount: int
    account_title: str
    description: str


@dataclass(frozen=True)
class JournalEntry(_Record):
    """One row of the cash journal."""
    id: str
    date: str
    account_title: str
    description: str
    income: int
    expense: int
    balance: int


@dataclass(frozen=True)
class JournalTotals(_Record):
    """Totals over a month of journal entries."""
    opening_balance: int
    income: int
    expense: int
    closing_balance: int


@dataclass(frozen=True)
class ReceiptFields(_Record):
    """Date and amount parsed from one receipt's text.

    date_found / amount_found are False when the value is a default
    (today's date, zero) rather than something read from the text.
    """
    date: str
    amount: int
    date_found: bool = True
    amount_found: bool = True
