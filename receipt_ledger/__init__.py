"""
Receipt Ledger

Parses receipt OCR text into draft expenses, builds a monthly cash journal
with a running balance, and reports fixed expenses not yet recorded.
"""

__version__ = "1.0.0"
__author__ = "Receipt Ledger Contributors"

from receipt_ledger.core.models import (DailySale, Expense, FixedExpense,
                                        JournalEntry, ReceiptFields, Transaction)
from receipt_ledger.core.parsers import (AmountStrategy, extract_amount, extract_date,
                                         parse_amount, parse_date, resolve_receipt_fields)
from receipt_ledger.core.ledger import build_cash_journal
from receipt_ledger.core.audit import find_missing_fixed_expenses

__all__ = [
    "AmountStrategy",
    "DailySale",
    "Expense",
    "FixedExpense",
    "JournalEntry",
    "ReceiptFields",
    "Transaction",
    "build_cash_journal",
    "extract_amount",
    "extract_date",
    "find_missing_fixed_expenses",
    "parse_amount",
    "parse_date",
    "resolve_receipt_fields",
]
