"""
SQLite record store for expenses, daily sales and fixed expenses.
"""

import sqlite3
import uuid
import datetime as dt
from pathlib import Path
from typing import Dict, List, Type, TypeVar

from .models import DailySale, Expense, FixedExpense

R = TypeVar("R", Expense, DailySale, FixedExpense)

# table name -> (record type, ORDER BY clause for listing)
TABLES = {
    "expenses": (Expense, "date DESC"),
    "daily_sales": (DailySale, "date DESC"),
    "fixed_expenses": (FixedExpense, "due_day ASC"),
}


def init_db(db_path: Path):
    """Initialize the record store tables."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path.as_posix()) as conn:
        cur = conn.cursor()
        cur.execute("""
        CREATE TABLE IF NOT EXISTS expenses (
            id TEXT PRIMARY KEY,
            date TEXT NOT NULL,
            amount INTEGER NOT NULL,
            category TEXT,
            description TEXT,
            notes TEXT,
            is_fixed INTEGER NOT NULL DEFAULT 0,
            receipt_url TEXT,
            created_at TEXT,
            account_title TEXT,
            payment_method TEXT,
            is_income INTEGER NOT NULL DEFAULT 0
        )
        """)
        cur.execute("""
        CREATE TABLE IF NOT EXISTS daily_sales (
            id TEXT PRIMARY KEY,
            date TEXT NOT NULL,
            amount INTEGER NOT NULL
        )
        """)
        cur.execute("""
        CREATE TABLE IF NOT EXISTS fixed_expenses (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            amount INTEGER NOT NULL,
            category TEXT,
            due_day INTEGER,
            account_title TEXT,
            is_active INTEGER NOT NULL DEFAULT 1
        )
        """)
        conn.commit()


def _from_row(record_type: Type[R], row: sqlite3.Row) -> R:
    data = dict(row)
    for flag in ("is_fixed", "is_income", "is_active"):
        if flag in data:
            data[flag] = bool(data[flag])
    return record_type.from_dict(data)


def _list(db_path: Path, table: str) -> List:
    record_type, order_by = TABLES[table]
    with sqlite3.connect(db_path.as_posix()) as conn:
        conn.row_factory = sqlite3.Row
        cur = conn.cursor()
        cur.execute(f"SELECT * FROM {table} ORDER BY {order_by}")
        return [_from_row(record_type, row) for row in cur.fetchall()]


def _insert(db_path: Path, table: str, record: R) -> R:
    data = record.to_dict()
    columns = ", ".join(data)
    placeholders = ", ".join("?" * len(data))
    with sqlite3.connect(db_path.as_posix()) as conn:
        conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
                     list(data.values()))
        conn.commit()
    return record


def _get(db_path: Path, table: str, record_id: str):
    record_type, _ = TABLES[table]
    with sqlite3.connect(db_path.as_posix()) as conn:
        conn.row_factory = sqlite3.Row
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (record_id,)).fetchone()
    if row is None:
        raise KeyError(f"No {table} record with id {record_id!r}")
    return _from_row(record_type, row)


def _update(db_path: Path, table: str, record_id: str, changes: Dict):
    """Apply a partial update and return the updated record."""
    current = _get(db_path, table, record_id)
    updated = current.from_dict({**current.to_dict(), **changes, "id": record_id})
    data = updated.to_dict()
    assignments = ", ".join(f"{k} = ?" for k in data if k != "id")
    values = [v for k, v in data.items() if k != "id"]
    with sqlite3.connect(db_path.as_posix()) as conn:
        conn.execute(f"UPDATE {table} SET {assignments} WHERE id = ?", values + [record_id])
        conn.commit()
    return updated


def _delete(db_path: Path, table: str, record_id: str) -> None:
    with sqlite3.connect(db_path.as_posix()) as conn:
        cur = conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
        conn.commit()
        if cur.rowcount == 0:
            raise KeyError(f"No {table} record with id {record_id!r}")


def new_id() -> str:
    return str(uuid.uuid4())


# Expenses

def get_expenses(db_path: Path) -> List[Expense]:
    """All expenses, newest first."""
    return _list(db_path, "expenses")


def create_expense(db_path: Path, expense: Expense) -> Expense:
    """Insert an expense. created_at is filled in when empty."""
    if not expense.created_at:
        expense = Expense.from_dict({**expense.to_dict(),
                                     "created_at": dt.datetime.now().isoformat(timespec="seconds")})
    return _insert(db_path, "expenses", expense)


def update_expense(db_path: Path, expense_id: str, changes: Dict) -> Expense:
    return _update(db_path, "expenses", expense_id, changes)


def delete_expense(db_path: Path, expense_id: str) -> None:
    _delete(db_path, "expenses", expense_id)


# Daily sales

def get_daily_sales(db_path: Path) -> List[DailySale]:
    """All daily sales, newest first."""
    return _list(db_path, "daily_sales")


def create_daily_sale(db_path: Path, sale: DailySale) -> DailySale:
    return _insert(db_path, "daily_sales", sale)


def update_daily_sale(db_path: Path, sale_id: str, changes: Dict) -> DailySale:
    return _update(db_path, "daily_sales", sale_id, changes)


def delete_daily_sale(db_path: Path, sale_id: str) -> None:
    _delete(db_path, "daily_sales", sale_id)


# Fixed expenses

def get_fixed_expenses(db_path: Path) -> List[FixedExpense]:
    """All fixed expenses, by due day."""
    return _list(db_path, "fixed_expenses")


def create_fixed_expense(db_path: Path, fixed: FixedExpense) -> FixedExpense:
    return _insert(db_path, "fixed_expenses", fixed)


def update_fixed_expense(db_path: Path, fixed_id: str, changes: Dict) -> FixedExpense:
    return _update(db_path, "fixed_expenses", fixed_id, changes)


def delete_fixed_expense(db_path: Path, fixed_id: str) -> None:
    _delete(db_path, "fixed_expenses", fixed_id)


def seed_fixed_expenses(db_path: Path, defaults: List[FixedExpense]) -> int:
    """Insert the default fixed expenses if none exist yet. Returns how many were added."""
    if get_fixed_expenses(db_path):
        return 0
    for fixed in defaults:
        create_fixed_expense(db_path, fixed)
    return len(defaults)
