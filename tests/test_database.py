import pytest

from receipt_ledger.core import database
from receipt_ledger.core.models import DailySale, Expense, FixedExpense
from receipt_ledger.core.settings import DEFAULT_FIXED_EXPENSES


def test_expense_round_trip(db_path):
    created = database.create_expense(db_path, Expense(
        id="e1", date="2024-03-01", amount=1200, description="卵代",
        is_fixed=True, is_income=False, payment_method="現金"))
    assert created.created_at

    [stored] = database.get_expenses(db_path)
    assert stored == created
    assert stored.is_fixed is True
    assert stored.is_income is False


def test_listing_order(db_path):
    for i, date in enumerate(["2024-03-02", "2024-03-05", "2024-03-01"]):
        database.create_expense(db_path, Expense(id=f"e{i}", date=date, amount=1))
        database.create_daily_sale(db_path, DailySale(id=f"s{i}", date=date, amount=1))
    assert [e.date for e in database.get_expenses(db_path)] == ["2024-03-05", "2024-03-02", "2024-03-01"]
    assert [s.date for s in database.get_daily_sales(db_path)] == ["2024-03-05", "2024-03-02", "2024-03-01"]

    database.create_fixed_expense(db_path, FixedExpense(id="f1", name="家賃", amount=1, due_day=27))
    database.create_fixed_expense(db_path, FixedExpense(id="f2", name="電気", amount=1, due_day=3))
    assert [f.id for f in database.get_fixed_expenses(db_path)] == ["f2", "f1"]


def test_update_is_partial(db_path):
    database.create_daily_sale(db_path, DailySale(id="s1", date="2024-03-01", amount=0))
    updated = database.update_daily_sale(db_path, "s1", {"amount": 15000})
    assert updated == DailySale(id="s1", date="2024-03-01", amount=15000)
    assert database.get_daily_sales(db_path) == [updated]


def test_update_fixed_flag(db_path):
    database.create_fixed_expense(db_path, FixedExpense(id="f1", name="家賃", amount=80000))
    database.update_fixed_expense(db_path, "f1", {"is_active": False})
    [fixed] = database.get_fixed_expenses(db_path)
    assert fixed.is_active is False


def test_delete(db_path):
    database.create_expense(db_path, Expense(id="e1", date="2024-03-01", amount=1))
    database.delete_expense(db_path, "e1")
    assert database.get_expenses(db_path) == []


def test_missing_id_raises_key_error(db_path):
    with pytest.raises(KeyError):
        database.update_expense(db_path, "nope", {"amount": 1})
    with pytest.raises(KeyError):
        database.delete_fixed_expense(db_path, "nope")


def test_seed_only_when_empty(db_path):
    assert database.seed_fixed_expenses(db_path, DEFAULT_FIXED_EXPENSES) == 2
    assert database.seed_fixed_expenses(db_path, DEFAULT_FIXED_EXPENSES) == 0
    assert len(database.get_fixed_expenses(db_path)) == 2
