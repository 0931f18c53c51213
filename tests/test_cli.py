import csv

import pytest

from receipt_ledger.cli.main import main
from receipt_ledger.core import database
from receipt_ledger.core.models import Expense


@pytest.fixture
def run(tmp_path, capsys):
    db = tmp_path / "ledger.sqlite"
    settings = tmp_path / "settings.json"

    def _run(*args):
        code = main(["--db", str(db), "--settings", str(settings), *args])
        return code, capsys.readouterr().out

    return _run


def test_journal_and_csv_export(run, tmp_path):
    run("set-balance", "1000")
    run("add-sale", "--date", "2024-03-01", "--amount", "5000")
    run("add-expense", "--date", "2024-03-02", "--amount", "1500", "--description", "卵代")
    out_csv = tmp_path / "march.csv"

    code, out = run("journal", "--month", "2024-03", "--csv", str(out_csv))

    assert code == 0
    assert "closing balance ¥4,500" in out
    with out_csv.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["balance"] for r in rows] == ["1000", "6000", "4500"]


def test_audit_reports_unrecorded_fixed_expenses(run):
    run("add-expense", "--date", "2024-03-27", "--amount", "80000",
        "--description", "家賃", "--fixed")
    code, out = run("audit", "--month", "2024-03")
    assert code == 0
    assert "インターネット" in out
    assert "家賃" not in out


def test_add_option_is_idempotent(run, tmp_path):
    run("add-option", "description", "パン代")
    code, out = run("add-option", "description", "パン代")
    assert code == 0
    assert "nothing to do" in out
    assert (tmp_path / "settings.json").read_text(encoding="utf-8").count("パン代") == 1


def test_invalid_month_is_an_error(run):
    code, out = run("journal", "--month", "2024-13")
    assert code == 1
    assert "[ERROR]" in out


def test_invalid_expense_date_is_an_error(run):
    code, out = run("add-expense", "--date", "03/01/2024", "--amount", "100")
    assert code == 1
    assert "[ERROR]" in out


def test_sales_grid(run):
    run("add-sale", "--date", "2024-02-10", "--amount", "3000")
    code, out = run("sales", "--month", "2024-02")
    assert code == 0
    assert "02/29" in out
    assert "¥3,000" in out


@pytest.mark.parametrize("args", [
    ["add-expense", "--date", "2024-03-01", "--amount=-100"],
    ["add-sale", "--date", "2024-03-01", "--amount=-100"],
    ["add-fixed", "--name", "保険", "--amount=-100"],
])
def test_negative_amount_is_an_error(run, tmp_path, args):
    code, out = run(*args)
    assert code == 1
    assert "[ERROR] Amount must not be negative" in out
    assert not (tmp_path / "ledger.sqlite").exists()


def test_edit_expense_marks_it_fixed(run, tmp_path):
    run("add-expense", "--date", "2024-03-27", "--amount", "80000")
    (expense,) = database.get_expenses(tmp_path / "ledger.sqlite")

    code, out = run("edit-expense", expense.id, "--description", "家賃", "--fixed")
    assert code == 0
    assert f"Updated expense {expense.id}: description, is_fixed" in out

    (edited,) = database.get_expenses(tmp_path / "ledger.sqlite")
    assert (edited.description, edited.is_fixed, edited.amount) == ("家賃", True, 80000)
    code, out = run("audit", "--month", "2024-03")
    assert "家賃" not in out


def test_edit_expense_rejects_bad_values(run, tmp_path):
    run("add-expense", "--date", "2024-03-01", "--amount", "500")
    (expense,) = database.get_expenses(tmp_path / "ledger.sqlite")

    assert run("edit-expense", expense.id, "--amount=-1")[0] == 1
    assert run("edit-expense", expense.id, "--date", "2024/03/02")[0] == 1
    assert run("edit-expense", expense.id)[0] == 1
    assert database.get_expenses(tmp_path / "ledger.sqlite") == [expense]


def test_edit_sale_and_fixed(run, tmp_path):
    db = tmp_path / "ledger.sqlite"
    run("add-sale", "--date", "2024-03-05", "--amount", "3000")
    (sale,) = database.get_daily_sales(db)
    rent = next(f for f in database.get_fixed_expenses(db) if f.name == "家賃")

    assert run("edit-sale", sale.id, "--amount", "3500")[0] == 0
    assert run("edit-fixed", rent.id, "--inactive", "--due-day", "25")[0] == 0

    assert database.get_daily_sales(db)[0].amount == 3500
    updated = next(f for f in database.get_fixed_expenses(db) if f.id == rent.id)
    assert (updated.is_active, updated.due_day) == (False, 25)
    code, out = run("audit", "--month", "2024-03")
    assert "家賃" not in out
    assert "インターネット" in out


def test_delete_records(run, tmp_path):
    db = tmp_path / "ledger.sqlite"
    run("add-expense", "--date", "2024-03-01", "--amount", "500")
    run("add-sale", "--date", "2024-03-01", "--amount", "2000")
    (expense,) = database.get_expenses(db)
    (sale,) = database.get_daily_sales(db)
    net = next(f for f in database.get_fixed_expenses(db) if f.name == "インターネット")

    code, out = run("list", "expenses")
    assert expense.id in out

    assert run("delete", "expense", expense.id)[0] == 0
    assert run("delete", "sale", sale.id)[0] == 0
    assert run("delete", "fixed", net.id)[0] == 0
    assert database.get_expenses(db) == []
    assert database.get_daily_sales(db) == []
    assert [f.name for f in database.get_fixed_expenses(db)] == ["家賃"]


def test_unknown_record_id_is_an_error(run):
    code, out = run("delete", "expense", "no-such-id")
    assert code == 1
    assert "[ERROR]" in out
    code, out = run("edit-sale", "no-such-id", "--amount", "10")
    assert code == 1
    assert "[ERROR]" in out


def test_journal_warns_about_unreadable_dates(run, tmp_path):
    db = tmp_path / "ledger.sqlite"
    run("add-expense", "--date", "2024-03-05", "--amount", "300")
    database.create_expense(db, Expense(id="bad-date", date="2024/03/01", amount=100))

    code, out = run("journal", "--month", "2024-03")
    assert code == 0
    assert "[WARN] Skipped 1 record(s) with an unreadable date: bad-date" in out
    assert "1 entry" in out
