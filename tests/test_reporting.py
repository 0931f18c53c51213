import csv

from receipt_ledger.core.ledger import build_cash_journal
from receipt_ledger.core.models import DailySale, Expense, FixedExpense
from receipt_ledger.core.reporting import (CARRIED_FORWARD, build_journal_pdf, default_csv_name,
                                           write_journal_csv)
from receipt_ledger.core.utils import money_fmt

EXPENSES = [Expense(id="e1", date="2024-03-05", amount=3000, description="材料, 小麦粉",
                    account_title="仕入高")]
SALES = [DailySale(id="s1", date="2024-03-01", amount=10000)]


def test_csv_starts_with_carried_forward_row(tmp_path):
    entries = build_cash_journal(EXPENSES, SALES, "2024-03", opening_balance=5000)
    out = tmp_path / default_csv_name("2024-03")
    write_journal_csv(entries, "2024-03", 5000, out)

    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))

    assert out.name == "cash_journal_2024-03.csv"
    assert rows[0]["date"] == "2024-03-01"
    assert rows[0]["account_title"] == CARRIED_FORWARD
    assert rows[0]["balance"] == "5000"
    assert rows[2]["description"] == "材料, 小麦粉"
    assert rows[-1]["balance"] == str(entries[-1].balance) == "12000"


def test_pdf_report_is_written(tmp_path):
    entries = build_cash_journal(EXPENSES, SALES, "2024-03")
    missing = [FixedExpense(id="f1", name="家賃", amount=80000, due_day=27)]
    out = tmp_path / "journal.pdf"
    build_journal_pdf(entries, "2024-03", out, opening_balance=0, missing_fixed=missing)
    assert out.read_bytes().startswith(b"%PDF")


def test_money_fmt():
    assert money_fmt(1234567) == "¥1,234,567"
    assert money_fmt(-500) == "-¥500"
    assert money_fmt(None) == ""
