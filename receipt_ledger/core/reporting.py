"""
CSV export and PDF report generation for the cash journal.
"""

import csv
import calendar
import datetime as dt
from pathlib import Path
from typing import List, Optional

from .ledger import journal_totals
from .models import FixedExpense, JournalEntry
from .utils import MonthLike, format_month, money_fmt, month_bounds, parse_month

CARRIED_FORWARD = "carried forward"

JOURNAL_FIELDS = ["date", "account_title", "description", "income", "expense", "balance"]

# Built-in Japanese CID font, no font file needed
PDF_FONT = "HeiseiKakuGo-W5"


def journal_rows(entries: List[JournalEntry], month: MonthLike, opening_balance: int = 0) -> List[dict]:
    """Journal rows for export, led by the carried-forward balance row."""
    start, _ = month_bounds(month)
    rows = [{
        "date": start.isoformat(),
        "account_title": CARRIED_FORWARD,
        "description": "",
        "income": "",
        "expense": "",
        "balance": opening_balance,
    }]
    for e in entries:
        rows.append({k: getattr(e, k) for k in JOURNAL_FIELDS})
    return rows


def write_journal_csv(entries: List[JournalEntry], month: MonthLike,
                      opening_balance: int, out_csv: Path):
    """Write the month's cash journal to a CSV file."""
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=JOURNAL_FIELDS)
        w.writeheader()
        for r in journal_rows(entries, month, opening_balance):
            w.writerow(r)


def default_csv_name(month: MonthLike) -> str:
    return f"cash_journal_{format_month(month)}.csv"


def build_journal_pdf(entries: List[JournalEntry], month: MonthLike, out_pdf: Path,
                      opening_balance: int = 0,
                      missing_fixed: Optional[List[FixedExpense]] = None,
                      title: str = "Cash Journal"):
    """
    Build a PDF with the month's journal, its totals and the fixed expenses
    still missing for the month.

    Args:
        entries: Journal entries for the month
        month: The month being reported
        out_pdf: Output PDF path
        opening_balance: Balance carried forward into the month
        missing_fixed: Result of the fixed expense audit (optional)
        title: Report title
    """
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas
    from reportlab.lib.units import inch
    from reportlab.lib.colors import red
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.cidfonts import UnicodeCIDFont

    pdfmetrics.registerFont(UnicodeCIDFont(PDF_FONT))

    year, mon = parse_month(month)
    display = f"{calendar.month_name[mon]} {year}"
    totals = journal_totals(entries, opening_balance)
    missing_fixed = missing_fixed or []

    out_pdf.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(out_pdf.as_posix(), pagesize=A4)
    width, height = A4

    # Title and totals
    y = height - 1 * inch
    c.setFont(PDF_FONT, 16)
    c.drawString(1 * inch, y, f"{title}: {display}")
    y -= 0.3 * inch
    c.setFont(PDF_FONT, 10)
    timestamp = dt.datetime.now().isoformat(timespec='seconds')
    c.drawString(1 * inch, y, f"Generated: {timestamp}")
    y -= 0.4 * inch

    for label, value in [("Opening balance", totals.opening_balance),
                         ("Income", totals.income),
                         ("Expense", totals.expense),
                         ("Closing balance", totals.closing_balance)]:
        c.drawString(1.1 * inch, y, label)
        c.drawRightString(3.6 * inch, y, money_fmt(value))
        y -= 0.2 * inch

    # Missing fixed expenses
    if missing_fixed:
        y -= 0.2 * inch
        c.setFont(PDF_FONT, 12)
        c.setFillColor(red)
        c.drawString(1 * inch, y, "Fixed expenses not yet recorded")
        c.setFillColor("black")
        y -= 0.25 * inch
        c.setFont(PDF_FONT, 10)
        for f in missing_fixed:
            c.drawString(1.1 * inch, y, f"{f.name} (due day {f.due_day})")
            c.drawRightString(3.6 * inch, y, money_fmt(f.amount))
            y -= 0.2 * inch

    def header(y):
        c.setFont(PDF_FONT, 9)
        c.drawString(0.6 * inch, y, "Date")
        c.drawString(1.5 * inch, y, "Account")
        c.drawString(2.9 * inch, y, "Description")
        c.drawRightString(5.3 * inch, y, "Income")
        c.drawRightString(6.3 * inch, y, "Expense")
        c.drawRightString(7.6 * inch, y, "Balance")
        y -= 0.15 * inch
        c.line(0.6 * inch, y, 7.7 * inch, y)
        return y - 0.15 * inch

    # Journal lines
    y -= 0.3 * inch
    y = header(y)
    rows = journal_rows(entries, month, opening_balance)
    for r in rows:
        c.drawString(0.6 * inch, y, str(r["date"]))
        c.drawString(1.5 * inch, y, str(r["account_title"])[:14])
        c.drawString(2.9 * inch, y, str(r["description"])[:16])
        c.drawRightString(5.3 * inch, y, money_fmt(r["income"]) if r["income"] else "")
        c.drawRightString(6.3 * inch, y, money_fmt(r["expense"]) if r["expense"] else "")
        c.drawRightString(7.6 * inch, y, money_fmt(r["balance"]))
        y -= 0.18 * inch

        if y < 0.8 * inch:
            c.showPage()
            y = height - 1 * inch
            c.setFont(PDF_FONT, 12)
            c.drawString(0.6 * inch, y, f"{display} (cont.)")
            y = header(y - 0.3 * inch)

    c.showPage()
    c.save()
