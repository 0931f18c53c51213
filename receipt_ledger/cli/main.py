#!/usr/bin/env python3
"""
Main CLI entrypoint for the receipt ledger.
"""

import argparse
import os
import sys
from pathlib import Path

from receipt_ledger.core import database
from receipt_ledger.core.audit import find_missing_fixed_expenses, missing_total
from receipt_ledger.core.imaging import preprocess_image
from receipt_ledger.core.ledger import build_cash_journal, journal_totals
from receipt_ledger.core.models import DailySale, Expense, FixedExpense
from receipt_ledger.core.parsers import AmountStrategy
from receipt_ledger.core.processor import ReceiptProcessor
from receipt_ledger.core.reporting import build_journal_pdf, default_csv_name, journal_rows, write_journal_csv
from receipt_ledger.core.settings import DEFAULT_FIXED_EXPENSES, load_settings, save_settings
from receipt_ledger.core.utils import (days_in_month, format_month, get_current_month, money_fmt,
                                      parse_iso_date, record_date)

OPTION_KINDS = ["account-title", "description", "payment-method"]


def _check_amount(amount) -> None:
    if amount is not None and amount < 0:
        raise ValueError(f"Amount must not be negative, got {amount}")


def _check_due_day(due_day) -> None:
    if due_day is not None and not 1 <= due_day <= 31:
        raise ValueError(f"Due day must be between 1 and 31, got {due_day}")


def _changes(args, names) -> dict:
    """Options the user actually passed, as record field changes."""
    return {name: getattr(args, name) for name in names if getattr(args, name) is not None}


def _warn_undated(records) -> None:
    bad = [r for r in records if record_date(r.date) is None]
    if bad:
        print(f"[WARN] Skipped {len(bad)} record(s) with an unreadable date: "
              f"{', '.join(r.id for r in bad)}")


def _open_db(args) -> Path:
    db_path = Path(args.db)
    is_new = not db_path.exists()
    database.init_db(db_path)
    if is_new:
        added = database.seed_fixed_expenses(db_path, DEFAULT_FIXED_EXPENSES)
        if added:
            print(f"[INFO] Created {db_path} with {added} default fixed expense(s)")
    return db_path


def cmd_scan(args, settings) -> int:
    processor = ReceiptProcessor(
        incoming_dir=Path(args.incoming),
        settings=settings,
        db_path=_open_db(args) if args.save else None,
        processed_dir=Path(args.processed) if args.processed else None,
        strategy=AmountStrategy(args.strategy),
        verbose=args.verbose,
    )
    for e in processor.process_all():
        print(f"{e.date}  {money_fmt(e.amount):>12}  {e.receipt_url}")
    return 0


def cmd_journal(args, settings) -> int:
    db_path = _open_db(args)
    month = format_month(args.month)
    opening = settings.opening_balance if args.opening_balance is None else args.opening_balance

    expenses = database.get_expenses(db_path)
    sales = database.get_daily_sales(db_path)
    _warn_undated([*expenses, *sales])
    entries = build_cash_journal(expenses, sales, month, opening)

    for r in journal_rows(entries, month, opening):
        income = money_fmt(r["income"]) if r["income"] else ""
        expense = money_fmt(r["expense"]) if r["expense"] else ""
        print(f"{r['date']}  {r['account_title']:<16} {r['description']:<16} "
              f"{income:>12} {expense:>12} {money_fmt(r['balance']):>12}")

    totals = journal_totals(entries, opening)
    print(f"[INFO] {month}: {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}, "
          f"income {money_fmt(totals.income)}, expense {money_fmt(totals.expense)}, "
          f"closing balance {money_fmt(totals.closing_balance)}")

    if args.csv is not None:
        out_csv = Path(args.csv or default_csv_name(month))
        write_journal_csv(entries, month, opening, out_csv)
        print(f"[INFO] Wrote {out_csv}")

    if args.pdf:
        missing = find_missing_fixed_expenses(database.get_fixed_expenses(db_path), expenses, month)
        build_journal_pdf(entries, month, Path(args.pdf), opening_balance=opening,
                          missing_fixed=missing)
        print(f"[INFO] Wrote {args.pdf}")
    return 0


def cmd_audit(args, settings) -> int:
    db_path = _open_db(args)
    month = format_month(args.month)
    expenses = database.get_expenses(db_path)
    _warn_undated(expenses)
    missing = find_missing_fixed_expenses(database.get_fixed_expenses(db_path), expenses, month)
    if not missing:
        print(f"[INFO] All fixed expenses recorded for {month}")
        return 0

    print(f"[WARN] {len(missing)} fixed expense(s) not yet recorded for {month}:")
    for f in missing:
        print(f"  {f.name:<20} due day {f.due_day:>2}  {money_fmt(f.amount):>12}")
    print(f"  Total planned: {money_fmt(missing_total(missing))}")
    return 0


def cmd_sales(args, settings) -> int:
    db_path = _open_db(args)
    by_date = {}
    for s in database.get_daily_sales(db_path):
        by_date[s.date] = by_date.get(s.date, 0) + s.amount
    total = 0
    for day in days_in_month(args.month):
        amount = by_date.get(day.isoformat())
        total += amount or 0
        shown = money_fmt(amount) if amount is not None else "-"
        print(f"{day.strftime('%m/%d')}  {shown:>12}")
    print(f"[INFO] Sales for {format_month(args.month)}: {money_fmt(total)}")
    return 0


def cmd_preprocess(args, settings) -> int:
    src = Path(args.image)
    dest = Path(args.output) if args.output else src.with_name(f"{src.stem}_bw.png")
    preprocess_image(src, dest, contrast=args.contrast, threshold=args.threshold)
    print(f"[INFO] Wrote {dest}")
    return 0


def cmd_add_expense(args, settings) -> int:
    parse_iso_date(args.date)
    _check_amount(args.amount)
    db_path = _open_db(args)
    expense = database.create_expense(db_path, Expense(
        id=database.new_id(),
        date=args.date,
        amount=args.amount,
        category=args.category,
        description=args.description,
        notes=args.notes,
        is_fixed=args.fixed,
        account_title=args.account_title,
        payment_method=args.payment_method or settings.default_payment_method,
        is_income=args.income,
    ))
    print(f"[INFO] Added expense {expense.id}")
    return 0


def cmd_add_sale(args, settings) -> int:
    parse_iso_date(args.date)
    _check_amount(args.amount)
    db_path = _open_db(args)
    sale = database.create_daily_sale(db_path, DailySale(id=database.new_id(),
                                                         date=args.date, amount=args.amount))
    print(f"[INFO] Added sale {sale.id}")
    return 0


def cmd_add_fixed(args, settings) -> int:
    _check_amount(args.amount)
    _check_due_day(args.due_day)
    db_path = _open_db(args)
    fixed = database.create_fixed_expense(db_path, FixedExpense(
        id=database.new_id(),
        name=args.name,
        amount=args.amount,
        category=args.category,
        due_day=args.due_day,
        account_title=args.account_title,
        is_active=not args.inactive,
    ))
    print(f"[INFO] Added fixed expense {fixed.id}")
    return 0


def cmd_add_option(args, settings) -> int:
    setter = {
        "account-title": settings.with_account_title,
        "description": settings.with_description,
        "payment-method": settings.with_payment_method,
    }[args.kind]
    updated = setter(args.value)
    if updated == settings:
        print(f"[INFO] {args.kind} {args.value!r} already present or empty; nothing to do")
        return 0
    save_settings(updated, Path(args.settings))
    print(f"[INFO] Added {args.kind} {args.value!r}")
    return 0


def cmd_set_balance(args, settings) -> int:
    save_settings(settings.with_opening_balance(args.amount), Path(args.settings))
    print(f"[INFO] Opening balance set to {money_fmt(args.amount)}")
    return 0


def cmd_list(args, settings) -> int:
    db_path = _open_db(args)
    if args.kind == "expenses":
        for e in database.get_expenses(db_path):
            flags = "".join(["F" if e.is_fixed else "-", "I" if e.is_income else "-"])
            print(f"{e.id}  {e.date}  {money_fmt(e.amount):>12}  {flags}  {e.description}")
    elif args.kind == "sales":
        for s in database.get_daily_sales(db_path):
            print(f"{s.id}  {s.date}  {money_fmt(s.amount):>12}")
    else:
        for f in database.get_fixed_expenses(db_path):
            state = "active" if f.is_active else "inactive"
            print(f"{f.id}  {f.name:<20} due day {f.due_day:>2}  {money_fmt(f.amount):>12}  {state}")
    return 0


EXPENSE_FIELDS = ["date", "amount", "description", "account_title", "category",
                  "payment_method", "notes", "is_fixed", "is_income"]


def cmd_edit_expense(args, settings) -> int:
    if args.date is not None:
        parse_iso_date(args.date)
    _check_amount(args.amount)
    changes = _changes(args, EXPENSE_FIELDS)
    if not changes:
        raise ValueError("Nothing to change; pass at least one field option")
    expense = database.update_expense(_open_db(args), args.id, changes)
    print(f"[INFO] Updated expense {expense.id}: {', '.join(sorted(changes))}")
    return 0


def cmd_edit_sale(args, settings) -> int:
    if args.date is not None:
        parse_iso_date(args.date)
    _check_amount(args.amount)
    changes = _changes(args, ["date", "amount"])
    if not changes:
        raise ValueError("Nothing to change; pass --date or --amount")
    sale = database.update_daily_sale(_open_db(args), args.id, changes)
    print(f"[INFO] Updated sale {sale.id}: {', '.join(sorted(changes))}")
    return 0


def cmd_edit_fixed(args, settings) -> int:
    _check_amount(args.amount)
    _check_due_day(args.due_day)
    changes = _changes(args, ["name", "amount", "due_day", "account_title", "category", "is_active"])
    if not changes:
        raise ValueError("Nothing to change; pass at least one field option")
    fixed = database.update_fixed_expense(_open_db(args), args.id, changes)
    print(f"[INFO] Updated fixed expense {fixed.id}: {', '.join(sorted(changes))}")
    return 0


def cmd_delete(args, settings) -> int:
    delete = {
        "expense": database.delete_expense,
        "sale": database.delete_daily_sale,
        "fixed": database.delete_fixed_expense,
    }[args.kind]
    delete(_open_db(args), args.id)
    print(f"[INFO] Deleted {args.kind} {args.id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Receipt parsing, cash journal and fixed expense audit for a small shop",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Read OCR text files from ./incoming and save them as draft expenses
  receipt-ledger scan --save

  # Show this month's cash journal and export it
  receipt-ledger journal --csv --pdf journal.pdf

  # Check which fixed expenses are still missing for March 2025
  receipt-ledger audit --month 2025-03
        """
    )
    parser.add_argument("--db", default=os.getenv("RECEIPT_LEDGER_DB", "./ledger.sqlite"),
                        help="SQLite record store (default: ./ledger.sqlite, or RECEIPT_LEDGER_DB env var)")
    parser.add_argument("--settings", default=os.getenv("RECEIPT_LEDGER_SETTINGS", "./settings.json"),
                        help="Settings JSON file (default: ./settings.json, or RECEIPT_LEDGER_SETTINGS env var)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show detailed parsing information for debugging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("scan", help="Parse OCR text files into draft expenses")
    p.add_argument("--incoming", default="./incoming",
                   help="Folder with OCR text files (default: ./incoming)")
    p.add_argument("--processed", help="Move files here once read")
    p.add_argument("--save", action="store_true", help="Save drafts to the record store")
    p.add_argument("--strategy", choices=[s.value for s in AmountStrategy],
                   default=AmountStrategy.MAX.value,
                   help="How to choose among several amounts (default: max)")
    p.set_defaults(func=cmd_scan)

    p = sub.add_parser("journal", help="Show the cash journal for a month")
    p.add_argument("--month", default=get_current_month(), help="YYYY-MM (default: current month)")
    p.add_argument("--opening-balance", type=int,
                   help="Balance carried forward (default: from settings)")
    p.add_argument("--csv", nargs="?", const="",
                   help="Export CSV (default name: cash_journal_YYYY-MM.csv)")
    p.add_argument("--pdf", help="Export a PDF report to this path")
    p.set_defaults(func=cmd_journal)

    p = sub.add_parser("audit", help="List fixed expenses not yet recorded for a month")
    p.add_argument("--month", default=get_current_month(), help="YYYY-MM (default: current month)")
    p.set_defaults(func=cmd_audit)

    p = sub.add_parser("sales", help="Show daily sales for each day of a month")
    p.add_argument("--month", default=get_current_month(), help="YYYY-MM (default: current month)")
    p.set_defaults(func=cmd_sales)

    p = sub.add_parser("preprocess", help="Convert a receipt image to black and white for OCR")
    p.add_argument("image")
    p.add_argument("--output", "-o", help="Output image (default: <name>_bw.png)")
    p.add_argument("--contrast", type=float, default=1.5)
    p.add_argument("--threshold", type=int, default=128)
    p.set_defaults(func=cmd_preprocess)

    p = sub.add_parser("add-expense", help="Record an expense")
    p.add_argument("--date", required=True, help="YYYY-MM-DD")
    p.add_argument("--amount", type=int, required=True)
    p.add_argument("--description", default="")
    p.add_argument("--account-title", default="")
    p.add_argument("--category", default="")
    p.add_argument("--payment-method", default="")
    p.add_argument("--notes", default="")
    p.add_argument("--fixed", action="store_true", help="Counts as a fixed expense payment")
    p.add_argument("--income", action="store_true", help="Refund or correction recorded as income")
    p.set_defaults(func=cmd_add_expense)

    p = sub.add_parser("add-sale", help="Record a day's cash sales")
    p.add_argument("--date", required=True, help="YYYY-MM-DD")
    p.add_argument("--amount", type=int, required=True)
    p.set_defaults(func=cmd_add_sale)

    p = sub.add_parser("add-fixed", help="Configure a fixed expense")
    p.add_argument("--name", required=True)
    p.add_argument("--amount", type=int, required=True)
    p.add_argument("--due-day", type=int, default=1)
    p.add_argument("--account-title", default="")
    p.add_argument("--category", default="")
    p.add_argument("--inactive", action="store_true")
    p.set_defaults(func=cmd_add_fixed)

    p = sub.add_parser("add-option", help="Add a custom option to the settings")
    p.add_argument("kind", choices=OPTION_KINDS)
    p.add_argument("value")
    p.set_defaults(func=cmd_add_option)

    p = sub.add_parser("set-balance", help="Set the balance carried forward")
    p.add_argument("amount", type=int)
    p.set_defaults(func=cmd_set_balance)

    p = sub.add_parser("list", help="List stored records with their ids")
    p.add_argument("kind", choices=["expenses", "sales", "fixed"])
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("edit-expense", help="Change fields of a recorded expense")
    p.add_argument("id")
    p.add_argument("--date", help="YYYY-MM-DD")
    p.add_argument("--amount", type=int)
    p.add_argument("--description")
    p.add_argument("--account-title")
    p.add_argument("--category")
    p.add_argument("--payment-method")
    p.add_argument("--notes")
    p.add_argument("--fixed", dest="is_fixed", action="store_true", default=None,
                   help="Counts as a fixed expense payment")
    p.add_argument("--not-fixed", dest="is_fixed", action="store_false")
    p.add_argument("--income", dest="is_income", action="store_true", default=None,
                   help="Refund or correction recorded as income")
    p.add_argument("--not-income", dest="is_income", action="store_false")
    p.set_defaults(func=cmd_edit_expense)

    p = sub.add_parser("edit-sale", help="Change a recorded day's sales")
    p.add_argument("id")
    p.add_argument("--date", help="YYYY-MM-DD")
    p.add_argument("--amount", type=int)
    p.set_defaults(func=cmd_edit_sale)

    p = sub.add_parser("edit-fixed", help="Change a configured fixed expense")
    p.add_argument("id")
    p.add_argument("--name")
    p.add_argument("--amount", type=int)
    p.add_argument("--due-day", type=int)
    p.add_argument("--account-title")
    p.add_argument("--category")
    p.add_argument("--active", dest="is_active", action="store_true", default=None)
    p.add_argument("--inactive", dest="is_active", action="store_false")
    p.set_defaults(func=cmd_edit_fixed)

    p = sub.add_parser("delete", help="Delete a stored record")
    p.add_argument("kind", choices=["expense", "sale", "fixed"])
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    return parser


def main(argv=None):
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(Path(args.settings))
        return args.func(args, settings)
    except (ValueError, KeyError) as e:
        print(f"[ERROR] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
