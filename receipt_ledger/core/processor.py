"""
Turns OCR text files into draft expense records.
"""

import shutil
import uuid
import datetime as dt
from pathlib import Path
from typing import List, Optional

from .database import create_expense
from .models import Expense, ReceiptFields
from .parsers import AmountStrategy, resolve_receipt_fields
from .settings import Settings
from .utils import TEXT_EXTS, money_fmt


def draft_expense(fields: ReceiptFields, receipt_url: Optional[str] = None,
                  payment_method: str = "") -> Expense:
    """A new, editable expense seeded with the parsed date and amount."""
    return Expense(
        id=str(uuid.uuid4()),
        date=fields.date,
        amount=fields.amount,
        category="",
        description="",
        notes="",
        is_fixed=False,
        receipt_url=receipt_url,
        created_at=dt.datetime.now().isoformat(timespec="seconds"),
        account_title="",
        payment_method=payment_method,
        is_income=False,
    )


class ReceiptProcessor:
    """Reads OCR text files from a folder and records them as draft expenses."""

    def __init__(self, incoming_dir: Path, settings: Settings,
                 db_path: Optional[Path] = None,
                 processed_dir: Optional[Path] = None,
                 strategy: AmountStrategy = AmountStrategy.MAX,
                 today: Optional[dt.date] = None,
                 verbose: bool = False):
        """
        Initialize receipt processor.

        Args:
            incoming_dir: Directory with OCR text files (one receipt per file)
            settings: Current settings (default payment method)
            db_path: Record store to save drafts into (optional)
            processed_dir: Where to move files once read (optional, left in place if None)
            strategy: Amount selection strategy
            today: Date used when no date is found on a receipt (default: today)
            verbose: Whether to show parsing details
        """
        self.incoming_dir = incoming_dir
        self.settings = settings
        self.db_path = db_path
        self.processed_dir = processed_dir
        self.strategy = AmountStrategy(strategy)
        self.today = today
        self.verbose = verbose

    def discover_files(self) -> List[Path]:
        """Text files waiting in the incoming directory."""
        if not self.incoming_dir.exists():
            print(f"[WARN] Incoming directory does not exist: {self.incoming_dir}")
            return []
        files = sorted(p for p in self.incoming_dir.iterdir()
                       if p.is_file() and p.suffix.lower() in TEXT_EXTS)
        print(f"[INFO] Found {len(files)} file(s) in {self.incoming_dir}")
        return files

    def process_file(self, path: Path) -> Expense:
        """Parse one OCR text file into a draft expense."""
        print(f"[INFO] Processing {path.name}")
        text = path.read_text(encoding="utf-8")
        fields = resolve_receipt_fields(text, today=self.today, strategy=self.strategy)

        if self.verbose:
            date_source = "" if fields.date_found else " (default: no date found)"
            print(f"  [DEBUG] Date: {fields.date}{date_source}")
            print(f"  [DEBUG] Amount: {money_fmt(fields.amount) if fields.amount_found else '(none)'}")
            if not fields.amount_found:
                print("  [DEBUG] First 5 lines of OCR text:")
                for i, line in enumerate(text.splitlines()[:5], 1):
                    print(f"    {i}: {line[:80]}")
        if not fields.amount_found:
            print(f"  [WARN] Could not extract amount from {path.name}. Check OCR quality.")

        return draft_expense(fields, receipt_url=path.name,
                             payment_method=self.settings.default_payment_method)

    def _move_to_processed(self, path: Path):
        self.processed_dir.mkdir(parents=True, exist_ok=True)
        dest = self.processed_dir / path.name
        if dest.exists():
            dest = self.processed_dir / f"{path.stem}_{uuid.uuid4().hex[:8]}{path.suffix}"
        shutil.move(path.as_posix(), dest.as_posix())

    def process_all(self) -> List[Expense]:
        """
        Process every incoming file.

        Returns:
            The draft expenses, in file name order
        """
        files = self.discover_files()
        if not files:
            print("No receipt text files found.")
            return []

        drafts = []
        failed = []
        for path in files:
            try:
                expense = self.process_file(path)
                if self.db_path is not None:
                    create_expense(self.db_path, expense)
                if self.processed_dir is not None:
                    self._move_to_processed(path)
                drafts.append(expense)
            except Exception as e:
                print(f"[ERROR] Failed {path.name}: {e}")
                failed.append(path)

        saved = " and saved" if self.db_path is not None else ""
        print(f"[INFO] Drafted{saved} {len(drafts)} expense(s)")
        if failed:
            print(f"[WARN] {len(failed)} file(s) failed and were left in place: "
                  f"{', '.join(p.name for p in failed)}")
        return drafts
