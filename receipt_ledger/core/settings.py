"""
User settings: option lists and the opening balance.
"""

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Tuple

from .models import FixedExpense

DEFAULT_CATEGORIES = [
    "交通費",
    "食費",
    "通信費",
    "家賃",
    "水道光熱費",
    "保険料",
    "消耗品費",
    "その他",
]

DEFAULT_ACCOUNT_TITLES = [
    "仕入高",
    "包装資材費",
    "消耗品費",
    "福利厚生費",
    "交通費",
    "雑費",
    "当座預金",
    "給与手当",
    "医療費",
    "販売促進費",
    "広告宣伝費",
    "租税公課",
]

DEFAULT_DESCRIPTIONS = [
    "卵代",
    "フルーツ代",
    "材料",
    "クリーニング代",
    "両替手数料",
    "食事代",
    "Kibareハンドメイド",
    "給料",
    "薬代",
]

DEFAULT_PAYMENT_METHODS = [
    "現金",
    "クレジットカード",
    "銀行振込",
    "電子マネー",
    "その他",
]

DEFAULT_FIXED_EXPENSES = [
    FixedExpense(id="1", name="家賃", amount=80000, category="家賃", due_day=27,
                 account_title="販売費及び一般管理費", is_active=True),
    FixedExpense(id="2", name="インターネット", amount=4500, category="通信費", due_day=15,
                 account_title="販売費及び一般管理費", is_active=True),
]


def _with_option(options: Tuple[str, ...], value: str) -> Tuple[str, ...]:
    value = (value or "").strip()
    if not value or value in options:
        return options
    return options + (value,)


@dataclass(frozen=True)
class Settings:
    """Read-only configuration value. Setters return a new Settings."""
    account_titles: Tuple[str, ...] = tuple(DEFAULT_ACCOUNT_TITLES)
    descriptions: Tuple[str, ...] = tuple(DEFAULT_DESCRIPTIONS)
    payment_methods: Tuple[str, ...] = tuple(DEFAULT_PAYMENT_METHODS)
    categories: Tuple[str, ...] = tuple(DEFAULT_CATEGORIES)
    opening_balance: int = 0

    @property
    def default_payment_method(self) -> str:
        return self.payment_methods[0] if self.payment_methods else ""

    def with_account_title(self, title: str) -> "Settings":
        return replace(self, account_titles=_with_option(self.account_titles, title))

    def with_description(self, description: str) -> "Settings":
        return replace(self, descriptions=_with_option(self.descriptions, description))

    def with_payment_method(self, method: str) -> "Settings":
        return replace(self, payment_methods=_with_option(self.payment_methods, method))

    def with_opening_balance(self, balance: int) -> "Settings":
        return replace(self, opening_balance=int(balance))

    def to_dict(self) -> Dict:
        return {
            "account_titles": list(self.account_titles),
            "descriptions": list(self.descriptions),
            "payment_methods": list(self.payment_methods),
            "categories": list(self.categories),
            "opening_balance": self.opening_balance,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Settings":
        """Build settings from a dict; missing keys keep their defaults."""
        defaults = cls()
        return cls(
            account_titles=tuple(data.get("account_titles", defaults.account_titles)),
            descriptions=tuple(data.get("descriptions", defaults.descriptions)),
            payment_methods=tuple(data.get("payment_methods", defaults.payment_methods)),
            categories=tuple(data.get("categories", defaults.categories)),
            opening_balance=int(data.get("opening_balance", defaults.opening_balance)),
        )


def load_settings(path: Path) -> Settings:
    """Load settings from a JSON file; defaults if the file does not exist."""
    if not path.exists():
        return Settings()
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")
    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Path) -> None:
    """Write settings to a JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(settings.to_dict(), f, ensure_ascii=False, indent=2)
