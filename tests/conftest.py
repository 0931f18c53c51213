"""Shared fixtures: a fresh record store and settings file per test."""

from __future__ import annotations

from pathlib import Path

import pytest

from receipt_ledger.core.database import init_db


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "ledger.sqlite"
    init_db(path)
    return path


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.json"
