from decimal import Decimal

import pytest

from database_ops import DatabaseManager
from ledger import Ledger


@pytest.fixture
def ledger():
    """Ledger with one asset account, one liability account and two categories."""
    ledger = Ledger(owner="alice")
    ledger.add_account("Checking", Decimal("500"), is_asset=True)
    ledger.add_account("Credit Card", Decimal("0"), is_asset=False)
    ledger.add_category("Groceries")
    ledger.add_category("Salary")
    return ledger

@pytest.fixture
def db_manager(tmp_path):
    """DatabaseManager backed by a temporary SQLite file."""
    manager = DatabaseManager(f"sqlite:///{(tmp_path / 'ledger.db').as_posix()}")
    manager.create_tables()
    try:
        yield manager
    finally:
        manager.close()
