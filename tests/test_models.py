"""
Tests for the ledger entity types: equality rules, coercion and display text.
"""

from datetime import date
from decimal import Decimal

import pytest

from models import Account, Budget, Category, Transaction, to_decimal


class TestCategory:
    def test_equality_is_by_name(self):
        """Distinct instances with the same name are the same category."""
        a = Category("Groceries")
        b = Category("Groceries")
        assert a is not b
        assert a == b
        assert hash(a) == hash(b)
        assert Category("Rent") != a

    def test_category_is_immutable(self):
        category = Category("Groceries")
        with pytest.raises(AttributeError):
            category.name = "Food"


class TestAccount:
    def test_accounts_compare_by_identity(self):
        """Account names are not unique, so equal fields do not mean the same account."""
        first = Account("Checking", Decimal("10"))
        second = Account("Checking", Decimal("10"))
        assert first != second
        assert first == first

    def test_balance_is_coerced_to_decimal(self):
        account = Account("Cash", 12.1)
        assert account.balance == Decimal("12.1")
        assert isinstance(account.balance, Decimal)

    def test_str(self):
        assert str(Account("Checking", Decimal("500"))) == "Checking (Asset): $500.00"
        assert str(Account("Visa", Decimal("1234.5"), is_asset=False)) == "Visa (Liability): $1,234.50"


class TestTransaction:
    def test_sign_is_the_type(self):
        account = Account("Checking")
        category = Category("Misc")
        expense = Transaction(Decimal("-5"), "coffee", category, account)
        income = Transaction(Decimal("0"), "zero", category, account)
        assert expense.is_expense and expense.kind == "EXPENSE"
        assert income.is_income and income.kind == "INCOME"

    def test_date_defaults_to_today(self):
        tx = Transaction(Decimal("1"), "x", Category("Misc"), Account("Cash"))
        assert tx.date == date.today()

    def test_holds_references_not_copies(self):
        account = Account("Checking")
        category = Category("Misc")
        tx = Transaction(Decimal("1"), "x", category, account)
        assert tx.account is account
        assert tx.category is category

    def test_str(self):
        tx = Transaction(
            Decimal("-50"), "Weekly shop", Category("Groceries"), Account("Checking"), date(2024, 1, 5)
        )
        assert str(tx) == "[2024-01-05] EXPENSE: $50.00 - Weekly shop (Cat: Groceries, Acct: Checking)"


class TestBudget:
    def test_remaining_may_be_negative(self):
        budget = Budget(Category("Dining"), Decimal("100"), Decimal("130"))
        assert budget.remaining == Decimal("-30")

    def test_spent_defaults_to_zero(self):
        assert Budget(Category("Dining"), 100).spent_amount == Decimal("0")

    def test_str(self):
        budget = Budget(Category("Groceries"), Decimal("200"), Decimal("50"))
        assert str(budget) == "Budget for 'Groceries': $50.00 spent of $200.00 ($150.00 remaining)"


def test_to_decimal_avoids_float_noise():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("3.50") == Decimal("3.50")
