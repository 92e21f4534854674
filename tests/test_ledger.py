"""
Tests for Ledger mutations: posting transactions, budgets and spend recomputation.
"""

from datetime import date
from decimal import Decimal

from ledger import Ledger
from models import Account, Category


def _account(ledger, name):
    return next(a for a in ledger.accounts if a.name == name)


def _category(ledger, name):
    return next(c for c in ledger.categories if c.name == name)


class TestPostTransaction:
    """Tests for Ledger.post_transaction."""

    def test_groceries_scenario(self):
        """Expense lowers the balance and the budget reflects it after recompute."""
        ledger = Ledger("alice")
        groceries = ledger.add_category("Groceries")
        checking = ledger.add_account("Checking", Decimal("500"), is_asset=True)

        ledger.post_transaction(Decimal("-50"), "Weekly shop", None, groceries, checking)

        assert checking.balance == Decimal("450")
        assert len(ledger.transactions) == 1
        assert ledger.transactions[0].amount == Decimal("-50")

        budget = ledger.set_budget(groceries, Decimal("200"))
        ledger.recompute_budget_spent()
        assert budget.spent_amount == Decimal("50")
        assert budget.remaining == Decimal("150")

    def test_balance_equals_initial_plus_sum(self, ledger):
        checking = _account(ledger, "Checking")
        groceries = _category(ledger, "Groceries")
        amounts = [Decimal("-12.34"), Decimal("100"), Decimal("-0.01"), Decimal("7.5"), Decimal("-250")]

        for amount in amounts:
            ledger.post_transaction(amount, "tx", date(2024, 3, 1), groceries, checking)

        assert checking.balance == Decimal("500") + sum(amounts)

    def test_insertion_order_is_kept(self, ledger):
        checking = _account(ledger, "Checking")
        groceries = _category(ledger, "Groceries")
        ledger.post_transaction(1, "later", date(2024, 5, 1), groceries, checking)
        ledger.post_transaction(2, "earlier", date(2023, 1, 1), groceries, checking)

        assert [tx.description for tx in ledger.transactions] == ["later", "earlier"]

    def test_date_defaults_to_today(self, ledger):
        tx = ledger.post_transaction(
            1, "x", None, _category(ledger, "Salary"), _account(ledger, "Checking")
        )
        assert tx.date == date.today()

    def test_balance_change_visible_through_every_transaction(self, ledger):
        checking = _account(ledger, "Checking")
        groceries = _category(ledger, "Groceries")
        first = ledger.post_transaction(-10, "a", None, groceries, checking)
        second = ledger.post_transaction(-20, "b", None, groceries, checking)

        assert first.account is second.account is ledger.accounts[0]
        assert first.account.balance == Decimal("470")

    def test_accepts_foreign_account_and_category(self, ledger):
        """No membership validation: outside objects are accepted as-is."""
        outsider = Account("Elsewhere", Decimal("10"))
        tx = ledger.post_transaction(-3, "x", None, Category("Unlisted"), outsider)

        assert outsider.balance == Decimal("7")
        assert tx in ledger.transactions
        assert outsider not in ledger.accounts

    def test_liability_balance_moves_by_amount(self, ledger):
        card = _account(ledger, "Credit Card")
        ledger.post_transaction(Decimal("75"), "charge", None, _category(ledger, "Groceries"), card)
        assert card.balance == Decimal("75")


class TestSetBudget:
    """Tests for Ledger.set_budget replace-on-set behavior."""

    def test_replaces_existing_budget(self, ledger):
        groceries = _category(ledger, "Groceries")
        ledger.set_budget(groceries, Decimal("100"))
        ledger.set_budget(groceries, Decimal("300"))

        assert len(ledger.budgets) == 1
        assert ledger.budgets[0].limit_amount == Decimal("300")

    def test_replacement_matches_by_name(self, ledger):
        ledger.set_budget(Category("Groceries"), 100)
        ledger.set_budget(Category("Groceries"), 150)
        ledger.set_budget(Category("Salary"), 10)

        assert [(b.category.name, b.limit_amount) for b in ledger.budgets] == [
            ("Groceries", Decimal("150")),
            ("Salary", Decimal("10")),
        ]

    def test_replacement_resets_spent(self, ledger):
        groceries = _category(ledger, "Groceries")
        ledger.post_transaction(-40, "shop", None, groceries, _account(ledger, "Checking"))
        ledger.set_budget(groceries, 100)
        ledger.recompute_budget_spent()
        assert ledger.budgets[0].spent_amount == Decimal("40")

        ledger.set_budget(groceries, 200)
        assert ledger.budgets[0].spent_amount == Decimal("0")

    def test_replaced_budget_moves_to_end(self, ledger):
        ledger.set_budget(_category(ledger, "Groceries"), 1)
        ledger.set_budget(_category(ledger, "Salary"), 2)
        ledger.set_budget(_category(ledger, "Groceries"), 3)

        assert [b.category.name for b in ledger.budgets] == ["Salary", "Groceries"]


class TestRecomputeBudgetSpent:
    """Tests for the full-history spend recomputation."""

    def test_income_never_counts(self, ledger):
        checking = _account(ledger, "Checking")
        groceries = _category(ledger, "Groceries")
        ledger.post_transaction(Decimal("-30"), "shop", None, groceries, checking)
        ledger.post_transaction(Decimal("25"), "refund", None, groceries, checking)
        ledger.post_transaction(Decimal("0"), "zero", None, groceries, checking)
        ledger.set_budget(groceries, 100)

        ledger.recompute_budget_spent()

        assert ledger.budgets[0].spent_amount == Decimal("30")

    def test_only_matching_category_counts(self, ledger):
        checking = _account(ledger, "Checking")
        ledger.post_transaction(-30, "shop", None, _category(ledger, "Groceries"), checking)
        ledger.post_transaction(-99, "other", None, _category(ledger, "Salary"), checking)
        ledger.post_transaction(-5, "same name", None, Category("Groceries"), checking)
        ledger.set_budget(_category(ledger, "Groceries"), 100)

        ledger.recompute_budget_spent()

        assert ledger.budgets[0].spent_amount == Decimal("35")

    def test_uses_whole_history(self, ledger):
        checking = _account(ledger, "Checking")
        groceries = _category(ledger, "Groceries")
        ledger.post_transaction(-10, "old", date(2019, 1, 1), groceries, checking)
        ledger.post_transaction(-20, "new", date(2024, 6, 1), groceries, checking)
        ledger.set_budget(groceries, 100)

        ledger.recompute_budget_spent()
        assert ledger.budgets[0].spent_amount == Decimal("30")

    def test_spent_is_stale_until_recompute(self, ledger):
        groceries = _category(ledger, "Groceries")
        ledger.set_budget(groceries, 100)
        ledger.post_transaction(-10, "shop", None, groceries, _account(ledger, "Checking"))

        assert ledger.budgets[0].spent_amount == Decimal("0")
        ledger.recompute_budget_spent()
        assert ledger.budgets[0].spent_amount == Decimal("10")

    def test_recompute_is_idempotent(self, ledger):
        groceries = _category(ledger, "Groceries")
        ledger.post_transaction(-10, "shop", None, groceries, _account(ledger, "Checking"))
        ledger.set_budget(groceries, 100)

        ledger.recompute_budget_spent()
        ledger.recompute_budget_spent()
        assert ledger.budgets[0].spent_amount == Decimal("10")


def test_add_account_and_category_allow_duplicates():
    ledger = Ledger("bob")
    ledger.add_account("Cash")
    ledger.add_account("Cash")
    ledger.add_category("Misc")
    ledger.add_category("Misc")

    assert len(ledger.accounts) == 2
    assert len(ledger.categories) == 2
    assert ledger.has_accounts and ledger.has_categories
    assert not Ledger("empty").has_accounts
