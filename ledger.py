"""
Ledger aggregate for one user's accounts, categories, transactions and budgets.

The ledger owns the canonical Account and Category objects. Transactions and
budgets hold references to those same objects, never copies, so posting a
transaction changes the balance every other holder of that account sees.
"""

import datetime
import logging
from decimal import Decimal
from typing import List, Optional

from models import Account, Budget, Category, Number, Transaction, to_decimal

logger = logging.getLogger(__name__)


class Ledger:
    """
    Per-user collection of accounts, categories, transactions and budgets.

    All sequences keep insertion order and are exposed as the live lists so
    callers can display them in the order entries were made.
    """

    def __init__(self, owner: str):
        """
        Initialize an empty ledger.

        Args:
            owner: Username the ledger belongs to
        """
        self.owner = owner
        self.accounts: List[Account] = []
        self.categories: List[Category] = []
        self.transactions: List[Transaction] = []
        self.budgets: List[Budget] = []

    def __repr__(self) -> str:
        return (
            f"<Ledger(owner='{self.owner}', accounts={len(self.accounts)}, "
            f"categories={len(self.categories)}, transactions={len(self.transactions)}, "
            f"budgets={len(self.budgets)})>"
        )

    @property
    def has_accounts(self) -> bool:
        return bool(self.accounts)

    @property
    def has_categories(self) -> bool:
        return bool(self.categories)

    def add_account(self, name: str, balance: Number = Decimal("0"), is_asset: bool = True) -> Account:
        """
        Create an account with an opening balance and append it.

        Args:
            name: Account name (duplicates are allowed)
            balance: Opening balance; liabilities use a positive amount owed
            is_asset: True for assets, False for liabilities

        Returns:
            The created Account
        """
        account = Account(name=name, balance=balance, is_asset=is_asset)
        self.accounts.append(account)
        logger.info("Added %s account '%s' with balance %s", account.kind.lower(), name, account.balance)
        return account

    def add_category(self, name: str) -> Category:
        """Create a category and append it. Duplicate names are not rejected."""
        category = Category(name)
        self.categories.append(category)
        logger.info("Added category '%s'", name)
        return category

    def post_transaction(
        self,
        amount: Number,
        description: str,
        date: Optional[datetime.date],
        category: Category,
        account: Account
    ) -> Transaction:
        """
        Record a transaction and move the account balance by its amount.

        No validation is performed: any category or account is accepted,
        including ones that are not part of this ledger.

        Args:
            amount: Positive for income, negative for expense
            description: Free text description
            date: Transaction date, or None for today
            category: Category to file the transaction under
            account: Account whose balance changes; must be the instance
                held in ``accounts`` for the change to be visible there

        Returns:
            The recorded Transaction
        """
        transaction = Transaction(
            amount=amount,
            description=description,
            category=category,
            account=account,
            date=date if date is not None else datetime.date.today(),
        )
        self.transactions.append(transaction)
        account.balance += transaction.amount
        logger.debug(
            "Posted %s of %s to '%s' (new balance %s)",
            transaction.kind.lower(), transaction.amount, account.name, account.balance
        )
        return transaction

    def set_budget(self, category: Category, limit_amount: Number) -> Budget:
        """
        Create or replace the budget for a category.

        Any existing budget whose category has the same name is removed before
        the new one is appended, so each category name has at most one budget.

        Args:
            category: Category to budget
            limit_amount: Spending limit

        Returns:
            The new Budget, with spent_amount reset to zero
        """
        self.budgets[:] = [b for b in self.budgets if b.category != category]
        budget = Budget(category=category, limit_amount=to_decimal(limit_amount))
        self.budgets.append(budget)
        logger.info("Set budget for '%s' to %s", category.name, budget.limit_amount)
        return budget

    def recompute_budget_spent(self) -> None:
        """
        Recalculate spent_amount for every budget from the full history.

        Only expenses (amount < 0) count; income never reduces spending even
        when filed under a budgeted category. There is no month filtering.
        """
        for budget in self.budgets:
            budget.spent_amount = sum(
                (abs(tx.amount) for tx in self.transactions
                 if tx.amount < 0 and tx.category == budget.category),
                Decimal("0"),
            )
        logger.debug("Recomputed spent amounts for %d budget(s)", len(self.budgets))
