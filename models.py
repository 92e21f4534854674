"""
Domain entities for the personal finance ledger.

Accounts are mutable and compared by identity (two accounts may share a
name). Categories are immutable values compared by name. Transactions are
immutable and keep references to the exact Account and Category objects
they were posted against, so a balance change is visible through every
transaction that points at the same account.
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Union

from utils import format_currency

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert user-provided numeric values into a Decimal."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(eq=False)
class Account:
    """
    A financial account such as a checking account or a credit card.

    Attributes:
        name: Display name (not guaranteed unique)
        balance: Current balance; liabilities hold a positive amount of debt
        is_asset: True for assets, False for liabilities
    """
    name: str
    balance: Decimal = Decimal("0")
    is_asset: bool = True

    def __post_init__(self) -> None:
        self.balance = to_decimal(self.balance)

    @property
    def kind(self) -> str:
        return "Asset" if self.is_asset else "Liability"

    def __str__(self) -> str:
        return f"{self.name} ({self.kind}): {format_currency(self.balance)}"


@dataclass(frozen=True)
class Category:
    """A flat spending category. Two categories with the same name are equal."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, eq=False)
class Transaction:
    """
    A single income (amount >= 0) or expense (amount < 0).

    Attributes:
        amount: Signed amount; the sign is the only type discriminator
        description: Free text entered by the user
        category: Category the transaction is filed under
        account: Account whose balance the transaction moved
        date: Calendar date, today when omitted
    """
    amount: Decimal
    description: str
    category: Category
    account: Account
    date: datetime.date = field(default_factory=datetime.date.today)

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))

    @property
    def is_expense(self) -> bool:
        """Return True if this is an expense (negative amount)."""
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        """Return True unless this is an expense."""
        return not self.is_expense

    @property
    def kind(self) -> str:
        return "EXPENSE" if self.is_expense else "INCOME"

    def __str__(self) -> str:
        return (
            f"[{self.date.isoformat()}] {self.kind}: {format_currency(abs(self.amount))} - "
            f"{self.description} (Cat: {self.category.name}, Acct: {self.account.name})"
        )


@dataclass(eq=False)
class Budget:
    """
    Spending limit for one category.

    spent_amount is derived from the transaction history and is stale until
    Ledger.recompute_budget_spent() runs.

    Attributes:
        category: Budgeted category
        limit_amount: Spending limit
        spent_amount: Sum of expense magnitudes filed under the category
    """
    category: Category
    limit_amount: Decimal
    spent_amount: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        self.limit_amount = to_decimal(self.limit_amount)
        self.spent_amount = to_decimal(self.spent_amount)

    @property
    def remaining(self) -> Decimal:
        """Limit minus spent; negative when over budget."""
        return self.limit_amount - self.spent_amount

    def __str__(self) -> str:
        return (
            f"Budget for '{self.category.name}': {format_currency(self.spent_amount)} spent of "
            f"{format_currency(self.limit_amount)} ({format_currency(self.remaining)} remaining)"
        )
