"""
Report generator module for the ledger.

Computes the net worth and spending-vs-budget reports from a Ledger and
formats them, along with account, transaction and budget listings, as
console text.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Sequence

from tabulate import tabulate

from ledger import Ledger
from models import Account, Budget, Transaction
from utils import format_currency

logger = logging.getLogger(__name__)


@dataclass
class NetWorthReport:
    """
    Totals across all accounts.

    Attributes:
        total_assets: Sum of asset account balances
        total_liabilities: Sum of liability account balances (positive debt)
        net_worth: total_assets - total_liabilities
    """
    total_assets: Decimal
    total_liabilities: Decimal
    net_worth: Decimal


@dataclass
class BudgetStatus:
    """
    Status of a budget category.

    Attributes:
        category: Category name
        limit_amount: Budget limit
        spent_amount: Amount spent in category
        remaining: limit_amount - spent_amount (negative when over budget)
        percentage_used: Percentage of budget used
    """
    category: str
    limit_amount: Decimal
    spent_amount: Decimal
    remaining: Decimal
    percentage_used: Decimal

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0


@dataclass
class SpendingReport:
    """One BudgetStatus per budget, in the order the budgets were set."""
    rows: List[BudgetStatus] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def net_worth_report(ledger: Ledger) -> NetWorthReport:
    """
    Sum asset and liability balances.

    Liability balances are stored as positive amounts of debt, so they are
    subtracted from assets to get net worth.
    """
    total_assets = sum((a.balance for a in ledger.accounts if a.is_asset), Decimal("0"))
    total_liabilities = sum((a.balance for a in ledger.accounts if not a.is_asset), Decimal("0"))
    return NetWorthReport(
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        net_worth=total_assets - total_liabilities,
    )


def _budget_status(budget: Budget) -> BudgetStatus:
    if budget.limit_amount:
        percentage = budget.spent_amount / budget.limit_amount * 100
    else:
        percentage = Decimal("0")
    return BudgetStatus(
        category=budget.category.name,
        limit_amount=budget.limit_amount,
        spent_amount=budget.spent_amount,
        remaining=budget.remaining,
        percentage_used=percentage,
    )


def spending_report(ledger: Ledger) -> SpendingReport:
    """
    Recompute budget spending, then report one row per budget.

    Args:
        ledger: Ledger to report on; its budgets' spent amounts are refreshed

    Returns:
        SpendingReport, empty when no budgets are set
    """
    ledger.recompute_budget_spent()
    return SpendingReport(rows=[_budget_status(b) for b in ledger.budgets])


class ReportGenerator:
    """
    Format ledger reports and listings as console text.

    Listings are rendered with tabulate; the two reports keep the fixed
    layout of the original console output.
    """

    def __init__(self, currency_symbol: str = "$", tablefmt: str = "simple"):
        """
        Initialize the report generator.

        Args:
            currency_symbol: Symbol placed in front of amounts
            tablefmt: tabulate table format for listings
        """
        self.currency_symbol = currency_symbol
        self.tablefmt = tablefmt

    def format_currency(self, amount: Decimal) -> str:
        return format_currency(amount, self.currency_symbol)

    def format_percentage(self, percentage: Decimal) -> str:
        return f"{percentage:.1f}%"

    def generate_net_worth_report(self, ledger: Ledger) -> str:
        """
        Generate the net worth report text.

        Args:
            ledger: Ledger to report on

        Returns:
            Formatted text report
        """
        report = net_worth_report(ledger)
        lines = [
            "",
            "--- Net Worth Report ---",
            f"Total Assets:      {self.format_currency(report.total_assets)}",
            f"Total Liabilities: {self.format_currency(report.total_liabilities)}",
            "-" * 24,
            f"Net Worth:         {self.format_currency(report.net_worth)}",
        ]
        return "\n".join(lines) + "\n"

    def generate_spending_report(self, ledger: Ledger) -> str:
        """
        Generate the spending by category report text.

        Recomputes budget spending first. An empty budget list produces a
        "no budgets" message rather than an error.

        Args:
            ledger: Ledger to report on

        Returns:
            Formatted text report
        """
        report = spending_report(ledger)
        lines = ["", "--- Spending by Category Report ---"]
        if report.is_empty:
            lines.append("No budgets set. Please set budgets to see this report.")
            return "\n".join(lines) + "\n"

        for row in report.rows:
            line = (
                f"Budget for '{row.category}': {self.format_currency(row.spent_amount)} spent of "
                f"{self.format_currency(row.limit_amount)} ({self.format_currency(row.remaining)} remaining)"
            )
            if row.is_over_budget:
                line += " [OVER BUDGET]"
            lines.append(line)
        logger.debug("Spending report generated with %d row(s)", len(report.rows))
        return "\n".join(lines) + "\n"

    def format_account(self, account: Account) -> str:
        """One-line account summary used by the selection prompt."""
        return f"{account.name} ({account.kind}): {self.format_currency(account.balance)}"

    def format_accounts_table(self, accounts: Sequence[Account]) -> str:
        """Render accounts as a table (name, type, balance)."""
        rows = [[a.name, a.kind, self.format_currency(a.balance)] for a in accounts]
        return tabulate(rows, headers=["Account", "Type", "Balance"], tablefmt=self.tablefmt)

    def format_transactions_table(self, transactions: Sequence[Transaction]) -> str:
        """Render transactions in insertion order."""
        rows = [
            [
                tx.date.isoformat(),
                tx.kind,
                self.format_currency(abs(tx.amount)),
                tx.description,
                tx.category.name,
                tx.account.name,
            ]
            for tx in transactions
        ]
        return tabulate(
            rows,
            headers=["Date", "Type", "Amount", "Description", "Category", "Account"],
            tablefmt=self.tablefmt,
        )

    def format_budgets_table(self, budgets: Sequence[Budget]) -> str:
        """
        Render budgets with their spent and remaining amounts.

        Callers must recompute spending first; this method only reads.
        """
        rows = []
        for budget in budgets:
            status = _budget_status(budget)
            rows.append([
                status.category,
                self.format_currency(status.limit_amount),
                self.format_currency(status.spent_amount),
                self.format_currency(status.remaining),
                self.format_percentage(status.percentage_used),
            ])
        return tabulate(
            rows,
            headers=["Category", "Limit", "Spent", "Remaining", "Used"],
            tablefmt=self.tablefmt,
        )
