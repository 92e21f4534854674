"""
Interactive text menu for the finance ledger.

The menu holds the logged-in user's Ledger for the length of a session and
passes it to every ledger and report operation. The ledger is saved after
each completed action in the app menu.
"""

import getpass
import logging
from typing import Callable, Optional

from credentials import DEFAULT_ITERATIONS, hash_password, verify_password
from database_ops import DatabaseManager
from exceptions import DuplicateUserError, FinanceAppError, InputError
from ledger import Ledger
from report_generator import ReportGenerator
from selection import prompt_selection
from utils import parse_amount, parse_date

logger = logging.getLogger(__name__)


class LedgerMenu:
    """
    Login/register loop plus the per-user app menu.

    Input and output are injectable so sessions can be scripted in tests.
    """

    def __init__(
        self,
        db_manager: DatabaseManager,
        report_generator: Optional[ReportGenerator] = None,
        *,
        input_func: Optional[Callable[[str], str]] = None,
        output_func: Optional[Callable[[str], None]] = None,
        password_func: Optional[Callable[[str], str]] = None,
        hash_iterations: int = DEFAULT_ITERATIONS
    ):
        """
        Initialize the menu.

        Args:
            db_manager: Storage for users and ledgers
            report_generator: Formatter for reports and listings
            input_func: Replacement for `input`
            output_func: Replacement for `print`
            password_func: Replacement for `getpass.getpass`
            hash_iterations: PBKDF2 work factor for new passwords
        """
        self.db_manager = db_manager
        self.reports = report_generator or ReportGenerator()
        self.input = input_func or input
        self.output = output_func or print
        self.read_password = password_func or getpass.getpass
        self.hash_iterations = hash_iterations

    def _ask(self, prompt: str) -> str:
        return self.input(prompt).strip()

    def run(self) -> None:
        """Show the main menu until the user exits (or input ends)."""
        self.output("=========================================")
        self.output(" Welcome to the CLI Finance Tracker ")
        self.output("=========================================")

        try:
            while True:
                self.output("\n--- Main Menu ---")
                self.output("1. Login")
                self.output("2. Register")
                self.output("3. Exit")
                choice = self._ask("Choose an option: ")

                try:
                    if choice == "1":
                        ledger = self.handle_login()
                        if ledger is not None:
                            self.run_app_menu(ledger)
                        continue
                    if choice == "2":
                        self.handle_register()
                        continue
                except FinanceAppError as e:
                    logger.error(f"Main menu action {choice} failed: {e}")
                    self.output(f"Error: {e.message}")
                    continue

                if choice == "3":
                    self.output("Thank you for using Finance Tracker. Goodbye!")
                    return
                else:
                    self.output("Invalid choice. Please try again.")
        except EOFError:
            logger.info("Input closed; leaving menu")
            self.output("")

    def handle_login(self) -> Optional[Ledger]:
        """Authenticate and return the user's ledger, or None on failure."""
        username = self._ask("Enter username: ")
        password = self.read_password("Enter password: ")

        stored_hash = self.db_manager.get_password_hash(username)
        if stored_hash is None or not verify_password(password, stored_hash):
            logger.warning("Failed login attempt for '%s'", username)
            self.output("Error: Invalid username or password.")
            return None

        ledger = self.db_manager.load_ledger(username)
        self.output(f"\nWelcome back, {username}!")
        return ledger

    def handle_register(self) -> bool:
        """Register a new user. Returns True on success."""
        username = self._ask("Enter new username: ")
        if not username:
            self.output("Error: Username cannot be empty.")
            return False
        if self.db_manager.user_exists(username):
            self.output("Error: This username is already taken.")
            return False

        password = self.read_password("Enter new password: ")
        try:
            self.db_manager.create_user(username, hash_password(password, self.hash_iterations))
        except DuplicateUserError as e:
            self.output(f"Error: {e.message}")
            return False

        self.output("Registration successful! Please login.")
        return True

    def run_app_menu(self, ledger: Ledger) -> None:
        """Run the per-user menu until logout, saving after each action."""
        actions = {
            "1": self.handle_add_transaction,
            "2": self.handle_view_transactions,
            "3": self.handle_manage_accounts,
            "4": self.handle_manage_categories,
            "5": self.handle_manage_budgets,
            "6": self.handle_run_reports,
        }
        while True:
            self.output(f"\n--- App Menu ({ledger.owner}) ---")
            self.output("1. Add Transaction")
            self.output("2. View Transactions")
            self.output("3. Manage Accounts")
            self.output("4. Manage Categories")
            self.output("5. Manage Budgets")
            self.output("6. Run Reports")
            self.output("7. Logout")
            choice = self._ask("Choose an option: ")

            if choice == "7":
                self.output("Logging out...")
                return

            action = actions.get(choice)
            if action is None:
                self.output("Invalid choice. Please try again.")
                continue

            try:
                action(ledger)
                self.db_manager.save_ledger(ledger)
            except FinanceAppError as e:
                logger.error(f"Menu action {choice} failed: {e}")
                self.output(f"Error: {e.message}")

    def handle_add_transaction(self, ledger: Ledger) -> None:
        if not ledger.has_accounts:
            self.output("Error: You must add an account first.")
            return
        if not ledger.has_categories:
            self.output("Error: You must add a category first.")
            return

        amount = parse_amount(self._ask("Enter amount (positive for income, negative for expense): "))
        description = self._ask("Enter description: ")
        date = parse_date(self._ask("Enter date (yyyy-MM-dd, press Enter for today): "))

        self.output("Select Account:")
        account = prompt_selection(
            ledger.accounts,
            input_func=self.input,
            output_func=self.output,
            label=self.reports.format_account,
        )
        self.output("Select Category:")
        category = prompt_selection(ledger.categories, input_func=self.input, output_func=self.output)

        ledger.post_transaction(amount, description, date, category, account)
        self.output("Transaction added successfully.")

    def handle_view_transactions(self, ledger: Ledger) -> None:
        self.output("\n--- Your Transactions ---")
        if not ledger.transactions:
            self.output("No transactions found.")
            return
        self.output(self.reports.format_transactions_table(ledger.transactions))

    def handle_manage_accounts(self, ledger: Ledger) -> None:
        self.output("\n--- Manage Accounts ---")
        self.output("1. Add New Account")
        self.output("2. View All Accounts")
        choice = self._ask("Choose an option: ")

        if choice == "1":
            name = self._ask("Enter account name (e.g., Checking, Credit Card): ")
            if not name:
                raise InputError("Account name cannot be empty.")
            balance = parse_amount(self._ask("Enter initial balance: "))
            is_asset = self._ask("Is this an asset (Y/N)? (e.g., Checking=Y, Credit Card=N): ").lower() == "y"
            ledger.add_account(name, balance, is_asset)
            self.output(f"Account '{name}' added.")
        elif choice == "2":
            self.output("\n--- Your Accounts ---")
            if not ledger.accounts:
                self.output("No accounts found.")
                return
            self.output(self.reports.format_accounts_table(ledger.accounts))

    def handle_manage_categories(self, ledger: Ledger) -> None:
        self.output("\n--- Manage Categories ---")
        self.output("1. Add New Category")
        self.output("2. View All Categories")
        choice = self._ask("Choose an option: ")

        if choice == "1":
            name = self._ask("Enter category name (e.g., Groceries, Rent): ")
            if not name:
                raise InputError("Category name cannot be empty.")
            ledger.add_category(name)
            self.output(f"Category '{name}' added.")
        elif choice == "2":
            self.output("\n--- Your Categories ---")
            if not ledger.categories:
                self.output("No categories found.")
                return
            for category in ledger.categories:
                self.output(f"- {category.name}")

    def handle_manage_budgets(self, ledger: Ledger) -> None:
        self.output("\n--- Manage Budgets ---")
        self.output("1. Set/Update Budget for a Category")
        self.output("2. View All Budgets")
        choice = self._ask("Choose an option: ")

        if choice == "1":
            if not ledger.has_categories:
                self.output("Error: You must add a category first.")
                return
            self.output("Select category to budget:")
            category = prompt_selection(ledger.categories, input_func=self.input, output_func=self.output)
            limit = parse_amount(self._ask(f"Enter monthly budget limit for {category.name}: "))
            ledger.set_budget(category, limit)
            self.output("Budget set successfully.")
        elif choice == "2":
            self.output("\n--- Your Budgets ---")
            if not ledger.budgets:
                self.output("No budgets set.")
                return
            ledger.recompute_budget_spent()
            self.output(self.reports.format_budgets_table(ledger.budgets))

    def handle_run_reports(self, ledger: Ledger) -> None:
        self.output("\n--- Run Reports ---")
        self.output("1. Net Worth Report")
        self.output("2. Spending by Category")
        choice = self._ask("Choose an option: ")

        if choice == "1":
            self.output(self.reports.generate_net_worth_report(ledger))
        elif choice == "2":
            self.output(self.reports.generate_spending_report(ledger))
