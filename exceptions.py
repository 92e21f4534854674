"""
Unified exception hierarchy for the finance ledger.

FinanceAppError is the base exception so the menu loop can catch every
application error in one place and keep the session alive.
"""

from typing import Optional


class FinanceAppError(Exception):
    """
    Base exception class for all finance ledger errors.

    Attributes:
        message: Human-readable error message
        details: Optional dictionary with additional error context
        original_error: Optional original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        original_error: Optional[Exception] = None
    ) -> None:
        """
        Initialize FinanceAppError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        msg = self.message
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            msg = f"{msg} ({detail_str})"
        return msg


class ConfigError(FinanceAppError):
    """Raised when configuration loading or validation fails."""
    pass


class DatabaseError(FinanceAppError):
    """Raised when ledger storage operations fail."""
    pass


class DuplicateUserError(DatabaseError):
    """Raised when registering a username that is already stored."""
    pass


class AuthError(FinanceAppError):
    """Raised when a stored password hash cannot be parsed or verified."""
    pass


class SelectionError(FinanceAppError):
    """Base error for picking an item out of a numbered list."""
    pass


class EmptySelectionError(SelectionError):
    """Raised when selecting from an empty list."""
    pass


class OutOfRangeError(SelectionError):
    """Raised when the requested position is outside [1, len(items)]."""
    pass


class InvalidSelectionError(SelectionError):
    """Raised when the typed selection is not a whole number."""
    pass


class InputError(FinanceAppError):
    """Raised when user-entered amounts or dates cannot be parsed."""
    pass


class UIError(FinanceAppError):
    """Raised when the text menu cannot continue."""
    pass
