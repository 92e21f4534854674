"""
Unit tests for the unified exception hierarchy.

Tests exception creation, attributes, string representations, and error context.
"""

import pytest

from exceptions import (
    AuthError,
    ConfigError,
    DatabaseError,
    DuplicateUserError,
    EmptySelectionError,
    FinanceAppError,
    InputError,
    InvalidSelectionError,
    OutOfRangeError,
    SelectionError,
    UIError,
)


class TestFinanceAppError:
    """Test base FinanceAppError class."""

    def test_basic_exception_creation(self):
        """Test creating a basic FinanceAppError."""
        error = FinanceAppError("Test error message")
        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.details == {}
        assert error.original_error is None

    def test_exception_with_details(self):
        """Details are appended to the string form."""
        error = FinanceAppError("Invalid selection index.", details={"position": 5, "size": 3})
        assert error.message == "Invalid selection index."
        assert str(error) == "Invalid selection index. (position=5, size=3)"

    def test_exception_with_original_error(self):
        """Test creating exception with original error chaining."""
        original = ValueError("Original error")
        error = FinanceAppError("Wrapped error", original_error=original)
        assert error.original_error is original


class TestExceptionHierarchy:
    """Test specific exception subclasses."""

    @pytest.mark.parametrize(
        "error_cls",
        [ConfigError, DatabaseError, AuthError, SelectionError, InputError, UIError],
    )
    def test_direct_subclasses(self, error_cls):
        """Every domain error is a FinanceAppError."""
        assert isinstance(error_cls("boom"), FinanceAppError)

    def test_duplicate_user_is_database_error(self):
        error = DuplicateUserError("This username is already taken.", details={"username": "bob"})
        assert isinstance(error, DatabaseError)
        assert error.details["username"] == "bob"

    @pytest.mark.parametrize(
        "error_cls",
        [EmptySelectionError, OutOfRangeError, InvalidSelectionError],
    )
    def test_selection_errors(self, error_cls):
        """Selection failures can be caught together."""
        with pytest.raises(SelectionError):
            raise error_cls("bad pick")
