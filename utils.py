"""
Utility helpers for filesystem paths, user input parsing, and money formatting.

Centralizes logic for resolving the project data directory and database
connection string so the CLI entry point and tests stay in sync.
"""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from sqlalchemy.engine import make_url

from exceptions import InputError

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent
_DEFAULT_DATA_DIR_NAME = "data"
_DEFAULT_DB_FILENAME = "ledger.db"
DATE_FORMAT = "%Y-%m-%d"


def format_currency(amount: Decimal, symbol: str = "$") -> str:
    """
    Format amount as currency string.

    Args:
        amount: Amount to format
        symbol: Currency symbol placed before the number

    Returns:
        Formatted string (e.g., "$1,234.56" or "-$123.45")
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def parse_amount(amount_str: str) -> Decimal:
    """
    Parse a user-typed amount into a Decimal.

    Accepts an optional leading sign, a "$" prefix and thousands separators.

    Raises:
        InputError: If the text is not a finite number
    """
    cleaned = (amount_str or "").strip().replace(",", "")
    negative = cleaned.startswith("-")
    if cleaned[:1] in "+-" and cleaned:
        cleaned = cleaned[1:]
    cleaned = cleaned.lstrip("$").strip()

    try:
        value = Decimal(cleaned)
    except InvalidOperation as exc:
        raise InputError("Invalid amount.", details={"value": amount_str}, original_error=exc) from exc
    if not value.is_finite():
        raise InputError("Invalid amount.", details={"value": amount_str})
    return -value if negative else value


def parse_date(date_str: str, *, today: Optional[Callable[[], date]] = None) -> date:
    """
    Parse a YYYY-MM-DD date; an empty string means today.

    Args:
        date_str: Raw user input
        today: Optional clock replacement (useful for testing)

    Raises:
        InputError: If the text is not a valid YYYY-MM-DD date
    """
    date_str = (date_str or "").strip()
    if not date_str:
        return (today or date.today)()
    try:
        return datetime.strptime(date_str, DATE_FORMAT).date()
    except ValueError as exc:
        raise InputError(
            "Invalid date format. Please use yyyy-MM-dd.",
            details={"value": date_str},
            original_error=exc,
        ) from exc


def get_project_root() -> Path:
    """Return the repository root directory."""
    return _PROJECT_ROOT


def _coerce_path(path_value: str | Path) -> Path:
    """Convert a string/Path into an absolute, project-root based Path."""
    path = Path(path_value)
    if path.is_absolute():
        return path
    return get_project_root() / path


def get_data_dir(config: Optional[Dict[str, Any]] = None) -> Path:
    """
    Resolve the data directory path without creating it.

    Args:
        config: Optional configuration dictionary.

    Returns:
        Path to the data directory (may not exist yet).
    """
    db_config = (config or {}).get("database", {})
    data_dir_raw = db_config.get("data_dir", _DEFAULT_DATA_DIR_NAME)
    return _coerce_path(data_dir_raw)


def ensure_data_dir(config: Optional[Dict[str, Any]] = None) -> Path:
    """
    Ensure the data directory exists and return its Path.

    Args:
        config: Optional configuration dictionary.

    Returns:
        Absolute Path to the ensured data directory.
    """
    data_dir = get_data_dir(config)
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Failed to create data directory '%s': %s", data_dir, exc)
        raise
    return data_dir


def _ensure_sqlite_parent_dir(connection_string: str) -> None:
    """Ensure the parent directory for a file-backed SQLite database exists."""
    url = make_url(connection_string)
    if not url.drivername.startswith("sqlite"):
        return

    database = url.database
    if not database or database == ":memory:":
        return

    db_path = Path(database)
    if not db_path.is_absolute():
        db_path = get_project_root() / db_path

    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Failed to create SQLite parent directory '%s': %s", db_path.parent, exc)
        raise


def resolve_connection_string(config: Optional[Dict[str, Any]] = None) -> str:
    """
    Resolve the database connection string using env var, config, or defaults.

    Order of precedence:
        1. DB_CONNECTION_STRING environment variable
        2. config['database']['connection_string']
        3. Constructed from data_dir/path defaults

    Args:
        config: Optional configuration dictionary.

    Returns:
        SQLAlchemy connection string.
    """
    config = config or {}
    env_conn = os.environ.get("DB_CONNECTION_STRING")
    if env_conn:
        _ensure_sqlite_parent_dir(env_conn)
        return env_conn

    db_config = config.get("database", {})
    config_conn = db_config.get("connection_string")
    if config_conn:
        _ensure_sqlite_parent_dir(config_conn)
        return config_conn

    data_dir = ensure_data_dir(config)
    db_path = Path(db_config.get("path", _DEFAULT_DB_FILENAME))
    if not db_path.is_absolute():
        db_path = data_dir / db_path
    else:
        db_path.parent.mkdir(parents=True, exist_ok=True)

    return f"sqlite:///{db_path.as_posix()}"


def resolve_log_path(log_path: str) -> Path:
    """
    Convert a log file path to an absolute path under the project root when needed.

    Args:
        log_path: Configured log file path (relative or absolute).

    Returns:
        Absolute Path for logging output.
    """
    resolved = _coerce_path(log_path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved
