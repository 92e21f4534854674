"""
Main module for the command-line finance ledger.

Parses arguments, configures logging, prepares the database and starts the
interactive menu.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cli_menu import LedgerMenu
from config_manager import CONFIG_FILE, DEFAULT_CONFIG, load_config, save_config
from database_ops import DatabaseManager
from exceptions import FinanceAppError
from report_generator import ReportGenerator
from utils import resolve_connection_string, resolve_log_path

# Configure module-level logger
logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: dict) -> None:
    """
    Configure logging based on config settings.

    Unknown level names fall back to INFO with a warning.

    Args:
        config: Configuration dictionary with logging settings
    """
    log_config = config.get("logging") or {}
    level_name = str(log_config.get("level") or "INFO").upper()
    log_level = logging.getLevelName(level_name)
    invalid_level = not isinstance(log_level, int)
    if invalid_level:
        log_level = logging.INFO
    log_format = log_config.get("format") or DEFAULT_LOG_FORMAT
    log_file = log_config.get("file")

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        try:
            log_path = resolve_log_path(log_file)
        except OSError as exc:
            raise RuntimeError(f"Unable to prepare log file path '{log_file}': {exc}") from exc
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=handlers,
        force=True
    )
    if invalid_level:
        logger.warning("Invalid log level '%s'; using INFO", level_name)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Personal finance ledger: accounts, transactions, budgets and reports",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(CONFIG_FILE),
        help=f"Path to configuration file (default: {CONFIG_FILE})"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Override the configured log level (e.g. DEBUG, WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("menu", help="Start the interactive menu (default)")
    subparsers.add_parser("init-config", help="Write a config file with default settings")
    return parser


def run_menu(config: dict) -> None:
    """Open the database from config and run the interactive menu."""
    db_manager = DatabaseManager(resolve_connection_string(config))
    try:
        db_manager.create_tables()
        display = config.get("display", {})
        reports = ReportGenerator(
            currency_symbol=display.get("currency_symbol", "$"),
            tablefmt=display.get("table_format", "simple"),
        )
        menu = LedgerMenu(
            db_manager,
            reports,
            hash_iterations=config.get("security", {}).get("pbkdf2_iterations", 390000),
        )
        menu.run()
    finally:
        db_manager.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init-config":
        if args.config.exists():
            print(f"Config file already exists: {args.config}")
            return
        if not save_config(DEFAULT_CONFIG, args.config):
            print(f"Error: Could not write {args.config}", file=sys.stderr)
            sys.exit(1)
        print(f"Wrote default configuration to {args.config}")
        return

    try:
        config = load_config(args.config)
        if args.log_level:
            config["logging"]["level"] = args.log_level
        setup_logging(config)
        run_menu(config)
    except FinanceAppError as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted. Goodbye!")


if __name__ == "__main__":
    main()
