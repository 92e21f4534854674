"""
Database operations module for ledger storage.

Each user's ledger is stored in five tables (users, accounts, categories,
transactions, budgets) through the SQLAlchemy ORM. SQLite is the default
backend. A ledger is always written as one unit: saving replaces every
row the user owns inside a single session transaction.

Loading rebuilds shared identity. Each stored account or category row becomes
exactly one in-memory object, and every transaction or budget that referenced
it gets that same object back.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker
from sqlalchemy.types import TypeDecorator

from exceptions import DatabaseError, DuplicateUserError
from ledger import Ledger
from models import Account, Budget, Category, Transaction, to_decimal

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_DECIMAL_LENGTH = 64


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


class DecimalString(TypeDecorator):
    """
    Store Decimal values as text so they round-trip without float rounding.

    SQLite has no native decimal type; Numeric columns there go through
    float, which would break exact balance arithmetic.
    """

    impl = String
    cache_ok = True

    def __init__(self, length: int = DEFAULT_DECIMAL_LENGTH):
        super().__init__(length)

    def process_bind_param(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        return str(to_decimal(value))

    def process_result_value(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        return Decimal(value)


# Base class for declarative models
Base = declarative_base()


class User(Base):
    """
    Registered user and the owner of one ledger.

    Attributes:
        id: Auto-incrementing primary key
        username: Unique login name
        password_hash: Encoded hash produced by credentials.hash_password
        created_at: Timestamp when the user registered
        updated_at: Timestamp when the ledger was last saved
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


class AccountRecord(Base):
    """
    Stored account.

    ``listed`` is False for accounts that only appear as the target of a
    transaction and were never part of the ledger's account list.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    balance = Column(DecimalString(), nullable=False)
    is_asset = Column(Boolean, nullable=False, default=True)
    listed = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<AccountRecord(id={self.id}, name='{self.name}', balance={self.balance})>"


class CategoryRecord(Base):
    """Stored category; ``listed`` has the same meaning as on AccountRecord."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    listed = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<CategoryRecord(id={self.id}, name='{self.name}')>"


class TransactionRecord(Base):
    """Stored transaction, pointing at its account and category rows."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    amount = Column(DecimalString(), nullable=False)
    description = Column(String(500), nullable=False, default="")
    date = Column(Date, nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)

    account = relationship("AccountRecord")
    category = relationship("CategoryRecord")

    def __repr__(self) -> str:
        return (
            f"<TransactionRecord(id={self.id}, date={self.date}, "
            f"description='{self.description[:30]}', amount={self.amount})>"
        )


class BudgetRecord(Base):
    """Stored budget, including the last computed spent amount."""

    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    limit_amount = Column(DecimalString(), nullable=False)
    spent_amount = Column(DecimalString(), nullable=False)

    category = relationship("CategoryRecord")

    def __repr__(self) -> str:
        return f"<BudgetRecord(id={self.id}, category_id={self.category_id}, limit={self.limit_amount})>"


class DatabaseManager:
    """
    Manages database connections and ledger persistence.

    Provides the user lookup and ledger load/save operations the text menu
    needs for login, registration and saving after each action.
    """

    def __init__(self, connection_string: str):
        """
        Initialize the database manager.

        Args:
            connection_string: SQLAlchemy connection string (e.g., 'sqlite:///data/ledger.db')

        Raises:
            DatabaseError: If the engine cannot be created
        """
        try:
            self.engine = create_engine(connection_string, echo=False)
            self.SessionLocal = sessionmaker(bind=self.engine)
            logger.info(f"Database manager initialized with connection: {connection_string}")
        except SQLAlchemyError as e:
            logger.error(f"Failed to initialize database: {e}")
            raise DatabaseError("Failed to initialize database", original_error=e) from e

    def create_tables(self) -> None:
        """
        Create all database tables if they don't exist.

        Raises:
            DatabaseError: If table creation fails
        """
        try:
            Base.metadata.create_all(self.engine)
            logger.info("Database tables created/verified successfully")
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database tables: {e}")
            raise DatabaseError("Failed to create database tables", original_error=e) from e

    def get_session(self) -> Session:
        """
        Get a new database session.

        Note:
            Caller is responsible for closing the session.
        """
        return self.SessionLocal()

    def _get_user(self, session: Session, username: str) -> Optional[User]:
        return session.query(User).filter(User.username == username).first()

    def user_exists(self, username: str) -> bool:
        """Return True if a user with this name is registered."""
        session = self.get_session()
        try:
            return self._get_user(session, username) is not None
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user '{username}': {e}")
            raise DatabaseError("Failed to look up user", details={"username": username}, original_error=e) from e
        finally:
            session.close()

    def create_user(self, username: str, password_hash: str) -> None:
        """
        Register a user with an empty ledger.

        Args:
            username: Unique login name
            password_hash: Encoded password hash

        Raises:
            DuplicateUserError: If the username is already taken
            DatabaseError: If the insert fails
        """
        session = self.get_session()
        try:
            if self._get_user(session, username) is not None:
                raise DuplicateUserError("This username is already taken.", details={"username": username})
            session.add(User(username=username, password_hash=password_hash))
            session.commit()
            logger.info(f"Registered user '{username}'")
        except DuplicateUserError:
            session.rollback()
            raise
        except IntegrityError as e:
            session.rollback()
            raise DuplicateUserError(
                "This username is already taken.", details={"username": username}, original_error=e
            ) from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to create user '{username}': {e}")
            raise DatabaseError("Failed to create user", details={"username": username}, original_error=e) from e
        finally:
            session.close()

    def get_password_hash(self, username: str) -> Optional[str]:
        """Return the stored password hash, or None if the user is unknown."""
        session = self.get_session()
        try:
            user = self._get_user(session, username)
            return user.password_hash if user else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read credentials for '{username}': {e}")
            raise DatabaseError("Failed to read credentials", details={"username": username}, original_error=e) from e
        finally:
            session.close()

    def load_ledger(self, username: str) -> Optional[Ledger]:
        """
        Load a user's ledger.

        Args:
            username: Owner of the ledger

        Returns:
            Ledger with shared Account/Category references restored, or None
            if the user is not registered

        Raises:
            DatabaseError: If reading fails
        """
        session = self.get_session()
        try:
            user = self._get_user(session, username)
            if user is None:
                return None

            ledger = Ledger(owner=username)

            accounts: Dict[int, Account] = {}
            for record in self._ordered(session, AccountRecord, user.id):
                account = Account(name=record.name, balance=record.balance, is_asset=record.is_asset)
                accounts[record.id] = account
                if record.listed:
                    ledger.accounts.append(account)

            categories: Dict[int, Category] = {}
            for record in self._ordered(session, CategoryRecord, user.id):
                category = Category(record.name)
                categories[record.id] = category
                if record.listed:
                    ledger.categories.append(category)

            for record in self._ordered(session, TransactionRecord, user.id):
                ledger.transactions.append(Transaction(
                    amount=record.amount,
                    description=record.description,
                    category=categories[record.category_id],
                    account=accounts[record.account_id],
                    date=record.date,
                ))

            for record in self._ordered(session, BudgetRecord, user.id):
                ledger.budgets.append(Budget(
                    category=categories[record.category_id],
                    limit_amount=record.limit_amount,
                    spent_amount=record.spent_amount,
                ))

            logger.info(f"Loaded ledger for '{username}': {ledger!r}")
            return ledger
        except SQLAlchemyError as e:
            logger.error(f"Failed to load ledger for '{username}': {e}")
            raise DatabaseError("Failed to load ledger", details={"username": username}, original_error=e) from e
        finally:
            session.close()

    @staticmethod
    def _ordered(session: Session, model, user_id: int) -> List:
        return (
            session.query(model)
            .filter(model.user_id == user_id)
            .order_by(model.position, model.id)
            .all()
        )

    def save_ledger(self, ledger: Ledger) -> None:
        """
        Replace the stored ledger of ``ledger.owner`` with the given one.

        Accounts and categories referenced by transactions or budgets but
        missing from the ledger's own lists are stored as unlisted rows so
        they come back on load.

        Raises:
            DatabaseError: If the owner is not registered or the write fails
        """
        session = self.get_session()
        try:
            user = self._get_user(session, ledger.owner)
            if user is None:
                raise DatabaseError("Cannot save ledger for unknown user", details={"username": ledger.owner})

            for model in (TransactionRecord, BudgetRecord, AccountRecord, CategoryRecord):
                session.query(model).filter(model.user_id == user.id).delete(synchronize_session=False)

            # Keyed by object identity: accounts compare by identity and
            # same-named categories may still be distinct objects.
            account_records: Dict[int, AccountRecord] = {}
            category_records: Dict[int, CategoryRecord] = {}

            def account_record(account: Account, listed: bool) -> AccountRecord:
                record = account_records.get(id(account))
                if record is None:
                    record = AccountRecord(
                        user_id=user.id,
                        position=len(account_records),
                        name=account.name,
                        balance=account.balance,
                        is_asset=account.is_asset,
                        listed=listed,
                    )
                    account_records[id(account)] = record
                    session.add(record)
                return record

            def category_record(category: Category, listed: bool) -> CategoryRecord:
                record = category_records.get(id(category))
                if record is None:
                    record = CategoryRecord(
                        user_id=user.id,
                        position=len(category_records),
                        name=category.name,
                        listed=listed,
                    )
                    category_records[id(category)] = record
                    session.add(record)
                return record

            for account in ledger.accounts:
                account_record(account, listed=True)
            for category in ledger.categories:
                category_record(category, listed=True)

            for position, tx in enumerate(ledger.transactions):
                session.add(TransactionRecord(
                    user_id=user.id,
                    position=position,
                    amount=tx.amount,
                    description=tx.description,
                    date=tx.date,
                    account=account_record(tx.account, listed=False),
                    category=category_record(tx.category, listed=False),
                ))

            for position, budget in enumerate(ledger.budgets):
                session.add(BudgetRecord(
                    user_id=user.id,
                    position=position,
                    limit_amount=budget.limit_amount,
                    spent_amount=budget.spent_amount,
                    category=category_record(budget.category, listed=False),
                ))

            user.updated_at = utc_now()
            session.commit()
            logger.debug(f"Saved ledger for '{ledger.owner}': {ledger!r}")
        except DatabaseError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to save ledger for '{ledger.owner}': {e}")
            raise DatabaseError(
                "Failed to save ledger", details={"username": ledger.owner}, original_error=e
            ) from e
        finally:
            session.close()

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        self.engine.dispose()
        logger.info("Database connections closed")
