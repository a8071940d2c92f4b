"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from finport.domain.entities import (
    Account,
    Transaction,
    TransactionCandidate,
    ImportBatch,
    ImportSession,
    ImportSessionState,
)


class Database(ABC):
    """Abstract database interface for finport."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, name: str, bank_name: str, opening_balance: Decimal = Decimal("0.00")
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def set_opening_balance(self, account_id: int, opening_balance: Decimal) -> None:
        """Change the opening balance and recompute every running balance.

        Raises:
            NotFoundError: If the account does not exist
        """
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by exact name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Transaction store operations
    @abstractmethod
    def find_duplicate(
        self,
        account_id: int,
        transaction_date: date,
        description: str,
        debit_amount: Decimal,
        credit_amount: Decimal,
    ) -> bool:
        """Check whether an equivalent transaction is already stored for the account.

        Description comparison is case-insensitive and whitespace-normalized;
        dates and both amounts must match exactly.
        """
        pass

    @abstractmethod
    def insert_transaction_batch(
        self,
        batch_id: str,
        account_id: int,
        candidates: Sequence[TransactionCandidate],
        filename: Optional[str],
        row_count: int,
        duplicate_count: int,
        error_count: int,
    ) -> list[int]:
        """Insert all candidates plus the batch history record atomically.

        Either every row is written or none is. Running balances for the
        account are recomputed in the same transaction. Returns the new
        transaction IDs.

        Raises:
            StorageError: If the storage transaction fails for any reason
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        batch_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, oldest first."""
        pass

    # Import history operations
    @abstractmethod
    def get_import_batch(self, batch_id: str) -> Optional[ImportBatch]:
        """Get an import batch record by its batch ID."""
        pass

    @abstractmethod
    def list_import_batches(
        self, account_id: Optional[int] = None, since: Optional[datetime] = None
    ) -> list[ImportBatch]:
        """List import batches, newest first."""
        pass

    # Import session operations
    @abstractmethod
    def create_import_session(
        self,
        session_id: str,
        account_id: int,
        filename: Optional[str],
        content: bytes,
        delimiter: Optional[str],
        expires_at: datetime,
    ) -> ImportSession:
        """Persist a new session in the uploaded state."""
        pass

    @abstractmethod
    def get_import_session(self, session_id: str) -> Optional[ImportSession]:
        """Get an import session by ID."""
        pass

    @abstractmethod
    def update_import_session(
        self,
        session_id: str,
        state: ImportSessionState,
        mapping: Optional[dict] = None,
        batch_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> ImportSession:
        """Set session state; mapping, batch_id and error_message are only changed when given."""
        pass

    @abstractmethod
    def delete_expired_import_sessions(self, now: datetime) -> int:
        """Delete sessions whose expiry is at or before now. Returns the count."""
        pass
