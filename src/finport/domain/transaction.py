"""Transaction domain service."""

from typing import Optional
from datetime import date
from finport.database.base import Database
from finport.domain.entities import Transaction as TransactionEntity
from finport.domain.errors import NotFoundError, ValidationError, account_not_found


class TransactionService:
    """Read access to stored transactions.

    Transactions are only written by the import committer.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        batch_id: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters.

        Args:
            account_id: Optional account ID filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            batch_id: Optional import batch filter

        Returns:
            List of transaction entities ordered by date

        Raises:
            NotFoundError: If account_id does not exist
            ValidationError: If start_date is after end_date
        """
        if account_id is not None and self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError(
                f"Start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
            )

        return self.db.list_transactions(
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
            batch_id=batch_id,
        )
