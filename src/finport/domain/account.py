"""Account domain service."""

from decimal import Decimal
from typing import Optional
from finport.database.base import Database
from finport.domain.entities import Account as AccountEntity
from finport.domain.errors import ConflictError, NotFoundError, ValidationError, account_not_found
from finport.utils.amount_parser import CENTS


class AccountService:
    """Service for managing accounts.

    The import pipeline treats accounts as an opaque foreign key; this
    service is the registry that confirms one exists.
    """

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self, name: str, bank_name: str, opening_balance: Optional[Decimal] = None
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            bank_name: Bank name
            opening_balance: Balance before the first imported transaction, zero if None

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")

        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            name=name,
            bank_name=bank_name.strip() or name,
            opening_balance=(opening_balance or Decimal("0")).quantize(CENTS),
        )

    def set_opening_balance(self, account_id: int, opening_balance: Decimal) -> AccountEntity:
        """Change an account's opening balance and recompute its running balances.

        Returns:
            The updated account

        Raises:
            NotFoundError: If the account does not exist
            StorageError: If the update fails
        """
        self.require_account(account_id)
        self.db.set_opening_balance(account_id, opening_balance.quantize(CENTS))
        return self.require_account(account_id)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        """Get account by exact name."""
        return self.db.get_account_by_name(name)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()
