"""Utility for resolving account names to IDs."""

from finport.domain.account import AccountService
from finport.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    A value that looks like an integer is treated as an ID first; if no
    account has that ID, it is looked up as a name.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise NotFoundError(f"Account ID {account} not found")
        return account

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None and account_service.get_account(account_id) is not None:
        return account_id

    found = account_service.get_account_by_name(account)
    if found is not None:
        return found.id

    raise NotFoundError(f"Account '{account}' not found")
