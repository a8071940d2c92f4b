"""Domain layer for finport."""

from finport.domain.account import AccountService
from finport.domain.transaction import TransactionService

__all__ = [
    "AccountService",
    "TransactionService",
]
