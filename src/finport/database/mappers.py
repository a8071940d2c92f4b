"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer keeps ORM objects from leaking into the domain layer.
"""

from decimal import Decimal

from finport.domain import entities as domain
from finport.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    ImportBatch as ORMImportBatch,
    ImportSession as ORMImportSession,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        created_at=orm_account.created_at,
        opening_balance=Decimal(orm_account.opening_balance or 0),
        current_balance=Decimal(orm_account.current_balance or 0),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        transaction_date=orm_transaction.transaction_date,
        description=orm_transaction.description,
        original_description=orm_transaction.original_description,
        debit_amount=Decimal(orm_transaction.debit_amount),
        credit_amount=Decimal(orm_transaction.credit_amount),
        import_batch_id=orm_transaction.import_batch_id,
        imported_at=orm_transaction.imported_at,
        balance_after=(
            Decimal(orm_transaction.balance_after)
            if orm_transaction.balance_after is not None
            else None
        ),
    )


def import_batch_to_domain(orm_batch: ORMImportBatch) -> domain.ImportBatch:
    """Convert SQLAlchemy ImportBatch model to domain ImportBatch entity."""
    return domain.ImportBatch(
        batch_id=orm_batch.batch_id,
        account_id=orm_batch.account_id,
        filename=orm_batch.filename,
        row_count=orm_batch.row_count,
        imported_count=orm_batch.imported_count,
        duplicate_count=orm_batch.duplicate_count,
        error_count=orm_batch.error_count,
        imported_at=orm_batch.imported_at,
    )


def import_session_to_domain(orm_session: ORMImportSession) -> domain.ImportSession:
    """Convert SQLAlchemy ImportSession model to domain ImportSession entity."""
    return domain.ImportSession(
        session_id=orm_session.session_id,
        account_id=orm_session.account_id,
        filename=orm_session.filename,
        content=bytes(orm_session.content),
        delimiter=orm_session.delimiter,
        state=domain.ImportSessionState(orm_session.state),
        mapping=dict(orm_session.mapping) if orm_session.mapping is not None else None,
        batch_id=orm_session.batch_id,
        error_message=orm_session.error_message,
        created_at=orm_session.created_at,
        expires_at=orm_session.expires_at,
    )
