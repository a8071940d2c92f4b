"""Commit a confirmed mapping: normalize, de-duplicate and insert one batch."""

import uuid
from typing import Optional, Sequence

from finport.database.base import Database
from finport.domain.entities import ImportResult, RowError, TransactionCandidate
from finport.domain.errors import NotFoundError, RowValidationError, account_not_found
from finport.importing.csv_reader import ParsedRow
from finport.importing.mapping import ColumnMapping
from finport.importing.normalize import normalize_row
from finport.logging_setup import get_logger

logger = get_logger(__name__)


def new_batch_id() -> str:
    """Return an opaque identifier for an import batch."""
    return uuid.uuid4().hex


class ImportCommitter:
    """Normalizes rows, skips duplicates and writes the survivors atomically.

    Row problems are collected and never stop the pass; only the final
    insert is transactional. A failed insert raises StorageError with
    nothing written, and is never retried here.
    """

    def __init__(self, db: Database, day_first: bool = True, decimal_comma: bool = False):
        """Initialize the committer.

        Args:
            db: Database instance used as the transaction store
            day_first: Read ambiguous slash dates as DD/MM
            decimal_comma: Read "," as the decimal point in amounts
        """
        self.db = db
        self.day_first = day_first
        self.decimal_comma = decimal_comma

    def commit(
        self,
        rows: Sequence[ParsedRow],
        mapping: ColumnMapping,
        account_id: int,
        filename: Optional[str] = None,
        headers: Optional[Sequence[str]] = None,
    ) -> ImportResult:
        """Import rows into an account.

        Args:
            rows: Parsed rows in file order
            mapping: Confirmed column mapping
            account_id: Target account
            filename: Original file name for the history record
            headers: File headers to validate the mapping against; taken from
                the first row when omitted

        Returns:
            ImportResult with counts and per-row errors in file order

        Raises:
            InvalidMappingError: If the mapping cannot be used with these rows
            NotFoundError: If the account does not exist
            StorageError: If the batch insert fails
        """
        if headers is None:
            headers = list(rows[0].values) if rows else []
        mapping.validate(headers)

        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        batch_id = new_batch_id()
        accepted: list[TransactionCandidate] = []
        seen_keys: set[str] = set()
        errors: list[RowError] = []
        duplicates = 0

        for row in rows:
            try:
                candidate = normalize_row(
                    row,
                    mapping,
                    account_id,
                    day_first=self.day_first,
                    decimal_comma=self.decimal_comma,
                )
            except RowValidationError as exc:
                errors.append(RowError(row=row.index, code=exc.code, message=str(exc)))
                continue

            if candidate.dedup_key in seen_keys or self._is_stored(candidate):
                duplicates += 1
                continue

            seen_keys.add(candidate.dedup_key)
            accepted.append(candidate)

        self.db.insert_transaction_batch(
            batch_id=batch_id,
            account_id=account_id,
            candidates=accepted,
            filename=filename,
            row_count=len(rows),
            duplicate_count=duplicates,
            error_count=len(errors),
        )

        result = ImportResult(
            batch_id=batch_id,
            imported=len(accepted),
            duplicates_skipped=duplicates,
            errors=tuple(errors),
        )
        logger.info(
            "Batch %s for account %s: %d imported, %d duplicates, %d errors",
            batch_id,
            account_id,
            result.imported,
            result.duplicates_skipped,
            len(result.errors),
        )
        return result

    def _is_stored(self, candidate: TransactionCandidate) -> bool:
        return self.db.find_duplicate(
            account_id=candidate.account_id,
            transaction_date=candidate.transaction_date,
            description=candidate.description,
            debit_amount=candidate.debit_amount,
            credit_amount=candidate.credit_amount,
        )
