"""Preview and commit entry points for statement imports."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath
from typing import Optional

from finport.config import ImportSettings
from finport.database.base import Database
from finport.domain.account import AccountService
from finport.domain.entities import ImportBatch, ImportResult, Transaction
from finport.domain.errors import (
    InvalidMappingError,
    NotFoundError,
    StorageError,
    ValidationError,
    batch_not_found,
)
from finport.importing.committer import ImportCommitter
from finport.importing.csv_reader import ParsedFile, ParseWarning, parse_csv
from finport.importing.mapping import INFERENCE_SAMPLE_ROWS, ColumnMapping, infer_mapping
from finport.importing.session import ImportSessionService
from finport.logging_setup import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = (".csv", ".txt")


@dataclass(frozen=True)
class ImportPreview:
    """What the user reviews before confirming an import."""

    session_id: str
    headers: list[str]
    preview: list[dict[str, str]]
    total_rows: int
    suggested_mapping: ColumnMapping
    delimiter: str
    warnings: list[ParseWarning] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "headers": self.headers,
            "preview": self.preview,
            "total_rows": self.total_rows,
            "suggested_mapping": self.suggested_mapping.to_dict(),
            "delimiter": self.delimiter,
            "warnings": [{"row": w.row, "reason": w.reason} for w in self.warnings],
        }


@dataclass(frozen=True)
class BatchDetails:
    """An import history record with the transactions it created."""

    batch: ImportBatch
    transactions: list[Transaction]


class ImportService:
    """Application-facing import operations.

    The preview step never writes transactions and can be repeated freely.
    The commit step re-parses the upload and writes one atomic batch.
    """

    def __init__(self, db: Database, settings: Optional[ImportSettings] = None):
        """Initialize import service.

        Args:
            db: Database instance
            settings: Import settings, defaults to ImportSettings.from_env()
        """
        self.db = db
        self.settings = settings or ImportSettings.from_env()
        self.account_service = AccountService(db)
        self.sessions = ImportSessionService(db, ttl_minutes=self.settings.session_ttl_minutes)
        self.committer = ImportCommitter(
            db, day_first=self.settings.day_first, decimal_comma=self.settings.decimal_comma
        )

    def check_upload(self, data: bytes, filename: Optional[str] = None) -> None:
        """Validate an uploaded file before parsing.

        Raises:
            ValidationError: If the file is empty, too large or not a CSV
        """
        if not data:
            raise ValidationError("File is required and cannot be empty")
        if len(data) > self.settings.max_upload_bytes:
            raise ValidationError(
                f"File is {len(data)} bytes; the limit is {self.settings.max_upload_bytes} bytes"
            )
        if filename is not None:
            suffix = PurePath(filename).suffix.lower()
            if suffix not in ALLOWED_EXTENSIONS:
                raise ValidationError("Only CSV files are allowed")

    def _parse_upload(
        self, data: bytes, filename: Optional[str], delimiter: Optional[str]
    ) -> ParsedFile:
        self.check_upload(data, filename)
        return parse_csv(data, delimiter=delimiter)

    def preview(
        self,
        data: bytes,
        account_id: int,
        filename: Optional[str] = None,
        delimiter: Optional[str] = None,
        preview_rows: Optional[int] = None,
    ) -> ImportPreview:
        """Parse an upload, suggest a mapping and open an import session.

        Args:
            data: Raw file bytes
            account_id: Target account
            filename: Original file name
            delimiter: Field delimiter, detected when None
            preview_rows: Rows to include in the preview, defaults to settings

        Returns:
            ImportPreview including the session ID to commit against

        Raises:
            ValidationError: If the upload is rejected
            ParseError: If the file cannot be parsed (NoDataRowsError included)
            NotFoundError: If the account does not exist
        """
        self.account_service.require_account(account_id)
        parsed = self._parse_upload(data, filename, delimiter)
        suggested = infer_mapping(parsed.headers, parsed.sample(INFERENCE_SAMPLE_ROWS))

        self.sessions.purge_expired()
        session = self.sessions.start(account_id, filename, data, delimiter=parsed.delimiter)
        self.sessions.record_preview(session.session_id, suggested)

        limit = preview_rows if preview_rows is not None else self.settings.preview_rows
        logger.info(
            "Previewed %s for account %s: %d rows, %d warnings",
            filename or "upload",
            account_id,
            parsed.total_rows,
            len(parsed.warnings),
        )
        return ImportPreview(
            session_id=session.session_id,
            headers=parsed.headers,
            preview=[dict(row.values) for row in parsed.sample(limit)],
            total_rows=parsed.total_rows,
            suggested_mapping=suggested,
            delimiter=parsed.delimiter,
            warnings=parsed.warnings,
        )

    def commit(
        self,
        data: bytes,
        account_id: int,
        mapping: ColumnMapping,
        filename: Optional[str] = None,
        delimiter: Optional[str] = None,
    ) -> ImportResult:
        """Import a resubmitted file with an accepted mapping.

        Raises:
            ValidationError: If the upload or mapping is rejected
            NotFoundError: If the account does not exist
            StorageError: If the batch insert fails
        """
        self.account_service.require_account(account_id)
        parsed = self._parse_upload(data, filename, delimiter)
        return self.committer.commit(
            parsed.rows, mapping, account_id, filename=filename, headers=parsed.headers
        )

    def commit_session(
        self, session_id: str, mapping: Optional[ColumnMapping] = None
    ) -> ImportResult:
        """Commit the upload held by a session.

        Args:
            session_id: Session returned by preview
            mapping: Edited mapping; the stored one is used when None

        Raises:
            NotFoundError: If the session does not exist
            SessionExpiredError: If the session has expired
            ConflictError: If the session was already committed or failed
            InvalidMappingError: If the mapping is incomplete (session stays previewed)
            StorageError: If the batch insert fails (session becomes failed)
        """
        session = self.sessions.get(session_id)
        if mapping is None:
            mapping = self.sessions.stored_mapping(session)
        if mapping is None:
            raise InvalidMappingError("No mapping was supplied or stored for this session")

        parsed = parse_csv(session.content, delimiter=session.delimiter)
        try:
            mapping.validate(parsed.headers)
        except InvalidMappingError:
            self.sessions.record_preview(session_id, mapping)
            raise

        self.sessions.confirm(session_id, mapping)
        try:
            result = self.committer.commit(
                parsed.rows,
                mapping,
                session.account_id,
                filename=session.filename,
                headers=parsed.headers,
            )
        except StorageError as exc:
            self.sessions.mark_failed(session_id, str(exc))
            raise

        self.sessions.mark_committed(session_id, result.batch_id)
        return result

    def list_batches(
        self, account_id: Optional[int] = None, since: Optional[datetime] = None
    ) -> list[ImportBatch]:
        """List import history, newest first."""
        if account_id is not None:
            self.account_service.require_account(account_id)
        return self.db.list_import_batches(account_id=account_id, since=since)

    def get_batch(self, batch_id: str) -> BatchDetails:
        """Return a batch record and the transactions it inserted.

        Raises:
            NotFoundError: If no batch has this ID
        """
        batch = self.db.get_import_batch(batch_id)
        if batch is None:
            raise NotFoundError(batch_not_found(batch_id))
        return BatchDetails(batch=batch, transactions=self.db.list_transactions(batch_id=batch_id))
