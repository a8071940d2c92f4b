"""Domain model entities for finport.

These are pure data classes representing business concepts, independent of
database schema. Storage code converts ORM rows into these before handing
them to the domain layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

from finport.utils.text import normalize_description


@dataclass(frozen=True)
class Account:
    """Bank account domain entity.

    current_balance is opening_balance plus every stored credit minus every
    stored debit.
    """

    id: int
    name: str
    bank_name: str
    created_at: datetime
    opening_balance: Decimal = Decimal("0.00")
    current_balance: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class Transaction:
    """Stored transaction domain entity.

    Exactly one of debit_amount/credit_amount is non-zero. balance_after is the
    account balance once this transaction is applied in (date, id) order.
    """

    id: int
    account_id: int
    transaction_date: date
    description: str
    original_description: str
    debit_amount: Decimal
    credit_amount: Decimal
    import_batch_id: Optional[str]
    imported_at: datetime
    balance_after: Optional[Decimal] = None

    @property
    def signed_amount(self) -> Decimal:
        """Credit as positive, debit as negative."""
        return self.credit_amount - self.debit_amount


@dataclass(frozen=True)
class TransactionCandidate:
    """A statement row normalized and ready for the duplicate check."""

    account_id: int
    transaction_date: date
    description: str
    original_description: str
    debit_amount: Decimal
    credit_amount: Decimal
    row: int

    @property
    def dedup_key(self) -> str:
        return build_dedup_key(
            self.transaction_date, self.description, self.debit_amount, self.credit_amount
        )


def build_dedup_key(
    transaction_date: date, description: str, debit_amount: Decimal, credit_amount: Decimal
) -> str:
    """Build the duplicate-detection key shared by the committer and the store."""
    return "|".join(
        [
            transaction_date.isoformat(),
            normalize_description(description),
            f"{debit_amount:.2f}",
            f"{credit_amount:.2f}",
        ]
    )


@dataclass(frozen=True)
class RowError:
    """A row-level failure collected during commit (row is 1-based)."""

    row: int
    code: str
    message: str


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one commit call."""

    batch_id: str
    imported: int
    duplicates_skipped: int
    errors: tuple[RowError, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "imported": self.imported,
            "duplicates_skipped": self.duplicates_skipped,
            "errors": [
                {"row": e.row, "code": e.code, "message": e.message} for e in self.errors
            ],
        }


@dataclass(frozen=True)
class ImportBatch:
    """Import history record for one committed file."""

    batch_id: str
    account_id: int
    filename: Optional[str]
    row_count: int
    imported_count: int
    duplicate_count: int
    error_count: int
    imported_at: datetime


class ImportSessionState(str, Enum):
    """Lifecycle of an import session."""

    UPLOADED = "uploaded"
    PREVIEWED = "previewed"
    CONFIRMED = "confirmed"
    COMMITTED = "committed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ImportSessionState.COMMITTED, ImportSessionState.FAILED)


@dataclass(frozen=True)
class ImportSession:
    """Upload and mapping held between the preview and commit calls."""

    session_id: str
    account_id: int
    filename: Optional[str]
    content: bytes
    delimiter: Optional[str]
    state: ImportSessionState
    mapping: Optional[dict]
    batch_id: Optional[str]
    error_message: Optional[str]
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
