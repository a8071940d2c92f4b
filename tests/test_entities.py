"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date, datetime, timedelta
from decimal import Decimal

from finport.domain.entities import (
    Account,
    ImportResult,
    ImportSession,
    ImportSessionState,
    RowError,
    Transaction,
    TransactionCandidate,
    build_dedup_key,
)


def make_candidate(description="Coffee Shop", debit="4.50", credit="0.00"):
    return TransactionCandidate(
        account_id=1,
        transaction_date=date(2024, 3, 1),
        description=description,
        original_description=description,
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
        row=1,
    )


class TestDedupKey:
    """Tests for the duplicate-detection key."""

    def test_key_format(self):
        assert make_candidate().dedup_key == "2024-03-01|coffee shop|4.50|0.00"

    def test_case_and_whitespace_insensitive(self):
        assert make_candidate("COFFEE   shop").dedup_key == make_candidate("Coffee Shop").dedup_key

    def test_amount_scale_does_not_matter(self):
        key = build_dedup_key(date(2024, 3, 1), "Coffee", Decimal("4.5"), Decimal("0"))

        assert key == "2024-03-01|coffee|4.50|0.00"

    def test_debit_and_credit_differ(self):
        assert make_candidate(debit="4.50").dedup_key != make_candidate(debit="0.00", credit="4.50").dedup_key


class TestTransaction:
    """Tests for the Transaction entity."""

    def test_signed_amount(self):
        txn = Transaction(
            id=1,
            account_id=1,
            transaction_date=date(2024, 3, 1),
            description="Coffee",
            original_description="Coffee",
            debit_amount=Decimal("4.50"),
            credit_amount=Decimal("0.00"),
            import_batch_id="b1",
            imported_at=datetime(2024, 3, 2),
        )

        assert txn.signed_amount == Decimal("-4.50")

    def test_account_immutability(self):
        account = Account(id=1, name="Everyday", bank_name="Bank", created_at=datetime(2024, 1, 1))

        with pytest.raises(FrozenInstanceError):
            account.name = "Other"


def test_import_result_to_dict():
    result = ImportResult(
        batch_id="b1",
        imported=1,
        duplicates_skipped=2,
        errors=(RowError(row=3, code="InvalidAmount", message="Both debit and credit amounts are zero or empty"),),
    )

    assert result.to_dict() == {
        "batch_id": "b1",
        "imported": 1,
        "duplicates_skipped": 2,
        "errors": [
            {"row": 3, "code": "InvalidAmount", "message": "Both debit and credit amounts are zero or empty"}
        ],
    }


class TestImportSession:
    """Tests for the ImportSession entity."""

    def test_terminal_states(self):
        assert ImportSessionState.COMMITTED.is_terminal
        assert ImportSessionState.FAILED.is_terminal
        assert not ImportSessionState.PREVIEWED.is_terminal

    def test_is_expired(self):
        created = datetime(2024, 3, 1, 12, 0)
        session = ImportSession(
            session_id="s1",
            account_id=1,
            filename=None,
            content=b"",
            delimiter=None,
            state=ImportSessionState.UPLOADED,
            mapping=None,
            batch_id=None,
            error_message=None,
            created_at=created,
            expires_at=created + timedelta(minutes=30),
        )

        assert not session.is_expired(created + timedelta(minutes=29))
        assert session.is_expired(created + timedelta(minutes=30))
