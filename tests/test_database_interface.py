"""Tests for the SQLAlchemy database implementation."""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from finport.database.factories import create_sqlite_database
from finport.domain import entities
from finport.domain.entities import ImportSessionState, TransactionCandidate
from finport.domain.errors import NotFoundError, StorageError
from finport.utils.clock import utc_now


def make_candidate(account_id, description="Coffee Shop", debit="4.50", credit="0.00", row=1):
    return TransactionCandidate(
        account_id=account_id,
        transaction_date=date(2024, 3, 1),
        description=description,
        original_description=description,
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
        row=row,
    )


def insert(db, batch_id, account_id, candidates):
    return db.insert_transaction_batch(
        batch_id=batch_id,
        account_id=account_id,
        candidates=candidates,
        filename="jan.csv",
        row_count=len(candidates),
        duplicate_count=0,
        error_count=0,
    )


@pytest.fixture
def account_id(temp_db):
    return temp_db.create_account(name="Everyday", bank_name="Bank")


class TestDatabaseInterface:
    """Tests to verify the Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db, account_id):
        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.name == "Everyday"
        assert temp_db.get_account_by_name("Everyday") == account
        assert temp_db.get_account(999) is None

    def test_list_accounts_sorted_by_name(self, temp_db):
        temp_db.create_account(name="Savings", bank_name="Bank")
        temp_db.create_account(name="Everyday", bank_name="Bank")

        assert [a.name for a in temp_db.list_accounts()] == ["Everyday", "Savings"]

    def test_insert_batch_returns_ids(self, temp_db, account_id):
        ids = insert(temp_db, "b1", account_id, [make_candidate(account_id), make_candidate(account_id, "Tea")])

        assert len(ids) == 2
        txn = temp_db.get_transaction(ids[0])
        assert isinstance(txn, entities.Transaction)
        assert txn.debit_amount == Decimal("4.50")
        assert txn.import_batch_id == "b1"

    def test_find_duplicate(self, temp_db, account_id):
        insert(temp_db, "b1", account_id, [make_candidate(account_id)])

        assert temp_db.find_duplicate(
            account_id, date(2024, 3, 1), "coffee  SHOP", Decimal("4.5"), Decimal("0")
        )
        assert not temp_db.find_duplicate(
            account_id, date(2024, 3, 1), "Coffee Shop", Decimal("4.51"), Decimal("0")
        )
        assert not temp_db.find_duplicate(
            account_id, date(2024, 3, 2), "Coffee Shop", Decimal("4.50"), Decimal("0")
        )

    def test_unique_constraint_rejects_racing_duplicate(self, temp_db, account_id):
        """Test a duplicate that slipped past the check fails the whole batch."""
        insert(temp_db, "b1", account_id, [make_candidate(account_id)])

        with pytest.raises(StorageError):
            insert(
                temp_db,
                "b2",
                account_id,
                [make_candidate(account_id, "Tea"), make_candidate(account_id, "COFFEE SHOP")],
            )

        assert len(temp_db.list_transactions(account_id=account_id)) == 1
        assert temp_db.get_import_batch("b2") is None

    def test_empty_batch_records_history(self, temp_db, account_id):
        assert insert(temp_db, "b1", account_id, []) == []

        batch = temp_db.get_import_batch("b1")
        assert isinstance(batch, entities.ImportBatch)
        assert batch.imported_count == 0

    def test_import_session_round_trip(self, temp_db, account_id):
        expires = utc_now() + timedelta(minutes=30)
        created = temp_db.create_import_session(
            session_id="s1",
            account_id=account_id,
            filename="jan.csv",
            content=b"Date\n",
            delimiter=";",
            expires_at=expires,
        )

        assert isinstance(created, entities.ImportSession)
        assert created.state == ImportSessionState.UPLOADED

        updated = temp_db.update_import_session("s1", ImportSessionState.PREVIEWED, mapping={"date": "Date"})
        assert updated.mapping == {"date": "Date"}

        committed = temp_db.update_import_session("s1", ImportSessionState.COMMITTED, batch_id="b1")
        assert committed.mapping == {"date": "Date"}
        assert temp_db.get_import_session("s1").batch_id == "b1"

    def test_update_unknown_session(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_import_session("missing", ImportSessionState.PREVIEWED)

    def test_delete_expired_sessions(self, temp_db, account_id):
        now = utc_now()
        for session_id, minutes in (("old", -1), ("new", 30)):
            temp_db.create_import_session(
                session_id=session_id,
                account_id=account_id,
                filename=None,
                content=b"x",
                delimiter=None,
                expires_at=now + timedelta(minutes=minutes),
            )

        assert temp_db.delete_expired_import_sessions(now) == 1
        assert temp_db.get_import_session("old") is None
        assert temp_db.get_import_session("new") is not None


def test_database_path_from_environment(tmp_path, monkeypatch):
    """Test FINPORT_DB_PATH selects the database file."""
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("FINPORT_DB_PATH", str(db_path))

    db = create_sqlite_database()
    db.connect()
    db.initialize_schema()
    db.create_account(name="Everyday", bank_name="Bank")
    db.disconnect()

    assert db_path.exists()
