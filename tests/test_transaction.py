"""Tests for transaction listing."""

import pytest
from datetime import date
from finport.cli.main import cli
from finport.domain.errors import NotFoundError, ValidationError
from finport.importing.mapping import ColumnMapping

SPLIT = ColumnMapping(date="Date", description="Description", debit="Debit", credit="Credit")


@pytest.fixture
def imported(import_service, sample_account, fixtures_dir):
    """Import the debit/credit fixture into the sample account."""
    data = (fixtures_dir / "debit_credit.csv").read_bytes()
    return import_service.commit(data, sample_account.id, SPLIT, filename="debit_credit.csv")


class TestTransactionService:
    """Tests for TransactionService."""

    def test_list_by_account(self, transaction_service, sample_account, imported):
        transactions = transaction_service.list_transactions(account_id=sample_account.id)

        assert [t.description for t in transactions] == ["COFFEE SHOP", "SALARY ACME LTD", "Grocery Store"]

    def test_list_by_date_range(self, transaction_service, imported):
        transactions = transaction_service.list_transactions(
            start_date=date(2024, 1, 16), end_date=date(2024, 1, 16)
        )

        assert len(transactions) == 1
        assert transactions[0].signed_amount == 2500

    def test_list_by_batch(self, transaction_service, imported):
        assert len(transaction_service.list_transactions(batch_id=imported.batch_id)) == 3
        assert transaction_service.list_transactions(batch_id="other") == []

    def test_get_transaction(self, transaction_service, imported):
        first = transaction_service.list_transactions()[0]

        assert transaction_service.get_transaction(first.id) == first
        assert transaction_service.get_transaction(9999) is None

    def test_unknown_account(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.list_transactions(account_id=999)

    def test_reversed_range(self, transaction_service):
        with pytest.raises(ValidationError):
            transaction_service.list_transactions(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))


def test_transaction_list_cli(cli_runner, temp_db, imported):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "list", "--account", "Test Account"]
    )

    assert result.exit_code == 0
    assert "Found 3 transaction(s)" in result.output
    assert "Grocery Store" in result.output
    assert "Count: 3" in result.output
    assert "Balance" in result.output
    assert "2,495.50" in result.output


def test_transaction_list_by_batch_cli(cli_runner, temp_db, imported):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "list", "--batch", imported.batch_id,
              "--start-date", "2024-01-17"]
    )

    assert result.exit_code == 0
    assert "Found 1 transaction(s)" in result.output


def test_transaction_list_empty_cli(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "transaction", "list"])

    assert result.exit_code == 0
    assert "No transactions found." in result.output


def test_transaction_list_invalid_date_cli(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "list", "--start-date", "banana"]
    )

    assert result.exit_code == 1
    assert "Invalid start date" in result.output
