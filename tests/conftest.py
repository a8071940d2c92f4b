"""Shared pytest fixtures for finport tests."""

import tempfile
import os
from pathlib import Path
import pytest

from finport.config import ImportSettings
from finport.database.factories import create_sqlite_database
from finport.domain.account import AccountService
from finport.domain.transaction import TransactionService
from finport.importing.committer import ImportCommitter
from finport.importing.service import ImportService
from finport.importing.session import ImportSessionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def import_settings():
    """Default import settings, independent of the environment."""
    return ImportSettings()


@pytest.fixture
def import_service(temp_db, import_settings):
    """Create an ImportService with a temporary database."""
    return ImportService(temp_db, settings=import_settings)


@pytest.fixture
def session_service(temp_db):
    """Create an ImportSessionService with a temporary database."""
    return ImportSessionService(temp_db, ttl_minutes=30)


@pytest.fixture
def committer(temp_db):
    """Create an ImportCommitter with a temporary database."""
    return ImportCommitter(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(name="Test Account", bank_name="Test Bank")
    return account_service.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
