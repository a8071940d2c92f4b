"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from finport.database.sqlalchemy_db import SQLAlchemyDatabase


def default_database_path() -> str:
    """Return ~/.finport/finport.db, creating the directory if needed."""
    db_dir = Path.home() / ".finport"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "finport.db")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FINPORT_DB_PATH
            environment variable, then defaults to ~/.finport/finport.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("FINPORT_DB_PATH") or default_database_path()

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
