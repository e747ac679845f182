"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from huvudbok.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks HUVUDBOK_DB_PATH
            environment variable, then defaults to ~/.huvudbok/huvudbok.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("HUVUDBOK_DB_PATH")

    if database_path is None:
        # Default to ~/.huvudbok/huvudbok.db
        home = Path.home()
        db_dir = home / ".huvudbok"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "huvudbok.db")

    return create_database(f"sqlite:///{database_path}")


def create_database(database_url: str) -> SQLAlchemyDatabase:
    """Create a database instance for any SQLAlchemy URL."""
    return SQLAlchemyDatabase(database_url)
