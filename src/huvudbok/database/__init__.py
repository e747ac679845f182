"""Database layer for huvudbok application."""

from huvudbok.database.base import Database
from huvudbok.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
