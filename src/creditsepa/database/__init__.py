"""Database layer for creditsepa application."""

from creditsepa.database.base import Database
from creditsepa.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
