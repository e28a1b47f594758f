"""Construction of the SQLite store behind the CLI."""

import os
from pathlib import Path
from typing import Optional

from creditsepa.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "CREDITSEPA_DB_PATH"


def default_database_path() -> Path:
    """~/.creditsepa/creditsepa.db, creating the directory on first use."""
    db_dir = Path.home() / ".creditsepa"
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir / "creditsepa.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open the store holding the mapping upload and the payment file history.

    Args:
        database_path: SQLite file to use. Falls back to CREDITSEPA_DB_PATH,
            then to default_database_path().

    Returns:
        SQLAlchemyDatabase bound to that file
    """
    path = database_path or os.environ.get(DB_PATH_ENV) or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}")
