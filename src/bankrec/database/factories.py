"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from bankrec.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "BANKREC_DB_PATH"
DEFAULT_DB_PATH = Path("~/.bankrec/bankrec.db")


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Work out which SQLite file to use.

    An explicit path wins, then BANKREC_DB_PATH, then ~/.bankrec/bankrec.db.
    A leading ``~`` is expanded and missing parent directories are created,
    so ``--db-path ~/books/2025/bank.db`` works on a fresh machine.
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV) or None

    path = Path(database_path).expanduser() if database_path else DEFAULT_DB_PATH.expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file; see resolve_database_path

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    logger.debug("Using bank register database %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
