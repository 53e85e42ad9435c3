"""Database module for the SnapLink application."""
from snaplink.db.base import engine, get_engine, init_db
from snaplink.db.session import get_db, db_transaction

__all__ = [
    "engine",
    "get_engine",
    "init_db",
    "get_db",
    "db_transaction",
]
