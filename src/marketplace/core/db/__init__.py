"""Database utilities - engine, session, transactions, migrations."""

from src.marketplace.core.db.engine import dispose_engine, get_engine
from src.marketplace.core.db.migrations import run_migrations_async, run_migrations_sync
from src.marketplace.core.db.session import get_session, transaction

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
    "transaction",
    # Migrations
    "run_migrations_async",
    "run_migrations_sync",
]
