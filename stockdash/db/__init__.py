"""
Database module for StockDash.

Provides SQLite database connection and models.
"""

from stockdash.db.database import (
    AsyncSessionLocal,
    close_db,
    create_engine,
    create_session_factory,
    get_db_context,
    init_db,
)
from stockdash.db.models import Base, Company, DailyBarRow

__all__ = [
    "AsyncSessionLocal",
    "close_db",
    "create_engine",
    "create_session_factory",
    "get_db_context",
    "init_db",
    "Base",
    "Company",
    "DailyBarRow",
]
