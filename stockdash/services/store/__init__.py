"""
Series Store Adapter

CONTRACT:
    find_by_symbol(symbol) -> SymbolRecord | None
    upsert(record)         -> None | StoreUnavailable
    insert_if_absent(record) -> bool
    list_all()             -> list[CompanySummary]

Implementations:
    - SqlSeriesStore: SQLite via SQLAlchemy async (default)
    - InMemorySeriesStore: process memory (tests, ephemeral runs)
"""

from typing import Optional

from stockdash.services.store.interface import SeriesStoreInterface
from stockdash.services.store.memory_store import InMemorySeriesStore
from stockdash.services.store.sql_store import SqlSeriesStore

# Singleton instance
_store_instance: Optional[SeriesStoreInterface] = None


def get_series_store() -> SeriesStoreInterface:
    """Get or create the series store instance."""
    global _store_instance
    if _store_instance is None:
        _store_instance = SqlSeriesStore()
    return _store_instance


__all__ = [
    "SeriesStoreInterface",
    "InMemorySeriesStore",
    "SqlSeriesStore",
    "get_series_store",
]
