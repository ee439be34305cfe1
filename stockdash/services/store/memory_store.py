"""
In-memory series store.

Used when no database is configured and in tests.
"""

from typing import Dict, Optional

from stockdash.schemas.series import CompanySummary, SymbolRecord
from stockdash.services.store.interface import SeriesStoreInterface


class InMemorySeriesStore(SeriesStoreInterface):
    """Records kept in a dict keyed by symbol. Copies on every read and write."""

    def __init__(self, records: Optional[list[SymbolRecord]] = None):
        self._records: Dict[str, SymbolRecord] = {}
        for record in records or []:
            self._records[record.symbol] = record.model_copy(deep=True)

    async def find_by_symbol(self, symbol: str) -> Optional[SymbolRecord]:
        record = self._records.get(symbol.upper())
        return record.model_copy(deep=True) if record else None

    async def upsert(self, record: SymbolRecord) -> None:
        self._records[record.symbol] = record.model_copy(deep=True)

    async def insert_if_absent(self, record: SymbolRecord) -> bool:
        if record.symbol in self._records:
            return False
        self._records[record.symbol] = record.model_copy(deep=True)
        return True

    async def list_all(self) -> list[CompanySummary]:
        return [
            CompanySummary(display_name=r.display_name, symbol=r.symbol)
            for r in self._records.values()
        ]
