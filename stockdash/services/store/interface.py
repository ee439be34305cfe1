"""
Series Store Interface

Narrow keyed-store contract over persisted SymbolRecords.
Any document store reachable by symbol can implement it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from stockdash.schemas.series import CompanySummary, SymbolRecord


class SeriesStoreInterface(ABC):
    """
    Series Store Contract.

    Implementations raise StoreUnavailable when the backing store fails.
    upsert replaces bars and last_refreshed_at together or not at all.
    """

    @property
    def name(self) -> str:
        return "SeriesStore"

    @abstractmethod
    async def find_by_symbol(self, symbol: str) -> Optional[SymbolRecord]:
        """Load a record, or None if the symbol is not stored."""
        pass

    @abstractmethod
    async def upsert(self, record: SymbolRecord) -> None:
        """Insert or wholly replace a record in a single commit."""
        pass

    @abstractmethod
    async def insert_if_absent(self, record: SymbolRecord) -> bool:
        """Insert only when no record exists. Returns True if inserted."""
        pass

    @abstractmethod
    async def list_all(self) -> list[CompanySummary]:
        """All stored companies in insertion order."""
        pass

    async def health_check(self) -> bool:
        try:
            await self.list_all()
            return True
        except Exception:
            return False
