"""
Market Data Fetcher Interface

Defines the contract for the upstream market-data provider.
"""

from abc import ABC, abstractmethod
from datetime import date

from stockdash.schemas.series import DailyBar


class MarketDataFetcherInterface(ABC):
    """
    Market Data Fetcher Contract.

    INPUT:
        - symbol: uppercase ticker
        - start_date: first calendar day of history wanted

    OUTPUT: list[DailyBar]
        - ascending by date, possibly empty

    Raises UpstreamFetchFailed (or any exception) on provider failure.
    """

    @property
    def name(self) -> str:
        return "MarketDataFetcher"

    @abstractmethod
    async def fetch_daily(self, symbol: str, start_date: date) -> list[DailyBar]:
        """Fetch daily OHLCV bars from start_date to the latest session."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check connectivity to the provider."""
        pass
