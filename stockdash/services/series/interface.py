"""
Series Service Interface

Defines the contract for the freshness-aware cache controller.
"""

from abc import abstractmethod

from stockdash.services.base import BaseService
from stockdash.schemas.series import CompanySummary, SeriesResult


class SeriesServiceInterface(BaseService[str, SeriesResult]):
    """
    Series Service Contract.

    INPUT: symbol
        - Ticker, case-insensitive

    OUTPUT: SeriesResult
        - bars: most recent first
        - stats: high52, low52, avg_volume over the trailing window
        - indicators: sma50, sma200, rsi14, macd

    RAISES:
        - NoDataFound: symbol has never been fetched successfully
        - StoreUnavailable: persistence failure
        - ValidationError: empty symbol
    """

    @property
    def name(self) -> str:
        return "SeriesService"

    @abstractmethod
    async def execute(self, input_data: str) -> SeriesResult:
        """Alias of get_series."""
        pass

    @abstractmethod
    async def get_series(self, symbol: str) -> SeriesResult:
        """Load (refreshing if stale) and compose the series for a symbol."""
        pass

    @abstractmethod
    async def list_companies(self) -> list[CompanySummary]:
        """All companies known to the store."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the store is reachable."""
        pass
