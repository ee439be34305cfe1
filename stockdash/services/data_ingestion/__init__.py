"""
Market Data Fetcher

CONTRACT:
    Input:  symbol, start_date
    Output: list[DailyBar] (ascending by date)

RESPONSIBILITIES:
    - Fetch end-of-day OHLCV history from Yahoo Finance
    - Normalize rows to DailyBar
    - Raise UpstreamFetchFailed on provider errors
"""

from typing import Optional

from stockdash.services.data_ingestion.interface import MarketDataFetcherInterface
from stockdash.services.data_ingestion.yahoo_adapter import (
    YahooDailyFetcher,
    fetch_yahoo_history,
    history_to_bars,
)

# Singleton instance
_fetcher_instance: Optional[MarketDataFetcherInterface] = None


def get_market_data_fetcher() -> MarketDataFetcherInterface:
    """Get or create the market data fetcher instance."""
    global _fetcher_instance
    if _fetcher_instance is None:
        _fetcher_instance = YahooDailyFetcher()
    return _fetcher_instance


__all__ = [
    "MarketDataFetcherInterface",
    "YahooDailyFetcher",
    "fetch_yahoo_history",
    "history_to_bars",
    "get_market_data_fetcher",
]
