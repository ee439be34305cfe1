"""
Yahoo Finance Data Adapter

Fetches end-of-day history from Yahoo Finance.
US share classes use a dash on Yahoo (BRK.B -> BRK-B).
"""

import asyncio
import logging
from datetime import date
from typing import Optional

import pandas as pd
import yfinance as yf

from stockdash.core.config import settings
from stockdash.schemas.series import DailyBar
from stockdash.services.base import UpstreamFetchFailed
from stockdash.services.data_ingestion.interface import MarketDataFetcherInterface

logger = logging.getLogger(__name__)


def get_yahoo_symbol(symbol: str) -> str:
    """Convert a ticker to Yahoo Finance format."""
    return symbol.upper().strip().replace(".", "-")


def _optional_float(value) -> Optional[float]:
    if value is None or pd.isna(value) or float(value) <= 0:
        return None
    return float(value)


def _optional_int(value) -> Optional[int]:
    if value is None or pd.isna(value) or value < 0:
        return None
    return int(value)


def history_to_bars(hist: pd.DataFrame) -> list[DailyBar]:
    """
    Convert a yfinance history frame to ascending DailyBars.

    Rows without a usable close are dropped. Missing open/high/low/volume
    are kept as None.
    """
    if hist is None or hist.empty:
        return []

    bars_by_date: dict[date, DailyBar] = {}
    for idx, row in hist.iterrows():
        close = _optional_float(row.get("Close"))
        if close is None:
            continue

        day = idx.date() if hasattr(idx, "date") else pd.Timestamp(idx).date()
        bars_by_date[day] = DailyBar(
            date=day,
            open=_optional_float(row.get("Open")),
            high=_optional_float(row.get("High")),
            low=_optional_float(row.get("Low")),
            close=close,
            volume=_optional_int(row.get("Volume")),
        )

    return [bars_by_date[d] for d in sorted(bars_by_date)]


def fetch_yahoo_history(
    symbol: str, start_date: date, timeout: float = 10.0
) -> list[DailyBar]:
    """
    Fetch daily history from Yahoo Finance (blocking).

    Args:
        symbol: Ticker (e.g., "MSFT", "BRK.B")
        start_date: First calendar day to request
        timeout: HTTP timeout in seconds, bounding the calling thread

    Returns:
        Ascending DailyBars, [] if Yahoo has no rows

    Raises:
        UpstreamFetchFailed: On any provider error
    """
    yahoo_symbol = get_yahoo_symbol(symbol)

    try:
        logger.info(f"Fetching {yahoo_symbol} from Yahoo Finance since {start_date}...")
        ticker = yf.Ticker(yahoo_symbol)
        hist = ticker.history(
            start=start_date.isoformat(),
            interval="1d",
            auto_adjust=False,
            actions=False,
            timeout=timeout,
        )
    except Exception as e:
        logger.error(f"Error fetching {symbol} from Yahoo Finance: {e}")
        raise UpstreamFetchFailed(
            "YahooDailyFetcher", f"Failed to fetch {symbol}", {"error": str(e)}
        ) from e

    bars = history_to_bars(hist)
    if not bars:
        logger.warning(f"No data returned for {yahoo_symbol}")
    return bars


class YahooDailyFetcher(MarketDataFetcherInterface):
    """Market data fetcher backed by yfinance, run in a worker thread."""

    def __init__(self, timeout: Optional[float] = None):
        # HTTP timeout inside the worker thread
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds

    @property
    def name(self) -> str:
        return "YahooDailyFetcher"

    async def fetch_daily(self, symbol: str, start_date: date) -> list[DailyBar]:
        return await asyncio.to_thread(
            fetch_yahoo_history, symbol, start_date, self.timeout
        )

    async def health_check(self) -> bool:
        """Check if a well-known symbol has recent data."""
        try:
            hist = await asyncio.to_thread(lambda: yf.Ticker("MSFT").history(period="5d"))
            return not hist.empty
        except Exception:
            return False
