"""
Series Service Implementation

Freshness-aware cache controller:
    1. Load the stored record for the symbol
    2. Fetch full history if the record is missing or stale
    3. Persist the refreshed record (bars + timestamp in one commit)
    4. Compose bars, trailing-window stats and indicators

Upstream failures are absorbed once any cached data exists; only a
symbol that has never been fetched successfully is an error.
"""

import asyncio
import logging
import math
from datetime import date, datetime, timezone
from typing import Callable, Optional

from stockdash.core.config import settings
from stockdash.schemas.series import (
    CompanySummary,
    DailyBar,
    SeriesResult,
    SeriesStats,
    SymbolRecord,
)
from stockdash.services.base import NoDataFound, ValidationError
from stockdash.services.cache.redis_client import SeriesCache
from stockdash.services.catalog.company_list import CompanyRegistry
from stockdash.services.data_ingestion.interface import MarketDataFetcherInterface
from stockdash.services.indicators.service import IndicatorService
from stockdash.services.series.interface import SeriesServiceInterface
from stockdash.services.series.locks import SymbolLocks
from stockdash.services.store.interface import SeriesStoreInterface

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def window_stats(bars: list[DailyBar], window: int) -> SeriesStats:
    """
    52-week style statistics over the most recent `window` bars.

    Bars without high, low or volume (missing or zero) are skipped.
    With nothing left every statistic is None.
    """
    recent = bars[-window:] if window > 0 else []
    usable = [b for b in recent if b.high and b.low and b.volume]
    if not usable:
        return SeriesStats(window_size=0)

    return SeriesStats(
        high52=max(b.high for b in usable),
        low52=min(b.low for b in usable),
        avg_volume=_round_half_up(sum(b.volume for b in usable) / len(usable)),
        window_size=len(usable),
    )


class SeriesService(SeriesServiceInterface):
    """
    Series Service.

    The clock is injectable so staleness decisions can be tested.
    """

    def __init__(
        self,
        store: SeriesStoreInterface,
        fetcher: MarketDataFetcherInterface,
        registry: CompanyRegistry,
        indicator_service: Optional[IndicatorService] = None,
        cache: Optional[SeriesCache] = None,
        clock: Callable[[], datetime] = utc_now,
        history_start: Optional[date] = None,
        freshness_hours: Optional[float] = None,
        stats_window: Optional[int] = None,
        fetch_timeout: Optional[float] = None,
    ):
        self._store = store
        self._fetcher = fetcher
        self._registry = registry
        self._indicators = indicator_service or IndicatorService()
        self._cache = cache
        self._clock = clock
        self._locks = SymbolLocks()

        self.history_start = history_start or date.fromisoformat(settings.history_start_date)
        self.freshness_hours = (
            freshness_hours if freshness_hours is not None else settings.freshness_hours
        )
        self.stats_window = stats_window if stats_window is not None else settings.stats_window
        self.fetch_timeout = (
            fetch_timeout if fetch_timeout is not None else settings.fetch_timeout_seconds
        )

    @property
    def name(self) -> str:
        return "SeriesService"

    async def execute(self, input_data: str) -> SeriesResult:
        return await self.get_series(input_data)

    async def validate_input(self, input_data: str) -> str:
        symbol = (input_data or "").strip().upper()
        if not symbol:
            raise ValidationError(self.name, "Symbol must not be empty")
        return symbol

    async def get_series(self, symbol: str) -> SeriesResult:
        symbol = await self.validate_input(symbol)

        async with self._locks.hold(symbol):
            record = await self._load_fresh_record(symbol)

        return await self._compose(record)

    async def list_companies(self) -> list[CompanySummary]:
        return await self._store.list_all()

    async def health_check(self) -> bool:
        return await self._store.health_check()

    # ============ Freshness ============

    def is_stale(self, record: SymbolRecord, now: datetime) -> bool:
        if record.last_refreshed_at is None:
            return True
        age_hours = (now - record.last_refreshed_at).total_seconds() / 3600
        return age_hours > self.freshness_hours

    async def _load_fresh_record(self, symbol: str) -> SymbolRecord:
        record = await self._store.find_by_symbol(symbol)

        if record is None:
            bars = await self._fetch(symbol)
            if not bars:
                raise NoDataFound(self.name, f"No data found for {symbol}", {"symbol": symbol})

            record = SymbolRecord(
                symbol=symbol,
                display_name=self._registry.display_name_for(symbol),
                bars=bars,
                last_refreshed_at=self._clock(),
            )
            await self._store.upsert(record)
            logger.info(f"Created {symbol} with {len(record.bars)} bars")
            return record

        if not self.is_stale(record, self._clock()):
            return record

        bars = await self._fetch(symbol)
        if bars:
            record = SymbolRecord(
                symbol=record.symbol,
                display_name=record.display_name,
                bars=bars,
                last_refreshed_at=self._clock(),
            )
            await self._store.upsert(record)
            logger.info(f"Refreshed {symbol} with {len(record.bars)} bars")
            return record

        if not record.has_data:
            raise NoDataFound(self.name, f"No data found for {symbol}", {"symbol": symbol})

        logger.warning(
            f"Serving stale data for {symbol} "
            f"(last refreshed {record.last_refreshed_at.isoformat()})"
        )
        return record

    async def _fetch(self, symbol: str) -> list[DailyBar]:
        """Fetch full history; any failure or timeout yields []."""
        try:
            return await asyncio.wait_for(
                self._fetcher.fetch_daily(symbol, self.history_start),
                timeout=self.fetch_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Fetch for {symbol} timed out after {self.fetch_timeout}s")
        except Exception as e:
            logger.warning(f"Fetch for {symbol} failed: {e}")
        return []

    # ============ Composition ============

    async def _compose(self, record: SymbolRecord) -> SeriesResult:
        if self._cache is not None:
            cached = await self._cache.get(record.symbol, record.last_refreshed_at)
            if cached:
                return SeriesResult.model_validate(cached)

        result = self.compose(record)

        if self._cache is not None:
            await self._cache.set(
                record.symbol, record.last_refreshed_at, result.model_dump(mode="json")
            )
        return result

    def compose(self, record: SymbolRecord) -> SeriesResult:
        """Build the response from an ascending record."""
        closes = [bar.close for bar in record.bars]
        return SeriesResult(
            display_name=record.display_name,
            symbol=record.symbol,
            bars=list(reversed(record.bars)),
            stats=window_stats(record.bars, self.stats_window),
            indicators=self._indicators.calculate(closes),
            last_refreshed_at=record.last_refreshed_at,
        )
