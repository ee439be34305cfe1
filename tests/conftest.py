from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest

from stockdash.schemas.series import DailyBar
from stockdash.services.catalog import CompanyRegistry, default_registry
from stockdash.services.data_ingestion.interface import MarketDataFetcherInterface
from stockdash.services.store import InMemorySeriesStore


def build_bars(
    count: int,
    start: date = date(2023, 1, 2),
    base: float = 100.0,
    step: float = 0.5,
    volume: Optional[int] = 1_000_000,
) -> list[DailyBar]:
    bars = []
    for i in range(count):
        close = base + step * i
        bars.append(
            DailyBar(
                date=start + timedelta(days=i),
                open=close - 0.25,
                high=close + 1.0,
                low=close - 1.0,
                close=close,
                volume=volume,
            )
        )
    return bars


class FakeFetcher(MarketDataFetcherInterface):
    def __init__(
        self,
        bars: Optional[list[DailyBar]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.bars = bars or []
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, date]] = []

    async def fetch_daily(self, symbol: str, start_date: date) -> list[DailyBar]:
        self.calls.append((symbol, start_date))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.bars)

    async def health_check(self) -> bool:
        return True


class MutableClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def make_bars():
    return build_bars


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock(datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemorySeriesStore:
    return InMemorySeriesStore()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def registry() -> CompanyRegistry:
    return default_registry()
