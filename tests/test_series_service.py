from __future__ import annotations

import asyncio
from datetime import date, timedelta

import pydantic
import pytest

from stockdash.schemas.series import DailyBar, SymbolRecord
from stockdash.services.base import (
    NoDataFound,
    StoreUnavailable,
    UpstreamFetchFailed,
    ValidationError,
)
from stockdash.services.cache import SeriesCache
from stockdash.services.indicators import IndicatorService
from stockdash.services.series import SeriesService, window_stats
from stockdash.services.store import InMemorySeriesStore


def _service(store, fetcher, registry, clock, **kwargs) -> SeriesService:
    return SeriesService(
        store=store,
        fetcher=fetcher,
        registry=registry,
        clock=clock,
        **kwargs,
    )


def test_first_load_creates_record(store, fetcher, registry, clock, make_bars) -> None:
    fetcher.bars = make_bars(300)
    service = _service(store, fetcher, registry, clock)

    result = asyncio.run(service.get_series("MSFT"))

    assert result.display_name == "Microsoft"
    assert result.symbol == "MSFT"
    assert len(result.bars) == 300
    assert result.bars[0].date > result.bars[-1].date
    assert len(result.indicators.sma50) == 251
    assert fetcher.calls == [("MSFT", date(2020, 1, 1))]

    record = asyncio.run(store.find_by_symbol("MSFT"))
    assert record is not None
    assert record.last_refreshed_at == clock.now
    assert len(record.bars) == 300


def test_symbol_is_normalized(store, fetcher, registry, clock, make_bars) -> None:
    fetcher.bars = make_bars(30)
    service = _service(store, fetcher, registry, clock)

    result = asyncio.run(service.get_series("  msft "))

    assert result.symbol == "MSFT"
    assert fetcher.calls[0][0] == "MSFT"


def test_empty_symbol_is_rejected(store, fetcher, registry, clock) -> None:
    service = _service(store, fetcher, registry, clock)

    with pytest.raises(ValidationError):
        asyncio.run(service.get_series("   "))
    assert fetcher.calls == []


def test_unknown_symbol_uses_ticker_as_name(store, fetcher, registry, clock, make_bars) -> None:
    fetcher.bars = make_bars(10)
    service = _service(store, fetcher, registry, clock)

    result = asyncio.run(service.get_series("TSLA"))

    assert result.display_name == "TSLA"


def test_empty_upstream_on_first_load_is_not_found(store, fetcher, registry, clock) -> None:
    service = _service(store, fetcher, registry, clock)

    with pytest.raises(NoDataFound):
        asyncio.run(service.get_series("ZZZZ"))
    assert asyncio.run(store.find_by_symbol("ZZZZ")) is None


def test_failing_upstream_on_first_load_is_not_found(store, fetcher, registry, clock) -> None:
    fetcher.error = UpstreamFetchFailed("test", "boom")
    service = _service(store, fetcher, registry, clock)

    with pytest.raises(NoDataFound):
        asyncio.run(service.get_series("ZZZZ"))
    assert asyncio.run(store.list_all()) == []


def test_second_call_within_window_does_not_fetch(
    store, fetcher, registry, clock, make_bars
) -> None:
    fetcher.bars = make_bars(60)
    service = _service(store, fetcher, registry, clock)

    asyncio.run(service.get_series("MSFT"))
    clock.advance(hours=23)
    asyncio.run(service.get_series("MSFT"))
    assert len(fetcher.calls) == 1

    clock.advance(hours=1)  # exactly 24h is still fresh
    asyncio.run(service.get_series("MSFT"))
    assert len(fetcher.calls) == 1

    clock.advance(minutes=1)
    asyncio.run(service.get_series("MSFT"))
    assert len(fetcher.calls) == 2


def test_stale_record_served_when_refresh_fails(
    store, fetcher, registry, clock, make_bars
) -> None:
    refreshed_at = clock.now - timedelta(hours=30)
    existing = SymbolRecord(
        symbol="MSFT",
        display_name="Microsoft",
        bars=make_bars(50),
        last_refreshed_at=refreshed_at,
    )
    asyncio.run(store.upsert(existing))
    fetcher.error = UpstreamFetchFailed("test", "provider down")
    service = _service(store, fetcher, registry, clock)

    result = asyncio.run(service.get_series("MSFT"))

    assert len(fetcher.calls) == 1
    assert len(result.bars) == 50
    assert result.last_refreshed_at == refreshed_at
    stored = asyncio.run(store.find_by_symbol("MSFT"))
    assert stored.last_refreshed_at == refreshed_at
    assert stored.bars == existing.bars


def test_stale_record_served_when_refresh_is_empty(
    store, fetcher, registry, clock, make_bars
) -> None:
    refreshed_at = clock.now - timedelta(hours=30)
    asyncio.run(
        store.upsert(
            SymbolRecord(
                symbol="MSFT",
                display_name="Microsoft",
                bars=make_bars(5),
                last_refreshed_at=refreshed_at,
            )
        )
    )
    service = _service(store, fetcher, registry, clock)

    result = asyncio.run(service.get_series("MSFT"))

    assert len(result.bars) == 5
    assert result.last_refreshed_at == refreshed_at


def test_stale_record_served_when_fetch_times_out(
    store, fetcher, registry, clock, make_bars
) -> None:
    refreshed_at = clock.now - timedelta(hours=30)
    asyncio.run(
        store.upsert(
            SymbolRecord(
                symbol="MSFT",
                display_name="Microsoft",
                bars=make_bars(5),
                last_refreshed_at=refreshed_at,
            )
        )
    )
    fetcher.bars = make_bars(200)
    fetcher.delay = 1.0
    service = _service(store, fetcher, registry, clock, fetch_timeout=0.05)

    result = asyncio.run(service.get_series("MSFT"))

    assert len(result.bars) == 5
    assert result.last_refreshed_at == refreshed_at


def test_stale_record_is_replaced_wholesale(
    store, fetcher, registry, clock, make_bars
) -> None:
    asyncio.run(
        store.upsert(
            SymbolRecord(
                symbol="MSFT",
                display_name="Microsoft",
                bars=make_bars(5, start=date(2019, 1, 1)),
                last_refreshed_at=clock.now - timedelta(hours=30),
            )
        )
    )
    fresh = make_bars(20, start=date(2024, 1, 1))
    fetcher.bars = fresh
    service = _service(store, fetcher, registry, clock)

    result = asyncio.run(service.get_series("MSFT"))

    stored = asyncio.run(store.find_by_symbol("MSFT"))
    assert stored.bars == fresh
    assert stored.last_refreshed_at == clock.now
    assert result.bars[-1].date == date(2024, 1, 1)


def test_seeded_record_is_fetched_and_keeps_name(
    store, fetcher, registry, clock, make_bars
) -> None:
    asyncio.run(store.insert_if_absent(SymbolRecord(symbol="SQ", display_name="Square / Block")))
    fetcher.bars = make_bars(10)
    service = _service(store, fetcher, registry, clock)

    result = asyncio.run(service.get_series("SQ"))

    assert result.display_name == "Square / Block"
    assert len(result.bars) == 10
    assert asyncio.run(store.find_by_symbol("SQ")).last_refreshed_at == clock.now


def test_seeded_record_without_data_is_not_found(store, fetcher, registry, clock) -> None:
    asyncio.run(store.insert_if_absent(SymbolRecord(symbol="TWTR", display_name="Twitter / X")))
    fetcher.error = UpstreamFetchFailed("test", "delisted")
    service = _service(store, fetcher, registry, clock)

    with pytest.raises(NoDataFound):
        asyncio.run(service.get_series("TWTR"))
    assert asyncio.run(store.find_by_symbol("TWTR")).last_refreshed_at is None


def test_fetched_bars_are_sorted_and_deduplicated(
    store, fetcher, registry, clock, make_bars
) -> None:
    bars = make_bars(5)
    replacement = DailyBar(date=bars[2].date, close=999.0, high=1000.0, low=998.0, volume=5)
    fetcher.bars = [bars[3], bars[0], bars[2], bars[4], bars[1], replacement]
    service = _service(store, fetcher, registry, clock)

    asyncio.run(service.get_series("MSFT"))

    stored = asyncio.run(store.find_by_symbol("MSFT"))
    dates = [b.date for b in stored.bars]
    assert dates == sorted(set(dates))
    assert len(dates) == 5
    assert stored.bars[2].close == 999.0


def test_closes_passed_ascending_to_indicators(
    store, fetcher, registry, clock, make_bars
) -> None:
    fetcher.bars = make_bars(60, base=100.0, step=1.0)
    service = _service(store, fetcher, registry, clock)

    result = asyncio.run(service.get_series("MSFT"))

    # last window is closes 110..159
    assert result.indicators.sma50[-1] == pytest.approx(134.5)
    assert result.indicators.sma50[0] == pytest.approx(124.5)


def test_concurrent_requests_fetch_once(store, fetcher, registry, clock, make_bars) -> None:
    fetcher.bars = make_bars(40)
    fetcher.delay = 0.05
    service = _service(store, fetcher, registry, clock)

    async def run():
        return await asyncio.gather(
            service.get_series("MSFT"),
            service.get_series("MSFT"),
            service.get_series("MSFT"),
        )

    results = asyncio.run(run())

    assert len(fetcher.calls) == 1
    assert all(len(r.bars) == 40 for r in results)
    assert len(service._locks) == 0


def test_lock_released_when_load_fails(store, fetcher, registry, clock) -> None:
    service = _service(store, fetcher, registry, clock)

    with pytest.raises(NoDataFound):
        asyncio.run(service.get_series("ZZZZ"))

    assert len(service._locks) == 0


def test_different_symbols_fetch_independently(
    store, fetcher, registry, clock, make_bars
) -> None:
    fetcher.bars = make_bars(40)
    fetcher.delay = 0.05
    service = _service(store, fetcher, registry, clock)

    async def run():
        await asyncio.gather(service.get_series("MSFT"), service.get_series("AMZN"))

    asyncio.run(run())

    assert sorted(symbol for symbol, _ in fetcher.calls) == ["AMZN", "MSFT"]


class _BrokenStore(InMemorySeriesStore):
    async def find_by_symbol(self, symbol):
        raise StoreUnavailable("test", "database is locked")


def test_store_failure_propagates(fetcher, registry, clock) -> None:
    service = _service(_BrokenStore(), fetcher, registry, clock)

    with pytest.raises(StoreUnavailable):
        asyncio.run(service.get_series("MSFT"))
    assert fetcher.calls == []


def test_window_uses_all_bars_when_history_is_short(make_bars) -> None:
    stats = window_stats(make_bars(100), 252)

    assert stats.window_size == 100
    assert stats.high52 == pytest.approx(100.0 + 0.5 * 99 + 1.0)
    assert stats.low52 == pytest.approx(99.0)
    assert stats.avg_volume == 1_000_000


def test_window_uses_most_recent_bars(make_bars) -> None:
    stats = window_stats(make_bars(300), 252)

    assert stats.window_size == 252
    assert stats.high52 == pytest.approx(100.0 + 0.5 * 299 + 1.0)
    assert stats.low52 == pytest.approx(100.0 + 0.5 * 48 - 1.0)


def test_window_skips_bars_missing_fields(make_bars) -> None:
    bars = make_bars(3)
    bars.append(DailyBar(date=date(2023, 2, 1), close=500.0, high=900.0, low=1.0, volume=0))
    bars.append(DailyBar(date=date(2023, 2, 2), close=500.0, low=1.0, volume=10))

    stats = window_stats(bars, 252)

    assert stats.window_size == 3
    assert stats.high52 == pytest.approx(102.0)


def test_window_without_usable_bars_is_insufficient_data() -> None:
    bars = [DailyBar(date=date(2023, 1, 2), close=10.0)]

    stats = window_stats(bars, 252)

    assert stats.window_size == 0
    assert stats.high52 is None
    assert stats.low52 is None
    assert stats.avg_volume is None


def test_average_volume_rounds_half_up() -> None:
    bars = [
        DailyBar(date=date(2023, 1, 2), close=10.0, high=11.0, low=9.0, volume=1),
        DailyBar(date=date(2023, 1, 3), close=10.0, high=11.0, low=9.0, volume=2),
    ]

    assert window_stats(bars, 252).avg_volume == 2


class _CountingIndicators(IndicatorService):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def calculate(self, closes):
        self.calls += 1
        return super().calculate(closes)


def test_composed_result_is_cached_per_refresh(
    store, fetcher, registry, clock, make_bars
) -> None:
    fetcher.bars = make_bars(60)
    indicators = _CountingIndicators()
    service = _service(
        store, fetcher, registry, clock, indicator_service=indicators, cache=SeriesCache()
    )

    first = asyncio.run(service.get_series("MSFT"))
    second = asyncio.run(service.get_series("MSFT"))
    assert indicators.calls == 1
    assert second == first

    clock.advance(hours=25)
    asyncio.run(service.get_series("MSFT"))
    assert indicators.calls == 2


def test_daily_bar_is_immutable() -> None:
    bar = DailyBar(date=date(2024, 1, 2), close=10.0)

    with pytest.raises(pydantic.ValidationError):
        bar.close = 11.0
    assert hash(bar) == hash(DailyBar(date=date(2024, 1, 2), close=10.0))
