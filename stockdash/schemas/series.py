"""
CONTRACT: Historical Series

Input:  symbol (uppercase ticker)
Output: SeriesResult

Records persisted per symbol, and the composed response served to the
dashboard (bars, 52-week statistics, technical indicators).
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# PERSISTED RECORDS
# =============================================================================


class DailyBar(BaseModel):
    """One trading day of OHLCV data for one symbol."""

    date: date
    open: Optional[float] = Field(default=None, gt=0)
    high: Optional[float] = Field(default=None, gt=0)
    low: Optional[float] = Field(default=None, gt=0)
    close: float = Field(..., gt=0)
    volume: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(frozen=True)


class SymbolRecord(BaseModel):
    """
    Aggregate stored per tracked symbol.

    bars are always ascending by date with no duplicate dates.
    last_refreshed_at is None until the first successful fetch.
    """

    symbol: str
    display_name: str
    bars: list[DailyBar] = Field(default_factory=list)
    last_refreshed_at: Optional[datetime] = None

    @field_validator("symbol")
    @classmethod
    def symbol_must_be_uppercase(cls, v):
        v = v.strip().upper()
        if not v:
            raise ValueError("symbol must not be empty")
        return v

    @field_validator("bars")
    @classmethod
    def bars_sorted_unique(cls, v):
        # Later bars for the same date win
        by_date = {bar.date: bar for bar in v}
        return [by_date[d] for d in sorted(by_date)]

    @property
    def has_data(self) -> bool:
        return len(self.bars) > 0


class CompanySummary(BaseModel):
    """Entry in the company listing."""

    display_name: str
    symbol: str


# =============================================================================
# OUTPUT: SeriesResult
# =============================================================================


class SeriesStats(BaseModel):
    """
    Trailing-window statistics.
    All fields are None when the window holds no usable bars.
    """

    high52: Optional[float] = None
    low52: Optional[float] = None
    avg_volume: Optional[int] = None
    window_size: int = Field(default=0, ge=0, description="Bars used after filtering")


class MacdPoint(BaseModel):
    """One MACD observation. signal/histogram are None during the signal warm-up."""

    value: float
    signal: Optional[float] = None
    histogram: Optional[float] = None


class IndicatorSet(BaseModel):
    """Indicator sequences aligned to the tail of the ascending closes."""

    sma50: list[float] = Field(default_factory=list)
    sma200: list[float] = Field(default_factory=list)
    rsi14: list[float] = Field(default_factory=list)
    macd: list[MacdPoint] = Field(default_factory=list)


class SeriesResult(BaseModel):
    """
    Composed series for one symbol.
    Returned by: SeriesService.get_series
    Consumed by: Dashboard
    """

    display_name: str
    symbol: str
    bars: list[DailyBar] = Field(..., description="Most recent first")
    stats: SeriesStats
    indicators: IndicatorSet
    last_refreshed_at: Optional[datetime] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "display_name": "Microsoft",
                "symbol": "MSFT",
                "bars": [
                    {
                        "date": "2024-02-02",
                        "open": 403.81,
                        "high": 412.65,
                        "low": 403.56,
                        "close": 411.22,
                        "volume": 28245000,
                    }
                ],
                "stats": {
                    "high52": 420.82,
                    "low52": 245.61,
                    "avg_volume": 26489123,
                    "window_size": 252,
                },
                "indicators": {
                    "sma50": [],
                    "sma200": [],
                    "rsi14": [],
                    "macd": [],
                },
                "last_refreshed_at": "2024-02-04T10:30:00+00:00",
            }
        }
    )
