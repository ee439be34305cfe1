"""
StockDash Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from stockdash.schemas.series import (
    DailyBar,
    SymbolRecord,
    CompanySummary,
    SeriesStats,
    MacdPoint,
    IndicatorSet,
    SeriesResult,
)

__all__ = [
    # Records
    "DailyBar",
    "SymbolRecord",
    "CompanySummary",
    # Series output
    "SeriesStats",
    "MacdPoint",
    "IndicatorSet",
    "SeriesResult",
]
