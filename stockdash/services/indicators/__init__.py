"""
Indicator Engine Service

CONTRACT:
    Input:  closing prices (ascending by date)
    Output: IndicatorSet

RESPONSIBILITIES:
    - Simple moving averages (50, 200)
    - Relative Strength Index (14)
    - MACD (12, 26, 9) with signal line and histogram

Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from stockdash.services.indicators.interface import IndicatorServiceInterface
from stockdash.services.indicators.service import IndicatorService, get_indicator_service
from stockdash.services.indicators.calculations import (
    moving_average,
    relative_strength_index,
    trend_convergence_divergence,
)

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
    "moving_average",
    "relative_strength_index",
    "trend_convergence_divergence",
]
