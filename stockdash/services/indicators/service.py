"""
Indicator Engine Service Implementation

Calculates the dashboard indicators from a closing-price series.
Pure Python/NumPy calculations, no external state.
"""

from typing import Optional, Sequence

from stockdash.schemas.series import IndicatorSet
from stockdash.services.indicators.interface import IndicatorServiceInterface
from stockdash.services.indicators.calculations import (
    moving_average,
    relative_strength_index,
    trend_convergence_divergence,
)


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Periods are fixed per instance; the defaults match the dashboard
    (SMA 50/200, RSI 14, MACD 12/26/9).
    """

    def __init__(
        self,
        short_sma: int = 50,
        long_sma: int = 200,
        rsi_period: int = 14,
        macd_fast: int = 12,
        macd_slow: int = 26,
        macd_signal: int = 9,
    ):
        self.short_sma = short_sma
        self.long_sma = long_sma
        self.rsi_period = rsi_period
        self.macd_fast = macd_fast
        self.macd_slow = macd_slow
        self.macd_signal = macd_signal

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: Sequence[float]) -> IndicatorSet:
        return self.calculate(input_data)

    def calculate(self, closes: Sequence[float]) -> IndicatorSet:
        """Calculate all indicators for an ascending closing-price series."""
        closes = list(closes)
        return IndicatorSet(
            sma50=moving_average(closes, self.short_sma),
            sma200=moving_average(closes, self.long_sma),
            rsi14=relative_strength_index(closes, self.rsi_period),
            macd=trend_convergence_divergence(
                closes, self.macd_fast, self.macd_slow, self.macd_signal
            ),
        )

    async def health_check(self) -> bool:
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
