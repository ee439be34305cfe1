"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from typing import Sequence

from stockdash.services.base import BaseService
from stockdash.schemas.series import IndicatorSet


class IndicatorServiceInterface(BaseService[Sequence[float], IndicatorSet]):
    """
    Indicator Engine Service Contract.

    INPUT: closing prices, ascending by date

    OUTPUT: IndicatorSet
        - sma50, sma200: simple moving averages
        - rsi14: relative strength index
        - macd: MACD(12, 26, 9) points
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: Sequence[float]) -> IndicatorSet:
        """Calculate the dashboard indicator set."""
        pass

    @abstractmethod
    def calculate(self, closes: Sequence[float]) -> IndicatorSet:
        """Synchronous variant of execute."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
