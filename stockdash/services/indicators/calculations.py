"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
All math is deterministic.

The low-level functions (sma, ema, rsi, macd) return arrays the same length
as the input with NaN in the warm-up positions. The public functions
(moving_average, relative_strength_index, trend_convergence_divergence)
drop the warm-up and return plain lists aligned to the tail of the input.

The series is treated as a dense index sequence: calendar gaps and
non-trading days are not handled.
"""

from typing import Sequence

import numpy as np

from stockdash.schemas.series import MacdPoint


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average."""
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    multiplier = 2 / (period + 1)

    # Start with SMA
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """Relative Strength Index (Wilder smoothing)."""
    if len(closes) < period + 1:
        return np.full(len(closes), np.nan)

    deltas = np.diff(closes)

    gains = np.where(deltas > 0, deltas, 0)
    losses = np.where(deltas < 0, -deltas, 0)

    # First average
    avg_gain = np.mean(gains[:period])
    avg_loss = np.mean(losses[:period])

    result = np.full(len(closes), np.nan)

    if avg_loss == 0:
        result[period] = 100
    else:
        rs = avg_gain / avg_loss
        result[period] = 100 - (100 / (1 + rs))

    # Subsequent RSI values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period

        if avg_loss == 0:
            result[i + 1] = 100
        else:
            rs = avg_gain / avg_loss
            result[i + 1] = 100 - (100 / (1 + rs))

    return result


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Returns: (macd_line, signal_line, histogram)
    """
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    # Signal line is EMA of the defined part of the MACD line
    signal_line = np.full(len(closes), np.nan)
    start = slow_period - 1
    if len(closes) > start:
        signal_line[start:] = ema(macd_line[start:], signal_period)

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# TAIL-ALIGNED SERIES
# =============================================================================


def _as_array(closes: Sequence[float]) -> np.ndarray:
    return np.asarray(closes, dtype=float)


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


def moving_average(closes: Sequence[float], period: int) -> list[float]:
    """
    Simple moving average over each full window.

    Output length is max(0, len(closes) - period + 1).
    """
    _check_period(period)
    values = sma(_as_array(closes), period)
    return [float(v) for v in values[period - 1 :]]


def relative_strength_index(closes: Sequence[float], period: int = 14) -> list[float]:
    """
    RSI scaled to 0-100. The first value needs period + 1 closes,
    so the output length is max(0, len(closes) - period).
    """
    _check_period(period)
    values = rsi(_as_array(closes), period)
    return [float(v) for v in values[period:]]


def trend_convergence_divergence(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> list[MacdPoint]:
    """
    MACD line, signal line and histogram aligned from the first MACD value.

    Points before the signal line warms up carry signal=None and
    histogram=None. Returns [] when len(closes) < slow + signal.
    """
    for period in (fast, slow, signal):
        _check_period(period)
    if len(closes) < slow + signal:
        return []

    macd_line, signal_line, histogram = macd(_as_array(closes), fast, slow, signal)

    points = []
    for i in range(slow - 1, len(closes)):
        if np.isnan(signal_line[i]):
            points.append(MacdPoint(value=float(macd_line[i])))
        else:
            points.append(
                MacdPoint(
                    value=float(macd_line[i]),
                    signal=float(signal_line[i]),
                    histogram=float(histogram[i]),
                )
            )
    return points
