from __future__ import annotations

import random

import pytest

from stockdash.services.indicators import (
    IndicatorService,
    moving_average,
    relative_strength_index,
    trend_convergence_divergence,
)


def _random_walk(count: int, seed: int = 7) -> list[float]:
    rng = random.Random(seed)
    price = 100.0
    closes = []
    for _ in range(count):
        price = max(1.0, price + rng.uniform(-2.0, 2.0))
        closes.append(price)
    return closes


def _reference_ema(values: list[float], period: int) -> list[float]:
    seed = sum(values[:period]) / period
    out = [seed]
    k = 2 / (period + 1)
    for value in values[period:]:
        out.append((value - out[-1]) * k + out[-1])
    return out


@pytest.mark.parametrize("count", [0, 1, 49, 50, 51, 300])
def test_moving_average_length(count: int) -> None:
    closes = _random_walk(count)
    assert len(moving_average(closes, 50)) == max(0, count - 50 + 1)


def test_moving_average_window_means() -> None:
    assert moving_average([1.0, 2.0, 3.0, 4.0, 5.0], 3) == pytest.approx([2.0, 3.0, 4.0])


def test_moving_average_constant_series() -> None:
    values = moving_average([42.5] * 120, 50)
    assert len(values) == 71
    assert values == pytest.approx([42.5] * 71)


def test_moving_average_rejects_non_positive_period() -> None:
    with pytest.raises(ValueError):
        moving_average([1.0, 2.0], 0)


def test_rsi_length_and_warmup() -> None:
    assert relative_strength_index(_random_walk(14)) == []
    assert len(relative_strength_index(_random_walk(15))) == 1
    assert len(relative_strength_index(_random_walk(300))) == 286


def test_rsi_values_within_bounds() -> None:
    for seed in range(5):
        values = relative_strength_index(_random_walk(400, seed=seed))
        assert values
        assert all(0.0 <= v <= 100.0 for v in values)


def test_rsi_wilder_smoothing_small_case() -> None:
    # deltas +1, -1, +1 with period 2
    assert relative_strength_index([1.0, 2.0, 1.0, 2.0], period=2) == pytest.approx([50.0, 75.0])


def test_rsi_one_directional_series() -> None:
    rising = [float(i) for i in range(1, 40)]
    falling = list(reversed(rising))
    assert relative_strength_index(rising) == pytest.approx([100.0] * 25)
    assert relative_strength_index(falling) == pytest.approx([0.0] * 25)


def test_macd_empty_when_history_too_short() -> None:
    assert trend_convergence_divergence(_random_walk(34)) == []


def test_macd_alignment_and_signal_warmup() -> None:
    points = trend_convergence_divergence(_random_walk(35))

    assert len(points) == 35 - 26 + 1
    assert all(p.signal is None and p.histogram is None for p in points[:8])
    for point in points[8:]:
        assert point.signal is not None
        assert point.histogram == pytest.approx(point.value - point.signal)


def test_macd_matches_reference_ema() -> None:
    closes = _random_walk(120)
    points = trend_convergence_divergence(closes)

    fast = _reference_ema(closes, 12)[26 - 12 :]
    slow = _reference_ema(closes, 26)
    macd_line = [f - s for f, s in zip(fast, slow)]
    signal = _reference_ema(macd_line, 9)

    assert [p.value for p in points] == pytest.approx(macd_line)
    assert [p.signal for p in points[8:]] == pytest.approx(signal)


def test_macd_constant_series_is_flat() -> None:
    points = trend_convergence_divergence([100.0] * 60)
    assert points[-1].value == pytest.approx(0.0)
    assert points[-1].signal == pytest.approx(0.0)
    assert points[-1].histogram == pytest.approx(0.0)


def test_indicator_service_dashboard_set() -> None:
    result = IndicatorService().calculate(_random_walk(300))

    assert len(result.sma50) == 251
    assert len(result.sma200) == 101
    assert len(result.rsi14) == 286
    assert len(result.macd) == 275


def test_indicator_service_short_history_is_empty_not_error() -> None:
    result = IndicatorService().calculate([10.0, 11.0, 12.0])

    assert result.sma50 == []
    assert result.sma200 == []
    assert result.rsi14 == []
    assert result.macd == []
