from __future__ import annotations
from typing import List, Sequence, Tuple

from .models import Candle, ChartPoint
from .trendline import round_price


def linear_regression(values: Sequence[float]) -> Tuple[float, float]:
    """Ordinary least squares of values against x = 0..n-1. Returns (slope, intercept)."""
    n = len(values)
    if n == 0:
        return 0.0, 0.0
    sum_x = 0.0
    sum_y = 0.0
    sum_xy = 0.0
    sum_xx = 0.0
    for i, y in enumerate(values):
        sum_x += i
        sum_y += y
        sum_xy += i * y
        sum_xx += i * i
    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0, float(values[0])
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def regression_line(candles: Sequence[Candle]) -> List[ChartPoint]:
    if not candles:
        return []
    slope, intercept = linear_regression([c.close for c in candles])
    last = len(candles) - 1
    return [
        ChartPoint(x=candles[0].time, y=round_price(intercept)),
        ChartPoint(x=candles[last].time, y=round_price(intercept + slope * last)),
    ]
