from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import Candle, PivotPoint, PIVOT_HIGH, PIVOT_LOW


def _is_strict_pivot_high(candles: Sequence[Candle], pivot_idx: int, window: int) -> bool:
    pivot_high = candles[pivot_idx].high
    for i in range(pivot_idx - window, pivot_idx + window + 1):
        if i == pivot_idx:
            continue
        if pivot_high <= candles[i].high:
            return False
    return True


def _is_strict_pivot_low(candles: Sequence[Candle], pivot_idx: int, window: int) -> bool:
    pivot_low = candles[pivot_idx].low
    for i in range(pivot_idx - window, pivot_idx + window + 1):
        if i == pivot_idx:
            continue
        if pivot_low >= candles[i].low:
            return False
    return True


def detect_pivots(candles: Sequence[Candle], window: int = 5) -> Tuple[List[PivotPoint], List[PivotPoint]]:
    """Return (pivot_highs, pivot_lows) in ascending index order.

    A pivot must be strictly more extreme than every other bar within
    +/- window; an equal extreme anywhere in the window disqualifies it.
    Eligible indices are [window, N-1-window).
    """
    highs: List[PivotPoint] = []
    lows: List[PivotPoint] = []
    if window <= 0:
        return highs, lows

    n = len(candles)
    for i in range(window, n - 1 - window):
        c = candles[i]
        if _is_strict_pivot_high(candles, i, window):
            highs.append(PivotPoint(index=i, price=c.high, time=c.time, kind=PIVOT_HIGH))
        if _is_strict_pivot_low(candles, i, window):
            lows.append(PivotPoint(index=i, price=c.low, time=c.time, kind=PIVOT_LOW))
    return highs, lows
