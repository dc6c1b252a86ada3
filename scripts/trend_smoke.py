from __future__ import annotations

from trendline_overlay.engine import TrendLineEngine
from trendline_overlay.models import Candle
from trendline_overlay.pivots import detect_pivots


def candle(idx: int, high: float, low: float) -> Candle:
    mid = (high + low) / 2.0
    return Candle(time=idx * 3_600_000, open=mid, high=high, low=low, close=mid, volume=1.0)


def w_sequence():
    """Two equal lows at idx 6 and 18 with a peak between them."""
    lows = [12, 11, 10, 9, 8, 7, 5, 7, 8, 9, 10, 11, 12, 11, 10, 9, 8, 7, 5, 7, 8, 9, 10, 11, 12]
    return [candle(i, lo + 2.0, float(lo)) for i, lo in enumerate(lows)]


def rising_sequence(n: int = 20):
    return [candle(i, 100.0 + i, 99.0 + i) for i in range(n)]


def run_case(name: str, eng: TrendLineEngine, candles):
    highs, lows = detect_pivots(candles, eng.window)
    points = eng.trend_line(candles)
    print(
        f"{name}: strategy={eng.strategy} bars={len(candles)} pivot_highs={len(highs)} pivot_lows={len(lows)}",
        [(p.x, p.y) for p in points],
    )


def main():
    pivot = TrendLineEngine(strategy="pivot", window=5)
    regression = TrendLineEngine(strategy="regression")

    run_case("w_shape", pivot, w_sequence())
    run_case("rising", pivot, rising_sequence())
    run_case("w_shape", regression, w_sequence())
    run_case("rising", regression, rising_sequence())


if __name__ == "__main__":
    main()
