from trendline_overlay.models import Candle, ChartPoint
from trendline_overlay.regression import linear_regression, regression_line


def _c(idx: int, close: float) -> Candle:
    return Candle(time=1_700_000_000_000 + idx * 3_600_000, open=close, high=close + 1, low=close - 1, close=close, volume=1.0)


def test_linear_regression_exact_line():
    slope, intercept = linear_regression([10.0 + 2.0 * i for i in range(10)])
    assert slope == 2.0
    assert intercept == 10.0


def test_linear_regression_degenerate_inputs():
    assert linear_regression([]) == (0.0, 0.0)
    assert linear_regression([42.5]) == (0.0, 42.5)


def test_regression_line_points():
    candles = [_c(i, 10.0 + 2.0 * i) for i in range(10)]
    assert regression_line(candles) == [
        ChartPoint(x=candles[0].time, y=10.0),
        ChartPoint(x=candles[9].time, y=28.0),
    ]


def test_regression_line_noisy_series_rounds_to_six_decimals():
    closes = [1.0, 3.0, 2.0, 5.0]
    candles = [_c(i, c) for i, c in enumerate(closes)]
    slope, intercept = linear_regression(closes)
    assert slope == 1.1
    points = regression_line(candles)
    assert points[0].y == round(intercept, 6)
    assert points[1].y == round(intercept + slope * 3, 6)


def test_regression_line_empty_and_single():
    assert regression_line([]) == []
    c = _c(0, 7.0)
    assert regression_line([c]) == [ChartPoint(x=c.time, y=7.0), ChartPoint(x=c.time, y=7.0)]
