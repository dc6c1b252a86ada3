import random

from trendline_overlay.models import Candle
from trendline_overlay.pivots import detect_pivots


def _c(idx: int, h: float, l: float) -> Candle:
    mid = (h + l) / 2.0
    return Candle(time=idx * 60_000, open=mid, high=h, low=l, close=mid, volume=1.0)


def _from_lows(lows, spread: float = 2.0):
    return [_c(i, lo + spread, lo) for i, lo in enumerate(lows)]


W_LOWS = [12, 11, 10, 9, 8, 7, 5, 7, 8, 9, 10, 11, 12, 11, 10, 9, 8, 7, 5, 7, 8, 9, 10, 11, 12]


def test_rising_series_has_no_pivots():
    candles = [_c(i, 100.0 + i, 99.0 + i) for i in range(20)]
    highs, lows = detect_pivots(candles, 5)
    assert highs == []
    assert lows == []


def test_v_shape_single_pivot_low():
    lows = [7, 6, 5, 4, 3, 2, 1, 0, 1, 2, 3, 4, 5, 6, 7]
    candles = _from_lows([float(x) for x in lows], spread=1.0)
    highs, piv_lows = detect_pivots(candles, 5)
    assert highs == []
    assert [p.index for p in piv_lows] == [7]
    p = piv_lows[0]
    assert p.price == 0.0
    assert p.time == candles[7].time
    assert p.kind == "low"


def test_w_shape_two_equal_lows_and_one_high():
    candles = _from_lows([float(x) for x in W_LOWS])
    highs, lows = detect_pivots(candles, 5)
    assert [p.index for p in lows] == [6, 18]
    assert [p.price for p in lows] == [5.0, 5.0]
    assert [p.index for p in highs] == [12]
    assert highs[0].price == 14.0
    assert highs[0].kind == "high"


def test_tie_inside_window_removes_pivot():
    lows = [float(x) for x in W_LOWS]
    lows[8] = 5.0  # equal to the low at idx 6, within its window
    candles = _from_lows(lows)
    _, piv_lows = detect_pivots(candles, 5)
    assert [p.index for p in piv_lows] == [18]


def test_boundary_indices_never_pivot():
    # idx 19 would dominate its whole window but sits outside [w, N-1-w)
    lows = [10.0 + abs(i - 19) for i in range(25)]
    _, piv_lows = detect_pivots(_from_lows(lows), 5)
    assert piv_lows == []

    lows = [10.0 + abs(i - 18) for i in range(25)]
    _, piv_lows = detect_pivots(_from_lows(lows), 5)
    assert [p.index for p in piv_lows] == [18]


def test_pivots_strictly_dominate_window():
    rng = random.Random(7)
    price = 100.0
    candles = []
    for i in range(300):
        price += rng.uniform(-1.0, 1.0)
        lo = round(price - rng.uniform(0.0, 0.5), 2)
        hi = round(price + rng.uniform(0.0, 0.5), 2)
        candles.append(_c(i, hi, lo))

    window = 4
    highs, lows = detect_pivots(candles, window)
    assert highs and lows
    assert [p.index for p in highs] == sorted(p.index for p in highs)
    assert [p.index for p in lows] == sorted(p.index for p in lows)

    for p in highs:
        assert window <= p.index < len(candles) - 1 - window
        for j in range(p.index - window, p.index + window + 1):
            if j != p.index:
                assert candles[j].high < p.price
    for p in lows:
        assert window <= p.index < len(candles) - 1 - window
        for j in range(p.index - window, p.index + window + 1):
            if j != p.index:
                assert candles[j].low > p.price


def test_input_not_mutated():
    candles = _from_lows([float(x) for x in W_LOWS])
    before = list(candles)
    detect_pivots(candles, 5)
    assert candles == before
