from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .models import Candle, ChartPoint, PivotPoint, TrendLineCandidate, SUPPORT, RESISTANCE
from .pivots import detect_pivots

DEFAULT_WINDOW = 5
DEFAULT_EPSILON = 1e-6
TOUCH_EPSILON_FACTOR = 10.0
PRICE_DECIMALS = 6


def round_price(x: float) -> float:
    """Chart price rounding: built-in round(), i.e. correctly rounded from the binary value, halves to even."""
    return round(x, PRICE_DECIMALS)


def touch_tolerance(epsilon: float, touch_epsilon: Optional[float] = None) -> float:
    if touch_epsilon is None:
        return epsilon * TOUCH_EPSILON_FACTOR
    return touch_epsilon


def evaluate_line(
    candles: Sequence[Candle],
    pivot_a: PivotPoint,
    pivot_b: PivotPoint,
    line_type: str,
    *,
    epsilon: float = DEFAULT_EPSILON,
    touch_epsilon: Optional[float] = None,
) -> Optional[TrendLineCandidate]:
    """Validate the line through two same-kind pivots against the forward series.

    Every bar from pivot_a to the last bar is checked. A support line may not sit
    above any low by more than epsilon, a resistance line may not sit below any
    high by more than epsilon. Bars whose extreme lies within the touch tolerance
    of the line count as touches; fewer than two touches rejects the line.
    """
    span = pivot_b.index - pivot_a.index
    if span == 0:
        return None

    slope = (pivot_b.price - pivot_a.price) / span
    tol_touch = touch_tolerance(epsilon, touch_epsilon)
    is_support = line_type == SUPPORT

    touches = 0
    for idx in range(pivot_a.index, len(candles)):
        expected = pivot_a.price + slope * (idx - pivot_a.index)
        c = candles[idx]
        if is_support:
            if expected > c.low + epsilon:
                return None
            actual = c.low
        else:
            if expected < c.high - epsilon:
                return None
            actual = c.high
        if abs(actual - expected) <= tol_touch:
            touches += 1

    if touches < 2:
        return None

    last_idx = len(candles) - 1
    points = [
        ChartPoint(x=candles[pivot_a.index].time, y=round_price(pivot_a.price)),
        ChartPoint(x=candles[pivot_b.index].time, y=round_price(pivot_b.price)),
    ]
    if pivot_b.index < last_idx:
        projected = pivot_a.price + slope * (last_idx - pivot_a.index)
        points.append(ChartPoint(x=candles[last_idx].time, y=round_price(projected)))

    return TrendLineCandidate(
        type=line_type,
        pivot_a=pivot_a,
        pivot_b=pivot_b,
        slope=slope,
        touches=touches,
        points=tuple(points),
    )


def _beats(cand: TrendLineCandidate, best: TrendLineCandidate) -> bool:
    if cand.touches != best.touches:
        return cand.touches > best.touches
    if cand.pivot_b.index != best.pivot_b.index:
        return cand.pivot_b.index > best.pivot_b.index
    return cand.pivot_a.index > best.pivot_a.index


def search_best(
    candles: Sequence[Candle],
    pivots: Sequence[PivotPoint],
    line_type: str,
    *,
    epsilon: float = DEFAULT_EPSILON,
    touch_epsilon: Optional[float] = None,
) -> Optional[TrendLineCandidate]:
    """Best valid line over all pivot pairs, most recent pairs visited first.

    Ranking: more touches, then later pivot_b, then later pivot_a. A full tie
    keeps the candidate found first.
    """
    best: Optional[TrendLineCandidate] = None
    for i in range(len(pivots) - 1, 0, -1):
        for j in range(i - 1, -1, -1):
            cand = evaluate_line(
                candles, pivots[j], pivots[i], line_type, epsilon=epsilon, touch_epsilon=touch_epsilon
            )
            if cand is None:
                continue
            if best is None or _beats(cand, best):
                best = cand
    return best


def select_line(
    support: Optional[TrendLineCandidate], resistance: Optional[TrendLineCandidate]
) -> List[ChartPoint]:
    # Equal pivot_b favours support.
    if support is not None and resistance is not None:
        chosen = support if support.pivot_b.index >= resistance.pivot_b.index else resistance
    else:
        chosen = support or resistance
    if chosen is None:
        return []
    return list(chosen.points)


def best_lines(
    candles: Sequence[Candle],
    window: int = DEFAULT_WINDOW,
    *,
    epsilon: float = DEFAULT_EPSILON,
    touch_epsilon: Optional[float] = None,
) -> Tuple[Optional[TrendLineCandidate], Optional[TrendLineCandidate]]:
    """Return (support_line, resistance_line); either may be None."""
    if window <= 0 or len(candles) < 2 * window + 2:
        return None, None
    pivot_highs, pivot_lows = detect_pivots(candles, window)
    support = search_best(candles, pivot_lows, SUPPORT, epsilon=epsilon, touch_epsilon=touch_epsilon)
    resistance = search_best(candles, pivot_highs, RESISTANCE, epsilon=epsilon, touch_epsilon=touch_epsilon)
    return support, resistance


def search(
    candles: Sequence[Candle],
    window: int = DEFAULT_WINDOW,
    *,
    epsilon: float = DEFAULT_EPSILON,
    touch_epsilon: Optional[float] = None,
) -> List[ChartPoint]:
    support, resistance = best_lines(candles, window, epsilon=epsilon, touch_epsilon=touch_epsilon)
    return select_line(support, resistance)
