from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Dict, List, Optional, Sequence

from .models import Candle, ChartPoint, ConfigurationError
from .regression import regression_line
from .trendline import (
    DEFAULT_EPSILON,
    DEFAULT_WINDOW,
    best_lines,
    select_line,
    touch_tolerance,
)

log = logging.getLogger("engine")

STRATEGY_PIVOT = "pivot"
STRATEGY_REGRESSION = "regression"
STRATEGIES = (STRATEGY_PIVOT, STRATEGY_REGRESSION)


def _check_tolerance(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ConfigurationError(f"{name} must be a finite non-negative number, got {value!r}")
    return value


def validate_engine_params(
    strategy: str, window: object, epsilon: object, touch_epsilon: object = None
) -> None:
    if strategy not in STRATEGIES:
        raise ConfigurationError(f"Unsupported strategy: {strategy!r} (use one of {', '.join(STRATEGIES)})")
    if isinstance(window, bool) or not isinstance(window, int):
        raise ConfigurationError(f"window must be an integer, got {window!r}")
    if window < 0:
        raise ConfigurationError(f"window must be >= 0, got {window}")
    _check_tolerance("epsilon", epsilon)
    if touch_epsilon is not None:
        _check_tolerance("touch_epsilon", touch_epsilon)


class TrendLineEngine:
    """Stateless trend overlay for a candle series.

    strategy="pivot" runs the pivot-pair support/resistance search,
    strategy="regression" fits one OLS line over the closes. The two are
    never combined.
    """

    def __init__(
        self,
        strategy: str = STRATEGY_PIVOT,
        window: int = DEFAULT_WINDOW,
        epsilon: float = DEFAULT_EPSILON,
        touch_epsilon: Optional[float] = None,
    ):
        validate_engine_params(strategy, window, epsilon, touch_epsilon)
        self.strategy = strategy
        self.window = window
        self.epsilon = float(epsilon)
        self.touch_epsilon = touch_tolerance(self.epsilon, None if touch_epsilon is None else float(touch_epsilon))

    @classmethod
    def from_config(cls, cfg) -> "TrendLineEngine":
        return cls(
            strategy=cfg.strategy,
            window=cfg.window,
            epsilon=cfg.epsilon,
            touch_epsilon=cfg.touch_epsilon,
        )

    def signature(self) -> Dict[str, object]:
        return {
            "strategy": self.strategy,
            "window": self.window,
            "epsilon": self.epsilon,
            "touch_epsilon": self.touch_epsilon,
        }

    def trend_line(self, candles: Sequence[Candle]) -> List[ChartPoint]:
        if self.strategy == STRATEGY_REGRESSION:
            return regression_line(candles)
        return self._pivot_line(candles)

    def _pivot_line(self, candles: Sequence[Candle]) -> List[ChartPoint]:
        support, resistance = best_lines(
            candles, self.window, epsilon=self.epsilon, touch_epsilon=self.touch_epsilon
        )
        points = select_line(support, resistance)
        log.debug(
            "trend_done bars=%d window=%d support=%s resistance=%s points=%d",
            len(candles),
            self.window,
            None if support is None else (support.pivot_a.index, support.pivot_b.index, support.touches),
            None if resistance is None else (resistance.pivot_a.index, resistance.pivot_b.index, resistance.touches),
            len(points),
        )
        return points
