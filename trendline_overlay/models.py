from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple

PIVOT_HIGH = "high"
PIVOT_LOW = "low"

SUPPORT = "support"
RESISTANCE = "resistance"


class ConfigurationError(ValueError):
    """Bad engine parameters (window / tolerances / strategy)."""


class SeriesError(ValueError):
    """Raw candle data that cannot become a valid series."""


@dataclass(frozen=True)
class Candle:
    time: int  # open time, epoch ms
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class PivotPoint:
    index: int
    price: float
    time: int
    kind: str  # high or low


@dataclass(frozen=True)
class ChartPoint:
    x: int
    y: float

    def as_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class TrendLineCandidate:
    type: str  # support or resistance
    pivot_a: PivotPoint
    pivot_b: PivotPoint
    slope: float
    touches: int
    points: Tuple[ChartPoint, ...]


@dataclass(frozen=True)
class SymbolInfo:
    symbol: str
    base_asset: str
    quote_asset: str

    def as_dict(self) -> Dict[str, str]:
        return {"symbol": self.symbol, "baseAsset": self.base_asset, "quoteAsset": self.quote_asset}
