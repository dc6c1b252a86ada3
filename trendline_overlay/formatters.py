from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .models import Candle, ChartPoint, SymbolInfo


def candle_dict(c: Candle) -> Dict[str, Any]:
    return {
        "time": c.time,
        "open": c.open,
        "high": c.high,
        "low": c.low,
        "close": c.close,
        "volume": c.volume,
    }


def klines_payload(candles: Sequence[Candle], trend_line: Sequence[ChartPoint]) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "candles": [candle_dict(c) for c in candles],
        "trendLine": [p.as_dict() for p in trend_line],
    }


def symbols_payload(matches: Sequence[SymbolInfo], max_results: int) -> Dict[str, Any]:
    return {
        "symbols": [s.as_dict() for s in matches[:max_results]],
        "total": len(matches),
    }


def error_payload(message: str, err: Optional[BaseException] = None) -> Dict[str, str]:
    out = {"error": message}
    if err is not None:
        out["details"] = str(err)
    return out
