from __future__ import annotations

import math
from typing import Iterable, Sequence, Tuple

from .models import Candle, SeriesError


def _parse_number(name: str, raw: object) -> float:
    # Binance sends prices and volumes as decimal strings.
    if raw is None or isinstance(raw, bool):
        raise SeriesError(f"{name} is not a number: {raw!r}")
    if isinstance(raw, (int, float)):
        val = float(raw)
    elif isinstance(raw, str):
        try:
            val = float(raw.strip())
        except ValueError:
            raise SeriesError(f"{name} is not a number: {raw!r}") from None
    else:
        raise SeriesError(f"{name} is not a number: {raw!r}")
    if not math.isfinite(val):
        raise SeriesError(f"{name} is not finite: {raw!r}")
    return val


def _parse_time(raw: object) -> int:
    if isinstance(raw, bool):
        raise SeriesError(f"time is not an integer: {raw!r}")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    raise SeriesError(f"time is not an integer: {raw!r}")


def parse_candle(time: object, open: object, high: object, low: object, close: object, volume: object) -> Candle:
    """Build a Candle from raw values, failing fast on anything that is not clean numeric OHLCV."""
    t = _parse_time(time)
    o = _parse_number("open", open)
    h = _parse_number("high", high)
    lo = _parse_number("low", low)
    c = _parse_number("close", close)
    v = _parse_number("volume", volume)

    if not (lo <= o <= h and lo <= c <= h):
        raise SeriesError(f"OHLC out of order at time={t}: o={o} h={h} l={lo} c={c}")
    if v < 0:
        raise SeriesError(f"negative volume at time={t}: {v}")
    return Candle(time=t, open=o, high=h, low=lo, close=c, volume=v)


def parse_kline_row(row: Sequence[object]) -> Candle:
    """Binance kline array: [0]=open time, [1..4]=OHLC, [5]=volume."""
    if len(row) < 6:
        raise SeriesError(f"kline row too short: {row!r}")
    return parse_candle(row[0], row[1], row[2], row[3], row[4], row[5])


def build_series(candles: Iterable[Candle]) -> Tuple[Candle, ...]:
    out = tuple(candles)
    for prev, cur in zip(out, out[1:]):
        if cur.time <= prev.time:
            raise SeriesError(f"candle times not strictly increasing: {prev.time} -> {cur.time}")
    return out
