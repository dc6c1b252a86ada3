from __future__ import annotations

import logging
import re
import time
from typing import Any, Dict, List, Optional, Tuple

from .config import Config
from .engine import TrendLineEngine
from .formatters import klines_payload, symbols_payload
from .models import Candle, ChartPoint
from .providers.binance import BinanceProvider
from .symbols import SymbolCache, filter_symbols

log = logging.getLogger("service")

_LEADING_INT_RE = re.compile(r"^\s*[+-]?\d+")


def clamp_limit(raw: Optional[str], default: int, max_limit: int) -> int:
    # leading digits only, like JS parseInt ("12abc" -> 12); non-numeric or non-positive -> default
    m = _LEADING_INT_RE.match(raw or "")
    val = int(m.group(0)) if m else 0
    if val <= 0:
        val = default
    return min(val, max_limit)


class TrendService:
    """Fetches candles, runs the trend engine and serves symbol lookups."""

    def __init__(self, cfg: Config, *, provider=None, engine: Optional[TrendLineEngine] = None, clock=time.monotonic):
        self.cfg = cfg
        self.engine = engine or TrendLineEngine.from_config(cfg.engine)
        self.provider = provider or BinanceProvider(
            market=cfg.provider.market,
            quote_asset=cfg.provider.quote_asset,
            rest_timeout_s=cfg.provider.rest_timeout_s,
            rest_max_retries=cfg.provider.rest_max_retries,
            rest_backoff_s=cfg.provider.rest_backoff_s,
        )
        self.symbol_cache = SymbolCache(self.provider.fetch_symbols, ttl_s=cfg.symbols.cache_ttl_s, clock=clock)

    async def close(self) -> None:
        await self.provider.close()

    async def klines(self, symbol: str, interval: Optional[str], limit: Optional[str]) -> Tuple[List[Candle], List[ChartPoint]]:
        interval = interval or self.cfg.provider.default_interval
        n = clamp_limit(limit, self.cfg.provider.default_limit, self.cfg.provider.max_limit)

        t0 = time.perf_counter()
        candles = await self.provider.fetch_klines(symbol.upper(), interval, n)
        trend = self.engine.trend_line(candles)
        log.info(
            "klines symbol=%s interval=%s limit=%d bars=%d strategy=%s trend_points=%d elapsed_ms=%.1f",
            symbol.upper(),
            interval,
            n,
            len(candles),
            self.engine.strategy,
            len(trend),
            (time.perf_counter() - t0) * 1000.0,
        )
        return candles, trend

    async def klines_payload(self, symbol: str, interval: Optional[str], limit: Optional[str]) -> Dict[str, Any]:
        candles, trend = await self.klines(symbol, interval, limit)
        return klines_payload(candles, trend)

    async def symbols_payload(self, query: Optional[str]) -> Dict[str, Any]:
        all_symbols = await self.symbol_cache.get()
        matches = filter_symbols(all_symbols, query or "")
        return symbols_payload(matches, self.cfg.symbols.max_results)
