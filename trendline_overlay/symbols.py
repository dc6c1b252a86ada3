from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, Sequence

from .models import SymbolInfo

log = logging.getLogger("symbols")

Loader = Callable[[], Awaitable[List[SymbolInfo]]]


class SymbolCache:
    """Instrument list cached for ttl_s seconds, refreshed through an async loader."""

    def __init__(self, loader: Loader, ttl_s: float = 900.0, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.loader = loader
        self.ttl_s = float(ttl_s)
        self.clock = clock
        self._symbols: List[SymbolInfo] = []
        self._fetched_at: Optional[float] = None
        self._lock = asyncio.Lock()

    def is_fresh(self) -> bool:
        if not self._symbols or self._fetched_at is None:
            return False
        return self.clock() - self._fetched_at < self.ttl_s

    async def get(self) -> List[SymbolInfo]:
        if self.is_fresh():
            return self._symbols
        async with self._lock:
            # another waiter may have refreshed while we queued
            if self.is_fresh():
                return self._symbols
            symbols = await self.loader()
            self._symbols = list(symbols)
            self._fetched_at = self.clock()
            log.info("symbols_refreshed count=%d ttl_s=%.0f", len(self._symbols), self.ttl_s)
            return self._symbols


def filter_symbols(symbols: Sequence[SymbolInfo], query: str) -> List[SymbolInfo]:
    q = (query or "").strip().upper()
    if not q:
        return list(symbols)
    return [s for s in symbols if q in s.symbol or q in s.base_asset or q in s.quote_asset]
