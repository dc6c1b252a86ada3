from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from ..models import Candle, SymbolInfo
from ..series import build_series, parse_kline_row

log = logging.getLogger("binance")


def _rest_base(market: str) -> str:
    return "https://fapi.binance.com" if market == "futures" else "https://api.binance.com"


def _klines_path(market: str) -> str:
    return "/fapi/v1/klines" if market == "futures" else "/api/v3/klines"


def _exchange_info_path(market: str) -> str:
    return "/fapi/v1/exchangeInfo" if market == "futures" else "/api/v3/exchangeInfo"


def parse_exchange_info(data: Dict[str, Any], quote_asset: str = "USDT") -> List[SymbolInfo]:
    out: List[SymbolInfo] = []
    for s in data.get("symbols") or []:
        if s.get("status") != "TRADING" or s.get("quoteAsset") != quote_asset:
            continue
        out.append(SymbolInfo(symbol=s["symbol"], base_asset=s["baseAsset"], quote_asset=s["quoteAsset"]))
    return out


class BinanceProvider:
    def __init__(
        self,
        market: str = "spot",
        *,
        quote_asset: str = "USDT",
        rest_timeout_s: int = 20,
        rest_max_retries: int = 4,
        rest_backoff_s: float = 0.8,
        rest_conn_limit: int = 40,
        rest_conn_limit_per_host: int = 10,
    ):
        if int(rest_max_retries) < 1:
            raise ValueError(f"rest_max_retries must be >= 1, got {rest_max_retries}")
        self.market = market
        self.quote_asset = quote_asset
        self.rest_timeout_s = rest_timeout_s

        # REST robustness
        self.rest_max_retries = rest_max_retries
        self.rest_backoff_s = rest_backoff_s
        self.rest_conn_limit = rest_conn_limit
        self.rest_conn_limit_per_host = rest_conn_limit_per_host

        self._session: Optional[aiohttp.ClientSession] = None

    async def close(self) -> None:
        """Close the shared aiohttp session (best-effort)."""
        if self._session is not None and not self._session.closed:
            await self._session.close()

    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.rest_timeout_s,
            connect=min(10, self.rest_timeout_s),
            sock_connect=min(10, self.rest_timeout_s),
            sock_read=max(10, int(self.rest_timeout_s * 0.75)),
        )

    def _connector(self) -> aiohttp.TCPConnector:
        return aiohttp.TCPConnector(
            limit=self.rest_conn_limit,
            limit_per_host=self.rest_conn_limit_per_host,
            ttl_dns_cache=300,
            enable_cleanup_closed=True,
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout(), connector=self._connector())
        return self._session

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]], what: Tuple[str, ...]) -> Any:
        url = _rest_base(self.market) + path
        sess = await self._get_session()

        backoff = float(self.rest_backoff_s)
        last_err: Optional[BaseException] = None
        data: Any = None
        for attempt in range(1, int(self.rest_max_retries) + 1):
            try:
                async with sess.get(url, params=params) as resp:
                    # Rate-limit / ban signals
                    if resp.status in (418, 429):
                        txt = await resp.text()
                        retry_after = resp.headers.get("Retry-After")
                        sleep_s = float(retry_after) if (retry_after and retry_after.isdigit()) else backoff
                        log.warning(
                            "rest_rate_limited status=%s req=%s sleep=%.1fs body=%s",
                            resp.status,
                            ":".join(what),
                            sleep_s,
                            txt[:200],
                        )
                        last_err = RuntimeError(f"Binance rate limited: {resp.status}")
                        await asyncio.sleep(sleep_s)
                        backoff = min(backoff * 2.0, 20.0)
                        continue

                    if resp.status != 200:
                        txt = await resp.text()
                        raise RuntimeError(f"Binance request failed: {resp.status} {txt[:500]}")

                    # Some proxies return a wrong content-type; be tolerant.
                    data = await resp.json(content_type=None)

                last_err = None
                break

            except (asyncio.TimeoutError, aiohttp.ClientError) as e:
                last_err = e
                if attempt >= int(self.rest_max_retries):
                    break
                log.warning(
                    "rest_timeout_or_client_err attempt=%d/%d req=%s backoff=%.1fs err=%s",
                    attempt,
                    self.rest_max_retries,
                    ":".join(what),
                    backoff,
                    e,
                )
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2.0, 20.0)

        if last_err is not None:
            raise last_err
        return data

    async def fetch_klines(self, symbol: str, interval: str, limit: int) -> List[Candle]:
        params = {"symbol": symbol.upper(), "interval": interval, "limit": int(limit)}
        data = await self._get_json(_klines_path(self.market), params, ("klines", symbol, interval))
        if not isinstance(data, list):
            raise RuntimeError(f"Binance klines unexpected payload: {str(data)[:200]}")
        return list(build_series(parse_kline_row(row) for row in data))

    async def fetch_symbols(self) -> List[SymbolInfo]:
        data = await self._get_json(_exchange_info_path(self.market), None, ("exchangeInfo",))
        return parse_exchange_info(data or {}, self.quote_asset)
