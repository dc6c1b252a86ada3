from __future__ import annotations

import logging

from aiohttp import web

from .formatters import error_payload
from .service import TrendService

log = logging.getLogger("server")

SERVICE_KEY = web.AppKey("service", TrendService)


async def handle_symbols(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    try:
        payload = await service.symbols_payload(request.query.get("q"))
    except Exception as e:
        log.warning("symbols_failed err=%s", e)
        return web.json_response(error_payload("Unable to fetch symbols", e), status=500)
    return web.json_response(payload)


async def handle_klines(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    symbol = (request.query.get("symbol") or "").strip().upper()
    if not symbol:
        return web.json_response(error_payload("symbol query parameter is required"), status=400)
    try:
        payload = await service.klines_payload(symbol, request.query.get("interval"), request.query.get("limit"))
    except Exception as e:
        log.warning("klines_failed symbol=%s err=%s", symbol, e)
        return web.json_response(error_payload("Unable to fetch klines", e), status=500)
    return web.json_response(payload)


async def _close_service(app: web.Application) -> None:
    await app[SERVICE_KEY].close()


def create_app(service: TrendService) -> web.Application:
    app = web.Application()
    app[SERVICE_KEY] = service
    app.router.add_get("/api/symbols", handle_symbols)
    app.router.add_get("/api/klines", handle_klines)
    app.on_cleanup.append(_close_service)
    return app
