from __future__ import annotations

import argparse
import logging

from aiohttp import web

from .config import load_config
from .server import create_app
from .service import TrendService


def _setup_logging(level: str) -> None:
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Trendline Overlay - candles + trend line API")
    p.add_argument("--config", default=None, help="Path to YAML config (defaults if omitted)")
    args = p.parse_args(argv)

    cfg = load_config(args.config)
    _setup_logging(cfg.app.log_level)

    service = TrendService(cfg)
    logging.getLogger("main").info(
        "%s starting host=%s port=%d engine=%s",
        cfg.app.name,
        cfg.server.host,
        cfg.server.port,
        service.engine.signature(),
    )

    try:
        web.run_app(create_app(service), host=cfg.server.host, port=cfg.server.port, print=None)
        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        logging.getLogger("main").exception("fatal err=%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
