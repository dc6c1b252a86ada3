from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import os
import yaml

from .models import ConfigurationError
from .engine import validate_engine_params


def _env_override(value: Any, env_key: str, *, strict: bool = False) -> Any:
    env_val = os.getenv(env_key)
    if env_val is None:
        return value
    # basic parsing
    if isinstance(value, bool):
        return env_val.strip().lower() in ("1", "true", "yes", "y", "on")
    if isinstance(value, int):
        try:
            return int(env_val)
        except ValueError:
            if strict:
                raise ConfigurationError(f"{env_key} must be an integer, got {env_val!r}") from None
            return value
    if isinstance(value, float):
        try:
            return float(env_val)
        except ValueError:
            if strict:
                raise ConfigurationError(f"{env_key} must be a number, got {env_val!r}") from None
            return value
    return env_val


@dataclass
class EngineConfig:
    strategy: str = "pivot"  # pivot | regression
    window: int = 5
    epsilon: float = 1e-6
    touch_epsilon: Optional[float] = None  # None -> 10 * epsilon

    def signature(self) -> Dict[str, object]:
        return {
            "strategy": self.strategy,
            "window": self.window,
            "epsilon": self.epsilon,
            "touch_epsilon": self.touch_epsilon,
        }

    def validate(self) -> None:
        validate_engine_params(self.strategy, self.window, self.epsilon, self.touch_epsilon)


@dataclass
class ProviderConfig:
    type: str = "binance"
    market: str = "spot"  # spot|futures
    quote_asset: str = "USDT"
    default_interval: str = "1h"
    default_limit: int = 150
    max_limit: int = 500
    rest_timeout_s: int = 20
    rest_max_retries: int = 4
    rest_backoff_s: float = 0.8


@dataclass
class SymbolsConfig:
    cache_ttl_s: float = 900.0  # 15 minutes
    max_results: int = 30


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3000


@dataclass
class AppConfig:
    name: str = "Trendline Overlay"
    log_level: str = "INFO"


@dataclass
class Config:
    app: AppConfig
    engine: EngineConfig
    provider: ProviderConfig
    symbols: SymbolsConfig
    server: ServerConfig


def default_config() -> Config:
    return Config(
        app=AppConfig(),
        engine=EngineConfig(),
        provider=ProviderConfig(),
        symbols=SymbolsConfig(),
        server=ServerConfig(),
    )


def load_config(path: Optional[str] = None) -> Config:
    raw: Dict[str, Any] = {}
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    try:
        cfg = Config(
            app=AppConfig(**(raw.get("app") or {})),
            engine=EngineConfig(**(raw.get("engine") or {})),
            provider=ProviderConfig(**(raw.get("provider") or {})),
            symbols=SymbolsConfig(**(raw.get("symbols") or {})),
            server=ServerConfig(**(raw.get("server") or {})),
        )
    except TypeError as e:
        # unknown keys in a section
        raise ConfigurationError(f"Invalid config {path}: {e}") from e

    # env overrides (useful on servers)
    cfg.app.log_level = _env_override(cfg.app.log_level, "LOG_LEVEL")
    cfg.server.port = _env_override(cfg.server.port, "PORT", strict=True)
    cfg.engine.strategy = _env_override(cfg.engine.strategy, "TREND_STRATEGY")
    cfg.engine.window = _env_override(cfg.engine.window, "TREND_WINDOW", strict=True)

    cfg.engine.validate()
    if not isinstance(cfg.provider.rest_max_retries, int) or cfg.provider.rest_max_retries < 1:
        raise ConfigurationError(f"provider.rest_max_retries must be an integer >= 1, got {cfg.provider.rest_max_retries!r}")
    return cfg
