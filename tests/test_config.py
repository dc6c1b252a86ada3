import pytest

from trendline_overlay.config import load_config
from trendline_overlay.engine import TrendLineEngine
from trendline_overlay.models import ConfigurationError


def _write(tmp_path, text: str) -> str:
    p = tmp_path / "config.yaml"
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_defaults_without_file(monkeypatch):
    for key in ("PORT", "TREND_STRATEGY", "TREND_WINDOW", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    cfg = load_config(None)
    assert cfg.engine.strategy == "pivot"
    assert cfg.engine.window == 5
    assert cfg.engine.epsilon == 1e-6
    assert cfg.engine.touch_epsilon is None
    assert cfg.provider.default_interval == "1h"
    assert cfg.provider.default_limit == 150
    assert cfg.provider.max_limit == 500
    assert cfg.symbols.cache_ttl_s == 900.0
    assert cfg.server.port == 3000


def test_yaml_sections(tmp_path, monkeypatch):
    for key in ("PORT", "TREND_STRATEGY", "TREND_WINDOW", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    path = _write(
        tmp_path,
        """
app:
  log_level: DEBUG
engine:
  strategy: regression
  window: 3
  epsilon: 0.0001
  touch_epsilon: 0.002
provider:
  market: futures
symbols:
  cache_ttl_s: 60
server:
  port: 8080
""",
    )
    cfg = load_config(path)
    assert cfg.app.log_level == "DEBUG"
    assert cfg.engine.strategy == "regression"
    assert cfg.engine.window == 3
    assert cfg.provider.market == "futures"
    assert cfg.symbols.cache_ttl_s == 60
    assert cfg.server.port == 8080

    eng = TrendLineEngine.from_config(cfg.engine)
    assert eng.signature() == {"strategy": "regression", "window": 3, "epsilon": 0.0001, "touch_epsilon": 0.002}


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("TREND_WINDOW", "7")
    monkeypatch.setenv("TREND_STRATEGY", "regression")
    cfg = load_config(None)
    assert cfg.server.port == 9000
    assert cfg.engine.window == 7
    assert cfg.engine.strategy == "regression"


def test_bad_env_window_fails_fast(monkeypatch):
    monkeypatch.setenv("TREND_WINDOW", "five")
    with pytest.raises(ConfigurationError):
        load_config(None)


@pytest.mark.parametrize(
    "engine_yaml",
    [
        "engine:\n  window: -2\n",
        "engine:\n  window: abc\n",
        "engine:\n  epsilon: -0.1\n",
        "engine:\n  strategy: best\n",
        "engine:\n  lookback: 5\n",
    ],
)
def test_invalid_engine_section(tmp_path, monkeypatch, engine_yaml):
    for key in ("TREND_STRATEGY", "TREND_WINDOW"):
        monkeypatch.delenv(key, raising=False)
    with pytest.raises(ConfigurationError):
        load_config(_write(tmp_path, engine_yaml))


@pytest.mark.parametrize("retries", ["0", "-1", "two"])
def test_provider_needs_at_least_one_attempt(tmp_path, monkeypatch, retries):
    for key in ("TREND_STRATEGY", "TREND_WINDOW"):
        monkeypatch.delenv(key, raising=False)
    with pytest.raises(ConfigurationError):
        load_config(_write(tmp_path, f"provider:\n  rest_max_retries: {retries}\n"))
