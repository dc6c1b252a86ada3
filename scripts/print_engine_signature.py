from __future__ import annotations

import argparse
import pprint

from trendline_overlay.config import load_config
from trendline_overlay.engine import TrendLineEngine


def main():
    p = argparse.ArgumentParser(description="Print effective trend engine parameters for a config")
    p.add_argument("--config", default=None, help="Path to YAML config")
    args = p.parse_args()

    cfg = load_config(args.config)

    print("CONFIGURED:")
    pprint.pprint(cfg.engine.signature())
    print("\nEFFECTIVE:")
    pprint.pprint(TrendLineEngine.from_config(cfg.engine).signature())


if __name__ == "__main__":
    main()
