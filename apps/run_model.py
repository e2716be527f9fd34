#!/usr/bin/env python3
"""Launcher for the quoting scripts, by alias.

    python apps/run_model.py quote --input apps/model/inputs/sol_usdc.json
    python apps/run_model.py demo --only S2
"""

from __future__ import annotations

import argparse
import runpy
import sys
from pathlib import Path


SCRIPT_MAP = {
    "quote": "apps/model/run_quote_from_input.py",
    "demo": "scripts/demo.py",
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a quoting script by alias.")
    parser.add_argument("alias", choices=sorted(SCRIPT_MAP.keys()), help="Script alias")
    parser.add_argument("script_args", nargs=argparse.REMAINDER, help="Arguments forwarded to the script")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    root = Path(__file__).resolve().parents[1]
    target = root / SCRIPT_MAP[args.alias]
    if not target.is_file():
        print(f"missing script for alias {args.alias!r}: {target}", file=sys.stderr)
        return 2
    sys.argv = [str(target), *args.script_args]
    runpy.run_path(str(target), run_name="__main__")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
