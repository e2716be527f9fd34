#!/usr/bin/env python3
"""
Quote a proportional deposit from a JSON input file, using lp_quote APIs.

Input shape:
  {
    "pool":     {"pool_id": "...", "base_token": "SOL", "quote_token": "USDC", "lp_price": "24.5"},
    "reserves": {"base": "20000000000000", "quote": "3000000000000", "lp_supply": "...",
                 "base_decimals": 9, "quote_decimals": 6, "lp_decimals": 9, "as_of": 1},
    "deposit":  {"side": "base", "amount": "1.5"},
    "balances": {"SOL": "2", "USDC": "200"}          (optional)
  }

Printing policy:
1) Pool reserves + displayed rate (both directions).
2) Quoted counterpart, slippage maximum, LP shares and their value.
3) Validation verdict and the deposit request that would be submitted.
"""

import argparse
import asyncio
import json
from decimal import Decimal

from lp_quote import (
    FocusSide,
    PoolInfo,
    QuoteSettings,
    RecomputeCoordinator,
    ReserveSnapshot,
)
from lp_quote.core.fmt import fmt_plain
from lp_quote.logging_config import setup_logging


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--input", required=True, help="Path to quote input JSON")
    p.add_argument("--slippage", default=None, help="Override slippage tolerance (e.g. 0.005)")
    p.add_argument("--log-level", default="WARNING")
    return p.parse_args()


def load_snapshot(res: dict) -> ReserveSnapshot:
    return ReserveSnapshot(
        base_reserve=int(res["base"]),
        quote_reserve=int(res["quote"]),
        lp_supply=int(res["lp_supply"]),
        base_decimals=int(res["base_decimals"]),
        quote_decimals=int(res["quote_decimals"]),
        lp_decimals=int(res["lp_decimals"]),
        as_of=int(res.get("as_of", 0)),
    )


def load_pool(p: dict) -> PoolInfo:
    lp_price = p.get("lp_price")
    return PoolInfo(
        pool_id=p["pool_id"],
        base_token=p["base_token"],
        quote_token=p["quote_token"],
        lp_price=Decimal(lp_price) if lp_price is not None else None,
    )


async def run(inp: dict, settings: QuoteSettings) -> None:
    pool = load_pool(inp["pool"])
    snapshot = load_snapshot(inp["reserves"])
    balances = inp.get("balances", {})
    side = FocusSide(inp["deposit"]["side"])
    amount = str(inp["deposit"]["amount"])

    async def fetch(pool_id: str) -> ReserveSnapshot:
        return snapshot

    coord = RecomputeCoordinator(fetch, balances.get, pool=pool, settings=settings)
    try:
        await coord.refresh()
        coord.on_amount_edited(side, amount)
        await asyncio.sleep(0)
        await coord.settle()
        view = coord.current_quote()

        # 1) Pool
        print("=== Pool ===")
        print(f"{pool.base_token} reserve : {snapshot.base_reserve} (dp={snapshot.base_decimals})")
        print(f"{pool.quote_token} reserve: {snapshot.quote_reserve} (dp={snapshot.quote_decimals})")
        print(f"LP supply      : {snapshot.lp_supply} (dp={snapshot.lp_decimals})")
        print(f"1 {pool.base_token} = {view.rate} {pool.quote_token}")
        print(f"1 {pool.quote_token} = {view.reverse_rate} {pool.base_token}")

        # 2) Quote
        print("\n=== Quote ===")
        print(f"{pool.base_token} amount : {view.base_amount}")
        print(f"{pool.quote_token} amount: {view.quote_amount}")
        print(f"LP shares      : {fmt_plain(view.minted_shares_estimate)}")
        value = view.deposit_value
        print(f"Deposit value  : {fmt_plain(value) if value is not None else 'n/a'}")

        # 3) Verdict / submission
        print("\n=== Submission ===")
        print(f"Verdict        : {view.verdict}")
        print(f"Request        : {coord.build_deposit()}")
    finally:
        await coord.aclose()


def main():
    args = parse_args()
    setup_logging(args.log_level)

    with open(args.input, "r", encoding="utf-8") as f:
        inp = json.load(f)

    overrides = {"refresh_interval_seconds": 3600}
    if args.slippage is not None:
        overrides["slippage"] = Decimal(args.slippage)
    asyncio.run(run(inp, QuoteSettings(**overrides)))


if __name__ == "__main__":
    main()
