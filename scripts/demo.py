"""Walkthrough demo: proportional deposit quoting with latest-generation-wins recompute.

Scenarios covered:
S1) Proportional quote on both sides (rate, shares, slippage maximum)
S2) Out-of-order completions: the older computation is discarded
S3) Reserve refresh: a newer snapshot requotes the held input
S4) Degenerate pool: no counterpart, no rate
S5) Validation: empty amount / insufficient balance / ok
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from decimal import Decimal
from typing import Awaitable, Callable, List, Optional

from lp_quote import (
    FocusSide,
    PoolInfo,
    QuoteEngine,
    QuoteSettings,
    RecomputeCoordinator,
    ReserveSnapshot,
    display_rate,
)
from lp_quote.logging_config import setup_logging

# ---------- pretty printers ----------

def brief_pool(snap: Optional[ReserveSnapshot], pool: PoolInfo) -> str:
    if snap is None:
        return f"{pool.pool_id}: (no snapshot)"
    return (
        f"{pool.pool_id}@{snap.as_of}: {pool.base_token}={snap.base_reserve} (dp={snap.base_decimals}), "
        f"{pool.quote_token}={snap.quote_reserve} (dp={snap.quote_decimals}), LP={snap.lp_supply}"
    )


def print_view(title: str, coord: RecomputeCoordinator) -> None:
    view = coord.current_quote()
    print(f"\n=== {title} ===")
    print(f"- Pool: {brief_pool(coord.snapshot, coord.pool)}")
    print(f"- Amounts: base={view.base_amount!r} quote={view.quote_amount!r} (driving={coord.focus.value})")
    print(f"- Shares: {view.minted_shares_estimate}  value={view.deposit_value}")
    print(f"- Rate: {view.rate}  reverse={view.reverse_rate}")
    print(f"- State: {view.state}  gen={view.generation}  verdict={type(view.verdict).__name__}")


# ---------- build common fixtures ----------

def mk_snapshot(base: str, quote: str, lp: str, as_of: int, dp=(9, 6, 9)) -> ReserveSnapshot:
    """Reserves given in display units, stored as integer smallest units."""
    bd, qd, ld = dp
    return ReserveSnapshot(
        base_reserve=int(Decimal(base).scaleb(bd)),
        quote_reserve=int(Decimal(quote).scaleb(qd)),
        lp_supply=int(Decimal(lp).scaleb(ld)),
        base_decimals=bd,
        quote_decimals=qd,
        lp_decimals=ld,
        as_of=as_of,
    )


POOL = PoolInfo(pool_id="sol-usdc", base_token="SOL", quote_token="USDC", lp_price=Decimal("24.5"))
DEMO_SETTINGS = QuoteSettings(refresh_interval_seconds=60, throttle_seconds=0.1)


class StaticSource:
    """Serves queued snapshots in order; the last one sticks."""

    def __init__(self, *snaps: ReserveSnapshot):
        self.snaps = list(snaps)

    async def __call__(self, pool_id: str) -> ReserveSnapshot:
        return self.snaps.pop(0) if len(self.snaps) > 1 else self.snaps[0]


def wallet(balances):
    return lambda token: balances.get(token)


async def _settle(coord: RecomputeCoordinator) -> None:
    await asyncio.sleep(0)
    await coord.settle()


# ---------- scenarios ----------

async def s1_proportional() -> None:
    snap = mk_snapshot("20000", "3000000", "245000", as_of=1)
    coord = RecomputeCoordinator(StaticSource(snap), wallet({}), pool=POOL, settings=DEMO_SETTINGS)
    await coord.refresh()
    coord.on_amount_edited(FocusSide.BASE, "1.5")
    await _settle(coord)
    print_view("S1a) Type 1.5 SOL", coord)
    print(f"- Submitted max for USDC side: {coord.build_deposit()}")
    coord.on_amount_edited(FocusSide.QUOTE, "100")
    await _settle(coord)
    print_view("S1b) Type 100 USDC", coord)
    await coord.aclose()


async def s2_stale_discard() -> None:
    snap = mk_snapshot("20000", "3000000", "245000", as_of=1)
    engine = QuoteEngine(DEMO_SETTINGS.slippage)
    gates: List[asyncio.Event] = []

    async def slow_runner(snapshot, side, raw):
        gate = asyncio.Event()
        gates.append(gate)
        await gate.wait()
        return engine.quote(snapshot, side, raw)

    coord = RecomputeCoordinator(
        StaticSource(snap), wallet({}), pool=POOL, settings=DEMO_SETTINGS, quote_runner=slow_runner,
    )
    await coord.refresh()
    coord.on_amount_edited(FocusSide.BASE, "1")
    coord.on_amount_edited(FocusSide.BASE, "12")
    await asyncio.sleep(0)
    # Finish the newer computation first, then the older one.
    gates[1].set()
    await asyncio.sleep(0)
    gates[0].set()
    await _settle(coord)
    print_view("S2) Typed '1' then '12'; completions arrive out of order", coord)
    await coord.aclose()


async def s3_refresh() -> None:
    first = mk_snapshot("20000", "3000000", "245000", as_of=1)
    moved = mk_snapshot("20000", "3200000", "245000", as_of=2)
    coord = RecomputeCoordinator(StaticSource(first, moved), wallet({}), pool=POOL, settings=DEMO_SETTINGS)
    await coord.refresh()
    coord.on_amount_edited(FocusSide.BASE, "2")
    await _settle(coord)
    print_view("S3a) Quote on snapshot as_of=1", coord)
    await coord.refresh()
    await _settle(coord)
    print_view("S3b) After refresh to as_of=2 (price moved to 160)", coord)
    await coord.aclose()


async def s4_degenerate() -> None:
    empty = ReserveSnapshot(0, 0, 0, 9, 6, 9, as_of=1)
    coord = RecomputeCoordinator(StaticSource(empty), wallet({}), pool=POOL, settings=DEMO_SETTINGS)
    await coord.refresh()
    coord.on_amount_edited(FocusSide.BASE, "1")
    await _settle(coord)
    print_view("S4) Empty pool", coord)
    print(f"- display_rate: {display_rate(empty)}")
    await coord.aclose()


async def s5_validation() -> None:
    snap = mk_snapshot("20000", "3000000", "245000", as_of=1)
    coord = RecomputeCoordinator(
        StaticSource(snap), wallet({"SOL": Decimal("2"), "USDC": Decimal("200")}), pool=POOL, settings=DEMO_SETTINGS,
    )
    await coord.refresh()
    print_view("S5a) Nothing typed", coord)
    coord.on_amount_edited(FocusSide.BASE, "1.5")
    await _settle(coord)
    print_view("S5b) 1.5 SOL needs 225 USDC, wallet holds 200", coord)
    coord.on_amount_edited(FocusSide.BASE, "1")
    await _settle(coord)
    print_view("S5c) 1 SOL needs 150 USDC", coord)
    await coord.aclose()


#
# -------- scenario registry helpers --------
class Scenario:
    def __init__(self, sid: str, fn: Callable[[], Awaitable[None]]):
        self.sid = sid
        self.fn = fn

scenarios: List[Scenario] = [
    Scenario("S1", s1_proportional),
    Scenario("S2", s2_stale_discard),
    Scenario("S3", s3_refresh),
    Scenario("S4", s4_degenerate),
    Scenario("S5", s5_validation),
]

# ---------- run scenarios ----------
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="LP deposit quoting demo")
    parser.add_argument("--only", type=str, default=None, help="Comma-separated scenario ids to run (e.g., S1,S3)")
    parser.add_argument("--skip", type=str, default=None, help="Comma-separated scenario ids to skip")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Log level for library logs")
    args = parser.parse_args(sys.argv[1:])

    setup_logging(args.log_level)

    only_set = None
    skip_set = None
    if args.only:
        only_set = set([s.strip() for s in args.only.split(',') if s.strip()])
    if args.skip:
        skip_set = set([s.strip() for s in args.skip.split(',') if s.strip()])

    for sc in scenarios:
        if only_set is not None and sc.sid not in only_set:
            continue
        if skip_set is not None and sc.sid in skip_set:
            continue
        asyncio.run(sc.fn())
