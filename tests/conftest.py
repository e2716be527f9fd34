from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import pytest

from lp_quote.config import QuoteSettings
from lp_quote.coordinator import RecomputeCoordinator
from lp_quote.core import FocusSide, PoolInfo, QuotePair, ReserveSnapshot
from lp_quote.engine import QuoteEngine


# -----------------------------
# Test helpers (collaborator fakes)
# -----------------------------


def make_snapshot(
    base_reserve: int = 1_000_000_000,
    quote_reserve: int = 2_000_000_000_000,
    lp_supply: int = 1_000_000_000,
    *,
    base_decimals: int = 6,
    quote_decimals: int = 9,
    lp_decimals: int = 6,
    as_of: int = 1,
) -> ReserveSnapshot:
    """Default pool: 1000 BASE (6dp) vs 2000 QUOTE (9dp), 1000 LP (6dp)."""
    return ReserveSnapshot(
        base_reserve=base_reserve,
        quote_reserve=quote_reserve,
        lp_supply=lp_supply,
        base_decimals=base_decimals,
        quote_decimals=quote_decimals,
        lp_decimals=lp_decimals,
        as_of=as_of,
    )


class FakeSnapshotSource:
    """Async reserve source: returns queued snapshots, or raises when asked to.

    With `gated=True` every fetch waits until `release()` is called.
    """

    def __init__(self, *snapshots: ReserveSnapshot, gated: bool = False) -> None:
        self.snapshots: List[ReserveSnapshot] = list(snapshots)
        self.calls: List[str] = []
        self.fail_next = False
        self.gated = gated
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def __call__(self, pool_id: str) -> ReserveSnapshot:
        self.calls.append(pool_id)
        if self.gated:
            await self._gate.wait()
        if self.fail_next:
            self.fail_next = False
            raise ConnectionError("rpc unavailable")
        if len(self.snapshots) > 1:
            return self.snapshots.pop(0)
        return self.snapshots[0]


class FakeBalances:
    def __init__(self, balances: Optional[Dict[str, Optional[Decimal]]] = None) -> None:
        self.balances = balances or {}

    def __call__(self, token_id: str) -> Optional[Decimal]:
        return self.balances.get(token_id)


class GatedRunner:
    """Quote runner whose every call blocks until released by index.

    Lets tests complete computations in any order relative to issuance.
    """

    def __init__(self, engine: Optional[QuoteEngine] = None) -> None:
        self.engine = engine or QuoteEngine(Decimal("0.01"))
        self.calls: List[Tuple[ReserveSnapshot, FocusSide, str]] = []
        self.gates: List[asyncio.Event] = []

    async def __call__(self, snapshot: ReserveSnapshot, side: FocusSide, raw: str) -> QuotePair:
        gate = asyncio.Event()
        self.calls.append((snapshot, side, raw))
        self.gates.append(gate)
        await gate.wait()
        return self.engine.quote(snapshot, side, raw)

    def release(self, index: int) -> None:
        self.gates[index].set()


async def drain(coord: RecomputeCoordinator) -> None:
    """Let scheduled tasks start, then wait for all in-flight work."""
    await asyncio.sleep(0)
    await coord.settle()


# -----------------------------
# Pytest fixtures
# -----------------------------

@pytest.fixture()
def quote_settings() -> QuoteSettings:
    return QuoteSettings(
        refresh_interval_seconds=0.2,
        throttle_seconds=0.2,
        slippage=Decimal("0.01"),
        rate_min_places=6,
    )


@pytest.fixture()
def pool() -> PoolInfo:
    return PoolInfo(pool_id="pool-base-quote", base_token="BASE", quote_token="QUOTE", lp_price=Decimal("2"))


@pytest.fixture()
def snapshot() -> ReserveSnapshot:
    return make_snapshot()


@pytest.fixture()
def source(snapshot: ReserveSnapshot) -> FakeSnapshotSource:
    return FakeSnapshotSource(snapshot)


@pytest.fixture()
def balances() -> FakeBalances:
    return FakeBalances({"BASE": Decimal("100"), "QUOTE": Decimal("500")})


@pytest.fixture()
def make_coordinator(source, balances, pool, quote_settings):
    """Factory so tests can swap the runner or collaborators per case."""

    def _make(**overrides) -> RecomputeCoordinator:
        kwargs = dict(pool=pool, settings=quote_settings)
        kwargs.update(overrides)
        return RecomputeCoordinator(
            kwargs.pop("fetch_snapshot", source),
            kwargs.pop("get_held_balance", balances),
            **kwargs,
        )

    return _make
