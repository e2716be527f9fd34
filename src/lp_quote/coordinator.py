"""
Recompute coordinator: the reactive core of deposit quoting.

Every trigger (user edit, reserve refresh, pool identity change, timer tick)
may start a new asynchronous quote. Results come back in any order; only the
result tagged with the latest generation *and* the snapshot still held is
ever written to the visible amounts. Superseded computations are not
cancelled, their results are dropped at apply time.

All entry points are synchronous and run to completion on the event loop:
generation bookkeeping and apply/discard never interleave, which is what
makes the staleness check race-free. Only snapshot fetches and quote
computations suspend.

Typical wiring::

    coord = RecomputeCoordinator(fetch_snapshot, get_held_balance, pool=pool)
    coord.start()
    coord.on_amount_edited(FocusSide.BASE, "1.5")
    ...
    view = coord.current_quote()
    await coord.aclose()
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from enum import Enum
from functools import partial
from typing import Awaitable, Callable, Coroutine, Dict, Optional, Set

from .config import QuoteSettings, settings as default_settings
from .core.amounts import parse_amount
from .core.datatypes import (
    DepositInput,
    FocusSide,
    Ok,
    PairAmounts,
    PoolInfo,
    QuotePair,
    QuoteResult,
    QuoteView,
    ReserveSnapshot,
    ValidationVerdict,
)
from .deposit import ConfirmedHook, DepositCallbacks, DepositRequest, SubmitDeposit
from .engine import QuoteEngine, display_rate, estimate_deposit_value
from .focus import FocusTracker
from .timer import RefreshTimer, Throttle
from .validator import BalanceValidator

logger = logging.getLogger(__name__)


SnapshotFetcher = Callable[[str], Awaitable[ReserveSnapshot]]
BalanceLookup = Callable[[str], Optional[Decimal]]
QuoteRunner = Callable[[ReserveSnapshot, FocusSide, str], Awaitable[QuotePair]]


class CoordinatorState(str, Enum):
    IDLE = "idle"
    COMPUTING = "computing"
    APPLIED = "applied"


class RecomputeCoordinator:
    """
    Owns the current input, the latest applied quote and the latest snapshot.

    Collaborators:
    - fetch_snapshot(pool_id): async reserve lookup (transport lives outside).
    - get_held_balance(token_id): sync wallet balance; None means unknown.
    - quote_runner(snapshot, side, raw): async quote; defaults to QuoteEngine.
    """

    def __init__(
        self,
        fetch_snapshot: SnapshotFetcher,
        get_held_balance: BalanceLookup,
        *,
        pool: Optional[PoolInfo] = None,
        quote_runner: Optional[QuoteRunner] = None,
        engine: Optional[QuoteEngine] = None,
        validator: Optional[BalanceValidator] = None,
        focus: Optional[FocusTracker] = None,
        settings: Optional[QuoteSettings] = None,
        on_confirmed: ConfirmedHook = None,
    ) -> None:
        self._settings = settings or default_settings
        self._engine = engine or QuoteEngine(self._settings.slippage)
        self._validator = validator or BalanceValidator()
        self._focus = focus or FocusTracker()
        self._fetch_snapshot = fetch_snapshot
        self._get_held_balance = get_held_balance
        self._quote_runner = quote_runner or self._run_engine
        self._on_confirmed = on_confirmed

        self._pool = pool
        self._pool_epoch = 0
        self._pool_not_found = False
        self._snapshot: Optional[ReserveSnapshot] = None

        self._generation = 0
        self._state = CoordinatorState.IDLE
        # Displayed amounts vs. amounts handed to deposit submission (derived
        # side carries the slippage-adjusted maximum there).
        self._amounts = PairAmounts()
        self._submit_amounts = PairAmounts()
        self._minted = Decimal(0)
        self._last_result: Optional[QuoteResult] = None

        self._is_sending = False
        self._closed = False
        self._tasks: Set[asyncio.Task] = set()
        self._timer = RefreshTimer(self._settings.refresh_interval_seconds, self.on_timer_tick)
        self._throttle = Throttle(self._start_refresh, self._settings.throttle_seconds)

    # ---------------------------
    # Read-only accessors
    # ---------------------------
    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def snapshot(self) -> Optional[ReserveSnapshot]:
        return self._snapshot

    @property
    def pool(self) -> Optional[PoolInfo]:
        return self._pool

    @property
    def focus(self) -> FocusSide:
        return self._focus.current()

    @property
    def amounts(self) -> PairAmounts:
        return self._amounts

    @property
    def last_result(self) -> Optional[QuoteResult]:
        return self._last_result

    @property
    def timer(self) -> RefreshTimer:
        return self._timer

    # ---------------------------
    # Lifecycle
    # ---------------------------
    def start(self) -> None:
        """Arm the refresh timer and fetch a first snapshot if a pool is bound."""
        if self._closed:
            return
        self._timer.restart()
        if self._snapshot is None:
            self._start_refresh()

    async def aclose(self) -> None:
        """Tear down: stop timing, drop every pending generation and in-flight task."""
        if self._closed:
            return
        self._closed = True
        self._timer.stop()
        self._throttle.cancel()
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

    async def settle(self) -> None:
        """Wait until no fetch or quote task is in flight (including chained ones)."""
        while True:
            pending = [t for t in self._tasks if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ---------------------------
    # Event entry points
    # ---------------------------
    def on_amount_edited(self, side: FocusSide, raw_amount: str) -> None:
        """Echo the keystroke immediately, make `side` the driving side, requote."""
        if self._closed:
            return
        raw_amount = raw_amount or ""
        self._amounts = self._amounts.with_side(side, raw_amount)
        self._submit_amounts = self._submit_amounts.with_side(side, raw_amount)
        self._focus.on_focus(side)
        self._recompute()

    def on_focus_changed(self, side: FocusSide) -> None:
        if self._closed:
            return
        self._focus.on_focus(side)

    def on_snapshot(self, snapshot: ReserveSnapshot) -> bool:
        """Adopt a snapshot and requote. Returns False if it is older than the one held."""
        if self._closed:
            return False
        current = self._snapshot
        if current is not None and snapshot.as_of < current.as_of:
            logger.debug("Ignoring stale snapshot as_of=%d (holding %d)", snapshot.as_of, current.as_of)
            return False
        if current is None or snapshot.as_of > current.as_of:
            self._snapshot = snapshot
        self._recompute()
        return True

    def on_pool_changed(self, pool: Optional[PoolInfo]) -> None:
        """Rebind to another pool: forget everything and fetch its reserves."""
        if self._closed:
            return
        self._reset()
        self._pool = pool
        self._pool_not_found = False
        logger.info("Pool changed to %s", pool.pool_id if pool else None)
        self._start_refresh()

    def on_pool_not_found(self) -> None:
        if self._closed:
            return
        self._reset()
        self._pool_not_found = True
        logger.info("Pool not found; quoting suspended")

    def on_timer_tick(self) -> None:
        if self._closed:
            return
        self._throttle()

    def on_manual_refresh(self) -> None:
        """User-initiated refresh: restart the timer phase, then refresh (throttled)."""
        if self._closed:
            return
        self._timer.restart()
        self._throttle()

    # ---------------------------
    # Refresh
    # ---------------------------
    async def refresh(self) -> bool:
        """Fetch reserves for the bound pool and adopt them.

        A failed fetch keeps the last known-good snapshot. A fetch that
        completes after the pool identity changed is dropped.
        """
        pool, epoch = self._pool, self._pool_epoch
        if pool is None or self._pool_not_found:
            return False
        try:
            snapshot = await self._fetch_snapshot(pool.pool_id)
        except Exception as exc:
            logger.warning("Reserve refresh failed for pool %s: %s", pool.pool_id, exc, exc_info=True)
            return False
        if self._closed or epoch != self._pool_epoch:
            logger.debug("Dropping snapshot for pool %s: identity changed during fetch", pool.pool_id)
            return False
        return self.on_snapshot(snapshot)

    def _start_refresh(self) -> None:
        if self._closed or self._pool is None or self._pool_not_found:
            return
        self._spawn(self.refresh())

    # ---------------------------
    # Quote dispatch and apply
    # ---------------------------
    def _recompute(self) -> None:
        # The generation is bumped before anything is dispatched, so every
        # computation already in flight is stale from this point on.
        self._generation += 1
        side = self._focus.current()
        raw = self._amounts.get(side)

        if self._pool_not_found:
            self._set_derived(side.other, "", "", Decimal(0))
            self._state = CoordinatorState.IDLE
            return
        if self._snapshot is None:
            self._state = CoordinatorState.IDLE
            return
        if not raw.strip():
            self._set_derived(side.other, "", "", Decimal(0))
            self._last_result = None
            self._state = CoordinatorState.APPLIED
            return

        inp = DepositInput(side=side, raw_amount=raw, generation=self._generation)
        self._state = CoordinatorState.COMPUTING
        self._spawn(self._compute(inp, self._snapshot))

    async def _compute(self, inp: DepositInput, snapshot: ReserveSnapshot) -> None:
        try:
            pair = await self._quote_runner(snapshot, inp.side, inp.raw_amount)
        except Exception:
            logger.exception("Quote computation failed for generation %d", inp.generation)
            if inp.generation == self._generation:
                # The previous result belongs to another input; do not leave it beside this one.
                self._set_derived(inp.side.other, "", "", Decimal(0))
                self._last_result = None
                self._state = CoordinatorState.IDLE
            return
        self._apply(QuoteResult.from_pair(pair, inp, snapshot))

    def _apply(self, result: QuoteResult) -> bool:
        """Write `result` to visible state if it is still current. Returns whether it was applied."""
        if result.for_generation != self._generation:
            logger.debug(
                "Discarding stale quote for generation %d (current %d)",
                result.for_generation, self._generation,
            )
            return False
        if self._snapshot is None or result.for_snapshot_as_of != self._snapshot.as_of:
            logger.debug("Discarding quote computed on superseded snapshot as_of=%d", result.for_snapshot_as_of)
            return False
        self._set_derived(result.side.other, result.derived_amount, result.max_derived_amount, result.minted_shares)
        self._last_result = result
        self._state = CoordinatorState.APPLIED
        return True

    async def _run_engine(self, snapshot: ReserveSnapshot, side: FocusSide, raw: str) -> QuotePair:
        return self._engine.quote(snapshot, side, raw)

    def _set_derived(self, side: FocusSide, display: str, submit: str, minted: Decimal) -> None:
        self._amounts = self._amounts.with_side(side, display)
        self._submit_amounts = self._submit_amounts.with_side(side, submit)
        self._minted = minted

    def _reset(self) -> None:
        self._generation += 1
        self._pool_epoch += 1
        self._amounts = PairAmounts()
        self._submit_amounts = PairAmounts()
        self._minted = Decimal(0)
        self._snapshot = None
        self._last_result = None
        self._state = CoordinatorState.IDLE

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ---------------------------
    # Read model
    # ---------------------------
    def _balances(self) -> Dict[FocusSide, Optional[Decimal]]:
        balances: Dict[FocusSide, Optional[Decimal]] = {FocusSide.BASE: None, FocusSide.QUOTE: None}
        if self._pool is None:
            return balances
        for side in balances:
            token = self._pool.token(side)
            try:
                balances[side] = parse_amount(self._get_held_balance(token))
            except Exception as exc:
                logger.warning("Balance lookup failed for %s: %s", token, exc)
        return balances

    def verdict(self) -> ValidationVerdict:
        return self._validator.validate(self._amounts, self._balances())

    def current_quote(self) -> QuoteView:
        min_places = self._settings.rate_min_places
        return QuoteView(
            base_amount=self._amounts.base,
            quote_amount=self._amounts.quote,
            minted_shares_estimate=self._minted,
            verdict=self.verdict(),
            state=self._state.value,
            generation=self._generation,
            rate=display_rate(self._snapshot, min_places=min_places),
            reverse_rate=display_rate(self._snapshot, reverse=True, min_places=min_places),
            deposit_value=estimate_deposit_value(self._minted, self._pool.lp_price if self._pool else None),
            pool_not_found=self._pool_not_found,
            is_sending=self._is_sending,
        )

    # ---------------------------
    # Deposit hand-off
    # ---------------------------
    def build_deposit(self) -> Optional[DepositRequest]:
        """Final amounts and fixed side for submission, or None if not submittable.

        Only a result applied for the current generation is submittable: while
        a quote is computing (or after it failed) the derived side does not
        belong to the typed amount.
        """
        if self._pool is None or self._pool_not_found or self._is_sending:
            return None
        result = self._last_result
        if self._state is not CoordinatorState.APPLIED or result is None:
            return None
        if result.for_generation != self._generation:
            return None
        if not isinstance(self.verdict(), Ok):
            return None
        return DepositRequest(
            pool_id=self._pool.pool_id,
            base_amount=self._submit_amounts.base,
            quote_amount=self._submit_amounts.quote,
            fixed_side=result.side,
        )

    async def submit(self, submit_deposit: SubmitDeposit) -> Optional[DepositRequest]:
        request = self.build_deposit()
        if request is None:
            return None
        self._is_sending = True
        callbacks = DepositCallbacks(
            on_sent=self._on_deposit_sent,
            on_confirmed=partial(self._on_deposit_confirmed, request),
            on_finally=self._on_deposit_finally,
        )
        try:
            await submit_deposit(request, callbacks)
        except Exception:
            logger.exception("Deposit submission failed for pool %s", request.pool_id)
            self._is_sending = False
        return request

    def _on_deposit_sent(self) -> None:
        self._generation += 1
        self._amounts = PairAmounts()
        self._submit_amounts = PairAmounts()
        self._minted = Decimal(0)
        self._last_result = None
        self._state = CoordinatorState.IDLE

    def _on_deposit_confirmed(self, request: DepositRequest) -> None:
        logger.info("Deposit confirmed for pool %s", request.pool_id)
        if self._on_confirmed is not None:
            self._on_confirmed(request)

    def _on_deposit_finally(self) -> None:
        self._is_sending = False


__all__ = [
    "RecomputeCoordinator",
    "CoordinatorState",
    "SnapshotFetcher",
    "BalanceLookup",
    "QuoteRunner",
]
