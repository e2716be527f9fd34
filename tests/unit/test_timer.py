import asyncio

import pytest

from lp_quote.timer import RefreshTimer, Throttle


# -----------------------------
# RefreshTimer
# -----------------------------

@pytest.mark.asyncio
async def test_timer_fires_periodically_until_stopped():
    fired = []
    timer = RefreshTimer(0.05, lambda: fired.append(1))
    timer.restart()
    await asyncio.sleep(0.28)
    print(f"[timer] fires in 0.28s at 0.05s period: {len(fired)}")
    assert len(fired) >= 3
    timer.stop()
    count = len(fired)
    await asyncio.sleep(0.15)
    assert len(fired) == count
    assert not timer.running


@pytest.mark.asyncio
async def test_timer_restart_and_stop_are_idempotent():
    fired = []
    timer = RefreshTimer(0.2, lambda: fired.append(1))
    timer.stop()
    timer.stop()
    assert not timer.running
    timer.restart()
    timer.restart()
    timer.restart()
    assert timer.running
    await asyncio.sleep(0.3)
    # Three restarts still mean a single pending expiry.
    assert len(fired) == 1
    timer.stop()


@pytest.mark.asyncio
async def test_timer_restart_resets_phase():
    fired = []
    timer = RefreshTimer(0.2, lambda: fired.append(1))
    timer.restart()
    await asyncio.sleep(0.12)
    timer.restart()
    await asyncio.sleep(0.12)
    assert fired == []
    await asyncio.sleep(0.15)
    assert len(fired) == 1
    timer.stop()


@pytest.mark.asyncio
async def test_timer_callback_may_stop_the_timer():
    timer = None
    fired = []

    def on_end():
        fired.append(1)
        timer.stop()

    timer = RefreshTimer(0.03, on_end)
    timer.restart()
    await asyncio.sleep(0.2)
    assert fired == [1]
    assert not timer.running


def test_timer_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        RefreshTimer(0, lambda: None)


# -----------------------------
# Throttle
# -----------------------------

@pytest.mark.asyncio
async def test_throttle_collapses_burst_into_leading_and_trailing_call():
    calls = []
    throttled = Throttle(lambda: calls.append(1), 0.1)
    for _ in range(5):
        throttled()
    print(f"[throttle] after burst of 5: {len(calls)} immediate call(s), pending={throttled.pending}")
    assert len(calls) == 1
    assert throttled.pending
    await asyncio.sleep(0.15)
    assert len(calls) == 2
    await asyncio.sleep(0.15)
    assert len(calls) == 2
    throttled.cancel()


@pytest.mark.asyncio
async def test_throttle_single_call_has_no_trailing_call():
    calls = []
    throttled = Throttle(lambda: calls.append(1), 0.05)
    throttled()
    await asyncio.sleep(0.12)
    assert len(calls) == 1
    throttled()
    assert len(calls) == 2
    throttled.cancel()


@pytest.mark.asyncio
async def test_throttle_cancel_drops_pending_call():
    calls = []
    throttled = Throttle(lambda: calls.append(1), 0.05)
    throttled()
    throttled()
    throttled.cancel()
    assert not throttled.pending
    await asyncio.sleep(0.12)
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_throttle_contains_failures_on_both_edges():
    calls = []

    def flaky():
        calls.append(1)
        raise RuntimeError("refresh exploded")

    throttled = Throttle(flaky, 0.05)
    throttled()
    throttled()
    assert len(calls) == 1
    assert throttled.pending
    await asyncio.sleep(0.08)
    assert len(calls) == 2
    throttled.cancel()
