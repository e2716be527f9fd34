"""
Refresh timing primitives on the asyncio loop.

- RefreshTimer: one owned TimerHandle that fires `on_end` every `interval`
  seconds. `restart()` and `stop()` are idempotent and may be called from the
  expiry path or from a manual action; `running` is read off the handle.
- Throttle: leading-edge call, then any calls inside the window collapse into
  a single trailing call when the window closes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RefreshTimer:

    def __init__(
        self,
        interval: float,
        on_end: Callable[[], None],
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0: {interval}")
        self.interval = interval
        self._on_end = on_end
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def restart(self) -> None:
        """Cancel the pending expiry (if any) and start a fresh period."""
        self.stop()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.interval, self._expire)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _expire(self) -> None:
        # Re-arm before the callback so the callback may stop() or restart().
        self._handle = None
        self.restart()
        try:
            self._on_end()
        except Exception:
            logger.exception("Refresh timer callback failed")


class Throttle:

    def __init__(
        self,
        fn: Callable[[], None],
        interval: float,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if interval < 0:
            raise ValueError(f"interval must be >= 0: {interval}")
        self._fn = fn
        self.interval = interval
        self._loop = loop
        self._window: Optional[asyncio.TimerHandle] = None
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def __call__(self) -> None:
        if self._window is None:
            self._open_window()
            self._invoke()
        else:
            self._pending = True

    def cancel(self) -> None:
        if self._window is not None:
            self._window.cancel()
            self._window = None
        self._pending = False

    def _open_window(self) -> None:
        loop = self._loop or asyncio.get_running_loop()
        self._window = loop.call_later(self.interval, self._close_window)

    def _close_window(self) -> None:
        self._window = None
        if self._pending:
            self._pending = False
            self._open_window()
            self._invoke()

    def _invoke(self) -> None:
        try:
            self._fn()
        except Exception:
            logger.exception("Throttled call failed")


__all__ = ["RefreshTimer", "Throttle"]
