# Top-level API for lp_quote.
"""
Top-level API for lp_quote.

This module exposes the stable interface for proportional deposit quoting:
  - QuoteEngine: pure pool math (counterpart amount, LP shares minted)
  - RecomputeCoordinator: reactive recompute with latest-generation-wins apply
  - BalanceValidator / FocusTracker: verdicts and driving-side tracking

Core value types are integer-domain and live in `lp_quote.core`.
"""

from __future__ import annotations

from .engine import QuoteEngine, display_rate, estimate_deposit_value
from .focus import FocusTracker
from .validator import BalanceValidator
from .timer import RefreshTimer, Throttle
from .coordinator import RecomputeCoordinator, CoordinatorState
from .deposit import DepositRequest, DepositCallbacks
from .config import QuoteSettings, settings

from .core import (
    FocusSide,
    ReserveSnapshot,
    DepositInput,
    QuotePair,
    QuoteResult,
    PairAmounts,
    PoolInfo,
    QuoteView,
    Ok,
    EmptyAmount,
    InsufficientBalance,
    ValidationVerdict,
    AmountDomainError,
    QuoteError,
    DegeneratePool,
)

__all__ = [
    # components
    "QuoteEngine",
    "display_rate",
    "estimate_deposit_value",
    "FocusTracker",
    "BalanceValidator",
    "RefreshTimer",
    "Throttle",
    "RecomputeCoordinator",
    "CoordinatorState",
    "DepositRequest",
    "DepositCallbacks",
    # config
    "QuoteSettings",
    "settings",
    # core data types
    "FocusSide",
    "ReserveSnapshot",
    "DepositInput",
    "QuotePair",
    "QuoteResult",
    "PairAmounts",
    "PoolInfo",
    "QuoteView",
    "Ok",
    "EmptyAmount",
    "InsufficientBalance",
    "ValidationVerdict",
    # exceptions
    "AmountDomainError",
    "QuoteError",
    "DegeneratePool",
]
