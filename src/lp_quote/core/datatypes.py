"""
Core datatypes for quoting, aligned with on-chain pool semantics.

These datatypes are intentionally minimal and immutable so that the
coordinator can hand copies to other components without sharing state.

Notes:
- Reserves and LP supply are integers in smallest units.
- Display amounts are strings exactly as the user typed them (driving side)
  or as rendered by `fmt_units` (derived side).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from .amounts import _check_decimals
from .exc import AmountDomainError


# ---------------------------------------------------------------------------
# Focus side
# ---------------------------------------------------------------------------

class FocusSide(Enum):
    """Which input field the user is driving."""

    BASE = "base"
    QUOTE = "quote"

    @property
    def other(self) -> "FocusSide":
        return FocusSide.QUOTE if self is FocusSide.BASE else FocusSide.BASE


# ---------------------------------------------------------------------------
# Reserve snapshot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReserveSnapshot:
    """Pool state at a point in time (integer domain).

    Fields:
    - base_reserve / quote_reserve: pool reserves in smallest units.
    - lp_supply: total LP shares outstanding in smallest units.
    - base_decimals / quote_decimals / lp_decimals: decimal exponents (u8).
    - as_of: monotonic sequence number; a newer snapshot has a strictly greater one.
    """

    base_reserve: int
    quote_reserve: int
    lp_supply: int
    base_decimals: int
    quote_decimals: int
    lp_decimals: int
    as_of: int = 0

    def __post_init__(self):
        for name in ("base_reserve", "quote_reserve", "lp_supply"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise AmountDomainError(f"{name} must be an int: {v!r}")
            if v < 0:
                raise AmountDomainError(f"{name} must be >= 0: {v}")
        for name in ("base_decimals", "quote_decimals", "lp_decimals"):
            _check_decimals(getattr(self, name))

    def is_degenerate(self) -> bool:
        """Return True if either reserve is zero (nothing to be proportional to)."""
        return self.base_reserve == 0 or self.quote_reserve == 0

    def reserve(self, side: FocusSide) -> int:
        return self.base_reserve if side is FocusSide.BASE else self.quote_reserve

    def decimals(self, side: FocusSide) -> int:
        return self.base_decimals if side is FocusSide.BASE else self.quote_decimals


# ---------------------------------------------------------------------------
# Inputs and results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DepositInput:
    """A single input event: the raw amount typed on `side`, tagged with its generation."""

    side: FocusSide
    raw_amount: str
    generation: int


@dataclass(frozen=True)
class QuotePair:
    """Engine output for one driving amount against one snapshot.

    `derived_amount` is the floored counterpart for display; `max_derived_amount`
    is the slippage-adjusted ceiling that is handed to deposit submission.
    """

    derived_amount: str
    minted_shares: Decimal
    derived_units: int = 0
    minted_units: int = 0
    max_derived_amount: str = ""
    degenerate: bool = False

    @classmethod
    def empty(cls, *, degenerate: bool = False) -> "QuotePair":
        return cls(derived_amount="", minted_shares=Decimal(0), degenerate=degenerate)

    def is_empty(self) -> bool:
        return self.derived_amount == ""


@dataclass(frozen=True)
class QuoteResult:
    """A QuotePair bound to the generation and snapshot it was computed for."""

    side: FocusSide
    derived_amount: str
    max_derived_amount: str
    minted_shares: Decimal
    for_generation: int
    for_snapshot_as_of: int
    degenerate: bool = False

    @classmethod
    def from_pair(cls, pair: QuotePair, inp: DepositInput, snapshot: ReserveSnapshot) -> "QuoteResult":
        return cls(
            side=inp.side,
            derived_amount=pair.derived_amount,
            max_derived_amount=pair.max_derived_amount,
            minted_shares=pair.minted_shares,
            for_generation=inp.generation,
            for_snapshot_as_of=snapshot.as_of,
            degenerate=pair.degenerate,
        )


@dataclass(frozen=True)
class PairAmounts:
    """Base/quote display amounts. Empty string means 'no amount'."""

    base: str = ""
    quote: str = ""

    def get(self, side: FocusSide) -> str:
        return self.base if side is FocusSide.BASE else self.quote

    def with_side(self, side: FocusSide, value: str) -> "PairAmounts":
        if side is FocusSide.BASE:
            return replace(self, base=value)
        return replace(self, quote=value)


# ---------------------------------------------------------------------------
# Validation verdicts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Ok:
    pass


@dataclass(frozen=True)
class EmptyAmount:
    pass


@dataclass(frozen=True)
class InsufficientBalance:
    side: FocusSide


ValidationVerdict = Union[Ok, EmptyAmount, InsufficientBalance]


# ---------------------------------------------------------------------------
# Pool identity and read model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PoolInfo:
    """Identity of the pool a coordinator is bound to.

    `lp_price` is the display price of one LP share (e.g. USD); None hides
    the deposit value estimate.
    """

    pool_id: str
    base_token: str
    quote_token: str
    lp_price: Optional[Decimal] = None

    def token(self, side: FocusSide) -> str:
        return self.base_token if side is FocusSide.BASE else self.quote_token


@dataclass(frozen=True)
class QuoteView:
    """Immutable read model for rendering."""

    base_amount: str
    quote_amount: str
    minted_shares_estimate: Decimal
    verdict: ValidationVerdict
    state: str
    generation: int
    rate: Optional[str] = None
    reverse_rate: Optional[str] = None
    deposit_value: Optional[Decimal] = None
    pool_not_found: bool = False
    is_sending: bool = False


__all__ = [
    "FocusSide",
    "ReserveSnapshot",
    "DepositInput",
    "QuotePair",
    "QuoteResult",
    "PairAmounts",
    "Ok",
    "EmptyAmount",
    "InsufficientBalance",
    "ValidationVerdict",
    "PoolInfo",
    "QuoteView",
]
