"""
Proportional deposit quoting: **pool math only**.

Given a reserve snapshot and an amount on the driving side, compute the
counterpart amount that keeps the reserve ratio and the LP shares minted.
Both are floored on the integer grid of the receiving token: the derived
amount never exceeds the exact proportional amount and the shares never exceed
what the pool would mint.

Typed amounts outside the bounds of `parse_amount` quote as empty.

The displayed exchange rate rounds up instead, and so does the slippage
maximum handed to submission.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from .config import settings
from .core.amounts import (
    DecimalLike,
    from_units,
    mul_ratio_floor,
    parse_amount,
    scale_up_ceil,
    to_units_floor,
)
from .core.datatypes import FocusSide, QuotePair, ReserveSnapshot
from .core.exc import AmountDomainError, DegeneratePool
from .core.fmt import fmt_ratio, fmt_units


class QuoteEngine:
    """Stateless quote calculator.

    `slippage` only widens the submitted maximum for the derived side; the
    displayed derived amount is always the exact floor.
    """

    def __init__(self, slippage: Optional[Decimal] = None):
        slippage = settings.slippage if slippage is None else slippage
        if not slippage.is_finite() or slippage < 0 or slippage >= 1:
            raise AmountDomainError(f"slippage must be in [0, 1): {slippage}")
        self.slippage = slippage

    def quote(
        self,
        snapshot: ReserveSnapshot,
        side: FocusSide,
        raw_amount: Optional[DecimalLike],
        *,
        raise_on_degenerate: bool = False,
    ) -> QuotePair:
        """Quote a deposit of `raw_amount` (display units) on `side`.

        Returns the empty pair for empty or non-positive input. For a
        degenerate pool either returns the empty pair flagged `degenerate`
        or, when `raise_on_degenerate=True`, raises DegeneratePool.
        """
        amount = parse_amount(raw_amount)
        if amount is None or amount <= 0:
            return QuotePair.empty()
        if snapshot.is_degenerate():
            if raise_on_degenerate:
                raise DegeneratePool(snapshot.base_reserve, snapshot.quote_reserve, as_of=snapshot.as_of)
            return QuotePair.empty(degenerate=True)

        other = side.other
        driving_reserve = snapshot.reserve(side)
        x_units = to_units_floor(amount, snapshot.decimals(side))

        derived_units = mul_ratio_floor(x_units, snapshot.reserve(other), driving_reserve)
        minted_units = mul_ratio_floor(x_units, snapshot.lp_supply, driving_reserve)
        max_units = scale_up_ceil(derived_units, self.slippage)

        other_decimals = snapshot.decimals(other)
        return QuotePair(
            derived_amount=fmt_units(derived_units, other_decimals),
            minted_shares=from_units(minted_units, snapshot.lp_decimals),
            derived_units=derived_units,
            minted_units=minted_units,
            max_derived_amount=fmt_units(max_units, other_decimals),
        )


def display_rate(
    snapshot: Optional[ReserveSnapshot],
    *,
    reverse: bool = False,
    min_places: Optional[int] = None,
) -> Optional[str]:
    """Price of one base token in quote tokens (or the reverse), rounded up.

    Places = max(decimals of the priced-in token, min_places). Returns None
    when there is no snapshot or the pool is degenerate.
    """
    if snapshot is None or snapshot.is_degenerate():
        return None
    min_places = settings.rate_min_places if min_places is None else min_places
    src = FocusSide.QUOTE if reverse else FocusSide.BASE
    dst = src.other
    # (R_dst / 10^d_dst) / (R_src / 10^d_src)
    num = snapshot.reserve(dst) * (10 ** snapshot.decimals(src))
    den = snapshot.reserve(src) * (10 ** snapshot.decimals(dst))
    places = max(snapshot.decimals(dst), min_places)
    return fmt_ratio(num, den, places, round_up=True)


def estimate_deposit_value(minted_shares: Decimal, lp_price: Optional[Decimal]) -> Optional[Decimal]:
    """Display value of the minted shares at `lp_price`; None when the price is unknown."""
    if lp_price is None:
        return None
    return lp_price * minted_shares


__all__ = ["QuoteEngine", "display_rate", "estimate_deposit_value"]
