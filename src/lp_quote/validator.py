"""
Balance validation for a two-sided deposit.

Rule order (first match wins):
  1) either amount empty or non-positive          -> EmptyAmount
  2) base amount above the held base balance      -> InsufficientBalance(BASE)
  3) quote amount above the held quote balance    -> InsufficientBalance(QUOTE)
  4) otherwise                                    -> Ok

Base is checked before quote, so when both sides are short the verdict names
the base side. A balance of None means the lookup has nothing for that token
and the side is treated as covered.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Optional

from .core.amounts import parse_amount
from .core.datatypes import (
    EmptyAmount,
    FocusSide,
    InsufficientBalance,
    Ok,
    PairAmounts,
    ValidationVerdict,
)


class BalanceValidator:

    def validate(
        self,
        amounts: PairAmounts,
        balances: Mapping[FocusSide, Optional[Decimal]],
    ) -> ValidationVerdict:
        parsed = {side: parse_amount(amounts.get(side)) for side in (FocusSide.BASE, FocusSide.QUOTE)}
        if any(v is None or v <= 0 for v in parsed.values()):
            return EmptyAmount()
        for side in (FocusSide.BASE, FocusSide.QUOTE):
            held = balances.get(side)
            if held is not None and parsed[side] > held:
                return InsufficientBalance(side)
        return Ok()


__all__ = ["BalanceValidator"]
