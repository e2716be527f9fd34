"""
LP Quote Core Constants
=======================

Integer-domain bounds and display defaults. Runtime-tunable values live in
`lp_quote.config`; the numbers here are the fallbacks it starts from.
"""

from decimal import Decimal

# ---------------------------------------------------------------------------
# Token decimals
# ---------------------------------------------------------------------------

#: Decimals are carried as u8 on-chain.
MIN_DECIMALS: int = 0
MAX_DECIMALS: int = 255


# ---------------------------------------------------------------------------
# Typed amounts
# ---------------------------------------------------------------------------

#: Largest accepted order of magnitude for a typed amount (Decimal.adjusted()).
MAX_AMOUNT_EXPONENT: int = 60

#: Longest accepted coefficient of a typed amount, in digits.
MAX_AMOUNT_DIGITS: int = 400


# ---------------------------------------------------------------------------
# Display / refresh defaults
# ---------------------------------------------------------------------------

#: Minimum fractional places for the displayed exchange rate.
DEFAULT_RATE_MIN_PLACES: int = 6

#: Nominal cadence of the reserve refresh timer (seconds).
DEFAULT_REFRESH_INTERVAL_S: float = 1.0

#: Window in which successive refresh triggers collapse into one.
DEFAULT_THROTTLE_S: float = 1.0

#: Tolerance applied on top of the derived side for the submitted maximum.
DEFAULT_SLIPPAGE: Decimal = Decimal("0.01")


__all__ = [
    "MIN_DECIMALS",
    "MAX_DECIMALS",
    "MAX_AMOUNT_EXPONENT",
    "MAX_AMOUNT_DIGITS",
    "DEFAULT_RATE_MIN_PLACES",
    "DEFAULT_REFRESH_INTERVAL_S",
    "DEFAULT_THROTTLE_S",
    "DEFAULT_SLIPPAGE",
]
