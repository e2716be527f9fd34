"""
LP Quote Core
=============

Unified exports for integer-domain primitives used by the quoting engine.
All reserve arithmetic is on Python ints; Decimal appears only at the
display boundary and is always built exactly from digits.
"""

# NOTE:
#   Amount conversion floors toward the pool (never over-promise), while
#   user-accepted upper bounds (slippage max) round up. Keep both directions
#   in `amounts.py` so no caller rolls its own rounding.

from .constants import (
    MIN_DECIMALS,
    MAX_DECIMALS,
    MAX_AMOUNT_EXPONENT,
    MAX_AMOUNT_DIGITS,
    DEFAULT_RATE_MIN_PLACES,
    DEFAULT_REFRESH_INTERVAL_S,
    DEFAULT_THROTTLE_S,
    DEFAULT_SLIPPAGE,
)

from .amounts import (
    parse_amount,
    is_positive_amount,
    to_units_floor,
    from_units,
    mul_ratio_floor,
    scale_up_ceil,
)

from .fmt import (
    fmt_units,
    fmt_plain,
    fmt_ratio,
)

from .datatypes import (
    FocusSide,
    ReserveSnapshot,
    DepositInput,
    QuotePair,
    QuoteResult,
    PairAmounts,
    Ok,
    EmptyAmount,
    InsufficientBalance,
    ValidationVerdict,
    PoolInfo,
    QuoteView,
)

from .exc import AmountDomainError, QuoteError, DegeneratePool

__all__ = [
    # constants
    "MIN_DECIMALS",
    "MAX_DECIMALS",
    "MAX_AMOUNT_EXPONENT",
    "MAX_AMOUNT_DIGITS",
    "DEFAULT_RATE_MIN_PLACES",
    "DEFAULT_REFRESH_INTERVAL_S",
    "DEFAULT_THROTTLE_S",
    "DEFAULT_SLIPPAGE",
    # amounts
    "parse_amount",
    "is_positive_amount",
    "to_units_floor",
    "from_units",
    "mul_ratio_floor",
    "scale_up_ceil",
    # fmt
    "fmt_units",
    "fmt_plain",
    "fmt_ratio",
    # datatypes
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
    # exceptions
    "AmountDomainError",
    "QuoteError",
    "DegeneratePool",
]
