"""
Amount primitives: bridges between display decimals and integer smallest units.

- Smallest units are plain non-negative Python ints (arbitrary precision).
- Display amounts are Decimal, built exactly from digits; the Decimal context
  precision never participates in a conversion.
- Rounding semantics: amounts derived from reserves round down (floor); upper
  bounds the user agrees to pay round up (ceil).
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from .constants import MAX_AMOUNT_DIGITS, MAX_AMOUNT_EXPONENT, MAX_DECIMALS, MIN_DECIMALS
from .exc import AmountDomainError

DecimalLike = Union[Decimal, int, str]


# ----------------------------
# Integer rounding helpers (centralised)
# ----------------------------

def _ceil_div(a: int, b: int) -> int:
    if a < 0 or b <= 0:
        raise AmountDomainError("_ceil_div expects a>=0 and b>0")
    return 0 if a == 0 else -(-a // b)


def _floor_div(a: int, b: int) -> int:
    if a < 0 or b <= 0:
        raise AmountDomainError("_floor_div expects a>=0 and b>0")
    return a // b


def _check_decimals(decimals: int) -> None:
    if not isinstance(decimals, int) or isinstance(decimals, bool):
        raise AmountDomainError(f"decimals must be an int: {decimals!r}")
    if not (MIN_DECIMALS <= decimals <= MAX_DECIMALS):
        raise AmountDomainError(f"decimals must be in [{MIN_DECIMALS}, {MAX_DECIMALS}]: {decimals}")


# ----------------------------
# Parsing (I/O boundary)
# ----------------------------

def parse_amount(raw: Optional[DecimalLike]) -> Optional[Decimal]:
    """Parse user input into a finite Decimal.

    Returns None for empty, whitespace-only, unparsable or non-finite input,
    and for amounts outside the typed-amount bounds (magnitude above
    10^MAX_AMOUNT_EXPONENT or more than MAX_AMOUNT_DIGITS coefficient digits).
    Sign is preserved; callers decide what a non-positive amount means.
    """
    if raw is None:
        return None
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int) and not isinstance(raw, bool):
        value = Decimal(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    if not value.is_finite():
        return None
    if value and (value.adjusted() > MAX_AMOUNT_EXPONENT or len(value.as_tuple().digits) > MAX_AMOUNT_DIGITS):
        return None
    return value


def is_positive_amount(raw: Optional[DecimalLike]) -> bool:
    """True when `raw` parses to a finite amount strictly greater than zero."""
    value = parse_amount(raw)
    return value is not None and value > 0


# ----------------------------
# Display <-> smallest units
# ----------------------------

def int_digits(n: int) -> str:
    """Decimal digits of a non-negative int, independent of the int->str digit limit."""
    if n < 0:
        raise AmountDomainError(f"int_digits expects n >= 0: {n}")
    # Decimal(int) is exact and does not go through str().
    return "".join(map(str, Decimal(n).as_tuple().digits))


def to_units_floor(amount: Decimal, decimals: int) -> int:
    """Scale a display amount by 10^decimals and floor to an int.

    Works on the digit tuple directly, so no intermediate Decimal rounding can
    creep in regardless of how many digits the input carries.
    """
    _check_decimals(decimals)
    if not amount.is_finite():
        raise AmountDomainError(f"amount must be finite: {amount}")
    if amount < 0:
        raise AmountDomainError(f"amount must be >= 0: {amount}")
    _, digits, exponent = amount.as_tuple()
    if not amount:
        return 0
    shift = exponent + decimals
    if shift < 0 and -shift > len(digits):
        # Every digit lies below the smallest unit.
        return 0
    mantissa = int(Decimal((0, digits, 0)))
    if shift >= 0:
        return mantissa * (10 ** shift)
    return _floor_div(mantissa, 10 ** (-shift))


def from_units(units: int, decimals: int) -> Decimal:
    """Exact Decimal for `units` smallest units at the given decimals."""
    _check_decimals(decimals)
    if units < 0:
        raise AmountDomainError(f"units must be >= 0: {units}")
    # Tuple construction is exact; arithmetic here would round at context precision.
    return Decimal((0, Decimal(units).as_tuple().digits, -decimals))


def mul_ratio_floor(units: int, num: int, den: int) -> int:
    """floor(units * num / den) in the integer domain."""
    if units < 0 or num < 0:
        raise AmountDomainError("mul_ratio_floor expects non-negative operands")
    return _floor_div(units * num, den)


def scale_up_ceil(units: int, tolerance: Decimal) -> int:
    """ceil(units * (1 + tolerance)); tolerance must be a finite, non-negative Decimal."""
    if units < 0:
        raise AmountDomainError(f"units must be >= 0: {units}")
    if not tolerance.is_finite() or tolerance < 0:
        raise AmountDomainError(f"tolerance must be finite and >= 0: {tolerance}")
    num, den = tolerance.as_integer_ratio()
    return _ceil_div(units * (den + num), den)


__all__ = [
    "DecimalLike",
    "int_digits",
    "parse_amount",
    "is_positive_amount",
    "to_units_floor",
    "from_units",
    "mul_ratio_floor",
    "scale_up_ceil",
]
