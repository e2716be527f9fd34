"""
Formatting helpers (display layer).

Core arithmetic uses integers. The helpers here turn integer units and exact
ratios into display strings without going through binary floats and without
depending on the global Decimal context.
"""

from decimal import Decimal

from .exc import AmountDomainError
from .amounts import _ceil_div, _floor_div, _check_decimals, int_digits


# ---------------------------------------------------------------------------
# Plain (non-scientific) rendering
# ---------------------------------------------------------------------------

def _join(int_part: str, frac_part: str) -> str:
    int_part = int_part.lstrip("0") or "0"
    return f"{int_part}.{frac_part}" if frac_part else int_part


def fmt_units(units: int, decimals: int) -> str:
    """Render smallest units as a plain decimal string with trailing zeros stripped.

    Examples (decimals=6):
      1_500_000 -> '1.5'
      1         -> '0.000001'
      0         -> '0'
    """
    _check_decimals(decimals)
    if units < 0:
        raise AmountDomainError(f"fmt_units(): units must be >= 0: {units}")
    if decimals == 0:
        return int_digits(units)
    digits = int_digits(units).rjust(decimals + 1, "0")
    return _join(digits[:-decimals], digits[-decimals:].rstrip("0"))


def fmt_plain(x: Decimal) -> str:
    """Render a finite, non-negative Decimal without exponent or trailing zeros."""
    if not x.is_finite():
        raise AmountDomainError(f"fmt_plain(): non-finite value {x}")
    if x < 0:
        raise AmountDomainError(f"fmt_plain(): negative value {x}")
    _, digits, exponent = x.as_tuple()
    text = "".join(str(d) for d in digits) or "0"
    if exponent >= 0:
        return _join(text + "0" * exponent, "")
    places = -exponent
    text = text.rjust(places + 1, "0")
    return _join(text[:-places], text[-places:].rstrip("0"))


def fmt_ratio(num: int, den: int, places: int, *, round_up: bool) -> str:
    """Render num/den with exactly `places` fractional digits.

    Rounds up (ceiling) when `round_up`, otherwise down (floor). Zeros are
    kept so the width is stable, like a fixed-point price label.
    """
    if places < 0:
        raise AmountDomainError(f"fmt_ratio(): places must be >= 0: {places}")
    scaled = num * (10 ** places)
    q = _ceil_div(scaled, den) if round_up else _floor_div(scaled, den)
    if places == 0:
        return int_digits(q)
    digits = int_digits(q).rjust(places + 1, "0")
    return f"{digits[:-places]}.{digits[-places:]}"


__all__ = [
    "fmt_units",
    "fmt_plain",
    "fmt_ratio",
]
