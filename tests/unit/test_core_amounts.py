import pytest
from decimal import Decimal

from lp_quote.core.amounts import (
    parse_amount,
    is_positive_amount,
    to_units_floor,
    from_units,
    int_digits,
    mul_ratio_floor,
    scale_up_ceil,
)
from lp_quote.core.datatypes import FocusSide, PairAmounts, ReserveSnapshot
from lp_quote.core.exc import AmountDomainError


# -----------------------------
# Parsing
# -----------------------------

@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "1.2.3", "NaN", "Infinity", "-inf"])
def test_parse_amount_rejects_empty_and_non_finite(raw):
    print(f"[parse_amount] {raw!r} -> expect None")
    assert parse_amount(raw) is None


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1.", Decimal("1")),
        (".5", Decimal("0.5")),
        (" 2.50 ", Decimal("2.5")),
        ("-1", Decimal("-1")),
        (3, Decimal("3")),
        (Decimal("0.1"), Decimal("0.1")),
    ],
)
def test_parse_amount_accepts_plain_decimals(raw, expected):
    assert parse_amount(raw) == expected


def test_is_positive_amount():
    assert is_positive_amount("0.000001")
    assert not is_positive_amount("0")
    assert not is_positive_amount("-0.1")
    assert not is_positive_amount("")


@pytest.mark.parametrize(
    "raw",
    ["1e5000", "1e999999999", "9" * 401, "1." + "0" * 400],
)
def test_parse_amount_rejects_out_of_bounds_magnitudes(raw):
    assert parse_amount(raw) is None
    assert not is_positive_amount(raw)


def test_parse_amount_bounds_are_inclusive():
    assert parse_amount("1e60") == Decimal("1e60")
    assert parse_amount("1" + "0" * 61) is None
    assert parse_amount("1." + "0" * 399) == Decimal(1)
    # Tiny magnitudes are fine: they floor to zero units later.
    assert parse_amount("1e-999999999") == Decimal("1e-999999999")


def test_parse_amount_rejects_huge_int():
    assert parse_amount(10 ** 5000) is None
    assert parse_amount(10 ** 60) == Decimal(10) ** 60


# -----------------------------
# Display <-> smallest units
# -----------------------------

def test_to_units_floor_truncates_extra_digits():
    print("[to_units_floor] 1.2345678 @6dp -> 1234567 (floor, not round)")
    assert to_units_floor(Decimal("1.2345678"), 6) == 1_234_567
    assert to_units_floor(Decimal("0.0000009"), 6) == 0


def test_to_units_floor_is_exact_beyond_context_precision():
    # 39 significant digits, well past the default 28-digit context.
    amount = Decimal("123456789012345678901234567890.123456789")
    assert to_units_floor(amount, 9) == 123456789012345678901234567890123456789


def test_to_units_floor_positive_exponent_and_zero_decimals():
    assert to_units_floor(Decimal("1E+3"), 2) == 100_000
    assert to_units_floor(Decimal("7.9"), 0) == 7


def test_to_units_floor_dust_far_below_grid_is_zero():
    # Must not materialise 10**999999999 just to floor to nothing.
    assert to_units_floor(Decimal("1e-999999999"), 255) == 0
    assert to_units_floor(Decimal("0E-999999999"), 6) == 0


def test_int_digits_beyond_str_conversion_limit():
    n = 10 ** 5000 + 7
    digits = int_digits(n)
    assert len(digits) == 5001
    assert digits[0] == "1" and digits[-1] == "7"
    assert int_digits(0) == "0"
    with pytest.raises(AmountDomainError):
        int_digits(-1)


def test_to_units_floor_rejects_negative_and_bad_decimals():
    with pytest.raises(AmountDomainError):
        to_units_floor(Decimal("-1"), 6)
    with pytest.raises(AmountDomainError):
        to_units_floor(Decimal("1"), 256)
    with pytest.raises(AmountDomainError):
        to_units_floor(Decimal("NaN"), 6)


def test_from_units_exact_for_large_values():
    units = 10 ** 40 + 1
    assert from_units(units, 18) == Decimal("10000000000000000000000.000000000000000001")
    assert from_units(0, 6) == Decimal(0)
    assert from_units(5, 0) == Decimal(5)
    with pytest.raises(AmountDomainError):
        from_units(-1, 6)


# -----------------------------
# Ratio helpers
# -----------------------------

def test_mul_ratio_floor_non_terminating():
    print("[mul_ratio_floor] 1 * 1 / 3 -> 0")
    assert mul_ratio_floor(1, 1, 3) == 0
    assert mul_ratio_floor(10, 1, 3) == 3


def test_scale_up_ceil():
    assert scale_up_ceil(100, Decimal("0.01")) == 101
    assert scale_up_ceil(1, Decimal("0.01")) == 2
    assert scale_up_ceil(0, Decimal("0.01")) == 0
    assert scale_up_ceil(123, Decimal("0")) == 123
    with pytest.raises(AmountDomainError):
        scale_up_ceil(1, Decimal("-0.01"))


# -----------------------------
# Value types
# -----------------------------

@pytest.mark.parametrize(
    "kwargs",
    [
        dict(base_reserve=-1),
        dict(lp_supply=-5),
        dict(quote_decimals=256),
        dict(base_reserve=True),
        dict(quote_reserve=1.5),
    ],
)
def test_snapshot_rejects_invalid_fields(kwargs):
    fields = dict(
        base_reserve=1, quote_reserve=1, lp_supply=1,
        base_decimals=6, quote_decimals=6, lp_decimals=6, as_of=0,
    )
    fields.update(kwargs)
    with pytest.raises(AmountDomainError):
        ReserveSnapshot(**fields)


def test_snapshot_degenerate_and_side_accessors():
    s = ReserveSnapshot(0, 5, 0, 6, 9, 6, as_of=3)
    assert s.is_degenerate()
    assert s.reserve(FocusSide.QUOTE) == 5
    assert s.decimals(FocusSide.QUOTE) == 9
    assert not ReserveSnapshot(1, 5, 0, 6, 9, 6).is_degenerate()


def test_focus_side_other_and_pair_amounts():
    assert FocusSide.BASE.other is FocusSide.QUOTE
    assert FocusSide.QUOTE.other is FocusSide.BASE
    p = PairAmounts().with_side(FocusSide.QUOTE, "3")
    assert p.get(FocusSide.QUOTE) == "3"
    assert p.get(FocusSide.BASE) == ""
