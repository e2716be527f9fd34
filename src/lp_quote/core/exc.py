"""
Core exception types for lp_quote.core.

These are dependency-free and may be imported by all core modules.
"""

__all__ = [
    "AmountDomainError",
    "QuoteError",
    "DegeneratePool",
]


class AmountDomainError(Exception):
    """Raised when inputs violate the non-negative domain or basic preconditions."""
    pass


class QuoteError(Exception):
    """Base class for quote failures that callers may choose to surface."""
    pass


class DegeneratePool(QuoteError):
    """Raised when a pool has a zero reserve and cannot be quoted.

    Attributes
    ----------
    base_reserve : int
        Base reserve of the offending snapshot (smallest units).
    quote_reserve : int
        Quote reserve of the offending snapshot (smallest units).
    as_of : int | None
        Sequence number of the snapshot, for context.
    """

    def __init__(self, base_reserve, quote_reserve, *, as_of=None):
        super().__init__(
            f"Pool is degenerate: base_reserve={base_reserve}, quote_reserve={quote_reserve}"
        )
        self.base_reserve = base_reserve
        self.quote_reserve = quote_reserve
        self.as_of = as_of
