"""
Deposit hand-off types.

The quoting core does not build or sign transactions. It hands the final
amounts and the fixed side to a collaborator together with lifecycle
callbacks, and reacts to those callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .core.datatypes import FocusSide


@dataclass(frozen=True)
class DepositRequest:
    """Amounts to submit for one deposit.

    The fixed side carries what the user typed; the other side carries the
    slippage-adjusted maximum the user accepts to pay.
    """

    pool_id: str
    base_amount: str
    quote_amount: str
    fixed_side: FocusSide


@dataclass(frozen=True)
class DepositCallbacks:
    on_sent: Callable[[], None]
    on_confirmed: Callable[[], None]
    on_finally: Callable[[], None]


SubmitDeposit = Callable[[DepositRequest, DepositCallbacks], Awaitable[None]]
ConfirmedHook = Optional[Callable[[DepositRequest], None]]


__all__ = ["DepositRequest", "DepositCallbacks", "SubmitDeposit", "ConfirmedHook"]
