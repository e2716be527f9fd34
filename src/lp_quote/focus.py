from __future__ import annotations

from .core.datatypes import FocusSide


class FocusTracker:
    """Remembers which side the user last focused or edited. Defaults to BASE."""

    def __init__(self, initial: FocusSide = FocusSide.BASE) -> None:
        self._side = initial

    def on_focus(self, side: FocusSide) -> None:
        self._side = side

    def current(self) -> FocusSide:
        return self._side

    def reset(self) -> None:
        self._side = FocusSide.BASE


__all__ = ["FocusTracker"]
