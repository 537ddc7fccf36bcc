"""Opponent targeting strategy interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from naumachia.game.core.board import ShotGrid
from naumachia.game.core.models import AttackOutcome, Coord


class AIStrategy(ABC):
    """Targeting contract used by the opponent turn service."""

    @abstractmethod
    def choose_shot(self, shots: ShotGrid) -> Coord | None:
        """Return the next cell to fire at, or None when no target was found."""

    @abstractmethod
    def notify_result(self, coord: Coord, outcome: AttackOutcome) -> None:
        """Update strategy state with shot result."""
