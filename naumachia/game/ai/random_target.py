"""Uniform random, non-repeating opponent targeting."""

from __future__ import annotations

import logging
import random

from naumachia.game.ai.strategy import AIStrategy
from naumachia.game.core.board import ShotGrid
from naumachia.game.core.models import BOARD_SIZE, AttackOutcome, Coord

logger = logging.getLogger(__name__)

MAX_TARGET_ATTEMPTS = 100


class RandomTargetAI(AIStrategy):
    """Samples random cells until one has not been fired upon yet."""

    def __init__(self, rng: random.Random, max_attempts: int = MAX_TARGET_ATTEMPTS) -> None:
        self._rng = rng
        self._max_attempts = max_attempts

    def choose_shot(self, shots: ShotGrid) -> Coord | None:
        for _ in range(self._max_attempts):
            coord = Coord(self._rng.randrange(BOARD_SIZE), self._rng.randrange(BOARD_SIZE))
            if not shots.is_marked(coord):
                return coord
        logger.warning(
            "opponent_target_exhausted attempts=%d fired=%d", self._max_attempts, shots.count
        )
        return None

    def notify_result(self, coord: Coord, outcome: AttackOutcome) -> None:
        # Uniform sampling keeps no memory beyond the shot grid.
        return None
