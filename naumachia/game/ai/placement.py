"""Randomized fleet placement under the standard legality rules."""

from __future__ import annotations

import logging
import random

from naumachia.game.core.board import Board
from naumachia.game.core.errors import InternalInvariantViolation
from naumachia.game.core.models import BOARD_SIZE, FLEET_ORDER, Coord, Orientation, ShipKind

logger = logging.getLogger(__name__)

MAX_PLACEMENT_ATTEMPTS = 100


def place_fleet_randomly(
    board: Board, rng: random.Random, max_attempts: int = MAX_PLACEMENT_ATTEMPTS
) -> None:
    """Place every unplaced ship of the board's fleet at random legal positions."""
    for kind in FLEET_ORDER:
        if board.fleet.ship(kind).is_placed:
            continue
        attempts = place_ship_randomly(board, kind, rng, max_attempts)
        logger.debug("random_placement kind=%s attempts=%d", kind.value, attempts)


def place_ship_randomly(
    board: Board, kind: ShipKind, rng: random.Random, max_attempts: int = MAX_PLACEMENT_ATTEMPTS
) -> int:
    """Sample orientation and anchor until a placement is accepted.

    Returns the number of attempts used. Raises InternalInvariantViolation when
    the bound is exhausted, since the fleet would otherwise be incomplete.
    """
    for attempt in range(1, max_attempts + 1):
        orientation = rng.choice((Orientation.HORIZONTAL, Orientation.VERTICAL))
        anchor = Coord(rng.randrange(BOARD_SIZE), rng.randrange(BOARD_SIZE))
        if board.place(kind, anchor, orientation).accepted:
            return attempt
    raise InternalInvariantViolation(
        f"Failed to place {kind.value} after {max_attempts} attempts."
    )
