"""Battle and setup helpers separated from controller bookkeeping."""

from __future__ import annotations

import logging
import random

from naumachia.game.ai.placement import place_fleet_randomly
from naumachia.game.ai.random_target import RandomTargetAI
from naumachia.game.ai.strategy import AIStrategy
from naumachia.game.core.errors import PlacementLocked
from naumachia.game.core.models import Coord, Phase, Side
from naumachia.game.core.rules import GameSession

logger = logging.getLogger(__name__)


def build_ai_strategy(rng: random.Random) -> AIStrategy:
    """Construct the opponent's targeting strategy."""
    return RandomTargetAI(rng)


def opponent_target(session: GameSession, strategy: AIStrategy) -> Coord | None:
    """Pick the opponent's next target, or None when its turn should be skipped.

    A stale or duplicate trigger (wrong phase, wrong turn, lock held) is
    ignored here; the attack itself still re-validates everything.
    """
    if session.phase is not Phase.IN_BATTLE:
        logger.debug("opponent_turn_skipped reason=phase phase=%s", session.phase.value)
        return None
    if session.turn is not Side.OPPONENT or session.turn_locked:
        logger.debug(
            "opponent_turn_skipped reason=turn turn=%s locked=%s",
            session.turn.value,
            session.turn_locked,
        )
        return None
    return strategy.choose_shot(session.opponent_shots)


def randomize_player_fleet(session: GameSession, rng: random.Random) -> None:
    """Clear the player's board and deal a fresh random legal fleet."""
    if session.phase is not Phase.PLACING:
        raise PlacementLocked(f"Cannot randomize placement during {session.phase.value}.")
    board = session.player_board
    for ship in board.fleet:
        if ship.is_placed:
            board.unplace(ship.kind)
    place_fleet_randomly(board, rng)
