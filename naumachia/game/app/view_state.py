"""Typed, read-only state exposed by the controller."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from naumachia.game.core.board import Board, ShotGrid
from naumachia.game.core.models import GameOutcome, Phase, ShipKind, ShipStatus, Side
from naumachia.game.core.rules import GameSession, player_accuracy


class ShotMark(StrEnum):
    """What an attacker knows about a cell it fired at."""

    MISS = "miss"
    HIT = "hit"


ShotMarks = list[list[ShotMark | None]]


@dataclass(frozen=True, slots=True)
class GameView:
    """View-ready snapshot of one session."""

    phase: Phase
    turn: Side
    turn_locked: bool
    turn_number: int
    player_occupancy: list[list[ShipKind | None]]
    player_ships: list[ShipStatus]
    opponent_ships: list[ShipStatus]
    player_targets: ShotMarks
    opponent_targets: ShotMarks
    player_hits: int
    player_shots: int
    opponent_hits: int
    opponent_shots: int
    accuracy: int
    ships_to_place: list[ShipKind]
    outcome: GameOutcome | None


def build_game_view(session: GameSession) -> GameView:
    """Project the session into a snapshot safe to hand to a renderer."""
    outcome: GameOutcome | None = None
    if session.winner is not None:
        outcome = GameOutcome.WIN if session.winner is Side.PLAYER else GameOutcome.LOSE
    return GameView(
        phase=session.phase,
        turn=session.turn,
        turn_locked=session.turn_locked,
        turn_number=session.turns,
        player_occupancy=session.player_board.occupancy(),
        player_ships=session.player_board.fleet.statuses(),
        opponent_ships=_concealed_statuses(session.opponent_board, reveal=session.phase is Phase.OVER),
        player_targets=_shot_marks(session.player_shots, session.opponent_board),
        opponent_targets=_shot_marks(session.opponent_shots, session.player_board),
        player_hits=session.player_stats.hits,
        player_shots=session.player_stats.shots,
        opponent_hits=session.opponent_stats.hits,
        opponent_shots=session.opponent_stats.shots,
        accuracy=player_accuracy(session),
        ships_to_place=session.player_board.fleet.remaining_to_place(),
        outcome=outcome,
    )


def _shot_marks(shots: ShotGrid, target: Board) -> ShotMarks:
    marks: ShotMarks = []
    for row, fired_row in enumerate(shots.marks):
        line: list[ShotMark | None] = []
        for col, fired in enumerate(fired_row):
            if not fired:
                line.append(None)
            elif target.is_occupied(row, col):
                line.append(ShotMark.HIT)
            else:
                line.append(ShotMark.MISS)
        marks.append(line)
    return marks


def _concealed_statuses(board: Board, *, reveal: bool) -> list[ShipStatus]:
    # Afloat enemy ships keep their position hidden until the game ends.
    statuses = board.fleet.statuses()
    if reveal:
        return statuses
    return [
        status if status.is_sunk else replace(status, occupied_cells=(), orientation=None)
        for status in statuses
    ]
