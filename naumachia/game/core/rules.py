"""Session lifecycle, turn sequencing and attack resolution."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field

from naumachia.game.ai.placement import place_fleet_randomly
from naumachia.game.core.board import Board, ShotGrid
from naumachia.game.core.coords import coord_label, in_bounds
from naumachia.game.core.errors import (
    AlreadyLocked,
    CellAlreadyFired,
    InternalInvariantViolation,
    NotPlaced,
    OutOfRange,
    PlacementLocked,
    WrongPhase,
    WrongTurn,
)
from naumachia.game.core.models import (
    AttackOutcome,
    Coord,
    GameOutcome,
    Orientation,
    Phase,
    PlacementResult,
    ShipKind,
    Side,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SideStats:
    """Running counters for one attacker."""

    hits: int = 0
    shots: int = 0


@dataclass(frozen=True, slots=True)
class AttackReport:
    """Resolution of one accepted attack."""

    attacker: Side
    coord: Coord
    outcome: AttackOutcome
    sunk_kind: ShipKind | None = None

    @property
    def label(self) -> str:
        return coord_label(self.coord)


@dataclass(frozen=True, slots=True)
class TurnReport:
    """State after an attack's turn has been completed."""

    turn: Side
    turn_number: int
    game_over: bool
    winner: Side | None = None


@dataclass(frozen=True, slots=True)
class FinalStats:
    """End-of-game statistics reported to the player."""

    outcome: GameOutcome
    enemy_ships_sunk: int
    own_ships_lost: int
    total_turns: int
    accuracy: int
    hits: int
    shots: int
    opponent_hits: int
    opponent_shots: int


@dataclass(slots=True)
class GameSession:
    """Runtime game session state."""

    player_board: Board = field(default_factory=Board)
    opponent_board: Board = field(default_factory=Board)
    player_shots: ShotGrid = field(default_factory=ShotGrid)
    opponent_shots: ShotGrid = field(default_factory=ShotGrid)
    player_stats: SideStats = field(default_factory=SideStats)
    opponent_stats: SideStats = field(default_factory=SideStats)
    phase: Phase = Phase.PLACING
    turn: Side = Side.PLAYER
    turn_locked: bool = False
    turns: int = 0
    winner: Side | None = None
    pending_attack: AttackReport | None = None

    def board_of(self, side: Side) -> Board:
        return self.player_board if side is Side.PLAYER else self.opponent_board

    def shots_of(self, side: Side) -> ShotGrid:
        """Shot grid of cells `side` has fired at."""
        return self.player_shots if side is Side.PLAYER else self.opponent_shots

    def stats_of(self, side: Side) -> SideStats:
        return self.player_stats if side is Side.PLAYER else self.opponent_stats


def create_session() -> GameSession:
    """Create a fresh session in the placing phase."""
    return GameSession()


def place_ship(
    session: GameSession, kind: ShipKind, anchor: Coord, orientation: Orientation
) -> PlacementResult:
    """Place one of the player's ships."""
    if session.phase is not Phase.PLACING:
        raise PlacementLocked(f"Cannot place ships during {session.phase.value}.")
    return session.player_board.place(kind, anchor, orientation)


def unplace_ship(session: GameSession, kind: ShipKind) -> None:
    """Take one of the player's ships back off the board."""
    if session.phase is not Phase.PLACING:
        raise PlacementLocked(f"Cannot move ships during {session.phase.value}.")
    session.player_board.unplace(kind)


def confirm_placement(session: GameSession) -> None:
    """Lock the player's fleet once every ship is on the board."""
    if session.phase is not Phase.PLACING:
        raise WrongPhase(f"Cannot confirm placement during {session.phase.value}.")
    missing = session.player_board.fleet.remaining_to_place()
    if missing:
        raise NotPlaced(f"Unplaced ships: {', '.join(kind.value for kind in missing)}.")
    session.player_board.lock()
    session.phase = Phase.PLACED
    logger.info("placement_confirmed")


def start_battle(session: GameSession, rng: random.Random) -> None:
    """Deploy the opponent fleet and hand the first turn to the player."""
    if session.phase is not Phase.PLACED:
        raise WrongPhase(f"Cannot start battle during {session.phase.value}.")
    if not session.player_board.all_placed():
        raise InternalInvariantViolation("Placement confirmed with an incomplete fleet.")
    place_fleet_randomly(session.opponent_board, rng)
    session.opponent_board.lock()
    session.phase = Phase.IN_BATTLE
    session.turn = Side.PLAYER
    session.turn_locked = False
    logger.info("battle_started")


def resolve_attack(session: GameSession, coord: Coord, attacker: Side) -> AttackReport:
    """Validate an attack, take the turn lock and apply its damage.

    Every rejection happens before any state changes. The lock stays held
    until `complete_turn` runs.
    """
    if session.phase is not Phase.IN_BATTLE:
        raise WrongPhase(f"Cannot attack during {session.phase.value}.")
    if session.turn_locked:
        raise AlreadyLocked("An attack is already being resolved.")
    if session.turn is not attacker:
        raise WrongTurn(attacker, session.turn)
    if not in_bounds(coord.row, coord.col):
        raise OutOfRange(f"Target ({coord.row}, {coord.col}) is off the board.")
    shots = session.shots_of(attacker)
    if shots.is_marked(coord):
        raise CellAlreadyFired(f"{attacker.value} already fired at {coord_label(coord)}.")

    session.turn_locked = True
    shots.mark(coord)
    stats = session.stats_of(attacker)
    stats.shots += 1

    defender = session.board_of(attacker.other)
    kind = defender.kind_at(coord)
    if kind is None:
        report = AttackReport(attacker=attacker, coord=coord, outcome=AttackOutcome.MISS)
    else:
        ship = defender.fleet.ship(kind)
        if coord not in ship.occupied_cells:
            raise InternalInvariantViolation(
                f"Grid cell {coord_label(coord)} maps to {kind.value} but the ship does not cover it."
            )
        hit = ship.apply_hit()
        if not hit.applied:
            raise InternalInvariantViolation(
                f"Hit at {coord_label(coord)} landed on already sunk {kind.value}."
            )
        stats.hits += 1
        if hit.sunk_now:
            report = AttackReport(
                attacker=attacker, coord=coord, outcome=AttackOutcome.SUNK, sunk_kind=kind
            )
        else:
            report = AttackReport(attacker=attacker, coord=coord, outcome=AttackOutcome.HIT)

    session.pending_attack = report
    logger.info(
        "attack_resolved attacker=%s target=%s outcome=%s",
        attacker.value,
        report.label,
        report.outcome.value,
    )
    return report


def complete_turn(session: GameSession) -> TurnReport:
    """Evaluate the win condition, then pass control or end the game."""
    if session.pending_attack is None:
        raise WrongPhase("No resolved attack is awaiting completion.")
    session.pending_attack = None

    if check_win_condition(session):
        session.phase = Phase.OVER
        session.winner = Side.PLAYER if session.opponent_board.fleet.all_sunk() else Side.OPPONENT
        logger.info("game_over winner=%s turns=%d", session.winner.value, session.turns)
        return TurnReport(
            turn=session.turn, turn_number=session.turns, game_over=True, winner=session.winner
        )

    session.turn = session.turn.other
    session.turn_locked = False
    if session.turn is Side.PLAYER:
        session.turns += 1
    return TurnReport(turn=session.turn, turn_number=session.turns, game_over=False)


def attack(session: GameSession, coord: Coord, attacker: Side) -> AttackReport:
    """Resolve an attack and complete its turn in one step."""
    report = resolve_attack(session, coord, attacker)
    complete_turn(session)
    return report


def check_win_condition(session: GameSession) -> bool:
    """Return whether either fleet has been destroyed."""
    return session.opponent_board.fleet.all_sunk() or session.player_board.fleet.all_sunk()


def accuracy_percent(hits: int, shots: int) -> int:
    """Hits over shots as a percentage rounded half up; 0 without shots."""
    if shots <= 0:
        return 0
    return math.floor(hits * 100 / shots + 0.5)


def player_accuracy(session: GameSession) -> int:
    return accuracy_percent(session.player_stats.hits, session.player_stats.shots)


def final_stats(session: GameSession) -> FinalStats:
    """Summarize a finished game."""
    if session.phase is not Phase.OVER or session.winner is None:
        raise WrongPhase("Statistics are only final once the game is over.")
    return FinalStats(
        outcome=GameOutcome.WIN if session.winner is Side.PLAYER else GameOutcome.LOSE,
        enemy_ships_sunk=session.opponent_board.fleet.sunk_count(),
        own_ships_lost=session.player_board.fleet.sunk_count(),
        total_turns=session.turns,
        accuracy=player_accuracy(session),
        hits=session.player_stats.hits,
        shots=session.player_stats.shots,
        opponent_hits=session.opponent_stats.hits,
        opponent_shots=session.opponent_stats.shots,
    )
