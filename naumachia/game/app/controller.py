"""Application controller: command/query API over a restartable game session."""

from __future__ import annotations

import logging
import random

from naumachia.game.app.event_bus import EventBus
from naumachia.game.app.events import (
    AttackResolved,
    BattleStarted,
    GameOver,
    GameRestarted,
    PlacementAccepted,
    PlacementConfirmed,
    PlacementRejected,
    ShipRemoved,
    TurnChanged,
)
from naumachia.game.app.scheduler import Scheduler
from naumachia.game.app.services.battle import (
    build_ai_strategy,
    opponent_target,
    randomize_player_fleet,
)
from naumachia.game.app.view_state import GameView, build_game_view
from naumachia.game.core import rules
from naumachia.game.core.board import rejection_message
from naumachia.game.core.coords import parse_label
from naumachia.game.core.errors import InternalInvariantViolation
from naumachia.game.core.models import (
    Coord,
    Orientation,
    Phase,
    PlacementResult,
    ShipKind,
    ShipStatus,
    Side,
)
from naumachia.game.core.rules import AttackReport, GameSession

logger = logging.getLogger(__name__)

DEFAULT_OPPONENT_DELAY_SECONDS = 1.0


class GameController:
    """Owns the session, publishes notifications and paces the opponent."""

    def __init__(
        self,
        rng: random.Random,
        *,
        opponent_delay_seconds: float = DEFAULT_OPPONENT_DELAY_SECONDS,
        event_bus: EventBus | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        if opponent_delay_seconds < 0.0:
            raise ValueError("opponent_delay_seconds must be >= 0")
        self._rng = rng
        self._opponent_delay = opponent_delay_seconds
        self.events = event_bus if event_bus is not None else EventBus()
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self._session = rules.create_session()
        self._strategy = build_ai_strategy(rng)
        self._opponent_task: int | None = None

    @property
    def session(self) -> GameSession:
        """Current session; mutate it only through controller commands."""
        return self._session

    @property
    def phase(self) -> Phase:
        return self._session.phase

    @property
    def turn(self) -> Side:
        return self._session.turn

    @property
    def turn_locked(self) -> bool:
        return self._session.turn_locked

    @property
    def accuracy(self) -> int:
        return rules.player_accuracy(self._session)

    @property
    def opponent_attack_pending(self) -> bool:
        return self._opponent_task is not None and self.scheduler.is_pending(self._opponent_task)

    def snapshot(self) -> GameView:
        return build_game_view(self._session)

    def ship_status(self, side: Side, kind: ShipKind) -> ShipStatus:
        return self._session.board_of(side).fleet.status_of(kind)

    def check_win_condition(self) -> bool:
        return rules.check_win_condition(self._session)

    def preview_placement(
        self, kind: ShipKind, anchor: Coord | str, orientation: Orientation
    ) -> PlacementResult:
        """Evaluate a placement for the player's board without committing it."""
        return self._session.player_board.check(kind, _coerce_coord(anchor), orientation)

    def place_ship(
        self, kind: ShipKind, anchor: Coord | str, orientation: Orientation
    ) -> PlacementResult:
        """Place a player ship; rejections are reported, not raised."""
        result = rules.place_ship(self._session, kind, _coerce_coord(anchor), orientation)
        if result.reason is not None:
            self.events.publish(
                PlacementRejected(
                    kind=kind, reason=result.reason, message=rejection_message(result.reason)
                )
            )
            return result
        logger.info("ship_placed kind=%s cells=%d", kind.value, len(result.cells))
        self.events.publish(
            PlacementAccepted(kind=kind, cells=result.cells, orientation=orientation)
        )
        return result

    def unplace_ship(self, kind: ShipKind) -> None:
        rules.unplace_ship(self._session, kind)
        logger.info("ship_removed kind=%s", kind.value)
        self.events.publish(ShipRemoved(kind=kind))

    def randomize_placement(self) -> None:
        """Replace the player's layout with a random legal fleet."""
        randomize_player_fleet(self._session, self._rng)
        for ship in self._session.player_board.fleet:
            self.events.publish(
                PlacementAccepted(
                    kind=ship.kind, cells=ship.occupied_cells, orientation=ship.orientation
                )
            )

    def confirm_placement(self) -> None:
        rules.confirm_placement(self._session)
        self.events.publish(PlacementConfirmed())

    def start_battle(self) -> None:
        try:
            rules.start_battle(self._session, self._rng)
        except InternalInvariantViolation:
            logger.exception("opponent_fleet_placement_failed")
            raise
        self.events.publish(BattleStarted(first_turn=self._session.turn))
        self.events.publish(TurnChanged(turn=self._session.turn, turn_number=self._session.turns))

    def attack(self, target: Coord | str) -> AttackReport:
        """Fire at the opponent's board on behalf of the player."""
        return self._attack(_coerce_coord(target), Side.PLAYER)

    def tick(self, delta_seconds: float) -> int:
        """Advance the pacing clock; runs a due opponent attack."""
        return self.scheduler.advance(delta_seconds)

    def restart(self) -> None:
        """Discard the session and begin a fresh placement phase."""
        self.scheduler.cancel_all()
        self._opponent_task = None
        self._session = rules.create_session()
        self._strategy = build_ai_strategy(self._rng)
        logger.info("game_restarted")
        self.events.publish(GameRestarted())

    def _attack(self, coord: Coord, attacker: Side) -> AttackReport:
        try:
            report = rules.resolve_attack(self._session, coord, attacker)
        except InternalInvariantViolation:
            logger.exception("session_invariant_violation attacker=%s", attacker.value)
            raise
        # Listeners react while the turn lock is still held; the accepted
        # attack completes even if one of them raises.
        try:
            self.events.publish(
                AttackResolved(
                    attacker=report.attacker,
                    coord=report.coord,
                    label=report.label,
                    outcome=report.outcome,
                    sunk_kind=report.sunk_kind,
                )
            )
        finally:
            turn = rules.complete_turn(self._session)
            if not turn.game_over and turn.turn is Side.OPPONENT:
                self._schedule_opponent_attack()

        if attacker is Side.OPPONENT:
            self._strategy.notify_result(report.coord, report.outcome)
        if turn.game_over:
            stats = rules.final_stats(self._session)
            logger.info(
                "game_finished outcome=%s",
                stats.outcome.value,
                extra={"turns": stats.total_turns, "accuracy": stats.accuracy},
            )
            self.events.publish(GameOver(stats=stats))
        else:
            self.events.publish(TurnChanged(turn=turn.turn, turn_number=turn.turn_number))
        return report

    def _schedule_opponent_attack(self) -> None:
        if self.opponent_attack_pending:
            return
        self._opponent_task = self.scheduler.call_later(
            self._opponent_delay, self._run_opponent_attack, label="opponent_attack"
        )

    def _run_opponent_attack(self) -> None:
        self._opponent_task = None
        coord = opponent_target(self._session, self._strategy)
        if coord is None:
            # Exhausted draws are a no-op attack; retry on a later tick.
            if self._session.phase is Phase.IN_BATTLE and self._session.turn is Side.OPPONENT:
                self._schedule_opponent_attack()
            return
        self._attack(coord, Side.OPPONENT)


def _coerce_coord(target: Coord | str) -> Coord:
    if isinstance(target, Coord):
        return target
    return parse_label(target)
