import pytest

from naumachia.game.ai.strategy import AIStrategy
from naumachia.game.app.controller import GameController
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
from naumachia.game.core.coords import all_coords, coord_label
from naumachia.game.core.errors import (
    AlreadyLocked,
    InvalidFormat,
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
    PlacementRejection,
    ShipKind,
    Side,
)
from tests.naumachia.helpers import VALID_LAYOUT, assert_fleet_legal, empty_cells


class _StalledTargeting(AIStrategy):
    """Comes up empty for the first few draws, then fires row-major."""

    def __init__(self, empty_draws: int) -> None:
        self.empty_draws = empty_draws
        self.calls = 0

    def choose_shot(self, shots):
        self.calls += 1
        if self.calls <= self.empty_draws:
            return None
        return next(coord for coord in all_coords() if not shots.is_marked(coord))

    def notify_result(self, coord, outcome) -> None:
        return None


def _ready(controller: GameController) -> None:
    for kind, anchor, orientation in VALID_LAYOUT:
        controller.place_ship(kind, coord_label(anchor), orientation)
    controller.confirm_placement()
    controller.start_battle()


def _open_water(controller: GameController) -> list[str]:
    return [coord_label(c) for c in empty_cells(controller.session.opponent_board)]


def _enemy_cells(controller: GameController) -> list[str]:
    board = controller.session.opponent_board
    return [coord_label(cell) for ship in board.fleet for cell in ship.occupied_cells]


def test_negative_delay_is_rejected() -> None:
    with pytest.raises(ValueError):
        GameController(None, opponent_delay_seconds=-1.0)


def test_placement_events(controller_factory, recorded_events) -> None:
    controller = controller_factory()
    events = recorded_events(controller)

    accepted = controller.place_ship(ShipKind.CARRIER, "A1", Orientation.HORIZONTAL)
    rejected = controller.place_ship(ShipKind.PATROL, "B2", Orientation.HORIZONTAL)
    controller.unplace_ship(ShipKind.CARRIER)

    assert accepted.accepted
    assert rejected.reason is PlacementRejection.TOO_CLOSE
    assert [type(e) for e in events] == [PlacementAccepted, PlacementRejected, ShipRemoved]
    assert events[1].message == "Ship too close to another vessel"
    assert events[0].cells == tuple(Coord(0, c) for c in range(5))


def test_preview_does_not_commit(controller_factory, recorded_events) -> None:
    controller = controller_factory()
    events = recorded_events(controller)
    result = controller.preview_placement(ShipKind.CARRIER, "J1", Orientation.HORIZONTAL)
    assert result.reason is PlacementRejection.OUT_OF_BOUNDS
    ok = controller.preview_placement(ShipKind.CARRIER, Coord(0, 0), Orientation.VERTICAL)
    assert ok.accepted
    assert not controller.ship_status(Side.PLAYER, ShipKind.CARRIER).is_placed
    assert events == []


def test_confirm_requires_every_ship(controller_factory) -> None:
    controller = controller_factory()
    controller.place_ship(ShipKind.CARRIER, "A1", Orientation.HORIZONTAL)
    with pytest.raises(NotPlaced):
        controller.confirm_placement()
    assert controller.phase is Phase.PLACING


def test_randomize_then_confirm_locks_placement(controller_factory, recorded_events) -> None:
    controller = controller_factory()
    controller.place_ship(ShipKind.CARRIER, "A1", Orientation.HORIZONTAL)
    events = recorded_events(controller)

    controller.randomize_placement()
    assert [type(e) for e in events] == [PlacementAccepted] * 5
    assert_fleet_legal(controller.session.player_board)

    controller.confirm_placement()
    assert isinstance(events[-1], PlacementConfirmed)
    with pytest.raises(PlacementLocked):
        controller.randomize_placement()
    with pytest.raises(PlacementLocked):
        controller.unplace_ship(ShipKind.CARRIER)


def test_start_battle_publishes_first_turn(controller_factory, recorded_events) -> None:
    controller = controller_factory()
    events = recorded_events(controller)
    _ready(controller)

    assert events[-2:] == [
        BattleStarted(first_turn=Side.PLAYER),
        TurnChanged(turn=Side.PLAYER, turn_number=0),
    ]
    assert controller.phase is Phase.IN_BATTLE
    assert_fleet_legal(controller.session.opponent_board)


def test_attack_before_battle_is_wrong_phase(controller_factory) -> None:
    controller = controller_factory()
    with pytest.raises(WrongPhase):
        controller.attack("A1")


def test_attack_label_errors(controller_factory) -> None:
    controller = controller_factory()
    _ready(controller)
    with pytest.raises(OutOfRange):
        controller.attack("K1")
    with pytest.raises(InvalidFormat):
        controller.attack("a1")
    assert controller.session.player_stats.shots == 0
    assert controller.turn is Side.PLAYER


def test_opponent_fires_after_delay(controller_factory, recorded_events) -> None:
    controller = controller_factory(delay=1.0)
    _ready(controller)
    events = recorded_events(controller)

    report = controller.attack(_open_water(controller)[0])
    assert report.outcome is AttackOutcome.MISS
    assert [type(e) for e in events] == [AttackResolved, TurnChanged]
    assert events[1] == TurnChanged(turn=Side.OPPONENT, turn_number=0)
    assert controller.opponent_attack_pending
    assert not controller.turn_locked

    with pytest.raises(WrongTurn):
        controller.attack(_open_water(controller)[1])

    assert controller.tick(0.5) == 0
    assert controller.turn is Side.OPPONENT
    assert controller.tick(0.5) == 1
    assert [type(e) for e in events[2:]] == [AttackResolved, TurnChanged]
    assert events[2].attacker is Side.OPPONENT
    assert events[3] == TurnChanged(turn=Side.PLAYER, turn_number=1)
    assert controller.session.opponent_stats.shots == 1
    assert not controller.opponent_attack_pending


def test_zero_delay_runs_on_next_tick(controller_factory) -> None:
    controller = controller_factory(delay=0.0)
    _ready(controller)
    controller.attack(_open_water(controller)[0])
    assert controller.turn is Side.OPPONENT
    controller.tick(0.0)
    assert controller.turn is Side.PLAYER


def test_reentrant_attack_from_listener_is_rejected(controller_factory) -> None:
    controller = controller_factory()
    _ready(controller)
    targets = _open_water(controller)
    locked_during_publish: list[bool] = []

    def fire_again(event: AttackResolved) -> None:
        locked_during_publish.append(controller.turn_locked)
        controller.attack(targets[1])

    controller.events.subscribe(AttackResolved, fire_again)
    with pytest.raises(AlreadyLocked):
        controller.attack(targets[0])

    assert locked_during_publish == [True]
    assert controller.session.player_stats.shots == 1
    assert controller.turn is Side.OPPONENT
    assert not controller.turn_locked
    assert controller.opponent_attack_pending


def test_restart_cancels_pending_opponent_attack(controller_factory, recorded_events) -> None:
    controller = controller_factory()
    _ready(controller)
    controller.attack(_open_water(controller)[0])
    events = recorded_events(controller)

    controller.restart()
    assert isinstance(events[-1], GameRestarted)
    assert not controller.opponent_attack_pending
    controller.tick(5.0)
    assert controller.phase is Phase.PLACING
    assert controller.session.opponent_stats.shots == 0
    assert controller.snapshot().ships_to_place == list(ShipKind)


def test_snapshot_conceals_afloat_enemy_ships(controller_factory) -> None:
    controller = controller_factory()
    _ready(controller)
    patrol = controller.session.opponent_board.fleet.ship(ShipKind.PATROL)
    first, second = (coord_label(c) for c in patrol.occupied_cells)

    controller.attack(first)
    controller.tick(1.0)
    controller.attack(second)

    view = controller.snapshot()
    by_kind = {status.kind: status for status in view.opponent_ships}
    assert by_kind[ShipKind.PATROL].is_sunk
    assert by_kind[ShipKind.PATROL].occupied_cells == patrol.occupied_cells
    assert by_kind[ShipKind.CARRIER].occupied_cells == ()
    assert by_kind[ShipKind.CARRIER].orientation is None
    assert view.player_hits == 2
    assert view.accuracy == 100


def test_full_game_publishes_game_over(controller_factory, recorded_events) -> None:
    controller = controller_factory(delay=0.25)
    _ready(controller)
    events = recorded_events(controller)

    for label in _enemy_cells(controller):
        controller.attack(label)
        controller.tick(0.25)

    assert controller.phase is Phase.OVER
    assert controller.check_win_condition()
    game_over = [e for e in events if isinstance(e, GameOver)]
    assert len(game_over) == 1
    stats = game_over[0].stats
    assert stats.outcome is GameOutcome.WIN
    assert stats.total_turns == 16
    assert stats.hits == stats.shots == 17
    assert stats.accuracy == 100
    assert stats.enemy_ships_sunk == 5
    assert stats.opponent_shots == 16
    assert isinstance(events[-1], GameOver)
    assert not controller.opponent_attack_pending
    assert controller.snapshot().outcome is GameOutcome.WIN
    assert all(status.occupied_cells for status in controller.snapshot().opponent_ships)
    with pytest.raises(WrongPhase):
        controller.attack(_open_water(controller)[0])


def test_exhausted_targeting_retries_on_a_later_tick(
    controller_factory, recorded_events, monkeypatch
) -> None:
    controller = controller_factory(delay=1.0)
    _ready(controller)
    targeting = _StalledTargeting(empty_draws=2)
    monkeypatch.setattr(controller, "_strategy", targeting)
    controller.attack(_open_water(controller)[0])
    events = recorded_events(controller)

    for _ in range(2):
        assert controller.tick(1.0) == 1
        assert events == []
        assert controller.phase is Phase.IN_BATTLE
        assert controller.turn is Side.OPPONENT
        assert not controller.turn_locked
        assert controller.session.opponent_shots.count == 0
        assert controller.opponent_attack_pending
        with pytest.raises(WrongTurn):
            controller.attack(_open_water(controller)[1])

    controller.tick(1.0)
    assert targeting.calls == 3
    assert [type(e) for e in events] == [AttackResolved, TurnChanged]
    assert events[0].attacker is Side.OPPONENT
    assert controller.turn is Side.PLAYER
    assert controller.session.opponent_shots.count == 1
    assert not controller.opponent_attack_pending


def test_restart_clears_a_stalled_opponent_retry(controller_factory, monkeypatch) -> None:
    controller = controller_factory()
    _ready(controller)
    monkeypatch.setattr(controller, "_strategy", _StalledTargeting(empty_draws=100))
    controller.attack(_open_water(controller)[0])
    controller.tick(1.0)
    assert controller.opponent_attack_pending

    controller.restart()
    assert not controller.opponent_attack_pending
    assert controller.scheduler.pending_count == 0
