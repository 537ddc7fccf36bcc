from __future__ import annotations

from itertools import combinations

from naumachia.game.core import rules
from naumachia.game.core.board import Board
from naumachia.game.core.coords import all_coords
from naumachia.game.core.models import Coord, Orientation, Phase, ShipKind, Side
from naumachia.game.core.rules import GameSession

VALID_LAYOUT: tuple[tuple[ShipKind, Coord, Orientation], ...] = (
    (ShipKind.CARRIER, Coord(0, 0), Orientation.HORIZONTAL),
    (ShipKind.BATTLESHIP, Coord(2, 0), Orientation.HORIZONTAL),
    (ShipKind.DESTROYER, Coord(4, 0), Orientation.HORIZONTAL),
    (ShipKind.SUBMARINE, Coord(6, 0), Orientation.HORIZONTAL),
    (ShipKind.PATROL, Coord(8, 0), Orientation.HORIZONTAL),
)


def place_layout(board: Board, layout=VALID_LAYOUT) -> None:
    for kind, anchor, orientation in layout:
        result = board.place(kind, anchor, orientation)
        assert result.accepted, result.reason


def assert_fleet_legal(board: Board) -> None:
    ships = list(board.fleet)
    assert all(ship.is_placed for ship in ships)
    for ship in ships:
        assert len(ship.occupied_cells) == ship.kind.size
        for cell in ship.occupied_cells:
            assert board.kind_at(cell) is ship.kind
    occupied = sum(ship.kind.size for ship in ships)
    assert int((board.grid != 0).sum()) == occupied
    for first, second in combinations(ships, 2):
        for a in first.occupied_cells:
            for b in second.occupied_cells:
                assert max(abs(a.row - b.row), abs(a.col - b.col)) > 1


def battle_session(rng) -> GameSession:
    session = rules.create_session()
    place_layout(session.player_board)
    rules.confirm_placement(session)
    rules.start_battle(session, rng)
    return session


def opponent_ship_cells(session: GameSession) -> list[Coord]:
    return [cell for ship in session.opponent_board.fleet for cell in ship.occupied_cells]


def empty_cells(board: Board) -> list[Coord]:
    return [coord for coord in all_coords() if board.kind_at(coord) is None]


def play_player_win(session: GameSession) -> None:
    """Player hits every enemy cell while the opponent only fires at open water."""
    misses = iter(empty_cells(session.player_board))
    for target in opponent_ship_cells(session):
        rules.attack(session, target, Side.PLAYER)
        if session.phase is Phase.OVER:
            return
        rules.attack(session, next(misses), Side.OPPONENT)
