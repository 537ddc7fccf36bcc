"""Notifications published by the game controller."""

from __future__ import annotations

from dataclasses import dataclass

from naumachia.game.core.models import (
    AttackOutcome,
    Coord,
    Orientation,
    PlacementRejection,
    ShipKind,
    Side,
)
from naumachia.game.core.rules import FinalStats


@dataclass(frozen=True, slots=True)
class PlacementAccepted:
    """Player ship committed to the board."""

    kind: ShipKind
    cells: tuple[Coord, ...]
    orientation: Orientation


@dataclass(frozen=True, slots=True)
class PlacementRejected:
    """Player placement failed the legality check."""

    kind: ShipKind
    reason: PlacementRejection
    message: str


@dataclass(frozen=True, slots=True)
class ShipRemoved:
    kind: ShipKind


@dataclass(frozen=True, slots=True)
class PlacementConfirmed:
    pass


@dataclass(frozen=True, slots=True)
class BattleStarted:
    first_turn: Side


@dataclass(frozen=True, slots=True)
class AttackResolved:
    """Outcome of one attack by either side."""

    attacker: Side
    coord: Coord
    label: str
    outcome: AttackOutcome
    sunk_kind: ShipKind | None = None


@dataclass(frozen=True, slots=True)
class TurnChanged:
    turn: Side
    turn_number: int


@dataclass(frozen=True, slots=True)
class GameOver:
    """Terminal notification with the final statistics."""

    stats: FinalStats


@dataclass(frozen=True, slots=True)
class GameRestarted:
    pass
