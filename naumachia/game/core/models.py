"""Core domain models used by game logic."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

BOARD_SIZE = 10


class Orientation(StrEnum):
    """Ship orientation."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"


class ShipKind(StrEnum):
    """Fixed fleet catalogue."""

    CARRIER = "CARRIER"
    BATTLESHIP = "BATTLESHIP"
    DESTROYER = "DESTROYER"
    SUBMARINE = "SUBMARINE"
    PATROL = "PATROL"

    @property
    def size(self) -> int:
        return SHIP_LENGTHS[self]

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self]

    @property
    def grid_id(self) -> int:
        """Non-zero value stored in occupancy grids for this kind."""
        return FLEET_ORDER.index(self) + 1


SHIP_LENGTHS: dict[ShipKind, int] = {
    ShipKind.CARRIER: 5,
    ShipKind.BATTLESHIP: 4,
    ShipKind.DESTROYER: 3,
    ShipKind.SUBMARINE: 3,
    ShipKind.PATROL: 2,
}

DISPLAY_NAMES: dict[ShipKind, str] = {
    ShipKind.CARRIER: "Quinquereme",
    ShipKind.BATTLESHIP: "Quadrireme",
    ShipKind.DESTROYER: "Trireme",
    ShipKind.SUBMARINE: "Trireme",
    ShipKind.PATROL: "Bireme",
}

FLEET_ORDER: tuple[ShipKind, ...] = (
    ShipKind.CARRIER,
    ShipKind.BATTLESHIP,
    ShipKind.DESTROYER,
    ShipKind.SUBMARINE,
    ShipKind.PATROL,
)


def kind_for_grid_id(grid_id: int) -> ShipKind | None:
    """Map an occupancy grid value back to its ship kind."""
    if grid_id <= 0 or grid_id > len(FLEET_ORDER):
        return None
    return FLEET_ORDER[grid_id - 1]


class Side(StrEnum):
    """Participant owning a board and taking turns."""

    PLAYER = "PLAYER"
    OPPONENT = "OPPONENT"

    @property
    def other(self) -> Side:
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER


class Phase(StrEnum):
    """Game session lifecycle phase."""

    PLACING = "PLACING"
    PLACED = "PLACED"
    IN_BATTLE = "IN_BATTLE"
    OVER = "OVER"


class AttackOutcome(StrEnum):
    """Result of a single accepted attack."""

    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"


class GameOutcome(StrEnum):
    """Final outcome from the human player's point of view."""

    WIN = "win"
    LOSE = "lose"


class PlacementRejection(StrEnum):
    """Reason codes for a failed legality check."""

    OUT_OF_BOUNDS = "OutOfBounds"
    OVERLAP = "Overlap"
    TOO_CLOSE = "TooClose"


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class HitResult:
    """Outcome of applying one hit to a ship."""

    applied: bool
    sunk_now: bool = False


@dataclass(frozen=True, slots=True)
class ShipStatus:
    """Read-only view of a ship."""

    kind: ShipKind
    display_name: str
    size: int
    current_health: int
    max_health: int
    is_sunk: bool
    occupied_cells: tuple[Coord, ...]
    orientation: Orientation | None

    @property
    def is_placed(self) -> bool:
        return bool(self.occupied_cells)


@dataclass(frozen=True, slots=True)
class PlacementResult:
    """Outcome of a placement attempt or preview."""

    kind: ShipKind
    cells: tuple[Coord, ...]
    reason: PlacementRejection | None = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


def cells_for(anchor: Coord, length: int, orientation: Orientation) -> list[Coord]:
    """Compute the cells covered by a ship extending from its anchor."""
    result: list[Coord] = []
    for i in range(length):
        if orientation is Orientation.HORIZONTAL:
            result.append(Coord(anchor.row, anchor.col + i))
        else:
            result.append(Coord(anchor.row + i, anchor.col))
    return result
