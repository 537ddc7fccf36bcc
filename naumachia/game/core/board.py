"""Occupancy and shot grids with placement legality rules."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from naumachia.game.core.coords import in_bounds
from naumachia.game.core.errors import AlreadyPlaced, NotPlaced, PlacementLocked
from naumachia.game.core.fleet import Fleet
from naumachia.game.core.models import (
    BOARD_SIZE,
    Coord,
    Orientation,
    PlacementRejection,
    PlacementResult,
    ShipKind,
    cells_for,
    kind_for_grid_id,
)

logger = logging.getLogger(__name__)

_REJECTION_MESSAGES: dict[PlacementRejection, str] = {
    PlacementRejection.OUT_OF_BOUNDS: "Ship extends outside grid boundaries",
    PlacementRejection.OVERLAP: "Ship overlaps with another ship",
    PlacementRejection.TOO_CLOSE: "Ship too close to another vessel",
}


def rejection_message(reason: PlacementRejection) -> str:
    """Human-readable text for a rejection code."""
    return _REJECTION_MESSAGES[reason]


@dataclass(slots=True)
class Board:
    """Numpy-backed occupancy grid owning one side's fleet."""

    fleet: Fleet = field(default_factory=Fleet)
    grid: np.ndarray = field(
        default_factory=lambda: np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    )
    locked: bool = False

    def kind_at(self, coord: Coord) -> ShipKind | None:
        """Return the ship kind covering a cell, if any."""
        return kind_for_grid_id(int(self.grid[coord.row, coord.col]))

    def is_occupied(self, row: int, col: int) -> bool:
        return bool(self.grid[row, col] != 0)

    def legality(self, cells: Sequence[Coord]) -> PlacementRejection | None:
        """Run the bounds, overlap and adjacency rules in order."""
        for cell in cells:
            if not in_bounds(cell.row, cell.col):
                return PlacementRejection.OUT_OF_BOUNDS
        for cell in cells:
            if self.is_occupied(cell.row, cell.col):
                return PlacementRejection.OVERLAP
        if self._touches_existing(cells):
            return PlacementRejection.TOO_CLOSE
        return None

    def check(
        self,
        kind: ShipKind,
        anchor: Coord,
        orientation: Orientation,
        length: int | None = None,
    ) -> PlacementResult:
        """Evaluate a placement without mutating the board."""
        cells = tuple(cells_for(anchor, self._resolve_length(kind, length), orientation))
        return PlacementResult(kind=kind, cells=cells, reason=self.legality(cells))

    def place(
        self,
        kind: ShipKind,
        anchor: Coord,
        orientation: Orientation,
        length: int | None = None,
    ) -> PlacementResult:
        """Place a ship if legal; grid and ship are updated together."""
        if self.locked:
            raise PlacementLocked("Placement is locked.")
        ship = self.fleet.ship(kind)
        if ship.is_placed:
            raise AlreadyPlaced(f"{kind.value} is already placed; unplace it first.")
        result = self.check(kind, anchor, orientation, length)
        if not result.accepted:
            logger.debug(
                "placement_rejected kind=%s anchor=(%d,%d) orientation=%s reason=%s",
                kind.value,
                anchor.row,
                anchor.col,
                orientation.value,
                result.reason,
            )
            return result
        ship.set_placement(result.cells, orientation)
        for cell in result.cells:
            self.grid[cell.row, cell.col] = kind.grid_id
        return result

    def unplace(self, kind: ShipKind) -> None:
        """Remove a placed ship from the grid."""
        if self.locked:
            raise PlacementLocked("Placement is locked after confirmation.")
        ship = self.fleet.ship(kind)
        if not ship.is_placed:
            raise NotPlaced(f"{kind.value} is not placed.")
        for cell in ship.occupied_cells:
            self.grid[cell.row, cell.col] = 0
        ship.clear_placement()

    def lock(self) -> None:
        self.locked = True

    def all_placed(self) -> bool:
        return self.fleet.all_placed()

    def occupancy(self) -> list[list[ShipKind | None]]:
        """Row-major copy of the grid as ship kinds."""
        return [[kind_for_grid_id(int(value)) for value in row] for row in self.grid]

    def _touches_existing(self, cells: Sequence[Coord]) -> bool:
        own = {(cell.row, cell.col) for cell in cells}
        for cell in cells:
            for dr in (-1, 0, 1):
                for dc in (-1, 0, 1):
                    rr = cell.row + dr
                    cc = cell.col + dc
                    if (rr, cc) in own or not in_bounds(rr, cc):
                        continue
                    if self.grid[rr, cc] != 0:
                        return True
        return False

    @staticmethod
    def _resolve_length(kind: ShipKind, length: int | None) -> int:
        if length is None:
            return kind.size
        if length != kind.size:
            raise ValueError(f"{kind.value} has length {kind.size}, got {length}.")
        return length


@dataclass(slots=True)
class ShotGrid:
    """Cells one side has fired upon; marks are never cleared."""

    marks: np.ndarray = field(
        default_factory=lambda: np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.bool_)
    )

    def is_marked(self, coord: Coord) -> bool:
        return bool(self.marks[coord.row, coord.col])

    def mark(self, coord: Coord) -> None:
        self.marks[coord.row, coord.col] = True

    @property
    def count(self) -> int:
        return int(np.count_nonzero(self.marks))
