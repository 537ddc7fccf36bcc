"""Single vessel health and placement state."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from naumachia.game.core.errors import AlreadyPlaced
from naumachia.game.core.models import Coord, HitResult, Orientation, ShipKind, ShipStatus

logger = logging.getLogger(__name__)


class Ship:
    """Health/damage state machine for one ship of the fleet."""

    __slots__ = ("kind", "max_health", "_current_health", "_cells", "_orientation")

    def __init__(self, kind: ShipKind) -> None:
        self.kind = kind
        self.max_health = kind.size
        self._current_health = kind.size
        self._cells: tuple[Coord, ...] = ()
        self._orientation: Orientation | None = None

    @property
    def current_health(self) -> int:
        return self._current_health

    @property
    def is_sunk(self) -> bool:
        return self._current_health == 0

    @property
    def occupied_cells(self) -> tuple[Coord, ...]:
        return self._cells

    @property
    def orientation(self) -> Orientation | None:
        return self._orientation

    @property
    def is_placed(self) -> bool:
        return bool(self._cells)

    def apply_hit(self) -> HitResult:
        """Take one point of damage; inert once the ship is sunk."""
        if self.is_sunk:
            logger.debug("ship_hit_ignored kind=%s reason=already_sunk", self.kind.value)
            return HitResult(applied=False)
        self._current_health -= 1
        sunk_now = self._current_health == 0
        logger.debug(
            "ship_hit kind=%s health=%d/%d sunk=%s",
            self.kind.value,
            self._current_health,
            self.max_health,
            sunk_now,
        )
        return HitResult(applied=True, sunk_now=sunk_now)

    def set_placement(self, cells: Sequence[Coord], orientation: Orientation) -> None:
        """Record the ship's cells; only valid while unplaced."""
        if self._cells:
            raise AlreadyPlaced(f"{self.kind.value} is already placed.")
        if len(cells) != self.kind.size:
            raise ValueError(
                f"{self.kind.value} needs {self.kind.size} cells, got {len(cells)}."
            )
        self._cells = tuple(cells)
        self._orientation = orientation

    def clear_placement(self) -> None:
        self._cells = ()
        self._orientation = None

    def status(self) -> ShipStatus:
        return ShipStatus(
            kind=self.kind,
            display_name=self.kind.display_name,
            size=self.kind.size,
            current_health=self._current_health,
            max_health=self.max_health,
            is_sunk=self.is_sunk,
            occupied_cells=self._cells,
            orientation=self._orientation,
        )

    def __repr__(self) -> str:
        return (
            f"Ship(kind={self.kind.value}, health={self._current_health}/{self.max_health}, "
            f"cells={len(self._cells)})"
        )
