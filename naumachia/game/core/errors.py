"""Game engine exception taxonomy."""

from __future__ import annotations

from naumachia.game.core.models import Side


class NaumachiaError(Exception):
    """Base class for every engine error."""


class CoordinateError(NaumachiaError, ValueError):
    """Coordinate label or index could not be resolved."""


class InvalidFormat(CoordinateError):
    """Label is not a letter followed by a row number."""


class OutOfRange(CoordinateError):
    """Label or indices resolve outside the 10x10 grid."""


class PlacementLifecycleError(NaumachiaError):
    """Ship placement was used out of order."""


class AlreadyPlaced(PlacementLifecycleError):
    """Ship already has a placement; unplace it first."""


class NotPlaced(PlacementLifecycleError):
    """Ship has no placement to remove."""


class SequencingError(NaumachiaError):
    """Command issued at the wrong point of the game."""


class WrongPhase(SequencingError):
    """Command is not valid in the current phase."""


class PlacementLocked(WrongPhase):
    """Placement was confirmed and can no longer change."""


class WrongTurn(SequencingError):
    """Attacker does not own the current turn."""

    def __init__(self, attacker: Side, turn: Side) -> None:
        super().__init__(f"{attacker.value} attacked during {turn.value} turn.")
        self.attacker = attacker
        self.turn = turn


class AlreadyLocked(SequencingError):
    """Another attack is still being applied."""


class CellAlreadyFired(SequencingError):
    """Attacker already fired at this cell."""


class InternalInvariantViolation(NaumachiaError, RuntimeError):
    """Grids and fleet state diverged; the session cannot continue."""
