"""Fixed five-ship fleet and its aggregate status."""

from __future__ import annotations

from collections.abc import Iterator

from naumachia.game.core.models import FLEET_ORDER, ShipKind, ShipStatus
from naumachia.game.core.ship import Ship


class Fleet:
    """One ship per kind, in fleet order."""

    def __init__(self) -> None:
        self._ships: dict[ShipKind, Ship] = {kind: Ship(kind) for kind in FLEET_ORDER}

    def __iter__(self) -> Iterator[Ship]:
        return iter(self._ships.values())

    def __len__(self) -> int:
        return len(self._ships)

    def ship(self, kind: ShipKind) -> Ship:
        """Return the mutable ship for engine-internal updates."""
        return self._ships[kind]

    def status_of(self, kind: ShipKind) -> ShipStatus:
        """Return a read-only view of one ship."""
        return self._ships[kind].status()

    def statuses(self) -> list[ShipStatus]:
        return [ship.status() for ship in self._ships.values()]

    def all_sunk(self) -> bool:
        """Return whether every ship has been sunk."""
        return all(ship.is_sunk for ship in self._ships.values())

    def sunk_count(self) -> int:
        return sum(1 for ship in self._ships.values() if ship.is_sunk)

    def all_placed(self) -> bool:
        return all(ship.is_placed for ship in self._ships.values())

    def placed_count(self) -> int:
        return sum(1 for ship in self._ships.values() if ship.is_placed)

    def remaining_to_place(self) -> list[ShipKind]:
        return [kind for kind, ship in self._ships.items() if not ship.is_placed]
