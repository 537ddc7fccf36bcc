"""Conversions between grid labels like ``C7`` and row/column indices."""

from __future__ import annotations

import re
from collections.abc import Iterator

from naumachia.game.core.errors import InvalidFormat, OutOfRange
from naumachia.game.core.models import BOARD_SIZE, Coord

COLUMNS = "ABCDEFGHIJ"
_LABEL_RE = re.compile(r"([A-Z])([0-9]{1,2})")


def in_bounds(row: int, col: int) -> bool:
    """Return whether the indices fall on the board."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def parse_label(label: str) -> Coord:
    """Resolve a label such as ``A1`` or ``J10`` into a coordinate.

    Raises:
        InvalidFormat: not a single uppercase letter followed by one or two
            digits (leading zeros are not canonical).
        OutOfRange: the column letter is past ``J`` or the row is not 1-10.
    """
    if not isinstance(label, str):
        raise InvalidFormat(f"Invalid coordinate: expected str, got {type(label).__name__}.")
    match = _LABEL_RE.fullmatch(label)
    if match is None:
        raise InvalidFormat(f"Invalid coordinate format: {label!r}.")
    letter, digits = match.groups()
    if len(digits) > 1 and digits.startswith("0"):
        raise InvalidFormat(f"Invalid coordinate format: {label!r}.")
    col = COLUMNS.find(letter)
    if col < 0:
        raise OutOfRange(f"Invalid column: {letter}. Must be A-J.")
    row = int(digits) - 1
    if not 0 <= row < BOARD_SIZE:
        raise OutOfRange(f"Invalid row: {digits}. Must be 1-{BOARD_SIZE}.")
    return Coord(row=row, col=col)


def to_label(row: int, col: int) -> str:
    """Return the canonical label for board indices."""
    if not 0 <= row < BOARD_SIZE:
        raise OutOfRange(f"Invalid row index: {row}. Must be 0-{BOARD_SIZE - 1}.")
    if not 0 <= col < BOARD_SIZE:
        raise OutOfRange(f"Invalid column index: {col}. Must be 0-{BOARD_SIZE - 1}.")
    return f"{COLUMNS[col]}{row + 1}"


def coord_label(coord: Coord) -> str:
    return to_label(coord.row, coord.col)


def is_valid_label(label: str) -> bool:
    try:
        parse_label(label)
    except (InvalidFormat, OutOfRange):
        return False
    return True


def all_coords() -> Iterator[Coord]:
    """Yield every board cell in row-major order."""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            yield Coord(row, col)
