from __future__ import annotations

import logging
import random

import pytest

from naumachia.game.app.controller import GameController
from naumachia.game.core.board import Board
from naumachia.game.infra.logging import shutdown_logging
from tests.naumachia.helpers import VALID_LAYOUT, place_layout


@pytest.fixture
def valid_layout():
    return VALID_LAYOUT


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def placed_board() -> Board:
    board = Board()
    place_layout(board)
    return board


@pytest.fixture
def controller_factory():
    def _make(seed: int = 1337, delay: float = 1.0) -> GameController:
        return GameController(random.Random(seed), opponent_delay_seconds=delay)

    return _make


@pytest.fixture
def recorded_events():
    """Attach to a controller's bus and collect everything it publishes."""

    def _attach(controller: GameController) -> list[object]:
        events: list[object] = []
        controller.events.subscribe_all(events.append)
        return events

    return _attach


@pytest.fixture
def restore_root_logging():
    """Undo root logger reconfiguration done by the code under test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    shutdown_logging()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
