"""Terminal entry point for playing against the scripted opponent."""

from __future__ import annotations

import argparse
import logging
import random
import time
from collections.abc import Callable, Sequence

from naumachia.game.app.controller import GameController
from naumachia.game.app.events import (
    AttackResolved,
    GameOver,
    PlacementAccepted,
    PlacementRejected,
    ShipRemoved,
    TurnChanged,
)
from naumachia.game.app.view_state import GameView, ShotMark
from naumachia.game.core.coords import COLUMNS, is_valid_label
from naumachia.game.core.errors import InternalInvariantViolation, NaumachiaError
from naumachia.game.core.models import BOARD_SIZE, Orientation, ShipKind, Side
from naumachia.game.infra.config import GameSettings, load_default_env_files
from naumachia.game.infra.logging import setup_logging, shutdown_logging

logger = logging.getLogger(__name__)

HELP = """Commands:
  place <ship> <cell> <h|v>   e.g. place carrier A1 h
  remove <ship>               take a ship back during placement
  random                      deal a random legal fleet
  confirm                     lock the fleet
  start                       begin the battle
  fire <cell> | <cell>        attack the enemy board, e.g. fire C7
  board                       show both boards
  restart                     abandon this game and start over
  quit"""

_ORIENTATIONS = {"h": Orientation.HORIZONTAL, "v": Orientation.VERTICAL}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="naumachia", description=__doc__)
    parser.add_argument("--seed", type=int, default=None, help="seed for the opponent's dice")
    parser.add_argument(
        "--delay", type=float, default=None, help="seconds before the opponent fires"
    )
    parser.add_argument("--no-log-file", action="store_true", help="log to the console only")
    return parser


def render_board(view: GameView, side: Side) -> str:
    """Draw one board: own ships for the player, known marks for the enemy."""
    marks = view.opponent_targets if side is Side.PLAYER else view.player_targets
    lines = ["    " + " ".join(COLUMNS[:BOARD_SIZE])]
    for row in range(BOARD_SIZE):
        cells = []
        for col in range(BOARD_SIZE):
            mark = marks[row][col]
            if mark is ShotMark.HIT:
                cells.append("X")
            elif mark is ShotMark.MISS:
                cells.append("o")
            elif side is Side.PLAYER and view.player_occupancy[row][col] is not None:
                cells.append("#")
            else:
                cells.append(".")
        lines.append(f"{row + 1:>3} " + " ".join(cells))
    return "\n".join(lines)


def _subscribe_printer(controller: GameController, out: Callable[[str], None]) -> None:
    def on_attack(event: AttackResolved) -> None:
        who = "You" if event.attacker is Side.PLAYER else "Enemy"
        if event.sunk_kind is not None:
            out(f"{who} fired at {event.label}: {event.sunk_kind.display_name} destroyed!")
        else:
            out(f"{who} fired at {event.label}: {event.outcome.value}.")

    def on_game_over(event: GameOver) -> None:
        stats = event.stats
        out(
            f"Game over: you {stats.outcome.value}. Turns {stats.total_turns}, "
            f"hits {stats.hits}/{stats.shots}, accuracy {stats.accuracy}%, "
            f"enemy ships sunk {stats.enemy_ships_sunk}, ships lost {stats.own_ships_lost}."
        )

    controller.events.subscribe(AttackResolved, on_attack)
    controller.events.subscribe(GameOver, on_game_over)
    controller.events.subscribe(
        PlacementAccepted, lambda e: out(f"{e.kind.display_name} placed.")
    )
    controller.events.subscribe(PlacementRejected, lambda e: out(f"Rejected: {e.message}."))
    controller.events.subscribe(ShipRemoved, lambda e: out(f"{e.kind.display_name} removed."))
    controller.events.subscribe(
        TurnChanged,
        lambda e: out("Your command." if e.turn is Side.PLAYER else "Enemy maneuvers..."),
    )


def _wait_for_opponent(controller: GameController, sleep: Callable[[float], None]) -> None:
    while controller.opponent_attack_pending:
        due = controller.scheduler.next_due()
        delay = max(0.0, (due or 0.0) - controller.scheduler.now_seconds)
        sleep(delay)
        controller.tick(delay)


def run_command(controller: GameController, line: str, out: Callable[[str], None]) -> bool:
    """Execute one command line; returns False when the player quits."""
    parts = line.split()
    if not parts:
        return True
    command, args = parts[0].lower(), parts[1:]
    if command in {"quit", "exit", "q"}:
        return False
    if command == "help":
        out(HELP)
    elif command == "place" and len(args) == 3:
        orientation = _ORIENTATIONS.get(args[2].lower())
        if orientation is None:
            out("Orientation must be h or v.")
        else:
            controller.place_ship(ShipKind(args[0].upper()), args[1].upper(), orientation)
    elif command == "remove" and len(args) == 1:
        controller.unplace_ship(ShipKind(args[0].upper()))
    elif command == "random":
        controller.randomize_placement()
    elif command == "confirm":
        controller.confirm_placement()
        out("Placement confirmed. Ships are locked.")
    elif command == "start":
        controller.start_battle()
    elif command == "board":
        view = controller.snapshot()
        out("Enemy waters:\n" + render_board(view, Side.OPPONENT))
        out("Your fleet:\n" + render_board(view, Side.PLAYER))
    elif command == "restart":
        controller.restart()
        out("New game. Place your fleet.")
    elif command == "fire" and len(args) == 1:
        controller.attack(args[0].upper())
    elif len(parts) == 1 and is_valid_label(command.upper()):
        controller.attack(command.upper())
    else:
        out("Unknown command. Type help.")
    return True


def main(argv: Sequence[str] | None = None) -> None:
    """Run the Naumachia terminal game."""
    args = build_parser().parse_args(argv)
    load_default_env_files()
    settings = GameSettings.from_env()
    setup_logging(level_name=settings.log_level, write_file=not args.no_log_file)
    seed = args.seed if args.seed is not None else settings.seed
    delay = args.delay if args.delay is not None else settings.opponent_delay_seconds
    logger.info("game_start seed=%s opponent_delay=%.2f", seed, delay)

    controller = GameController(random.Random(seed), opponent_delay_seconds=delay)
    _subscribe_printer(controller, print)
    print(HELP)
    try:
        while True:
            try:
                line = input("> ")
            except EOFError:
                break
            try:
                if not run_command(controller, line, print):
                    break
            except InternalInvariantViolation:
                raise
            except (NaumachiaError, ValueError) as exc:
                print(f"Cannot do that: {exc}")
                continue
            _wait_for_opponent(controller, time.sleep)
    finally:
        shutdown_logging()


if __name__ == "__main__":
    main()
