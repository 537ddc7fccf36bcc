"""Application service-layer helpers."""

from naumachia.game.app.services.battle import (
    build_ai_strategy,
    opponent_target,
    randomize_player_fleet,
)

__all__ = [
    "build_ai_strategy",
    "opponent_target",
    "randomize_player_fleet",
]
