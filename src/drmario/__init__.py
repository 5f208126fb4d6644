"""Pill-drop puzzle engine: match four cells of one colour to clear them."""

from .board import Board, Color, COLS, ROWS
from .pill import Pill, Segment
from .game_state import ClearStep, GameState
from .utils import (
    Command,
    can_move,
    collides,
    command_for_key,
    drop_interval_ms,
    format_score,
    paint,
    render_grid,
    try_rotate,
)

__all__ = [
    "Board",
    "Color",
    "COLS",
    "ROWS",
    "Pill",
    "Segment",
    "ClearStep",
    "GameState",
    "Command",
    "can_move",
    "collides",
    "command_for_key",
    "drop_interval_ms",
    "format_score",
    "paint",
    "render_grid",
    "try_rotate",
]
