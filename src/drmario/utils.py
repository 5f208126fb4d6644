"""Utility helpers for the pill puzzle engine."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Tuple

from .board import Board, COLOR_VALUES, VALUE_COLORS, Color
from .pill import Pill

if TYPE_CHECKING:  # pragma: no cover
    from .game_state import GameState


MIN_LEVEL = 1
MAX_LEVEL = 10
DEFAULT_LEVEL = 5

# Candidate pivot shifts tried in order when rotating: in place, floor kick,
# wall kick left, wall kick right.
KICK_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 0), (0, -1), (-1, 0), (1, 0))

DrawCell = Callable[[int, int, Color, bool], None]


class Command(str, Enum):
    """Discrete player inputs understood by the game state."""

    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    ROTATE = "rotate"


# Browser ``KeyboardEvent.key`` values, lower-cased.
KEY_BINDINGS: Dict[str, Command] = {
    "a": Command.LEFT,
    "arrowleft": Command.LEFT,
    "d": Command.RIGHT,
    "arrowright": Command.RIGHT,
    "s": Command.DOWN,
    "arrowdown": Command.DOWN,
    "w": Command.ROTATE,
    "arrowup": Command.ROTATE,
    " ": Command.ROTATE,
}


def clamp_level(level: int) -> int:
    return max(MIN_LEVEL, min(MAX_LEVEL, int(level)))


def drop_interval_ms(level: int) -> float:
    """Return the fall interval in milliseconds for speed ``level``.

    The mapping is linear: level 1 drops once a second and every level above
    it shaves off 100ms.  Levels outside ``MIN_LEVEL..MAX_LEVEL`` are clamped.
    """

    return float(1100 - clamp_level(level) * 100)


def collides(board: Board, pill: Pill, x: int, y: int, rotation: int) -> bool:
    """Return ``True`` if ``pill`` placed at ``(x, y, rotation)`` is blocked.

    A half is blocked when it leaves the board sideways, sinks below the
    floor, or lands on an occupied cell.  Halves above the top edge (negative
    ``y``) only have their column checked.
    """

    for seg in pill.segments(x, y, rotation):
        if seg.x < 0 or seg.x >= board.width or seg.y >= board.height:
            return True
        if seg.y >= 0 and not board.is_empty(seg.y, seg.x):
            return True
    return False


def can_move(board: Board, pill: Pill, dx: int, dy: int) -> bool:
    """Return ``True`` if ``pill`` can move by ``dx`` and ``dy`` on ``board``."""

    return not collides(board, pill, pill.x + dx, pill.y + dy, pill.rotation)


def try_rotate(board: Board, pill: Pill) -> bool:
    """Rotate ``pill`` a quarter turn, kicking it if the turn is blocked.

    The first offset in ``KICK_OFFSETS`` whose placement is free wins.  When
    every candidate collides the pill is left untouched and ``False`` is
    returned.
    """

    rotation = (pill.rotation + 1) % 4
    for dx, dy in KICK_OFFSETS:
        x, y = pill.x + dx, pill.y + dy
        if not collides(board, pill, x, y, rotation):
            pill.place(x, y, rotation)
            return True
    return False


def render_grid(board: Board, active: Optional[Pill] = None) -> List[List[int]]:
    """Return a copy of the board grid with the active pill overlaid.

    Halves outside the visible grid are skipped.
    """

    grid = [[int(v) for v in row] for row in board.grid]
    if active is not None:
        for seg in active.segments():
            if board.in_bounds(seg.y, seg.x):
                grid[seg.y][seg.x] = COLOR_VALUES[seg.color]
    return grid


def iter_cells(state: "GameState") -> Iterator[Tuple[int, int, Color, bool]]:
    """Yield ``(x, y, color, clearing)`` for everything visible this frame.

    Locked cells come first, then cells still fading out of the last clear,
    then the active pill.
    """

    board = state.board
    for row in range(board.height):
        for col in range(board.width):
            value = int(board.grid[row, col])
            if value:
                yield col, row, VALUE_COLORS[value], False
    for (row, col), color in state.clearing.items():
        if board.is_empty(row, col):
            yield col, row, color, True
    if state.active is not None:
        for seg in state.active.segments():
            if board.in_bounds(seg.y, seg.x):
                yield seg.x, seg.y, seg.color, False


def paint(state: "GameState", draw_cell: DrawCell) -> None:
    """Feed every visible cell of ``state`` to ``draw_cell``."""

    for x, y, color, clearing in iter_cells(state):
        draw_cell(x, y, color, clearing)


def format_score(score: int) -> str:
    return str(score).zfill(6)


def command_for_key(key: str) -> Optional[Command]:
    """Map a browser key name to a game command, ignoring case."""

    return KEY_BINDINGS.get(key.lower())
