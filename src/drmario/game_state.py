"""High level game state container.

``GameState`` owns the bottle, the active pill, the preview pair and the
score.  Front-ends drive it with :meth:`GameState.tick` on a timer and
:meth:`GameState.handle` for player input, then poll it to draw a frame.
Locking a pill resolves the whole clear/gravity cascade synchronously so a
tick never leaves the board in an intermediate state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple
import logging
import random

from .board import Board, Cell, Color
from .pill import Pill
from .utils import (
    DEFAULT_LEVEL,
    Command,
    can_move,
    clamp_level,
    collides,
    drop_interval_ms,
    try_rotate,
)


LOGGER = logging.getLogger(__name__)

POINTS_PER_CELL = 10
# How long cleared cells stay visible as "popping" orbs.
CLEAR_DELAY_MS = 150.0

ColorPair = Tuple[Color, Color]


@dataclass(frozen=True)
class ClearStep:
    """One pass of the clear cascade triggered by a lock."""

    chain: int
    cells: FrozenSet[Cell]
    points: int


@dataclass
class GameState:
    """Mutable state for a single game session."""

    board: Board = field(default_factory=Board)
    active: Optional[Pill] = None
    next_colors: Optional[ColorPair] = None
    score: int = 0
    level: int = DEFAULT_LEVEL
    pieces: int = 0
    games_played: int = 0
    last_cleared: int = 0
    last_chain: int = 0
    clearing: Dict[Cell, Color] = field(default_factory=dict)
    clearing_ms: float = 0.0
    on_game_over: Optional[Callable[[int], None]] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        self._resolving = False

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------
    def _random_pair(self) -> ColorPair:
        """Return two independently chosen colours."""

        palette = list(Color)
        return self._rng.choice(palette), self._rng.choice(palette)

    def spawn_pill(self) -> Pill:
        """Spawn and return a new active pill.

        The colours in ``next_colors`` become the active pill and a new preview
        pair is drawn.  If the spawn cells are already occupied the game ends.
        """

        colors = self.next_colors or self._random_pair()
        self.active = Pill(colors)
        self.next_colors = self._random_pair()
        if collides(self.board, self.active, self.active.x, self.active.y, self.active.rotation):
            self.game_over()
        return self.active

    # ------------------------------------------------------------------
    # Locking and clearing
    # ------------------------------------------------------------------
    def lock_pill(self) -> None:
        """Write the active pill into the board, resolve clears and respawn.

        The clear passes are summarised in ``last_cleared``, ``last_chain`` and
        ``clearing``; call :meth:`resolve` directly for the per-pass records.
        """

        if self.active is None:
            return
        self._resolving = True
        try:
            for seg in self.active.segments():
                if seg.y >= 0:
                    self.board.place(seg.y, seg.x, seg.color)
            self.pieces += 1
            self.resolve()
            self.spawn_pill()
        finally:
            self._resolving = False

    def resolve(self) -> List[ClearStep]:
        """Clear runs and let the board settle until nothing changes.

        Every pass removes all current runs at once, scores them and drops
        the floating cells; the next pass looks for runs formed by the fall.
        Gravity only runs once something has been cleared.
        """

        steps: List[ClearStep] = []
        popped: Dict[Cell, Color] = {}
        while True:
            matches = self.board.find_matches()
            if not matches:
                break
            for row, col in matches:
                color = self.board.get_color(row, col)
                if color is not None:
                    popped[(row, col)] = color
            cleared = self.board.clear_cells(matches)
            points = cleared * POINTS_PER_CELL
            self.score += points
            steps.append(ClearStep(len(steps) + 1, frozenset(matches), points))
            self.board.apply_gravity()

        self.last_cleared = sum(len(step.cells) for step in steps)
        self.last_chain = len(steps)
        if steps:
            self.clearing = popped
            self.clearing_ms = CLEAR_DELAY_MS
            LOGGER.debug(
                "Cleared %d cell(s) in %d pass(es). Score: %d",
                self.last_cleared,
                self.last_chain,
                self.score,
            )
        return steps

    def advance_animation(self, dt_ms: float) -> None:
        """Age the clearing set; it empties once ``CLEAR_DELAY_MS`` has passed."""

        if not self.clearing:
            return
        self.clearing_ms -= dt_ms
        if self.clearing_ms <= 0:
            self.clearing = {}
            self.clearing_ms = 0.0

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------
    def _shift(self, dx: int, dy: int) -> bool:
        if self.active is None or self._resolving:
            return False
        if not can_move(self.board, self.active, dx, dy):
            return False
        self.active.move(dx, dy)
        return True

    def move_left(self) -> bool:
        return self._shift(-1, 0)

    def move_right(self) -> bool:
        return self._shift(1, 0)

    def soft_drop(self) -> bool:
        return self._shift(0, 1)

    def rotate(self) -> bool:
        if self.active is None or self._resolving:
            return False
        return try_rotate(self.board, self.active)

    def handle(self, command: Command) -> bool:
        """Apply ``command`` and report whether the pill changed."""

        actions = {
            Command.LEFT: self.move_left,
            Command.RIGHT: self.move_right,
            Command.DOWN: self.soft_drop,
            Command.ROTATE: self.rotate,
        }
        return actions[Command(command)]()

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """Advance the game by one fall step.

        Returns ``True`` if the pill moved down and ``False`` if it was locked
        (or nothing could happen this tick).
        """

        if self._resolving:
            return False
        if self.active is None:
            self.spawn_pill()
            return False
        if self.soft_drop():
            return True
        self.lock_pill()
        return False

    def set_level(self, level: int) -> int:
        self.level = clamp_level(level)
        return self.level

    @property
    def drop_interval_ms(self) -> float:
        return drop_interval_ms(self.level)

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------
    def reset_game(self) -> None:
        """Reset the entire game state for a new game.

        The speed level and game-over listener survive the reset.
        """

        self.board = Board()
        self.score = 0
        self.pieces = 0
        self.last_cleared = 0
        self.last_chain = 0
        self.clearing = {}
        self.clearing_ms = 0.0
        self.active = None
        self.next_colors = self._random_pair()
        self.spawn_pill()

    def game_over(self) -> None:
        """End the current run: empty the board, zero the score, notify.

        The freshly spawned pill stays in place; on the emptied board it is
        always free to fall again.
        """

        final_score = self.score
        LOGGER.info("Game over. Final score: %d", final_score)
        self.games_played += 1
        self.board.reset()
        self.score = 0
        self.pieces = 0
        self.clearing = {}
        self.clearing_ms = 0.0
        if self.on_game_over is not None:
            self.on_game_over(final_score)
