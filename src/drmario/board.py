"""Board representation for the pill puzzle playfield."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Set, Tuple

import numpy as np
from numpy.typing import NDArray


# Dimensions of the bottle.
ROWS = 16
COLS = 8

# Number of equal cells in a line needed to clear them.
RUN_LENGTH = 4

Grid = NDArray[np.uint8]
Cell = Tuple[int, int]  # (row, col)


class Color(str, Enum):
    """Palette of pill halves and grid cells."""

    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"


# Mapping from ``Color`` to the integer stored in the grid.  ``0`` is empty.
COLOR_VALUES = {c: i + 1 for i, c in enumerate(Color)}
VALUE_COLORS = {v: c for c, v in COLOR_VALUES.items()}


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((ROWS, COLS), dtype=np.uint8)


class Board:
    """Bottle holding the locked cells."""

    width: int = COLS
    height: int = ROWS

    def __init__(self) -> None:
        self.grid: Grid = create_empty_grid()

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(row, col):
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Safely set the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(row, col):
            self.grid[row, col] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def get_color(self, row: int, col: int) -> Optional[Color]:
        """Return the colour at ``(row, col)`` or ``None`` for an empty cell."""

        return VALUE_COLORS.get(self.get_cell(row, col))

    def place(self, row: int, col: int, color: Color) -> None:
        self.set_cell(row, col, COLOR_VALUES[color])

    def is_empty(self, row: int, col: int) -> bool:
        """Return ``True`` if the cell at ``(row, col)`` is empty.

        Any coordinates outside the board are treated as occupied.
        """

        if self.in_bounds(row, col):
            return bool(self.grid[row, col] == 0)
        return False

    def reset(self) -> None:
        self.grid = create_empty_grid()

    def find_matches(self) -> Set[Cell]:
        """Return every cell belonging to a horizontal or vertical run.

        A run is ``RUN_LENGTH`` or more equal, non-empty cells in a line.  Each
        window of four equal cells marks all four; longer runs are covered by
        several overlapping windows which collapse into the same set.
        """

        g = self.grid
        n = RUN_LENGTH - 1
        marked = np.zeros(g.shape, dtype=bool)

        start = g[:, :-n]
        horizontal = start != 0
        for k in range(1, RUN_LENGTH):
            horizontal &= start == g[:, k : g.shape[1] - n + k]
        for k in range(RUN_LENGTH):
            marked[:, k : g.shape[1] - n + k] |= horizontal

        start = g[:-n, :]
        vertical = start != 0
        for k in range(1, RUN_LENGTH):
            vertical &= start == g[k : g.shape[0] - n + k, :]
        for k in range(RUN_LENGTH):
            marked[k : g.shape[0] - n + k, :] |= vertical

        rows, cols = np.nonzero(marked)
        return {(int(r), int(c)) for r, c in zip(rows, cols)}

    def clear_cells(self, cells: Iterable[Cell]) -> int:
        """Empty ``cells`` and return how many were removed."""

        cells = set(cells)
        for row, col in cells:
            self.set_cell(row, col, 0)
        return len(cells)

    def apply_gravity(self) -> bool:
        """Drop floating cells to the bottom of their column.

        Each column is compacted independently, keeping the relative order of
        its cells.  Returns ``True`` if any cell moved.
        """

        moved = False
        for col in range(self.width):
            column = self.grid[:, col]
            filled = column[column != 0]
            settled = np.zeros_like(column)
            if filled.size:
                settled[-filled.size :] = filled
            if not np.array_equal(settled, column):
                self.grid[:, col] = settled
                moved = True
        return moved

    def is_settled(self) -> bool:
        """Return ``True`` if no cell sits directly above an empty one."""

        g = self.grid
        return not bool(np.any((g[:-1, :] != 0) & (g[1:, :] == 0)))
