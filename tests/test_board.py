from __future__ import annotations

import numpy as np
import pytest

from drmario.board import Board, Color, COLOR_VALUES, COLS, ROWS


def _fill_row(board: Board, row: int, cols, color: Color) -> None:
    for col in cols:
        board.place(row, col, color)


def test_board_dimensions() -> None:
    board = Board()
    assert board.grid.shape == (ROWS, COLS) == (16, 8)
    assert not board.grid.any()


def test_out_of_bounds_access_raises() -> None:
    board = Board()
    with pytest.raises(IndexError):
        board.get_cell(ROWS, 0)
    with pytest.raises(IndexError):
        board.set_cell(0, -1, 1)
    assert board.is_empty(0, COLS) is False


def test_get_color_round_trips_palette() -> None:
    board = Board()
    board.place(3, 2, Color.YELLOW)
    assert board.get_cell(3, 2) == COLOR_VALUES[Color.YELLOW]
    assert board.get_color(3, 2) is Color.YELLOW
    assert board.get_color(0, 0) is None


def test_three_in_a_row_is_not_a_match() -> None:
    board = Board()
    _fill_row(board, 15, range(3), Color.RED)
    assert board.find_matches() == set()


def test_horizontal_and_vertical_runs_are_found() -> None:
    board = Board()
    _fill_row(board, 15, range(4, 8), Color.BLUE)
    for row in range(0, 4):
        board.place(row, 0, Color.RED)
    matches = board.find_matches()
    assert matches == {(15, c) for c in range(4, 8)} | {(r, 0) for r in range(4)}


def test_long_run_marks_each_cell_once() -> None:
    board = Board()
    _fill_row(board, 10, range(5), Color.RED)
    assert board.find_matches() == {(10, c) for c in range(5)}


def test_mixed_colours_break_runs() -> None:
    board = Board()
    _fill_row(board, 15, range(4), Color.RED)
    board.place(15, 2, Color.BLUE)
    assert board.find_matches() == set()


def test_gravity_compacts_columns_keeping_order() -> None:
    board = Board()
    board.place(2, 1, Color.RED)
    board.place(5, 1, Color.BLUE)
    board.place(15, 1, Color.YELLOW)
    assert not board.is_settled()

    assert board.apply_gravity() is True
    assert board.get_color(15, 1) is Color.YELLOW
    assert board.get_color(14, 1) is Color.BLUE
    assert board.get_color(13, 1) is Color.RED
    assert np.count_nonzero(board.grid) == 3
    assert board.is_settled()


def test_gravity_is_idempotent() -> None:
    board = Board()
    board.place(0, 0, Color.RED)
    board.place(7, 4, Color.BLUE)
    board.apply_gravity()
    snapshot = board.grid.copy()
    assert board.apply_gravity() is False
    assert np.array_equal(board.grid, snapshot)


def test_clear_cells_counts_unique_cells() -> None:
    board = Board()
    board.place(15, 0, Color.RED)
    assert board.clear_cells([(15, 0), (15, 0)]) == 1
    assert board.is_empty(15, 0)
