from __future__ import annotations

import random

import numpy as np

from drmario.board import Color
from drmario.game_state import POINTS_PER_CELL, GameState
from drmario.pill import Pill
from drmario.utils import Command


def _new_state() -> GameState:
    state = GameState(seed=7)
    state.reset_game()
    return state


def test_pill_falls_to_the_floor_and_locks() -> None:
    state = _new_state()
    state.active = Pill((Color.RED, Color.BLUE))
    assert state.active.position == (3, 1)

    for _ in range(14):
        assert state.tick() is True
    assert state.active.position == (3, 15)

    assert state.tick() is False
    assert state.board.get_color(15, 3) is Color.RED
    assert state.board.get_color(15, 4) is Color.BLUE
    assert np.count_nonzero(state.board.grid) == 2
    assert state.pieces == 1
    # A fresh pill is waiting at the spawn point.
    assert state.active.position == (3, 1)
    assert state.active.rotation == 0


def test_spawn_uses_the_preview_colours() -> None:
    state = _new_state()
    upcoming = state.next_colors
    state.spawn_pill()
    assert state.active.colors == upcoming
    assert state.next_colors is not None


def test_lock_skips_cells_above_the_grid() -> None:
    state = _new_state()
    state.board.place(1, 0, Color.YELLOW)
    state.active = Pill((Color.RED, Color.BLUE), x=0, y=0, rotation=1)
    assert state.lock_pill() is None
    assert state.board.get_color(0, 0) is Color.RED
    assert np.count_nonzero(state.board.grid) == 2


def test_completing_a_row_clears_and_drops() -> None:
    state = _new_state()
    # Checkerboard foundation under columns 0..3 holds no run of its own.
    for row in range(11, 16):
        for col in range(4):
            color = Color.BLUE if (row + col) % 2 == 0 else Color.YELLOW
            state.board.place(row, col, color)
    foundation = state.board.grid[11:].copy()
    for col in range(3):
        state.board.place(10, col, Color.RED)
    state.board.place(9, 1, Color.YELLOW)
    state.active = Pill((Color.RED, Color.RED), x=3, y=2, rotation=1)

    while state.tick():
        pass

    assert state.score == 40
    assert state.last_cleared == 4
    assert state.last_chain == 1
    assert set(state.clearing) == {(10, 0), (10, 1), (10, 2), (10, 3)}
    assert state.board.is_empty(10, 0)
    assert state.board.is_empty(10, 2)
    # Cells resting above the cleared row dropped by exactly one row.
    assert state.board.get_color(10, 1) is Color.YELLOW
    assert state.board.is_empty(9, 1)
    assert state.board.get_color(10, 3) is Color.RED
    assert state.board.is_empty(9, 3)
    assert np.array_equal(state.board.grid[11:], foundation)


def test_run_of_five_scores_once_per_cell() -> None:
    state = _new_state()
    for col in range(5):
        state.board.place(15, col, Color.YELLOW)
    steps = state.resolve()
    assert state.score == 5 * POINTS_PER_CELL == 50
    assert len(steps) == 1
    assert len(steps[0].cells) == 5


def test_crossing_runs_share_their_corner() -> None:
    state = _new_state()
    for col in range(4):
        state.board.place(15, col, Color.BLUE)
    for row in range(12, 15):
        state.board.place(row, 0, Color.BLUE)
    state.resolve()
    assert state.score == 70
    assert not state.board.grid.any()


def test_gravity_triggers_chain_clears() -> None:
    state = _new_state()
    for col in range(4):
        state.board.place(15, col, Color.RED)
    state.board.place(15, 4, Color.BLUE)
    for col in range(1, 4):
        state.board.place(14, col, Color.BLUE)

    steps = state.resolve()

    assert [step.chain for step in steps] == [1, 2]
    assert [step.points for step in steps] == [40, 40]
    assert state.score == 80
    assert state.last_chain == 2
    assert not state.board.grid.any()
    assert state.board.find_matches() == set()


def test_no_clear_leaves_floating_cells_alone() -> None:
    state = _new_state()
    state.board.place(5, 5, Color.RED)
    assert state.resolve() == []
    assert state.board.get_color(5, 5) is Color.RED
    assert state.clearing == {}


def test_clearing_set_expires() -> None:
    state = _new_state()
    for col in range(4):
        state.board.place(15, col, Color.RED)
    state.resolve()
    assert len(state.clearing) == 4
    state.advance_animation(100)
    assert len(state.clearing) == 4
    state.advance_animation(60)
    assert state.clearing == {}


def test_board_has_no_runs_after_any_tick() -> None:
    state = GameState(seed=11)
    state.reset_game()
    rng = random.Random(5)
    commands = list(Command)
    for _ in range(500):
        state.handle(rng.choice(commands))
        state.tick()
        assert state.board.find_matches() == set()
        if state.last_chain:
            assert state.board.is_settled()
