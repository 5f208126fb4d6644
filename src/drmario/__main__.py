"""Simple ASCII demo for the pill puzzle engine.

Run with: `python -m drmario`

Without options this prints a single frame composed of the bottle plus the
active pill, useful as a minimal smoke test to ensure renderers see more than
a blank grid.  ``--ticks N`` lets the pill fall for ``N`` steps first and
``--pygame`` starts the desktop front-end instead.
"""

from __future__ import annotations

import argparse
import logging

from . import GameState, format_score, render_grid
from .board import VALUE_COLORS
from .utils import DEFAULT_LEVEL

GLYPHS = {0: "."}
GLYPHS.update({value: color.value[0].upper() for value, color in VALUE_COLORS.items()})


def _print_grid(grid: list[list[int]]) -> None:
    for row in grid:
        print("".join(GLYPHS[cell] for cell in row))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="drmario", description=__doc__)
    parser.add_argument("--seed", type=int, default=None, help="Seed for pill colours.")
    parser.add_argument("--speed", type=int, default=DEFAULT_LEVEL, help="Speed level (1-10).")
    parser.add_argument("--ticks", type=int, default=0, help="Fall steps to simulate before printing.")
    parser.add_argument("--pygame", action="store_true", help="Open the pygame window.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(name)s: %(message)s",
    )

    if args.pygame:
        from . import run_pygame

        run_pygame.main(speed=args.speed, seed=args.seed)
        return

    gs = GameState(seed=args.seed)
    gs.set_level(args.speed)
    gs.reset_game()
    for _ in range(max(0, args.ticks)):
        gs.tick()
    _print_grid(render_grid(gs.board, gs.active))
    print(f"Score: {format_score(gs.score)}")


if __name__ == "__main__":
    main()
