"""Play headless games with random inputs and log how they went.

Run with::

    PYTHONPATH=src python examples/autoplay.py

Pass ``--help`` to see options for the number of games, the tick budget per
game and periodic logging summaries.
"""

from __future__ import annotations

import argparse
import logging
import random
from dataclasses import dataclass
from typing import Optional

from drmario.game_state import GameState
from drmario.utils import Command


LOGGER = logging.getLogger(__name__)


@dataclass
class GameSummary:
    score: int
    pieces: int
    ticks: int
    best_chain: int
    topped_out: bool


def play_game(state: GameState, rng: random.Random, *, max_ticks: int) -> GameSummary:
    """Play until the bottle tops out or ``max_ticks`` fall steps have passed."""

    result: dict[str, int] = {}

    def on_game_over(final_score: int) -> None:
        result["score"] = final_score

    state.on_game_over = on_game_over
    commands = list(Command)
    locks = 0
    best_chain = 0
    ticks = 0
    while ticks < max_ticks and "score" not in result:
        for _ in range(rng.randrange(3)):
            state.handle(rng.choice(commands))
        pieces = state.pieces
        state.tick()
        ticks += 1
        if state.pieces != pieces or "score" in result:
            locks += 1
            best_chain = max(best_chain, state.last_chain)

    topped_out = "score" in result
    return GameSummary(
        score=result.get("score", state.score),
        pieces=locks,
        ticks=ticks,
        best_chain=best_chain,
        topped_out=topped_out,
    )


def run_games(games: int, *, max_ticks: int, seed: Optional[int] = None) -> list[GameSummary]:
    rng = random.Random(seed)
    summaries: list[GameSummary] = []
    for _ in range(games):
        state = GameState(seed=rng.randrange(2**32))
        state.reset_game()
        summaries.append(play_game(state, rng, max_ticks=max_ticks))
    return summaries


def _format_summary(summaries: list[GameSummary]) -> str:
    if not summaries:
        return "No games played."
    best = max(s.score for s in summaries)
    mean = sum(s.score for s in summaries) / len(summaries)
    chain = max(s.best_chain for s in summaries)
    topped = sum(1 for s in summaries if s.topped_out)
    return (
        f"games={len(summaries)}, best={best}, mean={mean:.1f}, "
        f"longest_chain={chain}, topped_out={topped}"
    )


def log_summary(summaries: list[GameSummary], *, index: int) -> str:
    message = _format_summary(summaries)
    LOGGER.info("Batch %d: %s", index, message)
    return message


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--games", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--max-ticks", type=int, default=2000, help="Fall steps allowed per game.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for inputs and pill colours.")
    parser.add_argument(
        "--log-interval",
        type=int,
        default=5,
        help="Emit a summary every N games (0 logs only at the end).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    summaries = run_games(args.games, max_ticks=args.max_ticks, seed=args.seed)
    batch: list[GameSummary] = []
    for game_idx, summary in enumerate(summaries, start=1):
        batch.append(summary)
        if args.log_interval > 0 and game_idx % args.log_interval == 0:
            log_summary(batch, index=game_idx)
            batch = []
    if batch or not summaries:
        log_summary(batch, index=len(summaries))


if __name__ == "__main__":
    main()
