import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from examples.autoplay import GameSummary, log_summary, run_games


def test_run_games_respects_tick_budget():
    summaries = run_games(3, max_ticks=40, seed=9)
    assert len(summaries) == 3
    for summary in summaries:
        assert summary.ticks <= 40
        assert summary.score % 10 == 0
        assert summary.pieces >= 0


def test_run_games_is_reproducible():
    first = run_games(2, max_ticks=200, seed=21)
    second = run_games(2, max_ticks=200, seed=21)
    assert first == second


def test_log_summary_reports_batch(caplog):
    summaries = [
        GameSummary(score=40, pieces=12, ticks=300, best_chain=1, topped_out=True),
        GameSummary(score=120, pieces=20, ticks=500, best_chain=2, topped_out=False),
    ]
    with caplog.at_level(logging.INFO, logger="examples.autoplay"):
        message = log_summary(summaries, index=2)

    assert "best=120" in message
    assert "longest_chain=2" in message
    assert "topped_out=1" in caplog.text
    assert "Batch 2" in caplog.text


def test_log_summary_handles_empty_batch(caplog):
    with caplog.at_level(logging.INFO, logger="examples.autoplay"):
        message = log_summary([], index=0)
    assert message == "No games played."
