"""
Quickstart example for Contribution Minesweeper.

Builds a board from a mock contribution year, solves it, replays the trace
on a restored copy and compares win rates across the standard levels.
"""

import logging
import random

import numpy as np

from contribsweeper import (
    apply_actions,
    board_from_contributions,
    format_actions,
    generate_mock_contributions,
    normalize_trailing_year,
    place_mines_by_weight,
    restore,
    run_solver_many_tests,
    solve,
)
from contribsweeper.analysis import LEVELS


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Contribution Minesweeper - Quickstart Example")
    print("=" * 60)

    # Example 1: Solve a contribution board
    print("\n1. Solving a mock contribution year (12% of days mined)...")
    print("-" * 60)

    rng = random.Random(2024)
    days = normalize_trailing_year(generate_mock_contributions(rng=rng))
    board = board_from_contributions(days)
    place_mines_by_weight(board, 0.12, np.random.default_rng(2024))
    print(f"{len(days)} days -> {board.cols} weeks x {board.rows} days, {board.mine_count} mines")

    result = solve(board, rng=rng)
    stats = result.stats
    print(f"Result: {result.final_status.value.upper()}")
    print(f"Turns: {result.iterations}")
    print(f"Actions recorded: {len(result.actions)}")
    print(f"Basic / subset / enumeration moves: "
          f"{stats.basic_moves} / {stats.subset_moves} / {stats.enumeration_moves}")
    print(f"Guesses after the opening: {stats.guesses}")

    # Example 2: First actions of the trace
    print("\n2. First ten actions:")
    print("-" * 60)
    print(format_actions(result.actions[:10]))

    # Example 3: Replay
    print("\n3. Replaying the trace on a restored board...")
    print("-" * 60)
    replay = apply_actions(restore(result.snapshot), result.actions)
    same = [c.state for c in replay.iter_cells()] == [c.state for c in board.iter_cells()]
    print(f"Replay status: {replay.status.value}, matches live board: {same}")
    print(replay.format_board(reveal_all=True))

    # Example 4: Compare difficulty levels
    logging.getLogger("contribsweeper").setLevel(logging.WARNING)
    print("\n4. Win rates by difficulty level (10 games each)...")
    print("-" * 60)

    for name, (w, h, m) in LEVELS.items():
        results = run_solver_many_tests(w, h, m, 10, seed=7)
        print(f"{name.capitalize():15s} ({w}x{h}, {m:2d} mines): "
              f"{results['win_rate']*100:5.1f}% win rate, "
              f"{results['avg_guesses_total']:.1f} guesses/game")

    print("\n" + "=" * 60)
    print("Done! Run `streamlit run app/demo.py` for the interactive replay.")
    print("=" * 60)


if __name__ == "__main__":
    main()
