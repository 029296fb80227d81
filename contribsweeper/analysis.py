"""Analysis and benchmarking tools for the contribution Minesweeper solver."""

import random
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .constraints import MAX_GROUP_VARIABLES
from .contributions import (
    ContributionDay,
    board_from_contributions,
    generate_mock_contributions,
)
from .engine import GameStatus, create_board
from .placement import place_mines_by_weight, place_random_mines
from .solver import SolveResult, solve
from .trace import Action, ActionKind, Outcome

LEVELS: Dict[str, Tuple[int, int, int]] = {
    # name: (cols, rows, mines)
    "beginner": (9, 9, 10),
    "intermediate": (16, 16, 40),
    "expert": (30, 16, 99),
}


def format_actions(actions: Sequence[Action]) -> str:
    """One line per action, e.g. "  3 guess  (4, 2) safe"."""
    lines: List[str] = []
    for i, action in enumerate(actions):
        line = f"{i:3d} {action.kind.value:<6} ({action.x}, {action.y})"
        if action.outcome is not None:
            line += f" {action.outcome.value}"
        if action.flood_extra is not None:
            line += f" +{action.flood_extra}"
        lines.append(line)
    return "\n".join(lines)


def summarize_result(result: SolveResult) -> Dict[str, object]:
    """Flatten a SolveResult into the metrics dictionary used by the benchmarks."""
    kinds = Counter(a.kind for a in result.actions)
    stats = result.stats
    return {
        "status": result.final_status.value,
        "won": result.final_status is GameStatus.WON,
        "iterations": result.iterations,
        "actions_count": len(result.actions),
        "reveal_count": kinds[ActionKind.REVEAL],
        "flag_count": kinds[ActionKind.FLAG],
        "guess_count": kinds[ActionKind.GUESS],
        "flood_count": kinds[ActionKind.FLOOD],
        "boom": any(a.outcome is Outcome.BOOM for a in result.actions),
        "basic_moves": stats.basic_moves,
        "subset_moves": stats.subset_moves,
        "enumeration_moves": stats.enumeration_moves,
        "probability_guesses": stats.probability_guesses,
        "random_guesses": stats.random_guesses,
        "skipped_groups": stats.skipped_groups,
    }


def run_solver_single_test(
    cols: int,
    rows: int,
    mines_count: int,
    *,
    seed: Optional[int] = None,
    show_board: bool = False,
    max_group_size: int = MAX_GROUP_VARIABLES,
    enable_guess: bool = True,
) -> Dict[str, object]:
    """
    Play one game on a random board and return its metrics.

    Args:
        cols: Board width.
        rows: Board height.
        mines_count: Mines placed uniformly at random.
        seed: Seed for both placement and solver randomness.
        show_board: If True, print the final board with mines visible.
        max_group_size: Enumeration cap passed to the solver.
        enable_guess: Whether the solver may fall back to random guesses.

    Returns:
        summarize_result() of the solve.
    """
    rng = random.Random(seed)
    board = create_board(rows, cols)
    place_random_mines(board, mines_count, rng)

    result = solve(
        board,
        enable_guess=enable_guess,
        rng=rng,
        max_group_size=max_group_size,
    )

    if show_board:
        print(board.format_board(reveal_all=True))
        print(f"\nFinished with status {result.final_status.value}.")

    return summarize_result(result)


def run_contribution_test(
    days: Optional[Sequence[ContributionDay]] = None,
    ratio: float = 0.1,
    *,
    seed: Optional[int] = None,
) -> SolveResult:
    """
    Solve a board built from contribution days (mock data when omitted),
    with mines weighted towards quiet days.
    """
    rng = random.Random(seed)
    if days is None:
        days = generate_mock_contributions(rng=rng)
    board = board_from_contributions(days)
    place_mines_by_weight(board, ratio, np.random.default_rng(seed))
    return solve(board, max_iterations=5000, rng=rng)


def run_solver_many_tests(
    cols: int,
    rows: int,
    mines_count: int,
    runs: int,
    *,
    seed: Optional[int] = None,
    max_group_size: int = MAX_GROUP_VARIABLES,
) -> Dict[str, float]:
    """
    Play many independent games and return averaged metrics plus win rate.

    Returns:
        "avg_<metric>" for every numeric metric of summarize_result(), plus
        win_rate, avg_guesses_total and guess_failure_rate (share of guesses
        that hit a mine).

    Raises:
        ValueError: If runs is not positive.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    seeds = np.random.default_rng(seed).integers(0, 2**31 - 1, size=runs)
    metrics = [
        run_solver_single_test(
            cols, rows, mines_count, seed=int(s), max_group_size=max_group_size
        )
        for s in seeds
    ]

    numeric_keys = [
        k for k, v in metrics[0].items()
        if isinstance(v, (int, float)) and not isinstance(v, bool)
    ]
    table = np.array([[float(m[k]) for k in numeric_keys] for m in metrics])
    means = table.mean(axis=0)

    out: Dict[str, float] = {f"avg_{k}": float(v) for k, v in zip(numeric_keys, means)}
    out["win_rate"] = float(np.mean([m["won"] for m in metrics]))

    guesses = table[:, numeric_keys.index("guess_count")]
    # A lost game always ends on the guess that hit a mine.
    failed = np.array([m["status"] == GameStatus.LOST.value for m in metrics], dtype=float)
    out["avg_guesses_total"] = float(guesses.mean())
    out["guess_failure_rate"] = (
        float(failed.sum() / guesses.sum()) if guesses.sum() > 0 else 0.0
    )
    return out


def run_solver_level_analysis(
    runs: int,
    *,
    seed: Optional[int] = None,
    max_group_size: int = MAX_GROUP_VARIABLES,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Benchmark the standard difficulty levels and plot summaries.

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 30x16, 99 mines

    Returns:
        Mapping from level name to run_solver_many_tests() statistics.
    """
    results: Dict[str, Dict[str, float]] = {}
    for level, (w, h, m) in LEVELS.items():
        results[level] = run_solver_many_tests(
            w, h, m, runs, seed=seed, max_group_size=max_group_size
        )

    level_names = list(LEVELS)
    x = np.arange(len(level_names))
    bar_w = 0.2

    # 1) Moves by method
    methods = [
        ("basic_moves", "basic"),
        ("subset_moves", "subset"),
        ("enumeration_moves", "enumeration"),
        ("guess_count", "guess"),
    ]
    fig, ax = plt.subplots()
    for i, (key, label) in enumerate(methods):
        values = [results[n][f"avg_{key}"] for n in level_names]
        ax.bar(x + (i - 1.5) * bar_w, values, width=bar_w, label=label)
    ax.set_xticks(x)
    ax.set_xticklabels(level_names)
    ax.set_ylabel("Average moves per game")
    ax.set_title("Solver moves by method")
    ax.legend()
    fig.tight_layout()

    # 2) Win rate by level
    fig2, ax2 = plt.subplots()
    ax2.bar(x, [results[n]["win_rate"] for n in level_names])
    ax2.set_xticks(x)
    ax2.set_xticklabels(level_names)
    ax2.set_ylabel("Win rate")
    ax2.set_ylim(0.0, 1.0)
    ax2.set_title("Win rate by difficulty level")
    fig2.tight_layout()

    if show:
        plt.show()
    else:
        plt.close(fig)
        plt.close(fig2)

    return results


def summarize_move_mix(
    results: Dict[str, Dict[str, float]], *, level: str = "expert"
) -> Dict[str, float]:
    """
    Share of each move source among all moves for one level.

    Raises:
        KeyError: If the level or a required metric is missing.
        ZeroDivisionError: If the level recorded no moves at all.
    """
    if level not in results:
        raise KeyError(f"Level {level!r} not found in results.")
    m = results[level]

    def get(k: str) -> float:
        if k not in m:
            raise KeyError(f"Missing key {k!r} in metrics for level {level!r}.")
        return float(m[k])

    basic = get("avg_basic_moves")
    subset = get("avg_subset_moves")
    enum = get("avg_enumeration_moves")
    guess = get("avg_guess_count")
    total = basic + subset + enum + guess
    if total == 0.0:
        raise ZeroDivisionError("No moves recorded; cannot compute fractions.")

    return {
        "basic_frac": basic / total,
        "subset_frac": subset / total,
        "enumeration_frac": enum / total,
        "guess_frac": guess / total,
        "guess_success_prob": 1.0 - get("guess_failure_rate"),
        "total_moves": total,
    }
