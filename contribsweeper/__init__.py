"""
Contribution Minesweeper

A Minesweeper board built from daily activity data, with an autonomous solver
that records its play as a replayable action trace:
- Basic rules: neighbor-count reveals and flags
- Subset deduction: pairwise constraint differences
- Group enumeration: exhaustive search per connected constraint group
- Guessing: lowest mine probability, ties broken towards the board's edges
"""

from .engine import (
    Board,
    Cell,
    CellState,
    GameStatus,
    compute_adjacents,
    create_board,
    play_cli,
    reveal,
    safe_reveal,
    toggle_flag,
)
from .placement import (
    place_mines,
    place_mines_at,
    place_mines_by_weight,
    place_random_mines,
)
from .contributions import (
    ContributionDay,
    board_from_contributions,
    generate_mock_contributions,
    normalize_calendar_year,
    normalize_trailing_year,
)
from .trace import Action, ActionKind, Outcome, apply_action, apply_actions
from .snapshot import CellRecord, Snapshot, restore, snapshot
from .constraints import (
    Constraint,
    Group,
    GroupEnumeration,
    collect_constraints,
    enumerate_group,
    group_constraints,
    subset_deductions,
)
from .solver import (
    ContributionSolver,
    SolveResult,
    SolverConfig,
    SolverPhase,
    SolveStats,
    choose_best_guess,
    solve,
)
from .analysis import (
    format_actions,
    run_contribution_test,
    run_solver_level_analysis,
    run_solver_many_tests,
    run_solver_single_test,
    summarize_move_mix,
)

__version__ = "1.0.0"

__all__ = [
    # Board
    "Board",
    "Cell",
    "CellState",
    "GameStatus",
    "create_board",
    "compute_adjacents",
    "reveal",
    "safe_reveal",
    "toggle_flag",
    "play_cli",
    # Placement and data mapping
    "place_mines",
    "place_mines_at",
    "place_mines_by_weight",
    "place_random_mines",
    "ContributionDay",
    "board_from_contributions",
    "generate_mock_contributions",
    "normalize_calendar_year",
    "normalize_trailing_year",
    # Trace and replay
    "Action",
    "ActionKind",
    "Outcome",
    "apply_action",
    "apply_actions",
    "CellRecord",
    "Snapshot",
    "snapshot",
    "restore",
    # Constraints
    "Constraint",
    "Group",
    "GroupEnumeration",
    "collect_constraints",
    "subset_deductions",
    "group_constraints",
    "enumerate_group",
    # Solver
    "ContributionSolver",
    "SolverConfig",
    "SolverPhase",
    "SolveResult",
    "SolveStats",
    "choose_best_guess",
    "solve",
    # Analysis functions
    "format_actions",
    "run_contribution_test",
    "run_solver_single_test",
    "run_solver_many_tests",
    "run_solver_level_analysis",
    "summarize_move_mix",
]
