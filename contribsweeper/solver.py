"""Autonomous solver: rule passes, subset deduction, group enumeration and guessing."""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .constraints import (
    MAX_GROUP_VARIABLES,
    collect_constraints,
    enumerate_group,
    group_constraints,
    subset_deductions,
)
from .engine import Board, Cell, CellState, GameStatus
from .snapshot import Snapshot, snapshot
from .trace import Action, ActionKind, flag_with_trace, reveal_with_trace
from .utils import distance_from_center

logger = logging.getLogger(__name__)


class SolverPhase(str, Enum):
    STEPPING = "stepping"
    DEDUCING = "deducing"
    GUESSING = "guessing"
    DONE = "done"


@dataclass(frozen=True)
class SolverConfig:
    """
    Solver settings.

    Attributes:
        max_iterations: Turn budget; reaching it stops solving without error.
        enable_guess: Allow a random guess when no probability data exists.
        max_group_size: Largest constraint group enumerated exhaustively.
        first_move: Opening cell (x, y) on an untouched board; random when None.
        first_move_safety: Open with first-move fairness.
    """

    max_iterations: int = 10000
    enable_guess: bool = True
    max_group_size: int = MAX_GROUP_VARIABLES
    first_move: Optional[Tuple[int, int]] = None
    first_move_safety: bool = True

    def __post_init__(self) -> None:
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be non-negative.")
        if self.max_group_size <= 0:
            raise ValueError("max_group_size must be positive.")


@dataclass
class SolveStats:
    basic_moves: int = 0
    subset_moves: int = 0
    enumeration_moves: int = 0
    probability_guesses: int = 0
    random_guesses: int = 0
    skipped_groups: int = 0

    @property
    def guesses(self) -> int:
        return self.probability_guesses + self.random_guesses


@dataclass(frozen=True)
class SolveResult:
    """
    Outcome of a solve.

    `snapshot` is the layout after solving (the opening may have moved
    mines); restoring it and applying `actions` reproduces the final board.
    """

    actions: Tuple[Action, ...]
    final_status: GameStatus
    iterations: int
    snapshot: Snapshot
    stats: SolveStats = field(default_factory=SolveStats)


def choose_best_guess(
    probabilities: Dict[Cell, float], cols: int, rows: int
) -> Optional[Cell]:
    """
    Pick the lowest-probability cell.

    Ties go to the cell farther (Manhattan) from the board centre, then to
    the first in row-major order.
    """
    best: Optional[Cell] = None
    best_p = 0.0
    best_dist = 0.0

    for cell in sorted(probabilities, key=lambda c: (c.y, c.x)):
        p = probabilities[cell]
        dist = distance_from_center(cell.x, cell.y, cols, rows)
        if best is None or p < best_p or (p == best_p and dist > best_dist):
            best, best_p, best_dist = cell, p, dist

    return best


class ContributionSolver:
    """
    Drives a board to completion one turn at a time.

    A turn tries, in order, the basic neighbor-count rules, pairwise subset
    deduction, certain cells from group enumeration, and finally a guess on
    the lowest-probability cell. All moves go through the board's reveal and
    flag primitives and are recorded as actions.
    """

    def __init__(
        self,
        board: Board,
        config: Optional[SolverConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize a solver bound to a board.

        Args:
            board: Board with mines placed and adjacency computed.
            config: Solver settings; defaults when omitted.
            rng: Random source for the opening and fallback guesses.
        """
        self.board = board
        self.config = config or SolverConfig()
        self.rng = rng or random.Random()
        self.phase: SolverPhase = SolverPhase.STEPPING
        self.actions: List[Action] = []
        self.stats = SolveStats()

    def _set_phase(self, phase: SolverPhase) -> None:
        if phase is not self.phase:
            logger.debug("Solver phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    @property
    def _playing(self) -> bool:
        return self.board.status is GameStatus.PLAYING

    # -------------------------------------------------------------------------
    # Basic rules
    # -------------------------------------------------------------------------

    def _basic_sweep(self) -> bool:
        board = self.board
        changed = False

        for cell in board.iter_cells():
            if not self._playing:
                break
            if cell.state is not CellState.REVEALED or cell.adjacent_mine_count <= 0:
                continue

            hidden: List[Cell] = []
            flagged = 0
            for n in board.neighbors(cell.x, cell.y):
                if n.state is CellState.HIDDEN:
                    hidden.append(n)
                elif n.state is CellState.FLAGGED:
                    flagged += 1
            if not hidden:
                continue

            if flagged == cell.adjacent_mine_count:
                for h in hidden:
                    if reveal_with_trace(board, h.x, h.y, self.actions):
                        self.stats.basic_moves += 1
                        changed = True
            elif flagged + len(hidden) == cell.adjacent_mine_count:
                for h in hidden:
                    if flag_with_trace(board, h.x, h.y, self.actions):
                        self.stats.basic_moves += 1
                        changed = True

        return changed

    def basic_step(self) -> bool:
        """Sweep the basic rules until a sweep changes nothing. Returns True if anything moved."""
        self._set_phase(SolverPhase.STEPPING)
        acted = False
        while self._playing and self._basic_sweep():
            acted = True
        return acted

    # -------------------------------------------------------------------------
    # Deduction and guessing
    # -------------------------------------------------------------------------

    def _apply_certain(self, safe: List[Cell], mines: List[Cell]) -> int:
        moves = 0
        for cell in mines:
            if flag_with_trace(self.board, cell.x, cell.y, self.actions):
                moves += 1
        for cell in safe:
            if not self._playing:
                break
            # Earlier reveals in this pass may already have opened the cell.
            if reveal_with_trace(self.board, cell.x, cell.y, self.actions):
                moves += 1
        return moves

    def deduce(self) -> bool:
        """
        Constraint-based part of a turn: subset deduction, then enumeration,
        then a probability guess.

        Returns:
            True if any action was taken.
        """
        self._set_phase(SolverPhase.DEDUCING)
        constraints, _ = collect_constraints(self.board)
        if not constraints:
            return False

        deductions = subset_deductions(constraints)
        moves = self._apply_certain(list(deductions.to_reveal), list(deductions.to_flag))
        self.stats.subset_moves += moves
        if moves or not self._playing:
            return True

        probabilities: Dict[Cell, float] = {}
        for group in group_constraints(constraints):
            result = enumerate_group(group, self.config.max_group_size)
            if result is None:
                self.stats.skipped_groups += 1
                continue
            for cell, p in result.probabilities().items():
                if cell not in probabilities or p < probabilities[cell]:
                    probabilities[cell] = p

        order = sorted(probabilities, key=lambda c: (c.y, c.x))
        moves = self._apply_certain(
            [c for c in order if probabilities[c] == 0.0],
            [c for c in order if probabilities[c] == 1.0],
        )
        self.stats.enumeration_moves += moves
        if moves or not self._playing:
            return True

        if not probabilities:
            return False

        self._set_phase(SolverPhase.GUESSING)
        pick = choose_best_guess(probabilities, self.board.cols, self.board.rows)
        if pick is None:
            return False
        logger.debug(
            "Guessing (%d, %d) with mine probability %.3f.",
            pick.x, pick.y, probabilities[pick],
        )
        reveal_with_trace(self.board, pick.x, pick.y, self.actions, kind=ActionKind.GUESS)
        self.stats.probability_guesses += 1
        return True

    def step(self) -> bool:
        """Run one turn. Returns True if the turn produced any action."""
        if not self._playing:
            self._set_phase(SolverPhase.DONE)
            return False
        if self.basic_step():
            return True
        if not self._playing:
            return False
        return self.deduce()

    def random_guess(self) -> bool:
        """Reveal a uniformly random hidden cell as a guess."""
        candidates = self.board.hidden_cells()
        if not candidates or not self._playing:
            return False

        self._set_phase(SolverPhase.GUESSING)
        pick = self.rng.choice(candidates)
        reveal_with_trace(self.board, pick.x, pick.y, self.actions, kind=ActionKind.GUESS)
        self.stats.random_guesses += 1
        return True

    def open_board(self) -> bool:
        """Open the first cell of an untouched board, recorded as a guess."""
        board = self.board
        if not board.is_first_move or not self._playing:
            return False

        if self.config.first_move is not None:
            x, y = self.config.first_move
            board.cell(x, y)
        else:
            candidates = [
                c for c in board.eligible_cells() if c.state is CellState.HIDDEN
            ] or board.hidden_cells()
            if not candidates:
                return False
            pick = self.rng.choice(candidates)
            x, y = pick.x, pick.y

        return reveal_with_trace(
            board, x, y, self.actions,
            kind=ActionKind.GUESS,
            safe=self.config.first_move_safety,
        )

    # -------------------------------------------------------------------------
    # Main solving loop
    # -------------------------------------------------------------------------

    def solve(self) -> SolveResult:
        """
        Solve until the game ends, nothing is left to try, or the turn budget
        runs out.

        Returns:
            SolveResult with the action trace, final status, turns used, the
            post-solve layout snapshot and move statistics.
        """
        board = self.board
        self.open_board()

        iterations = 0
        while iterations < self.config.max_iterations and self._playing:
            if not board.hidden_cells():
                break

            if not self.step():
                if not self.config.enable_guess or not self.random_guess():
                    break
            iterations += 1

        self._set_phase(SolverPhase.DONE)
        logger.info(
            "Solve finished: status=%s iterations=%d actions=%d guesses=%d",
            board.status.value, iterations, len(self.actions), self.stats.guesses,
        )
        return SolveResult(
            actions=tuple(self.actions),
            final_status=board.status,
            iterations=iterations,
            snapshot=snapshot(board),
            stats=self.stats,
        )


def solve(
    board: Board,
    max_iterations: int = 10000,
    enable_guess: bool = True,
    *,
    rng: Optional[random.Random] = None,
    first_move: Optional[Tuple[int, int]] = None,
    first_move_safety: bool = True,
    max_group_size: int = MAX_GROUP_VARIABLES,
) -> SolveResult:
    """Solve a board with a fresh ContributionSolver."""
    config = SolverConfig(
        max_iterations=max_iterations,
        enable_guess=enable_guess,
        max_group_size=max_group_size,
        first_move=first_move,
        first_move_safety=first_move_safety,
    )
    return ContributionSolver(board, config, rng).solve()
