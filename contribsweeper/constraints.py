"""Frontier constraints, subset deduction, grouping and exhaustive enumeration."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from .engine import Board, Cell, CellState

logger = logging.getLogger(__name__)

# Largest group the enumerator will search (2**12 leaves at most).
MAX_GROUP_VARIABLES = 12


def _row_major(cell: Cell) -> Tuple[int, int]:
    return cell.y, cell.x


@dataclass(frozen=True)
class Constraint:
    """Exactly `mines` of `cells` (all hidden) are mines."""

    cells: FrozenSet[Cell]
    mines: int
    source: Optional[Cell] = None


@dataclass(frozen=True)
class Group:
    """Constraints connected through shared cells, with the union of their cells."""

    constraints: Tuple[Constraint, ...]
    cells: Tuple[Cell, ...]


@dataclass(frozen=True)
class Deductions:
    to_reveal: Tuple[Cell, ...]
    to_flag: Tuple[Cell, ...]
    conflicts: Tuple[Cell, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.to_reveal or self.to_flag)


@dataclass(frozen=True)
class GroupEnumeration:
    """Per-cell mine occurrence counts over all valid configurations of a group."""

    cells: Tuple[Cell, ...]
    counts: Tuple[int, ...]
    total: int

    def probabilities(self) -> Dict[Cell, float]:
        """Mine probability per cell; empty when the group has no valid configuration."""
        if self.total == 0:
            return {}
        return {cell: n / self.total for cell, n in zip(self.cells, self.counts)}


# -----------------------------------------------------------------------------
# Collection
# -----------------------------------------------------------------------------


def collect_constraints(board: Board) -> Tuple[List[Constraint], Set[Cell]]:
    """
    Derive one constraint per revealed numbered cell with hidden neighbors.

    Returns:
        Tuple of (constraints in row-major order of their source cell,
        frontier = union of all constrained hidden cells).
    """
    constraints: List[Constraint] = []
    frontier: Set[Cell] = set()

    for cell in board.iter_cells():
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

        remaining = cell.adjacent_mine_count - flagged
        if remaining < 0:
            logger.debug(
                "Discarding inconsistent constraint at (%d, %d): %d flags around a %d.",
                cell.x, cell.y, flagged, cell.adjacent_mine_count,
            )
            continue

        constraints.append(Constraint(frozenset(hidden), remaining, cell))
        frontier.update(hidden)

    return constraints, frontier


# -----------------------------------------------------------------------------
# Subset deduction
# -----------------------------------------------------------------------------


def subset_deductions(constraints: Sequence[Constraint]) -> Deductions:
    """
    Pairwise subset inference.

    For constraints A, B with A.cells a proper subset of B.cells and
    D = B.cells - A.cells: equal mine counts make D safe; a mine difference
    of |D| makes D all mines. A cell found both ways is only flagged.
    """
    to_reveal: Set[Cell] = set()
    to_flag: Set[Cell] = set()

    for i, a in enumerate(constraints):
        if not a.cells:
            continue
        for j, b in enumerate(constraints):
            if i == j or not b.cells:
                continue
            if not a.cells <= b.cells:
                continue

            diff = b.cells - a.cells
            if not diff:
                continue

            if a.mines == b.mines:
                to_reveal |= diff
            elif b.mines - a.mines == len(diff):
                to_flag |= diff

    conflicts = to_reveal & to_flag
    if conflicts:
        logger.warning(
            "Contradictory deductions for %d cell(s) %s; flagging them.",
            len(conflicts),
            sorted((c.x, c.y) for c in conflicts),
        )
        to_reveal -= conflicts

    return Deductions(
        to_reveal=tuple(sorted(to_reveal, key=_row_major)),
        to_flag=tuple(sorted(to_flag, key=_row_major)),
        conflicts=tuple(sorted(conflicts, key=_row_major)),
    )


# -----------------------------------------------------------------------------
# Grouping
# -----------------------------------------------------------------------------


def group_constraints(constraints: Sequence[Constraint]) -> List[Group]:
    """
    Partition constraints into connected components (shared cells connect).

    Groups come out in order of their first constraint; each group's cells
    are in row-major order.
    """
    cell_to_constraints: DefaultDict[Cell, List[int]] = defaultdict(list)
    for idx, constraint in enumerate(constraints):
        for cell in constraint.cells:
            cell_to_constraints[cell].append(idx)

    groups: List[Group] = []
    seen: Set[int] = set()

    for start in range(len(constraints)):
        if start in seen:
            continue

        stack: List[int] = [start]
        seen.add(start)
        members: List[int] = []
        seen_cells: Set[Cell] = set()

        while stack:
            idx = stack.pop()
            members.append(idx)

            for cell in constraints[idx].cells:
                if cell in seen_cells:
                    continue
                seen_cells.add(cell)

                for other in cell_to_constraints[cell]:
                    if other not in seen:
                        seen.add(other)
                        stack.append(other)

        members.sort()
        groups.append(
            Group(
                constraints=tuple(constraints[i] for i in members),
                cells=tuple(sorted(seen_cells, key=_row_major)),
            )
        )

    return groups


# -----------------------------------------------------------------------------
# Enumeration
# -----------------------------------------------------------------------------


def enumerate_group(
    group: Group, max_variables: int = MAX_GROUP_VARIABLES
) -> Optional[GroupEnumeration]:
    """
    Count mine occurrences over every assignment satisfying all of a group's constraints.

    Depth-first over the group's cells in order, one mine/safe decision per
    cell. A branch is cut as soon as a constraint would need a negative
    number of mines or more mines than it has unassigned cells left.

    Args:
        group: The group to search.
        max_variables: Groups with more cells are refused.

    Returns:
        The enumeration, or None if the group exceeds max_variables.
    """
    cells = group.cells
    k = len(cells)
    if k > max_variables:
        logger.debug("Skipping group of %d cells (cap %d).", k, max_variables)
        return None

    index = {cell: i for i, cell in enumerate(cells)}
    var_constraints: List[List[int]] = [[] for _ in range(k)]
    remaining: List[int] = []
    unassigned: List[int] = []
    for ci, constraint in enumerate(group.constraints):
        remaining.append(constraint.mines)
        unassigned.append(len(constraint.cells))
        for cell in constraint.cells:
            var_constraints[index[cell]].append(ci)

    assignment: List[int] = [0] * k
    counts: List[int] = [0] * k
    total = 0

    def dfs(i: int) -> None:
        nonlocal total

        if i == k:
            if any(remaining):
                return
            total += 1
            for j in range(k):
                if assignment[j]:
                    counts[j] += 1
            return

        cis = var_constraints[i]
        for ci in cis:
            unassigned[ci] -= 1

        # cell i safe: every constraint must still fit in its unassigned cells
        if all(remaining[ci] <= unassigned[ci] for ci in cis):
            dfs(i + 1)

        # cell i mine: no constraint may go negative
        if all(remaining[ci] > 0 for ci in cis):
            for ci in cis:
                remaining[ci] -= 1
            assignment[i] = 1
            dfs(i + 1)
            assignment[i] = 0
            for ci in cis:
                remaining[ci] += 1

        for ci in cis:
            unassigned[ci] += 1

    if all(0 <= r <= u for r, u in zip(remaining, unassigned)):
        dfs(0)

    return GroupEnumeration(cells=cells, counts=tuple(counts), total=total)
