"""Mine placement strategies feeding a Board before solving."""

import math
import random
from typing import Callable, Iterable, List, Optional, Set, Tuple

import numpy as np

from .engine import Board, Cell


def place_mines(board: Board, predicate: Callable[[Cell], bool]) -> Board:
    """
    Lay mines wherever predicate(cell) is true, then recompute adjacency.

    Any previous layout is replaced. board.mine_count reflects the new layout.
    """
    for cell in board.iter_cells():
        cell.is_mine = bool(predicate(cell))
    board.compute_adjacents()
    return board


def place_mines_at(board: Board, coords: Iterable[Tuple[int, int]]) -> Board:
    """
    Lay mines at explicit (x, y) coordinates.

    Raises:
        ValueError: If a coordinate is outside the board.
    """
    wanted: Set[Tuple[int, int]] = set()
    for x, y in coords:
        board.cell(x, y)
        wanted.add((x, y))
    return place_mines(board, lambda c: (c.x, c.y) in wanted)


def place_random_mines(
    board: Board,
    mines_count: int,
    rng: Optional[random.Random] = None,
    exclude: Iterable[Tuple[int, int]] = (),
) -> Board:
    """
    Sample mines uniformly without replacement.

    Args:
        board: Board to populate.
        mines_count: Number of mines, must be >= 0.
        rng: Random source; a fresh unseeded one when omitted.
        exclude: Coordinates that must stay safe.

    Raises:
        ValueError: If mines_count is negative or exceeds the eligible cells.
    """
    if mines_count < 0:
        raise ValueError("mines_count must be non-negative.")
    rng = rng or random.Random()

    safe: Set[Tuple[int, int]] = set(exclude)
    eligible: List[Tuple[int, int]] = [
        (x, y)
        for y in range(board.rows)
        for x in range(board.cols)
        if (x, y) not in safe
    ]
    if mines_count > len(eligible):
        raise ValueError("Cannot place that many mines on this board.")

    mines = set(rng.sample(eligible, mines_count))
    return place_mines(board, lambda c: (c.x, c.y) in mines)


def place_mines_by_weight(
    board: Board,
    ratio: float = 0.15,
    rng: Optional[np.random.Generator] = None,
) -> Board:
    """
    Place mines on payload cells, favouring cells with low source_weight.

    The mine target is max(1, floor(playable * ratio)). Each playable cell is
    weighted max_weight - source_weight + 1, or uniformly when every weight is
    zero, and mines are drawn without replacement.

    Args:
        board: Board whose playable cells carry a payload.
        ratio: Fraction of playable cells to mine, in (0, 1].
        rng: numpy Generator; a fresh unseeded one when omitted.

    Raises:
        ValueError: If ratio is outside (0, 1].
    """
    if not 0 < ratio <= 1:
        raise ValueError("ratio must be in (0, 1].")
    rng = rng if rng is not None else np.random.default_rng()

    cells = [c for c in board.iter_cells() if c.has_payload]
    if not cells:
        return place_mines(board, lambda c: False)

    target = min(len(cells), max(1, math.floor(len(cells) * ratio)))
    counts = np.array([c.source_weight for c in cells], dtype=float)
    if not counts.any():
        weights = np.ones_like(counts)
    else:
        weights = counts.max() - counts + 1.0
    picks = rng.choice(len(cells), size=target, replace=False, p=weights / weights.sum())

    mined = {cells[i] for i in picks}
    return place_mines(board, lambda c: c in mined)
