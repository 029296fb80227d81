"""Board builders shared by the test modules."""

import random
from typing import Iterable, Tuple

from contribsweeper import Board, CellState, create_board, place_mines_at, place_random_mines


def build_board(rows: int, cols: int, mines: Iterable[Tuple[int, int]]) -> Board:
    board = create_board(rows, cols)
    place_mines_at(board, mines)
    return board


def open_cells(board: Board, coords: Iterable[Tuple[int, int]]) -> Board:
    """Mark cells revealed without cascading, to set up mid-game positions."""
    for x, y in coords:
        cell = board.cell(x, y)
        assert not cell.is_mine
        cell.state = CellState.REVEALED
        board.revealed_count += 1
    return board


def random_board(seed: int, rows: int = 9, cols: int = 9, mines: int = 10) -> Board:
    board = create_board(rows, cols)
    place_random_mines(board, mines, random.Random(seed))
    return board
