import random

import numpy as np
import pytest

from contribsweeper import (
    create_board,
    place_mines,
    place_mines_at,
    place_mines_by_weight,
    place_random_mines,
)
from contribsweeper.engine import MINE_SENTINEL


def test_place_mines_by_predicate():
    board = place_mines(create_board(2, 3), lambda c: c.x == 1)
    assert board.mine_count == 2
    assert board.cell(1, 0).adjacent_mine_count == MINE_SENTINEL
    assert board.cell(0, 0).adjacent_mine_count == 2


def test_place_mines_replaces_previous_layout():
    board = place_mines_at(create_board(2, 2), [(0, 0)])
    place_mines_at(board, [(1, 1)])
    assert not board.cell(0, 0).is_mine
    assert board.mine_count == 1


def test_place_mines_at_rejects_outside_coords():
    with pytest.raises(ValueError):
        place_mines_at(create_board(2, 2), [(2, 0)])


class TestRandomPlacement:
    def test_count_and_exclusion(self):
        board = create_board(6, 6)
        safe = [(x, y) for x in range(3) for y in range(3)]
        place_random_mines(board, 20, random.Random(3), exclude=safe)
        assert board.mine_count == 20
        assert not any(board.cell(x, y).is_mine for x, y in safe)

    def test_seeded_layout_is_reproducible(self):
        a = place_random_mines(create_board(8, 8), 10, random.Random(42))
        b = place_random_mines(create_board(8, 8), 10, random.Random(42))
        assert [c.is_mine for c in a.iter_cells()] == [c.is_mine for c in b.iter_cells()]

    def test_too_many_mines(self):
        with pytest.raises(ValueError):
            place_random_mines(create_board(2, 2), 5)

    def test_negative_count(self):
        with pytest.raises(ValueError):
            place_random_mines(create_board(2, 2), -1)


class TestWeightedPlacement:
    def _payload_board(self, counts):
        board = create_board(1, len(counts) + 1)
        for x, count in enumerate(counts):
            cell = board.cell(x, 0)
            cell.source_date = f"2024-02-{x + 1:02d}"
            cell.source_weight = count
        return board

    def test_target_count_and_playable_cells_only(self):
        board = self._payload_board([0] * 20)
        place_mines_by_weight(board, 0.25, np.random.default_rng(0))
        assert board.mine_count == 5
        assert not board.cell(20, 0).is_mine

    def test_at_least_one_mine(self):
        board = self._payload_board([1, 2, 3])
        place_mines_by_weight(board, 0.01, np.random.default_rng(0))
        assert board.mine_count == 1

    def test_quiet_days_attract_mines(self):
        hits = 0
        for seed in range(20):
            board = self._payload_board([0, 1000, 1000, 1000])
            place_mines_by_weight(board, 0.25, np.random.default_rng(seed))
            hits += board.cell(0, 0).is_mine
        assert hits >= 15

    def test_no_payload_means_no_mines(self):
        board = place_mines_by_weight(create_board(3, 3), 0.5, np.random.default_rng(0))
        assert board.mine_count == 0

    @pytest.mark.parametrize("ratio", [0, -0.1, 1.5])
    def test_rejects_bad_ratio(self, ratio):
        with pytest.raises(ValueError):
            place_mines_by_weight(self._payload_board([1, 2]), ratio)
