from collections import deque

import pytest

from contribsweeper import (
    Board,
    CellState,
    GameStatus,
    create_board,
    play_cli,
    reveal,
    toggle_flag,
)
from contribsweeper.engine import MINE_SENTINEL

from tests.helpers import build_board, random_board


class TestCreateBoard:
    def test_empty_board(self):
        board = create_board(3, 4)
        assert (board.rows, board.cols) == (3, 4)
        assert board.status is GameStatus.PLAYING
        assert board.mine_count == board.revealed_count == board.flagged_count == 0
        assert all(c.state is CellState.HIDDEN and not c.is_mine for c in board.iter_cells())

    @pytest.mark.parametrize("rows, cols", [(0, 3), (3, 0), (-1, 2), (2.5, 3), (True, 3)])
    def test_rejects_bad_dimensions(self, rows, cols):
        with pytest.raises(ValueError):
            create_board(rows, cols)

    def test_cells_know_their_coordinates(self):
        board = create_board(2, 3)
        assert board.cell(2, 1).x == 2
        assert board.cell(2, 1).y == 1


class TestNeighbors:
    @pytest.mark.parametrize("x, y, expected", [(0, 0, 3), (1, 0, 5), (1, 1, 8), (3, 2, 3)])
    def test_counts(self, x, y, expected):
        board = create_board(3, 4)
        assert len(board.neighbors(x, y)) == expected

    def test_no_wraparound(self):
        board = create_board(3, 3)
        coords = {(c.x, c.y) for c in board.neighbors(0, 0)}
        assert coords == {(1, 0), (0, 1), (1, 1)}

    def test_out_of_bounds(self):
        with pytest.raises(ValueError):
            create_board(3, 3).neighbors(3, 0)


class TestComputeAdjacents:
    def test_counts_and_sentinel(self):
        board = build_board(3, 3, [(0, 0), (2, 2)])
        assert board.cell(0, 0).adjacent_mine_count == MINE_SENTINEL
        assert board.cell(1, 1).adjacent_mine_count == 2
        assert board.cell(2, 0).adjacent_mine_count == 0
        assert board.cell(1, 0).adjacent_mine_count == 1
        assert board.mine_count == 2

    def test_recomputed_after_layout_change(self):
        board = build_board(3, 3, [(0, 0)])
        board.cell(0, 0).is_mine = False
        board.cell(2, 2).is_mine = True
        board.compute_adjacents()
        assert board.cell(1, 0).adjacent_mine_count == 0
        assert board.cell(1, 1).adjacent_mine_count == 1
        assert board.mine_count == 1


class TestReveal:
    def test_flood_wins_single_mine_board(self, single_mine_board):
        revealed = reveal(single_mine_board, 0, 0)
        assert len(revealed) == 8
        assert single_mine_board.revealed_count == 8
        assert single_mine_board.status is GameStatus.WON
        assert single_mine_board.cell(2, 2).state is CellState.HIDDEN

    def test_numbered_cell_does_not_cascade(self, single_mine_board):
        assert len(single_mine_board.reveal(1, 1)) == 1
        assert single_mine_board.status is GameStatus.PLAYING

    def test_flood_skips_flags(self, single_mine_board):
        single_mine_board.toggle_flag(0, 2)
        single_mine_board.reveal(0, 0)
        assert single_mine_board.cell(0, 2).state is CellState.FLAGGED
        assert single_mine_board.revealed_count == 7
        assert single_mine_board.status is GameStatus.PLAYING

    def test_mine_loses(self, single_mine_board):
        single_mine_board.reveal(2, 2)
        assert single_mine_board.status is GameStatus.LOST
        assert single_mine_board.cell(2, 2).state is CellState.REVEALED
        assert single_mine_board.revealed_count == 1

    def test_no_reveal_after_loss(self, single_mine_board):
        single_mine_board.reveal(2, 2)
        assert single_mine_board.reveal(0, 0) == []
        assert single_mine_board.cell(0, 0).state is CellState.HIDDEN
        assert single_mine_board.status is GameStatus.LOST

    def test_won_is_terminal(self, single_mine_board):
        single_mine_board.reveal(0, 0)
        single_mine_board.reveal(2, 2)
        assert single_mine_board.status is GameStatus.WON
        assert single_mine_board.cell(2, 2).state is CellState.HIDDEN

    def test_revealed_cell_is_noop(self, single_mine_board):
        single_mine_board.reveal(1, 1)
        assert single_mine_board.reveal(1, 1) == []
        assert single_mine_board.revealed_count == 1

    def test_flagged_cell_is_noop(self, single_mine_board):
        single_mine_board.toggle_flag(1, 1)
        assert single_mine_board.reveal(1, 1) == []

    @pytest.mark.parametrize("x, y", [(-1, 0), (3, 0), (0, 3)])
    def test_out_of_bounds(self, single_mine_board, x, y):
        with pytest.raises(ValueError):
            single_mine_board.reveal(x, y)

    def test_stale_adjacency_flood_into_mine_loses(self):
        board = build_board(1, 3, [])
        board.cell(2, 0).is_mine = True  # adjacency deliberately not recomputed
        board.reveal(0, 0)
        assert board.status is GameStatus.LOST

    @pytest.mark.parametrize("seed", range(8))
    def test_flood_reaches_every_connected_cell(self, seed):
        board = random_board(seed, rows=10, cols=12, mines=15)
        zeros = [c for c in board.iter_cells() if not c.is_mine and c.adjacent_mine_count == 0]
        if not zeros:
            pytest.skip("layout has no zero cell")
        start = zeros[0]

        expected = {(start.x, start.y)}
        queue = deque([start])
        while queue:
            cell = queue.popleft()
            if cell.adjacent_mine_count != 0:
                continue
            for n in board.neighbors(cell.x, cell.y):
                if (n.x, n.y) not in expected:
                    expected.add((n.x, n.y))
                    queue.append(n)

        board.reveal(start.x, start.y)
        revealed = {(c.x, c.y) for c in board.iter_cells() if c.state is CellState.REVEALED}
        assert revealed == expected
        assert board.revealed_count == len(expected)
        assert board.status is not GameStatus.LOST


class TestToggleFlag:
    def test_flag_and_unflag(self, single_mine_board):
        toggle_flag(single_mine_board, 2, 2)
        assert single_mine_board.cell(2, 2).state is CellState.FLAGGED
        assert single_mine_board.flagged_count == 1
        toggle_flag(single_mine_board, 2, 2)
        assert single_mine_board.cell(2, 2).state is CellState.HIDDEN
        assert single_mine_board.flagged_count == 0

    def test_flag_does_not_change_layout(self, single_mine_board):
        single_mine_board.toggle_flag(0, 0)
        assert not single_mine_board.cell(0, 0).is_mine
        assert single_mine_board.status is GameStatus.PLAYING

    def test_revealed_cell_is_noop(self, single_mine_board):
        single_mine_board.reveal(1, 1)
        single_mine_board.toggle_flag(1, 1)
        assert single_mine_board.cell(1, 1).state is CellState.REVEALED
        assert single_mine_board.flagged_count == 0

    def test_noop_after_loss(self, single_mine_board):
        single_mine_board.reveal(2, 2)
        single_mine_board.toggle_flag(0, 0)
        assert single_mine_board.flagged_count == 0

    def test_out_of_bounds(self, single_mine_board):
        with pytest.raises(ValueError):
            single_mine_board.toggle_flag(5, 5)


class TestSafeReveal:
    def test_mine_under_first_move_is_moved(self):
        board = build_board(3, 3, [(0, 0)])
        board.safe_reveal(0, 0)
        assert not board.cell(0, 0).is_mine
        assert board.cell(2, 0).is_mine
        assert board.mine_count == 1
        assert board.status is GameStatus.WON

    def test_neighbor_mines_are_relocated(self):
        board = build_board(5, 5, [(1, 1), (0, 1)])
        board.safe_reveal(0, 0)
        assert board.cell(0, 0).adjacent_mine_count == 0
        assert board.mine_count == 2
        assert board.revealed_count > 1

    def test_not_enough_targets_keeps_layout(self):
        board = build_board(2, 2, [(1, 1)])
        board.safe_reveal(0, 0)
        assert board.cell(1, 1).is_mine
        assert board.cell(0, 0).adjacent_mine_count == 1
        assert board.revealed_count == 1
        assert board.status is GameStatus.PLAYING

    def test_targets_limited_to_payload_cells(self):
        board = build_board(1, 4, [(0, 0)])
        for x in range(3):
            board.cell(x, 0).source_date = f"2024-01-0{x + 1}"
        board.safe_reveal(0, 0)
        assert board.cell(2, 0).is_mine
        assert not board.cell(3, 0).is_mine
        assert board.revealed_count == 2
        assert board.status is GameStatus.PLAYING

    def test_later_moves_are_plain_reveals(self):
        board = build_board(3, 3, [(2, 2), (0, 2)])
        board.reveal(2, 0)
        board.safe_reveal(2, 2)
        assert board.status is GameStatus.LOST
        assert board.cell(2, 2).is_mine


class TestFormatBoard:
    def test_plain_rendering(self, single_mine_board):
        single_mine_board.toggle_flag(2, 2)
        single_mine_board.reveal(1, 1)
        text = single_mine_board.format_board(color=False)
        lines = text.splitlines()
        assert len(lines) == 5
        assert lines[3].endswith(" .  1  .")
        assert lines[4].endswith(" .  .  F")

    def test_reveal_all_shows_mines(self, single_mine_board):
        text = single_mine_board.format_board(reveal_all=True, color=False)
        assert "M" in text
        assert "." not in text.splitlines()[-1]


class TestPlayCli:
    def _feed(self, monkeypatch, moves):
        it = iter(moves)
        monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))

    def test_win(self, monkeypatch, capsys, single_mine_board):
        self._feed(monkeypatch, ["oops", "f 2 2", "0 0"])
        play_cli(single_mine_board)
        out = capsys.readouterr().out
        assert "Invalid input" in out
        assert "You won" in out
        assert single_mine_board.cell(2, 2).state is CellState.FLAGGED

    def test_quit(self, monkeypatch, capsys):
        self._feed(monkeypatch, ["9 9", "q"])
        play_cli(Board(3, 3))
        out = capsys.readouterr().out
        assert "outside the board" in out
        assert "Quit." in out
