import matplotlib

matplotlib.use("Agg")

import pytest

from contribsweeper import Board

from tests.helpers import build_board


@pytest.fixture
def single_mine_board() -> Board:
    """3x3 with a single mine in the bottom-right corner."""
    return build_board(3, 3, [(2, 2)])
