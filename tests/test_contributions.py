import random
from datetime import date

import pytest

from contribsweeper import (
    ContributionDay,
    board_from_contributions,
    generate_mock_contributions,
    normalize_calendar_year,
    normalize_trailing_year,
)
from contribsweeper.contributions import board_dimensions, index_to_coord


@pytest.mark.parametrize("days, expected", [(364, (7, 52)), (365, (7, 53)), (0, (7, 1))])
def test_board_dimensions(days, expected):
    assert board_dimensions(days) == expected


def test_days_fill_columns_by_week():
    assert index_to_coord(0) == (0, 0)
    assert index_to_coord(6) == (0, 6)
    assert index_to_coord(7) == (1, 0)


def test_board_carries_payload():
    days = [ContributionDay(f"2024-03-{d:02d}", d) for d in range(1, 11)]
    board = board_from_contributions(days)
    assert (board.rows, board.cols) == (7, 2)
    assert board.cell(0, 0).source_date == "2024-03-01"
    assert board.cell(1, 2).source_date == "2024-03-10"
    assert board.cell(1, 2).source_weight == 10
    assert board.cell(1, 3).source_date is None
    assert len(board.eligible_cells()) == 10


class TestNormalize:
    def test_trailing_year_starts_on_sunday(self):
        days = [ContributionDay("2024-06-14", 5), ContributionDay("2024-01-02", 3)]
        out = normalize_trailing_year(days)
        assert date.fromisoformat(out[0].date).weekday() == 6
        assert out[-1] == ContributionDay("2024-06-14", 5)
        assert 364 <= len(out) <= 370
        assert sum(d.count for d in out) == 8

    def test_calendar_year_is_zero_filled(self):
        days = [ContributionDay("2023-05-01", 4), ContributionDay("2024-05-01", 9)]
        out = normalize_calendar_year(2023, days)
        assert len(out) == 365
        assert out[0].date == "2023-01-01"
        assert out[-1].date == "2023-12-31"
        assert sum(d.count for d in out) == 4

    def test_leap_year(self):
        assert len(normalize_calendar_year(2024, [ContributionDay("2024-01-01", 1)])) == 366

    def test_empty_input(self):
        assert normalize_trailing_year([]) == []
        assert normalize_calendar_year(2024, []) == []


class TestMock:
    def test_shape_and_weekends(self):
        today = date(2024, 6, 30)
        days = generate_mock_contributions(28, random.Random(1), today)
        assert len(days) == 28
        assert days[-1].date == "2024-06-30"
        for d in days:
            if date.fromisoformat(d.date).weekday() >= 5:
                assert d.count == 0
            else:
                assert 0 <= d.count <= 7

    def test_seeded_mock_is_reproducible(self):
        today = date(2024, 6, 30)
        a = generate_mock_contributions(50, random.Random(7), today)
        b = generate_mock_contributions(50, random.Random(7), today)
        assert a == b
