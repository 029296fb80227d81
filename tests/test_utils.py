import pytest

from contribsweeper.utils import distance_from_center, get_neighborhoods


def test_corner_and_interior():
    table = get_neighborhoods(4, 3)
    assert set(table[(0, 0)]) == {(1, 0), (0, 1), (1, 1)}
    assert len(table[(1, 1)]) == 8
    assert len(table) == 12


def test_tables_are_cached_per_size():
    assert get_neighborhoods(5, 2) is get_neighborhoods(5, 2)
    assert get_neighborhoods(5, 2) is not get_neighborhoods(2, 5)


def test_rejects_empty_grid():
    with pytest.raises(ValueError):
        get_neighborhoods(0, 3)


def test_distance_from_center():
    assert distance_from_center(0, 0, 4, 4) == 4.0
    assert distance_from_center(2, 2, 4, 4) == 0.0
