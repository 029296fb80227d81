"""Grid helpers shared by the board and the solver."""

from typing import Dict, Tuple

Coord = Tuple[int, int]
Neighborhoods = Dict[Coord, Tuple[Coord, ...]]

# 8-connectivity, row-major around the centre cell
_OFFSETS: Tuple[Coord, ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)

# (cols, rows) -> neighborhoods; boards of one size share a table
_NEIGHBORHOODS_CACHE: Dict[Coord, Neighborhoods] = {}


def get_neighborhoods(cols: int, rows: int) -> Neighborhoods:
    """
    Neighbor coordinates of every cell of a cols x rows grid, clipped to the grid.

    Tables are built once per board size and reused.

    Raises:
        ValueError: If cols or rows is non-positive.
    """
    if cols <= 0 or rows <= 0:
        raise ValueError("cols and rows must be positive.")

    table = _NEIGHBORHOODS_CACHE.get((cols, rows))
    if table is None:
        table = {
            (x, y): tuple(
                (x + dx, y + dy)
                for dx, dy in _OFFSETS
                if 0 <= x + dx < cols and 0 <= y + dy < rows
            )
            for y in range(rows)
            for x in range(cols)
        }
        _NEIGHBORHOODS_CACHE[(cols, rows)] = table
    return table


def distance_from_center(x: int, y: int, cols: int, rows: int) -> float:
    """Manhattan distance of (x, y) from the geometric centre of a cols x rows grid."""
    return abs(x - cols / 2) + abs(y - rows / 2)
