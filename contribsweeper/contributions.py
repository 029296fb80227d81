"""Map daily contribution counts onto a 7-row board and generate mock data."""

import math
import random
from datetime import date, timedelta
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from .engine import Board

DAYS_PER_WEEK = 7


class ContributionDay(NamedTuple):
    date: str  # ISO yyyy-mm-dd
    count: int


def board_dimensions(days_count: int) -> Tuple[int, int]:
    """Return (rows, cols): one row per weekday, one column per week."""
    return DAYS_PER_WEEK, max(1, math.ceil(days_count / DAYS_PER_WEEK))


def index_to_coord(index: int) -> Tuple[int, int]:
    """Day index -> (x, y): days fill a column top to bottom, then the next week."""
    return index // DAYS_PER_WEEK, index % DAYS_PER_WEEK


def board_from_contributions(days: Iterable[ContributionDay]) -> Board:
    """
    Build an empty board whose cells carry each day's date and count.

    Padding cells in the last week carry no payload and are outside the
    playable area.
    """
    days = list(days)
    rows, cols = board_dimensions(len(days))
    board = Board(rows, cols)
    for i, day in enumerate(days):
        x, y = index_to_coord(i)
        cell = board.grid[y][x]
        cell.source_date = day.date
        cell.source_weight = int(day.count)
    return board


def _fill_range(start: date, end: date, counts: Dict[str, int]) -> List[ContributionDay]:
    out: List[ContributionDay] = []
    cur = start
    while cur <= end:
        iso = cur.isoformat()
        out.append(ContributionDay(iso, counts.get(iso, 0)))
        cur += timedelta(days=1)
    return out


def normalize_trailing_year(days: Iterable[ContributionDay]) -> List[ContributionDay]:
    """
    Align days to the trailing 52 weeks ending at the latest date.

    The range starts on a Sunday so every column is a calendar week; missing
    days get a zero count.
    """
    days = list(days)
    if not days:
        return []

    counts = {d.date: d.count for d in days}
    end = max(date.fromisoformat(d.date) for d in days)
    start = end - timedelta(days=DAYS_PER_WEEK * 52 - 1)
    # date.weekday(): Monday == 0, Sunday == 6
    while start.weekday() != 6:
        start -= timedelta(days=1)
    return _fill_range(start, end, counts)


def normalize_calendar_year(year: int, days: Iterable[ContributionDay]) -> List[ContributionDay]:
    """Return every day of the given calendar year, zero-filled."""
    days = list(days)
    if not days:
        return []

    prefix = f"{year:04d}-"
    counts = {d.date: d.count for d in days if d.date.startswith(prefix)}
    return _fill_range(date(year, 1, 1), date(year, 12, 31), counts)


def generate_mock_contributions(
    days: int = 364,
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> List[ContributionDay]:
    """Synthetic activity: quiet weekends, 2-7 on weekdays, occasional idle days."""
    rng = rng or random.Random()
    today = today or date.today()

    result: List[ContributionDay] = []
    for i in range(days - 1, -1, -1):
        d = today - timedelta(days=i)
        if d.weekday() >= 5:
            count = 0
        else:
            count = 2 + rng.randrange(6)
        if rng.random() < 0.1:
            count = 0
        result.append(ContributionDay(d.isoformat(), count))
    return result
