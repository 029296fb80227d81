"""Value snapshots of a board's mine layout, for replay."""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .engine import Board

_CELL_KEYS = ("x", "y", "is_mine", "adjacent_mine_count", "source_date", "source_weight")


@dataclass(frozen=True)
class CellRecord:
    x: int
    y: int
    is_mine: bool
    adjacent_mine_count: int
    source_date: Optional[str] = None
    source_weight: int = 0


@dataclass(frozen=True)
class Snapshot:
    """Layout and payload of every cell; play state is not captured."""

    rows: int
    cols: int
    cells: Tuple[Tuple[CellRecord, ...], ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "cells": [
                [{k: getattr(rec, k) for k in _CELL_KEYS} for rec in row]
                for row in self.cells
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """
        Parse to_dict() output.

        Raises:
            ValueError: If keys are missing or the cell grid does not match
                rows x cols.
        """
        missing = {"rows", "cols", "cells"} - set(data)
        if missing:
            raise ValueError(f"Snapshot is missing keys: {sorted(missing)}")

        rows, cols = int(data["rows"]), int(data["cols"])
        raw_rows = data["cells"]
        if len(raw_rows) != rows or any(len(r) != cols for r in raw_rows):
            raise ValueError("Snapshot cells do not match rows x cols.")

        cells: List[Tuple[CellRecord, ...]] = []
        for raw_row in raw_rows:
            row: List[CellRecord] = []
            for raw in raw_row:
                absent = {"x", "y", "is_mine", "adjacent_mine_count"} - set(raw)
                if absent:
                    raise ValueError(f"Snapshot cell is missing keys: {sorted(absent)}")
                row.append(
                    CellRecord(
                        x=int(raw["x"]),
                        y=int(raw["y"]),
                        is_mine=bool(raw["is_mine"]),
                        adjacent_mine_count=int(raw["adjacent_mine_count"]),
                        source_date=raw.get("source_date"),
                        source_weight=int(raw.get("source_weight", 0)),
                    )
                )
            cells.append(tuple(row))
        return cls(rows, cols, tuple(cells))


def snapshot(board: Board) -> Snapshot:
    """Copy the board's mine layout, adjacency and payload."""
    return Snapshot(
        rows=board.rows,
        cols=board.cols,
        cells=tuple(
            tuple(
                CellRecord(
                    c.x, c.y, c.is_mine, c.adjacent_mine_count,
                    c.source_date, c.source_weight,
                )
                for c in row
            )
            for row in board.grid
        ),
    )


def restore(snap: Snapshot) -> Board:
    """
    Rebuild a fresh board from a snapshot: same layout, all cells hidden,
    status PLAYING.

    Raises:
        ValueError: If the snapshot's cell grid does not match its dimensions.
    """
    board = Board(snap.rows, snap.cols)
    if len(snap.cells) != snap.rows or any(len(r) != snap.cols for r in snap.cells):
        raise ValueError("Snapshot cells do not match rows x cols.")

    mines = 0
    for y, row in enumerate(snap.cells):
        for x, rec in enumerate(row):
            dst = board.grid[y][x]
            dst.is_mine = rec.is_mine
            dst.adjacent_mine_count = rec.adjacent_mine_count
            dst.source_date = rec.source_date
            dst.source_weight = rec.source_weight
            mines += rec.is_mine
    board.mine_count = mines
    return board
