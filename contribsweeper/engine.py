"""Contribution Minesweeper board: reveal/flag transitions, flood fill and first-move fairness."""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, Iterator, List, Optional, Set, Tuple

from .utils import get_neighborhoods

logger = logging.getLogger(__name__)

# adjacent_mine_count of a mined cell
MINE_SENTINEL = -1


class CellState(str, Enum):
    HIDDEN = "hidden"
    REVEALED = "revealed"
    FLAGGED = "flagged"


class GameStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(eq=False)
class Cell:
    """
    A single board cell.

    Cells compare and hash by identity so constraints can reference the
    board's own cells rather than copies of them.

    Attributes:
        x: Column index.
        y: Row index.
        is_mine: Whether the cell holds a mine.
        adjacent_mine_count: Mined neighbors, or MINE_SENTINEL for a mine.
        state: Hidden, revealed or flagged.
        source_date: Payload date carried from the data mapper (ISO string).
        source_weight: Payload weight carried from the data mapper.
    """

    x: int
    y: int
    is_mine: bool = False
    adjacent_mine_count: int = 0
    state: CellState = CellState.HIDDEN
    source_date: Optional[str] = None
    source_weight: int = 0

    @property
    def has_payload(self) -> bool:
        return self.source_date is not None


class Board:
    """Rectangular Minesweeper board owning its cells, mine layout and game status."""

    def __init__(self, rows: int, cols: int) -> None:
        """
        Create a board with every cell hidden, no mines and status PLAYING.

        Args:
            rows: Number of rows, must be a positive integer.
            cols: Number of columns, must be a positive integer.

        Raises:
            ValueError: If the dimensions are not positive integers.
        """
        if not isinstance(rows, int) or not isinstance(cols, int):
            raise ValueError("rows and cols must be integers.")
        if isinstance(rows, bool) or isinstance(cols, bool):
            raise ValueError("rows and cols must be integers.")
        if rows <= 0 or cols <= 0:
            raise ValueError("rows and cols must be positive.")

        self.rows: int = rows
        self.cols: int = cols
        self.grid: List[List[Cell]] = [
            [Cell(x, y) for x in range(cols)] for y in range(rows)
        ]

        self.mine_count: int = 0
        self.revealed_count: int = 0
        self.flagged_count: int = 0
        self.status: GameStatus = GameStatus.PLAYING

        self._neighborhoods: Dict[
            Tuple[int, int], Tuple[Tuple[int, int], ...]
        ] = get_neighborhoods(cols, rows)

    def __repr__(self) -> str:
        return (
            f"Board(rows={self.rows}, cols={self.cols}, mines={self.mine_count}, "
            f"revealed={self.revealed_count}, flagged={self.flagged_count}, "
            f"status={self.status.value})"
        )

    # -------------------------------------------------------------------------
    # Cell access
    # -------------------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def cell(self, x: int, y: int) -> Cell:
        """
        Return the cell at (x, y).

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            raise ValueError("Cell coordinates are outside the board.")
        return self.grid[y][x]

    def iter_cells(self) -> Iterator[Cell]:
        """Yield every cell in row-major order."""
        for row in self.grid:
            yield from row

    def neighbors(self, x: int, y: int) -> Tuple[Cell, ...]:
        """Return the up-to-8 cells around (x, y), clipped to the grid."""
        if not self.in_bounds(x, y):
            raise ValueError("Cell coordinates are outside the board.")
        return tuple(self.grid[ny][nx] for nx, ny in self._neighborhoods[(x, y)])

    def hidden_cells(self) -> List[Cell]:
        return [c for c in self.iter_cells() if c.state is CellState.HIDDEN]

    def eligible_cells(self) -> List[Cell]:
        """
        Cells belonging to the playable area.

        On a board mapped from payload data only cells carrying a payload are
        playable; a board without any payload is playable everywhere.
        """
        cells = list(self.iter_cells())
        if any(c.has_payload for c in cells):
            return [c for c in cells if c.has_payload]
        return cells

    @property
    def is_first_move(self) -> bool:
        return self.revealed_count == 0

    # -------------------------------------------------------------------------
    # Mine layout
    # -------------------------------------------------------------------------

    def compute_adjacents(self) -> None:
        """Recount mines and populate every cell's adjacent mine count."""
        mines = 0
        for cell in self.iter_cells():
            if cell.is_mine:
                cell.adjacent_mine_count = MINE_SENTINEL
                mines += 1
                continue

            cell.adjacent_mine_count = sum(
                1 for n in self.neighbors(cell.x, cell.y) if n.is_mine
            )
        self.mine_count = mines

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def flood_fill(self, x: int, y: int) -> List[Cell]:
        """
        Reveal a connected region starting at (x, y).

        Cascades through zero-adjacency cells; revealed and flagged cells are
        skipped. A mine reached by the cascade ends the game as lost.

        Returns:
            The newly revealed cells, in reveal order.
        """
        frontier: Deque[Cell] = deque([self.grid[y][x]])
        visited: Set[Tuple[int, int]] = {(x, y)}
        revealed_cells: List[Cell] = []

        while frontier:
            cell = frontier.popleft()
            if cell.state is not CellState.HIDDEN:
                continue

            cell.state = CellState.REVEALED
            self.revealed_count += 1
            revealed_cells.append(cell)

            if cell.is_mine:
                logger.debug("Flood fill reached a mine at (%d, %d).", cell.x, cell.y)
                self.status = GameStatus.LOST
                break

            if cell.adjacent_mine_count == 0:
                for n in self.neighbors(cell.x, cell.y):
                    if (n.x, n.y) in visited or n.state is not CellState.HIDDEN:
                        continue
                    visited.add((n.x, n.y))
                    frontier.append(n)

        return revealed_cells

    def _check_win(self) -> None:
        if self.status is not GameStatus.PLAYING:
            return
        if self.revealed_count == self.rows * self.cols - self.mine_count:
            self.status = GameStatus.WON

    def reveal(self, x: int, y: int) -> List[Cell]:
        """
        Reveal a cell, cascading through zero-adjacency regions.

        No-op when the game is over or the cell is not hidden. Revealing a mine
        loses the game.

        Args:
            x: Column of the cell.
            y: Row of the cell.

        Returns:
            The newly revealed cells (empty for a no-op).

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        cell = self.cell(x, y)
        if self.status is not GameStatus.PLAYING:
            return []
        if cell.state is not CellState.HIDDEN:
            return []

        if cell.is_mine:
            cell.state = CellState.REVEALED
            self.revealed_count += 1
            self.status = GameStatus.LOST
            return [cell]

        revealed_cells = self.flood_fill(x, y)
        self._check_win()
        return revealed_cells

    def toggle_flag(self, x: int, y: int) -> None:
        """
        Flag a hidden cell or unflag a flagged one.

        No-op when the game is over or the cell is revealed.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        cell = self.cell(x, y)
        if self.status is not GameStatus.PLAYING:
            return

        if cell.state is CellState.HIDDEN:
            cell.state = CellState.FLAGGED
            self.flagged_count += 1
        elif cell.state is CellState.FLAGGED:
            cell.state = CellState.HIDDEN
            self.flagged_count -= 1

    def safe_reveal(self, x: int, y: int) -> List[Cell]:
        """
        Reveal with first-move fairness.

        On the first reveal of a game a mine under (x, y) is swapped with the
        first eligible non-mine cell, then mines around (x, y) are moved to
        eligible cells outside its neighborhood so the opening cascades. The
        relocation is skipped when there are not enough targets. Later reveals
        behave exactly like reveal().

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        cell = self.cell(x, y)
        if (
            not self.is_first_move
            or self.status is not GameStatus.PLAYING
            or cell.state is not CellState.HIDDEN
        ):
            return self.reveal(x, y)

        if cell.is_mine:
            swap = next(
                (c for c in self.eligible_cells() if not c.is_mine and c is not cell),
                None,
            )
            if swap is not None:
                cell.is_mine = False
                swap.is_mine = True
                logger.debug(
                    "First move (%d, %d) was a mine; moved it to (%d, %d).",
                    x, y, swap.x, swap.y,
                )

        self._clear_opening(cell)
        self.compute_adjacents()
        return self.reveal(x, y)

    def _clear_opening(self, start: Cell) -> None:
        """Move mines adjacent to the opening cell elsewhere, all or nothing."""
        if start.is_mine:
            return

        neighbors = self.neighbors(start.x, start.y)
        neighbor_mines = [n for n in neighbors if n.is_mine]
        if not neighbor_mines:
            return

        forbidden: Set[Cell] = {start, *neighbors}
        candidates = [
            c for c in self.eligible_cells() if not c.is_mine and c not in forbidden
        ]
        if len(candidates) < len(neighbor_mines):
            logger.debug(
                "Cannot clear opening at (%d, %d): %d mines, %d targets.",
                start.x, start.y, len(neighbor_mines), len(candidates),
            )
            return

        for mine, target in zip(neighbor_mines, candidates):
            mine.is_mine = False
            target.is_mine = True

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"

    def _c(self, s: str) -> str:
        """Wrap string in coordinate color."""
        return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

    def _m(self, s: str) -> str:
        """Wrap string in mine color (red)."""
        return f"{self._ANSI_MINE}{s}{self._ANSI_RESET}"

    def format_board(self, reveal_all: bool = False, color: bool = True) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and all underlying values.
            color: If False, emit plain text without ANSI escapes.

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        c = self._c if color else str
        m = self._m if color else str

        def cell_str(cell: Cell) -> str:
            if cell.state is CellState.FLAGGED and not reveal_all:
                return "F"
            if reveal_all or cell.state is CellState.REVEALED:
                if cell.is_mine:
                    return m("M")
                return str(cell.adjacent_mine_count)
            return "."

        # Header: x coordinates
        header_cells = " ".join(f"{x:2d}" for x in range(self.cols))
        out = [c("   ") + c(header_cells)]
        out.append(c("   " + "-" * (3 * self.cols - 1)))

        for y, row in enumerate(self.grid):
            row_cells = " ".join(f" {cell_str(cell)}" for cell in row)
            out.append(c(f"{y:2d} ") + c("|") + row_cells)

        return "\n".join(out)

    def print_board(self) -> None:
        """Print the current visible board state to stdout."""
        print(self.format_board(reveal_all=False))

    def print_full_board(self) -> None:
        """Print the fully revealed underlying board to stdout (for debugging)."""
        print(self.format_board(reveal_all=True))


# -----------------------------------------------------------------------------
# Functional interface
# -----------------------------------------------------------------------------


def create_board(rows: int, cols: int) -> Board:
    """Create an empty board: all cells hidden, no mines, status PLAYING."""
    return Board(rows, cols)


def compute_adjacents(board: Board) -> None:
    board.compute_adjacents()


def reveal(board: Board, x: int, y: int) -> List[Cell]:
    return board.reveal(x, y)


def safe_reveal(board: Board, x: int, y: int) -> List[Cell]:
    return board.safe_reveal(x, y)


def toggle_flag(board: Board, x: int, y: int) -> None:
    board.toggle_flag(x, y)


def play_cli(board: Board) -> None:
    """
    Run a simple terminal UI for playing on a prepared board.

    Commands: "x y" reveals a cell, "f x y" toggles a flag, "q" quits.

    Args:
        board: A board with mines placed and adjacency computed.
    """
    print("Minesweeper CLI (enter: x y, or f x y to flag). Coordinates are 0-based. Type 'q' to quit.\n")
    print(board.format_board(reveal_all=False))

    while True:
        s = input("\nMove (x y): ").strip()
        if s.lower() in {"q", "quit", "exit"}:
            print("Quit.")
            return

        parts = s.replace(",", " ").split()
        flag = bool(parts) and parts[0].lower() == "f"
        if flag:
            parts = parts[1:]
        if len(parts) != 2:
            print("Invalid input. Example: 3 5")
            continue

        try:
            x = int(parts[0])
            y = int(parts[1])
        except ValueError:
            print("Invalid input. Coordinates must be integers.")
            continue

        if not board.in_bounds(x, y):
            print("Invalid input. Cell is outside the board.")
            continue

        if flag:
            board.toggle_flag(x, y)
            print(f"\nYou toggled the flag on ({x}, {y}).\n")
        else:
            board.safe_reveal(x, y)
            print(f"\nYou decided to reveal ({x}, {y}).\n")
        print(board.format_board(reveal_all=False))

        if board.status is GameStatus.LOST:
            print("\nYou hit a mine. You lost.")
            print("\nFull board:")
            print(board.format_board(reveal_all=True))
            return

        if board.status is GameStatus.WON:
            print("\nYou revealed all safe cells. You won!")
            print("\nFull board:")
            print(board.format_board(reveal_all=True))
            return
