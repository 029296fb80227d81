"""Replayable action trace: action records, traced reveals and replay."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .engine import Board, CellState, GameStatus


class ActionKind(str, Enum):
    REVEAL = "reveal"
    FLAG = "flag"
    GUESS = "guess"
    FLOOD = "flood"


class Outcome(str, Enum):
    SAFE = "safe"
    BOOM = "boom"


@dataclass(frozen=True)
class Action:
    """
    One solving step.

    REVEAL and GUESS carry an outcome; FLOOD follows the reveal that
    cascaded and carries the number of extra cells it opened.
    """

    kind: ActionKind
    x: int
    y: int
    outcome: Optional[Outcome] = None
    flood_extra: Optional[int] = None

    def to_dict(self) -> dict:
        out = {"kind": self.kind.value, "x": self.x, "y": self.y}
        if self.outcome is not None:
            out["outcome"] = self.outcome.value
        if self.flood_extra is not None:
            out["flood_extra"] = self.flood_extra
        return out

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        """
        Rebuild an action from to_dict() output.

        Raises:
            ValueError: If a required key is missing or a value is unknown.
        """
        missing = {"kind", "x", "y"} - set(data)
        if missing:
            raise ValueError(f"Action is missing keys: {sorted(missing)}")
        outcome = data.get("outcome")
        return cls(
            ActionKind(data["kind"]),
            int(data["x"]),
            int(data["y"]),
            Outcome(outcome) if outcome is not None else None,
            data.get("flood_extra"),
        )


def reveal_with_trace(
    board: Board,
    x: int,
    y: int,
    actions: List[Action],
    kind: ActionKind = ActionKind.REVEAL,
    safe: bool = False,
) -> bool:
    """
    Reveal (x, y) and append the resulting actions.

    Appends the reveal itself (tagged with kind) and, when the reveal
    cascaded, a FLOOD notice with the extra cell count.

    Args:
        board: Board to mutate.
        x: Column of the cell.
        y: Row of the cell.
        actions: Trace to extend.
        kind: REVEAL for certain moves, GUESS for guesses.
        safe: Use first-move fairness (Board.safe_reveal).

    Returns:
        True if the cell was hidden and got revealed.
    """
    cell = board.cell(x, y)
    if board.status is not GameStatus.PLAYING or cell.state is not CellState.HIDDEN:
        return False

    before = board.revealed_count
    if safe:
        board.safe_reveal(x, y)
    else:
        board.reveal(x, y)

    if board.status is GameStatus.LOST:
        actions.append(Action(kind, x, y, Outcome.BOOM))
        return True

    actions.append(Action(kind, x, y, Outcome.SAFE))
    extra = board.revealed_count - before - 1
    if extra > 0:
        actions.append(Action(ActionKind.FLOOD, x, y, flood_extra=extra))
    return True


def flag_with_trace(board: Board, x: int, y: int, actions: List[Action]) -> bool:
    """Flag a hidden cell and append a FLAG action. Returns True if flagged."""
    cell = board.cell(x, y)
    if board.status is not GameStatus.PLAYING or cell.state is not CellState.HIDDEN:
        return False
    board.toggle_flag(x, y)
    actions.append(Action(ActionKind.FLAG, x, y))
    return True


def apply_action(board: Board, action: Action) -> None:
    """
    Replay a single action against a board.

    Depends only on (board, action). Ignored once the game is over; reveals
    and flags only touch hidden cells; FLOOD notices are informational.

    Raises:
        ValueError: If the action's coordinates are outside the board.
    """
    if board.status is not GameStatus.PLAYING:
        return

    if action.kind in (ActionKind.REVEAL, ActionKind.GUESS):
        if board.cell(action.x, action.y).state is CellState.HIDDEN:
            board.reveal(action.x, action.y)
    elif action.kind is ActionKind.FLAG:
        if board.cell(action.x, action.y).state is CellState.HIDDEN:
            board.toggle_flag(action.x, action.y)


def apply_actions(board: Board, actions: Iterable[Action]) -> Board:
    """Replay actions in order and return the board."""
    for action in actions:
        apply_action(board, action)
    return board
