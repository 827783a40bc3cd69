from __future__ import annotations
from enum import Enum
from typing import Optional, Tuple, List

BOARD_CELLS = 9
EMPTY_LABEL = " "


class Player(Enum):
    """The two marks. X always moves first."""
    X = "X"
    O = "O"

    def opposite(self) -> "Player":
        return Player.O if self is Player.X else Player.X


Cell = Optional[Player]
Board = Tuple[Cell, ...]


def create() -> Board:
    return (None,) * BOARD_CELLS


def place(board: Board, index: int, player: Player) -> Board:
    """Return a new board with `player` marked at `index`.

    Callers check occupancy first; placing on a taken or out-of-range
    cell is a bug and raises ValueError.
    """
    if not 0 <= index < BOARD_CELLS:
        raise ValueError(f"cell {index} is off the board")
    if board[index] is not None:
        raise ValueError(f"cell {index} is already taken by {board[index].value}")
    cells = list(board)
    cells[index] = player
    return tuple(cells)


def is_full(board: Board) -> bool:
    return all(cell is not None for cell in board)


def empty_cells(board: Board) -> List[int]:
    return [i for i, cell in enumerate(board) if cell is None]


def is_open(board: Board, index) -> bool:
    """True if `index` is an int naming an empty cell."""
    if isinstance(index, bool) or not isinstance(index, int):
        return False
    return 0 <= index < BOARD_CELLS and board[index] is None


def serialize(board: Board) -> str:
    """Flat listing used inside prompts, e.g. `X, O,  , ...`."""
    return ", ".join(cell.value if cell else EMPTY_LABEL for cell in board)


def from_string(text: str) -> Board:
    """Build a board from 9 characters of X, O and '.'/'_'/' ' for empty."""
    if len(text) != BOARD_CELLS:
        raise ValueError(f"expected {BOARD_CELLS} cells, got {len(text)}")
    cells: List[Cell] = []
    for ch in text.upper():
        if ch in ("X", "O"):
            cells.append(Player(ch))
        elif ch in (".", "_", " "):
            cells.append(None)
        else:
            raise ValueError(f"unknown cell marker {ch!r}")
    return tuple(cells)
