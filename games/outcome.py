from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .board import Board, Player, is_full

Triple = Tuple[int, int, int]

# Rows, then columns, then the two diagonals. The order decides which
# triple is reported if several are complete at once.
TRIPLES: Tuple[Triple, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


@dataclass(frozen=True)
class Win:
    player: Player
    line: Triple


@dataclass(frozen=True)
class Draw:
    pass


DRAW = Draw()

Outcome = Optional[Union[Win, Draw]]


def evaluate(board: Board) -> Outcome:
    """Return the first complete triple as a Win, a Draw on a full board, else None."""
    for line in TRIPLES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return Win(board[a], line)
    if is_full(board):
        return DRAW
    return None


def winner_of(board: Board) -> Optional[Player]:
    outcome = evaluate(board)
    return outcome.player if isinstance(outcome, Win) else None
