from __future__ import annotations
import random
from typing import Optional

from engine.prompts import PHRASES
from games.board import Board, Player, empty_cells, place
from games.outcome import winner_of

from .base import DecisionEngine, MoveResult


class HeuristicProvider(DecisionEngine):
    """Local bot: take a win, else block the user's win, else the first open cell.

    It looks one move ahead and no further. The chat line is a random
    phrase unrelated to the move.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def choose_move(self, board: Board, bot: Player, user: Player) -> int:
        open_cells = empty_cells(board)
        if not open_cells:
            raise ValueError("No open cell to play")

        for i in open_cells:
            if winner_of(place(board, i, bot)) is bot:
                return i
        for i in open_cells:
            if winner_of(place(board, i, user)) is user:
                return i
        return open_cells[0]

    def random_comment(self) -> str:
        return self.rng.choice(PHRASES)

    def decide(self, board: Board, bot: Player, user: Player) -> MoveResult:
        return MoveResult(move=self.choose_move(board, bot, user), comment=self.random_comment())

    async def decide_async(self, board: Board, bot: Player, user: Player) -> MoveResult:
        return self.decide(board, bot, user)
