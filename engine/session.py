from __future__ import annotations
import random
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from config import AppConfig
from games.board import Board, Player, create, is_open, place
from games.outcome import Draw, Outcome, Win, evaluate
from models.base import (
    DecisionEngine,
    DecisionStrategy,
    MoveResult,
    ProtocolError,
    load_decision_engine,
    parse_strategy,
)
from models.heuristic_provider import HeuristicProvider
from engine.chat import ChatLog

BOT_WINS_MESSAGE = "I win! Good game!"
HUMAN_WINS_MESSAGE = "You win! Well played!"
DRAW_MESSAGE = "It's a draw! Let's play again?"
BOT_OPENS_MESSAGE = "I start as X!"
HUMAN_OPENS_MESSAGE = "Your move!"

Listener = Callable[[Dict[str, Any]], None]


class TurnPhase(Enum):
    AWAITING_HUMAN = "awaiting_human"
    AWAITING_BOT = "awaiting_bot"
    GAME_OVER = "game_over"


def _as_player(value: Union[str, Player]) -> Player:
    if isinstance(value, Player):
        return value
    try:
        return Player(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Unknown side: {value}") from None


class GameSession:
    """One human against one bot on a single board.

    The session owns the board, whose turn it is and the chat log. A new
    game (reset or side change) replaces all three and bumps `generation`,
    so a remote reply that arrives afterwards is dropped.
    """

    def __init__(
        self,
        human: Union[str, Player] = Player.X,
        strategy: Union[str, DecisionStrategy, None] = None,
        *,
        rng: Optional[random.Random] = None,
        heuristic: Optional[HeuristicProvider] = None,
        remote: Optional[DecisionEngine] = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.heuristic = heuristic or HeuristicProvider(rng=self.rng)
        self.remote = remote
        self.strategy = parse_strategy(strategy if strategy is not None else AppConfig.BOT_STRATEGY)
        self.generation = 0
        self.thinking = False
        self._listeners: List[Listener] = []
        self._new_game(_as_player(human))

    # ----------------------------
    # Read side
    # ----------------------------

    @property
    def state(self) -> TurnPhase:
        if self.outcome is not None:
            return TurnPhase.GAME_OVER
        if self.active_player is self.human_player:
            return TurnPhase.AWAITING_HUMAN
        return TurnPhase.AWAITING_BOT

    def is_over(self) -> bool:
        return self.outcome is not None

    def snapshot(self) -> Dict[str, Any]:
        outcome = self.outcome
        return {
            "board": [cell.value if cell else None for cell in self.board],
            "state": self.state.value,
            "next": self.active_player.value,
            "human": self.human_player.value,
            "bot": self.bot_player.value,
            "strategy": self.strategy.value,
            "thinking": self.thinking,
            "over": outcome is not None,
            "winner": outcome.player.value if isinstance(outcome, Win) else None,
            "winning_line": list(outcome.line) if isinstance(outcome, Win) else [],
            "draw": isinstance(outcome, Draw),
            "chat": self.chat.recent(),
            "generation": self.generation,
        }

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener(snapshot)` after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ----------------------------
    # Write side
    # ----------------------------

    def apply_human_action(self, index: int) -> Dict[str, Any]:
        """Play `index` for the human. Bad requests are no-ops, reported by status."""
        if self.is_over():
            return {"status": "done", "message": "Game is over."}
        if self.state is not TurnPhase.AWAITING_HUMAN:
            return {"status": "invalid", "message": "Not human's turn."}
        if not is_open(self.board, index):
            return {"status": "invalid", "message": f"Cell {index} is not open."}
        self._apply(index, self.human_player)
        return {"status": "ok", "move": index}

    async def step(self) -> Dict[str, Any]:
        """Advance one turn if the bot is to move; otherwise report why not."""
        if self.is_over():
            return {"status": "done", "message": "Game is over."}
        if self.state is TurnPhase.AWAITING_HUMAN:
            return {"status": "awaiting_human"}
        if self.thinking:
            return {"status": "thinking"}

        generation = self.generation
        board, bot, user = self.board, self.bot_player, self.human_player

        if self.strategy is DecisionStrategy.HEURISTIC:
            result = self.heuristic.decide(board, bot, user)
            self._apply(result.move, bot, comment=result.comment)
            return {"status": "ok", "move": result.move, "comment": result.comment}

        result, failure = await self._ask_remote(board, bot, user, generation)
        if self.generation != generation:
            print(f"Dropping bot reply for finished game #{generation}")
            return {"status": "stale"}
        if result is not None and not is_open(self.board, result.move):
            failure = f"cell {result.move} is not open"
            result = None
        if result is None:
            print(f"Remote bot failed, playing heuristic move instead: {failure}")
            result = self._fallback_move(board, bot, user)
        self._apply(result.move, bot, comment=result.comment)
        return {
            "status": "ok" if failure is None else "fallback",
            "move": result.move,
            "comment": result.comment,
        }

    def choose_side(self, player: Union[str, Player]) -> None:
        self._new_game(_as_player(player))
        self._notify()

    def choose_strategy(self, strategy: Union[str, DecisionStrategy]) -> None:
        # Read at the start of the next bot turn; an in-flight call is left alone.
        self.strategy = parse_strategy(strategy)
        self._notify()

    def reset(self) -> None:
        self._new_game(self.human_player)
        self._notify()

    # ----------------------------
    # Internals
    # ----------------------------

    def _new_game(self, human: Player) -> None:
        self.human_player = human
        self.bot_player = human.opposite()
        self.board: Board = create()
        self.active_player = Player.X
        self.outcome: Outcome = None
        self.chat = ChatLog()
        self.generation += 1
        self.thinking = False
        self.chat.append(BOT_OPENS_MESSAGE if self.bot_player is Player.X else HUMAN_OPENS_MESSAGE)

    def _apply(self, index: int, player: Player, comment: Optional[str] = None) -> None:
        self.board = place(self.board, index, player)
        self.active_player = player.opposite()
        if comment:
            self.chat.append(comment)
        self.outcome = evaluate(self.board)
        if isinstance(self.outcome, Win):
            self.chat.append(BOT_WINS_MESSAGE if self.outcome.player is self.bot_player else HUMAN_WINS_MESSAGE)
        elif isinstance(self.outcome, Draw):
            self.chat.append(DRAW_MESSAGE)
        self._notify()

    async def _ask_remote(self, board: Board, bot: Player, user: Player, generation: int):
        self.thinking = True
        self._notify()
        try:
            if self.remote is None:
                self.remote = load_decision_engine(DecisionStrategy.REMOTE)
            return await self.remote.decide_async(board, bot, user), None
        except ProtocolError as exc:
            return None, str(exc)
        except Exception as exc:  # noqa: BLE001 - an engine fault must not stall the game
            return None, f"{type(exc).__name__}: {exc}"
        finally:
            if self.generation == generation:
                self.thinking = False

    def _fallback_move(self, board: Board, bot: Player, user: Player) -> MoveResult:
        return MoveResult(
            move=self.heuristic.choose_move(board, bot, user),
            comment=self.heuristic.random_comment(),
        )

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
