from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from config import AppConfig
from games.board import Board, Player


class DecisionStrategy(Enum):
    HEURISTIC = "heuristic"
    REMOTE = "remote"


def parse_strategy(value: Union[str, DecisionStrategy]) -> DecisionStrategy:
    if isinstance(value, DecisionStrategy):
        return value
    try:
        return DecisionStrategy(str(value).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown bot strategy: {value}") from None


@dataclass(frozen=True)
class MoveResult:
    move: int
    comment: str


class ProtocolError(Exception):
    """The remote move service gave no usable answer."""


class DecisionEngine(ABC):
    """Picks the bot's next cell and a line of chat to go with it.

    Engines never touch the session; the caller applies the move.
    """

    @abstractmethod
    async def decide_async(self, board: Board, bot: Player, user: Player) -> MoveResult:
        ...


def load_decision_engine(
    strategy: Union[str, DecisionStrategy, None] = None,
    rng: Optional[random.Random] = None,
    client=None,
) -> DecisionEngine:
    """Factory that builds an engine for a strategy (defaults to env/config)."""
    strategy = parse_strategy(strategy if strategy is not None else AppConfig.BOT_STRATEGY)
    if strategy is DecisionStrategy.HEURISTIC:
        from .heuristic_provider import HeuristicProvider
        return HeuristicProvider(rng=rng)
    elif strategy is DecisionStrategy.REMOTE:
        from .openai_provider import OpenAIProvider
        return OpenAIProvider(
            model=AppConfig.OPENAI_MODEL,
            api_key=AppConfig.OPENAI_API_KEY,
            base_url=AppConfig.OPENAI_BASE_URL,
            timeout=AppConfig.OPENAI_TIMEOUT,
            temperature=AppConfig.OPENAI_TEMPERATURE,
            client=client,
        )
    raise ValueError(f"Unknown bot strategy: {strategy}")
