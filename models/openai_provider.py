from __future__ import annotations
import asyncio
import json
from typing import Any, Optional

import httpx
import openai
from openai import AsyncOpenAI

from engine.prompts import FORCED_TOOL_CHOICE, MAKE_MOVE_TOOL, MOVE_FUNCTION_NAME, build_move_messages
from games.board import BOARD_CELLS, Board, Player

from .base import DecisionEngine, MoveResult, ProtocolError


def parse_move_arguments(payload: Any) -> MoveResult:
    """Validate the decoded `make_move` arguments."""
    if not isinstance(payload, dict):
        raise ProtocolError(f"make_move arguments are not an object: {payload!r}")
    move = payload.get("move")
    comment = payload.get("comment")
    # bool is an int subclass; True is not a cell.
    if isinstance(move, bool) or not isinstance(move, int):
        raise ProtocolError(f"move is not an integer: {move!r}")
    if not 0 <= move < BOARD_CELLS:
        raise ProtocolError(f"move {move} is off the board")
    if not isinstance(comment, str) or not comment.strip():
        raise ProtocolError(f"comment is missing or not a string: {comment!r}")
    return MoveResult(move=move, comment=comment.strip())


def _find_arguments(message: Any) -> Optional[str]:
    for call in getattr(message, "tool_calls", None) or []:
        function = getattr(call, "function", None)
        if function is not None and getattr(function, "name", None) == MOVE_FUNCTION_NAME:
            return getattr(function, "arguments", None)
    # Older models answer with the legacy single function_call field.
    legacy = getattr(message, "function_call", None)
    if legacy is not None and getattr(legacy, "name", None) == MOVE_FUNCTION_NAME:
        return getattr(legacy, "arguments", None)
    return None


def parse_move_response(response: Any) -> MoveResult:
    """Pull a MoveResult out of a chat-completions response or raise ProtocolError."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise ProtocolError("response has no choices")
    message = getattr(choices[0], "message", None)
    arguments = _find_arguments(message)
    if not arguments:
        raise ProtocolError("response has no make_move call")
    try:
        payload = json.loads(arguments)
    except (TypeError, ValueError) as exc:
        raise ProtocolError(f"make_move arguments are not valid JSON: {exc}") from exc
    return parse_move_arguments(payload)


class OpenAIProvider(DecisionEngine):
    """Asks an OpenAI chat model for the move via a forced `make_move` tool call.

    Any failure surfaces as ProtocolError; falling back is up to the caller.
    No retries. A fresh AsyncOpenAI client is opened per call, since each
    web request runs on its own event loop.
    """

    def __init__(
        self,
        model: str,
        api_key: str = "",
        base_url: Optional[str] = None,
        timeout: float = 15.0,
        temperature: float = 0.7,
        client: Optional[Any] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not model:
            raise ValueError("OPENAI_MODEL must be set for the remote bot")
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.temperature = temperature
        # A caller-owned client is used as is and never closed here.
        self.client = client
        self.transport = transport

    def _open_client(self) -> AsyncOpenAI:
        http_client = None
        if self.transport is not None:
            http_client = httpx.AsyncClient(transport=self.transport, timeout=self.timeout)
        try:
            return AsyncOpenAI(
                api_key=self.api_key or None,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
                http_client=http_client,
            )
        except openai.OpenAIError as exc:
            raise ProtocolError(f"OpenAI client unavailable: {exc}") from exc

    async def _request(self, client, messages):
        try:
            return await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    tools=[MAKE_MOVE_TOOL],
                    tool_choice=FORCED_TOOL_CHOICE,
                    temperature=self.temperature,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ProtocolError(f"no reply within {self.timeout}s") from exc
        except openai.OpenAIError as exc:
            raise ProtocolError(f"OpenAI request failed: {exc}") from exc

    async def decide_async(self, board: Board, bot: Player, user: Player) -> MoveResult:
        messages = build_move_messages(board, bot, user)
        if self.client is not None:
            response = await self._request(self.client, messages)
        else:
            async with self._open_client() as client:
                response = await self._request(client, messages)
        return parse_move_response(response)
