from __future__ import annotations
from typing import List, Dict, Any

from games.board import Board, Player, serialize

Message = Dict[str, str]

MOVE_FUNCTION_NAME = "make_move"

# Flavor lines for the bot's chat. Never explain the move, only react to it.
PHRASES = (
    "Interesting play!",
    "Are you letting me win?",
    "Are you getting scared?",
    "Hmm, let's see what you do next.",
    "That was a bold move!",
    "I'm watching your strategy...",
    "You won't beat me that easily!",
    "Nice try!",
    "I like your style!",
)

SYSTEM_PROMPT = (
    "You are a Tic-Tac-Toe bot. The board is a 3x3 array (0-8). X and O are players. "
    "Respond ONLY with a function call: make_move(move: number, comment: string). "
    "Your comments should be cheeky, playful, and sometimes a bit teasing. "
    "Don't just say you made a move; react to the board, the user's play, or your own brilliance! "
    "Always choose a move that maximizes your chances to win or draw, "
    "and never make a move that lets the user win if you can prevent it."
)

MAKE_MOVE_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": MOVE_FUNCTION_NAME,
        "description": "Make a move and provide a comment",
        "parameters": {
            "type": "object",
            "properties": {
                "move": {"type": "integer", "description": "The board index (0-8) to play"},
                "comment": {"type": "string", "description": "A short comment for the chat"},
            },
            "required": ["move", "comment"],
        },
    },
}

FORCED_TOOL_CHOICE: Dict[str, Any] = {
    "type": "function",
    "function": {"name": MOVE_FUNCTION_NAME},
}


def build_move_messages(board: Board, bot: Player, user: Player) -> List[Message]:
    user_prompt = (
        f"Current board: [{serialize(board)}]\n"
        f"Bot is: {bot.value}\n"
        f"User is: {user.value}\n"
        "It's your turn. Which move do you make? Add a short comment for the chat."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]
