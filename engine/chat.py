from __future__ import annotations
from typing import List

# The chat window never shows more than this many lines.
MAX_VISIBLE = 4


class ChatLog:
    """Append-only bot narration for one game.

    Every line is kept, but only the newest `visible` are shown.
    """

    def __init__(self, visible: int = MAX_VISIBLE) -> None:
        if not 1 <= visible <= MAX_VISIBLE:
            raise ValueError(f"visible must be between 1 and {MAX_VISIBLE}")
        self.visible = visible
        self._messages: List[str] = []

    def append(self, message: str) -> None:
        self._messages.append(str(message))

    def recent(self) -> List[str]:
        return list(self._messages[-self.visible:])

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(list(self._messages))
