# conversation.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Tuple

from loguru import logger


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class Transcript:
    """
    Ordered, append-only turn history sent to the model on every query.
    Turns are never edited or removed individually; `clear()` empties the whole history.
    """

    def __init__(self):
        self._turns: List[Turn] = []

    def append(self, role: Role, content: str) -> Turn:
        turn = Turn(Role(role), content)
        self._turns.append(turn)
        logger.debug("transcript.append role='{}' len={} total={}", turn.role.value, len(content), len(self._turns))
        return turn

    def add_user(self, content: str) -> Turn:
        return self.append(Role.USER, content)

    def add_assistant(self, content: str) -> Turn:
        return self.append(Role.ASSISTANT, content)

    def clear(self) -> None:
        logger.info("transcript.clear → dropping {} turn(s)", len(self._turns))
        self._turns = []

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def last(self) -> Turn | None:
        return self._turns[-1] if self._turns else None

    def to_messages(self) -> List[Dict[str, str]]:
        return [t.to_dict() for t in self._turns]

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
