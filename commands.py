# commands.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from loguru import logger


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    implemented: bool = True


COMMANDS: Dict[str, Command] = {
    c.name: c
    for c in (
        Command("/exit", "Quit the application"),
        Command("/save", "Save the conversation", implemented=False),
        Command("/load", "Load the previously saved conversation", implemented=False),
        Command("/clear", "Clear the conversation history"),
        Command("/tools", "List available tools"),
        Command("/help", "Show this help message"),
    )
}


class InputKind(str, Enum):
    EMPTY = "empty"
    EXIT = "exit"
    COMMAND = "command"
    UNKNOWN_COMMAND = "unknown_command"
    MESSAGE = "message"


@dataclass(frozen=True)
class ParsedInput:
    kind: InputKind
    text: str
    command: Optional[Command] = None


def parse_input(line: str) -> ParsedInput:
    """
    Classify one line of user input. Slash-commands are matched case-insensitively
    against the fixed table; a bare 'exit' also ends the session.
    """
    text = (line or "").strip()
    if not text:
        return ParsedInput(InputKind.EMPTY, text)
    lowered = text.lower()
    if lowered == "exit":
        return ParsedInput(InputKind.EXIT, text)
    if lowered.startswith("/"):
        cmd = COMMANDS.get(lowered)
        if cmd is None:
            logger.debug("parse_input: unknown command '{}'", lowered)
            return ParsedInput(InputKind.UNKNOWN_COMMAND, lowered)
        if cmd.name == "/exit":
            return ParsedInput(InputKind.EXIT, lowered, cmd)
        return ParsedInput(InputKind.COMMAND, lowered, cmd)
    return ParsedInput(InputKind.MESSAGE, line)
