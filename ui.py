# ui.py — terminal presentation for the chat loop
from __future__ import annotations

from typing import Any, Iterable, Optional

from rich.console import Console
from rich.markup import escape

from commands import COMMANDS
from tools.tool_schema import describe

USER_STYLE = "bright_green"
ASSISTANT_STYLE = "bright_blue"
TOKEN_STYLE = "yellow"
COMMAND_STYLE = "cyan"
ERROR_STYLE = "red"
INFO_STYLE = "bright_white"
TOOL_STYLE = "magenta"

DIVIDER = "-------------------------------------------"


class ChatUI:
    """All user-visible output goes through here; dynamic text is always escaped."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)

    def banner(self, model_name: str) -> None:
        self.console.print(f"[bold {ASSISTANT_STYLE}]toolchat[/]")
        self.console.print(f"[{INFO_STYLE}]Model: {escape(model_name)}[/]")

    def help(self) -> None:
        self.console.print(f"[{INFO_STYLE}]Available commands:[/]")
        for cmd in COMMANDS.values():
            self.console.print(f"  [{COMMAND_STYLE}]{cmd.name}[/] - {escape(cmd.description)}")

    def tools(self, tools: Iterable[Any]) -> None:
        tools = list(tools)
        if not tools:
            self.info("No tools available")
            return
        self.info("Available tools:")
        for t in tools:
            self.console.print(f"  [{TOOL_STYLE}]{escape(t.name)}[/] - {escape(t.description or 'No description')}")
            params = describe(t.input_schema)
            if params:
                self.console.print(f"      params: {escape(', '.join(params))}")

    def read_line(self) -> str:
        """Blocks for one line; EOFError / KeyboardInterrupt propagate to the caller."""
        return self.console.input(f"[{USER_STYLE}]User: [/]")

    def assistant(self, text: str) -> None:
        self.console.print(f"[{ASSISTANT_STYLE}]Assistant:[/] {escape(text)}")

    def tokens(self, input_tokens: int, output_tokens: int) -> None:
        self.console.print(f"[{TOKEN_STYLE}](Input tokens: {input_tokens}, Output tokens: {output_tokens})[/]")

    def tool_call(self, name: str, args: Any) -> None:
        self.console.print(f"[{TOOL_STYLE}]Tool Call: {escape(name)}[/]")
        self.console.print(f"[{TOOL_STYLE}]Input: {escape(str(args))}[/]")

    def tool_result(self, result: str) -> None:
        self.console.print(f"[{TOOL_STYLE}]Result: {escape(result)}[/]")

    def error(self, message: str) -> None:
        self.console.print(f"[{ERROR_STYLE}]Error: {escape(message)}[/]")

    def info(self, message: str) -> None:
        self.console.print(f"[{INFO_STYLE}]{escape(message)}[/]")

    def divider(self) -> None:
        self.console.print(f"[{INFO_STYLE}]{DIVIDER}[/]")
