# agent.py
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from loguru import logger

from adapters.messages import MessageResponse, ToolUseBlock
from commands import Command, InputKind, parse_input
from conversation import Transcript
from errors import MalformedResponse, ToolchatError, ToolNotFound
from tools.registry import ToolRegistry
from ui import ChatUI

TOOL_USE_ANNOUNCEMENT = "I need to use some tools to help you."


class ChatClient(Protocol):
    def create_message(
        self,
        messages: List[Dict[str, str]],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> MessageResponse: ...


class AgentState(str, Enum):
    AWAITING_INPUT = "awaiting_input"
    QUERYING = "querying"
    DISPLAYING_TEXT = "displaying_text"
    EXECUTING_TOOLS = "executing_tools"
    REQUERYING = "requerying"
    EXITED = "exited"


class Agent:
    """
    The conversation loop. Owns the transcript; one user turn (including any tool
    round and its follow-up query) completes before the next line is read.

    Per message:
      user turn → query(transcript + tool schemas)
        - text only   → display first text block, append assistant turn
        - tool calls  → run every call in order, append one synthetic assistant turn
                        and one synthetic user turn with all result lines,
                        re-query without tools, display/append the answer
    Query failures are reported and leave the transcript as it was at that point.
    """

    def __init__(
        self,
        client: ChatClient,
        tools: ToolRegistry,
        ui: Optional[ChatUI] = None,
        model_name: str = "",
    ):
        self.client = client
        self.tools = tools
        self.ui = ui or ChatUI()
        self.model_name = model_name
        self.transcript = Transcript()
        self.state = AgentState.AWAITING_INPUT
        logger.info("Agent.__init__ → model='{}' tools={}", model_name, tools.names())

    # --------------------------- REPL ---------------------------

    def start(self, read_line: Optional[Callable[[], str]] = None) -> None:
        read = read_line or self.ui.read_line
        self.ui.banner(self.model_name)
        self.ui.help()
        if len(self.tools):
            self.ui.info(f"Available tools: {', '.join(self.tools.names())}")
        self.ui.divider()

        while self.state is not AgentState.EXITED:
            try:
                line = read()
            except (EOFError, KeyboardInterrupt):
                self._exit()
                break
            try:
                self.handle_line(line)
            except Exception as e:
                logger.exception("handle_line crashed: {}", e)
                self.ui.error(str(e))
                self.state = AgentState.AWAITING_INPUT

    def handle_line(self, line: str) -> bool:
        """Process one line of input. Returns False once the session has exited."""
        parsed = parse_input(line)
        if parsed.kind is InputKind.EMPTY:
            return True
        if parsed.kind is InputKind.EXIT:
            self._exit()
            return False
        if parsed.kind is InputKind.UNKNOWN_COMMAND:
            self.ui.error(f"Unknown command: {parsed.text}")
            self.ui.info("Type /help for available commands")
            return True
        if parsed.kind is InputKind.COMMAND:
            self._run_command(parsed.command)
            return True

        self.send(parsed.text)
        self.ui.divider()
        return True

    def _run_command(self, cmd: Command) -> None:
        logger.info("command '{}'", cmd.name)
        if cmd.name == "/clear":
            self.transcript.clear()
            self.ui.info("Conversation cleared")
        elif cmd.name == "/tools":
            self.ui.tools(self.tools)
        elif cmd.name == "/help":
            self.ui.help()
        elif not cmd.implemented:
            self.ui.info(f"{cmd.name} is not available yet; nothing was changed.")

    def _exit(self) -> None:
        self.ui.info("Goodbye!")
        self.state = AgentState.EXITED
        logger.info("Agent exited with {} turn(s) in transcript", len(self.transcript))

    # --------------------------- Turn processing ---------------------------

    def send(self, text: str) -> Optional[str]:
        """
        Append `text` as a user turn and drive it to a final assistant answer.
        Returns the displayed answer, or None if the turn ended in an error.
        """
        self.transcript.add_user(text)
        self.state = AgentState.QUERYING
        try:
            response = self.client.create_message(
                self.transcript.to_messages(),
                tools=self.tools.all_schemas() or None,
            )
        except ToolchatError as e:
            logger.error("query failed: {}: {}", type(e).__name__, e)
            self.ui.error(str(e))
            self.state = AgentState.AWAITING_INPUT
            return None

        try:
            if response.has_tool_calls:
                return self._handle_tool_calls(response)
            return self._display_text(response)
        finally:
            self.state = AgentState.AWAITING_INPUT

    def _display_text(self, response: MessageResponse, after_tools: bool = False) -> Optional[str]:
        self.state = AgentState.DISPLAYING_TEXT
        text = response.first_text
        if text is None:
            suffix = " after tool use" if after_tools else ""
            err = MalformedResponse(f"Could not extract text from response{suffix}")
            logger.error("{} (blocks={})", err, len(response.content))
            self.ui.error(str(err))
            return None
        self.ui.assistant(text)
        self.transcript.add_assistant(text)
        self.ui.tokens(response.usage.input_tokens, response.usage.output_tokens)
        return text

    def _handle_tool_calls(self, response: MessageResponse) -> Optional[str]:
        self.state = AgentState.EXECUTING_TOOLS
        self.ui.info("Using tools...")
        if response.first_text:
            # Narration that accompanies the calls is shown, not recorded.
            self.ui.assistant(response.first_text)

        lines = self.execute_tool_calls(response.tool_calls)
        self.transcript.add_assistant(TOOL_USE_ANNOUNCEMENT)
        self.transcript.add_user("\n".join(lines))

        self.state = AgentState.REQUERYING
        try:
            follow_up = self.client.create_message(self.transcript.to_messages())
        except ToolchatError as e:
            logger.error("follow-up query failed: {}: {}", type(e).__name__, e)
            self.ui.error(f"Error getting follow-up response: {e}")
            return None
        return self._display_text(follow_up, after_tools=True)

    def execute_tool_calls(self, calls: List[ToolUseBlock]) -> List[str]:
        """
        Run each call sequentially in block order. Always one result line per call;
        a failing call never stops the ones after it.
        """
        lines: List[str] = []
        for call in calls:
            if self.tools.lookup(call.name) is None:
                logger.warning("tool_call '{}' id='{}': no such tool", call.name, call.id)
                self.ui.error(f"Tool not found: {call.name}")
                lines.append(f"Tool '{call.name}' error: {ToolNotFound(call.name)}")
                continue
            self.ui.tool_call(call.name, call.input)
            logger.info("→ tool_call '{}' id='{}' input_type={}", call.name, call.id, type(call.input).__name__)
            try:
                result = self.tools.call(call.name, call.input)
            except ToolchatError as e:
                logger.error("✗ tool '{}' failed: {}: {}", call.name, type(e).__name__, e)
                self.ui.error(f"Tool execution error: {e}")
                lines.append(f"Tool '{call.name}' error: {e}")
                continue
            except Exception as e:
                logger.exception("✗ tool '{}' raised unexpectedly: {}", call.name, e)
                self.ui.error(f"Tool execution error: {e}")
                lines.append(f"Tool '{call.name}' error: {type(e).__name__}: {e}")
                continue
            self.ui.tool_result(result)
            lines.append(f"Tool '{call.name}' returned: {result}")
            logger.info("✓ tool '{}' executed ({} chars)", call.name, len(result))
        return lines
