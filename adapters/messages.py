# adapters/messages.py
"""
Wire data model for the Messages endpoint.

Request:  {model, max_tokens, messages:[{role, content}], tools?:[{name, description, input_schema}]}
Response: {id, type, role, content:[{type:"text"|"tool_use", ...}], model, stop_reason?, usage:{input_tokens, output_tokens}}

Tool-call inputs arrive as arbitrary JSON; they are checked to be a proper JSON
value (str | int | float | bool | None | list | dict) and handed to the tool
layer, which narrows the keys it needs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from errors import MalformedResponse

JsonValue = Union[str, int, float, bool, None, List["JsonValue"], Dict[str, "JsonValue"]]


def decode_json_value(raw: Any, where: str = "input") -> JsonValue:
    if raw is None or isinstance(raw, (str, bool, int, float)):
        return raw
    if isinstance(raw, list):
        return [decode_json_value(v, where) for v in raw]
    if isinstance(raw, dict):
        out: Dict[str, JsonValue] = {}
        for k, v in raw.items():
            if not isinstance(k, str):
                raise MalformedResponse(f"Non-string key in {where}: {k!r}")
            out[k] = decode_json_value(v, where)
        return out
    raise MalformedResponse(f"Unsupported value in {where}: {type(raw).__name__}")


@dataclass(frozen=True)
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0

    @classmethod
    def from_dict(cls, d: Any) -> "Usage":
        if not isinstance(d, dict):
            raise MalformedResponse("Response 'usage' is missing or not an object")
        try:
            return cls(input_tokens=int(d["input_tokens"]), output_tokens=int(d["output_tokens"]))
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedResponse(f"Invalid 'usage' block: {e}") from e


@dataclass(frozen=True)
class TextBlock:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class ToolUseBlock:
    """A model-issued request to run a tool; consumed once by the turn that produced it."""
    id: str
    name: str
    # Usually an object; anything else is left for the tool layer to reject per call.
    input: JsonValue = field(default_factory=dict)
    type: str = "tool_use"


@dataclass(frozen=True)
class OtherBlock:
    type: str


ContentBlock = Union[TextBlock, ToolUseBlock, OtherBlock]


def _parse_block(raw: Any, idx: int) -> ContentBlock:
    if not isinstance(raw, dict) or not isinstance(raw.get("type"), str):
        raise MalformedResponse(f"Content block #{idx} has no type")
    kind = raw["type"]
    if kind == "text":
        text = raw.get("text")
        if not isinstance(text, str):
            raise MalformedResponse(f"Text block #{idx} has no text")
        return TextBlock(text=text)
    if kind == "tool_use":
        name = raw.get("name")
        raw_input = raw.get("input")
        args = {} if raw_input is None else decode_json_value(raw_input, where=f"tool_use #{idx} input")
        return ToolUseBlock(id=str(raw.get("id") or ""), name=name if isinstance(name, str) else "", input=args)
    return OtherBlock(type=kind)


@dataclass(frozen=True)
class MessageResponse:
    id: str
    role: str
    model: str
    content: Tuple[ContentBlock, ...]
    usage: Usage
    stop_reason: Optional[str] = None
    type: str = "message"

    @classmethod
    def from_dict(cls, data: Any) -> "MessageResponse":
        if not isinstance(data, dict):
            raise MalformedResponse("Response body is not a JSON object")
        content = data.get("content")
        if not isinstance(content, list):
            raise MalformedResponse("Response 'content' is missing or not a list")
        for key in ("id", "role", "model"):
            if not isinstance(data.get(key), str):
                raise MalformedResponse(f"Response '{key}' is missing")
        return cls(
            id=data["id"],
            type=str(data.get("type") or "message"),
            role=data["role"],
            model=data["model"],
            content=tuple(_parse_block(b, i) for i, b in enumerate(content)),
            usage=Usage.from_dict(data.get("usage")),
            stop_reason=data.get("stop_reason"),
        )

    @property
    def tool_calls(self) -> List[ToolUseBlock]:
        """Tool-use blocks in the order they appear in `content`."""
        return [b for b in self.content if isinstance(b, ToolUseBlock)]

    @property
    def has_tool_calls(self) -> bool:
        return any(isinstance(b, ToolUseBlock) for b in self.content)

    @property
    def first_text(self) -> Optional[str]:
        for b in self.content:
            if isinstance(b, TextBlock):
                return b.text
        return None


def build_request(
    model: str,
    max_tokens: int,
    messages: List[Dict[str, str]],
    tools: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"model": model, "max_tokens": max_tokens, "messages": messages}
    if tools:
        payload["tools"] = tools
    return payload


def parse_api_error(data: Any) -> Tuple[Optional[str], Optional[str]]:
    """Return (type, message) from either `{type, message}` or `{type:"error", error:{type, message}}`."""
    if not isinstance(data, dict):
        return None, None
    inner = data.get("error")
    if isinstance(inner, dict) and "message" in inner:
        return inner.get("type"), inner.get("message")
    return data.get("type"), data.get("message")
