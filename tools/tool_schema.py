# tools/tool_schema.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from loguru import logger

from errors import ToolInputInvalid

# JSON-schema type name → accepted Python types (bool is excluded from numbers explicitly below)
_JSON_TYPES: Dict[str, Tuple[type, ...]] = {
    "string": (str,),
    "boolean": (bool,),
    "integer": (int,),
    "number": (int, float),
    "object": (dict,),
    "array": (list,),
    "null": (type(None),),
}


@dataclass(frozen=True)
class SchemaProperty:
    type: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"type": self.type}
        if self.description:
            d["description"] = self.description
        return d


@dataclass(frozen=True)
class InputSchema:
    properties: Dict[str, SchemaProperty] = field(default_factory=dict)
    required: Tuple[str, ...] = ()
    type: str = "object"

    def __post_init__(self):
        unknown = [r for r in self.required if r not in self.properties]
        if unknown:
            raise ValueError(f"Required parameter(s) not declared: {', '.join(unknown)}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "properties": {k: p.to_dict() for k, p in self.properties.items()},
            "required": list(self.required),
        }


def _matches(value: Any, json_type: str) -> bool:
    accepted = _JSON_TYPES.get(json_type)
    if accepted is None:
        return True  # unknown schema type: let the tool decide
    if isinstance(value, bool) and json_type in {"integer", "number"}:
        return False
    return isinstance(value, accepted)


def normalize_args(tool: str, schema: InputSchema, args: Any) -> Dict[str, Any]:
    """
    Check required keys and declared types, drop keys the schema does not declare.
    Raises ToolInputInvalid on the first problem found.
    """
    if args is None:
        args = {}
    if not isinstance(args, dict):
        raise ToolInputInvalid(f"{tool}: input must be an object, got {type(args).__name__}")

    missing = [r for r in schema.required if args.get(r) is None]
    if missing:
        raise ToolInputInvalid(f"{tool}: missing required parameter(s): {', '.join(missing)}")

    fixed: Dict[str, Any] = {}
    for k, v in args.items():
        prop = schema.properties.get(k)
        if prop is None:
            logger.debug("normalize_args: {} dropping undeclared key '{}'", tool, k)
            continue
        if v is None:
            continue  # treat explicit null as "not provided"
        if not _matches(v, prop.type):
            raise ToolInputInvalid(
                f"{tool}: parameter '{k}' must be of type {prop.type}, got {type(v).__name__}"
            )
        fixed[k] = v
    return fixed


def describe(schema: InputSchema) -> List[str]:
    """Human-readable parameter list, e.g. ['path (string, required)']."""
    out = []
    for name, prop in schema.properties.items():
        req = "required" if name in schema.required else "optional"
        out.append(f"{name} ({prop.type}, {req})")
    return out
