# =========================
# tools/registry.py
# =========================
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from loguru import logger

from errors import DuplicateToolError, ToolNotFound
from logging_decorators import log_call
from tools.tool_schema import InputSchema, normalize_args

ToolFunction = Callable[[Dict[str, Any]], str]


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: InputSchema
    function: ToolFunction

    def schema(self) -> Dict[str, Any]:
        """Wire form sent to the model: {name, description, input_schema}."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema.to_dict(),
        }


class ToolRegistry:
    """
    Ordered, in-process tool registry.
    The public surface:
      - register(descriptor)
      - lookup(name) -> ToolDescriptor | None
      - all_schemas() -> list[dict]   (insertion order)
      - call(name, params) -> str
    """
    def __init__(self, descriptors: Optional[List[ToolDescriptor]] = None):
        self._tools: Dict[str, ToolDescriptor] = {}
        for d in descriptors or []:
            self.register(d)

    def register(self, descriptor: ToolDescriptor) -> None:
        if descriptor.name in self._tools:
            logger.error("register: duplicate tool name '{}'", descriptor.name)
            raise DuplicateToolError(f"Tool already registered: {descriptor.name}")
        self._tools[descriptor.name] = descriptor
        logger.debug("Registered tool '{}'", descriptor.name)

    def lookup(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def all_schemas(self) -> List[Dict[str, Any]]:
        schemas = [d.schema() for d in self._tools.values()]
        logger.debug("all_schemas: {} tool schema(s)", len(schemas))
        return schemas

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def call(self, name: str, params: Any = None) -> str:
        descriptor = self.lookup(name)
        if descriptor is None:
            logger.warning("call: unknown tool '{}'", name)
            raise ToolNotFound(name)
        args = normalize_args(name, descriptor.input_schema, params)
        return descriptor.function(args)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(list(self._tools.values()))

    def __len__(self) -> int:
        return len(self._tools)


def logged(descriptor: ToolDescriptor, slow_ms: int = 1000) -> ToolDescriptor:
    """Same descriptor, with its function wrapped by `log_call`."""
    return ToolDescriptor(
        name=descriptor.name,
        description=descriptor.description,
        input_schema=descriptor.input_schema,
        function=log_call(descriptor.name, slow_ms=slow_ms)(descriptor.function),
    )


def build_default_registry(root: str | Path | None = None) -> ToolRegistry:
    """Built-in file tools rooted at `root` (defaults to the working directory)."""
    from tools.file_tools import FileTools

    files = FileTools(Path(root) if root is not None else Path.cwd())
    registry = ToolRegistry([logged(d) for d in files.descriptors()])
    logger.info("ToolRegistry ready with {} tool(s) → root='{}'", len(registry), str(files.root))
    return registry
