# errors.py
from __future__ import annotations

from typing import Optional


class ToolchatError(Exception):
    """Base class for every failure the chat loop knows how to report."""


class DuplicateToolError(ToolchatError):
    pass


# ---------------- Remote endpoint ----------------

class NetworkFailure(ToolchatError):
    pass


class APIFailure(ToolchatError):
    """Non-2xx reply. `str(err)` is the server-provided message."""

    def __init__(self, message: str, status: Optional[int] = None, error_type: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.error_type = error_type


class MalformedResponse(ToolchatError):
    pass


# ---------------- Tools ----------------

class ToolError(ToolchatError):
    pass


class ToolNotFound(ToolError):
    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolInputInvalid(ToolError):
    pass


class ToolExecutionFailure(ToolError):
    pass


class PathNotFound(ToolExecutionFailure):
    pass


class WrongPathType(ToolExecutionFailure):
    pass


class PathExists(ToolExecutionFailure):
    pass


class ToolIOFailure(ToolExecutionFailure):
    pass
