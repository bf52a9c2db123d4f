# tools/file_tools.py
"""
Built-in local file-system tools.

Every tool takes the validated parameter mapping and returns text for the model.
Paths are relative to the tool root; anything resolving outside it is rejected.
Failures are typed (see errors.py) so the agent can report them per call.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from loguru import logger

from errors import (
    PathExists,
    PathNotFound,
    ToolExecutionFailure,
    ToolInputInvalid,
    ToolIOFailure,
    WrongPathType,
)
from tools.registry import ToolDescriptor
from tools.tool_schema import InputSchema, SchemaProperty


class FileTools:
    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        logger.info("FileTools init → root='{}'", str(self.root))

    # ---------------- path helpers ----------------

    def _rel(self, p: Path) -> str:
        rel = str(p.relative_to(self.root))
        return "." if rel == "" else rel

    def _resolve(self, path: str) -> Path:
        if not isinstance(path, str) or not path.strip():
            raise ToolInputInvalid("Missing or empty path")
        p = (self.root / path).resolve()
        if p != self.root and self.root not in p.parents:
            logger.warning("path traversal blocked: '{}'", path)
            raise ToolInputInvalid(f"Path '{path}' is outside the working directory")
        return p

    def _existing_file(self, path: str) -> Path:
        p = self._resolve(path)
        if not p.exists():
            raise PathNotFound(f"File not found: {path}")
        if p.is_dir():
            raise WrongPathType(f"'{path}' is a directory, not a file")
        return p

    def _existing_dir(self, path: str) -> Path:
        p = self._resolve(path)
        if not p.exists():
            raise PathNotFound(f"Directory not found: {path}")
        if not p.is_dir():
            raise WrongPathType(f"'{path}' is not a directory")
        return p

    @staticmethod
    def _read_text(p: Path, shown: str) -> str:
        try:
            return p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ToolIOFailure(f"Failed to read '{shown}': {e}") from e

    @staticmethod
    def _write_text(p: Path, content: str, shown: str) -> None:
        try:
            p.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ToolIOFailure(f"Failed to write '{shown}': {e}") from e

    # ---------------- tools ----------------

    def read_file(self, args: Dict[str, Any]) -> str:
        path = args["path"]
        p = self._existing_file(path)
        text = self._read_text(p, path)
        logger.info("read_file: '{}' chars={}", self._rel(p), len(text))
        return text

    def list_files(self, args: Dict[str, Any]) -> str:
        path = args.get("path") or "."
        include_hidden = bool(args.get("include_hidden", False))
        target = self._existing_dir(path)
        try:
            entries = sorted(target.iterdir(), key=lambda e: e.name)
        except OSError as e:
            raise ToolIOFailure(f"Failed to list '{path}': {e}") from e
        out: List[str] = []
        for entry in entries:
            if not include_hidden and entry.name.startswith("."):
                continue
            out.append(entry.name + "/" if entry.is_dir() else entry.name)
        logger.info("list_files: '{}' include_hidden={} → {}", self._rel(target), include_hidden, len(out))
        return "\n".join(out)

    def _walk(self, start: Path, include_hidden_dirs: bool) -> Iterator[Path]:
        """Depth-first, sorted; unreadable directories are skipped with a warning."""
        for dirpath, dirnames, filenames in os.walk(start, onerror=self._walk_error):
            dirnames.sort()
            if not include_hidden_dirs:
                dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            for fname in sorted(filenames):
                yield Path(dirpath) / fname

    @staticmethod
    def _walk_error(err: OSError) -> None:
        logger.warning("find: skipping '{}': {}", getattr(err, "filename", "?"), err)

    def find_file(self, filename: str, search_path: str = ".", include_hidden_dirs: bool = False) -> Optional[Path]:
        start = self._existing_dir(search_path)
        for candidate in self._walk(start, include_hidden_dirs):
            if candidate.name != filename or not candidate.is_file():
                continue
            real = candidate.resolve()
            if self.root not in real.parents:
                logger.warning("find: skipping '{}', it resolves outside the root", self._rel(candidate))
                continue
            return candidate
        return None

    def find_and_read_file(self, args: Dict[str, Any]) -> str:
        filename = args["filename"]
        if not filename or "/" in filename or "\\" in filename:
            raise ToolInputInvalid("filename must be a bare file name")
        search_path = args.get("search_path") or "."
        include_hidden_dirs = bool(args.get("include_hidden_dirs", False))
        found = self.find_file(filename, search_path, include_hidden_dirs)
        if found is None:
            logger.info("find_and_read_file: '{}' not found under '{}'", filename, search_path)
            raise PathNotFound(f"File '{filename}' not found under '{search_path}'")
        text = self._read_text(found, self._rel(found))
        logger.info("find_and_read_file: '{}' → '{}' chars={}", filename, self._rel(found), len(text))
        return text

    def create_file(self, args: Dict[str, Any]) -> str:
        path = args["path"]
        content = args.get("content", "")
        p = self._resolve(path)
        if p.exists():
            raise PathExists(f"A file or directory already exists at '{path}'")
        if not p.parent.is_dir():
            raise PathNotFound(f"Parent directory for '{path}' does not exist")
        self._write_text(p, content, path)
        logger.info("create_file: '{}' chars={}", self._rel(p), len(content))
        return f"Successfully created file: {path}"

    def overwrite_file(self, args: Dict[str, Any]) -> str:
        path = args["path"]
        content = args["content"]
        p = self._existing_file(path)
        self._write_text(p, content, path)
        logger.info("overwrite_file: '{}' chars={}", self._rel(p), len(content))
        return f"Successfully updated file: {path}"

    def edit_file(self, args: Dict[str, Any]) -> str:
        path = args["path"]
        old_str = args["old_str"]
        new_str = args["new_str"]
        p = self._resolve(path)

        if not p.exists():
            if old_str == "":
                try:
                    p.parent.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    raise ToolIOFailure(f"Failed to create parent directories for '{path}': {e}") from e
                self._write_text(p, new_str, path)
                logger.info("edit_file: created '{}' chars={}", self._rel(p), len(new_str))
                return f"Successfully created file: {path}"
            raise PathNotFound(f"File not found: {path}")
        if p.is_dir():
            raise WrongPathType(f"'{path}' is a directory, not a file")
        if old_str == "":
            raise ToolInputInvalid("old_str must not be empty when editing an existing file")

        original = self._read_text(p, path)
        count = original.count(old_str)
        if count == 0:
            raise ToolExecutionFailure(f"old_str not found in '{path}'")
        if old_str == new_str:
            logger.info("edit_file: '{}' no-op (old_str == new_str, {} match(es))", self._rel(p), count)
            return "OK"
        self._write_text(p, original.replace(old_str, new_str), path)
        logger.info("edit_file: '{}' replacements={}", self._rel(p), count)
        return "OK"

    # ---------------- descriptors ----------------

    def descriptors(self) -> List[ToolDescriptor]:
        path_prop = SchemaProperty(
            "string", "Path relative to the working directory."
        )
        return [
            ToolDescriptor(
                name="read_file",
                description="Read the contents of a file at a relative path. Do not use with directories.",
                input_schema=InputSchema({"path": path_prop}, required=("path",)),
                function=self.read_file,
            ),
            ToolDescriptor(
                name="list_files",
                description="List files and directories at a relative path (directories end with '/'). "
                            "Defaults to the working directory.",
                input_schema=InputSchema({
                    "path": SchemaProperty("string", "Optional. Directory to list. Defaults to '.'."),
                    "include_hidden": SchemaProperty("boolean", "Optional. Include entries starting with '.'. Defaults to false."),
                }),
                function=self.list_files,
            ),
            ToolDescriptor(
                name="find_and_read_file",
                description="Recursively search for a file by exact name and return the content of the first match.",
                input_schema=InputSchema({
                    "filename": SchemaProperty("string", "Exact file name to look for, e.g. 'README.md'."),
                    "search_path": SchemaProperty("string", "Optional. Directory to start from. Defaults to '.'."),
                    "include_hidden_dirs": SchemaProperty("boolean", "Optional. Descend into hidden directories. Defaults to false."),
                }, required=("filename",)),
                function=self.find_and_read_file,
            ),
            ToolDescriptor(
                name="create_file",
                description="Create a new file with optional initial content. Fails if anything already exists at the path.",
                input_schema=InputSchema({
                    "path": path_prop,
                    "content": SchemaProperty("string", "Optional. Initial content. Defaults to an empty file."),
                }, required=("path",)),
                function=self.create_file,
            ),
            ToolDescriptor(
                name="overwrite_file",
                description="Replace the entire content of an existing file. This cannot be undone.",
                input_schema=InputSchema({
                    "path": path_prop,
                    "content": SchemaProperty("string", "The new content of the file."),
                }, required=("path", "content")),
                function=self.overwrite_file,
            ),
            ToolDescriptor(
                name="edit_file",
                description="Replace every occurrence of 'old_str' with 'new_str' in a file. "
                            "If the file does not exist and 'old_str' is empty, the file is created with 'new_str'.",
                input_schema=InputSchema({
                    "path": path_prop,
                    "old_str": SchemaProperty("string", "Text to search for. Must be present in the file."),
                    "new_str": SchemaProperty("string", "Replacement text."),
                }, required=("path", "old_str", "new_str")),
                function=self.edit_file,
            ),
        ]
