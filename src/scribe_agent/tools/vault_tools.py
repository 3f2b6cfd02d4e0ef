"""Tools for reading and changing documents in the vault."""

import posixpath
from typing import Any, Optional

from ..core.permission_manager import truncate_text
from ..models import ToolCategory
from ..observability.logging_config import get_logger
from ..vault.base import Vault, VaultFile, VaultFolder, normalize_path
from .types import Tool, ToolExecutionContext, ToolResult

logger = get_logger(__name__)

SEARCH_RESULT_LIMIT = 50


def _find_file(vault: Vault, path: str) -> Optional[VaultFile]:
    """Look a document up by path, then by link text."""
    item = vault.get_by_path(normalize_path(path))
    if isinstance(item, VaultFile):
        return item
    return vault.resolve_link(path, "")


def _check_path(path: Any) -> Optional[str]:
    """Error message for an unusable path argument, or None."""
    if not isinstance(path, str) or not path.strip():
        return "Path is required"
    if normalize_path(path).startswith(".."):
        return f"Path '{path}' is outside the vault. Path traversal is not allowed."
    return None


class ReadFileTool(Tool):
    name = "read_file"
    display_name = "Read File"
    category = ToolCategory.READ_ONLY
    description = "Read the contents of a file in the vault. Accepts a vault path or a note name."
    parameters = {
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Path to the file to read"},
        },
        "required": ["path"],
    }

    def get_progress_description(self, params: dict[str, Any]) -> str:
        return f"Reading {params.get('path')}"

    async def execute(self, params: dict[str, Any], context: ToolExecutionContext) -> ToolResult:
        path = params.get("path")
        error = _check_path(path)
        if error:
            return ToolResult(success=False, error=error)

        file = _find_file(context.vault, path)
        if file is None:
            return ToolResult(success=False, error=f"File not found: {path}")

        content = await context.vault.read(file)
        return ToolResult(success=True, data={"path": file.path, "content": content})


class ListFilesTool(Tool):
    name = "list_files"
    display_name = "List Files"
    category = ToolCategory.READ_ONLY
    description = "List files and folders in a directory of the vault."
    parameters = {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Path to the directory to list (empty for the vault root)",
            },
            "recursive": {"type": "boolean", "description": "Whether to list files recursively"},
        },
        "required": [],
    }

    async def execute(self, params: dict[str, Any], context: ToolExecutionContext) -> ToolResult:
        path = normalize_path(params.get("path") or "")
        if path.startswith(".."):
            return ToolResult(success=False, error=f"Path '{path}' is outside the vault.")

        folder = context.vault.get_by_path(path)
        if not isinstance(folder, VaultFolder):
            return ToolResult(success=False, error=f"Folder not found: {path or '/'}")

        files: list[str] = []
        folders: list[str] = []
        pending = [folder]
        while pending:
            current = pending.pop(0)
            for child in context.vault.list_folder(current):
                if isinstance(child, VaultFolder):
                    folders.append(child.path)
                    if params.get("recursive"):
                        pending.append(child)
                else:
                    files.append(child.path)

        return ToolResult(success=True, data={"path": path, "files": files, "folders": folders})


class SearchFilesTool(Tool):
    name = "search_files"
    display_name = "Search Files"
    category = ToolCategory.READ_ONLY
    description = "Find markdown notes whose name or path contains the query (case-insensitive)."
    parameters = {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Text to look for in note names and paths"},
        },
        "required": ["query"],
    }

    def get_progress_description(self, params: dict[str, Any]) -> str:
        return f"Searching for {params.get('query')}"

    async def execute(self, params: dict[str, Any], context: ToolExecutionContext) -> ToolResult:
        query = params.get("query")
        if not isinstance(query, str) or not query.strip():
            return ToolResult(success=False, error="Query is required")

        needle = query.strip().lower()
        matches = [f.path for f in context.vault.get_markdown_files() if needle in f.path.lower()]

        return ToolResult(
            success=True,
            data={
                "query": query,
                "matches": matches[:SEARCH_RESULT_LIMIT],
                "truncated": len(matches) > SEARCH_RESULT_LIMIT,
            },
        )


class WriteFileTool(Tool):
    name = "write_file"
    display_name = "Write File"
    category = ToolCategory.VAULT_OPERATIONS
    description = "Create a file in the vault or replace the contents of an existing one."
    parameters = {
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Path of the file to write"},
            "content": {"type": "string", "description": "Full new content of the file"},
        },
        "required": ["path", "content"],
    }
    requires_confirmation = True

    def confirmation_message(self, params: dict[str, Any]) -> str:
        preview = truncate_text(str(params.get("content") or ""))
        return f'Write to "{params.get("path")}":\n\n{preview}'

    def get_progress_description(self, params: dict[str, Any]) -> str:
        return f"Writing {params.get('path')}"

    async def execute(self, params: dict[str, Any], context: ToolExecutionContext) -> ToolResult:
        path = params.get("path")
        error = _check_path(path)
        if error:
            return ToolResult(success=False, error=error)

        content = params.get("content")
        if not isinstance(content, str):
            return ToolResult(success=False, error="Content must be a string")

        path = normalize_path(path)
        existing = context.vault.get_by_path(path)
        if isinstance(existing, VaultFolder):
            return ToolResult(success=False, error=f"Path is a folder: {path}")

        if isinstance(existing, VaultFile):
            await context.vault.modify(existing, content)
            created = False
        else:
            parent = posixpath.dirname(path)
            if parent:
                await context.vault.ensure_folder(parent)
            await context.vault.create(path, content)
            created = True

        logger.info(f"Wrote {len(content)} characters to {path}")
        return ToolResult(success=True, data={"path": path, "created": created})


class CreateFolderTool(Tool):
    name = "create_folder"
    display_name = "Create Folder"
    category = ToolCategory.VAULT_OPERATIONS
    description = "Create a folder (and any missing parents) in the vault."
    parameters = {
        "type": "object",
        "properties": {
            "path": {"type": "string", "description": "Path of the folder to create"},
        },
        "required": ["path"],
    }
    requires_confirmation = True

    def confirmation_message(self, params: dict[str, Any]) -> str:
        return f'Create folder "{params.get("path")}"'

    async def execute(self, params: dict[str, Any], context: ToolExecutionContext) -> ToolResult:
        path = params.get("path")
        error = _check_path(path)
        if error:
            return ToolResult(success=False, error=error)

        path = normalize_path(path)
        existing = context.vault.get_by_path(path)
        if isinstance(existing, VaultFile):
            return ToolResult(success=False, error=f"A file already exists at {path}")
        if isinstance(existing, VaultFolder):
            return ToolResult(success=True, data={"path": path, "created": False})

        await context.vault.ensure_folder(path)
        return ToolResult(success=True, data={"path": path, "created": True})


def get_vault_tools() -> list[Tool]:
    """Get all document tools."""
    return [ReadFileTool(), ListFilesTool(), SearchFilesTool(), WriteFileTool(), CreateFolderTool()]
