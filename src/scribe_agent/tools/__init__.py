"""Tool contract, registry, execution engine and built-in tools."""

from .execution_engine import ConfirmCallback, ToolExecutionEngine
from .skill_tools import ActivateSkillTool, CreateSkillTool, get_skill_tools
from .tool_registry import ToolRegistry, create_default_registry
from .types import Tool, ToolExecutionContext, ToolResult
from .vault_tools import (
    CreateFolderTool,
    ListFilesTool,
    ReadFileTool,
    SearchFilesTool,
    WriteFileTool,
    get_vault_tools,
)

__all__ = [
    "ActivateSkillTool",
    "ConfirmCallback",
    "CreateFolderTool",
    "CreateSkillTool",
    "ListFilesTool",
    "ReadFileTool",
    "SearchFilesTool",
    "Tool",
    "ToolExecutionContext",
    "ToolExecutionEngine",
    "ToolRegistry",
    "ToolResult",
    "WriteFileTool",
    "create_default_registry",
    "get_skill_tools",
    "get_vault_tools",
]
