"""Tool registry for managing tool implementations."""

from typing import Optional

from ..core.permission_manager import PermissionManager
from ..models import SessionContext, ToolCategory
from .types import Tool


class ToolRegistry:
    """
    Manages the tools available to agent sessions.

    Tools are keyed by their unique name; registering a name again replaces
    the earlier tool.
    """

    def __init__(self, permission_manager: Optional[PermissionManager] = None) -> None:
        """Initialize ToolRegistry with empty tool collection."""
        self.tools: dict[str, Tool] = {}
        self.permission_manager = permission_manager or PermissionManager()

    def register_tool(self, tool: Tool) -> None:
        """
        Register a tool.

        Args:
            tool: Tool implementation; its name is the registry key
        """
        self.tools[tool.name] = tool

    def get_tool(self, name: str) -> Optional[Tool]:
        """
        Get single tool.

        Args:
            name: Tool identifier

        Returns:
            Tool or None if not found
        """
        return self.tools.get(name)

    def get_all_tools(self) -> list[Tool]:
        """Get all registered tools in registration order."""
        return list(self.tools.values())

    def get_tools_by_category(self, category: ToolCategory) -> list[Tool]:
        """Get tools tagged with category."""
        return [tool for tool in self.tools.values() if tool.category == category]

    def get_enabled_tools(self, context: SessionContext) -> list[Tool]:
        """
        Get the tools a session may call.

        Args:
            context: Session context listing enabled tool names/categories

        Returns:
            Enabled tools in registration order
        """
        return [
            tool
            for tool in self.tools.values()
            if self.permission_manager.is_tool_enabled(tool, context)
        ]

    def remove_tool(self, name: str) -> None:
        """
        Remove a tool from registry.

        Args:
            name: Tool identifier
        """
        if name in self.tools:
            del self.tools[name]

    def has_tool(self, name: str) -> bool:
        """
        Check if tool is registered.

        Args:
            name: Tool identifier

        Returns:
            True if tool is registered
        """
        return name in self.tools

    def clear(self) -> None:
        """Clear all tools from registry."""
        self.tools.clear()


def create_default_registry() -> ToolRegistry:
    """Registry holding every built-in document and skill tool."""
    from .skill_tools import get_skill_tools
    from .vault_tools import get_vault_tools

    registry = ToolRegistry()
    for tool in get_vault_tools() + get_skill_tools():
        registry.register_tool(tool)
    return registry
