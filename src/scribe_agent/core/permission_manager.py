"""Permission manager for tool enablement and confirmation policy."""

from typing import TYPE_CHECKING, Any

from ..models import SessionContext
from ..observability.logging_config import get_logger

if TYPE_CHECKING:
    from ..tools.types import Tool

logger = get_logger(__name__)

CONFIRMATION_PREVIEW_LENGTH = 200


def truncate_text(text: str, limit: int = CONFIRMATION_PREVIEW_LENGTH) -> str:
    """Cut text to limit characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


class PermissionManager:
    """
    Decides which tools a session may call and which calls must be confirmed.

    A session's ``enabled_tools`` may list tool names or whole categories
    (e.g. "read_only"). ``require_confirmation`` lists tool names that must
    always prompt, on top of each tool's own default.
    """

    def is_tool_enabled(self, tool: "Tool", context: SessionContext) -> bool:
        """Check whether the session allows this tool at all."""
        enabled = set(context.enabled_tools)
        allowed = tool.name in enabled or tool.category.value in enabled

        if not allowed:
            logger.debug(f"Tool '{tool.name}' not enabled (category={tool.category.value})")

        return allowed

    def requires_confirmation(self, tool: "Tool", context: SessionContext) -> bool:
        """Tool default, or forced on by the session."""
        return tool.requires_confirmation or tool.name in context.require_confirmation

    def get_confirmation_message(self, tool: "Tool", params: dict[str, Any]) -> str:
        """
        Build the prompt for a confirmed call.

        The tool's own message function is called with the call arguments
        so it can describe this specific call.
        """
        try:
            message = tool.confirmation_message(params)
        except Exception as e:
            logger.warning(f"Confirmation message for '{tool.name}' failed: {e}")
            message = None

        if message:
            return message
        return f"Allow {tool.display_name} to run?"
