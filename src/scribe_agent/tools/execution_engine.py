"""Execution engine: policy checks, confirmation and result normalization."""

from typing import Any, Awaitable, Callable, Optional

from ..integration.base_adapter import ToolCall
from ..observability.logging_config import add_context, clear_context, get_context, get_logger
from .tool_registry import ToolRegistry
from .types import Tool, ToolExecutionContext, ToolResult

logger = get_logger(__name__)

ConfirmCallback = Callable[[Tool, dict[str, Any], str], Awaitable[bool]]


class ToolExecutionEngine:
    """
    Runs tool calls requested by the model.

    Every call goes through the same steps: lookup, enablement, required
    parameter check, confirmation, execution. Whatever happens, the caller
    gets a ToolResult; nothing raises past this boundary.
    """

    def __init__(self, registry: ToolRegistry, confirm: Optional[ConfirmCallback] = None):
        """
        Initialize ToolExecutionEngine.

        Args:
            registry: Tools available for dispatch
            confirm: Async callback asked before side-effecting calls. It
                receives the tool, the call arguments and the prompt text
                and returns True to proceed. Without a callback such calls
                are declined.
        """
        self.registry = registry
        self.permission_manager = registry.permission_manager
        self.confirm = confirm

    async def execute_tool(self, tool_call: ToolCall, context: ToolExecutionContext) -> ToolResult:
        """
        Execute one tool call.

        Args:
            tool_call: Tool name and arguments from the model
            context: Execution context for the current session

        Returns:
            Normalized ToolResult
        """
        tool = self.registry.get_tool(tool_call.name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {tool_call.name}")
            return ToolResult(success=False, error=f"Tool not found: {tool_call.name}")

        params = dict(tool_call.input or {})
        session_context = context.session.context if context.session else None

        if session_context is not None and not self.permission_manager.is_tool_enabled(tool, session_context):
            return ToolResult(success=False, error=f"Tool '{tool.name}' is not enabled for this session")

        missing = [name for name in tool.required_parameters if params.get(name) is None]
        if missing:
            return ToolResult(
                success=False,
                error=f"Missing required parameter(s) for {tool.name}: {', '.join(missing)}",
            )

        needs_confirmation = (
            self.permission_manager.requires_confirmation(tool, session_context)
            if session_context is not None
            else tool.requires_confirmation
        )
        if needs_confirmation:
            try:
                message = self.permission_manager.get_confirmation_message(tool, params)
                approved = await self._ask(tool, params, message)
            except Exception as e:
                logger.exception(f"Confirmation for '{tool.name}' failed")
                return ToolResult(success=False, error=f"Confirmation failed for {tool.display_name}: {e}")
            if not approved:
                logger.info(f"Tool call declined by user: {tool.name}")
                return ToolResult(success=False, error=f"User declined to run {tool.display_name}")

        previous_context = get_context()
        if context.session:
            add_context(session_id=context.session.id)
        add_context(tool=tool.name)

        try:
            logger.info(f"Executing tool: {tool.get_progress_description(params)}")
            result = await tool.execute(params, context)
        except Exception as e:
            logger.exception(f"Tool '{tool.name}' failed")
            return ToolResult(success=False, error=f"Tool execution failed: {e}")
        finally:
            clear_context()
            add_context(**previous_context)

        if not isinstance(result, ToolResult):
            logger.error(f"Tool '{tool.name}' returned {type(result).__name__}, expected ToolResult")
            return ToolResult(success=False, error=f"Tool '{tool.name}' returned an invalid result")

        logger.debug(f"Tool '{tool.name}' finished, success={result.success}")
        return result

    async def _ask(self, tool: Tool, params: dict[str, Any], message: str) -> bool:
        if self.confirm is None:
            logger.warning(f"No confirmation handler; declining {tool.name}")
            return False
        return bool(await self.confirm(tool, params, message))
